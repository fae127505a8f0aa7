"""Bulk migrator for role ranks.

When a model's role table changes, ranks already stored in the database are
stale. ``RoleMigrator`` loads every record of the model, derives its rank
from the current table and saves it again.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import flag_modified

from rolerank.core.logging import LoggingContext, get_logger
from rolerank.infrastructure.persistence.event_listeners import SKIP_ROLE_VALIDATION
from rolerank.infrastructure.persistence.role_mixin import HasRole

logger = get_logger(__name__)


class RoleMigrator:
    """Re-derives and persists the rank of every record of a model."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the migrator.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def migrate(self, model: type[HasRole]) -> None:
        """Re-save every record of ``model`` in a single transaction.

        Ranks are derived here rather than left to the before-save hook, so
        the migration works on any session. Role validation is skipped for
        the migrated records only; anything else pending in the session is
        still validated. The whole record set is loaded into memory. On
        failure the transaction is rolled back and the error re-raised.

        Args:
            model: A declarative model class mixing in HasRole.
        """
        with LoggingContext(model=model.__name__):
            try:
                result = await self.session.execute(select(model))
                records = result.scalars().all()
                logger.info("Migrating role ranks", record_count=len(records))

                for record in records:
                    record.refresh_role_rank()
                    # Mark dirty so the row is written even if nothing changed
                    flag_modified(record, "_role")

                self.session.info[SKIP_ROLE_VALIDATION] = {id(r) for r in records}
                await self.session.commit()
            except Exception as e:
                await self.session.rollback()
                logger.error("Role rank migration failed", error=str(e))
                raise
            finally:
                self.session.info.pop(SKIP_ROLE_VALIDATION, None)

            logger.info("Role ranks migrated", record_count=len(records))

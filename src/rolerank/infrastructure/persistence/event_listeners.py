"""SQLAlchemy event listeners for role rank derivation and validation.

Two lifecycle points are used:

- ``before_flush`` on every Session validates the role of each new or dirty
  ``HasRole`` record. Errors are accumulated across the whole flush and
  raised together as ``RecordInvalidError``, so nothing is written.
- ``before_insert`` / ``before_update`` on every Mapper re-derive the rank
  right before the row is written. This is what picks up a redefined role
  table when records are re-saved.
"""

from typing import Any

from sqlalchemy import event
from sqlalchemy.orm import Mapper, Session

from rolerank.core.logging import get_logger
from rolerank.domain.exceptions import RecordInvalidError
from rolerank.domain.services.role_validator import RoleValidationError
from rolerank.infrastructure.persistence.role_mixin import HasRole

logger = get_logger(__name__)

# Session.info key holding the ids of records whose validation the flush skips
SKIP_ROLE_VALIDATION = "rolerank.skip_role_validation"


def register_role_listeners() -> None:
    """Register the global role listeners.

    Safe to call more than once; listeners are only added the first time.
    """
    added = 0
    for target, identifier, fn in _role_listeners():
        if not event.contains(target, identifier, fn):
            event.listen(target, identifier, fn)
            added += 1

    if added:
        logger.debug("Registered role rank listeners", count=added)


def _role_listeners() -> list[tuple[Any, str, Any]]:
    return [
        (Mapper, "before_insert", derive_role_rank),
        (Mapper, "before_update", derive_role_rank),
        (Session, "before_flush", validate_roles),
    ]


def derive_role_rank(mapper: Mapper, connection: Any, target: Any) -> None:
    """Before-save hook: store the rank derived from the current role."""
    if isinstance(target, HasRole):
        target.refresh_role_rank()


def validate_roles(session: Session, flush_context: Any, instances: Any) -> None:
    """Refuse the flush if any pending record has an unknown role.

    Raises:
        RecordInvalidError: If one or more records failed validation.
    """
    skipped = session.info.get(SKIP_ROLE_VALIDATION, ())

    errors: list[RoleValidationError] = []
    for record in (*session.new, *session.dirty):
        if isinstance(record, HasRole) and id(record) not in skipped:
            errors.extend(record.validate_role())

    if errors:
        logger.warning(
            "Flush refused, role validation failed",
            error_count=len(errors),
            errors=[e.message for e in errors],
        )
        raise RecordInvalidError(errors)

"""Unit tests for RoleMigrator."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from rolerank.domain.entities.role_table import RoleTable
from rolerank.domain.exceptions import RecordInvalidError
from rolerank.infrastructure.persistence.event_listeners import SKIP_ROLE_VALIDATION
from rolerank.infrastructure.persistence.models import UserModel
from rolerank.infrastructure.persistence.role_migrator import RoleMigrator

EXPANDED_TABLE = RoleTable.build("staff", "admin", "payment_admin", "super_admin")


async def _seed_users(session: AsyncSession) -> None:
    for email, role in [
        ("admin1@example.com", "admin"),
        ("admin2@example.com", "admin"),
        ("super@example.com", "super_admin"),
        ("nobody@example.com", None),
    ]:
        user = UserModel(email=email)
        user.role = role
        session.add(user)
    await session.commit()


async def _stored_ranks(session: AsyncSession) -> dict[str, int]:
    result = await session.execute(select(UserModel.email, UserModel.role_rank))
    return {email: rank for email, rank in result.all()}


@pytest.mark.asyncio
async def test_migrate_rederives_ranks_after_table_change(db_session, monkeypatch):
    """Test that stored ranks follow a redefined role table."""
    await _seed_users(db_session)
    assert await _stored_ranks(db_session) == {
        "admin1@example.com": 1,
        "admin2@example.com": 1,
        "super@example.com": 2,
        "nobody@example.com": 0,
    }

    monkeypatch.setattr(UserModel, "__role_table__", EXPANDED_TABLE)

    # Ranks stay stale until the records are saved again
    assert (await _stored_ranks(db_session))["admin1@example.com"] == 1

    await RoleMigrator(db_session).migrate(UserModel)

    assert await _stored_ranks(db_session) == {
        "admin1@example.com": 2,
        "admin2@example.com": 2,
        "super@example.com": 4,
        "nobody@example.com": 0,
    }
    assert SKIP_ROLE_VALIDATION not in db_session.info


@pytest.mark.asyncio
async def test_migrate_skips_validation(db_session, monkeypatch):
    """Test that records whose role left the table are still migrated."""
    await _seed_users(db_session)

    monkeypatch.setattr(UserModel, "__role_table__", RoleTable.build("super_admin"))
    await RoleMigrator(db_session).migrate(UserModel)

    ranks = await _stored_ranks(db_session)
    assert ranks["admin1@example.com"] == 0
    assert ranks["super@example.com"] == 1


@pytest.mark.asyncio
async def test_migrate_is_idempotent(db_session):
    """Test that migrating an unchanged table keeps every rank."""
    await _seed_users(db_session)
    before = await _stored_ranks(db_session)

    await RoleMigrator(db_session).migrate(UserModel)
    await RoleMigrator(db_session).migrate(UserModel)

    assert await _stored_ranks(db_session) == before


@pytest.mark.asyncio
async def test_migrate_empty_table(db_session):
    """Test that migrating a model with no records succeeds."""
    await RoleMigrator(db_session).migrate(UserModel)

    assert await _stored_ranks(db_session) == {}


@pytest.mark.asyncio
async def test_migrate_rolls_back_on_failure():
    """Test that a failed commit is rolled back and re-raised."""
    user = UserModel(email="a@example.com")
    user.role = "admin"

    mock_session = AsyncMock(spec=AsyncSession)
    mock_session.info = {}
    mock_result = MagicMock()
    mock_result.scalars.return_value.all.return_value = [user]
    mock_session.execute.return_value = mock_result
    mock_session.commit.side_effect = RuntimeError("disk full")

    with pytest.raises(RuntimeError, match="disk full"):
        await RoleMigrator(mock_session).migrate(UserModel)

    mock_session.rollback.assert_awaited_once()
    assert SKIP_ROLE_VALIDATION not in mock_session.info


@pytest.mark.asyncio
async def test_migrate_without_registered_listeners(
    db_session, without_role_listeners, monkeypatch
):
    """Test that a plain session migrates ranks with no listeners attached."""
    await _seed_users(db_session)
    monkeypatch.setattr(UserModel, "__role_table__", EXPANDED_TABLE)

    session_maker = async_sessionmaker(db_session.bind, expire_on_commit=False)
    async with session_maker() as session:
        await RoleMigrator(session).migrate(UserModel)

    assert await _stored_ranks(db_session) == {
        "admin1@example.com": 2,
        "admin2@example.com": 2,
        "super@example.com": 4,
        "nobody@example.com": 0,
    }


@pytest.mark.asyncio
async def test_migrate_still_validates_other_pending_records(db_session):
    """Test that unrelated pending changes are not saved unvalidated."""
    await _seed_users(db_session)
    before = await _stored_ranks(db_session)
    db_session.sync_session.autoflush = False

    intruder = UserModel(email="owner@example.com")
    intruder.role = "owner"
    db_session.add(intruder)

    with pytest.raises(RecordInvalidError):
        await RoleMigrator(db_session).migrate(UserModel)

    assert SKIP_ROLE_VALIDATION not in db_session.info
    db_session.expunge_all()
    assert await _stored_ranks(db_session) == before

"""Pytest configuration for unit tests."""

from typing import AsyncGenerator, Generator

import pytest
import pytest_asyncio
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import Mapper, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from rolerank.infrastructure.persistence.database import Base
from rolerank.infrastructure.persistence.event_listeners import (
    derive_role_rank,
    register_role_listeners,
    validate_roles,
)
from rolerank.infrastructure.persistence.models import UserModel  # noqa: F401


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session.

    Uses an in-memory SQLite database for testing.
    """
    register_role_listeners()

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session_maker = sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session_maker() as session:
        yield session
        await session.rollback()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def without_role_listeners() -> Generator[None, None, None]:
    """Remove the global role listeners for one test, then restore them.

    Request it after ``db_session``, which registers them on setup.
    """
    listeners = [
        (Mapper, "before_insert", derive_role_rank),
        (Mapper, "before_update", derive_role_rank),
        (Session, "before_flush", validate_roles),
    ]
    for target, identifier, fn in listeners:
        if event.contains(target, identifier, fn):
            event.remove(target, identifier, fn)

    yield

    register_role_listeners()

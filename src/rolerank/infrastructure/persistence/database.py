"""Database abstraction layer using SQLAlchemy 2.0 async.

This module provides the declarative base, engine configuration and session
management. SQLite (aiosqlite) is the bundled driver; any other async
SQLAlchemy driver works once it is installed alongside.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from rolerank.core.config import get_settings
from rolerank.core.logging import get_logger
from rolerank.infrastructure.persistence.event_listeners import register_role_listeners

logger = get_logger(__name__)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models.

    All models should inherit from this class to get proper ORM mapping
    and metadata management.
    """

    pass


class DatabaseManager:
    """Database connection and session manager.

    This class manages the async database engine and session factory.
    Creating a manager also registers the role listeners, so any session
    it hands out derives and validates role ranks on flush.
    """

    def __init__(self, database_url: str | None = None) -> None:
        """Initialize the database manager.

        Args:
            database_url: Optional URL overriding the configured one.
        """
        self.settings = get_settings()
        self.database_url = database_url or self.settings.database_url
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None
        register_role_listeners()

    @property
    def engine(self) -> AsyncEngine:
        """Get or create the database engine.

        Returns:
            AsyncEngine: SQLAlchemy async engine instance.
        """
        if self._engine is None:
            self._engine = create_async_engine(
                self.database_url,
                echo=self.settings.db_echo,
                connect_args={
                    "check_same_thread": False,
                }
                if self.database_url.startswith("sqlite")
                else {},
            )
            logger.info(
                "Database engine created",
                database_url=self._engine.url.render_as_string(hide_password=True),
            )
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        """Get or create the session factory.

        Returns:
            async_sessionmaker: SQLAlchemy async session factory.
        """
        if self._session_factory is None:
            self._session_factory = async_sessionmaker(
                bind=self.engine,
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=False,
            )
            logger.debug("Database session factory created")
        return self._session_factory

    async def disconnect(self) -> None:
        """Close the database engine and all connections."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None
            logger.info("Database engine disposed")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide a transactional scope for database operations.

        Yields:
            AsyncSession: SQLAlchemy async session.

        Example:
            async with db.session() as session:
                result = await session.execute(select(UserModel))
                users = result.scalars().all()
        """
        async with self.session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()


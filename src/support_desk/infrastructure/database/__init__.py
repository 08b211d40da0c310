"""
Database Infrastructure
=======================

Engine and session handling for the ``postgres`` storage backend.

Uses SQLAlchemy 2.0 with asyncpg. One ``Database`` is created at startup;
each request opens its own session through ``Database.session()``.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from support_desk.config import Settings, get_settings
from support_desk.core import ConfigurationException, RepositoryException


class Base(DeclarativeBase):
    """Declarative base for the entity store tables."""


def normalize_database_url(url: str) -> str:
    """Point plain PostgreSQL URLs at the asyncpg driver."""
    if url.startswith("postgres://"):
        url = "postgresql://" + url[len("postgres://"):]
    if url.startswith("postgresql://"):
        url = "postgresql+asyncpg://" + url[len("postgresql://"):]
    # asyncpg expects ssl= rather than libpq's sslmode=
    return url.replace("sslmode=", "ssl=")


class Database:
    """Async engine plus the session factory bound to it."""

    def __init__(self, settings: Settings):
        self.url = normalize_database_url(settings.database_url)
        self.engine = create_async_engine(
            self.url,
            echo=settings.debug,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=True,
        )
        self._sessions = async_sessionmaker(self.engine, expire_on_commit=False, autoflush=False)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Session committed when the block succeeds, rolled back otherwise.

        Raises:
            RepositoryException: The commit itself failed
        """
        async with self._sessions() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise
            try:
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                raise RepositoryException(f"Commit failed: {e}") from e

    async def create_tables(self) -> None:
        """Create missing tables; schema migrations are out of scope."""
        from support_desk.infrastructure.store import models  # noqa: F401 - registers tables

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()


_database: Optional[Database] = None


def init_database(settings: Optional[Settings] = None) -> Database:
    """Create the process-wide database; called during startup."""
    global _database
    _database = Database(settings or get_settings())
    return _database


def get_database() -> Database:
    """
    The database created by ``init_database``.

    Raises:
        ConfigurationException: Startup has not initialized it
    """
    if _database is None:
        raise ConfigurationException("Database not initialized. Call init_database() first.")
    return _database


async def close_database() -> None:
    """Dispose of pooled connections; called during shutdown."""
    global _database
    if _database is not None:
        await _database.dispose()
        _database = None

"""Async engine and session factory for the relational store."""

import logging

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from src.jobboard.repositories.records import Base

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite ignores FOREIGN KEY clauses (and ON DELETE CASCADE) unless asked
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_engine(database_url: str, echo: bool = False, **kwargs) -> AsyncEngine:
    """Create the async engine for ``database_url``.

    SQLite connections get foreign key enforcement switched on so that
    deletes cascade from users to jobs and applications.

    Args:
        database_url: Async SQLAlchemy URL (e.g. ``sqlite+aiosqlite:///./jobboard.db``)
        echo: Log every SQL statement
        **kwargs: Extra keyword arguments for ``create_async_engine``

    Returns:
        Configured AsyncEngine
    """
    engine = create_async_engine(database_url, echo=echo, **kwargs)
    if engine.dialect.name == "sqlite":
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create the session factory bound to ``engine``."""
    return async_sessionmaker(engine, expire_on_commit=False)


async def create_tables(engine: AsyncEngine) -> None:
    """Create any missing tables."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database schema ready")

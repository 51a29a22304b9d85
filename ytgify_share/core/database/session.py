"""
Global database session and engine management.

This module manages the global AsyncEngine and async_sessionmaker instances
that are used throughout the application for database access.
"""

from __future__ import annotations

from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ytgify_share.core.logging_config import get_logger
from ytgify_share.server.core.config import settings

from .utils import create_all, create_engine, create_sessionmaker

logger = get_logger(__name__)

# Create global engine and session factory
engine = create_engine(settings.database_url)
async_session_maker = create_sessionmaker(engine)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency generator for database sessions.

    Yields:
        AsyncSession: An asynchronous SQLAlchemy session.
    """
    async with async_session_maker() as session:
        yield session


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Dependency returning the session factory used by background tasks."""
    return async_session_maker


async def init_db() -> None:
    """
    Initialize the database.

    SQLite databases (local development) get their tables created from the
    entity metadata. PostgreSQL schemas are owned by the Alembic migrations,
    which run before the application starts.
    """
    if engine.url.get_backend_name() == "sqlite":
        await create_all(engine)
        logger.info("Created SQLite tables from entity metadata")
    else:
        logger.info("Skipping table creation; schema is managed by Alembic")

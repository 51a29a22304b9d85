"""Fixtures for repository tests against a throwaway SQLite database."""

from __future__ import annotations

from pathlib import Path
from typing import AsyncGenerator

import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession

from ytgify_share.core.database import create_all, create_engine, create_sessionmaker
from ytgify_share.core.database.entities.users import User


@pytest_asyncio.fixture
async def db_session(tmp_path: Path) -> AsyncGenerator[AsyncSession, None]:
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'repositories.db'}")
    await create_all(engine)
    async with create_sessionmaker(engine)() as session:
        yield session
    await engine.dispose()


@pytest_asyncio.fixture
async def user(db_session: AsyncSession) -> User:
    user = User(email="Alice@Example.com", username="Alice", password_hash="x")
    db_session.add(user)
    await db_session.commit()
    return user

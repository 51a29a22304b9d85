"""
User repository.

Data access for user accounts: lookups by email and username (both
case-insensitive), availability checks and engagement counter recomputation.
"""

from __future__ import annotations

import uuid
from typing import Optional

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.gifs import Gif
from ..entities.users import User
from .base import AsyncBaseRepository


class UserRepository(AsyncBaseRepository[User]):
    """Repository for user accounts."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, User)

    async def get_by_email(self, email: str) -> Optional[User]:
        stmt = select(User).where(func.lower(User.email) == email.strip().lower())
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def get_by_username(self, username: str) -> Optional[User]:
        stmt = select(User).where(func.lower(User.username) == username.strip().lower())
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def email_taken(self, email: str, exclude_id: Optional[uuid.UUID] = None) -> bool:
        user = await self.get_by_email(email)
        return user is not None and user.id != exclude_id

    async def username_taken(self, username: str, exclude_id: Optional[uuid.UUID] = None) -> bool:
        user = await self.get_by_username(username)
        return user is not None and user.id != exclude_id

    async def active_creator_ids(self, since) -> list[uuid.UUID]:
        """Ids of users who posted a GIF after ``since``."""
        stmt = select(Gif.user_id).where(Gif.created_at >= since).distinct()
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def recompute_engagement(self, user: User) -> User:
        """Recount ``gifs_count`` and ``total_likes_received`` from live GIFs."""
        stmt = select(func.count(Gif.id), func.coalesce(func.sum(Gif.like_count), 0)).where(
            (Gif.user_id == user.id) & (Gif.deleted_at.is_(None))
        )
        result = await self.session.execute(stmt)
        gifs_count, likes = result.one()
        user.gifs_count = int(gifs_count)
        user.total_likes_received = int(likes)
        self.session.add(user)
        return user

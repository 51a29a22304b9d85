"""Follow repository."""

from __future__ import annotations

import uuid
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.follows import Follow
from ..entities.users import User
from .base import AsyncBaseRepository


class FollowRepository(AsyncBaseRepository[Follow]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Follow)

    async def find(self, follower_id: uuid.UUID, following_id: uuid.UUID) -> Optional[Follow]:
        stmt = select(Follow).where((Follow.follower_id == follower_id) & (Follow.following_id == following_id))
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def following_ids(self, user_id: uuid.UUID) -> List[uuid.UUID]:
        result = await self.session.execute(select(Follow.following_id).where(Follow.follower_id == user_id))
        return list(result.scalars().all())

    def followers_of(self, user_id: uuid.UUID):
        return (
            select(User)
            .join(Follow, Follow.follower_id == User.id)
            .where(Follow.following_id == user_id)
            .order_by(Follow.created_at.desc())
        )

    def followed_by(self, user_id: uuid.UUID):
        return (
            select(User)
            .join(Follow, Follow.following_id == User.id)
            .where(Follow.follower_id == user_id)
            .order_by(Follow.created_at.desc())
        )

    async def involving(self, user_id: uuid.UUID) -> List[Follow]:
        stmt = select(Follow).where((Follow.follower_id == user_id) | (Follow.following_id == user_id))
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

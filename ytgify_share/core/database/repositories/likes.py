"""Like repository."""

from __future__ import annotations

import uuid
from typing import Iterable, List, Optional, Set

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.likes import Like
from .base import AsyncBaseRepository


class LikeRepository(AsyncBaseRepository[Like]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Like)

    async def find(self, user_id: uuid.UUID, gif_id: uuid.UUID) -> Optional[Like]:
        stmt = select(Like).where((Like.user_id == user_id) & (Like.gif_id == gif_id))
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def liked_gif_ids(self, user_id: uuid.UUID, gif_ids: Iterable[uuid.UUID]) -> Set[uuid.UUID]:
        """Subset of ``gif_ids`` the user has liked."""
        ids = list(gif_ids)
        if not ids:
            return set()
        stmt = select(Like.gif_id).where((Like.user_id == user_id) & (Like.gif_id.in_(ids)))
        result = await self.session.execute(stmt)
        return set(result.scalars().all())

    async def by_user(self, user_id: uuid.UUID) -> List[Like]:
        result = await self.session.execute(select(Like).where(Like.user_id == user_id))
        return list(result.scalars().all())

    async def for_gifs(self, gif_ids: Iterable[uuid.UUID]) -> List[Like]:
        ids = list(gif_ids)
        if not ids:
            return []
        result = await self.session.execute(select(Like).where(Like.gif_id.in_(ids)))
        return list(result.scalars().all())

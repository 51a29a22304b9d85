"""Collection repository."""

from __future__ import annotations

import uuid
from typing import List, Optional

from sqlalchemy import delete, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.collections import Collection, CollectionGif
from ..entities.gifs import Gif, Privacy
from .base import AsyncBaseRepository


class CollectionRepository(AsyncBaseRepository[Collection]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Collection)

    def for_user(self, user_id: uuid.UUID, public_only: bool = False):
        stmt = select(Collection).where(Collection.user_id == user_id)
        if public_only:
            stmt = stmt.where(Collection.is_public.is_(True))
        return stmt.order_by(Collection.created_at.desc())

    async def get_by_name(self, user_id: uuid.UUID, name: str) -> Optional[Collection]:
        stmt = select(Collection).where(
            (Collection.user_id == user_id) & (func.lower(Collection.name) == name.strip().lower())
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def find_link(self, collection_id: uuid.UUID, gif_id: uuid.UUID) -> Optional[CollectionGif]:
        stmt = select(CollectionGif).where(
            (CollectionGif.collection_id == collection_id) & (CollectionGif.gif_id == gif_id)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def links(self, collection_id: uuid.UUID) -> List[CollectionGif]:
        stmt = (
            select(CollectionGif)
            .where(CollectionGif.collection_id == collection_id)
            .order_by(CollectionGif.position.asc(), CollectionGif.created_at.asc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def links_for_gif(self, gif_id: uuid.UUID) -> List[CollectionGif]:
        result = await self.session.execute(select(CollectionGif).where(CollectionGif.gif_id == gif_id))
        return list(result.scalars().all())

    async def next_position(self, collection_id: uuid.UUID) -> int:
        stmt = select(func.coalesce(func.max(CollectionGif.position), -1)).where(
            CollectionGif.collection_id == collection_id
        )
        result = await self.session.execute(stmt)
        return int(result.scalar_one()) + 1

    def gifs_in(self, collection_id: uuid.UUID, viewer_id: Optional[uuid.UUID] = None):
        """Live GIFs of a collection ordered by position.

        Private GIFs are only included for their owner ``viewer_id``.
        """
        visible = Gif.privacy != Privacy.PRIVATE.value
        if viewer_id is not None:
            visible = visible | (Gif.user_id == viewer_id)
        return (
            select(Gif)
            .join(CollectionGif, CollectionGif.gif_id == Gif.id)
            .where((CollectionGif.collection_id == collection_id) & (Gif.deleted_at.is_(None)) & visible)
            .order_by(CollectionGif.position.asc(), CollectionGif.created_at.asc())
        )

    async def links_for_gifs(self, gif_ids: List[uuid.UUID]) -> List[CollectionGif]:
        if not gif_ids:
            return []
        result = await self.session.execute(select(CollectionGif).where(CollectionGif.gif_id.in_(gif_ids)))
        return list(result.scalars().all())

    async def delete_links(self, link_ids: List[uuid.UUID]) -> None:
        if link_ids:
            await self.session.execute(delete(CollectionGif).where(CollectionGif.id.in_(link_ids)))

"""
Hashtag repository.

Lookups by normalized name and slug, popularity/trending listings, prefix
search and the GIF link table.
"""

from __future__ import annotations

import uuid
from collections import defaultdict
from typing import Dict, Iterable, List, Optional

from sqlalchemy import delete, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.hashtags import GifHashtag, Hashtag
from .base import AsyncBaseRepository


class HashtagRepository(AsyncBaseRepository[Hashtag]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Hashtag)

    async def get_by_name(self, name: str) -> Optional[Hashtag]:
        result = await self.session.execute(select(Hashtag).where(Hashtag.name == name))
        return result.scalars().first()

    async def get_by_slug(self, slug: str) -> Optional[Hashtag]:
        result = await self.session.execute(select(Hashtag).where(func.lower(Hashtag.slug) == slug.lower()))
        return result.scalars().first()

    def popular(self):
        return select(Hashtag).order_by(Hashtag.usage_count.desc(), Hashtag.name.asc())

    def trending(self):
        return self.popular().where(Hashtag.usage_count > 0)

    def alphabetical(self):
        return select(Hashtag).order_by(Hashtag.name.asc())

    async def search(self, prefix: str, limit: int) -> List[Hashtag]:
        escaped = prefix.lower().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        stmt = (
            select(Hashtag)
            .where(Hashtag.name.like(f"{escaped}%", escape="\\"))
            .order_by(Hashtag.usage_count.desc(), Hashtag.name.asc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def links_for_gif(self, gif_id: uuid.UUID) -> List[GifHashtag]:
        result = await self.session.execute(select(GifHashtag).where(GifHashtag.gif_id == gif_id))
        return list(result.scalars().all())

    async def link(self, gif_id: uuid.UUID, hashtag_id: uuid.UUID) -> GifHashtag:
        link = GifHashtag(gif_id=gif_id, hashtag_id=hashtag_id)
        self.session.add(link)
        await self.session.flush()
        return link

    async def names_for_gifs(self, gif_ids: Iterable[uuid.UUID]) -> Dict[uuid.UUID, List[str]]:
        """Hashtag names of each GIF, alphabetically."""
        ids = list(gif_ids)
        if not ids:
            return {}
        stmt = (
            select(GifHashtag.gif_id, Hashtag.name)
            .join(Hashtag, Hashtag.id == GifHashtag.hashtag_id)
            .where(GifHashtag.gif_id.in_(ids))
            .order_by(Hashtag.name.asc())
        )
        result = await self.session.execute(stmt)
        names: Dict[uuid.UUID, List[str]] = defaultdict(list)
        for gif_id, name in result.all():
            names[gif_id].append(name)
        return names

    async def delete_links_for_gifs(self, gif_ids: List[uuid.UUID]) -> None:
        if gif_ids:
            await self.session.execute(delete(GifHashtag).where(GifHashtag.gif_id.in_(gif_ids)))

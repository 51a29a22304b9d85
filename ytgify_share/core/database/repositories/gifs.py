"""
GIF repository.

Query building for GIF listings. Every listing starts from ``live()``, which
excludes soft-deleted rows, and public listings add ``Gif.privacy == public``.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Iterable, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.gifs import Gif, Privacy
from ..entities.hashtags import GifHashtag
from .base import AsyncBaseRepository


class GifRepository(AsyncBaseRepository[Gif]):
    """Repository for GIFs."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Gif)

    @staticmethod
    def live():
        return select(Gif).where(Gif.deleted_at.is_(None))

    @classmethod
    def public(cls):
        return cls.live().where(Gif.privacy == Privacy.PUBLIC.value)

    async def get_live(self, gif_id: uuid.UUID) -> Optional[Gif]:
        gif = await self.get_by_id(gif_id)
        if gif is None or gif.deleted_at is not None:
            return None
        return gif

    def public_listing(self, user_id: Optional[uuid.UUID] = None, kind: Optional[str] = None):
        """Public GIFs newest first, optionally filtered by owner and original/remix."""
        stmt = self.public()
        if user_id is not None:
            stmt = stmt.where(Gif.user_id == user_id)
        if kind == "original":
            stmt = stmt.where(Gif.is_remix.is_(False))
        elif kind == "remix":
            stmt = stmt.where(Gif.is_remix.is_(True))
        return stmt.order_by(Gif.created_at.desc())

    def remixes_of(self, gif_id: uuid.UUID):
        return self.public().where(Gif.parent_gif_id == gif_id).order_by(Gif.created_at.desc())

    def trending(self, since: datetime, exclude_user_ids: Iterable[uuid.UUID] = ()):
        """Public GIFs created after ``since`` ordered by likes then views."""
        stmt = self.public().where(Gif.created_at > since)
        excluded = list(exclude_user_ids)
        if excluded:
            stmt = stmt.where(Gif.user_id.not_in(excluded))
        return stmt.order_by(Gif.like_count.desc(), Gif.view_count.desc(), Gif.created_at.desc())

    def popular(self):
        return self.public().order_by(Gif.like_count.desc(), Gif.view_count.desc(), Gif.created_at.desc())

    def recent(self):
        return self.public().order_by(Gif.created_at.desc())

    def by_users(self, user_ids: Iterable[uuid.UUID]):
        return self.public().where(Gif.user_id.in_(list(user_ids))).order_by(Gif.created_at.desc())

    def by_hashtag(self, hashtag_id: uuid.UUID):
        return (
            self.public()
            .join(GifHashtag, GifHashtag.gif_id == Gif.id)
            .where(GifHashtag.hashtag_id == hashtag_id)
            .order_by(Gif.created_at.desc())
        )

    async def ordered_by_ids(self, gif_ids: List[uuid.UUID]) -> List[Gif]:
        """Load live public GIFs keeping the order of ``gif_ids``."""
        if not gif_ids:
            return []
        stmt = self.public().where(Gif.id.in_(gif_ids))
        result = await self.session.execute(stmt)
        found = {gif.id: gif for gif in result.scalars().all()}
        return [found[i] for i in gif_ids if i in found]

    async def trending_candidates(self, since: datetime) -> List[Gif]:
        stmt = self.public().where(Gif.created_at >= since)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def owned_by(self, user_id: uuid.UUID, include_deleted: bool = True) -> List[Gif]:
        stmt = select(Gif).where(Gif.user_id == user_id)
        if not include_deleted:
            stmt = stmt.where(Gif.deleted_at.is_(None))
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def children_of(self, gif_ids: List[uuid.UUID]) -> List[Gif]:
        """Every GIF (deleted ones included) remixed from one of ``gif_ids``."""
        if not gif_ids:
            return []
        result = await self.session.execute(select(Gif).where(Gif.parent_gif_id.in_(gif_ids)))
        return list(result.scalars().all())

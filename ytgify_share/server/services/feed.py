"""
Feed generation.

Trending and popular pages are cached for 15 minutes as ordered id lists;
GIF rows are loaded fresh so deleted or privatized GIFs drop out immediately.
"""

from __future__ import annotations

import random
import uuid
from datetime import timedelta
from typing import List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from ytgify_share.core.cache import POPULAR_GIFS_KEY, TRENDING_GIF_IDS_KEY, TRENDING_GIFS_KEY, TTLCache
from ytgify_share.core.database.base import utc_now
from ytgify_share.core.database.entities.gifs import Gif
from ytgify_share.core.database.entities.users import User
from ytgify_share.core.database.repositories.follows import FollowRepository
from ytgify_share.core.database.repositories.gifs import GifRepository
from ytgify_share.server.services.pagination import PageParams

TRENDING_WINDOW = timedelta(days=7)
FEED_CACHE_TTL = 15 * 60


class FeedService:
    def __init__(self, session: AsyncSession, cache: TTLCache, rng: Optional[random.Random] = None):
        self.session = session
        self.cache = cache
        self.gifs = GifRepository(session)
        self.follows = FollowRepository(session)
        self.rng = rng or random.Random()

    async def _ids(self, stmt, limit: int, offset: int) -> List[uuid.UUID]:
        return [g.id for g in await self.gifs.paginate(stmt, limit, offset)]

    async def personalized(self, user: User, page: PageParams) -> List[Gif]:
        """
        Half recent GIFs of followed users, half trending GIFs of everyone
        else, shuffled. Users who follow nobody get the trending feed.
        """
        following_ids = await self.follows.following_ids(user.id)
        if not following_ids:
            return await self.trending(page)

        half = max(page.per_page // 2, 1)
        followed = await self.gifs.paginate(self.gifs.by_users(following_ids), half, 0)
        others = await self.gifs.paginate(
            self.gifs.trending(utc_now() - TRENDING_WINDOW, exclude_user_ids=[*following_ids, user.id]), half, 0
        )
        mixed = followed + others
        self.rng.shuffle(mixed)
        return mixed[: page.per_page]

    async def trending(self, page: PageParams) -> List[Gif]:
        """Public GIFs of the last week by likes then views.

        Uses the ranking computed by the trending job when one is cached.
        """
        ranked: Optional[List[uuid.UUID]] = await self.cache.get(TRENDING_GIF_IDS_KEY)
        if ranked:
            return await self.gifs.ordered_by_ids(ranked[page.offset : page.offset + page.per_page])

        key = f"{TRENDING_GIFS_KEY}/page_{page.page}/per_{page.per_page}"
        ids = await self.cache.fetch(
            key,
            lambda: self._ids(self.gifs.trending(utc_now() - TRENDING_WINDOW), page.per_page, page.offset),
            ttl=FEED_CACHE_TTL,
        )
        return await self.gifs.ordered_by_ids(ids)

    async def popular(self, page: PageParams) -> List[Gif]:
        key = f"{POPULAR_GIFS_KEY}/page_{page.page}/per_{page.per_page}"
        ids = await self.cache.fetch(
            key, lambda: self._ids(self.gifs.popular(), page.per_page, page.offset), ttl=FEED_CACHE_TTL
        )
        return await self.gifs.ordered_by_ids(ids)

    async def public(self, page: PageParams) -> Tuple[List[Gif], int]:
        """Trending order for anonymous visitors, totalled over all public GIFs."""
        stmt = self.gifs.trending(utc_now() - TRENDING_WINDOW)
        return await self.gifs.paginate(stmt, page.per_page, page.offset), await self.gifs.count(self.gifs.public())

    async def recent(self, page: PageParams) -> Tuple[List[Gif], int]:
        return (
            await self.gifs.paginate(self.gifs.recent(), page.per_page, page.offset),
            await self.gifs.count(self.gifs.public()),
        )

    async def following(self, user: User, page: PageParams) -> Tuple[List[Gif], int]:
        following_ids = await self.follows.following_ids(user.id)
        if not following_ids:
            return [], 0
        stmt = self.gifs.by_users(following_ids)
        return await self.gifs.paginate(stmt, page.per_page, page.offset), await self.gifs.count(stmt)

"""
Hashtag service.

Normalizes tag names, keeps GIF/hashtag links and ``usage_count`` in step,
and serves the popular, trending and search listings (cached where the
ranking is expensive).
"""

from __future__ import annotations

import re
import unicodedata
import uuid
from typing import Iterable, List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from ytgify_share.core.cache import POPULAR_HASHTAGS_KEY, TRENDING_HASHTAGS_KEY, TTLCache, invalidate_hashtag_caches
from ytgify_share.core.database.entities.gifs import Gif
from ytgify_share.core.database.entities.hashtags import Hashtag
from ytgify_share.core.database.repositories.gifs import GifRepository
from ytgify_share.core.database.repositories.hashtags import HashtagRepository
from ytgify_share.core.errors import NotFoundError
from ytgify_share.core.logging_config import get_logger
from ytgify_share.core.models.io.hashtags import HashtagRead
from ytgify_share.server.services.pagination import PageParams

logger = get_logger(__name__)

HASHTAG_PATTERN = re.compile(r"#(\w+)")
MAX_SEARCH_LIMIT = 20
HASHTAG_CACHE_TTL = 15 * 60


def normalize_name(name: str) -> str:
    """Strip whitespace, lowercase and drop one leading ``#``."""
    normalized = str(name).strip().lower()
    if normalized.startswith("#"):
        normalized = normalized[1:]
    return normalized.strip()


def slugify(name: str) -> str:
    """URL-safe slug: ASCII letters, digits, ``-`` and ``_``."""
    ascii_name = unicodedata.normalize("NFKD", name).encode("ascii", "ignore").decode("ascii").lower()
    slug = re.sub(r"[^a-z0-9\-_]+", "-", ascii_name)
    slug = re.sub(r"-{2,}", "-", slug)
    return slug.strip("-")


def parse_hashtags(text: Optional[str]) -> List[str]:
    """Unique normalized tag names found in ``text`` as ``#word``."""
    if not text:
        return []
    return unique_names(HASHTAG_PATTERN.findall(text))


def unique_names(names: Iterable[str]) -> List[str]:
    seen: List[str] = []
    for raw in names:
        name = normalize_name(raw)
        if name and name not in seen:
            seen.append(name)
    return seen


def split_tags(value: Optional[str]) -> List[str]:
    """Split a comma separated ``tags`` form value."""
    if not value:
        return []
    return [part for part in (p.strip() for p in value.split(",")) if part]


class HashtagService:
    """Hashtag bookkeeping and listings."""

    def __init__(self, session: AsyncSession, cache: TTLCache):
        self.session = session
        self.cache = cache
        self.hashtags = HashtagRepository(session)

    async def find_or_create(self, name: str) -> Optional[Hashtag]:
        normalized = normalize_name(name)
        if not normalized:
            return None
        slug = slugify(normalized)
        if not slug:
            logger.debug(f"Ignoring hashtag without a usable slug: {name!r}")
            return None
        hashtag = await self.hashtags.get_by_slug(slug)
        if hashtag is None:
            hashtag = await self.hashtags.create(Hashtag(name=normalized, slug=slug))
        return hashtag

    async def set_gif_hashtags(self, gif: Gif, names: Iterable[str]) -> List[str]:
        """
        Replace the hashtags of ``gif`` with ``names``.

        Adjusts ``usage_count`` for added and removed links. Hashtag caches are
        cleared when anything changed.

        Returns:
            The normalized names now linked to the GIF
        """
        wanted: List[Hashtag] = []
        for name in unique_names(names):
            hashtag = await self.find_or_create(name)
            if hashtag is not None and hashtag.id not in {h.id for h in wanted}:
                wanted.append(hashtag)

        links = await self.hashtags.links_for_gif(gif.id)
        current_ids = {link.hashtag_id for link in links}
        wanted_ids = {h.id for h in wanted}

        changed = False
        for link in links:
            if link.hashtag_id not in wanted_ids:
                await self.hashtags.increment(link.hashtag_id, "usage_count", -1)
                await self.session.delete(link)
                changed = True
        for hashtag in wanted:
            if hashtag.id not in current_ids:
                await self.hashtags.link(gif.id, hashtag.id)
                await self.hashtags.increment(hashtag.id, "usage_count", 1)
                changed = True

        await self.session.flush()
        if changed:
            await invalidate_hashtag_caches(self.cache)
        return sorted(h.name for h in wanted)

    async def release_gif(self, gif: Gif) -> None:
        """Decrement usage of every hashtag linked to a GIF that is being removed."""
        links = await self.hashtags.links_for_gif(gif.id)
        for link in links:
            await self.hashtags.increment(link.hashtag_id, "usage_count", -1)
        if links:
            await invalidate_hashtag_caches(self.cache)

    async def delete_links(self, gif_id: uuid.UUID) -> None:
        for link in await self.hashtags.links_for_gif(gif_id):
            await self.session.delete(link)

    # ------------------------------------------------------------------
    # Listings
    # ------------------------------------------------------------------

    async def list_alphabetical(self, page: PageParams) -> Tuple[List[Hashtag], int]:
        stmt = self.hashtags.alphabetical()
        return await self.hashtags.paginate(stmt, page.per_page, page.offset), await self.hashtags.count(stmt)

    async def list_trending(self, page: PageParams) -> Tuple[List[HashtagRead], int]:
        key = f"{TRENDING_HASHTAGS_KEY}/page_{page.page}/per_{page.per_page}"

        async def load():
            stmt = self.hashtags.trending()
            rows = await self.hashtags.paginate(stmt, page.per_page, page.offset)
            return [HashtagRead.model_validate(h) for h in rows], await self.hashtags.count(stmt)

        return await self.cache.fetch(key, load, ttl=HASHTAG_CACHE_TTL)

    async def popular(self, limit: int) -> List[HashtagRead]:
        limit = min(max(limit, 1), 100)
        key = f"{POPULAR_HASHTAGS_KEY}/limit_{limit}"

        async def load():
            rows = await self.hashtags.paginate(self.hashtags.popular(), limit, 0)
            return [HashtagRead.model_validate(h) for h in rows]

        return await self.cache.fetch(key, load, ttl=HASHTAG_CACHE_TTL)

    async def search(self, query: Optional[str], limit: Optional[int]) -> Tuple[List[HashtagRead], str]:
        """Prefix search; an empty query returns the cached trending hashtags."""
        term = normalize_name(query or "")
        limit = min(max(limit or 10, 1), MAX_SEARCH_LIMIT)
        if not term:
            key = f"{TRENDING_HASHTAGS_KEY}/search_{limit}"

            async def load():
                rows = await self.hashtags.paginate(self.hashtags.trending(), limit, 0)
                return [HashtagRead.model_validate(h) for h in rows]

            return await self.cache.fetch(key, load, ttl=HASHTAG_CACHE_TTL), term
        rows = await self.hashtags.search(term, limit)
        return [HashtagRead.model_validate(h) for h in rows], term

    async def get_by_slug(self, slug: str) -> Hashtag:
        hashtag = await self.hashtags.get_by_slug(slug)
        if hashtag is None:
            hashtag = await self.hashtags.get_by_name(normalize_name(slug))
        if hashtag is None:
            raise NotFoundError(f"Couldn't find Hashtag '{slug}'")
        return hashtag

    async def gifs_for(self, hashtag: Hashtag, page: PageParams) -> Tuple[List[Gif], int]:
        """Public GIFs tagged with ``hashtag``, newest first."""
        gifs = GifRepository(self.session)
        stmt = gifs.by_hashtag(hashtag.id)
        return await gifs.paginate(stmt, page.per_page, page.offset), await gifs.count(stmt)

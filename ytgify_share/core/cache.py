"""In-process TTL cache for feed and hashtag rankings.

This module provides a small async key/value cache used for results that are
expensive to compute (trending feeds, popular hashtags). Entries expire after
their time-to-live and can be invalidated by key prefix when the underlying
data changes.
"""

import asyncio
import time
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple

# Cache keys
TRENDING_GIFS_KEY = "trending_gifs"
TRENDING_GIF_IDS_KEY = "trending_gif_ids"
POPULAR_GIFS_KEY = "popular_gifs"
TRENDING_HASHTAGS_KEY = "trending_hashtags"
POPULAR_HASHTAGS_KEY = "popular_hashtags"

DEFAULT_TTL = 15 * 60


class TTLCache:
    """Async cache with per-entry expiry.

    Attributes:
        default_ttl: Time-to-live applied when ``set`` is called without one
    """

    def __init__(self, default_ttl: float = DEFAULT_TTL, clock: Callable[[], float] = time.monotonic) -> None:
        self._entries: Dict[str, Tuple[float, Any]] = {}
        self._lock = asyncio.Lock()
        self._clock = clock
        self.default_ttl = default_ttl

    async def get(self, key: str) -> Optional[Any]:
        """Return the cached value or None when missing or expired."""
        async with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if expires_at <= self._clock():
                del self._entries[key]
                return None
            return value

    async def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        """Store ``value`` under ``key``, dropping every entry that has already expired."""
        async with self._lock:
            now = self._clock()
            expired = [k for k, (expires_at, _) in self._entries.items() if expires_at <= now]
            for k in expired:
                del self._entries[k]
            self._entries[key] = (now + (ttl if ttl is not None else self.default_ttl), value)

    async def fetch(self, key: str, loader: Callable[[], Awaitable[Any]], ttl: Optional[float] = None) -> Any:
        """Return the cached value, computing and storing it with ``loader`` on a miss.

        Args:
            key: Cache key
            loader: Coroutine function producing the value
            ttl: Optional time-to-live override in seconds
        """
        value = await self.get(key)
        if value is not None:
            return value
        value = await loader()
        await self.set(key, value, ttl)
        return value

    async def delete(self, key: str) -> None:
        async with self._lock:
            self._entries.pop(key, None)

    async def delete_matched(self, prefix: str) -> int:
        """Remove every entry whose key starts with ``prefix``.

        Returns:
            Number of removed entries
        """
        async with self._lock:
            keys = [k for k in self._entries if k.startswith(prefix)]
            for k in keys:
                del self._entries[k]
            return len(keys)

    async def clear(self) -> None:
        async with self._lock:
            self._entries.clear()

    def size(self) -> int:
        """Get the current number of entries, expired ones included."""
        return len(self._entries)


_cache = TTLCache()


def get_cache() -> TTLCache:
    """Dependency returning the process-wide cache."""
    return _cache


async def invalidate_gif_caches(cache: TTLCache) -> None:
    """Clear cached GIF rankings after a GIF is created, updated or deleted."""
    await cache.delete_matched(TRENDING_GIFS_KEY)
    await cache.delete_matched(POPULAR_GIFS_KEY)


async def invalidate_hashtag_caches(cache: TTLCache) -> None:
    await cache.delete_matched(TRENDING_HASHTAGS_KEY)
    await cache.delete_matched(POPULAR_HASHTAGS_KEY)

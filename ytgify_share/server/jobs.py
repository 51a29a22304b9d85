"""
Background jobs.

Per-upload jobs (``process_gif``, ``process_remix``) are queued with FastAPI
``BackgroundTasks`` after the upload response is sent. Periodic jobs run in
``JobScheduler``, which the application lifespan starts when
``YTGIFY_JOBS_ENABLED`` is set.

Every job opens its own session from the session factory. A failed periodic
run is logged and tried again on the next tick.
"""

from __future__ import annotations

import asyncio
import time
import uuid
from datetime import timedelta
from typing import Awaitable, Callable, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ytgify_share.core.cache import TRENDING_GIF_IDS_KEY, TTLCache
from ytgify_share.core.database.base import utc_now
from ytgify_share.core.database.repositories.gifs import GifRepository
from ytgify_share.core.database.repositories.jwt_denylist import JwtDenylistRepository
from ytgify_share.core.database.repositories.users import UserRepository
from ytgify_share.core.database.repositories.view_events import ViewEventRepository
from ytgify_share.core.gif_metadata import extract_metadata, make_thumbnail
from ytgify_share.core.logging_config import get_logger
from ytgify_share.core.monitoring import log_error, log_job
from ytgify_share.core.storage import LocalFileStorage
from ytgify_share.server.core.config import settings

logger = get_logger(__name__)

TRENDING_LOOKBACK = timedelta(days=30)
TRENDING_LIMIT = 100
TRENDING_TTL = 15 * 60
VIEW_EVENT_RETENTION = timedelta(days=30)
ENGAGEMENT_LOOKBACK = timedelta(days=90)

SessionFactory = async_sessionmaker[AsyncSession]


def trending_score(like_count: int, view_count: int, comment_count: int, age_seconds: float) -> float:
    """Engagement per second of age: ``(likes*3 + views + comments*2) / age``."""
    return (like_count * 3 + view_count + comment_count * 2) / max(age_seconds, 1.0)


# ----------------------------------------------------------------------
# Per-upload jobs
# ----------------------------------------------------------------------


async def process_gif(session_factory: SessionFactory, storage: LocalFileStorage, gif_id: uuid.UUID) -> bool:
    """
    Fill GIF dimensions, timing and size from the stored file and write a
    first-frame PNG thumbnail.

    Returns:
        True when the GIF was updated
    """
    started = time.perf_counter()
    async with session_factory() as session:
        gifs = GifRepository(session)
        gif = await gifs.get_by_id(gif_id)
        if gif is None or not storage.exists(gif.file_key):
            logger.warning(f"process_gif: GIF {gif_id} or its file not found")
            return False

        data = storage.read(gif.file_key)
        gif.file_size = len(data)
        try:
            meta = extract_metadata(data)
        except ValueError as e:
            logger.error(f"process_gif: failed to analyze GIF {gif_id}: {e}")
            log_error("GifProcessingError", str(e), {"gif_id": str(gif_id)})
        else:
            gif.resolution_width = meta.width
            gif.resolution_height = meta.height
            gif.fps = meta.fps
            gif.duration = meta.duration
            logger.info(
                f"GIF {gif_id} metadata: {meta.width}x{meta.height}, "
                f"{meta.frame_count} frames, {meta.fps} fps, {meta.duration}s"
            )

        thumbnail = make_thumbnail(data, settings.uploads.thumbnail_size)
        if thumbnail is not None:
            if gif.thumbnail_key:
                storage.delete(gif.thumbnail_key)
            gif.thumbnail_key = storage.save(storage.new_key("thumbnails", "png"), thumbnail)

        await gifs.update(gif)
        await session.commit()

    log_job("process_gif", (time.perf_counter() - started) * 1000, gif_id=str(gif_id))
    return True


async def process_remix(
    session_factory: SessionFactory, storage: LocalFileStorage, remix_id: uuid.UUID, source_id: uuid.UUID
) -> bool:
    """Process a remix upload, then copy metadata the remix file did not provide from its source."""
    await process_gif(session_factory, storage, remix_id)
    async with session_factory() as session:
        gifs = GifRepository(session)
        remix = await gifs.get_by_id(remix_id)
        source = await gifs.get_by_id(source_id)
        if remix is None or source is None:
            logger.error(f"process_remix: remix {remix_id} or source {source_id} not found")
            return False
        for field in ("resolution_width", "resolution_height", "fps", "duration"):
            if getattr(remix, field) is None:
                setattr(remix, field, getattr(source, field))
        await gifs.update(remix)
        await session.commit()
    logger.info(f"Processed remix {remix_id} from source {source_id}")
    return True


# ----------------------------------------------------------------------
# Periodic jobs
# ----------------------------------------------------------------------


async def update_trending(session_factory: SessionFactory, cache: TTLCache) -> List[uuid.UUID]:
    """Rank recent public GIFs by ``trending_score`` and cache the top ids."""
    now = utc_now()
    async with session_factory() as session:
        candidates = await GifRepository(session).trending_candidates(now - TRENDING_LOOKBACK)
    ranked = sorted(
        candidates,
        key=lambda g: trending_score(
            g.like_count, g.view_count, g.comment_count, (now - g.created_at).total_seconds()
        ),
        reverse=True,
    )
    ids = [g.id for g in ranked[:TRENDING_LIMIT]]
    await cache.set(TRENDING_GIF_IDS_KEY, ids, ttl=TRENDING_TTL)
    logger.info(f"Updated trending GIFs cache with {len(ids)} GIFs")
    return ids


async def cleanup_view_events(session_factory: SessionFactory) -> int:
    """Delete view events older than the retention window, and expired denylist entries."""
    now = utc_now()
    async with session_factory() as session:
        deleted = await ViewEventRepository(session).delete_older_than(now - VIEW_EVENT_RETENTION)
        purged = await JwtDenylistRepository(session).purge_expired(now)
        await session.commit()
    logger.info(f"Deleted {deleted} old view events and {purged} expired token revocations")
    return deleted


async def update_engagement_stats(session_factory: SessionFactory) -> int:
    """Recount ``gifs_count`` and ``total_likes_received`` for recently active creators."""
    async with session_factory() as session:
        users = UserRepository(session)
        ids = await users.active_creator_ids(utc_now() - ENGAGEMENT_LOOKBACK)
        for user in (await users.get_many(ids)).values():
            await users.recompute_engagement(user)
        await session.commit()
    logger.info(f"Updated engagement stats for {len(ids)} active users")
    return len(ids)


# ----------------------------------------------------------------------
# Scheduler
# ----------------------------------------------------------------------


class JobScheduler:
    """Run coroutine jobs at fixed intervals on the event loop.

    Attributes:
        jobs: Job name mapped to (interval in seconds, coroutine function)
    """

    def __init__(self) -> None:
        self.jobs: Dict[str, tuple[float, Callable[[], Awaitable[object]]]] = {}
        self._tasks: Dict[str, asyncio.Task] = {}

    def add_job(self, name: str, interval: float, func: Callable[[], Awaitable[object]]) -> None:
        self.jobs[name] = (interval, func)

    @property
    def running(self) -> bool:
        return any(not t.done() for t in self._tasks.values())

    async def run_job(self, name: str) -> Optional[object]:
        """Run one job now. Failures are logged and reported, not raised."""
        _, func = self.jobs[name]
        started = time.perf_counter()
        try:
            result = await func()
        except Exception as e:
            logger.error(f"Job {name} failed: {e}", exc_info=True)
            log_error("JobError", str(e), {"job": name})
            return None
        log_job(name, (time.perf_counter() - started) * 1000)
        return result

    async def _loop(self, name: str, interval: float) -> None:
        try:
            while True:
                await self.run_job(name)
                await asyncio.sleep(interval)
        except asyncio.CancelledError:
            logger.debug(f"Job loop {name} cancelled")
            raise

    def start(self) -> None:
        for name, (interval, _) in self.jobs.items():
            if name not in self._tasks or self._tasks[name].done():
                self._tasks[name] = asyncio.create_task(self._loop(name, interval), name=f"job:{name}")
        logger.info(f"Started {len(self._tasks)} periodic jobs: {', '.join(sorted(self._tasks))}")

    async def stop(self) -> None:
        tasks = list(self._tasks.values())
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()
        logger.info("Stopped periodic jobs")


def build_scheduler(session_factory: SessionFactory, cache: TTLCache) -> JobScheduler:
    """Scheduler with the trending, view cleanup and engagement jobs at their configured intervals."""
    config = settings.jobs
    scheduler = JobScheduler()
    scheduler.add_job("update_trending", config.trending_interval_seconds, lambda: update_trending(session_factory, cache))
    scheduler.add_job("cleanup_view_events", config.view_cleanup_interval_seconds, lambda: cleanup_view_events(session_factory))
    scheduler.add_job(
        "update_engagement_stats", config.engagement_interval_seconds, lambda: update_engagement_stats(session_factory)
    )
    return scheduler

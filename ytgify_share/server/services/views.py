"""
View tracking.

A view is unique when the same viewer (the user, or the IP address for
anonymous viewers) has not viewed the GIF during the last 24 hours. Unique
views increment ``Gif.view_count``.
"""

from __future__ import annotations

from collections import OrderedDict
from datetime import timedelta
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ytgify_share.core.database.base import utc_now
from ytgify_share.core.database.entities.gifs import Gif
from ytgify_share.core.database.entities.users import User
from ytgify_share.core.database.entities.view_events import VIEWER_ANONYMOUS, VIEWER_USER, ViewEvent
from ytgify_share.core.database.repositories.gifs import GifRepository
from ytgify_share.core.database.repositories.view_events import ViewEventRepository
from ytgify_share.core.models.io.gifs import GifAnalytics, ReferrerCount

UNIQUE_VIEW_WINDOW = timedelta(hours=24)
ANALYTICS_DAYS = 7


class ViewTracker:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.events = ViewEventRepository(session)
        self.gifs = GifRepository(session)

    async def record(
        self,
        gif: Gif,
        viewer: Optional[User] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
        referer: Optional[str] = None,
    ) -> ViewEvent:
        """Store a view event and bump ``view_count`` when it is unique. Does not commit."""
        viewer_id = viewer.id if viewer is not None else None
        seen = await self.events.seen_since(gif.id, utc_now() - UNIQUE_VIEW_WINDOW, viewer_id, ip_address)
        event = ViewEvent(
            gif_id=gif.id,
            viewer_id=viewer_id,
            viewer_type=VIEWER_USER if viewer is not None else VIEWER_ANONYMOUS,
            ip_address=ip_address,
            user_agent=user_agent[:500] if user_agent else None,
            referer=referer[:500] if referer else None,
            is_unique=not seen,
        )
        await self.events.create(event)
        if event.is_unique:
            await self.gifs.increment(gif.id, "view_count", 1)
        return event

    async def analytics(self, gif: Gif) -> GifAnalytics:
        today = utc_now().date()
        since_day = today - timedelta(days=ANALYTICS_DAYS - 1)
        by_day: "OrderedDict[str, int]" = OrderedDict(
            ((since_day + timedelta(days=i)).isoformat(), 0) for i in range(ANALYTICS_DAYS)
        )
        since = utc_now() - timedelta(days=ANALYTICS_DAYS)
        for created_at in await self.events.created_since(gif.id, since):
            key = created_at.date().isoformat()
            if key in by_day:
                by_day[key] += 1

        referrers = await self.events.top_referrers(gif.id)
        return GifAnalytics(
            gif_id=gif.id,
            total_views=await self.events.total_views(gif.id),
            unique_viewers=await self.events.unique_viewers(gif.id),
            view_count=gif.view_count,
            like_count=gif.like_count,
            comment_count=gif.comment_count,
            share_count=gif.share_count,
            remix_count=gif.remix_count,
            views_by_day=dict(by_day),
            top_referrers=[ReferrerCount(referer=r, views=n) for r, n in referrers],
        )

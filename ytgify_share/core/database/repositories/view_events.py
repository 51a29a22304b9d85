"""
View event repository.

Uniqueness checks for view tracking, per-GIF analytics aggregates and the
retention cleanup.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import delete, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.view_events import ViewEvent
from .base import AsyncBaseRepository


class ViewEventRepository(AsyncBaseRepository[ViewEvent]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, ViewEvent)

    async def seen_since(
        self,
        gif_id: uuid.UUID,
        since: datetime,
        viewer_id: Optional[uuid.UUID] = None,
        ip_address: Optional[str] = None,
    ) -> bool:
        """Whether this viewer (or IP, for anonymous viewers) viewed the GIF after ``since``."""
        stmt = select(ViewEvent.id).where((ViewEvent.gif_id == gif_id) & (ViewEvent.created_at >= since))
        if viewer_id is not None:
            stmt = stmt.where(ViewEvent.viewer_id == viewer_id)
        else:
            stmt = stmt.where((ViewEvent.viewer_id.is_(None)) & (ViewEvent.ip_address == ip_address))
        result = await self.session.execute(stmt.limit(1))
        return result.first() is not None

    async def total_views(self, gif_id: uuid.UUID) -> int:
        return await self.count(select(ViewEvent).where(ViewEvent.gif_id == gif_id))

    async def unique_viewers(self, gif_id: uuid.UUID) -> int:
        return await self.count(
            select(ViewEvent).where((ViewEvent.gif_id == gif_id) & (ViewEvent.is_unique.is_(True)))
        )

    async def created_since(self, gif_id: uuid.UUID, since: datetime) -> List[datetime]:
        stmt = select(ViewEvent.created_at).where((ViewEvent.gif_id == gif_id) & (ViewEvent.created_at >= since))
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def top_referrers(self, gif_id: uuid.UUID, limit: int = 10) -> List[Tuple[str, int]]:
        stmt = (
            select(ViewEvent.referer, func.count(ViewEvent.id).label("views"))
            .where((ViewEvent.gif_id == gif_id) & (ViewEvent.referer.is_not(None)))
            .group_by(ViewEvent.referer)
            .order_by(func.count(ViewEvent.id).desc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return [(referer, int(views)) for referer, views in result.all()]

    async def delete_older_than(self, cutoff: datetime) -> int:
        result = await self.session.execute(delete(ViewEvent).where(ViewEvent.created_at < cutoff))
        return result.rowcount or 0

    async def delete_by_viewer(self, viewer_id: uuid.UUID) -> None:
        await self.session.execute(delete(ViewEvent).where(ViewEvent.viewer_id == viewer_id))

    async def delete_for_gifs(self, gif_ids: List[uuid.UUID]) -> None:
        if gif_ids:
            await self.session.execute(delete(ViewEvent).where(ViewEvent.gif_id.in_(gif_ids)))

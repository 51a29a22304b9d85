"""Notification repository."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import List

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.notifications import Notification
from .base import AsyncBaseRepository


class NotificationRepository(AsyncBaseRepository[Notification]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Notification)

    def for_recipient(self, recipient_id: uuid.UUID, unread_only: bool = False):
        stmt = select(Notification).where(Notification.recipient_id == recipient_id)
        if unread_only:
            stmt = stmt.where(Notification.read_at.is_(None))
        return stmt.order_by(Notification.created_at.desc())

    async def unread_count(self, recipient_id: uuid.UUID) -> int:
        return await self.count(self.for_recipient(recipient_id, unread_only=True))

    async def mark_all_read(self, recipient_id: uuid.UUID, when: datetime) -> None:
        stmt = (
            update(Notification)
            .where((Notification.recipient_id == recipient_id) & (Notification.read_at.is_(None)))
            .values(read_at=when)
            .execution_options(synchronize_session="fetch")
        )
        await self.session.execute(stmt)

    async def involving(self, user_id: uuid.UUID) -> List[Notification]:
        stmt = select(Notification).where(
            (Notification.recipient_id == user_id) | (Notification.actor_id == user_id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

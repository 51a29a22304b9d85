"""Notification service: creation on social actions and the recipient inbox."""

from __future__ import annotations

import uuid
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from ytgify_share.core.database.base import utc_now
from ytgify_share.core.database.entities.notifications import Notification, NotificationAction
from ytgify_share.core.database.entities.users import User
from ytgify_share.core.database.repositories.notifications import NotificationRepository
from ytgify_share.core.errors import NotFoundError
from ytgify_share.core.logging_config import get_logger
from ytgify_share.server.services.pagination import PageParams

logger = get_logger(__name__)


class NotificationService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.notifications = NotificationRepository(session)

    async def notify(
        self,
        recipient_id: uuid.UUID,
        actor: User,
        action: NotificationAction,
        notifiable_type: str,
        notifiable_id: uuid.UUID,
        data: Optional[Dict[str, Any]] = None,
    ) -> Optional[Notification]:
        """Record a notification; actions on one's own content are not notified.

        Does not commit; the calling use case owns the transaction.
        """
        if recipient_id == actor.id:
            return None
        notification = Notification(
            recipient_id=recipient_id,
            actor_id=actor.id,
            action=action.value,
            notifiable_type=notifiable_type,
            notifiable_id=notifiable_id,
            data=data or {},
        )
        await self.notifications.create(notification)
        logger.debug(f"Notification {action.value} for {recipient_id} from {actor.id}")
        return notification

    async def inbox(self, user: User, page: PageParams, unread_only: bool = False) -> Tuple[List[Notification], int]:
        stmt = self.notifications.for_recipient(user.id, unread_only=unread_only)
        rows = await self.notifications.paginate(stmt, page.per_page, page.offset)
        return rows, await self.notifications.count(stmt)

    async def unread_count(self, user: User) -> int:
        return await self.notifications.unread_count(user.id)

    async def mark_as_read(self, user: User, notification_id: uuid.UUID) -> Notification:
        notification = await self.notifications.get_by_id(notification_id)
        if notification is None or notification.recipient_id != user.id:
            raise NotFoundError("Notification not found")
        if notification.read_at is None:
            notification.read_at = utc_now()
            await self.notifications.update(notification)
            await self.session.commit()
        return notification

    async def mark_all_as_read(self, user: User) -> int:
        await self.notifications.mark_all_read(user.id, utc_now())
        await self.session.commit()
        return await self.unread_count(user)

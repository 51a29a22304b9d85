"""
Notification Endpoints.
"""

import uuid

from fastapi import APIRouter, Query

from ytgify_share.core.models.io import (
    NotificationEnvelope,
    NotificationListResponse,
    UnreadCountResponse,
)
from ytgify_share.server.services.deps import CurrentUserDep, PageDep, SessionDep, StorageDep
from ytgify_share.server.services.notifications import NotificationService
from ytgify_share.server.services.presenters import Presenter

router = APIRouter()


@router.get(
    "",
    response_model=NotificationListResponse,
    summary="List Notifications",
    description="The caller's notifications, newest first, with the unread count.",
)
async def list_notifications(
    user: CurrentUserDep,
    session: SessionDep,
    storage: StorageDep,
    page: PageDep,
    unread: bool = Query(default=False, description="Only unread notifications"),
):
    service = NotificationService(session)
    notifications, total = await service.inbox(user, page, unread_only=unread)
    return NotificationListResponse(
        notifications=await Presenter(session, storage).notifications(notifications),
        unread_count=await service.unread_count(user),
        pagination=page.meta(total),
    )


@router.post("/mark_all_as_read", response_model=UnreadCountResponse, summary="Mark All As Read")
async def mark_all_as_read(user: CurrentUserDep, session: SessionDep):
    unread = await NotificationService(session).mark_all_as_read(user)
    return UnreadCountResponse(message="All notifications marked as read", unread_count=unread)


@router.post("/{notification_id}/mark_as_read", response_model=NotificationEnvelope, summary="Mark As Read")
async def mark_as_read(notification_id: uuid.UUID, user: CurrentUserDep, session: SessionDep, storage: StorageDep):
    service = NotificationService(session)
    notification = await service.mark_as_read(user, notification_id)
    presented = (await Presenter(session, storage).notifications([notification]))[0]
    return NotificationEnvelope(notification=presented, unread_count=await service.unread_count(user))

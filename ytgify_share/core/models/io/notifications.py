"""Notification I/O models."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from .common import Pagination, UserSummary


class NotificationRead(BaseModel):
    id: uuid.UUID
    action: str
    message: str
    notifiable_type: str
    notifiable_id: uuid.UUID
    data: Dict[str, Any] = Field(default_factory=dict)
    read: bool
    read_at: Optional[datetime] = None
    created_at: datetime
    actor: Optional[UserSummary] = None


class NotificationListResponse(BaseModel):
    notifications: List[NotificationRead]
    unread_count: int
    pagination: Pagination


class NotificationEnvelope(BaseModel):
    notification: NotificationRead
    unread_count: int


class UnreadCountResponse(BaseModel):
    message: str
    unread_count: int

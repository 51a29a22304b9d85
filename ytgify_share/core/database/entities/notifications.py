"""
Notification entity models.

A notification tells ``recipient_id`` that ``actor_id`` performed ``action``
on a notifiable record (GIF, comment, follow or collection).
"""

from __future__ import annotations

import uuid
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field

from ..base import Base, new_uuid, utc_now


class NotificationAction(str, Enum):
    LIKE = "like"
    COMMENT = "comment"
    FOLLOW = "follow"
    COLLECTION_ADD = "collection_add"
    REMIX = "remix"


class Notification(Base, table=True):
    """Table: notifications"""

    __tablename__ = "notifications"
    __table_args__ = ({"extend_existing": True},)

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    recipient_id: uuid.UUID = Field(foreign_key="users.id", index=True)
    actor_id: uuid.UUID = Field(foreign_key="users.id", index=True)
    notifiable_type: str = Field(description="Gif, Comment, Follow or Collection")
    notifiable_id: uuid.UUID = Field(index=True)
    action: str = Field(index=True)
    data: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))

    read_at: Optional[datetime] = Field(default=None, index=True)
    created_at: datetime = Field(default_factory=utc_now, index=True)

    @property
    def is_read(self) -> bool:
        return self.read_at is not None

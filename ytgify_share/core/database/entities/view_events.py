"""View event entity: one row per recorded view of a GIF."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from sqlmodel import Field

from ..base import Base, new_uuid, utc_now

VIEWER_USER = "User"
VIEWER_ANONYMOUS = "Anonymous"


class ViewEvent(Base, table=True):
    """Table: view_events"""

    __tablename__ = "view_events"
    __table_args__ = ({"extend_existing": True},)

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    gif_id: uuid.UUID = Field(foreign_key="gifs.id", index=True)
    viewer_id: Optional[uuid.UUID] = Field(default=None, index=True)
    viewer_type: str = Field(default=VIEWER_ANONYMOUS)
    ip_address: Optional[str] = Field(default=None, index=True)
    user_agent: Optional[str] = Field(default=None)
    referer: Optional[str] = Field(default=None)
    is_unique: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utc_now, index=True)

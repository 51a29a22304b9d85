"""
GIF entity models.

A GIF row holds the uploaded file keys (base GIF, optional composite with the
overlay baked in, thumbnail), YouTube source metadata, the overlay
configuration used for remixing, privacy, and denormalized engagement counters.
GIFs are soft deleted through ``deleted_at``.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field

from ..base import Base, new_uuid, utc_now


class Privacy(str, Enum):
    """Visibility of a GIF."""

    PUBLIC = "public"
    UNLISTED = "unlisted"
    PRIVATE = "private"


class GifBase(Base):
    """Base fields for a GIF."""

    title: Optional[str] = Field(default=None, max_length=100)
    description: Optional[str] = Field(default=None, max_length=2000)
    privacy: str = Field(default=Privacy.PUBLIC.value, index=True)

    youtube_video_url: Optional[str] = Field(default=None)
    youtube_video_title: Optional[str] = Field(default=None)
    youtube_channel_name: Optional[str] = Field(default=None)
    youtube_timestamp_start: Optional[float] = Field(default=None)
    youtube_timestamp_end: Optional[float] = Field(default=None)

    duration: Optional[float] = Field(default=None)
    fps: Optional[int] = Field(default=None)
    resolution_width: Optional[int] = Field(default=None)
    resolution_height: Optional[int] = Field(default=None)
    file_size: Optional[int] = Field(default=None)

    has_text_overlay: bool = Field(default=False)


class Gif(GifBase, table=True):
    """Persistent GIF.

    Table: gifs
    """

    __tablename__ = "gifs"
    __table_args__ = ({"extend_existing": True},)

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    user_id: uuid.UUID = Field(foreign_key="users.id", index=True)

    # Stored files
    file_key: Optional[str] = Field(default=None)
    composite_file_key: Optional[str] = Field(default=None)
    thumbnail_key: Optional[str] = Field(default=None)

    text_overlay_data: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON, nullable=True))

    # Remixes
    is_remix: bool = Field(default=False, index=True)
    parent_gif_id: Optional[uuid.UUID] = Field(default=None, foreign_key="gifs.id", index=True)
    remix_count: int = Field(default=0)

    # Counters
    view_count: int = Field(default=0)
    like_count: int = Field(default=0, index=True)
    comment_count: int = Field(default=0)
    share_count: int = Field(default=0)

    deleted_at: Optional[datetime] = Field(default=None, index=True)
    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    @property
    def is_public(self) -> bool:
        return self.privacy == Privacy.PUBLIC.value

    def __repr__(self) -> str:
        return f"Gif(id={self.id}, title={self.title}, privacy={self.privacy})"

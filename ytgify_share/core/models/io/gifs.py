"""
GIF I/O models.

Read schemas for list and detail views, update payloads, and the privacy
normalization shared with upload form parsing.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from .common import EnvelopeModel, Pagination, UserSummary

PRIVACY_ALIASES = {
    "public": "public",
    "public_access": "public",
    "unlisted": "unlisted",
    "private": "private",
    "private_access": "private",
}


def normalize_privacy(value: str) -> str:
    """Map a privacy value (including extension aliases) to public/unlisted/private."""
    normalized = PRIVACY_ALIASES.get(str(value).strip().lower())
    if normalized is None:
        raise ValueError(f"'{value}' is not a valid privacy")
    return normalized


class GifRead(BaseModel):
    """GIF as shown in listings."""

    id: uuid.UUID
    title: Optional[str] = None
    description: Optional[str] = None
    file_url: Optional[str] = None
    composite_file_url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    privacy: str
    duration: Optional[float] = None
    fps: Optional[int] = None
    resolution_width: Optional[int] = None
    resolution_height: Optional[int] = None
    file_size: Optional[int] = None
    has_text_overlay: bool = False
    is_remix: bool = False
    remix_count: int = 0
    view_count: int = 0
    like_count: int = 0
    comment_count: int = 0
    share_count: int = 0
    created_at: datetime
    updated_at: datetime
    hashtag_names: List[str] = Field(default_factory=list)
    user: Optional[UserSummary] = None


class GifDetail(GifRead):
    """GIF with source metadata, overlay configuration and viewer state."""

    youtube_video_url: Optional[str] = None
    youtube_video_title: Optional[str] = None
    youtube_channel_name: Optional[str] = None
    youtube_timestamp_start: Optional[float] = None
    youtube_timestamp_end: Optional[float] = None
    text_overlay_data: Optional[Dict[str, Any]] = None
    parent_gif_id: Optional[uuid.UUID] = None
    liked_by_current_user: bool = False
    public_url: Optional[str] = None


class GifEnvelope(BaseModel):
    gif: GifDetail


class GifMessageEnvelope(BaseModel):
    message: str
    gif: GifDetail


class GifListResponse(BaseModel):
    gifs: List[GifRead]
    pagination: Pagination


class GifUpdate(EnvelopeModel):
    """Schema for updating a GIF (owner only)."""

    envelope_key = "gif"

    title: Optional[str] = Field(default=None, max_length=100)
    description: Optional[str] = Field(default=None, max_length=2000)
    privacy: Optional[str] = None
    has_text_overlay: Optional[bool] = None
    text_overlay_data: Optional[Dict[str, Any]] = None
    hashtag_names: Optional[List[str]] = None

    @field_validator("privacy")
    @classmethod
    def _check_privacy(cls, v: Optional[str]) -> Optional[str]:
        return normalize_privacy(v) if v is not None else v


class ShareResponse(BaseModel):
    share_count: int
    public_url: str


class ReferrerCount(BaseModel):
    referer: str
    views: int


class GifAnalytics(BaseModel):
    gif_id: uuid.UUID
    total_views: int
    unique_viewers: int
    view_count: int
    like_count: int
    comment_count: int
    share_count: int
    remix_count: int
    views_by_day: Dict[str, int]
    top_referrers: List[ReferrerCount]


class LikeToggleResponse(BaseModel):
    message: str
    liked: bool
    like_count: int


class GifUploadForm(BaseModel):
    """Metadata fields of a multipart GIF upload, validated after form parsing."""

    title: Optional[str] = Field(default=None, max_length=100)
    description: Optional[str] = Field(default=None, max_length=2000)
    privacy: Optional[str] = None
    youtube_video_url: Optional[str] = None
    youtube_video_title: Optional[str] = None
    youtube_channel_name: Optional[str] = None
    youtube_timestamp_start: Optional[float] = Field(default=None, ge=0)
    youtube_timestamp_end: Optional[float] = None
    duration: Optional[float] = Field(default=None, gt=0)
    fps: Optional[int] = Field(default=None, gt=0, le=60)
    resolution_width: Optional[int] = Field(default=None, gt=0)
    resolution_height: Optional[int] = Field(default=None, gt=0)
    has_text_overlay: Optional[bool] = None
    text_overlay_data: Optional[Dict[str, Any]] = None
    hashtag_names: List[str] = Field(default_factory=list)

    @field_validator("privacy")
    @classmethod
    def _check_privacy(cls, v: Optional[str]) -> Optional[str]:
        return normalize_privacy(v) if v else None

    @model_validator(mode="after")
    def _check_timestamps(self) -> "GifUploadForm":
        start, end = self.youtube_timestamp_start, self.youtube_timestamp_end
        if start is not None and end is not None and end <= start:
            raise ValueError("youtube_timestamp_end must be greater than youtube_timestamp_start")
        return self

    def computed_duration(self) -> Optional[float]:
        """Clip length from the YouTube timestamps, else the declared duration."""
        if self.youtube_timestamp_start is not None and self.youtube_timestamp_end is not None:
            return round(self.youtube_timestamp_end - self.youtube_timestamp_start, 2)
        return self.duration

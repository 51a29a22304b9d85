"""
User I/O models.

Account representations (private, public profile, summary), profile updates
and upload preferences.
"""

from __future__ import annotations

import re
import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from .common import EnvelopeModel, Pagination, UserSummary
from .gifs import normalize_privacy

UPLOAD_BEHAVIORS = ("show_options", "upload_immediately", "save_locally")

USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_]+$")

PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_LENGTH = 72


def validate_username(value: str) -> str:
    value = value.strip()
    if not 3 <= len(value) <= 30:
        raise ValueError("Username must be between 3 and 30 characters")
    if not USERNAME_PATTERN.match(value):
        raise ValueError("Username only allows letters, numbers, and underscores")
    return value


class UserRead(BaseModel):
    """Schema for the authenticated user's own account."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    email: str
    username: str
    display_name: Optional[str] = None
    bio: Optional[str] = None
    website: Optional[str] = None
    twitter_handle: Optional[str] = None
    youtube_channel: Optional[str] = None
    is_verified: bool = False
    gifs_count: int = 0
    total_likes_received: int = 0
    follower_count: int = 0
    following_count: int = 0
    created_at: datetime
    updated_at: datetime


class UserProfile(BaseModel):
    """Public profile of any user."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    username: str
    display_name: Optional[str] = None
    bio: Optional[str] = None
    website: Optional[str] = None
    twitter_handle: Optional[str] = None
    youtube_channel: Optional[str] = None
    is_verified: bool = False
    gifs_count: int = 0
    total_likes_received: int = 0
    follower_count: int = 0
    following_count: int = 0
    created_at: datetime
    is_following: bool = False


class UserProfileEnvelope(BaseModel):
    user: UserProfile


class UserEnvelope(BaseModel):
    user: UserRead


class UserUpdate(EnvelopeModel):
    """Schema for updating the caller's profile.

    Changing ``email`` or ``password`` requires ``current_password``.
    """

    envelope_key = "user"

    email: Optional[EmailStr] = None
    username: Optional[str] = None
    display_name: Optional[str] = Field(default=None, max_length=50)
    bio: Optional[str] = Field(default=None, max_length=500)
    website: Optional[str] = Field(default=None, max_length=255)
    twitter_handle: Optional[str] = Field(default=None, max_length=50)
    youtube_channel: Optional[str] = Field(default=None, max_length=255)
    password: Optional[str] = Field(default=None, min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH)
    current_password: Optional[str] = None

    @field_validator("username")
    @classmethod
    def _check_username(cls, v: Optional[str]) -> Optional[str]:
        return validate_username(v) if v is not None else v


class Preferences(BaseModel):
    default_privacy: str = "public"
    default_upload_behavior: str = "show_options"
    recently_used_tags: List[str] = Field(default_factory=list)


class PreferencesEnvelope(BaseModel):
    preferences: Preferences


class PreferencesUpdate(EnvelopeModel):
    """Partial update of upload preferences."""

    envelope_key = "preferences"

    default_privacy: Optional[str] = None
    default_upload_behavior: Optional[str] = None
    recently_used_tags: Optional[List[str]] = None

    @field_validator("default_privacy")
    @classmethod
    def _check_privacy(cls, v: Optional[str]) -> Optional[str]:
        return normalize_privacy(v) if v is not None else v

    @field_validator("default_upload_behavior")
    @classmethod
    def _check_behavior(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v not in UPLOAD_BEHAVIORS:
            raise ValueError(f"default_upload_behavior must be one of {', '.join(UPLOAD_BEHAVIORS)}")
        return v

    @field_validator("recently_used_tags")
    @classmethod
    def _check_tags(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        if v is not None and len(v) > 10:
            raise ValueError("recently_used_tags accepts at most 10 tags")
        return v


class FollowToggleResponse(BaseModel):
    following: bool
    follower_count: int
    following_count: int


class FollowersResponse(BaseModel):
    followers: List[UserSummary]
    pagination: Pagination


class FollowingResponse(BaseModel):
    following: List[UserSummary]
    pagination: Pagination

"""
User entity models.

This module contains the database entity for user accounts, including
credentials, the session key used to revoke bearer tokens, public profile
fields, denormalized social counters and upload preferences.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field

from ..base import Base, new_uuid, utc_now

DEFAULT_PREFERENCES: Dict[str, Any] = {
    "default_privacy": "public",
    "default_upload_behavior": "show_options",
    "recently_used_tags": [],
}

MAX_RECENT_TAGS = 10


class UserBase(Base):
    """Base fields for a user account."""

    email: str = Field(index=True, unique=True, description="Login email")
    username: str = Field(index=True, unique=True, description="Unique handle, letters, digits and underscores")
    display_name: Optional[str] = Field(default=None, max_length=50)
    bio: Optional[str] = Field(default=None, max_length=500)
    website: Optional[str] = Field(default=None)
    twitter_handle: Optional[str] = Field(default=None)
    youtube_channel: Optional[str] = Field(default=None)
    is_verified: bool = Field(default=False)


class User(UserBase, table=True):
    """Persistent user account.

    Table: users
    """

    __tablename__ = "users"
    __table_args__ = ({"extend_existing": True},)

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)

    password_hash: str = Field(description="bcrypt hash of the password")
    jti: str = Field(default_factory=lambda: str(uuid.uuid4()), index=True, description="Session key")

    # Counters
    gifs_count: int = Field(default=0)
    total_likes_received: int = Field(default=0)
    follower_count: int = Field(default=0)
    following_count: int = Field(default=0)

    preferences: Dict[str, Any] = Field(
        default_factory=lambda: dict(DEFAULT_PREFERENCES, recently_used_tags=[]),
        sa_column=Column(JSON, nullable=False),
    )

    # Sign-in tracking
    sign_in_count: int = Field(default=0)
    current_sign_in_at: Optional[datetime] = Field(default=None)
    last_sign_in_at: Optional[datetime] = Field(default=None)

    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    @property
    def default_privacy(self) -> str:
        return (self.preferences or {}).get("default_privacy") or "public"

    @property
    def default_upload_behavior(self) -> str:
        return (self.preferences or {}).get("default_upload_behavior") or "show_options"

    @property
    def recently_used_tags(self) -> List[str]:
        return list((self.preferences or {}).get("recently_used_tags") or [])

    def add_recent_tags(self, tags: List[str]) -> None:
        """Push tags to the front of ``recently_used_tags``, keeping the newest ten unique ones."""
        recent = self.recently_used_tags
        for tag in tags:
            if tag in recent:
                recent.remove(tag)
            recent.insert(0, tag)
        # JSON columns are only flushed when reassigned
        self.preferences = {**(self.preferences or {}), "recently_used_tags": recent[:MAX_RECENT_TAGS]}

    def rotate_jti(self) -> None:
        self.jti = str(uuid.uuid4())

    def __repr__(self) -> str:
        return f"User(id={self.id}, username={self.username})"

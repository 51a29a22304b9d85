"""Follow entity: ``follower_id`` follows ``following_id``."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, UniqueConstraint
from sqlmodel import Field

from ..base import Base, new_uuid, utc_now


class Follow(Base, table=True):
    """Table: follows"""

    __tablename__ = "follows"
    __table_args__ = (
        UniqueConstraint("follower_id", "following_id", name="uq_follows_pair"),
        CheckConstraint("follower_id <> following_id", name="ck_follows_not_self"),
        {"extend_existing": True},
    )

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    follower_id: uuid.UUID = Field(foreign_key="users.id", index=True)
    following_id: uuid.UUID = Field(foreign_key="users.id", index=True)
    created_at: datetime = Field(default_factory=utc_now)

"""Like entity: one row per (user, GIF) pair."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import UniqueConstraint
from sqlmodel import Field

from ..base import Base, new_uuid, utc_now


class Like(Base, table=True):
    """Table: likes"""

    __tablename__ = "likes"
    __table_args__ = (
        UniqueConstraint("user_id", "gif_id", name="uq_likes_user_gif"),
        {"extend_existing": True},
    )

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    user_id: uuid.UUID = Field(foreign_key="users.id", index=True)
    gif_id: uuid.UUID = Field(foreign_key="gifs.id", index=True)
    created_at: datetime = Field(default_factory=utc_now)

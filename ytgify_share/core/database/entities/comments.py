"""
Comment entity models.

Comments form a single level of threading through ``parent_comment_id``.
Deleted comments keep their row with ``deleted_at`` set and the content
replaced by ``[deleted]``.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from sqlmodel import Field

from ..base import Base, new_uuid, utc_now

DELETED_CONTENT = "[deleted]"


class Comment(Base, table=True):
    """Table: comments"""

    __tablename__ = "comments"
    __table_args__ = ({"extend_existing": True},)

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    user_id: uuid.UUID = Field(foreign_key="users.id", index=True)
    gif_id: uuid.UUID = Field(foreign_key="gifs.id", index=True)
    parent_comment_id: Optional[uuid.UUID] = Field(default=None, foreign_key="comments.id", index=True)

    content: str = Field(max_length=2000)
    reply_count: int = Field(default=0)
    like_count: int = Field(default=0)

    deleted_at: Optional[datetime] = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

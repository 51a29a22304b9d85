"""
Hashtag entity models.

Hashtags are stored normalized (lowercase, without the leading ``#``) with a
URL slug and a ``usage_count`` tracking how many GIFs link to them.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import UniqueConstraint
from sqlmodel import Field

from ..base import Base, new_uuid, utc_now


class Hashtag(Base, table=True):
    """Table: hashtags"""

    __tablename__ = "hashtags"
    __table_args__ = ({"extend_existing": True},)

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    name: str = Field(index=True, unique=True)
    slug: str = Field(index=True, unique=True)
    usage_count: int = Field(default=0, index=True)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})


class GifHashtag(Base, table=True):
    """Link between a GIF and a hashtag.

    Table: gif_hashtags
    """

    __tablename__ = "gif_hashtags"
    __table_args__ = (
        UniqueConstraint("gif_id", "hashtag_id", name="uq_gif_hashtags_gif_hashtag"),
        {"extend_existing": True},
    )

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    gif_id: uuid.UUID = Field(foreign_key="gifs.id", index=True)
    hashtag_id: uuid.UUID = Field(foreign_key="hashtags.id", index=True)
    created_at: datetime = Field(default_factory=utc_now)

"""
Collection entity models.

A collection is a user-curated, ordered list of GIFs. Ordering is kept in the
``position`` column of the link table.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field

from ..base import Base, new_uuid, utc_now


class Collection(Base, table=True):
    """Table: collections"""

    __tablename__ = "collections"
    __table_args__ = ({"extend_existing": True},)

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    user_id: uuid.UUID = Field(foreign_key="users.id", index=True)
    name: str = Field(max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    is_public: bool = Field(default=False)
    gifs_count: int = Field(default=0)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})


class CollectionGif(Base, table=True):
    """Table: collection_gifs"""

    __tablename__ = "collection_gifs"
    __table_args__ = (
        UniqueConstraint("collection_id", "gif_id", name="uq_collection_gifs_pair"),
        {"extend_existing": True},
    )

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    collection_id: uuid.UUID = Field(foreign_key="collections.id", index=True)
    gif_id: uuid.UUID = Field(foreign_key="gifs.id", index=True)
    position: int = Field(default=0, ge=0)
    created_at: datetime = Field(default_factory=utc_now)

"""Collection I/O models."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from .common import EnvelopeModel, Pagination, UserSummary
from .gifs import GifRead


class CollectionRead(BaseModel):
    id: uuid.UUID
    name: str
    description: Optional[str] = None
    is_public: bool
    gifs_count: int
    created_at: datetime
    updated_at: datetime
    user: Optional[UserSummary] = None


class CollectionCreate(EnvelopeModel):
    envelope_key = "collection"

    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    is_public: bool = False

    @field_validator("name")
    @classmethod
    def _strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name can't be blank")
        return v


class CollectionUpdate(EnvelopeModel):
    envelope_key = "collection"

    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    is_public: Optional[bool] = None

    @field_validator("name")
    @classmethod
    def _strip_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Name can't be blank")
        return v


class CollectionListResponse(BaseModel):
    collections: List[CollectionRead]
    pagination: Pagination


class CollectionDetailResponse(BaseModel):
    collection: CollectionRead
    gifs: List[GifRead]
    pagination: Pagination


class AddGifRequest(BaseModel):
    gif_id: uuid.UUID


class ReorderRequest(BaseModel):
    gif_ids: List[uuid.UUID]


class CollectionGifsCountResponse(BaseModel):
    message: str
    gifs_count: int
    collection: Optional[CollectionRead] = None

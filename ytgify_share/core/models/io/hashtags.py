"""Hashtag and tag I/O models."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from .common import Pagination
from .gifs import GifRead


class HashtagRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    slug: str
    usage_count: int
    created_at: Optional[datetime] = None


class HashtagListResponse(BaseModel):
    hashtags: List[HashtagRead]
    pagination: Pagination


class HashtagSearchResponse(BaseModel):
    hashtags: List[HashtagRead]
    query: str


class HashtagDetailResponse(BaseModel):
    hashtag: HashtagRead
    gifs: List[GifRead]
    pagination: Pagination


class TagCount(BaseModel):
    name: str
    count: int


class PopularTagsResponse(BaseModel):
    tags: List[TagCount]


class RecentTagsResponse(BaseModel):
    tags: List[str]

"""Comment I/O models."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from .common import EnvelopeModel, Pagination, UserSummary


class CommentRead(BaseModel):
    id: uuid.UUID
    gif_id: uuid.UUID
    parent_comment_id: Optional[uuid.UUID] = None
    content: str
    reply_count: int = 0
    like_count: int = 0
    is_deleted: bool = False
    created_at: datetime
    updated_at: datetime
    user: Optional[UserSummary] = None
    replies: Optional[List["CommentRead"]] = None


class CommentCreate(EnvelopeModel):
    envelope_key = "comment"

    content: str = Field(min_length=1, max_length=2000)
    parent_comment_id: Optional[uuid.UUID] = None

    @field_validator("content")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Content can't be blank")
        return v


class CommentUpdate(EnvelopeModel):
    envelope_key = "comment"

    content: str = Field(min_length=1, max_length=2000)

    @field_validator("content")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Content can't be blank")
        return v


class CommentEnvelope(BaseModel):
    message: str
    comment: CommentRead


class CommentListResponse(BaseModel):
    comments: List[CommentRead]
    pagination: Pagination


CommentRead.model_rebuild()

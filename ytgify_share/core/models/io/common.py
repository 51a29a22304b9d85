"""
Shared I/O models: pagination metadata, plain messages, error bodies and
request envelopes.
"""

from __future__ import annotations

import uuid
from typing import Any, ClassVar, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Pagination(BaseModel):
    """Pagination metadata returned with every list response."""

    page: int = Field(ge=1)
    per_page: int = Field(ge=1, le=100)
    total: int = Field(ge=0)


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    """Body of every error response."""

    error: str
    message: str
    details: Optional[List[Any]] = None


class UserSummary(BaseModel):
    """Minimal public user representation embedded in other resources."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    username: str
    display_name: Optional[str] = None
    is_verified: bool = False


class EnvelopeModel(BaseModel):
    """Request body that may arrive bare or wrapped in ``{envelope_key: {...}}``.

    Browser extension and form clients send ``{"user": {...}}`` style bodies;
    API clients send the fields directly. Both are accepted.
    """

    envelope_key: ClassVar[Optional[str]] = None

    @model_validator(mode="before")
    @classmethod
    def _unwrap(cls, data: Any) -> Any:
        if cls.envelope_key and isinstance(data, dict) and isinstance(data.get(cls.envelope_key), dict):
            return data[cls.envelope_key]
        return data

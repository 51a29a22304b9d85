"""Revoked token identifiers."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlmodel import Field

from ..base import Base, new_uuid


class JwtDenylist(Base, table=True):
    """Table: jwt_denylist"""

    __tablename__ = "jwt_denylist"
    __table_args__ = ({"extend_existing": True},)

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    jti: str = Field(index=True, unique=True)
    exp: datetime

"""Revoked token repository."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.jwt_denylist import JwtDenylist
from .base import AsyncBaseRepository


class JwtDenylistRepository(AsyncBaseRepository[JwtDenylist]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, JwtDenylist)

    async def is_revoked(self, jti: str) -> bool:
        result = await self.session.execute(select(JwtDenylist.id).where(JwtDenylist.jti == jti))
        return result.first() is not None

    async def revoke(self, jti: str, exp: datetime) -> None:
        if not await self.is_revoked(jti):
            await self.create(JwtDenylist(jti=jti, exp=exp))

    async def purge_expired(self, now: datetime) -> int:
        result = await self.session.execute(delete(JwtDenylist).where(JwtDenylist.exp < now))
        return result.rowcount or 0

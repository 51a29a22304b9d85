"""
Comment repository.

Top-level listings and reply previews exclude soft-deleted comments.
"""

from __future__ import annotations

import uuid
from collections import defaultdict
from typing import Dict, Iterable, List

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.comments import Comment
from .base import AsyncBaseRepository


class CommentRepository(AsyncBaseRepository[Comment]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Comment)

    def top_level(self, gif_id: uuid.UUID):
        return (
            select(Comment)
            .where(
                (Comment.gif_id == gif_id)
                & (Comment.parent_comment_id.is_(None))
                & (Comment.deleted_at.is_(None))
            )
            .order_by(Comment.created_at.desc())
        )

    async def latest_replies(self, parent_ids: Iterable[uuid.UUID], per_parent: int = 3) -> Dict[uuid.UUID, List[Comment]]:
        """Newest ``per_parent`` live replies of each parent comment."""
        ids = list(parent_ids)
        if not ids:
            return {}
        stmt = (
            select(Comment)
            .where((Comment.parent_comment_id.in_(ids)) & (Comment.deleted_at.is_(None)))
            .order_by(Comment.created_at.desc())
        )
        result = await self.session.execute(stmt)
        grouped: Dict[uuid.UUID, List[Comment]] = defaultdict(list)
        for reply in result.scalars().all():
            if len(grouped[reply.parent_comment_id]) < per_parent:
                grouped[reply.parent_comment_id].append(reply)
        return grouped

    async def by_user(self, user_id: uuid.UUID) -> List[Comment]:
        result = await self.session.execute(select(Comment).where(Comment.user_id == user_id))
        return list(result.scalars().all())

    async def for_gifs(self, gif_ids: Iterable[uuid.UUID]) -> List[Comment]:
        ids = list(gif_ids)
        if not ids:
            return []
        result = await self.session.execute(select(Comment).where(Comment.gif_id.in_(ids)))
        return list(result.scalars().all())

    async def replies_to(self, parent_ids: Iterable[uuid.UUID]) -> List[Comment]:
        ids = list(parent_ids)
        if not ids:
            return []
        result = await self.session.execute(select(Comment).where(Comment.parent_comment_id.in_(ids)))
        return list(result.scalars().all())

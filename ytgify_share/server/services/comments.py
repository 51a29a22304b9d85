"""
Comment service.

Comments are threaded one level deep through ``parent_comment_id``.
Deleting a comment is a soft delete: its content becomes ``[deleted]`` and
the GIF's ``comment_count`` and the parent's ``reply_count`` go down by one.
"""

from __future__ import annotations

import uuid
from typing import List, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from ytgify_share.core.database.base import utc_now
from ytgify_share.core.database.entities.comments import DELETED_CONTENT, Comment
from ytgify_share.core.database.entities.notifications import NotificationAction
from ytgify_share.core.database.entities.users import User
from ytgify_share.core.database.repositories.comments import CommentRepository
from ytgify_share.core.database.repositories.gifs import GifRepository
from ytgify_share.core.errors import NotFoundError, PermissionDeniedError, ValidationFailedError
from ytgify_share.core.logging_config import get_logger
from ytgify_share.core.models.io.comments import CommentCreate, CommentUpdate
from ytgify_share.server.services.gifs import GifService
from ytgify_share.server.services.notifications import NotificationService
from ytgify_share.server.services.pagination import PageParams

logger = get_logger(__name__)


class CommentService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.comments = CommentRepository(session)
        self.gifs = GifRepository(session)

    async def _gif(self, gif_id: uuid.UUID, viewer):
        gif = await self.gifs.get_live(gif_id)
        if gif is None or not GifService.can_view(gif, viewer):
            raise NotFoundError("GIF not found")
        return gif

    async def _owned(self, comment_id: uuid.UUID, user: User) -> Comment:
        comment = await self.comments.get_by_id(comment_id)
        if comment is None or comment.is_deleted:
            raise NotFoundError("Comment not found")
        if comment.user_id != user.id:
            raise PermissionDeniedError()
        return comment

    async def list_for_gif(self, gif_id: uuid.UUID, viewer, page: PageParams) -> Tuple[List[Comment], int]:
        gif = await self._gif(gif_id, viewer)
        stmt = self.comments.top_level(gif.id)
        return await self.comments.paginate(stmt, page.per_page, page.offset), await self.comments.count(stmt)

    async def create(self, gif_id: uuid.UUID, user: User, data: CommentCreate) -> Comment:
        gif = await self._gif(gif_id, user)
        parent_id = data.parent_comment_id
        if parent_id is not None:
            parent = await self.comments.get_by_id(parent_id)
            if parent is None or parent.gif_id != gif.id or parent.is_deleted:
                raise ValidationFailedError(
                    "Comment creation failed", details=["Parent comment must belong to the same GIF"]
                )
            # replies to replies join the top-level thread
            parent_id = parent.parent_comment_id or parent.id

        comment = await self.comments.create(
            Comment(
                user_id=user.id,
                gif_id=gif.id,
                parent_comment_id=parent_id,
                content=data.content.strip(),
            )
        )
        await self.gifs.increment(gif.id, "comment_count", 1)
        if comment.parent_comment_id is not None:
            await self.comments.increment(comment.parent_comment_id, "reply_count", 1)
        await NotificationService(self.session).notify(
            gif.user_id, user, NotificationAction.COMMENT, "Comment", comment.id
        )
        await self.session.commit()
        logger.debug(f"User {user.id} commented on GIF {gif.id}")
        return comment

    async def update(self, comment_id: uuid.UUID, user: User, data: CommentUpdate) -> Comment:
        comment = await self._owned(comment_id, user)
        comment.content = data.content.strip()
        comment.updated_at = utc_now()
        await self.comments.update(comment)
        await self.session.commit()
        return comment

    async def soft_delete(self, comment_id: uuid.UUID, user: User) -> None:
        comment = await self._owned(comment_id, user)
        comment.deleted_at = utc_now()
        comment.content = DELETED_CONTENT
        await self.comments.update(comment)
        await self.gifs.increment(comment.gif_id, "comment_count", -1)
        if comment.parent_comment_id is not None:
            await self.comments.increment(comment.parent_comment_id, "reply_count", -1)
        await self.session.commit()
        logger.debug(f"User {user.id} deleted comment {comment.id}")

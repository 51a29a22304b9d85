"""
Response presenters.

Turn entities into I/O models. Related users, hashtag names and like state
are loaded in one query per relation for a whole page of records.
"""

from __future__ import annotations

import uuid
from typing import Dict, Iterable, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ytgify_share.core.database.entities.collections import Collection
from ytgify_share.core.database.entities.comments import Comment
from ytgify_share.core.database.entities.gifs import Gif
from ytgify_share.core.database.entities.notifications import Notification
from ytgify_share.core.database.entities.users import User
from ytgify_share.core.database.repositories.comments import CommentRepository
from ytgify_share.core.database.repositories.hashtags import HashtagRepository
from ytgify_share.core.database.repositories.likes import LikeRepository
from ytgify_share.core.database.repositories.users import UserRepository
from ytgify_share.core.models.io.collections import CollectionRead
from ytgify_share.core.models.io.comments import CommentRead
from ytgify_share.core.models.io.common import UserSummary
from ytgify_share.core.models.io.gifs import GifDetail, GifRead
from ytgify_share.core.models.io.notifications import NotificationRead
from ytgify_share.core.storage import LocalFileStorage
from ytgify_share.server.core.config import settings

NOTIFICATION_MESSAGES = {
    "like": "liked your GIF",
    "comment": "commented on your GIF",
    "follow": "started following you",
    "collection_add": "added your GIF to their collection",
    "remix": "remixed your GIF",
}


def public_gif_url(gif_id: uuid.UUID) -> str:
    return f"{settings.public_base_url.rstrip('/')}/gifs/{gif_id}"


def summarize(user: Optional[User]) -> Optional[UserSummary]:
    return UserSummary.model_validate(user) if user is not None else None


def notification_message(actor: Optional[User], action: str) -> str:
    name = actor.username if actor is not None else "Someone"
    return f"{name} {NOTIFICATION_MESSAGES.get(action, action)}"


class Presenter:
    """Batch serializer bound to a request session and storage backend."""

    def __init__(self, session: AsyncSession, storage: LocalFileStorage):
        self.session = session
        self.storage = storage
        self.users = UserRepository(session)

    async def _users(self, ids: Iterable[uuid.UUID]) -> Dict[uuid.UUID, User]:
        return await self.users.get_many(ids)

    def _gif_fields(self, gif: Gif) -> dict:
        data = gif.model_dump(exclude={"file_key", "composite_file_key", "thumbnail_key", "deleted_at"})
        data["file_url"] = self.storage.url(gif.file_key)
        data["composite_file_url"] = self.storage.url(gif.composite_file_key)
        data["thumbnail_url"] = self.storage.url(gif.thumbnail_key)
        return data

    async def gifs(self, gifs: List[Gif]) -> List[GifRead]:
        ids = [g.id for g in gifs]
        owners = await self._users(g.user_id for g in gifs)
        names = await HashtagRepository(self.session).names_for_gifs(ids)
        return [
            GifRead(
                **self._gif_fields(g),
                hashtag_names=names.get(g.id, []),
                user=summarize(owners.get(g.user_id)),
            )
            for g in gifs
        ]

    async def gif_detail(self, gif: Gif, viewer: Optional[User] = None) -> GifDetail:
        owner = await self.users.get_by_id(gif.user_id)
        names = await HashtagRepository(self.session).names_for_gifs([gif.id])
        liked = False
        if viewer is not None:
            liked = gif.id in await LikeRepository(self.session).liked_gif_ids(viewer.id, [gif.id])
        return GifDetail(
            **self._gif_fields(gif),
            hashtag_names=names.get(gif.id, []),
            user=summarize(owner),
            liked_by_current_user=liked,
            public_url=public_gif_url(gif.id),
        )

    async def comments(self, comments: List[Comment], with_replies: bool = False) -> List[CommentRead]:
        replies: Dict[uuid.UUID, List[Comment]] = {}
        if with_replies:
            replies = await CommentRepository(self.session).latest_replies([c.id for c in comments])
        everyone = list(comments) + [r for group in replies.values() for r in group]
        authors = await self._users(c.user_id for c in everyone)

        def build(comment: Comment, nested: Optional[List[CommentRead]] = None) -> CommentRead:
            return CommentRead(
                id=comment.id,
                gif_id=comment.gif_id,
                parent_comment_id=comment.parent_comment_id,
                content=comment.content,
                reply_count=comment.reply_count,
                like_count=comment.like_count,
                is_deleted=comment.is_deleted,
                created_at=comment.created_at,
                updated_at=comment.updated_at,
                user=summarize(authors.get(comment.user_id)),
                replies=nested,
            )

        return [
            build(c, [build(r) for r in replies.get(c.id, [])] if with_replies else None) for c in comments
        ]

    async def comment(self, comment: Comment) -> CommentRead:
        return (await self.comments([comment]))[0]

    async def collections(self, collections: List[Collection]) -> List[CollectionRead]:
        owners = await self._users(c.user_id for c in collections)
        return [
            CollectionRead(
                id=c.id,
                name=c.name,
                description=c.description,
                is_public=c.is_public,
                gifs_count=c.gifs_count,
                created_at=c.created_at,
                updated_at=c.updated_at,
                user=summarize(owners.get(c.user_id)),
            )
            for c in collections
        ]

    async def collection(self, collection: Collection) -> CollectionRead:
        return (await self.collections([collection]))[0]

    async def notifications(self, notifications: List[Notification]) -> List[NotificationRead]:
        actors = await self._users(n.actor_id for n in notifications)
        return [
            NotificationRead(
                id=n.id,
                action=n.action,
                message=notification_message(actors.get(n.actor_id), n.action),
                notifiable_type=n.notifiable_type,
                notifiable_id=n.notifiable_id,
                data=n.data or {},
                read=n.is_read,
                read_at=n.read_at,
                created_at=n.created_at,
                actor=summarize(actors.get(n.actor_id)),
            )
            for n in notifications
        ]

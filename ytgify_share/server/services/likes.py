"""Like toggling. Keeps ``Gif.like_count`` and the owner's ``total_likes_received`` in step."""

from __future__ import annotations

import uuid
from typing import Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from ytgify_share.core.cache import TTLCache
from ytgify_share.core.database.entities.gifs import Gif
from ytgify_share.core.database.entities.likes import Like
from ytgify_share.core.database.entities.notifications import NotificationAction
from ytgify_share.core.database.entities.users import User
from ytgify_share.core.database.repositories.gifs import GifRepository
from ytgify_share.core.database.repositories.likes import LikeRepository
from ytgify_share.core.database.repositories.users import UserRepository
from ytgify_share.core.errors import NotFoundError
from ytgify_share.core.logging_config import get_logger
from ytgify_share.server.services.gifs import GifService
from ytgify_share.server.services.notifications import NotificationService

logger = get_logger(__name__)


class LikeService:
    def __init__(self, session: AsyncSession, cache: TTLCache):
        self.session = session
        self.cache = cache
        self.likes = LikeRepository(session)
        self.gifs = GifRepository(session)
        self.users = UserRepository(session)

    async def _visible_gif(self, gif_id: uuid.UUID, user: User) -> Gif:
        gif = await self.gifs.get_live(gif_id)
        if gif is None:
            raise NotFoundError("GIF not found")
        if not GifService.can_view(gif, user):
            raise NotFoundError("GIF not found")
        return gif

    async def toggle(self, gif_id: uuid.UUID, user: User) -> Tuple[bool, int]:
        """
        Like the GIF, or remove the like when one exists.

        Returns:
            Whether the GIF is now liked and its like count
        """
        gif = await self._visible_gif(gif_id, user)
        existing = await self.likes.find(user.id, gif.id)
        if existing is not None:
            await self._remove(gif, existing)
            return False, gif.like_count

        like = await self.likes.create(Like(user_id=user.id, gif_id=gif.id))
        await self.gifs.increment(gif.id, "like_count", 1)
        await self.users.increment(gif.user_id, "total_likes_received", 1)
        await NotificationService(self.session).notify(gif.user_id, user, NotificationAction.LIKE, "Like", like.id)
        await self.session.commit()
        logger.debug(f"User {user.id} liked GIF {gif.id}")
        return True, gif.like_count

    async def unlike(self, gif_id: uuid.UUID, user: User) -> int:
        gif = await self._visible_gif(gif_id, user)
        existing: Optional[Like] = await self.likes.find(user.id, gif.id)
        if existing is None:
            raise NotFoundError("Like not found")
        await self._remove(gif, existing)
        return gif.like_count

    async def _remove(self, gif: Gif, like: Like) -> None:
        await self.likes.delete(like)
        await self.gifs.increment(gif.id, "like_count", -1)
        await self.users.increment(gif.user_id, "total_likes_received", -1)
        await self.session.commit()
        logger.debug(f"User {like.user_id} unliked GIF {gif.id}")

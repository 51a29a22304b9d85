"""Follow toggling and follower/following listings."""

from __future__ import annotations

from typing import List, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from ytgify_share.core.database.entities.follows import Follow
from ytgify_share.core.database.entities.notifications import NotificationAction
from ytgify_share.core.database.entities.users import User
from ytgify_share.core.database.repositories.follows import FollowRepository
from ytgify_share.core.database.repositories.users import UserRepository
from ytgify_share.core.errors import ValidationFailedError
from ytgify_share.core.logging_config import get_logger
from ytgify_share.server.services.notifications import NotificationService
from ytgify_share.server.services.pagination import PageParams

logger = get_logger(__name__)


class FollowService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.follows = FollowRepository(session)
        self.users = UserRepository(session)

    async def toggle(self, follower: User, target: User) -> bool:
        """
        Follow ``target``, or unfollow when already following.

        Returns:
            Whether ``follower`` now follows ``target``

        Raises:
            ValidationFailedError: ``follower`` and ``target`` are the same user
        """
        if follower.id == target.id:
            raise ValidationFailedError("Cannot follow yourself")

        existing = await self.follows.find(follower.id, target.id)
        if existing is not None:
            await self.follows.delete(existing)
            await self.users.increment(follower.id, "following_count", -1)
            await self.users.increment(target.id, "follower_count", -1)
            await self.session.commit()
            logger.debug(f"User {follower.id} unfollowed {target.id}")
            return False

        follow = await self.follows.create(Follow(follower_id=follower.id, following_id=target.id))
        await self.users.increment(follower.id, "following_count", 1)
        await self.users.increment(target.id, "follower_count", 1)
        await NotificationService(self.session).notify(
            target.id, follower, NotificationAction.FOLLOW, "Follow", follow.id
        )
        await self.session.commit()
        logger.debug(f"User {follower.id} followed {target.id}")
        return True

    async def is_following(self, follower: User, target: User) -> bool:
        return await self.follows.find(follower.id, target.id) is not None

    async def followers(self, user: User, page: PageParams) -> Tuple[List[User], int]:
        stmt = self.follows.followers_of(user.id)
        return await self.users.paginate(stmt, page.per_page, page.offset), await self.users.count(stmt)

    async def following(self, user: User, page: PageParams) -> Tuple[List[User], int]:
        stmt = self.follows.followed_by(user.id)
        return await self.users.paginate(stmt, page.per_page, page.offset), await self.users.count(stmt)

"""
User service.

Profiles, account updates, upload preferences, tag suggestions and GDPR
account deletion.
"""

from __future__ import annotations

import uuid
from typing import Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ytgify_share.core.cache import TTLCache, invalidate_gif_caches, invalidate_hashtag_caches
from ytgify_share.core.database.base import utc_now
from ytgify_share.core.database.entities.users import MAX_RECENT_TAGS, User
from ytgify_share.core.database.repositories.collections import CollectionRepository
from ytgify_share.core.database.repositories.comments import CommentRepository
from ytgify_share.core.database.repositories.follows import FollowRepository
from ytgify_share.core.database.repositories.gifs import GifRepository
from ytgify_share.core.database.repositories.hashtags import HashtagRepository
from ytgify_share.core.database.repositories.likes import LikeRepository
from ytgify_share.core.database.repositories.notifications import NotificationRepository
from ytgify_share.core.database.repositories.users import UserRepository
from ytgify_share.core.database.repositories.view_events import ViewEventRepository
from ytgify_share.core.errors import AuthenticationError, NotFoundError, ValidationFailedError
from ytgify_share.core.logging_config import get_logger
from ytgify_share.core.models.io.users import Preferences, PreferencesUpdate, UserUpdate
from ytgify_share.core.security import hash_password, verify_password
from ytgify_share.core.storage import LocalFileStorage
from ytgify_share.server.services.hashtags import unique_names

logger = get_logger(__name__)


class UserService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.users = UserRepository(session)

    async def find(self, identifier: str) -> User:
        """Look a user up by id or by username."""
        user: Optional[User] = None
        try:
            user = await self.users.get_by_id(uuid.UUID(str(identifier)))
        except ValueError:
            pass
        if user is None:
            user = await self.users.get_by_username(str(identifier))
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def update_profile(self, user: User, data: UserUpdate) -> User:
        """
        Apply profile changes.

        Changing ``email`` or ``password`` requires ``current_password`` and
        rotates the session key, which revokes every issued token.
        """
        changes = data.model_dump(exclude_unset=True, exclude={"current_password"})
        email = changes.pop("email", None)
        password = changes.pop("password", None)
        username = changes.pop("username", None)

        security_change = (email is not None and email.lower() != user.email.lower()) or password is not None
        if security_change and not verify_password(data.current_password or "", user.password_hash):
            raise AuthenticationError("Current password is incorrect")

        errors = []
        if email is not None and await self.users.email_taken(email, exclude_id=user.id):
            errors.append("Email has already been taken")
        if username is not None and await self.users.username_taken(username, exclude_id=user.id):
            errors.append("Username has already been taken")
        if errors:
            raise ValidationFailedError("Update failed", details=errors)

        for field, value in changes.items():
            setattr(user, field, value)
        if username is not None:
            user.username = username
        if email is not None:
            user.email = email.lower()
        if password is not None:
            user.password_hash = hash_password(password)
        if security_change:
            user.rotate_jti()
            logger.info(f"Rotated session key of user {user.id} after credential change")
        user.updated_at = utc_now()
        await self.users.update(user)
        await self.session.commit()
        return user

    # ------------------------------------------------------------------
    # Preferences and tags
    # ------------------------------------------------------------------

    @staticmethod
    def preferences(user: User) -> Preferences:
        return Preferences(
            default_privacy=user.default_privacy,
            default_upload_behavior=user.default_upload_behavior,
            recently_used_tags=user.recently_used_tags,
        )

    async def update_preferences(self, user: User, data: PreferencesUpdate) -> Preferences:
        prefs = dict(user.preferences or {})
        changes = data.model_dump(exclude_unset=True)
        for key, value in changes.items():
            if value is None:
                continue
            if key == "recently_used_tags":
                value = unique_names(value)[:MAX_RECENT_TAGS]
            prefs[key] = value
        user.preferences = prefs
        await self.users.update(user)
        await self.session.commit()
        return self.preferences(user)

    async def popular_tags(self, limit: int) -> List[Dict[str, object]]:
        hashtags = HashtagRepository(self.session)
        rows = await hashtags.paginate(hashtags.trending(), min(max(limit, 1), 100), 0)
        return [{"name": h.name, "count": h.usage_count} for h in rows]

    # ------------------------------------------------------------------
    # GDPR deletion
    # ------------------------------------------------------------------

    async def delete_account(self, user: User, storage: LocalFileStorage, cache: TTLCache) -> None:
        """
        Permanently delete a user and everything they own.

        Other users' counters are corrected for the removed likes, comments,
        follows and collection entries, and remixes of the user's GIFs lose
        their parent link.
        """
        session = self.session
        gifs = GifRepository(session)
        likes = LikeRepository(session)
        comments = CommentRepository(session)
        follows = FollowRepository(session)
        collections = CollectionRepository(session)
        hashtags = HashtagRepository(session)

        own_gifs = await gifs.owned_by(user.id, include_deleted=True)
        gif_ids = [g.id for g in own_gifs]
        own = set(gif_ids)

        # Likes given by the user and received on the user's GIFs
        given = await likes.by_user(user.id)
        for like in given:
            if like.gif_id not in own:
                gif = await gifs.get_by_id(like.gif_id)
                if gif is not None:
                    await gifs.increment(gif.id, "like_count", -1)
                    await self.users.increment(gif.user_id, "total_likes_received", -1)
        received = await likes.for_gifs(gif_ids)
        await likes.delete_ids([like.id for like in given + received])

        # Comments by the user, on the user's GIFs, and replies to either
        doomed = {c.id: c for c in await comments.by_user(user.id) + await comments.for_gifs(gif_ids)}
        for reply in await comments.replies_to(list(doomed)):
            doomed.setdefault(reply.id, reply)
        for comment in doomed.values():
            if comment.is_deleted:
                continue
            if comment.gif_id not in own:
                await gifs.increment(comment.gif_id, "comment_count", -1)
            if comment.parent_comment_id is not None and comment.parent_comment_id not in doomed:
                await comments.increment(comment.parent_comment_id, "reply_count", -1)
        replies = [c.id for c in doomed.values() if c.parent_comment_id is not None]
        await comments.delete_ids(replies)
        await comments.delete_ids([cid for cid in doomed if cid not in set(replies)])

        # Follows in both directions
        relations = await follows.involving(user.id)
        for follow in relations:
            if follow.follower_id == user.id:
                await self.users.increment(follow.following_id, "follower_count", -1)
            else:
                await self.users.increment(follow.follower_id, "following_count", -1)
        await follows.delete_ids([f.id for f in relations])

        # Collections owned by the user and entries of the user's GIFs elsewhere
        own_collections = await collections.paginate(collections.for_user(user.id), None, None)
        own_collection_ids = {c.id for c in own_collections}
        links = []
        for collection in own_collections:
            links.extend(await collections.links(collection.id))
        for link in await collections.links_for_gifs(gif_ids):
            if link.collection_id not in own_collection_ids:
                await collections.increment(link.collection_id, "gifs_count", -1)
            links.append(link)
        await collections.delete_links(list({link.id for link in links}))
        await collections.delete_ids(own_collection_ids)

        # Hashtag links, notifications and view history
        for gif in own_gifs:
            if not gif.is_deleted:
                for link in await hashtags.links_for_gif(gif.id):
                    await hashtags.increment(link.hashtag_id, "usage_count", -1)
        await hashtags.delete_links_for_gifs(gif_ids)

        notifications = NotificationRepository(session)
        await notifications.delete_ids([n.id for n in await notifications.involving(user.id)])

        views = ViewEventRepository(session)
        await views.delete_by_viewer(user.id)
        await views.delete_for_gifs(gif_ids)

        # Remix links
        for gif in own_gifs:
            if gif.parent_gif_id is not None and gif.parent_gif_id not in own and not gif.is_deleted:
                await gifs.increment(gif.parent_gif_id, "remix_count", -1)
        for child in await gifs.children_of(gif_ids):
            child.parent_gif_id = None
            session.add(child)
        await session.flush()

        await gifs.delete_ids(gif_ids)
        await self.users.delete_ids([user.id])
        await session.commit()

        for gif in own_gifs:
            storage.delete(gif.file_key)
            storage.delete(gif.composite_file_key)
            storage.delete(gif.thumbnail_key)
        await invalidate_gif_caches(cache)
        await invalidate_hashtag_caches(cache)
        logger.info(f"Deleted account {user.id} with {len(gif_ids)} GIFs")

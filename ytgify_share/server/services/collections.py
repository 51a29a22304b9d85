"""
Collection service.

Users group GIFs into named collections (unique per owner, case-insensitive).
GIFs keep an explicit ``position``; new GIFs go after the current last one.
Private collections are visible to their owner only.
"""

from __future__ import annotations

import uuid
from typing import List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from ytgify_share.core.database.base import utc_now
from ytgify_share.core.database.entities.collections import Collection, CollectionGif
from ytgify_share.core.database.entities.gifs import Gif
from ytgify_share.core.database.entities.notifications import NotificationAction
from ytgify_share.core.database.entities.users import User
from ytgify_share.core.database.repositories.collections import CollectionRepository
from ytgify_share.core.database.repositories.gifs import GifRepository
from ytgify_share.core.errors import NotFoundError, PermissionDeniedError, ValidationFailedError
from ytgify_share.core.logging_config import get_logger
from ytgify_share.core.models.io.collections import CollectionCreate, CollectionUpdate
from ytgify_share.server.services.gifs import GifService
from ytgify_share.server.services.notifications import NotificationService
from ytgify_share.server.services.pagination import PageParams

logger = get_logger(__name__)


class CollectionService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.collections = CollectionRepository(session)
        self.gifs = GifRepository(session)

    @staticmethod
    def visible_to(collection: Collection, viewer: Optional[User]) -> bool:
        return collection.is_public or (viewer is not None and viewer.id == collection.user_id)

    async def get(self, collection_id: uuid.UUID) -> Collection:
        collection = await self.collections.get_by_id(collection_id)
        if collection is None:
            raise NotFoundError("Collection not found")
        return collection

    async def get_visible(self, collection_id: uuid.UUID, viewer: Optional[User]) -> Collection:
        collection = await self.get(collection_id)
        if not self.visible_to(collection, viewer):
            raise PermissionDeniedError("This collection is private")
        return collection

    async def get_owned(self, collection_id: uuid.UUID, user: User) -> Collection:
        collection = await self.get(collection_id)
        if collection.user_id != user.id:
            raise PermissionDeniedError()
        return collection

    async def list_for(self, owner: User, viewer: Optional[User], page: PageParams) -> Tuple[List[Collection], int]:
        """Collections of ``owner``; other viewers only see the public ones."""
        public_only = viewer is None or viewer.id != owner.id
        stmt = self.collections.for_user(owner.id, public_only=public_only)
        return await self.collections.paginate(stmt, page.per_page, page.offset), await self.collections.count(stmt)

    async def gifs_of(self, collection: Collection, viewer: Optional[User], page: PageParams) -> Tuple[List[Gif], int]:
        stmt = self.collections.gifs_in(collection.id, viewer.id if viewer is not None else None)
        return await self.gifs.paginate(stmt, page.per_page, page.offset), await self.gifs.count(stmt)

    async def _check_name(
        self, user: User, name: str, exclude_id: Optional[uuid.UUID] = None, message: str = "Collection creation failed"
    ) -> None:
        existing = await self.collections.get_by_name(user.id, name)
        if existing is not None and existing.id != exclude_id:
            raise ValidationFailedError(message, details=["Name has already been taken"])

    async def create(self, user: User, data: CollectionCreate) -> Collection:
        await self._check_name(user, data.name)
        collection = await self.collections.create(
            Collection(user_id=user.id, name=data.name, description=data.description, is_public=data.is_public)
        )
        await self.session.commit()
        logger.debug(f"User {user.id} created collection {collection.id}")
        return collection

    async def update(self, collection_id: uuid.UUID, user: User, data: CollectionUpdate) -> Collection:
        collection = await self.get_owned(collection_id, user)
        changes = data.model_dump(exclude_unset=True)
        if changes.get("name") is not None:
            await self._check_name(user, changes["name"], exclude_id=collection.id, message="Collection update failed")
        for field, value in changes.items():
            if field == "name" and value is None:
                continue
            setattr(collection, field, value)
        collection.updated_at = utc_now()
        await self.collections.update(collection)
        await self.session.commit()
        return collection

    async def delete(self, collection_id: uuid.UUID, user: User) -> None:
        collection = await self.get_owned(collection_id, user)
        for link in await self.collections.links(collection.id):
            await self.session.delete(link)
        await self.session.flush()
        await self.collections.delete(collection)
        await self.session.commit()

    async def add_gif(self, collection_id: uuid.UUID, user: User, gif_id: uuid.UUID) -> Collection:
        """
        Append a GIF to the caller's collection and notify the GIF's owner.

        Raises:
            ValidationFailedError: The GIF is already in the collection
        """
        collection = await self.get_owned(collection_id, user)
        gif = await self.gifs.get_live(gif_id)
        if gif is None or not GifService.can_view(gif, user):
            raise NotFoundError("GIF not found")
        if await self.collections.find_link(collection.id, gif.id) is not None:
            raise ValidationFailedError("GIF is already in this collection")

        position = await self.collections.next_position(collection.id)
        link = CollectionGif(collection_id=collection.id, gif_id=gif.id, position=position)
        self.session.add(link)
        await self.session.flush()
        await self.collections.increment(collection.id, "gifs_count", 1)
        await NotificationService(self.session).notify(
            gif.user_id,
            user,
            NotificationAction.COLLECTION_ADD,
            "CollectionGif",
            link.id,
            {"collection_name": collection.name},
        )
        await self.session.commit()
        return collection

    async def remove_gif(self, collection_id: uuid.UUID, user: User, gif_id: uuid.UUID) -> Collection:
        collection = await self.get_owned(collection_id, user)
        link = await self.collections.find_link(collection.id, gif_id)
        if link is None:
            raise NotFoundError("GIF is not in this collection")
        await self.session.delete(link)
        await self.session.flush()
        await self.collections.increment(collection.id, "gifs_count", -1)
        await self.session.commit()
        return collection

    async def reorder(self, collection_id: uuid.UUID, user: User, gif_ids: List[uuid.UUID]) -> Collection:
        """Give each listed GIF its index as position; unknown ids are ignored."""
        collection = await self.get_owned(collection_id, user)
        links = {link.gif_id: link for link in await self.collections.links(collection.id)}
        for index, gif_id in enumerate(gif_ids):
            link = links.get(gif_id)
            if link is not None:
                link.position = index
                self.session.add(link)
        await self.session.commit()
        return collection

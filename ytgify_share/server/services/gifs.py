"""
GIF service.

Listing, visibility checks, upload, update, soft delete, remixing, sharing
and analytics of GIFs.

Visibility:
- public and unlisted GIFs can be opened by anyone holding the id,
- private GIFs only by their owner (403 for anyone else),
- soft-deleted GIFs do not exist for readers (404).
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from ytgify_share.core.cache import TTLCache, invalidate_gif_caches
from ytgify_share.core.database.base import utc_now
from ytgify_share.core.database.entities.gifs import Gif, Privacy
from ytgify_share.core.database.entities.notifications import NotificationAction
from ytgify_share.core.database.entities.users import User
from ytgify_share.core.database.repositories.gifs import GifRepository
from ytgify_share.core.database.repositories.users import UserRepository
from ytgify_share.core.errors import NotFoundError, PermissionDeniedError, UploadError
from ytgify_share.core.logging_config import get_logger
from ytgify_share.core.models.io.gifs import GifAnalytics, GifUpdate
from ytgify_share.core.monitoring import log_upload
from ytgify_share.core.storage import LocalFileStorage
from ytgify_share.server.services.hashtags import HashtagService, parse_hashtags
from ytgify_share.server.services.notifications import NotificationService
from ytgify_share.server.services.pagination import PageParams
from ytgify_share.server.services.uploads import ParsedUpload, read_gif_file
from ytgify_share.server.services.views import ViewTracker

logger = get_logger(__name__)

OVERLAY_DEFAULTS: Dict[str, Any] = {
    "text": "",
    "font_family": "Arial",
    "font_size": 48,
    "font_weight": "bold",
    "color": "#ffffff",
    "outline_color": "#000000",
    "outline_width": 2,
    "position": {"x": 0.5, "y": 0.9},
}


def _clamp(value: Any, low: float, high: float, default: float, cast=float):
    try:
        number = cast(value)
    except (TypeError, ValueError):
        number = default
    return max(low, min(high, number))


def normalize_remix_overlay(data: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Fill overlay defaults and clamp sizes and relative positions."""
    if not data:
        return {}
    position = data.get("position") if isinstance(data.get("position"), dict) else {}
    return {
        "text": str(data.get("text") or "").strip(),
        "font_family": data.get("font_family") or OVERLAY_DEFAULTS["font_family"],
        "font_size": _clamp(data.get("font_size", 48), 12, 120, 48, int),
        "font_weight": data.get("font_weight") or OVERLAY_DEFAULTS["font_weight"],
        "color": data.get("color") or OVERLAY_DEFAULTS["color"],
        "outline_color": data.get("outline_color") or OVERLAY_DEFAULTS["outline_color"],
        "outline_width": _clamp(data.get("outline_width", 2), 0, 10, 2, int),
        "position": {
            "x": _clamp(position.get("x", 0.5), 0, 1, 0.5),
            "y": _clamp(position.get("y", 0.9), 0, 1, 0.9),
        },
    }


@dataclass
class RequestInfo:
    """Client details recorded with a view."""

    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    referer: Optional[str] = None


class GifService:
    def __init__(self, session: AsyncSession, cache: TTLCache, storage: LocalFileStorage):
        self.session = session
        self.cache = cache
        self.storage = storage
        self.gifs = GifRepository(session)
        self.users = UserRepository(session)
        self.hashtags = HashtagService(session, cache)
        self.notifications = NotificationService(session)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    @staticmethod
    def can_view(gif: Gif, viewer: Optional[User]) -> bool:
        if gif.privacy != Privacy.PRIVATE.value:
            return True
        return viewer is not None and viewer.id == gif.user_id

    async def get_visible(self, gif_id: uuid.UUID, viewer: Optional[User]) -> Gif:
        gif = await self.gifs.get_live(gif_id)
        if gif is None:
            raise NotFoundError("GIF not found")
        if not self.can_view(gif, viewer):
            raise PermissionDeniedError("This GIF is private")
        return gif

    async def get_owned(self, gif_id: uuid.UUID, user: User) -> Gif:
        gif = await self.gifs.get_live(gif_id)
        if gif is None:
            raise NotFoundError("GIF not found")
        if gif.user_id != user.id:
            raise PermissionDeniedError()
        return gif

    async def list_public(
        self, page: PageParams, user_id: Optional[uuid.UUID] = None, kind: Optional[str] = None
    ) -> Tuple[List[Gif], int]:
        stmt = self.gifs.public_listing(user_id=user_id, kind=kind)
        return await self.gifs.paginate(stmt, page.per_page, page.offset), await self.gifs.count(stmt)

    async def show(self, gif_id: uuid.UUID, viewer: Optional[User], info: Optional[RequestInfo] = None) -> Gif:
        """Load a visible GIF and record a view unless the owner is looking."""
        gif = await self.get_visible(gif_id, viewer)
        if viewer is None or viewer.id != gif.user_id:
            info = info or RequestInfo()
            await ViewTracker(self.session).record(gif, viewer, info.ip_address, info.user_agent, info.referer)
            await self.session.commit()
        return gif

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def _store_files(self, gif: Gif, upload: ParsedUpload) -> None:
        if upload.file is None:
            raise UploadError("file is required")
        data = await read_gif_file(upload.file, "file")
        gif.file_key = self.storage.save(self.storage.new_key("gifs", "gif"), data)
        gif.file_size = len(data)
        if upload.composite_file is not None:
            composite = await read_gif_file(upload.composite_file, "composite_file")
            gif.composite_file_key = self.storage.save(self.storage.new_key("gifs/composite", "gif"), composite)

    async def create(self, user: User, upload: ParsedUpload) -> Gif:
        """
        Store an uploaded GIF and its metadata.

        Privacy defaults to the owner's ``default_privacy``. ``#word`` tags in
        the description join the submitted tags, and every tag used is pushed
        to the owner's recently used tags.

        Raises:
            UploadError: Missing or invalid file
        """
        form = upload.form
        gif = Gif(
            user_id=user.id,
            title=form.title,
            description=form.description,
            privacy=form.privacy or user.default_privacy,
            youtube_video_url=form.youtube_video_url,
            youtube_video_title=form.youtube_video_title,
            youtube_channel_name=form.youtube_channel_name,
            youtube_timestamp_start=form.youtube_timestamp_start,
            youtube_timestamp_end=form.youtube_timestamp_end,
            duration=form.computed_duration(),
            fps=form.fps,
            resolution_width=form.resolution_width,
            resolution_height=form.resolution_height,
            text_overlay_data=form.text_overlay_data,
        )
        gif.has_text_overlay = bool(
            form.has_text_overlay or form.text_overlay_data or upload.composite_file is not None
        )
        await self._store_files(gif, upload)
        try:
            return await self._persist_new(user, gif, form.hashtag_names + parse_hashtags(form.description))
        except Exception:
            self.storage.delete(gif.file_key)
            self.storage.delete(gif.composite_file_key)
            raise

    async def _persist_new(self, user: User, gif: Gif, tags: List[str]) -> Gif:
        await self.gifs.create(gif)
        names = await self.hashtags.set_gif_hashtags(gif, tags)
        if names:
            user.add_recent_tags(names)
            await self.users.update(user)
        await self.users.increment(user.id, "gifs_count", 1)
        await self.session.commit()
        await invalidate_gif_caches(self.cache)

        log_upload(str(gif.id), str(user.id), gif.file_size or 0, gif.composite_file_key is not None)
        logger.info(f"User {user.id} uploaded GIF {gif.id} ({gif.file_size} bytes)")
        return gif

    async def update(self, gif_id: uuid.UUID, user: User, data: GifUpdate) -> Gif:
        gif = await self.get_owned(gif_id, user)
        changes = data.model_dump(exclude_unset=True, exclude={"hashtag_names"})
        for field, value in changes.items():
            setattr(gif, field, value)
        gif.updated_at = utc_now()
        await self.gifs.update(gif)
        if data.hashtag_names is not None or "description" in changes:
            names = data.hashtag_names
            if names is None:
                names = (await self.hashtags.hashtags.names_for_gifs([gif.id])).get(gif.id, [])
            await self.hashtags.set_gif_hashtags(gif, list(names) + parse_hashtags(gif.description))
        await self.session.commit()
        await invalidate_gif_caches(self.cache)
        return gif

    async def soft_delete(self, gif_id: uuid.UUID, user: User) -> None:
        """Hide a GIF from every listing and release its hashtags and counters."""
        gif = await self.get_owned(gif_id, user)
        gif.deleted_at = utc_now()
        await self.gifs.update(gif)
        await self.hashtags.release_gif(gif)
        await self.hashtags.delete_links(gif.id)
        await self.users.increment(user.id, "gifs_count", -1)
        await self.users.increment(user.id, "total_likes_received", -gif.like_count)
        await self.session.commit()
        await invalidate_gif_caches(self.cache)
        logger.info(f"User {user.id} deleted GIF {gif.id}")

    async def remix(self, gif_id: uuid.UUID, user: User, upload: ParsedUpload) -> Gif:
        """
        Create a remix of a public (or own) GIF.

        The new GIF records its parent, the parent's ``remix_count`` grows by
        one and the parent's owner is notified.
        """
        source = await self.gifs.get_live(gif_id)
        if source is None:
            raise NotFoundError("GIF not found")
        if not (source.is_public or source.user_id == user.id):
            raise PermissionDeniedError("This GIF cannot be remixed")

        form = upload.form
        overlay = normalize_remix_overlay(form.text_overlay_data)
        remix = Gif(
            user_id=user.id,
            title=form.title or (f"Remix of {source.title}" if source.title else None),
            description=form.description,
            privacy=form.privacy or Privacy.PUBLIC.value,
            youtube_video_url=source.youtube_video_url,
            youtube_video_title=source.youtube_video_title,
            youtube_channel_name=source.youtube_channel_name,
            youtube_timestamp_start=source.youtube_timestamp_start,
            youtube_timestamp_end=source.youtube_timestamp_end,
            is_remix=True,
            parent_gif_id=source.id,
            has_text_overlay=bool(overlay),
            text_overlay_data=overlay or None,
        )
        await self._store_files(remix, upload)
        try:
            await self.gifs.increment(source.id, "remix_count", 1)
            await self.notifications.notify(
                source.user_id, user, NotificationAction.REMIX, "Gif", remix.id, {"source_gif_id": str(source.id)}
            )
            return await self._persist_new(user, remix, form.hashtag_names + parse_hashtags(form.description))
        except Exception:
            self.storage.delete(remix.file_key)
            self.storage.delete(remix.composite_file_key)
            raise

    async def remixes(self, gif_id: uuid.UUID, viewer: Optional[User], page: PageParams) -> Tuple[List[Gif], int]:
        gif = await self.get_visible(gif_id, viewer)
        stmt = self.gifs.remixes_of(gif.id)
        return await self.gifs.paginate(stmt, page.per_page, page.offset), await self.gifs.count(stmt)

    async def share(self, gif_id: uuid.UUID, viewer: Optional[User]) -> Gif:
        gif = await self.get_visible(gif_id, viewer)
        await self.gifs.increment(gif.id, "share_count", 1)
        await self.session.commit()
        return gif

    async def analytics(self, gif_id: uuid.UUID, user: User) -> GifAnalytics:
        gif = await self.get_owned(gif_id, user)
        return await ViewTracker(self.session).analytics(gif)

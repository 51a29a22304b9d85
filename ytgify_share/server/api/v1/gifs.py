"""
GIF Endpoints.

Public listing and detail pages, multipart uploads (including the browser
extension's dual-GIF upload), owner updates and deletion, remixes, sharing
and per-GIF analytics.

Uploaded files are analyzed after the response is sent: ``process_gif`` (or
``process_remix``) runs as a FastAPI background task with its own session.
"""

import uuid
from typing import Literal, Optional

from fastapi import APIRouter, BackgroundTasks, Query, Request

from ytgify_share.core.logging_config import get_logger
from ytgify_share.core.models.io import (
    GifAnalytics,
    GifEnvelope,
    GifListResponse,
    GifMessageEnvelope,
    GifUpdate,
    MessageResponse,
    ShareResponse,
)
from ytgify_share.server.jobs import process_gif, process_remix
from ytgify_share.server.services.deps import (
    CacheDep,
    CurrentUserDep,
    OptionalUserDep,
    PageDep,
    SessionDep,
    SessionFactoryDep,
    StorageDep,
)
from ytgify_share.server.services.gifs import GifService, RequestInfo
from ytgify_share.server.services.presenters import Presenter, public_gif_url
from ytgify_share.server.services.uploads import ParsedUpload, parse_upload_form

logger = get_logger(__name__)
router = APIRouter()


async def _read_upload(request: Request) -> ParsedUpload:
    return parse_upload_form(await request.form())


def _request_info(request: Request) -> RequestInfo:
    return RequestInfo(
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
        referer=request.headers.get("referer"),
    )


@router.get(
    "",
    response_model=GifListResponse,
    summary="List GIFs",
    description="Public GIFs, newest first. Filter by owner with `user_id` and by `type` (original or remix).",
)
async def list_gifs(
    session: SessionDep,
    cache: CacheDep,
    storage: StorageDep,
    page: PageDep,
    user_id: Optional[uuid.UUID] = Query(default=None),
    kind: Optional[Literal["original", "remix"]] = Query(default=None, alias="type"),
):
    gifs, total = await GifService(session, cache, storage).list_public(page, user_id=user_id, kind=kind)
    return GifListResponse(gifs=await Presenter(session, storage).gifs(gifs), pagination=page.meta(total))


@router.post(
    "",
    response_model=GifMessageEnvelope,
    status_code=201,
    summary="Create GIF",
    description="Multipart upload of a GIF file with its metadata.",
)
@router.post(
    "/upload",
    response_model=GifMessageEnvelope,
    status_code=201,
    summary="Upload GIF (extension)",
    description=(
        "Browser extension upload: `file` (required), optional `composite_file` with the overlay baked in, "
        "`overlay` JSON, YouTube metadata and tags."
    ),
)
async def create_gif(
    request: Request,
    user: CurrentUserDep,
    session: SessionDep,
    session_factory: SessionFactoryDep,
    cache: CacheDep,
    storage: StorageDep,
    background_tasks: BackgroundTasks,
):
    upload = await _read_upload(request)
    gif = await GifService(session, cache, storage).create(user, upload)
    background_tasks.add_task(process_gif, session_factory, storage, gif.id)
    detail = await Presenter(session, storage).gif_detail(gif, user)
    return GifMessageEnvelope(message="GIF created successfully", gif=detail)


@router.get(
    "/{gif_id}",
    response_model=GifEnvelope,
    summary="Get GIF",
    description="Detailed GIF. Private GIFs are only visible to their owner. Views by others are recorded.",
)
async def get_gif(
    gif_id: uuid.UUID,
    request: Request,
    viewer: OptionalUserDep,
    session: SessionDep,
    cache: CacheDep,
    storage: StorageDep,
):
    gif = await GifService(session, cache, storage).show(gif_id, viewer, _request_info(request))
    return GifEnvelope(gif=await Presenter(session, storage).gif_detail(gif, viewer))


@router.patch(
    "/{gif_id}",
    response_model=GifMessageEnvelope,
    summary="Update GIF",
    description="Owner only. Title, description, privacy, overlay and hashtags.",
)
@router.put("/{gif_id}", response_model=GifMessageEnvelope, include_in_schema=False)
async def update_gif(
    gif_id: uuid.UUID,
    data: GifUpdate,
    user: CurrentUserDep,
    session: SessionDep,
    cache: CacheDep,
    storage: StorageDep,
):
    gif = await GifService(session, cache, storage).update(gif_id, user, data)
    detail = await Presenter(session, storage).gif_detail(gif, user)
    return GifMessageEnvelope(message="GIF updated successfully", gif=detail)


@router.delete(
    "/{gif_id}",
    response_model=MessageResponse,
    summary="Delete GIF",
    description="Owner only. The GIF is soft deleted and disappears from every listing.",
)
async def delete_gif(gif_id: uuid.UUID, user: CurrentUserDep, session: SessionDep, cache: CacheDep, storage: StorageDep):
    await GifService(session, cache, storage).soft_delete(gif_id, user)
    return MessageResponse(message="GIF deleted successfully")


@router.post(
    "/{gif_id}/remix",
    response_model=GifMessageEnvelope,
    status_code=201,
    summary="Remix GIF",
    description="Upload a remix of a public GIF (or one of your own) with a new text overlay.",
)
async def remix_gif(
    gif_id: uuid.UUID,
    request: Request,
    user: CurrentUserDep,
    session: SessionDep,
    session_factory: SessionFactoryDep,
    cache: CacheDep,
    storage: StorageDep,
    background_tasks: BackgroundTasks,
):
    upload = await _read_upload(request)
    remix = await GifService(session, cache, storage).remix(gif_id, user, upload)
    background_tasks.add_task(process_remix, session_factory, storage, remix.id, gif_id)
    detail = await Presenter(session, storage).gif_detail(remix, user)
    return GifMessageEnvelope(message="Remix created successfully", gif=detail)


@router.get(
    "/{gif_id}/remixes",
    response_model=GifListResponse,
    summary="List Remixes",
    description="Public remixes of a GIF, newest first.",
)
async def list_remixes(
    gif_id: uuid.UUID,
    viewer: OptionalUserDep,
    session: SessionDep,
    cache: CacheDep,
    storage: StorageDep,
    page: PageDep,
):
    gifs, total = await GifService(session, cache, storage).remixes(gif_id, viewer, page)
    return GifListResponse(gifs=await Presenter(session, storage).gifs(gifs), pagination=page.meta(total))


@router.post(
    "/{gif_id}/share",
    response_model=ShareResponse,
    summary="Share GIF",
    description="Count a share and return the public link.",
)
async def share_gif(gif_id: uuid.UUID, viewer: OptionalUserDep, session: SessionDep, cache: CacheDep, storage: StorageDep):
    gif = await GifService(session, cache, storage).share(gif_id, viewer)
    return ShareResponse(share_count=gif.share_count, public_url=public_gif_url(gif.id))


@router.get(
    "/{gif_id}/analytics",
    response_model=GifAnalytics,
    summary="GIF Analytics",
    description="Owner only. Views, unique viewers, views per day for the last week and top referrers.",
)
async def gif_analytics(gif_id: uuid.UUID, user: CurrentUserDep, session: SessionDep, cache: CacheDep, storage: StorageDep):
    return await GifService(session, cache, storage).analytics(gif_id, user)

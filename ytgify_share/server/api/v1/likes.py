"""
Like Endpoints.

``POST`` toggles the caller's like on a GIF; ``DELETE`` only removes it.
"""

import uuid

from fastapi import APIRouter, Response

from ytgify_share.core.models.io import LikeToggleResponse
from ytgify_share.server.services.deps import CacheDep, CurrentUserDep, SessionDep
from ytgify_share.server.services.likes import LikeService

router = APIRouter()


@router.post(
    "/{gif_id}/likes",
    response_model=LikeToggleResponse,
    status_code=201,
    summary="Toggle Like",
    description="Like the GIF (201) or remove an existing like (200).",
)
async def toggle_like(gif_id: uuid.UUID, response: Response, user: CurrentUserDep, session: SessionDep, cache: CacheDep):
    liked, like_count = await LikeService(session, cache).toggle(gif_id, user)
    if not liked:
        response.status_code = 200
    return LikeToggleResponse(message="Like added" if liked else "Like removed", liked=liked, like_count=like_count)


@router.delete(
    "/{gif_id}/likes",
    response_model=LikeToggleResponse,
    summary="Unlike",
    description="Remove the caller's like. 404 when the GIF is not liked.",
)
async def unlike(gif_id: uuid.UUID, user: CurrentUserDep, session: SessionDep, cache: CacheDep):
    like_count = await LikeService(session, cache).unlike(gif_id, user)
    return LikeToggleResponse(message="Like removed", liked=False, like_count=like_count)

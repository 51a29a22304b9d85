"""
Comment Endpoints.

Comments are listed and created under their GIF (``/api/gifs/{gif_id}/comments``)
and edited or deleted by id (``/api/comments/{comment_id}``).
"""

import uuid

from fastapi import APIRouter

from ytgify_share.core.models.io import (
    CommentCreate,
    CommentEnvelope,
    CommentListResponse,
    CommentUpdate,
    MessageResponse,
)
from ytgify_share.server.services.comments import CommentService
from ytgify_share.server.services.deps import CurrentUserDep, OptionalUserDep, PageDep, SessionDep, StorageDep
from ytgify_share.server.services.presenters import Presenter

gif_comments_router = APIRouter()
router = APIRouter()


@gif_comments_router.get(
    "/{gif_id}/comments",
    response_model=CommentListResponse,
    summary="List Comments",
    description="Top-level comments, newest first, each with its three newest replies.",
)
async def list_comments(gif_id: uuid.UUID, viewer: OptionalUserDep, session: SessionDep, storage: StorageDep, page: PageDep):
    comments, total = await CommentService(session).list_for_gif(gif_id, viewer, page)
    return CommentListResponse(
        comments=await Presenter(session, storage).comments(comments, with_replies=True),
        pagination=page.meta(total),
    )


@gif_comments_router.post(
    "/{gif_id}/comments",
    response_model=CommentEnvelope,
    status_code=201,
    summary="Create Comment",
    description="Comment on a GIF, or reply to a comment with `parent_comment_id`.",
)
async def create_comment(
    gif_id: uuid.UUID, data: CommentCreate, user: CurrentUserDep, session: SessionDep, storage: StorageDep
):
    comment = await CommentService(session).create(gif_id, user, data)
    return CommentEnvelope(message="Comment created successfully", comment=await Presenter(session, storage).comment(comment))


@router.patch(
    "/{comment_id}",
    response_model=CommentEnvelope,
    summary="Update Comment",
    description="Author only.",
)
@router.put("/{comment_id}", response_model=CommentEnvelope, include_in_schema=False)
async def update_comment(
    comment_id: uuid.UUID, data: CommentUpdate, user: CurrentUserDep, session: SessionDep, storage: StorageDep
):
    comment = await CommentService(session).update(comment_id, user, data)
    return CommentEnvelope(message="Comment updated successfully", comment=await Presenter(session, storage).comment(comment))


@router.delete(
    "/{comment_id}",
    response_model=MessageResponse,
    summary="Delete Comment",
    description="Author only. The content is replaced with `[deleted]`.",
)
async def delete_comment(comment_id: uuid.UUID, user: CurrentUserDep, session: SessionDep):
    await CommentService(session).soft_delete(comment_id, user)
    return MessageResponse(message="Comment deleted successfully")

"""
Tag suggestion endpoints used by the browser extension's upload form.
"""

from fastapi import APIRouter, Query

from ytgify_share.core.models.io import PopularTagsResponse, RecentTagsResponse, TagCount
from ytgify_share.server.services.deps import CurrentUserDep, SessionDep
from ytgify_share.server.services.users import UserService

router = APIRouter()


@router.get(
    "/popular",
    response_model=PopularTagsResponse,
    summary="Popular Tags",
    description="Most used hashtags with their usage counts.",
)
async def popular_tags(session: SessionDep, limit: int = Query(default=20)):
    tags = await UserService(session).popular_tags(limit)
    return PopularTagsResponse(tags=[TagCount(**t) for t in tags])


@router.get(
    "/recent",
    response_model=RecentTagsResponse,
    summary="Recent Tags",
    description="Tags the caller used most recently.",
)
async def recent_tags(user: CurrentUserDep):
    return RecentTagsResponse(tags=user.recently_used_tags)

"""
Hashtag Endpoints.

Alphabetical and trending listings, prefix search and the public GIFs of a
single hashtag.
"""

from typing import Optional

from fastapi import APIRouter, Query

from ytgify_share.core.models.io import (
    HashtagDetailResponse,
    HashtagListResponse,
    HashtagRead,
    HashtagSearchResponse,
)
from ytgify_share.server.services.deps import CacheDep, PageDep, SessionDep, StorageDep
from ytgify_share.server.services.hashtags import HashtagService
from ytgify_share.server.services.presenters import Presenter

router = APIRouter()


@router.get("", response_model=HashtagListResponse, summary="List Hashtags")
async def list_hashtags(session: SessionDep, cache: CacheDep, page: PageDep):
    hashtags, total = await HashtagService(session, cache).list_alphabetical(page)
    return HashtagListResponse(
        hashtags=[HashtagRead.model_validate(h) for h in hashtags], pagination=page.meta(total)
    )


@router.get(
    "/trending",
    response_model=HashtagListResponse,
    summary="Trending Hashtags",
    description="Hashtags in use, most used first. Cached for 15 minutes.",
)
async def trending_hashtags(session: SessionDep, cache: CacheDep, page: PageDep):
    hashtags, total = await HashtagService(session, cache).list_trending(page)
    return HashtagListResponse(hashtags=hashtags, pagination=page.meta(total))


@router.get(
    "/search",
    response_model=HashtagSearchResponse,
    summary="Search Hashtags",
    description="Case-insensitive prefix search (at most 20 results). An empty query returns trending hashtags.",
)
async def search_hashtags(
    session: SessionDep,
    cache: CacheDep,
    q: Optional[str] = Query(default=None),
    limit: Optional[int] = Query(default=None),
):
    hashtags, term = await HashtagService(session, cache).search(q, limit)
    return HashtagSearchResponse(hashtags=hashtags, query=term)


@router.get("/{slug}", response_model=HashtagDetailResponse, summary="Get Hashtag")
async def get_hashtag(slug: str, session: SessionDep, cache: CacheDep, storage: StorageDep, page: PageDep):
    service = HashtagService(session, cache)
    hashtag = await service.get_by_slug(slug)
    gifs, total = await service.gifs_for(hashtag, page)
    return HashtagDetailResponse(
        hashtag=HashtagRead.model_validate(hashtag),
        gifs=await Presenter(session, storage).gifs(gifs),
        pagination=page.meta(total),
    )

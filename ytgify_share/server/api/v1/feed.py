"""
Feed Endpoints.

The personalized feed mixes followed users' GIFs with trending ones; the
other feeds are public. Trending and popular pages report the page length
as ``total`` to avoid an expensive count.
"""

from fastapi import APIRouter

from ytgify_share.core.models.io import GifListResponse
from ytgify_share.server.services.deps import CacheDep, CurrentUserDep, PageDep, SessionDep, StorageDep
from ytgify_share.server.services.feed import FeedService
from ytgify_share.server.services.presenters import Presenter

router = APIRouter()


async def _respond(session, storage, gifs, page, total) -> GifListResponse:
    return GifListResponse(gifs=await Presenter(session, storage).gifs(gifs), pagination=page.meta(total))


@router.get(
    "",
    response_model=GifListResponse,
    summary="Personalized Feed",
    description="Half recent GIFs of followed users, half trending GIFs of others, shuffled.",
)
async def personalized_feed(user: CurrentUserDep, session: SessionDep, cache: CacheDep, storage: StorageDep, page: PageDep):
    gifs = await FeedService(session, cache).personalized(user, page)
    return await _respond(session, storage, gifs, page, len(gifs))


@router.get("/public", response_model=GifListResponse, summary="Public Feed")
async def public_feed(session: SessionDep, cache: CacheDep, storage: StorageDep, page: PageDep):
    gifs, total = await FeedService(session, cache).public(page)
    return await _respond(session, storage, gifs, page, total)


@router.get(
    "/trending",
    response_model=GifListResponse,
    summary="Trending Feed",
    description="Public GIFs of the last week ranked by engagement.",
)
async def trending_feed(session: SessionDep, cache: CacheDep, storage: StorageDep, page: PageDep):
    gifs = await FeedService(session, cache).trending(page)
    return await _respond(session, storage, gifs, page, len(gifs))


@router.get("/recent", response_model=GifListResponse, summary="Recent Feed")
async def recent_feed(session: SessionDep, cache: CacheDep, storage: StorageDep, page: PageDep):
    gifs, total = await FeedService(session, cache).recent(page)
    return await _respond(session, storage, gifs, page, total)


@router.get("/popular", response_model=GifListResponse, summary="Popular Feed")
async def popular_feed(session: SessionDep, cache: CacheDep, storage: StorageDep, page: PageDep):
    gifs = await FeedService(session, cache).popular(page)
    return await _respond(session, storage, gifs, page, len(gifs))


@router.get("/following", response_model=GifListResponse, summary="Following Feed")
async def following_feed(user: CurrentUserDep, session: SessionDep, cache: CacheDep, storage: StorageDep, page: PageDep):
    gifs, total = await FeedService(session, cache).following(user, page)
    return await _respond(session, storage, gifs, page, total)

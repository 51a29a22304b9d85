"""
Collection Endpoints.

CRUD on the caller's collections plus adding, removing and reordering GIFs.
Anyone may read a public collection; private ones answer 403 to everyone but
their owner.
"""

import uuid

from fastapi import APIRouter, Response

from ytgify_share.core.models.io import (
    AddGifRequest,
    CollectionCreate,
    CollectionDetailResponse,
    CollectionGifsCountResponse,
    CollectionListResponse,
    CollectionRead,
    CollectionUpdate,
    MessageResponse,
    ReorderRequest,
)
from ytgify_share.server.services.collections import CollectionService
from ytgify_share.server.services.deps import CurrentUserDep, OptionalUserDep, PageDep, SessionDep, StorageDep
from ytgify_share.server.services.presenters import Presenter

router = APIRouter()


@router.get("", response_model=CollectionListResponse, summary="List My Collections")
async def list_collections(user: CurrentUserDep, session: SessionDep, storage: StorageDep, page: PageDep):
    collections, total = await CollectionService(session).list_for(user, user, page)
    return CollectionListResponse(
        collections=await Presenter(session, storage).collections(collections), pagination=page.meta(total)
    )


@router.post("", response_model=CollectionRead, status_code=201, summary="Create Collection")
async def create_collection(data: CollectionCreate, user: CurrentUserDep, session: SessionDep, storage: StorageDep):
    collection = await CollectionService(session).create(user, data)
    return await Presenter(session, storage).collection(collection)


@router.get(
    "/{collection_id}",
    response_model=CollectionDetailResponse,
    summary="Get Collection",
    description="The collection with its GIFs in position order.",
)
async def get_collection(
    collection_id: uuid.UUID, viewer: OptionalUserDep, session: SessionDep, storage: StorageDep, page: PageDep
):
    service = CollectionService(session)
    collection = await service.get_visible(collection_id, viewer)
    gifs, total = await service.gifs_of(collection, viewer, page)
    presenter = Presenter(session, storage)
    return CollectionDetailResponse(
        collection=await presenter.collection(collection),
        gifs=await presenter.gifs(gifs),
        pagination=page.meta(total),
    )


@router.patch("/{collection_id}", response_model=CollectionRead, summary="Update Collection")
@router.put("/{collection_id}", response_model=CollectionRead, include_in_schema=False)
async def update_collection(
    collection_id: uuid.UUID, data: CollectionUpdate, user: CurrentUserDep, session: SessionDep, storage: StorageDep
):
    collection = await CollectionService(session).update(collection_id, user, data)
    return await Presenter(session, storage).collection(collection)


@router.delete("/{collection_id}", status_code=204, summary="Delete Collection")
async def delete_collection(collection_id: uuid.UUID, user: CurrentUserDep, session: SessionDep):
    await CollectionService(session).delete(collection_id, user)
    return Response(status_code=204)


@router.post(
    "/{collection_id}/add_gif",
    response_model=CollectionGifsCountResponse,
    summary="Add GIF",
    description="Append a GIF to the collection. 422 when it is already there.",
)
async def add_gif(collection_id: uuid.UUID, data: AddGifRequest, user: CurrentUserDep, session: SessionDep):
    collection = await CollectionService(session).add_gif(collection_id, user, data.gif_id)
    return CollectionGifsCountResponse(message="GIF added to collection", gifs_count=collection.gifs_count)


@router.delete(
    "/{collection_id}/remove_gif/{gif_id}",
    response_model=CollectionGifsCountResponse,
    summary="Remove GIF",
    description="Remove a GIF from the collection. 404 when it is not there.",
)
async def remove_gif(collection_id: uuid.UUID, gif_id: uuid.UUID, user: CurrentUserDep, session: SessionDep):
    collection = await CollectionService(session).remove_gif(collection_id, user, gif_id)
    return CollectionGifsCountResponse(message="GIF removed from collection", gifs_count=collection.gifs_count)


@router.patch(
    "/{collection_id}/reorder",
    response_model=MessageResponse,
    summary="Reorder GIFs",
    description="Set GIF positions from the order of `gif_ids`.",
)
async def reorder(collection_id: uuid.UUID, data: ReorderRequest, user: CurrentUserDep, session: SessionDep):
    await CollectionService(session).reorder(collection_id, user, data.gif_ids)
    return MessageResponse(message="Collection reordered")

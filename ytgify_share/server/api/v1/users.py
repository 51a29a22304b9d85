"""
User Endpoints.

The caller's own account (``/me``), upload preferences, GDPR deletion,
public profiles, follows and a user's collections.

``/me`` routes are declared before ``/{username}`` so they are not captured
by the profile route.
"""

from fastapi import APIRouter, Response

from ytgify_share.core.models.io import (
    CollectionListResponse,
    FollowersResponse,
    FollowingResponse,
    FollowToggleResponse,
    PreferencesEnvelope,
    PreferencesUpdate,
    UserEnvelope,
    UserProfile,
    UserProfileEnvelope,
    UserRead,
    UserSummary,
    UserUpdate,
)
from ytgify_share.server.services.collections import CollectionService
from ytgify_share.server.services.deps import (
    CacheDep,
    CurrentUserDep,
    OptionalUserDep,
    PageDep,
    SessionDep,
    StorageDep,
)
from ytgify_share.server.services.follows import FollowService
from ytgify_share.server.services.presenters import Presenter
from ytgify_share.server.services.users import UserService

router = APIRouter()


# ----------------------------------------------------------------------
# Current user
# ----------------------------------------------------------------------


@router.get("/me", response_model=UserEnvelope, summary="Current User")
async def get_me(user: CurrentUserDep):
    return UserEnvelope(user=UserRead.model_validate(user))


@router.patch(
    "/me",
    response_model=UserEnvelope,
    summary="Update Profile",
    description="Profile fields. Changing email or password requires `current_password` and signs out every device.",
)
async def update_me(data: UserUpdate, user: CurrentUserDep, session: SessionDep):
    user = await UserService(session).update_profile(user, data)
    return UserEnvelope(user=UserRead.model_validate(user))


@router.delete(
    "/me",
    status_code=204,
    summary="Delete Account",
    description="Permanently delete the account with its GIFs, comments, likes, follows and collections.",
)
async def delete_me(user: CurrentUserDep, session: SessionDep, storage: StorageDep, cache: CacheDep):
    await UserService(session).delete_account(user, storage, cache)
    return Response(status_code=204)


@router.get("/me/preferences", response_model=PreferencesEnvelope, summary="Upload Preferences")
async def get_preferences(user: CurrentUserDep):
    return PreferencesEnvelope(preferences=UserService.preferences(user))


@router.patch(
    "/me/preferences",
    response_model=PreferencesEnvelope,
    summary="Update Upload Preferences",
    description="Default privacy, default upload behavior and recently used tags.",
)
@router.put("/me/preferences", response_model=PreferencesEnvelope, include_in_schema=False)
async def update_preferences(data: PreferencesUpdate, user: CurrentUserDep, session: SessionDep):
    return PreferencesEnvelope(preferences=await UserService(session).update_preferences(user, data))


# ----------------------------------------------------------------------
# Follows
# ----------------------------------------------------------------------


@router.post(
    "/{user_id}/follow",
    response_model=FollowToggleResponse,
    summary="Toggle Follow",
    description="Follow the user, or unfollow when already following.",
)
@router.delete("/{user_id}/follow", response_model=FollowToggleResponse, include_in_schema=False)
async def toggle_follow(user_id: str, user: CurrentUserDep, session: SessionDep):
    target = await UserService(session).find(user_id)
    following = await FollowService(session).toggle(user, target)
    return FollowToggleResponse(
        following=following, follower_count=target.follower_count, following_count=target.following_count
    )


@router.get("/{user_id}/followers", response_model=FollowersResponse, summary="List Followers")
async def list_followers(user_id: str, session: SessionDep, page: PageDep):
    owner = await UserService(session).find(user_id)
    users, total = await FollowService(session).followers(owner, page)
    return FollowersResponse(followers=[UserSummary.model_validate(u) for u in users], pagination=page.meta(total))


@router.get("/{user_id}/following", response_model=FollowingResponse, summary="List Followed Users")
async def list_following(user_id: str, session: SessionDep, page: PageDep):
    owner = await UserService(session).find(user_id)
    users, total = await FollowService(session).following(owner, page)
    return FollowingResponse(following=[UserSummary.model_validate(u) for u in users], pagination=page.meta(total))


@router.get(
    "/{user_id}/collections",
    response_model=CollectionListResponse,
    summary="List User Collections",
    description="Public collections of the user; the owner also sees private ones.",
)
async def list_user_collections(
    user_id: str, viewer: OptionalUserDep, session: SessionDep, storage: StorageDep, page: PageDep
):
    owner = await UserService(session).find(user_id)
    collections, total = await CollectionService(session).list_for(owner, viewer, page)
    return CollectionListResponse(
        collections=await Presenter(session, storage).collections(collections), pagination=page.meta(total)
    )


# ----------------------------------------------------------------------
# Profiles
# ----------------------------------------------------------------------


@router.get(
    "/{username}",
    response_model=UserProfileEnvelope,
    summary="User Profile",
    description="Public profile by username (or id), with whether the caller follows the user.",
)
async def get_profile(username: str, viewer: OptionalUserDep, session: SessionDep):
    user = await UserService(session).find(username)
    following = viewer is not None and await FollowService(session).is_following(viewer, user)
    profile = UserProfile.model_validate(user).model_copy(update={"is_following": following})
    return UserProfileEnvelope(user=profile)

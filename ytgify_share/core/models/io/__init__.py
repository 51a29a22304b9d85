"""
I/O models for API requests and responses.

This package contains Pydantic-based I/O schemas that define the contract
between API endpoints and clients. These models are separate from database
entities to allow independent evolution of API contracts.

Modules:
- common: Pagination, messages, errors, request envelopes
- auth: Signup/login/refresh requests and token responses
- users: Accounts, profiles and preferences
- gifs: GIF read/update schemas and analytics
- comments, collections, hashtags, notifications
"""

from .auth import AuthResponse, LoginRequest, LogoutRequest, RefreshRequest, SignupRequest, TokenResponse
from .collections import (
    AddGifRequest,
    CollectionCreate,
    CollectionDetailResponse,
    CollectionGifsCountResponse,
    CollectionListResponse,
    CollectionRead,
    CollectionUpdate,
    ReorderRequest,
)
from .comments import CommentCreate, CommentEnvelope, CommentListResponse, CommentRead, CommentUpdate
from .common import ErrorResponse, MessageResponse, Pagination, UserSummary
from .gifs import (
    GifAnalytics,
    GifDetail,
    GifEnvelope,
    GifListResponse,
    GifMessageEnvelope,
    GifRead,
    GifUpdate,
    GifUploadForm,
    LikeToggleResponse,
    ShareResponse,
    normalize_privacy,
)
from .hashtags import (
    HashtagDetailResponse,
    HashtagListResponse,
    HashtagRead,
    HashtagSearchResponse,
    PopularTagsResponse,
    RecentTagsResponse,
    TagCount,
)
from .notifications import NotificationEnvelope, NotificationListResponse, NotificationRead, UnreadCountResponse
from .users import (
    FollowersResponse,
    FollowingResponse,
    FollowToggleResponse,
    Preferences,
    PreferencesEnvelope,
    PreferencesUpdate,
    UserEnvelope,
    UserProfile,
    UserProfileEnvelope,
    UserRead,
    UserUpdate,
)

__all__ = [
    "AddGifRequest",
    "AuthResponse",
    "CollectionCreate",
    "CollectionDetailResponse",
    "CollectionGifsCountResponse",
    "CollectionListResponse",
    "CollectionRead",
    "CollectionUpdate",
    "CommentCreate",
    "CommentEnvelope",
    "CommentListResponse",
    "CommentRead",
    "CommentUpdate",
    "ErrorResponse",
    "FollowToggleResponse",
    "FollowersResponse",
    "FollowingResponse",
    "GifAnalytics",
    "GifDetail",
    "GifEnvelope",
    "GifListResponse",
    "GifMessageEnvelope",
    "GifRead",
    "GifUpdate",
    "GifUploadForm",
    "HashtagDetailResponse",
    "HashtagListResponse",
    "HashtagRead",
    "HashtagSearchResponse",
    "LikeToggleResponse",
    "LoginRequest",
    "LogoutRequest",
    "MessageResponse",
    "NotificationEnvelope",
    "NotificationListResponse",
    "NotificationRead",
    "Pagination",
    "PopularTagsResponse",
    "Preferences",
    "PreferencesEnvelope",
    "PreferencesUpdate",
    "RecentTagsResponse",
    "RefreshRequest",
    "ReorderRequest",
    "ShareResponse",
    "SignupRequest",
    "TagCount",
    "TokenResponse",
    "UnreadCountResponse",
    "UserEnvelope",
    "UserProfile",
    "UserProfileEnvelope",
    "UserRead",
    "UserSummary",
    "UserUpdate",
]

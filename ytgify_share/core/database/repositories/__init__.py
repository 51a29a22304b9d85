"""
Repositories: data access layer organized by table.
"""

from .base import AsyncBaseRepository, QueryBuilder
from .collections import CollectionRepository
from .comments import CommentRepository
from .follows import FollowRepository
from .gifs import GifRepository
from .hashtags import HashtagRepository
from .jwt_denylist import JwtDenylistRepository
from .likes import LikeRepository
from .notifications import NotificationRepository
from .users import UserRepository
from .view_events import ViewEventRepository

__all__ = [
    "AsyncBaseRepository",
    "CollectionRepository",
    "CommentRepository",
    "FollowRepository",
    "GifRepository",
    "HashtagRepository",
    "JwtDenylistRepository",
    "LikeRepository",
    "NotificationRepository",
    "QueryBuilder",
    "UserRepository",
    "ViewEventRepository",
]

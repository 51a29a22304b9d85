"""
Database entities.

Importing this package registers every table with the shared SQLModel metadata.
"""

from .collections import Collection, CollectionGif
from .comments import DELETED_CONTENT, Comment
from .follows import Follow
from .gifs import Gif, Privacy
from .hashtags import GifHashtag, Hashtag
from .jwt_denylist import JwtDenylist
from .likes import Like
from .notifications import Notification, NotificationAction
from .users import DEFAULT_PREFERENCES, User
from .view_events import VIEWER_ANONYMOUS, VIEWER_USER, ViewEvent

__all__ = [
    "Collection",
    "CollectionGif",
    "Comment",
    "DEFAULT_PREFERENCES",
    "DELETED_CONTENT",
    "Follow",
    "Gif",
    "GifHashtag",
    "Hashtag",
    "JwtDenylist",
    "Like",
    "Notification",
    "NotificationAction",
    "Privacy",
    "User",
    "VIEWER_ANONYMOUS",
    "VIEWER_USER",
    "ViewEvent",
]

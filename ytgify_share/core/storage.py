"""
Local file storage for uploaded GIFs and thumbnails.

Files are addressed by a storage key (``gifs/<uuid>.gif``) relative to the
configured media root and served by the application under the media URL.
"""

from __future__ import annotations

import uuid
from pathlib import Path
from typing import Optional

from ytgify_share.core.logging_config import get_logger
from ytgify_share.server.core.config import settings

logger = get_logger(__name__)


class LocalFileStorage:
    """Store blobs on the local filesystem."""

    def __init__(self, root: str | Path, base_url: str = "/media") -> None:
        self.root = Path(root)
        self.base_url = base_url.rstrip("/")
        self.root.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def new_key(folder: str, extension: str) -> str:
        return f"{folder}/{uuid.uuid4().hex}.{extension.lstrip('.')}"

    def path(self, key: str) -> Path:
        resolved = (self.root / key).resolve()
        if self.root.resolve() not in resolved.parents:
            raise ValueError(f"Storage key escapes media root: {key}")
        return resolved

    def save(self, key: str, data: bytes) -> str:
        """Write ``data`` under ``key`` and return the key."""
        target = self.path(key)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
        logger.debug(f"Stored {len(data)} bytes at {key}")
        return key

    def read(self, key: str) -> bytes:
        return self.path(key).read_bytes()

    def exists(self, key: Optional[str]) -> bool:
        return bool(key) and self.path(key).is_file()

    def size(self, key: str) -> int:
        return self.path(key).stat().st_size

    def delete(self, key: Optional[str]) -> bool:
        if not key:
            return False
        target = self.path(key)
        if not target.is_file():
            return False
        target.unlink()
        logger.debug(f"Deleted stored file {key}")
        return True

    def url(self, key: Optional[str]) -> Optional[str]:
        if not key:
            return None
        return f"{self.base_url}/{key}"


_storage: Optional[LocalFileStorage] = None


def get_storage() -> LocalFileStorage:
    """Dependency returning the configured storage backend."""
    global _storage
    if _storage is None:
        uploads = settings.uploads
        _storage = LocalFileStorage(uploads.media_root, uploads.media_url)
    return _storage

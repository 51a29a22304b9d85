from __future__ import annotations

import os
import tempfile
from typing import Iterable

import httpx
import pytest

# Settings are read when ytgify_share is first imported, so the test
# environment must be in place before any test module imports it.
_MEDIA_ROOT = tempfile.mkdtemp(prefix="ytgify-media-")

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ["YTGIFY_LOG_FILE_ENABLED"] = "false"
os.environ["YTGIFY_MEDIA_ROOT"] = _MEDIA_ROOT
os.environ["YTGIFY_JOBS_ENABLED"] = "false"
os.environ["YTGIFY_RATE_LIMIT_ENABLED"] = "false"
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-with-enough-length-for-hs256")
os.environ.setdefault("LOGFIRE_ENABLED", "false")


@pytest.fixture(autouse=True)
def _global_offline_http_guard(monkeypatch: pytest.MonkeyPatch):
    """Refuse real network traffic; only the in-process ASGI app may be called."""
    allowed_prefixes: Iterable[str] = (
        "http://localhost",
        "http://127.0.0.1",
        "http://test",
        "/",  # relative paths used by the ASGI transport
    )

    orig_async = httpx._client.AsyncClient.request

    def _is_allowed(url_str: str) -> bool:
        return any(url_str.startswith(p) for p in allowed_prefixes)

    async def offline_async(self, method, url, *args, **kwargs):
        url_str = str(url)
        if _is_allowed(url_str) or not url_str.startswith("http"):
            return await orig_async(self, method, url, *args, **kwargs)
        raise RuntimeError(f"Network access disabled in tests: {method} {url_str}")

    monkeypatch.setattr(httpx._client.AsyncClient, "request", offline_async, raising=True)
    yield

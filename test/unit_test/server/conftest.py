import io
from pathlib import Path
from typing import AsyncGenerator, Awaitable, Callable, Dict, List, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from PIL import Image
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from ytgify_share.core.cache import TTLCache, get_cache
from ytgify_share.core.database import (
    create_all,
    create_engine,
    create_sessionmaker,
    get_session,
    get_session_factory,
)
from ytgify_share.core.storage import LocalFileStorage, get_storage

PASSWORD = "password123"


def make_gif_bytes(width: int = 40, height: int = 30, frames: int = 3, duration_ms: int = 100) -> bytes:
    """Render a small animated GIF with Pillow."""
    images = [Image.new("RGB", (width, height), (i * 60 % 256, 80, 160)) for i in range(frames)]
    out = io.BytesIO()
    images[0].save(out, format="GIF", save_all=True, append_images=images[1:], duration=duration_ms, loop=0)
    return out.getvalue()


@pytest_asyncio.fixture
async def test_engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine, None]:
    """A fresh SQLite database file per test."""
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'ytgify_test.db'}")
    await create_all(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return create_sessionmaker(test_engine)


@pytest_asyncio.fixture(name="session")
async def session_fixture(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def storage(tmp_path: Path) -> LocalFileStorage:
    return LocalFileStorage(tmp_path / "media", "/media")


@pytest.fixture
def cache() -> TTLCache:
    return TTLCache()


@pytest_asyncio.fixture(name="client")
async def client_fixture(session_factory, storage, cache) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client against the app with database, storage and cache overridden."""
    from ytgify_share.server.main import app

    async def get_session_override() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = get_session_override
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_cache] = lambda: cache

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def gif_bytes() -> bytes:
    return make_gif_bytes()


def auth_headers(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def register(client: AsyncClient) -> Callable[..., Awaitable[dict]]:
    """Sign a user up and return the auth response with ready-made headers."""

    async def _register(username: str, email: Optional[str] = None, password: str = PASSWORD) -> dict:
        response = await client.post(
            "/api/auth/signup",
            json={"email": email or f"{username}@example.com", "username": username, "password": password},
        )
        assert response.status_code == 201, response.text
        data = response.json()
        data["headers"] = auth_headers(data["access_token"])
        return data

    return _register


@pytest.fixture
def upload_gif(client: AsyncClient, gif_bytes: bytes) -> Callable[..., Awaitable[dict]]:
    """Upload a GIF as the given user and return the created GIF."""

    async def _upload(
        headers: Dict[str, str],
        title: str = "Funny moment",
        privacy: Optional[str] = None,
        tags: Optional[List[str]] = None,
        **fields,
    ) -> dict:
        data = {"title": title, **fields}
        if privacy is not None:
            data["privacy"] = privacy
        if tags:
            data["hashtag_names[]"] = tags
        response = await client.post(
            "/api/gifs",
            headers=headers,
            data=data,
            files={"file": ("clip.gif", gif_bytes, "image/gif")},
        )
        assert response.status_code == 201, response.text
        return response.json()["gif"]

    return _upload

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


async def test_popular_tags(client: AsyncClient, register, upload_gif):
    user = await register("alice")
    await upload_gif(user["headers"], tags=["cats", "dogs"])
    await upload_gif(user["headers"], tags=["cats"])

    response = await client.get("/api/tags/popular")
    assert response.status_code == 200
    assert response.json() == {"tags": [{"name": "cats", "count": 2}, {"name": "dogs", "count": 1}]}

    limited = await client.get("/api/tags/popular", params={"limit": 1})
    assert limited.json()["tags"] == [{"name": "cats", "count": 2}]


async def test_recent_tags(client: AsyncClient, register, upload_gif):
    user = await register("bob")
    await upload_gif(user["headers"], tags=["first"])
    await upload_gif(user["headers"], tags=["second"])

    response = await client.get("/api/tags/recent", headers=user["headers"])
    assert response.json() == {"tags": ["second", "first"]}


async def test_recent_tags_requires_authentication(client: AsyncClient):
    response = await client.get("/api/tags/recent")
    assert response.status_code == 401

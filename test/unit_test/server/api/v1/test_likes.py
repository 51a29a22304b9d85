import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


async def test_toggle_like_on_and_off(client: AsyncClient, register, upload_gif):
    owner = await register("alice")
    fan = await register("bob")
    gif = await upload_gif(owner["headers"])
    url = f"/api/gifs/{gif['id']}/likes"

    response = await client.post(url, headers=fan["headers"])
    assert response.status_code == 201
    assert response.json() == {"message": "Like added", "liked": True, "like_count": 1}

    detail = await client.get(f"/api/gifs/{gif['id']}", headers=fan["headers"])
    assert detail.json()["gif"]["liked_by_current_user"] is True
    me = await client.get("/api/auth/me", headers=owner["headers"])
    assert me.json()["user"]["total_likes_received"] == 1

    response = await client.post(url, headers=fan["headers"])
    assert response.status_code == 200
    assert response.json() == {"message": "Like removed", "liked": False, "like_count": 0}
    me = await client.get("/api/auth/me", headers=owner["headers"])
    assert me.json()["user"]["total_likes_received"] == 0


async def test_like_notifies_owner_but_not_self(client: AsyncClient, register, upload_gif):
    owner = await register("carol")
    fan = await register("dave")
    gif = await upload_gif(owner["headers"])

    await client.post(f"/api/gifs/{gif['id']}/likes", headers=owner["headers"])
    await client.post(f"/api/gifs/{gif['id']}/likes", headers=fan["headers"])

    response = await client.get("/api/notifications", headers=owner["headers"])
    notifications = response.json()["notifications"]
    assert len(notifications) == 1
    assert notifications[0]["action"] == "like"
    assert notifications[0]["message"] == "dave liked your GIF"
    assert notifications[0]["actor"]["username"] == "dave"


async def test_delete_like(client: AsyncClient, register, upload_gif):
    owner = await register("erin")
    fan = await register("frank")
    gif = await upload_gif(owner["headers"])
    url = f"/api/gifs/{gif['id']}/likes"

    response = await client.delete(url, headers=fan["headers"])
    assert response.status_code == 404
    assert response.json()["message"] == "Like not found"

    await client.post(url, headers=fan["headers"])
    response = await client.delete(url, headers=fan["headers"])
    assert response.status_code == 200
    assert response.json()["like_count"] == 0


async def test_cannot_like_private_gif_of_others(client: AsyncClient, register, upload_gif):
    owner = await register("grace")
    fan = await register("heidi")
    gif = await upload_gif(owner["headers"], privacy="private")
    response = await client.post(f"/api/gifs/{gif['id']}/likes", headers=fan["headers"])
    assert response.status_code == 404


async def test_like_requires_authentication(client: AsyncClient, register, upload_gif):
    owner = await register("ivan")
    gif = await upload_gif(owner["headers"])
    response = await client.post(f"/api/gifs/{gif['id']}/likes")
    assert response.status_code == 401

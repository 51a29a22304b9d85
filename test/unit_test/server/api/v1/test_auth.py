import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


def _bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


class TestSignup:
    async def test_signup_returns_tokens_and_user(self, client: AsyncClient):
        response = await client.post(
            "/api/auth/signup",
            json={"email": "Alice@Example.com", "username": "alice", "password": "password123"},
        )
        assert response.status_code == 201
        data = response.json()
        assert data["message"] == "Registration successful"
        assert data["token"] == data["access_token"]
        assert data["refresh_token"]
        assert data["token_type"] == "Bearer"
        assert data["expires_in"] == 15 * 60
        assert data["user"]["email"] == "alice@example.com"
        assert data["user"]["display_name"] == "alice"
        assert "password_hash" not in data["user"]

    async def test_register_alias_accepts_wrapped_body(self, client: AsyncClient):
        response = await client.post(
            "/api/auth/register",
            json={"user": {"email": "bob@example.com", "username": "bob", "password": "password123"}},
        )
        assert response.status_code == 201
        assert response.json()["user"]["username"] == "bob"

    async def test_signup_rejects_taken_email_and_username(self, client: AsyncClient, register):
        await register("carol")
        response = await client.post(
            "/api/auth/signup",
            json={"email": "CAROL@example.com", "username": "Carol", "password": "password123"},
        )
        assert response.status_code == 422
        body = response.json()
        assert body["error"] == "Validation failed"
        assert body["message"] == "Registration failed"
        assert "Email has already been taken" in body["details"]
        assert "Username has already been taken" in body["details"]

    @pytest.mark.parametrize(
        "payload",
        [
            {"email": "not-an-email", "username": "dave", "password": "password123"},
            {"email": "dave@example.com", "username": "da", "password": "password123"},
            {"email": "dave@example.com", "username": "dave!", "password": "password123"},
            {"email": "dave@example.com", "username": "dave", "password": "123"},
            {
                "email": "dave@example.com",
                "username": "dave",
                "password": "password123",
                "password_confirmation": "different",
            },
        ],
    )
    async def test_signup_validation_errors(self, client: AsyncClient, payload):
        response = await client.post("/api/auth/signup", json=payload)
        assert response.status_code == 422
        body = response.json()
        assert body["error"] == "Validation failed"
        assert body["details"]


class TestLogin:
    async def test_login_success(self, client: AsyncClient, register):
        await register("erin")
        response = await client.post("/api/auth/login", json={"email": "ERIN@example.com", "password": "password123"})
        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Login successful"
        assert data["user"]["username"] == "erin"

    async def test_login_wrapped_body(self, client: AsyncClient, register):
        await register("frank")
        response = await client.post(
            "/api/auth/login", json={"user": {"email": "frank@example.com", "password": "password123"}}
        )
        assert response.status_code == 200

    async def test_login_wrong_password(self, client: AsyncClient, register):
        await register("grace")
        response = await client.post("/api/auth/login", json={"email": "grace@example.com", "password": "wrong-pass"})
        assert response.status_code == 401
        assert response.json() == {"error": "Invalid credentials", "message": "Email or password is incorrect"}

    async def test_login_unknown_email(self, client: AsyncClient):
        response = await client.post("/api/auth/login", json={"email": "nobody@example.com", "password": "password123"})
        assert response.status_code == 401

    async def test_login_rejects_malformed_email(self, client: AsyncClient):
        response = await client.post("/api/auth/login", json={"email": "nobody@", "password": "password123"})
        assert response.status_code == 422
        assert any(detail.startswith("email:") for detail in response.json()["details"])


class TestCurrentUser:
    async def test_me_requires_token(self, client: AsyncClient):
        response = await client.get("/api/auth/me")
        assert response.status_code == 401
        assert response.json()["error"] == "Unauthorized"

    async def test_me_rejects_garbage_token(self, client: AsyncClient):
        response = await client.get("/api/auth/me", headers=_bearer("not.a.token"))
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid token"

    async def test_me_rejects_refresh_token(self, client: AsyncClient, register):
        user = await register("heidi")
        response = await client.get("/api/auth/me", headers=_bearer(user["refresh_token"]))
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid token type"

    async def test_me_returns_user(self, client: AsyncClient, register):
        user = await register("ivan")
        response = await client.get("/api/auth/me", headers=user["headers"])
        assert response.status_code == 200
        assert response.json()["user"]["id"] == user["user"]["id"]


class TestLogout:
    async def test_logout_revokes_presented_token(self, client: AsyncClient, register):
        user = await register("judy")
        response = await client.post("/api/auth/logout", headers=user["headers"])
        assert response.status_code == 200
        assert response.json() == {"message": "Logout successful"}

        response = await client.get("/api/auth/me", headers=user["headers"])
        assert response.status_code == 401
        assert response.json()["message"] == "Token has been revoked"

    async def test_logout_keeps_other_tokens(self, client: AsyncClient, register):
        user = await register("mallory")
        login = await client.post("/api/auth/login", json={"email": "mallory@example.com", "password": "password123"})
        other = _bearer(login.json()["access_token"])

        await client.delete("/api/auth/logout", headers=user["headers"])
        response = await client.get("/api/auth/me", headers=other)
        assert response.status_code == 200

    async def test_logout_all_devices(self, client: AsyncClient, register):
        user = await register("niaj")
        login = await client.post("/api/auth/login", json={"email": "niaj@example.com", "password": "password123"})
        other = _bearer(login.json()["access_token"])

        response = await client.post("/api/auth/logout", headers=user["headers"], json={"all_devices": True})
        assert response.status_code == 200
        assert (await client.get("/api/auth/me", headers=other)).status_code == 401
        response = await client.post("/api/auth/refresh", json={"refresh_token": user["refresh_token"]})
        assert response.status_code == 401

    async def test_logout_requires_token(self, client: AsyncClient):
        response = await client.post("/api/auth/logout")
        assert response.status_code == 401


class TestRefresh:
    async def test_refresh_with_body_token(self, client: AsyncClient, register):
        user = await register("olivia")
        response = await client.post("/api/auth/refresh", json={"refresh_token": user["refresh_token"]})
        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Token refreshed"
        assert data["access_token"] != user["access_token"]

        me = await client.get("/api/auth/me", headers=_bearer(data["access_token"]))
        assert me.status_code == 200

    async def test_refresh_token_cannot_be_replayed(self, client: AsyncClient, register):
        user = await register("peggy")
        first = await client.post("/api/auth/refresh", json={"refresh_token": user["refresh_token"]})
        assert first.status_code == 200
        second = await client.post("/api/auth/refresh", json={"refresh_token": user["refresh_token"]})
        assert second.status_code == 401

    async def test_refresh_with_bearer_header(self, client: AsyncClient, register):
        user = await register("rupert")
        response = await client.post("/api/auth/refresh", headers=user["headers"])
        assert response.status_code == 200

    async def test_refresh_without_token(self, client: AsyncClient):
        response = await client.post("/api/auth/refresh")
        assert response.status_code == 401
        assert response.json()["message"] == "Refresh token is required"

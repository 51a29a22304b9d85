"""Unit tests for request dependencies.

Tests verify that the Annotated aliases resolve through FastAPI's Depends
mechanism and that bearer tokens map to users the way routers expect.
"""

import pytest
import pytest_asyncio
from fastapi.security import HTTPAuthorizationCredentials

from ytgify_share.core.cache import get_cache
from ytgify_share.core.database import get_session
from ytgify_share.core.database.entities.users import User
from ytgify_share.core.errors import AuthenticationError
from ytgify_share.core.security import create_access_token
from ytgify_share.core.storage import get_storage
from ytgify_share.server.services.deps import (
    CacheDep,
    SessionDep,
    StorageDep,
    get_authenticated,
    get_optional_user,
)


def _bearer(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


class TestAnnotatedAliases:
    @pytest.mark.parametrize(
        "alias,dependency",
        [(SessionDep, get_session), (CacheDep, get_cache), (StorageDep, get_storage)],
    )
    def test_alias_uses_dependency(self, alias, dependency):
        assert hasattr(alias, "__metadata__")
        assert alias.__metadata__[0].dependency is dependency


class TestAuthenticationDependencies:
    @pytest_asyncio.fixture
    async def user(self, session) -> User:
        user = User(email="dep@example.com", username="dep", password_hash="x")
        session.add(user)
        await session.commit()
        return user

    @pytest.mark.asyncio
    async def test_missing_credentials(self, session):
        with pytest.raises(AuthenticationError):
            await get_authenticated(session, None)

    @pytest.mark.asyncio
    async def test_valid_token(self, session, user):
        resolved, claims = await get_authenticated(session, _bearer(create_access_token(user)))
        assert resolved.id == user.id
        assert claims["sub"] == str(user.id)

    @pytest.mark.asyncio
    async def test_stale_session_key(self, session, user):
        token = create_access_token(user)
        user.rotate_jti()
        await session.commit()
        with pytest.raises(AuthenticationError, match="revoked"):
            await get_authenticated(session, _bearer(token))

    @pytest.mark.asyncio
    async def test_optional_user(self, session, user):
        assert await get_optional_user(session, None) is None
        assert await get_optional_user(session, _bearer("garbage")) is None
        resolved = await get_optional_user(session, _bearer(create_access_token(user)))
        assert resolved.id == user.id

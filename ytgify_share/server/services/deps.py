"""
Request dependencies.

Annotated aliases for the database session, session factory, cache, storage,
pagination and the authenticated user, used by every API router.
"""

from typing import Annotated, Any, Dict, Optional, Tuple

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ytgify_share.core.cache import TTLCache, get_cache
from ytgify_share.core.database import get_session, get_session_factory
from ytgify_share.core.database.entities.users import User
from ytgify_share.core.errors import AuthenticationError
from ytgify_share.core.storage import LocalFileStorage, get_storage
from ytgify_share.server.services.auth import AuthService
from ytgify_share.server.services.pagination import PageParams, page_params

bearer_scheme = HTTPBearer(auto_error=False)

SessionDep = Annotated[AsyncSession, Depends(get_session)]
SessionFactoryDep = Annotated[async_sessionmaker[AsyncSession], Depends(get_session_factory)]
CacheDep = Annotated[TTLCache, Depends(get_cache)]
StorageDep = Annotated[LocalFileStorage, Depends(get_storage)]
PageDep = Annotated[PageParams, Depends(page_params)]
CredentialsDep = Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)]


async def get_authenticated(session: SessionDep, credentials: CredentialsDep) -> Tuple[User, Dict[str, Any]]:
    """Resolve the bearer access token to its user and claims (401 otherwise)."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError()
    return await AuthService(session).authenticate(credentials.credentials)


async def get_current_user(auth: Annotated[Tuple[User, Dict[str, Any]], Depends(get_authenticated)]) -> User:
    return auth[0]


async def get_optional_user(session: SessionDep, credentials: CredentialsDep) -> Optional[User]:
    """The authenticated user, or None for anonymous requests and unusable tokens."""
    if credentials is None or not credentials.credentials:
        return None
    try:
        user, _ = await AuthService(session).authenticate(credentials.credentials)
    except AuthenticationError:
        return None
    return user


AuthDep = Annotated[Tuple[User, Dict[str, Any]], Depends(get_authenticated)]
CurrentUserDep = Annotated[User, Depends(get_current_user)]
OptionalUserDep = Annotated[Optional[User], Depends(get_optional_user)]

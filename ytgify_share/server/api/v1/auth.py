"""
Authentication Endpoints.

Account signup, login, logout, token refresh and the current user. These are
the endpoints the browser extension talks to; request bodies may be sent
flat or wrapped in ``{"user": {...}}``.
"""

from typing import Optional

from fastapi import APIRouter

from ytgify_share.core.errors import AuthenticationError
from ytgify_share.core.logging_config import get_logger
from ytgify_share.core.models.io import (
    AuthResponse,
    LoginRequest,
    LogoutRequest,
    MessageResponse,
    RefreshRequest,
    SignupRequest,
    TokenResponse,
    UserEnvelope,
    UserRead,
)
from ytgify_share.server.services.auth import AuthService
from ytgify_share.server.services.deps import AuthDep, CredentialsDep, CurrentUserDep, SessionDep

logger = get_logger(__name__)
router = APIRouter()


@router.post(
    "/signup",
    response_model=AuthResponse,
    status_code=201,
    summary="Sign Up",
    description="Create an account and return an access/refresh token pair.",
)
@router.post("/register", response_model=AuthResponse, status_code=201, include_in_schema=False)
async def signup(data: SignupRequest, session: SessionDep):
    return await AuthService(session).signup(data)


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Log In",
    description="Exchange email and password for an access/refresh token pair.",
)
async def login(data: LoginRequest, session: SessionDep):
    return await AuthService(session).login(data.email, data.password)


@router.post(
    "/logout",
    response_model=MessageResponse,
    summary="Log Out",
    description="Revoke the presented token. With `all_devices` every token of the user is revoked.",
)
@router.delete("/logout", response_model=MessageResponse, include_in_schema=False)
async def logout(auth: AuthDep, session: SessionDep, data: Optional[LogoutRequest] = None):
    user, payload = auth
    await AuthService(session).logout(user, payload, all_devices=bool(data and data.all_devices))
    return MessageResponse(message="Logout successful")


@router.get(
    "/me",
    response_model=UserEnvelope,
    summary="Current User",
    description="The account the bearer token belongs to.",
)
async def me(user: CurrentUserDep):
    return UserEnvelope(user=UserRead.model_validate(user))


@router.post(
    "/refresh",
    response_model=TokenResponse,
    summary="Refresh Tokens",
    description="Exchange a refresh token (body) or a still valid bearer token for a new token pair.",
)
async def refresh(session: SessionDep, credentials: CredentialsDep, data: Optional[RefreshRequest] = None):
    """
    Refresh the token pair.

    The token is read from ``refresh_token`` in the body, falling back to the
    ``Authorization`` header. The presented token is revoked.
    """
    token = (data.refresh_token if data else None) or (credentials.credentials if credentials else None)
    if not token:
        raise AuthenticationError("Refresh token is required")
    return await AuthService(session).refresh(token)

"""
Authentication service.

Implements the bearer token lifecycle used by web clients and the browser
extension: account creation, password login, token refresh and revocation.

A presented token is accepted only when:
- its signature, expiry and type check out,
- its ``jti`` is not in the denylist,
- its user still exists and its ``ujti`` claim equals the user's current ``jti``.

Rotating ``User.jti`` therefore revokes every token issued to that user.
"""

from __future__ import annotations

import uuid
from typing import Any, Dict, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from ytgify_share.core.database.base import utc_now
from ytgify_share.core.database.entities.users import User
from ytgify_share.core.database.repositories.jwt_denylist import JwtDenylistRepository
from ytgify_share.core.database.repositories.users import UserRepository
from ytgify_share.core.errors import AuthenticationError, InvalidCredentialsError, ValidationFailedError
from ytgify_share.core.logging_config import get_logger
from ytgify_share.core.models.io.auth import AuthResponse, SignupRequest, TokenResponse
from ytgify_share.core.models.io.users import UserRead
from ytgify_share.core.security import (
    ACCESS_TOKEN_TYPE,
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_password,
    token_expiry,
    verify_password,
)
from ytgify_share.server.core.config import settings

logger = get_logger(__name__)


class AuthService:
    """Account and token operations."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.users = UserRepository(session)
        self.denylist = JwtDenylistRepository(session)

    # ------------------------------------------------------------------
    # Tokens
    # ------------------------------------------------------------------

    def issue_tokens(self, user: User) -> Dict[str, Any]:
        access = create_access_token(user)
        return {
            "token": access,
            "access_token": access,
            "refresh_token": create_refresh_token(user),
            "token_type": "Bearer",
            "expires_in": settings.auth.access_token_expire_minutes * 60,
        }

    async def authenticate(self, token: str, expected_type: Optional[str] = ACCESS_TOKEN_TYPE) -> Tuple[User, Dict[str, Any]]:
        """
        Resolve a bearer token to its user.

        Args:
            token: Encoded JWT
            expected_type: Required token type, or None to accept access and refresh tokens

        Returns:
            The user and the decoded claims

        Raises:
            AuthenticationError: The token is invalid, revoked or stale
        """
        payload = decode_token(token, expected_type)
        if await self.denylist.is_revoked(payload["jti"]):
            raise AuthenticationError("Token has been revoked")
        try:
            user_id = uuid.UUID(str(payload["sub"]))
        except ValueError as e:
            raise AuthenticationError("Invalid token") from e
        user = await self.users.get_by_id(user_id)
        if user is None or payload.get("ujti") != user.jti:
            raise AuthenticationError("Token has been revoked")
        return user, payload

    # ------------------------------------------------------------------
    # Use cases
    # ------------------------------------------------------------------

    async def signup(self, data: SignupRequest) -> AuthResponse:
        errors = []
        if await self.users.email_taken(data.email):
            errors.append("Email has already been taken")
        if await self.users.username_taken(data.username):
            errors.append("Username has already been taken")
        if errors:
            raise ValidationFailedError("Registration failed", details=errors)

        user = User(
            email=data.email.lower(),
            username=data.username,
            display_name=data.display_name or data.username,
            password_hash=hash_password(data.password),
        )
        self._track_sign_in(user)
        await self.users.create(user)
        await self.session.commit()
        await self.session.refresh(user)
        logger.info(f"Registered user {user.id} ({user.username})")

        return AuthResponse(message="Registration successful", user=UserRead.model_validate(user), **self.issue_tokens(user))

    async def login(self, email: str, password: str) -> AuthResponse:
        user = await self.users.get_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            logger.info("Rejected login attempt")
            raise InvalidCredentialsError()

        self._track_sign_in(user)
        await self.users.update(user)
        await self.session.commit()
        await self.session.refresh(user)
        logger.debug(f"User {user.id} logged in (sign_in_count={user.sign_in_count})")

        return AuthResponse(message="Login successful", user=UserRead.model_validate(user), **self.issue_tokens(user))

    async def logout(self, user: User, payload: Dict[str, Any], all_devices: bool = False) -> None:
        """Revoke the presented token; with ``all_devices`` revoke every token of the user."""
        await self.denylist.revoke(payload["jti"], token_expiry(payload))
        if all_devices:
            user.rotate_jti()
            await self.users.update(user)
        await self.session.commit()
        logger.info(f"User {user.id} logged out (all_devices={all_devices})")

    async def refresh(self, token: str) -> TokenResponse:
        """Exchange a valid token for a fresh access/refresh pair.

        The presented token is revoked so it cannot be replayed.
        """
        user, payload = await self.authenticate(token, expected_type=None)
        await self.denylist.revoke(payload["jti"], token_expiry(payload))
        await self.session.commit()
        return TokenResponse(message="Token refreshed", **self.issue_tokens(user))

    @staticmethod
    def _track_sign_in(user: User) -> None:
        now = utc_now()
        user.last_sign_in_at = user.current_sign_in_at or now
        user.current_sign_in_at = now
        user.sign_in_count = (user.sign_in_count or 0) + 1

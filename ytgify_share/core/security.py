"""
Password hashing and bearer token helpers.

Passwords are hashed with bcrypt. Tokens are HS256 JWTs issued by PyJWT
and carry the claims ``sub``, ``email``, ``jti`` (unique per token),
``ujti`` (the user's session key), ``type``, ``iat`` and ``exp``.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
import jwt

from ytgify_share.core.errors import AuthenticationError
from ytgify_share.server.core.config import settings

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


def _encode(payload: Dict[str, Any], expires_delta: timedelta, token_type: str) -> str:
    auth = settings.auth
    now = datetime.now(timezone.utc)
    to_encode = payload.copy()
    to_encode.update(
        {
            "jti": str(uuid.uuid4()),
            "type": token_type,
            "iat": now,
            "exp": now + expires_delta,
        }
    )
    return jwt.encode(to_encode, auth.secret_key, algorithm=auth.algorithm)


def _claims_for(user) -> Dict[str, Any]:
    return {"sub": str(user.id), "email": user.email, "ujti": user.jti}


def create_access_token(user, expires_delta: Optional[timedelta] = None) -> str:
    """Issue a short-lived access token for ``user``."""
    delta = expires_delta or timedelta(minutes=settings.auth.access_token_expire_minutes)
    return _encode(_claims_for(user), delta, ACCESS_TOKEN_TYPE)


def create_refresh_token(user, expires_delta: Optional[timedelta] = None) -> str:
    """Issue a long-lived refresh token for ``user``."""
    delta = expires_delta or timedelta(days=settings.auth.refresh_token_expire_days)
    return _encode(_claims_for(user), delta, REFRESH_TOKEN_TYPE)


def decode_token(token: str, expected_type: Optional[str] = None) -> Dict[str, Any]:
    """
    Verify a token's signature and expiry and return its claims.

    Args:
        token: Encoded JWT
        expected_type: ``access`` or ``refresh``; ``None`` accepts both

    Raises:
        AuthenticationError: The token is malformed, expired, or of the wrong type
    """
    auth = settings.auth
    try:
        payload = jwt.decode(
            token,
            auth.secret_key,
            algorithms=[auth.algorithm],
            options={"require": ["sub", "jti", "exp"]},
        )
    except jwt.ExpiredSignatureError as e:
        raise AuthenticationError("Token has expired") from e
    except jwt.PyJWTError as e:
        raise AuthenticationError("Invalid token") from e

    if expected_type is not None and payload.get("type") != expected_type:
        raise AuthenticationError("Invalid token type")
    return payload


def token_expiry(payload: Dict[str, Any]) -> datetime:
    """Return the naive UTC expiry of decoded token claims."""
    return datetime.fromtimestamp(payload["exp"], tz=timezone.utc).replace(tzinfo=None)

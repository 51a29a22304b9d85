"""
Authentication I/O models.

Request bodies for signup, login, logout and token refresh, and the token
responses returned to web clients and the browser extension.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from .common import EnvelopeModel
from .users import PASSWORD_MAX_LENGTH, PASSWORD_MIN_LENGTH, UserRead, validate_username


class SignupRequest(EnvelopeModel):
    """Schema for creating an account."""

    envelope_key = "user"

    email: EmailStr = Field(description="Login email")
    username: str = Field(description="Unique handle (letters, digits, underscores)")
    password: str = Field(min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH)
    password_confirmation: Optional[str] = None
    display_name: Optional[str] = Field(default=None, max_length=50)

    @field_validator("username")
    @classmethod
    def _check_username(cls, v: str) -> str:
        return validate_username(v)

    @model_validator(mode="after")
    def _passwords_match(self) -> "SignupRequest":
        if self.password_confirmation is not None and self.password_confirmation != self.password:
            raise ValueError("Password confirmation doesn't match Password")
        return self


class LoginRequest(EnvelopeModel):
    envelope_key = "user"

    email: EmailStr
    password: str


class RefreshRequest(BaseModel):
    refresh_token: Optional[str] = None


class LogoutRequest(BaseModel):
    all_devices: bool = False


class AuthResponse(BaseModel):
    """Tokens plus the authenticated user.

    ``token`` duplicates ``access_token`` for browser extension clients.
    """

    message: str
    user: UserRead
    token: str
    access_token: str
    refresh_token: str
    token_type: str = "Bearer"
    expires_in: int = Field(description="Access token lifetime in seconds")


class TokenResponse(BaseModel):
    message: str
    token: str
    access_token: str
    refresh_token: str
    token_type: str = "Bearer"
    expires_in: int

"""Pydantic models for the auth endpoints."""

from enum import Enum

from pydantic import EmailStr, Field

from core.models.base import ApiModel, PayloadModel


class AuthStatus(str, Enum):
    """Where session resolution stands."""

    PENDING = "PENDING"
    AUTHENTICATED = "AUTHENTICATED"
    UNAUTHENTICATED = "UNAUTHENTICATED"


class LoginRequest(PayloadModel):
    """POST /auth/login. `login` is an email or a username."""

    login: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class RegisterRequest(PayloadModel):
    """POST /auth/register."""

    email: EmailStr
    password: str = Field(..., min_length=8)
    name: str = Field(..., min_length=1, max_length=255)


class ChangePasswordRequest(PayloadModel):
    old_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8)


class ForgotPasswordRequest(PayloadModel):
    email: EmailStr


class ResetPasswordRequest(PayloadModel):
    email: EmailStr
    recovery_code: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8)


class TokenResponse(ApiModel):
    """Login and refresh both answer with at least an access token."""

    access_token: str = Field(..., min_length=1)
    refresh_token: str | None = None

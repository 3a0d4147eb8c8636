"""Identity and social profile models."""

from datetime import datetime
from typing import Any

from pydantic import EmailStr, Field, field_validator, model_validator

from core.models.base import ApiModel, PayloadModel
from utils.birth_date import birth_date_to_iso, is_valid_birth_date


class BirthDate(ApiModel):
    """Day and month are required; the year is optional."""

    day: int
    month: int
    year: int | None = None

    def is_valid(self) -> bool:
        return is_valid_birth_date(self.day, self.month, self.year)

    def to_iso(self) -> str | None:
        """YYYY-MM-DD when the year is known."""
        return birth_date_to_iso(self.day, self.month, self.year)

    @classmethod
    def parse(cls, value: Any) -> Any:
        """Accept "YYYY-MM-DD[...]" strings as well as the structured form."""
        if isinstance(value, str):
            try:
                year, month, day = value[:10].split("-")
                return {"day": int(day), "month": int(month), "year": int(year)}
            except ValueError:
                raise ValueError(f"Unrecognized birth date: {value!r}")
        return value


class Identity(ApiModel):
    """The authenticated user. Exactly one per session."""

    id: str
    name: str
    email: EmailStr
    email_verified: bool = False
    birth_date: BirthDate | None = None
    language: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("birth_date", mode="before")
    @classmethod
    def parse_birth_date(cls, value: Any) -> Any:
        return BirthDate.parse(value)


class IdentityUpdate(PayloadModel):
    """PUT /users/me. Name and a valid birth date are both required."""

    name: str = Field(..., min_length=1, max_length=255)
    birth_date: BirthDate

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Name is required")
        return value

    @model_validator(mode="after")
    def require_valid_birth_date(self) -> "IdentityUpdate":
        if not self.birth_date.is_valid():
            raise ValueError("Invalid birth date")
        return self


class ProfileUpdate(PayloadModel):
    """PUT /users/profile. All fields optional."""

    name: str | None = Field(None, max_length=255)
    username: str | None = Field(None, min_length=3, max_length=50)
    bio: str | None = Field(None, max_length=500)
    avatar_url: str | None = None


class PublicUser(ApiModel):
    """Another user's public profile."""

    id: str
    username: str
    name: str
    bio: str | None = None
    avatar_url: str | None = None
    is_following: bool = False
    followers_count: int = 0
    following_count: int = 0
    public_wishlists_count: int = 0
    created_at: datetime | None = None


class UserProfile(PublicUser):
    """The authenticated user's own full profile."""

    email: EmailStr
    is_email_verified: bool = False
    updated_at: datetime | None = None


class UserSearchResult(ApiModel):
    id: str
    username: str
    name: str
    avatar_url: str | None = None
    is_following: bool = False

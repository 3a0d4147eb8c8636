"""Dependent models. A dependent owns wishlists but never signs in."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import Field, field_validator, model_validator

from core.models.base import ApiModel, PayloadModel
from core.models.user import BirthDate


class Relationship(str, Enum):
    SON = "son"
    DAUGHTER = "daughter"
    BROTHER = "brother"
    SISTER = "sister"
    NEPHEW = "nephew"
    NIECE = "niece"
    OTHER = "other"


class Dependent(ApiModel):
    """A pseudo-identity managed by one primary and at most one secondary guardian."""

    id: str
    name: str
    birth_date: BirthDate | None = None
    relationship: Relationship = Relationship.OTHER
    guardian_id: str
    guardian_name: str | None = None
    second_guardian_id: str | None = None
    second_guardian_name: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("birth_date", mode="before")
    @classmethod
    def parse_birth_date(cls, value: Any) -> Any:
        return BirthDate.parse(value)

    @property
    def guardian_ids(self) -> set[str]:
        return {g for g in (self.guardian_id, self.second_guardian_id) if g}

    def is_guardian(self, user_id: str) -> bool:
        return bool(user_id) and user_id in self.guardian_ids


class DependentCreate(PayloadModel):
    """POST /users/me/dependents."""

    full_name: str = Field(..., min_length=1, max_length=255)
    birth_date: BirthDate | None = None
    relationship: Relationship

    @model_validator(mode="after")
    def require_valid_birth_date(self) -> "DependentCreate":
        if self.birth_date is not None and not self.birth_date.is_valid():
            raise ValueError("Invalid birth date")
        return self


class DependentUpdate(PayloadModel):
    """PUT /users/:id. All fields optional."""

    name: str | None = Field(None, min_length=1, max_length=255)
    birth_date: BirthDate | None = None
    relationship: Relationship | None = None

    @model_validator(mode="after")
    def require_valid_birth_date(self) -> "DependentUpdate":
        if self.birth_date is not None and not self.birth_date.is_valid():
            raise ValueError("Invalid birth date")
        return self

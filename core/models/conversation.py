"""Anonymized item conversations between a list owner and gift givers."""

from datetime import datetime

from pydantic import Field

from core.models.base import ApiModel


class Conversation(ApiModel):
    id: str
    item_id: str
    participants: list[str] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None


class AnonymizedMessage(ApiModel):
    """A message with the sender hidden; only "was it me" is known."""

    id: str
    message: str
    timestamp: datetime
    is_from_current_user: bool = False

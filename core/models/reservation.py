"""Reservation models."""

from datetime import datetime
from enum import Enum

from pydantic import Field

from core.models.base import ApiModel, PayloadModel


class ReservationStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"


class Reservation(ApiModel):
    """A non-owner's claim on an item. Drives the item's `reserved_by`."""

    id: str
    item_id: str
    user_id: str
    quantity: int = 1
    status: ReservationStatus = ReservationStatus.PENDING
    message: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ReservationCreate(PayloadModel):
    """POST /reservations."""

    item_id: str = Field(..., min_length=1)
    quantity: int = Field(1, ge=1)
    message: str | None = Field(None, max_length=500)

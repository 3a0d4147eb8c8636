"""
Price and quantity normalization at the API boundary.

The backend is inconsistent about two item fields:

- price arrives as a bare number or as a {"min", "max"} range
- quantity arrives as a bare number or as {"desired", "reserved", "received"}

Both are folded into one structured form here. Nothing past the service layer
ever sees the raw union, and normalizing an already-normalized value returns
it unchanged.
"""

from collections.abc import Mapping
from decimal import Decimal, InvalidOperation
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class PriceRange(BaseModel):
    """A single price (min only) or a min/max range."""

    model_config = ConfigDict(frozen=True)

    min: Decimal | None = Field(None, ge=0)
    max: Decimal | None = Field(None, ge=0)

    @model_validator(mode="after")
    def require_a_bound(self) -> "PriceRange":
        if self.min is None and self.max is None:
            raise ValueError("A price needs at least one of min or max")
        return self

    @property
    def is_single(self) -> bool:
        return self.max is None or self.max == self.min

    def to_payload(self) -> dict[str, float]:
        """Structured form the API expects on create/update."""
        payload = {}
        if self.min is not None:
            payload["min"] = float(self.min)
        if self.max is not None:
            payload["max"] = float(self.max)
        return payload


class Quantity(BaseModel):
    """How many of an item are wanted, reserved and already received."""

    model_config = ConfigDict(frozen=True)

    desired: int = Field(1, ge=0)
    reserved: int = Field(0, ge=0)
    received: int = Field(0, ge=0)

    @property
    def available(self) -> int:
        return max(self.desired - self.reserved - self.received, 0)

    def to_payload(self) -> dict[str, int]:
        return {"desired": self.desired}


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, bool):
        raise TypeError("Price cannot be a boolean")
    try:
        return Decimal(str(value))
    except InvalidOperation:
        raise ValueError(f"Invalid price value: {value!r}")


def normalize_price(raw: Any) -> PriceRange | None:
    """
    Fold a raw price into a PriceRange.

    None, or a mapping with neither bound, means "no price".

    Raises:
        TypeError: For shapes that are neither scalar nor mapping
        ValueError: For non-numeric values
    """
    if raw is None or isinstance(raw, PriceRange):
        return raw

    if isinstance(raw, Mapping):
        low, high = raw.get("min"), raw.get("max")
        if low is None and high is None:
            return None
        return PriceRange(
            min=_to_decimal(low) if low is not None else None,
            max=_to_decimal(high) if high is not None else None,
        )

    if isinstance(raw, (int, float, Decimal, str)):
        return PriceRange(min=_to_decimal(raw))

    raise TypeError(f"Unsupported price shape: {type(raw).__name__}")


def normalize_quantity(raw: Any) -> Quantity:
    """
    Fold a raw quantity into a Quantity.

    Missing quantity means one of the item is wanted.

    Raises:
        TypeError: For shapes that are neither integer nor mapping
    """
    if raw is None:
        return Quantity()
    if isinstance(raw, Quantity):
        return raw

    if isinstance(raw, Mapping):
        desired = raw.get("desired")
        return Quantity(
            desired=1 if desired is None else desired,
            reserved=raw.get("reserved") or 0,
            received=raw.get("received") or 0,
        )

    if isinstance(raw, bool):
        raise TypeError("Quantity cannot be a boolean")
    if isinstance(raw, float) and raw.is_integer():
        raw = int(raw)
    if isinstance(raw, int):
        return Quantity(desired=raw)

    raise TypeError(f"Unsupported quantity shape: {type(raw).__name__}")

"""Wishlist item models."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import AliasChoices, Field, field_validator

from core.models.base import ApiModel, PayloadModel
from core.normalize import PriceRange, Quantity, normalize_price, normalize_quantity


class ItemType(str, Enum):
    SPECIFIC_PRODUCT = "SPECIFIC_PRODUCT"
    ONGOING_SUGGESTION = "ONGOING_SUGGESTION"


class Item(ApiModel):
    """An item on exactly one wishlist. Price and quantity are always normalized."""

    id: str
    title: str = Field(validation_alias=AliasChoices("title", "name"))
    description: str | None = None
    price: PriceRange | None = None
    currency: str | None = None
    link: str | None = Field(None, validation_alias=AliasChoices("link", "url"))
    image_url: str | None = None
    quantity: Quantity = Field(default_factory=Quantity)
    item_type: ItemType = ItemType.SPECIFIC_PRODUCT
    notes: str | None = None
    reserved_by: str | None = None
    reserved_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("price", mode="before")
    @classmethod
    def normalize_price_shape(cls, value: Any) -> PriceRange | None:
        return normalize_price(value)

    @field_validator("quantity", mode="before")
    @classmethod
    def normalize_quantity_shape(cls, value: Any) -> Quantity:
        return normalize_quantity(value)

    @property
    def is_reserved(self) -> bool:
        return self.reserved_by is not None


class _ItemFields(PayloadModel):
    """Fields shared by create and update. Price accepts either raw shape."""

    description: str | None = Field(None, max_length=2000)
    price: PriceRange | None = None
    currency: str | None = Field(None, max_length=10)
    url: str | None = None
    image_url: str | None = None
    notes: str | None = Field(None, max_length=2000)

    @field_validator("price", mode="before")
    @classmethod
    def normalize_price_shape(cls, value: Any) -> PriceRange | None:
        return normalize_price(value)

    def to_payload(self) -> dict[str, Any]:
        payload = self.model_dump(
            mode="json",
            by_alias=True,
            exclude_none=True,
            exclude={"price", "url", "quantity"},
        )
        if self.price is not None:
            payload["price"] = self.price.to_payload()
        if self.url is not None:
            payload["link"] = self.url
        quantity = getattr(self, "quantity", None)
        if quantity is not None:
            payload["quantity"] = {"desired": quantity}
        return payload


class ItemCreate(_ItemFields):
    """POST /wishlists/:wid/items."""

    title: str = Field(..., min_length=1, max_length=255)
    quantity: int | None = Field(None, ge=1)
    item_type: ItemType = ItemType.SPECIFIC_PRODUCT


class ItemUpdate(_ItemFields):
    """PUT /items/:id and friends. All fields optional."""

    title: str | None = Field(None, min_length=1, max_length=255)
    quantity: int | None = Field(None, ge=1)
    item_type: ItemType | None = None

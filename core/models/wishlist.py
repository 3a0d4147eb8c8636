"""Wishlist models."""

from datetime import datetime

from pydantic import AliasChoices, Field, model_validator

from core.models.base import ApiModel, PayloadModel
from core.models.item import Item


class WishlistSharing(ApiModel):
    """Public-link state. The server generates the token when publishing."""

    is_public: bool = False
    public_link_token: str | None = Field(
        None,
        validation_alias=AliasChoices("publicLinkToken", "publicLink", "public_link_token"),
    )


class Wishlist(ApiModel):
    """
    A list of items owned by an identity or by a dependent.

    The owner is whoever `owner_id` names; whether the current identity may
    edit it is decided by auth.permissions, never stored here.
    """

    id: str
    title: str
    description: str | None = None
    owner_id: str
    owner_name: str | None = None
    is_public: bool = False
    items: list[Item] = Field(default_factory=list)
    sharing: WishlistSharing = Field(default_factory=WishlistSharing)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @model_validator(mode="after")
    def reconcile_sharing(self) -> "Wishlist":
        """Public on either flag means public; a private list never keeps a token."""
        public = self.is_public or self.sharing.is_public
        token = self.sharing.public_link_token if public else None
        self.is_public = public
        self.sharing = WishlistSharing(is_public=public, public_link_token=token)
        return self

    @property
    def public_link_token(self) -> str | None:
        return self.sharing.public_link_token

    def find_item(self, item_id: str) -> Item | None:
        return next((item for item in self.items if item.id == item_id), None)


class WishlistCreate(PayloadModel):
    """POST /wishlists and POST /users/dependents/:id/wishlists."""

    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(None, max_length=2000)


class WishlistUpdate(PayloadModel):
    """PUT /wishlists/:id. All fields optional."""

    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, max_length=2000)
    is_public: bool | None = None

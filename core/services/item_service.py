"""
Item service.

Items have no cache of their own; they live inside wishlist detail and list
entries. Every write invalidates the owning wishlist's detail and fans out
over the wishlist and dependent-wishlist families, which embed item copies.
"""

import logging

from core.models import Item, ItemCreate, ItemUpdate
from core.query_keys import DependentWishlistKeys, PublicWishlistKeys, WishlistKeys
from core.services.base import BaseService

logger = logging.getLogger(__name__)

_ITEM_FAMILIES = (WishlistKeys.ALL, DependentWishlistKeys.ALL, PublicWishlistKeys.ALL)


def _item_or_none(body) -> Item | None:
    return Item.model_validate(body) if isinstance(body, dict) and body else None


class ItemService(BaseService):
    """Service for item operations."""

    def add(self, wishlist_id: str, data: ItemCreate) -> Item | None:
        """
        Add an item to a wishlist.

        Price is sent as {"min", "max"}, quantity as {"desired"}, url as link.
        """
        body = self._mutate(
            lambda: self.api.post(f"/wishlists/{wishlist_id}/items", json=data.to_payload()),
            [WishlistKeys.detail(wishlist_id), *_ITEM_FAMILIES],
        )
        logger.info(f"Added item to wishlist {wishlist_id}")
        return _item_or_none(body)

    def update_in_wishlist(self, wishlist_id: str, item_id: str, data: ItemUpdate) -> Item | None:
        body = self._mutate(
            lambda: self.api.put(f"/wishlists/{wishlist_id}/items/{item_id}", json=data.to_payload()),
            [WishlistKeys.detail(wishlist_id), *_ITEM_FAMILIES],
        )
        return _item_or_none(body)

    def remove_from_wishlist(self, wishlist_id: str, item_id: str) -> None:
        self._mutate(
            lambda: self.api.delete(f"/wishlists/{wishlist_id}/items/{item_id}"),
            [WishlistKeys.detail(wishlist_id), *_ITEM_FAMILIES],
        )

    def update(self, item_id: str, data: ItemUpdate) -> Item | None:
        """Metadata-only update; the wishlist is resolved server-side."""
        body = self._mutate(
            lambda: self.api.put(f"/items/{item_id}", json=data.to_payload()),
            _ITEM_FAMILIES,
        )
        return _item_or_none(body)

    def change_quantity(self, item_id: str, desired: int) -> Item | None:
        if desired < 1:
            raise ValueError("Desired quantity must be at least 1")
        body = self._mutate(
            lambda: self.api.patch(f"/items/{item_id}/quantity", json={"desired": desired}),
            _ITEM_FAMILIES,
        )
        return _item_or_none(body)

    def delete(self, item_id: str) -> None:
        self._mutate(lambda: self.api.delete(f"/items/{item_id}"), _ITEM_FAMILIES)
        logger.info(f"Deleted item {item_id}")

    def mark_as_received(self, item_id: str, quantity_received: int = 1) -> Item | None:
        if quantity_received < 1:
            raise ValueError("Received quantity must be at least 1")
        body = self._mutate(
            lambda: self.api.post(
                f"/items/{item_id}/mark-as-received",
                json={"quantityReceived": quantity_received},
            ),
            _ITEM_FAMILIES,
        )
        return _item_or_none(body)

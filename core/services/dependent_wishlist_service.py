"""
Wishlists owned by a dependent, managed by one of its guardians.

Lists can be soft deleted (restorable) or removed permanently. Items on a
dependent's list have their own endpoints under the dependent.
"""

import logging

from core.models import ItemCreate, ItemUpdate, Wishlist, WishlistCreate, WishlistUpdate
from core.query_keys import DependentWishlistKeys, WishlistKeys
from core.services.base import BaseService

logger = logging.getLogger(__name__)


class DependentWishlistService(BaseService):
    """Service for a dependent's wishlists and their items."""

    def _invalidates(self, dependent_id: str) -> list:
        # Dependent lists also show up under the guardian's wishlist caches
        return [DependentWishlistKeys.list(dependent_id), WishlistKeys.ALL]

    def list(self, dependent_id: str, require_fresh: bool = False) -> list[Wishlist]:
        return self._query(
            DependentWishlistKeys.list(dependent_id),
            lambda: [
                Wishlist.model_validate(w)
                for w in self.api.get(f"/users/dependents/{dependent_id}/wishlists") or []
            ],
            require_fresh=require_fresh,
        )

    def create(self, dependent_id: str, data: WishlistCreate) -> Wishlist | None:
        body = self._mutate(
            lambda: self.api.post(f"/users/dependents/{dependent_id}/wishlists", json=data.to_payload()),
            self._invalidates(dependent_id),
        )
        logger.info(f"Created wishlist for dependent {dependent_id}")
        return Wishlist.model_validate(body) if body else None

    def update(self, dependent_id: str, wishlist_id: str, data: WishlistUpdate) -> None:
        self._mutate(
            lambda: self.api.put(
                f"/users/dependents/{dependent_id}/wishlists/{wishlist_id}",
                json=data.to_payload(),
            ),
            self._invalidates(dependent_id),
        )

    def soft_delete(self, dependent_id: str, wishlist_id: str) -> None:
        """Move to trash. restore() brings it back."""
        self._mutate(
            lambda: self.api.delete(f"/users/dependents/{dependent_id}/wishlists/{wishlist_id}"),
            self._invalidates(dependent_id),
        )

    def hard_delete(self, dependent_id: str, wishlist_id: str) -> None:
        self._mutate(
            lambda: self.api.delete(f"/users/dependents/{dependent_id}/wishlists/{wishlist_id}/permanent"),
            self._invalidates(dependent_id),
        )
        logger.info(f"Permanently deleted wishlist {wishlist_id} of dependent {dependent_id}")

    def restore(self, dependent_id: str, wishlist_id: str) -> None:
        self._mutate(
            lambda: self.api.post(f"/users/dependents/{dependent_id}/wishlists/{wishlist_id}/restore"),
            self._invalidates(dependent_id),
        )

    # -------------------------------------------------------------------------
    # Items
    # -------------------------------------------------------------------------

    def create_item(self, dependent_id: str, wishlist_id: str, data: ItemCreate) -> None:
        self._mutate(
            lambda: self.api.post(
                f"/users/dependents/{dependent_id}/wishlists/{wishlist_id}/items",
                json=data.to_payload(),
            ),
            self._invalidates(dependent_id),
        )

    def update_item(self, dependent_id: str, item_id: str, data: ItemUpdate) -> None:
        self._mutate(
            lambda: self.api.put(f"/users/dependents/{dependent_id}/items/{item_id}", json=data.to_payload()),
            self._invalidates(dependent_id),
        )

    def delete_item(self, dependent_id: str, item_id: str) -> None:
        self._mutate(
            lambda: self.api.delete(f"/users/dependents/{dependent_id}/items/{item_id}"),
            self._invalidates(dependent_id),
        )

    def update_item_quantity(self, dependent_id: str, item_id: str, desired: int) -> None:
        if desired < 1:
            raise ValueError("Desired quantity must be at least 1")
        self._mutate(
            lambda: self.api.put(
                f"/users/dependents/{dependent_id}/items/{item_id}/quantity",
                json={"desired": desired},
            ),
            self._invalidates(dependent_id),
        )

    def mark_item_received(self, dependent_id: str, item_id: str, quantity_received: int) -> None:
        if quantity_received < 1:
            raise ValueError("Received quantity must be at least 1")
        self._mutate(
            lambda: self.api.post(
                f"/users/dependents/{dependent_id}/items/{item_id}/mark-received",
                json={"quantityReceived": quantity_received},
            ),
            self._invalidates(dependent_id),
        )

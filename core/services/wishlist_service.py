"""
Wishlist service.

Wishlist summaries are embedded in several caches at once: the owner's list,
a dependent's list, other users' "following" feed and the public view. A
wishlist's owner isn't known without another read, so writes fan out over
whole families instead of naming exact keys.
"""

import logging

from core.models import Wishlist, WishlistCreate, WishlistUpdate
from core.query_keys import DependentWishlistKeys, PublicWishlistKeys, WishlistKeys
from core.services.base import BaseService

logger = logging.getLogger(__name__)


def _wishlists(raw) -> list[Wishlist]:
    return [Wishlist.model_validate(w) for w in raw or []]


class WishlistService(BaseService):
    """Service for wishlist operations."""

    def list_mine(self, require_fresh: bool = False) -> list[Wishlist]:
        return self._query(
            WishlistKeys.mine(),
            lambda: _wishlists(self.api.get("/wishlists/mine")),
            require_fresh=require_fresh,
        )

    def get(self, wishlist_id: str, require_fresh: bool = False) -> Wishlist:
        """
        Get one wishlist with its items.

        Raises:
            NotFoundError: Deleted, or private and not visible to this identity
        """
        return self._query(
            WishlistKeys.detail(wishlist_id),
            lambda: Wishlist.model_validate(self.api.get(f"/wishlists/{wishlist_id}")),
            require_fresh=require_fresh,
        )

    def list_following(self) -> list[Wishlist]:
        """Public wishlists of the users the current identity follows."""
        return self._query(
            WishlistKeys.following(),
            lambda: _wishlists(self.api.get("/wishlists/following")),
        )

    def get_public(self, token: str) -> Wishlist:
        """
        Read a shared wishlist through its public link.

        No session required and no retry: a missing or unpublished token is
        an expected NotFoundError, not a transient failure.
        """
        return self._query(
            PublicWishlistKeys.detail(token),
            lambda: Wishlist.model_validate(self.api.get(f"/public/wishlists/{token}")),
            authenticated=False,
            retry=0,
        )

    def create(self, data: WishlistCreate) -> Wishlist:
        wishlist = self._mutate(
            lambda: Wishlist.model_validate(self.api.post("/wishlists", json=data.to_payload())),
            [WishlistKeys.lists()],
        )
        logger.info(f"Created wishlist {wishlist.id}")
        return wishlist

    def update(self, wishlist_id: str, data: WishlistUpdate) -> Wishlist:
        return self._mutate(
            lambda: Wishlist.model_validate(self.api.put(f"/wishlists/{wishlist_id}", json=data.to_payload())),
            [WishlistKeys.ALL, DependentWishlistKeys.ALL, PublicWishlistKeys.ALL],
        )

    def delete(self, wishlist_id: str) -> None:
        self._mutate(
            lambda: self.api.delete(f"/wishlists/{wishlist_id}"),
            [WishlistKeys.ALL, DependentWishlistKeys.ALL, PublicWishlistKeys.ALL],
        )
        logger.info(f"Deleted wishlist {wishlist_id}")

    def update_sharing(self, wishlist_id: str, is_public: bool) -> Wishlist | None:
        """
        Publish or unpublish a wishlist.

        Publishing makes the server mint a public link token; unpublishing
        revokes it. The following feed can't tell which entries embed this
        list, so the whole family is invalidated.
        """
        body = self._mutate(
            lambda: self.api.patch(f"/wishlists/{wishlist_id}/sharing", json={"isPublic": is_public}),
            [WishlistKeys.ALL, DependentWishlistKeys.ALL, PublicWishlistKeys.ALL],
        )
        logger.info(f"Wishlist {wishlist_id} is now {'public' if is_public else 'private'}")
        return Wishlist.model_validate(body) if body else None

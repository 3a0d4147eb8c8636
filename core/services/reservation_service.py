"""
Reservation service.

The server is the only judge of whether a reservation is allowed: reserving
one's own item or an item someone else already holds is rejected there, and
the rejection (ValidationError, ConflictError) reaches the caller unchanged.
Items embed `reservedBy`, so every successful write also invalidates the
wishlist families.
"""

import logging

from core.models import Reservation, ReservationCreate
from core.query_keys import DependentWishlistKeys, PublicWishlistKeys, ReservationKeys, WishlistKeys
from core.services.base import BaseService

logger = logging.getLogger(__name__)

_RESERVATION_FAMILIES = (
    ReservationKeys.ALL,
    WishlistKeys.ALL,
    DependentWishlistKeys.ALL,
    PublicWishlistKeys.ALL,
)


class ReservationService(BaseService):
    """Service for reservation operations."""

    def list_mine(self, require_fresh: bool = False) -> list[Reservation]:
        return self._query(
            ReservationKeys.mine(),
            lambda: [Reservation.model_validate(r) for r in self.api.get("/reservations/mine") or []],
            require_fresh=require_fresh,
        )

    def get(self, reservation_id: str) -> Reservation:
        return self._query(
            ReservationKeys.detail(reservation_id),
            lambda: Reservation.model_validate(self.api.get(f"/reservations/{reservation_id}")),
        )

    def create(self, data: ReservationCreate) -> Reservation:
        """
        Reserve an item.

        Raises:
            ConflictError: Item already reserved by someone else
            ValidationError: Own item, or quantity rejected
        """
        reservation = self._mutate(
            lambda: Reservation.model_validate(self.api.post("/reservations", json=data.to_payload())),
            _RESERVATION_FAMILIES,
        )
        logger.info(f"Reserved item {reservation.item_id}")
        return reservation

    def update_quantity(self, reservation_id: str, quantity: int) -> Reservation:
        if quantity < 1:
            raise ValueError("Reservation quantity must be at least 1")
        return self._mutate(
            lambda: Reservation.model_validate(
                self.api.patch(f"/reservations/{reservation_id}", json={"quantity": quantity})
            ),
            _RESERVATION_FAMILIES,
        )

    def confirm_purchase(self, reservation_id: str) -> Reservation:
        return self._mutate(
            lambda: Reservation.model_validate(
                self.api.post(f"/reservations/{reservation_id}/confirm-purchase")
            ),
            _RESERVATION_FAMILIES,
        )

    def cancel(self, reservation_id: str) -> Reservation | None:
        body = self._mutate(
            lambda: self.api.delete(f"/reservations/{reservation_id}"),
            _RESERVATION_FAMILIES,
        )
        logger.info(f"Cancelled reservation {reservation_id}")
        return Reservation.model_validate(body) if body else None

"""
Dependent service.

Dependents are pseudo-identities a guardian manages. Their list is also what
auth.permissions reads to decide who may edit a dependent's wishlists, so every
guardianship change invalidates it.
"""

import logging

from core.models import Dependent, DependentCreate, DependentUpdate
from core.query_keys import DependentKeys, DependentWishlistKeys
from core.services.base import BaseService

logger = logging.getLogger(__name__)


class DependentService(BaseService):
    """Service for dependent operations."""

    def list_mine(self, require_fresh: bool = False) -> list[Dependent]:
        """Dependents the current identity guards (primary or secondary)."""
        return self._query(
            DependentKeys.mine(),
            lambda: [Dependent.model_validate(d) for d in self.api.get("/users/me/dependents") or []],
            require_fresh=require_fresh,
        )

    def get(self, dependent_id: str) -> Dependent:
        """
        Get one dependent.

        Raises:
            NotFoundError: Deleted, or not guarded by the current identity
        """
        return self._query(
            DependentKeys.detail(dependent_id),
            lambda: Dependent.model_validate(self.api.get(f"/users/dependents/{dependent_id}")),
        )

    def create(self, data: DependentCreate) -> Dependent:
        dependent = self._mutate(
            lambda: Dependent.model_validate(self.api.post("/users/me/dependents", json=data.to_payload())),
            [DependentKeys.mine()],
        )
        logger.info(f"Created dependent {dependent.id}")
        return dependent

    def update(self, dependent_id: str, data: DependentUpdate) -> Dependent:
        return self._mutate(
            lambda: Dependent.model_validate(self.api.put(f"/users/{dependent_id}", json=data.to_payload())),
            [DependentKeys.mine(), DependentKeys.detail(dependent_id)],
        )

    def delete(self, dependent_id: str) -> None:
        """Delete a dependent. Its wishlist cache goes with it."""
        self._mutate(
            lambda: self.api.delete(f"/users/dependents/{dependent_id}"),
            [
                DependentKeys.mine(),
                DependentKeys.detail(dependent_id),
                DependentWishlistKeys.list(dependent_id),
            ],
        )
        logger.info(f"Deleted dependent {dependent_id}")

    def add_guardian(self, dependent_id: str, guardian_id: str) -> Dependent:
        """Make another user the dependent's second guardian."""
        dependent = self._mutate(
            lambda: Dependent.model_validate(
                self.api.post(
                    f"/users/dependents/{dependent_id}/add-guardian",
                    json={"guardianId": guardian_id},
                )
            ),
            [DependentKeys.mine(), DependentKeys.detail(dependent_id)],
        )
        logger.info(f"Added guardian {guardian_id} to dependent {dependent_id}")
        return dependent

    def remove_guardian(self, dependent_id: str) -> Dependent:
        """Drop the second guardian."""
        return self._mutate(
            lambda: Dependent.model_validate(
                self.api.delete(f"/users/dependents/{dependent_id}/guardianship")
            ),
            [DependentKeys.mine(), DependentKeys.detail(dependent_id)],
        )

"""Who may manage a resource.

A resource is manageable by its owner, and by the guardians of a dependent
owner. The answer is always derived from the current dependent list, never
stored on the resource, so adding or removing a guardian takes effect on the
next check.
"""

import logging
from typing import Iterable

from auth.session import SessionManager
from core.models import Dependent, Identity

logger = logging.getLogger(__name__)


def is_guardian_of_dependent_owner(
    identity: Identity | None,
    dependents: Iterable[Dependent] | None,
    owner_id: str | None,
) -> bool:
    """True only when owner_id is a dependent this identity guards.

    Direct ownership does not count.
    """
    if identity is None or not owner_id or dependents is None:
        return False
    return any(d.id == owner_id and d.is_guardian(identity.id) for d in dependents)


def can_manage(
    identity: Identity | None,
    dependents: Iterable[Dependent] | None,
    owner_id: str | None,
) -> bool:
    """True for the owner and for guardians of a dependent owner."""
    if identity is None or not owner_id:
        return False
    if identity.id == owner_id:
        return True
    return is_guardian_of_dependent_owner(identity, dependents, owner_id)


class PermissionChecker:
    """Binds can_manage to the live session and the cached dependent list.

    Fails closed: with no identity, or when the dependent list can't be
    loaded, every check answers False.
    """

    def __init__(self, session: SessionManager, dependent_service):
        self._session = session
        self._dependents = dependent_service

    def _load_dependents(self) -> list[Dependent] | None:
        try:
            return self._dependents.list_mine()
        except Exception as e:
            logger.warning(f"Could not load dependents for permission check: {e}")
            return None

    def can_manage(self, owner_id: str | None) -> bool:
        identity = self._session.identity
        if identity is None or not owner_id:
            return False
        if identity.id == owner_id:
            return True
        return is_guardian_of_dependent_owner(identity, self._load_dependents(), owner_id)

    def is_guardian_of_dependent_owner(self, owner_id: str | None) -> bool:
        identity = self._session.identity
        if identity is None or not owner_id:
            return False
        return is_guardian_of_dependent_owner(identity, self._load_dependents(), owner_id)

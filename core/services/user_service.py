"""
User service: the signed-in identity and its own profile.

Updates to the identity also refresh the session snapshot so the rest of the
process sees the new name, birth date or language without a refetch.
"""

import logging

from core.models import Identity, IdentityUpdate, ProfileUpdate, UserProfile
from core.query_keys import UserKeys
from core.services.base import BaseService

logger = logging.getLogger(__name__)


class UserService(BaseService):
    """Reads and writes for /users/me and /users/profile."""

    def get_me(self, require_fresh: bool = False) -> Identity:
        return self._query(
            UserKeys.me(),
            lambda: Identity.model_validate(self.api.get("/users/me")),
            require_fresh=require_fresh,
        )

    def get_profile(self) -> UserProfile:
        return self._query(
            UserKeys.profile(),
            lambda: UserProfile.model_validate(self.api.get("/users/me/profile")),
        )

    def update_me(self, data: IdentityUpdate) -> Identity:
        """
        Update name and birth date.

        Input is validated before anything is sent: an IdentityUpdate can only
        be built with a non-blank name and a real calendar date.
        """
        def call() -> Identity:
            identity = Identity.model_validate(self.api.put("/users/me", json=data.to_payload()))
            self.session.update_identity(identity)
            return identity

        identity = self._mutate(call, [UserKeys.ALL])
        logger.info(f"Updated identity {identity.id}")
        return identity

    def update_profile(self, data: ProfileUpdate) -> UserProfile:
        return self._mutate(
            lambda: UserProfile.model_validate(self.api.put("/users/profile", json=data.to_payload())),
            [UserKeys.ALL],
        )

    def update_language(self, language: str) -> str:
        """Persist the preferred language and mirror it onto the session identity."""
        def call() -> str:
            body = self.api.put("/users/me/language", json={"language": language}) or {}
            saved = body.get("language", language)
            current = self.session.identity
            if current is not None:
                self.session.update_identity(current.model_copy(update={"language": saved}))
            return saved

        return self._mutate(call, [UserKeys.ALL])

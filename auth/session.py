"""Session state: the one authenticated identity and its bearer token.

The token and an identity snapshot are persisted under fixed keys so a new
process can restore the session. Everything that needs to know "who is
signed in" asks this object; nothing reads storage directly.
"""

import json
import logging
import threading
from typing import Protocol

from pydantic import ValidationError

from auth.exceptions import NotAuthenticatedError, SessionNotReadyError
from auth.types import AuthStatus
from core.event_bus import EventBus
from core.events import SessionEnded, SessionEstablished
from core.models import Identity

logger = logging.getLogger(__name__)


class SessionStorage(Protocol):
    """Durable key/value store (ValkeyClient, MemoryStorage)."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> bool: ...


class SessionManager:
    """Session lifecycle: restore, establish, update, tear down.

    Status starts PENDING until a restore attempt resolves it. Gated callers
    block in require_authenticated() while it is PENDING, so nothing fires
    before restoration has finished.
    """

    TOKEN_KEY = "accessToken"
    USER_KEY = "user"

    def __init__(self, storage: SessionStorage, event_bus: EventBus | None = None):
        self._storage = storage
        self._bus = event_bus
        self._cond = threading.Condition()
        self._status = AuthStatus.PENDING
        self._token: str | None = None
        self._identity: Identity | None = None

    @property
    def status(self) -> AuthStatus:
        with self._cond:
            return self._status

    @property
    def identity(self) -> Identity | None:
        with self._cond:
            return self._identity

    @property
    def is_authenticated(self) -> bool:
        with self._cond:
            return self._status == AuthStatus.AUTHENTICATED and self._identity is not None

    def stored_token(self) -> str | None:
        """Bearer token as persisted. None after teardown."""
        return self._storage.get(self.TOKEN_KEY)

    def stored_identity(self) -> Identity | None:
        """Identity snapshot from storage, without a network call."""
        raw = self._storage.get(self.USER_KEY)
        if raw is None:
            return None
        try:
            return Identity.model_validate(json.loads(raw))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning(f"Discarding unreadable identity snapshot: {e}")
            return None

    def begin_restore(self) -> str | None:
        """Mark resolution in progress and return the persisted token, if any."""
        with self._cond:
            self._status = AuthStatus.PENDING
            return self.stored_token()

    def establish(self, token: str, identity: Identity) -> None:
        """Persist token + identity and mark the session authenticated."""
        with self._cond:
            self._storage.set(self.TOKEN_KEY, token)
            self._storage.set(self.USER_KEY, identity.model_dump_json(by_alias=True))
            self._token = token
            self._identity = identity
            self._status = AuthStatus.AUTHENTICATED
            self._cond.notify_all()

        logger.info(f"Session established for user {identity.id}")
        if self._bus is not None:
            self._bus.publish(SessionEstablished.create(identity))

    def replace_token(self, token: str) -> None:
        """Swap the bearer token (after an explicit refresh)."""
        with self._cond:
            self._storage.set(self.TOKEN_KEY, token)
            self._token = token

    def update_identity(self, identity: Identity) -> None:
        """Refresh the in-memory identity and its persisted snapshot.

        Raises:
            NotAuthenticatedError: If there is no session to update.
        """
        with self._cond:
            if self._status != AuthStatus.AUTHENTICATED:
                raise NotAuthenticatedError("No session to update")
            self._storage.set(self.USER_KEY, identity.model_dump_json(by_alias=True))
            self._identity = identity

    def teardown(self, reason: str = "logout", redirect_to: str | None = None) -> None:
        """Clear persisted and in-memory session state.

        Safe to call when already signed out.
        """
        with self._cond:
            self._storage.delete(self.TOKEN_KEY)
            self._storage.delete(self.USER_KEY)
            was_authenticated = self._identity is not None
            self._token = None
            self._identity = None
            self._status = AuthStatus.UNAUTHENTICATED
            self._cond.notify_all()

        if was_authenticated:
            logger.info(f"Session ended ({reason})")
        if self._bus is not None:
            self._bus.publish(SessionEnded.create(reason, redirect_to))

    def mark_unauthenticated(self) -> None:
        """Resolve a restore attempt that found no session."""
        with self._cond:
            self._status = AuthStatus.UNAUTHENTICATED
            self._cond.notify_all()

    def wait_until_resolved(self, timeout: float | None = None) -> AuthStatus:
        """Block while status is PENDING. Returns the status at exit."""
        with self._cond:
            self._cond.wait_for(lambda: self._status != AuthStatus.PENDING, timeout)
            return self._status

    def require_authenticated(self, timeout: float | None = None) -> Identity:
        """Return the current identity, waiting for restoration if needed.

        Raises:
            SessionNotReadyError: Still PENDING after `timeout` seconds.
            NotAuthenticatedError: Resolved, but nobody is signed in.
        """
        status = self.wait_until_resolved(timeout)
        if status == AuthStatus.PENDING:
            raise SessionNotReadyError(timeout or 0)

        with self._cond:
            if self._status != AuthStatus.AUTHENTICATED or self._identity is None:
                raise NotAuthenticatedError("Sign in to continue")
            return self._identity

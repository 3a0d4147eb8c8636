"""
Client events.

Immutable event objects describing session and cache changes. Consumers
(a UI shell, a CLI, tests) subscribe to these instead of polling state:

- SessionEstablished: login or restore succeeded
- SessionEnded: logout or 401 teardown; carries where the UI should go next
- QueriesInvalidated: a mutation made cached data stale
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import uuid4

from utils.timezone import now_utc


@dataclass(frozen=True, kw_only=True)
class ClientEvent:
    """Base class for all client events."""
    event_id: str = field(default_factory=lambda: str(uuid4()))
    occurred_at: datetime = field(default_factory=now_utc)


@dataclass(frozen=True)
class SessionEstablished(ClientEvent):
    """An identity is now authenticated."""
    identity: Any = None  # Identity; Any avoids a models import cycle

    @classmethod
    def create(cls, identity: Any) -> "SessionEstablished":
        return cls(identity=identity)


@dataclass(frozen=True)
class SessionEnded(ClientEvent):
    """
    The session was cleared.

    reason is "logout" or "expired". redirect_to is set when the UI must
    navigate (401 teardown sends the user to the login route).
    """
    reason: str = "logout"
    redirect_to: str | None = None

    @classmethod
    def create(cls, reason: str, redirect_to: str | None = None) -> "SessionEnded":
        return cls(reason=reason, redirect_to=redirect_to)


@dataclass(frozen=True)
class QueriesInvalidated(ClientEvent):
    """One batch of cache key prefixes became stale."""
    prefixes: tuple[tuple[str, ...], ...] = ()

    @classmethod
    def create(cls, prefixes: tuple[tuple[str, ...], ...]) -> "QueriesInvalidated":
        return cls(prefixes=prefixes)

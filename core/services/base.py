"""
Shared plumbing for entity services.

Reads go through the query cache; mutations go straight to the API and then
invalidate one batch of key prefixes. Both wait for session restoration and
refuse to send anything when nobody is signed in.
"""

import logging
from typing import Any, Callable, Iterable

from auth.session import SessionManager
from clients.api_client import ApiClient
from core.cache import QueryCache
from core.config import ClientConfig
from core.models import Identity
from core.query_keys import QueryKey

logger = logging.getLogger(__name__)


class BaseService:
    """Holds the collaborators every entity service needs."""

    def __init__(
        self,
        api: ApiClient,
        cache: QueryCache,
        session: SessionManager,
        config: ClientConfig,
    ):
        self.api = api
        self.cache = cache
        self.session = session
        self.config = config

    def _require_identity(self) -> Identity:
        return self.session.require_authenticated(self.config.auth_ready_timeout_seconds)

    def _query(
        self,
        key: QueryKey,
        fetcher: Callable[[], Any],
        stale_seconds: float | None = None,
        require_fresh: bool = False,
        authenticated: bool = True,
        retry: int | None = None,
    ) -> Any:
        """Cached read. Authenticated reads block until the session resolves."""
        if authenticated:
            self._require_identity()
        return self.cache.fetch(
            key,
            fetcher,
            stale_seconds=stale_seconds,
            require_fresh=require_fresh,
            retry=retry,
        )

    def _mutate(self, call: Callable[[], Any], invalidates: Iterable[QueryKey]) -> Any:
        """
        Run a write, then invalidate.

        Nothing is invalidated when the call raises; the error propagates
        unchanged and is never retried.
        """
        self._require_identity()
        result = call()
        prefixes = tuple(invalidates)
        if prefixes:
            self.cache.invalidate(*prefixes)
        return result

"""
Key-based query cache.

Reads go through fetch(): a fresh entry is returned without touching the
network, a stale entry is returned immediately while one background refetch
runs (stale-while-revalidate), and a missing or invalidated entry is fetched
in the foreground.

Mutations call invalidate() with one or more key prefixes after they succeed.
The whole batch is applied under one lock, so a reader never sees half of it.
Each invalidation bumps the entry's generation; a background result that was
started under an older generation is thrown away instead of resurrecting
pre-mutation data.
"""

import itertools
import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable

from tenacity import Retrying, retry_if_exception, stop_after_attempt

from clients.exceptions import is_retryable
from core.event_bus import EventBus
from core.events import QueriesInvalidated
from core.query_keys import QueryKey
from core.tasks import TaskRunner

logger = logging.getLogger(__name__)


@dataclass
class _Entry:
    generation: int
    value: Any = None
    has_value: bool = False
    fetched_at: float = 0.0
    invalidated: bool = False
    refreshing: bool = False
    error: BaseException | None = None


def _matches(key: QueryKey, prefix: QueryKey) -> bool:
    return key[:len(prefix)] == prefix


class QueryCache:
    """
    Process-wide cache for remote reads.

    Args:
        tasks: Runner for background refetches
        default_stale_seconds: Staleness window when fetch() is not given one
        retry_attempts: Extra attempts for NetworkError/ServerError (0 disables)
        event_bus: Receives QueriesInvalidated after each batch
        clock: Monotonic seconds; injectable for tests
    """

    def __init__(
        self,
        tasks: TaskRunner,
        default_stale_seconds: float = 300,
        retry_attempts: int = 3,
        event_bus: EventBus | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._tasks = tasks
        self._default_stale = default_stale_seconds
        self._retry_attempts = retry_attempts
        self._bus = event_bus
        self._clock = clock
        self._lock = threading.RLock()
        self._entries: dict[QueryKey, _Entry] = {}
        self._generations = itertools.count(1)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def fetch(
        self,
        key: QueryKey,
        fetcher: Callable[[], Any],
        stale_seconds: float | None = None,
        require_fresh: bool = False,
        retry: int | None = None,
    ) -> Any:
        """
        Return the value for key, fetching it when needed.

        Args:
            key: Cache key
            fetcher: Zero-arg callable performing the request
            stale_seconds: Freshness window; defaults to the cache default
            require_fresh: Skip the cache and fetch in the foreground
            retry: Retry count override (0 for reads that must not retry)

        Raises:
            Whatever the fetcher raises once retries are exhausted. The cache
            is left untouched on failure.
        """
        stale = self._default_stale if stale_seconds is None else stale_seconds
        retries = self._retry_attempts if retry is None else retry

        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                entry = _Entry(generation=next(self._generations))
                self._entries[key] = entry

            serve_cached = entry.has_value and not entry.invalidated and not require_fresh
            if serve_cached and self._clock() - entry.fetched_at < stale:
                return entry.value

            value = entry.value
            generation = entry.generation
            start_refresh = serve_cached and not entry.refreshing
            if start_refresh:
                entry.refreshing = True

        if serve_cached:
            if start_refresh:
                logger.debug(f"Stale {key}, refreshing in background")
                self._tasks.submit(self._refresh, key, fetcher, retries, generation)
            return value

        logger.debug(f"Fetching {key}")
        value = self._run(fetcher, retries)
        self._store(key, value, generation)
        return value

    def get(self, key: QueryKey) -> Any:
        """Cached value regardless of freshness, or None."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None or not entry.has_value:
                return None
            return entry.value

    def set(self, key: QueryKey, value: Any) -> None:
        """Seed an entry directly (fresh as of now)."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                entry = _Entry(generation=next(self._generations))
                self._entries[key] = entry
            self._fill(entry, value)

    def is_stale(self, key: QueryKey, stale_seconds: float | None = None) -> bool:
        stale = self._default_stale if stale_seconds is None else stale_seconds
        with self._lock:
            entry = self._entries.get(key)
            if entry is None or not entry.has_value or entry.invalidated:
                return True
            return self._clock() - entry.fetched_at >= stale

    def last_error(self, key: QueryKey) -> BaseException | None:
        """Error from the most recent failed background refetch, if any."""
        with self._lock:
            entry = self._entries.get(key)
            return entry.error if entry else None

    def keys(self) -> list[QueryKey]:
        with self._lock:
            return [k for k, e in self._entries.items() if e.has_value]

    # -------------------------------------------------------------------------
    # Invalidation
    # -------------------------------------------------------------------------

    def invalidate(self, *prefixes: QueryKey) -> int:
        """
        Mark every entry under any of the prefixes as invalidated.

        All prefixes are applied as one batch. Returns the number of entries
        touched.
        """
        if not prefixes:
            return 0

        with self._lock:
            touched = 0
            for key, entry in self._entries.items():
                if any(_matches(key, prefix) for prefix in prefixes):
                    entry.invalidated = True
                    entry.refreshing = False
                    entry.generation = next(self._generations)
                    touched += 1

        logger.debug(f"Invalidated {touched} entries for {list(prefixes)}")
        if self._bus is not None:
            self._bus.publish(QueriesInvalidated.create(tuple(prefixes)))
        return touched

    def clear(self) -> None:
        """Forget everything. Wired to session teardown."""
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        logger.debug(f"Cleared {count} cache entries")

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _run(self, fetcher: Callable[[], Any], retries: int) -> Any:
        retrying = Retrying(
            stop=stop_after_attempt(retries + 1),
            retry=retry_if_exception(is_retryable),
            reraise=True,
        )
        return retrying(fetcher)

    def _refresh(
        self,
        key: QueryKey,
        fetcher: Callable[[], Any],
        retries: int,
        generation: int,
    ) -> None:
        try:
            value = self._run(fetcher, retries)
        except Exception as e:
            logger.warning(f"Background refresh of {key} failed: {e}")
            with self._lock:
                entry = self._entries.get(key)
                if entry is not None and entry.generation == generation:
                    entry.error = e
                    entry.refreshing = False
            return

        self._store(key, value, generation)

    def _store(self, key: QueryKey, value: Any, generation: int) -> None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None or entry.generation != generation:
                logger.debug(f"Discarding result for {key}: invalidated while in flight")
                return
            self._fill(entry, value)

    def _fill(self, entry: _Entry, value: Any) -> None:
        entry.value = value
        entry.has_value = True
        entry.fetched_at = self._clock()
        entry.invalidated = False
        entry.refreshing = False
        entry.error = None

"""
Background task runner.

Service calls are synchronous. TaskRunner runs them on a thread pool and hands
back a PendingResult, so a caller (a UI view, a CLI spinner) can keep going
and later either collect the result or walk away from it.

Walking away (discard) only detaches the consumer. The request already on the
wire still completes, and a mutation that reached the server stays applied.
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable

logger = logging.getLogger(__name__)


class PendingResult:
    """Handle for one submitted call."""

    def __init__(self, future: Future):
        self._future = future
        self._lock = threading.Lock()
        self._discarded = False
        self._callbacks: list[Callable[[Any, BaseException | None], None]] = []
        future.add_done_callback(self._dispatch)

    @property
    def discarded(self) -> bool:
        with self._lock:
            return self._discarded

    def done(self) -> bool:
        return self._future.done()

    def result(self, timeout: float | None = None) -> Any:
        """Block for the outcome. Re-raises the call's exception."""
        return self._future.result(timeout)

    def exception(self, timeout: float | None = None) -> BaseException | None:
        return self._future.exception(timeout)

    def on_result(self, callback: Callable[[Any, BaseException | None], None]) -> None:
        """
        Register callback(value, error). Exactly one of the two is meaningful.

        Runs immediately if the call already finished. Never runs after
        discard().
        """
        with self._lock:
            if self._discarded:
                return
            if not self._future.done():
                self._callbacks.append(callback)
                return
        self._invoke(callback)

    def discard(self) -> None:
        """Stop delivering the outcome. Does not abort the call."""
        with self._lock:
            self._discarded = True
            self._callbacks.clear()

    def _dispatch(self, _future: Future) -> None:
        with self._lock:
            if self._discarded:
                return
            callbacks = list(self._callbacks)
            self._callbacks.clear()
        for callback in callbacks:
            self._invoke(callback)

    def _invoke(self, callback: Callable[[Any, BaseException | None], None]) -> None:
        error = self._future.exception()
        value = None if error is not None else self._future.result()
        try:
            callback(value, error)
        except Exception:
            logger.exception("Result callback failed")


class TaskRunner:
    """
    Thin wrapper over ThreadPoolExecutor.

    Usage:
        pending = runner.submit(wishlists.list_mine)
        pending.on_result(lambda lists, err: render(lists))
        ...
        pending.discard()  # view went away
    """

    def __init__(self, max_workers: int = 4):
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="wishlist-task",
        )

    def submit(self, fn: Callable[..., Any], *args, **kwargs) -> PendingResult:
        return PendingResult(self._executor.submit(fn, *args, **kwargs))

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

"""
Event bus for client events.

Synchronous in-process pub/sub. Handlers execute immediately in the same
thread as the publisher. Handler errors are logged but never propagate:
the session change or invalidation that triggered the event has already
happened.
"""

import logging
import threading
from typing import Callable, Dict, List

from core.events import ClientEvent

logger = logging.getLogger(__name__)


class EventBus:
    """
    In-process event bus.

    Subscribe by event class name (string), publish by event instance.
    Handlers are called synchronously in subscription order.
    """

    def __init__(self):
        self._subscribers: Dict[str, List[Callable]] = {}
        self._lock = threading.Lock()

    def subscribe(self, event_type: str, callback: Callable):
        """
        Subscribe to events of a specific type.

        Args:
            event_type: Name of event class to subscribe to (e.g. 'SessionEnded')
            callback: Function to call when event is published
        """
        with self._lock:
            self._subscribers.setdefault(event_type, []).append(callback)

    def unsubscribe(self, event_type: str, callback: Callable) -> bool:
        """Remove a handler. Returns False if it was not subscribed."""
        with self._lock:
            handlers = self._subscribers.get(event_type, [])
            if callback not in handlers:
                return False
            handlers.remove(callback)
            return True

    def publish(self, event: ClientEvent):
        """
        Publish an event to all subscribers of that type.

        Handler errors are logged and swallowed.
        """
        event_type = event.__class__.__name__

        with self._lock:
            handlers = list(self._subscribers.get(event_type, []))

        for callback in handlers:
            try:
                callback(event)
            except Exception:
                logger.exception(
                    "Handler %s failed for %s (event_id=%s)",
                    getattr(callback, "__name__", repr(callback)),
                    event_type,
                    event.event_id,
                )

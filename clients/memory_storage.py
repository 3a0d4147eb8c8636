"""In-process key/value storage for sessions that should not outlive the process."""

import threading


class MemoryStorage:
    """
    Dict-backed storage with the same get/set/delete surface as ValkeyClient.

    Usage:
        storage = MemoryStorage()
        storage.set("accessToken", "abc")
        storage.get("accessToken")  # "abc"
    """

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._data.pop(key, None) is not None

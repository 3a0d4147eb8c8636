"""
Valkey (Redis-compatible) durable storage for the persisted session.

Simple wrapper around redis-py. All keys are namespaced so several clients
can share one server. Fail-fast: raises on connection failure, never returns
fallback values.
"""

import logging

import redis

logger = logging.getLogger(__name__)


class ValkeyClient:
    """
    Redis-compatible storage for the session token and identity snapshot.

    Usage:
        storage = ValkeyClient("redis://localhost:6379/0")
        storage.set("accessToken", "abc")
        token = storage.get("accessToken")  # Returns None if missing
    """

    DEFAULT_NAMESPACE = "wishlist:"

    def __init__(self, url: str, namespace: str = DEFAULT_NAMESPACE):
        """
        Initialize Valkey connection.

        Args:
            url: Redis-compatible connection URL (e.g., redis://localhost:6379/0)
            namespace: Prefix applied to every key

        Raises:
            redis.ConnectionError: If connection fails
        """
        self._namespace = namespace
        self._client = redis.from_url(url, decode_responses=True)
        self._client.ping()
        logger.info("ValkeyClient connected")

    def _key(self, key: str) -> str:
        return f"{self._namespace}{key}"

    def get(self, key: str) -> str | None:
        """Returns None if key doesn't exist (not an error)."""
        return self._client.get(self._key(key))

    def set(self, key: str, value: str) -> None:
        self._client.set(self._key(key), value)

    def delete(self, key: str) -> bool:
        """Returns True if key existed and was deleted."""
        return self._client.delete(self._key(key)) > 0

    def close(self) -> None:
        self._client.close()
        logger.info("ValkeyClient closed")

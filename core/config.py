"""Client configuration."""

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field


class ClientConfig(BaseModel):
    """
    Wishlist client configuration.

    Durations are in seconds. Stale windows follow how often each kind of
    data changes: most entities are considered fresh for five minutes,
    conversation messages for one.
    """

    api_base_url: str = Field(
        default="http://localhost:3000",
        description="Base URL of the wishlist REST API",
    )
    request_timeout_seconds: float = Field(
        default=10,
        description="Per-request timeout; exceeding it raises NetworkError",
        gt=0,
        le=120,
    )

    # Query cache
    default_stale_seconds: float = Field(
        default=300,
        description="Staleness window for most entities",
        ge=0,
    )
    message_stale_seconds: float = Field(
        default=60,
        description="Staleness window for conversation messages",
        ge=0,
    )
    search_stale_seconds: float = Field(
        default=120,
        description="Staleness window for user search results",
        ge=0,
    )
    query_retry_attempts: int = Field(
        default=3,
        description="Retries for network/5xx failures on reads (never for 4xx)",
        ge=0,
        le=10,
    )

    # Session
    auth_ready_timeout_seconds: float = Field(
        default=10,
        description="How long gated queries wait for session restoration",
        ge=0,
    )
    login_route: str = Field(
        default="/login",
        description="Route the UI is sent to after a 401",
    )
    valkey_url: str | None = Field(
        default=None,
        description="Redis-compatible URL for durable session storage; in-memory when unset",
    )

    background_workers: int = Field(
        default=4,
        description="Thread pool size for background refetches and submitted calls",
        ge=1,
        le=32,
    )

    @classmethod
    def from_env(cls, env_file: str | Path | None = None) -> "ClientConfig":
        """
        Build config from WISHLIST_* environment variables.

        Args:
            env_file: Optional .env file loaded before reading the environment
        """
        if env_file is not None:
            load_dotenv(env_file, override=True)

        mapping = {
            "api_base_url": "WISHLIST_API_URL",
            "request_timeout_seconds": "WISHLIST_API_TIMEOUT",
            "default_stale_seconds": "WISHLIST_STALE_SECONDS",
            "message_stale_seconds": "WISHLIST_MESSAGE_STALE_SECONDS",
            "search_stale_seconds": "WISHLIST_SEARCH_STALE_SECONDS",
            "query_retry_attempts": "WISHLIST_QUERY_RETRIES",
            "auth_ready_timeout_seconds": "WISHLIST_AUTH_READY_TIMEOUT",
            "login_route": "WISHLIST_LOGIN_ROUTE",
            "valkey_url": "WISHLIST_VALKEY_URL",
            "background_workers": "WISHLIST_BACKGROUND_WORKERS",
        }
        values = {
            field: os.getenv(env_name)
            for field, env_name in mapping.items()
            if os.getenv(env_name)
        }
        return cls(**values)

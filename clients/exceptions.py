"""
Typed errors raised by the API client.

Every error carries a human-readable message that is safe to show to an end
user. Raw response bodies never leak through `user_message`.
"""

from typing import Any


class ApiError(Exception):
    """Base class for all remote API failures."""

    default_message = "Something went wrong. Please try again."

    def __init__(
        self,
        message: str | None = None,
        status_code: int | None = None,
        details: list[str] | None = None,
        code: str | None = None,
    ):
        self.message = message or self.default_message
        self.status_code = status_code
        self.details = details or []
        self.code = code or self.__class__.__name__
        super().__init__(self.message)

    @property
    def user_message(self) -> str:
        """Message to render to the end user."""
        if self.details:
            return "; ".join(self.details)
        return self.message

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "status_code": self.status_code,
            "details": self.details,
        }


class AuthExpiredError(ApiError):
    """
    401 from any call.

    By the time this is raised the session has already been torn down.
    """

    default_message = "Your session has expired. Please sign in again."


class ValidationError(ApiError):
    """4xx with a message body. Shown verbatim, never retried."""

    default_message = "The request could not be processed."


class NotFoundError(ApiError):
    """Resource absent or not visible to the current identity."""

    default_message = "Not found."


class ConflictError(ApiError):
    """409: duplicate email, item already reserved, and similar."""

    default_message = "This action conflicts with the current state."


class ServerError(ApiError):
    """5xx from the backend. Retryable for background reads."""

    default_message = "The server is unavailable. Please try again later."


class NetworkError(ApiError):
    """Timeout or connection failure. Retryable for background reads."""

    default_message = "Could not reach the server. Check your connection."


def is_retryable(exc: BaseException) -> bool:
    """Only transport and server failures are worth another attempt."""
    return isinstance(exc, (NetworkError, ServerError))

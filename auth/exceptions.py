"""Typed exceptions for client-side auth failures."""


class AuthError(Exception):
    """Base class for authentication/authorization errors raised locally."""


class NotAuthenticatedError(AuthError):
    """
    No authenticated identity is available.

    Raised before any request is sent: gated queries and mutations never
    fire with a missing or torn-down token.
    """


class SessionNotReadyError(NotAuthenticatedError):
    """Session restoration did not finish within the configured wait."""

    def __init__(self, waited_seconds: float):
        self.waited_seconds = waited_seconds
        super().__init__(f"Session not resolved after {waited_seconds:g} seconds.")

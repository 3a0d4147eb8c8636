"""Authentication service: login, logout, password flows, session restore."""

import logging

from auth.session import SessionManager
from auth.types import (
    ChangePasswordRequest,
    ForgotPasswordRequest,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
    TokenResponse,
)
from clients.api_client import ApiClient
from clients.exceptions import ApiError, AuthExpiredError
from core.models import Identity

logger = logging.getLogger(__name__)


class AuthService:
    """Drives the /auth endpoints and keeps SessionManager in step.

    Handles:
    - Login (token, then the full identity from /users/me)
    - Registration and password recovery
    - Logout (local teardown even when the server call fails)
    - Restoring a persisted session on process start
    - Explicit token refresh
    """

    def __init__(self, api: ApiClient, session: SessionManager, ready_timeout: float | None = None):
        self._api = api
        self._session = session
        self._ready_timeout = ready_timeout

    def login(self, login: str, password: str) -> Identity:
        """Sign in with an email or username.

        Flow:
        1. POST /auth/login for the access token
        2. End any session already open, so its cached data goes with it
        3. Persist the token so the next call is authenticated
        4. GET /users/me for the identity
        5. Establish the session

        Raises:
            ValidationError / AuthExpiredError: Bad credentials
            NetworkError: Backend unreachable
        """
        request = LoginRequest(login=login, password=password)
        tokens = TokenResponse.model_validate(self._api.post("/auth/login", json=request.to_payload()))

        if self._session.identity is not None:
            self._session.teardown(reason="switch")

        self._session.replace_token(tokens.access_token)
        try:
            identity = Identity.model_validate(self._api.get("/users/me"))
        except AuthExpiredError:
            # ApiClient already tore the session down
            raise
        except ApiError:
            self._session.teardown(reason="login_failed")
            raise

        self._session.establish(tokens.access_token, identity)
        return identity

    def register(self, email: str, password: str, name: str) -> None:
        """Create an account. Does not sign in; the caller logs in afterwards."""
        request = RegisterRequest(email=email, password=password, name=name)
        self._api.post("/auth/register", json=request.to_payload())
        logger.info("Registered new account")

    def logout(self) -> None:
        """Sign out. Local state is cleared even if the server call fails."""
        try:
            self._api.post("/auth/logout")
        except ApiError as e:
            logger.warning(f"Logout call failed, clearing local session anyway: {e}")
        finally:
            self._session.teardown(reason="logout")

    def change_password(self, old_password: str, new_password: str) -> None:
        self._session.require_authenticated(self._ready_timeout)
        request = ChangePasswordRequest(old_password=old_password, new_password=new_password)
        self._api.post("/auth/change-password", json=request.to_payload())
        logger.info("Password changed")

    def forgot_password(self, email: str) -> None:
        """Ask the server to email a recovery code."""
        request = ForgotPasswordRequest(email=email)
        self._api.post("/auth/forgot-password", json=request.to_payload())

    def reset_password(self, email: str, recovery_code: str, new_password: str) -> None:
        request = ResetPasswordRequest(
            email=email,
            recovery_code=recovery_code,
            new_password=new_password,
        )
        self._api.post("/auth/reset-password", json=request.to_payload())

    def refresh_token(self) -> str:
        """Swap the access token for a new one.

        Never called automatically: a 401 still ends the session.
        """
        self._session.require_authenticated(self._ready_timeout)
        tokens = TokenResponse.model_validate(self._api.post("/auth/refresh"))
        self._session.replace_token(tokens.access_token)
        logger.info("Access token refreshed")
        return tokens.access_token

    def restore_session(self) -> Identity | None:
        """Resolve the session from storage on process start.

        No stored token: unauthenticated, no request sent. A stored token that
        the server no longer accepts (or any other failure verifying it) clears
        everything.

        Returns:
            The identity when the stored token is still valid, else None.
        """
        token = self._session.begin_restore()
        if not token:
            self._session.mark_unauthenticated()
            return None

        try:
            identity = Identity.model_validate(self._api.get("/users/me"))
        except AuthExpiredError:
            # ApiClient already tore the session down
            return None
        except ApiError as e:
            logger.warning(f"Stored session could not be verified: {e}")
            self._session.teardown(reason="invalid")
            return None

        self._session.establish(token, identity)
        return identity

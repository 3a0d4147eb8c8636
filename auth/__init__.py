"""Session state, authentication and permission derivation."""

from auth.exceptions import (
    AuthError,
    NotAuthenticatedError,
    SessionNotReadyError,
)
from auth.types import (
    AuthStatus,
    LoginRequest,
    RegisterRequest,
    ChangePasswordRequest,
    ForgotPasswordRequest,
    ResetPasswordRequest,
    TokenResponse,
)
from auth.session import SessionManager, SessionStorage

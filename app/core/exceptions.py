from __future__ import annotations


class SessionGuardError(Exception):
    """Base exception for all session guard errors."""

    status_code: int = 500
    error_code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, detail: str | None = None) -> None:
        self.message = message
        self.detail = detail
        super().__init__(message)


class ConfigurationError(SessionGuardError):
    """Invalid session policy. Raised at construction, never clamped."""

    status_code = 500
    error_code = "CONFIGURATION_ERROR"


class SignOutFailure(SessionGuardError):
    status_code = 502
    error_code = "SIGN_OUT_FAILED"


class SessionCheckFailure(SessionGuardError):
    """The liveness poll itself failed. Not proof that the session is gone."""

    status_code = 502
    error_code = "SESSION_CHECK_FAILED"


class SessionNotFoundError(SessionGuardError):
    status_code = 404
    error_code = "SESSION_NOT_FOUND"

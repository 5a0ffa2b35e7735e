"""pos-client custom exceptions.

Exception Design Principles:
1. Everything raised out of the client derives from PosClientError
2. Wrap library exceptions (httpx, pydantic) with ``raise ... from`` so the
   original cause stays on ``__cause__``
3. Split on what the caller can do about it:
   - Nothing in-process, route the user to sign in again (SessionExpired)
   - Inspect and surface (OtherHttpError, NetworkError)
   - Fix the local setup (ConfigError)
   - Internal to the refresh machinery, never reaches callers of send()
     (Unauthorized, RefreshError, MissingRefreshToken)
"""

from typing import Any


class PosClientError(Exception):
    """Base exception for all pos-client errors.

    Carries structured context and actionable suggestions beyond the message.
    """

    def __init__(
        self,
        message: str,  # the error message
        *,
        errors: list[str] = None,  # detailed list of errors (if available)
        suggestions: list[str] = None,  # remedial actions
        context: dict = None,  # additional detailed context
    ):
        """Initialize PosClientError.

        Args:
            message: Primary error message for users
            errors: List of specific error details
            suggestions: List of actionable suggestions for resolution
            context: Additional context information as key-value pairs
        """
        super().__init__(message)
        self.message = message
        self.errors = errors or []
        self.suggestions = suggestions or []
        self.context = context or {}


class ConfigError(PosClientError):
    """Local configuration errors - recoverable by user reconfiguration.

    Malformed or unreadable credentials files, invalid storage settings.
    """

    pass


class NetworkError(PosClientError):
    """No response reached the client (timeout, DNS, connection refused).

    Never retried by the client; surfaced immediately.
    """

    pass


class OtherHttpError(PosClientError):
    """Any non-401 HTTP failure status, surfaced verbatim."""

    def __init__(self, message: str, *, status_code: int, body: Any = None, **kwargs):
        super().__init__(message, **kwargs)
        self.status_code = status_code
        self.body = body


class Unauthorized(PosClientError):
    """Server rejected the credential (HTTP 401).

    Transient: drives the refresh-and-retry path and is converted to
    SessionExpired before it can reach a caller of ``send``.
    """

    def __init__(self, message: str, *, response=None, **kwargs):
        super().__init__(message, **kwargs)
        self.response = response


class RefreshError(PosClientError):
    """Renewing the access token failed or returned an unusable payload."""

    pass


class MissingRefreshToken(RefreshError):
    """No refresh token is stored, so renewal cannot even be attempted."""

    pass


class SessionExpired(PosClientError):
    """Terminal authentication failure.

    Raised when renewal fails or a replayed request is rejected again.
    Credentials have been cleared by the time this reaches the caller; the
    caller should route the user back to sign-in.
    """

    pass

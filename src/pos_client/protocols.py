"""Protocol definitions for dependency injection and interface contracts."""

from typing import Protocol


class CredentialStore(Protocol):
    """Protocol for access/refresh token persistence.

    Implementations hold no logic beyond persistence. Only the refresh
    coordinator and the session layer write to a store; everything else reads.
    """

    def get_access(self) -> str | None:
        """Return the stored access token, or None."""
        ...

    def set_access(self, token: str) -> None:
        """Replace the stored access token."""
        ...

    def get_refresh(self) -> str | None:
        """Return the stored refresh token, or None."""
        ...

    def set_refresh(self, token: str) -> None:
        """Replace the stored refresh token."""
        ...

    def clear_all(self) -> None:
        """Forget both tokens."""
        ...

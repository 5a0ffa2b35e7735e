from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

# =============================================================================
# REQUEST MODELS
# =============================================================================


class PendingRequest(BaseModel):
    """An already-built outbound request.

    Immutable: stamping a credential or marking a replay produces a new value,
    so a request object reused by a caller is never altered behind its back.
    """

    model_config = ConfigDict(frozen=True)

    method: str = Field(..., description="HTTP verb, upper case")
    path: str = Field(..., description="Path relative to the configured base URL")
    headers: dict[str, str] = Field(default_factory=dict, repr=False)
    body: Any | None = Field(
        None, description="JSON-serializable request body", repr=False
    )
    params: dict[str, Any] | None = Field(None, description="Query parameters")
    credential: str | None = Field(
        None,
        description="Access token this request was stamped with, if any",
        repr=False,
    )
    retried: bool = Field(
        False, description="Set on the single replay after a renewal; never reset"
    )

    def as_retry(self) -> "PendingRequest":
        """Return the replay of this request, sharing its lineage."""
        return self.model_copy(update={"retried": True})


class RefreshState(StrEnum):
    """Whether a renewal call is currently in flight for a client."""

    IDLE = "idle"
    REFRESHING = "refreshing"


def _pick_access_token(data: Any, keys: tuple[str, str]) -> Any:
    """Normalize ``access_token``/``token`` into ``access_token``.

    ``keys`` gives the precedence when both are present.
    """
    if isinstance(data, dict):
        token = data.get(keys[0]) or data.get(keys[1])
        data = {k: v for k, v in data.items() if k not in ("access_token", "token")}
        if token:
            data["access_token"] = token
    return data


class RefreshResult(BaseModel):
    """Payload returned by ``POST /auth/refresh``."""

    model_config = ConfigDict(extra="ignore")

    access_token: str = Field(..., min_length=1)
    refresh_token: str | None = None
    expires_in: int | None = None

    @model_validator(mode="before")
    @classmethod
    def _normalize_token_keys(cls, data: Any) -> Any:
        return _pick_access_token(data, ("access_token", "token"))


# =============================================================================
# ACCOUNT MODELS
# =============================================================================


class UserRole(StrEnum):
    ADMIN = "admin"
    MANAGER = "manager"
    CASHIER = "cashier"
    TECHNICIAN = "technician"


class AuthUser(BaseModel):
    """Authenticated user profile as returned by ``/me`` and the auth endpoints."""

    model_config = ConfigDict(extra="ignore")

    id: str | int
    email: str = Field(..., pattern=r"^[^@\s]+@[^@\s]+$")
    first_name: str
    last_name: str
    roles: list[UserRole]
    is_active: bool = True
    last_login_at: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


class AuthResponse(BaseModel):
    """Login/register response, normalized to a single access token field."""

    model_config = ConfigDict(extra="ignore")

    access_token: str = Field(..., min_length=1)
    refresh_token: str | None = None
    user: AuthUser
    expires_in: int | None = None
    token_type: str = "Bearer"
    abilities: list[str] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _normalize_token_keys(cls, data: Any) -> Any:
        # login and register prefer ``token``
        data = _pick_access_token(data, ("token", "access_token"))
        if isinstance(data, dict):
            # explicit nulls fall back to defaults
            for key in ("token_type", "abilities"):
                if data.get(key) is None:
                    data.pop(key, None)
        return data


class LoginPayload(BaseModel):
    email: str
    password: str
    device_name: str | None = None


class RegisterPayload(BaseModel):
    email: str
    password: str
    password_confirmation: str
    first_name: str
    last_name: str
    roles: list[UserRole] | None = None


class SessionStatus(StrEnum):
    IDLE = "idle"
    LOADING = "loading"
    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"

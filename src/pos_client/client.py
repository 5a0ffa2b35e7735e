"""POS API client with transparent access token renewal."""

import logging
from functools import cache
from typing import Any

import httpx

from .auth import RefreshCoordinator, authenticate
from .config import Config, get_config
from .consts import USER_AGENT
from .credentials import create_credential_store
from .exceptions import PosClientError, SessionExpired
from .guard import ResponseGuard
from .models import PendingRequest
from .protocols import CredentialStore
from .transport import TransportInvoker

logger = logging.getLogger("pos-client.client")


def _decode(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError as e:
        request = response.request
        raise PosClientError(
            f"Response from {request.url.path} is not valid JSON",
            errors=[str(e)],
            suggestions=["Check that the API base URL points at the POS backend"],
            context={
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "content_type": response.headers.get("content-type"),
            },
        ) from e


class PosClient:
    """POS API client with authentication.

    Responsibilities:
    - Stamp the current access token on every request
    - Renew an expired token once per expiry event and replay failed requests
    - Provide JSON helpers for the per-resource API modules

    One instance owns its refresh state; separate instances never share it.
    """

    def __init__(
        self,
        config: Config | None = None,
        store: CredentialStore | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        """Initialize PosClient.

        Args:
            config: Config instance. If None, uses get_config().
            store: Credential store. If None, built from config.
            http_client: HTTP client bound to the API base URL. If None,
                creates a new one (closed by aclose()).
        """
        self.config = config or get_config()

        self._owns_http_client = http_client is None
        self.http_client = http_client or httpx.AsyncClient(
            base_url=self.config.base_url,
            headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
            timeout=self.config.timeout_seconds,
            follow_redirects=True,
        )

        self.store = store if store is not None else create_credential_store(self.config)
        self.transport = TransportInvoker(self.http_client)
        self.coordinator = RefreshCoordinator(self.store, self.transport)
        self.guard = ResponseGuard(self.transport, self.coordinator, self.store)

        logger.info(f"POS client created for {self.config.base_url}")

    async def __aenter__(self) -> "PosClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Cancel any in-flight renewal and close the owned HTTP client."""
        await self.coordinator.aclose()
        if self._owns_http_client:
            await self.http_client.aclose()

    async def send(
        self,
        method: str,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        json: Any = None,
        params: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """Send an authenticated request.

        Args:
            method: HTTP verb.
            path: Path relative to the API base URL.
            headers: Extra request headers.
            json: JSON-serializable request body.
            params: Query parameters.

        Returns:
            The successful response, possibly from the replay after renewal.

        Raises:
            SessionExpired: Renewal failed or the replay was rejected again.
                Credentials are cleared before this is raised.
            OtherHttpError: For non-401 HTTP 4xx/5xx responses.
            NetworkError: For network errors, timeouts, DNS failures.
        """
        request = PendingRequest(
            method=method.upper(),
            path=path,
            headers=dict(headers or {}),
            body=json,
            params=params,
        )
        request = authenticate(request, self.store.get_access())

        try:
            return await self.guard.execute(request)
        except SessionExpired:
            self.store.clear_all()
            logger.warning("Session expired, credentials cleared")
            raise

    async def get_json(self, path: str, **kwargs) -> Any:
        """GET ``path`` and return the decoded JSON body."""
        return _decode(await self.send("GET", path, **kwargs))

    async def post_json(self, path: str, **kwargs) -> Any:
        """POST to ``path`` and return the decoded JSON body."""
        return _decode(await self.send("POST", path, **kwargs))

    async def put_json(self, path: str, **kwargs) -> Any:
        """PUT to ``path`` and return the decoded JSON body."""
        return _decode(await self.send("PUT", path, **kwargs))

    async def patch_json(self, path: str, **kwargs) -> Any:
        """PATCH ``path`` and return the decoded JSON body."""
        return _decode(await self.send("PATCH", path, **kwargs))

    async def delete(self, path: str, **kwargs) -> Any:
        """DELETE ``path``; returns the decoded body, or None when empty."""
        return _decode(await self.send("DELETE", path, **kwargs))


@cache
def get_client() -> PosClient:
    """Get a cached PosClient instance with default configuration.

    The credential store is built here but not read; a broken credentials
    file surfaces as ConfigError on the first request instead.

    Raises:
        ValidationError: If POSCLIENT_* settings are invalid.
    """
    return PosClient()

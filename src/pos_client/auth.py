"""Credential stamping and single-flight access token renewal."""

import asyncio
import logging

from pydantic import ValidationError

from .consts import BEARER_SCHEME, REFRESH_URL_PATH
from .exceptions import MissingRefreshToken, PosClientError, RefreshError
from .models import PendingRequest, RefreshResult, RefreshState
from .protocols import CredentialStore
from .transport import TransportInvoker

logger = logging.getLogger("pos-client.auth")


def authenticate(request: PendingRequest, token: str | None) -> PendingRequest:
    """Attach ``token`` as a bearer Authorization header.

    Returns the request unmodified when there is no token. Any existing
    Authorization header is replaced, whatever its casing.
    """
    if not token:
        return request

    headers = {
        name: value
        for name, value in request.headers.items()
        if name.lower() != "authorization"
    }
    headers["Authorization"] = f"{BEARER_SCHEME} {token}"
    return request.model_copy(update={"headers": headers, "credential": token})


class RefreshCoordinator:
    """Single-flight access token renewal with a waiter queue.

    Responsibilities:
    - Guarantee at most one renewal call in flight per instance
    - Broadcast the outcome of that call to every caller that asked for it
    - Persist renewed tokens, or clear credentials when renewal fails

    Every caller of ``request_refresh`` gets its own future in the waiter
    list, including the one that started the renewal. The renewal itself runs
    in a separate task, so a caller that is cancelled while waiting only
    abandons its own future and never the renewal the others depend on.
    """

    def __init__(
        self,
        store: CredentialStore,
        transport: TransportInvoker,
        refresh_path: str = REFRESH_URL_PATH,
    ):
        """Initialize RefreshCoordinator.

        Args:
            store: Credential store read for the refresh token and written
                with renewed tokens.
            transport: Invoker used for the renewal call. The call bypasses
                the response guard, so a 401 here is a plain failure.
            refresh_path: Renewal endpoint relative to the base URL.
        """
        self.store = store
        self.transport = transport
        self.refresh_path = refresh_path
        self._state = RefreshState.IDLE
        self._waiters: list[asyncio.Future[str]] = []
        self._task: asyncio.Task | None = None

    @property
    def state(self) -> RefreshState:
        return self._state

    @property
    def is_refreshing(self) -> bool:
        return self._state is RefreshState.REFRESHING

    @property
    def pending_waiters(self) -> int:
        """Number of callers still waiting on the in-flight renewal."""
        return sum(1 for waiter in self._waiters if not waiter.done())

    async def request_refresh(self) -> str:
        """Get a renewed access token, sharing any renewal already in flight.

        Returns:
            The new access token.

        Raises:
            MissingRefreshToken: No refresh token is stored.
            RefreshError: The renewal response could not be used, or the
                renewal failed for a reason outside the client (e.g. the
                store could not be written).
            Unauthorized, OtherHttpError, NetworkError: The renewal call failed.
        """
        loop = asyncio.get_running_loop()
        waiter: asyncio.Future[str] = loop.create_future()
        self._waiters.append(waiter)

        if self._state is RefreshState.IDLE:
            self._state = RefreshState.REFRESHING
            logger.info("Access token rejected, starting renewal")
            self._task = loop.create_task(self._run())
        else:
            logger.debug(f"Renewal in flight, queued waiter #{len(self._waiters)}")

        return await waiter

    async def aclose(self) -> None:
        """Cancel an in-flight renewal; its waiters fail with RefreshError.

        Stored credentials are left alone, nothing was learned about them.
        """
        task = self._task
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        if self._task is task:
            # cancelled before it ever ran
            self._settle(error=RefreshError("Token renewal was cancelled"))

    async def _run(self) -> None:
        try:
            token = await self._renew()
        except asyncio.CancelledError:
            self._settle(error=RefreshError("Token renewal was cancelled"))
            raise
        except PosClientError as e:
            self._fail(e)
        else:
            logger.info("Access token renewed")
            self._settle(token=token)

    async def _renew(self) -> str:
        try:
            return await self._request_tokens()
        except PosClientError:
            raise
        except Exception as e:
            raise RefreshError(
                f"Token renewal failed: {e}",
                errors=[str(e)],
                context={"exception_type": type(e).__name__},
            ) from e

    async def _request_tokens(self) -> str:
        refresh_token = self.store.get_refresh()
        if not refresh_token:
            raise MissingRefreshToken(
                "No refresh token available",
                suggestions=["Sign in again to obtain a new session"],
            )

        request = PendingRequest(
            method="POST",
            path=self.refresh_path,
            body={"refresh_token": refresh_token},
        )
        response = await self.transport.invoke(request)

        try:
            result = RefreshResult.model_validate(response.json())
        except ValidationError as e:
            raise RefreshError(
                "Invalid refresh response",
                errors=[err["msg"] for err in e.errors()],
                suggestions=["Check that the backend returns access_token or token"],
                context={"path": self.refresh_path},
            ) from e
        except ValueError as e:
            raise RefreshError(
                "Refresh response is not valid JSON",
                errors=[str(e)],
                context={"path": self.refresh_path},
            ) from e

        self.store.set_access(result.access_token)
        if result.refresh_token:
            self.store.set_refresh(result.refresh_token)
        return result.access_token

    def _fail(self, error: BaseException) -> None:
        logger.warning(f"Token renewal failed: {error}")
        # credentials go before any waiter learns of the failure
        try:
            self.store.clear_all()
        except Exception as e:
            logger.error(f"Could not clear credentials after failed renewal: {e}")
        self._settle(error=error)

    def _settle(
        self, token: str | None = None, error: BaseException | None = None
    ) -> None:
        waiters, self._waiters = self._waiters, []
        self._state = RefreshState.IDLE
        self._task = None

        for waiter in waiters:
            if waiter.done():
                continue
            if error is not None:
                waiter.set_exception(error)
            else:
                waiter.set_result(token)

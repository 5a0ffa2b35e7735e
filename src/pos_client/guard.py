"""Post-receive handling of authentication failures."""

import logging

import httpx

from .auth import RefreshCoordinator, authenticate
from .exceptions import PosClientError, SessionExpired, Unauthorized
from .models import PendingRequest
from .protocols import CredentialStore
from .transport import TransportInvoker

logger = logging.getLogger("pos-client.guard")


class ResponseGuard:
    """Runs a request and recovers from a rejected credential at most once.

    Decision table:
    - success: returned as is
    - 401 on the original request: renew (or reuse a token another request
      already renewed), then replay once with the new token
    - 401 on the replay: SessionExpired, no further renewal
    - any other failure: propagated untouched
    """

    def __init__(
        self,
        transport: TransportInvoker,
        coordinator: RefreshCoordinator,
        store: CredentialStore,
    ):
        self.transport = transport
        self.coordinator = coordinator
        self.store = store

    async def execute(self, request: PendingRequest) -> httpx.Response:
        """Invoke ``request``, replaying it once after a renewal if needed.

        Raises:
            SessionExpired: Renewal failed, or the replay was rejected too.
            OtherHttpError: Non-401 failure status.
            NetworkError: No response received.
        """
        try:
            return await self.transport.invoke(request)
        except Unauthorized as e:
            if request.retried:
                logger.warning(
                    f"Replayed {request.method} {request.path} was rejected again"
                )
                raise SessionExpired(
                    "Session expired: request rejected after token renewal",
                    suggestions=["Sign in again"],
                    context={"method": request.method, "path": request.path},
                ) from e
            token = await self._renewed_token(request)

        replay = authenticate(request.as_retry(), token)
        logger.debug(f"Replaying {request.method} {request.path}")
        return await self.execute(replay)

    async def _renewed_token(self, request: PendingRequest) -> str:
        current = self.store.get_access()
        if current and current != request.credential:
            # renewed by another request since this one was stamped
            logger.debug(f"Reusing renewed token for {request.method} {request.path}")
            return current

        try:
            return await self.coordinator.request_refresh()
        except PosClientError as e:
            raise SessionExpired(
                f"Session expired: token renewal failed ({e.message})",
                errors=[e.message, *e.errors],
                suggestions=["Sign in again"],
                context={"method": request.method, "path": request.path},
            ) from e

"""Sign-in state on top of the authenticated client."""

import logging

from .account import AuthApi
from .client import PosClient
from .exceptions import PosClientError
from .models import (
    AuthResponse,
    AuthUser,
    LoginPayload,
    RegisterPayload,
    SessionStatus,
)

logger = logging.getLogger("pos-client.session")


class AuthSession:
    """Tracks who is signed in and keeps the credential store in step.

    The client handles token renewal on its own; this class only writes the
    tokens issued at sign-in and clears them on sign-out or a dead session.
    """

    def __init__(self, client: PosClient, api: AuthApi | None = None):
        self.client = client
        self.api = api or AuthApi(client)
        self.user: AuthUser | None = None
        self.status = SessionStatus.IDLE

    @property
    def is_authenticated(self) -> bool:
        return self.status is SessionStatus.AUTHENTICATED

    @property
    def is_loading(self) -> bool:
        return self.status in (SessionStatus.IDLE, SessionStatus.LOADING)

    async def login(self, payload: LoginPayload) -> AuthResponse:
        """Sign in and store the issued tokens.

        Raises:
            PosClientError: The backend refused or answered unexpectedly.
        """
        self.status = SessionStatus.LOADING
        try:
            response = await self.api.login(payload)
        except PosClientError:
            self.status = SessionStatus.UNAUTHENTICATED
            raise
        logger.info(f"Signed in as {response.user.email}")
        return self._accept(response)

    async def register(self, payload: RegisterPayload) -> AuthResponse:
        """Create an account and sign in with it."""
        self.status = SessionStatus.LOADING
        try:
            response = await self.api.register(payload)
        except PosClientError:
            self.status = SessionStatus.UNAUTHENTICATED
            raise
        logger.info(f"Registered and signed in as {response.user.email}")
        return self._accept(response)

    async def logout(self) -> None:
        """Sign out; local credentials are cleared even if the backend call fails."""
        try:
            await self.api.logout()
        except PosClientError as e:
            logger.warning(f"Backend logout failed, clearing locally: {e.message}")
        finally:
            self._reset()
        logger.info("Signed out")

    async def restore(self) -> AuthUser | None:
        """Resume a stored session by fetching the current user.

        Returns:
            The signed-in user, or None when there is no usable session.
        """
        if not self.client.store.get_access():
            self._reset()
            return None

        self.status = SessionStatus.LOADING
        try:
            self.user = await self.api.fetch_current_user()
        except PosClientError as e:
            logger.warning(f"Your session has expired, please sign in again ({e.message})")
            self._reset()
            return None

        self.status = SessionStatus.AUTHENTICATED
        return self.user

    def _accept(self, response: AuthResponse) -> AuthResponse:
        store = self.client.store
        store.set_access(response.access_token)
        if response.refresh_token:
            store.set_refresh(response.refresh_token)
        self.user = response.user
        self.status = SessionStatus.AUTHENTICATED
        return response

    def _reset(self) -> None:
        self.client.store.clear_all()
        self.user = None
        self.status = SessionStatus.UNAUTHENTICATED

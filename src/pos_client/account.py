"""Authentication endpoints of the POS backend."""

import logging

from pydantic import ValidationError

from .client import PosClient
from .consts import (
    CURRENT_USER_URL_PATH,
    LOGIN_URL_PATH,
    LOGOUT_URL_PATH,
    REGISTER_URL_PATH,
)
from .exceptions import PosClientError
from .models import AuthResponse, AuthUser, LoginPayload, RegisterPayload

logger = logging.getLogger("pos-client.account")


def _parse(model, payload, path: str):
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise PosClientError(
            f"Unexpected response from {path}",
            errors=[f"{'.'.join(map(str, err['loc']))}: {err['msg']}" for err in e.errors()],
            suggestions=["This may indicate a backend API change"],
            context={"path": path, "model": model.__name__},
        ) from e


class AuthApi:
    """Login, registration and profile calls, all routed through ``send``."""

    def __init__(self, client: PosClient):
        self.client = client

    async def login(self, payload: LoginPayload) -> AuthResponse:
        data = await self.client.post_json(
            LOGIN_URL_PATH, json=payload.model_dump(exclude_none=True)
        )
        return _parse(AuthResponse, data, LOGIN_URL_PATH)

    async def register(self, payload: RegisterPayload) -> AuthResponse:
        data = await self.client.post_json(
            REGISTER_URL_PATH, json=payload.model_dump(mode="json", exclude_none=True)
        )
        return _parse(AuthResponse, data, REGISTER_URL_PATH)

    async def logout(self) -> None:
        await self.client.send("POST", LOGOUT_URL_PATH)

    async def fetch_current_user(self) -> AuthUser:
        data = await self.client.get_json(CURRENT_USER_URL_PATH)
        return _parse(AuthUser, data, CURRENT_USER_URL_PATH)

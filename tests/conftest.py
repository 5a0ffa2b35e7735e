"""Pytest configuration and shared fixtures"""

import asyncio
import json
import os

import httpx
import pytest

from pos_client.client import PosClient
from pos_client.config import Config
from pos_client.credentials import MemoryCredentialStore

# Configure pytest-asyncio
pytest_plugins = ("pytest_asyncio",)

BASE_URL = "https://pos.test/api"

TEST_USER = {
    "id": 7,
    "email": "cashier@example.com",
    "first_name": "Ana",
    "last_name": "Reyes",
    "roles": ["cashier"],
    "is_active": True,
    "last_login_at": None,
}


class FakeBackend:
    """Scripted POS backend served through httpx.MockTransport.

    Bearer tokens in ``valid_tokens`` are accepted; ``refresh_tokens`` maps a
    refresh token to the (access, refresh) pair the renewal endpoint issues.
    """

    def __init__(self):
        self.valid_tokens = {"fresh-access"}
        self.refresh_tokens = {"refresh-1": ("fresh-access", "refresh-2")}
        self.refresh_delay = 0.05
        self.refresh_payload = None  # overrides the renewal response body
        self.rejected_paths: set[str] = set()  # always 401
        self.html_paths: set[str] = set()  # 200 with a non-JSON body
        self.logout_status = 204
        self.on_refresh = None
        self.calls: list[httpx.Request] = []

    def paths(self) -> list[str]:
        return [self._path(request) for request in self.calls]

    def count(self, path: str) -> int:
        return self.paths().count(path)

    def bearer_tokens(self, path: str) -> list[str | None]:
        tokens = []
        for request in self.calls:
            if self._path(request) == path:
                header = request.headers.get("Authorization")
                tokens.append(header.split(" ", 1)[1] if header else None)
        return tokens

    @staticmethod
    def _path(request: httpx.Request) -> str:
        return request.url.path.removeprefix("/api")

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        await asyncio.sleep(0)
        path = self._path(request)

        if path in self.html_paths:
            return httpx.Response(200, text="<html>Maintenance</html>")
        if path == "/auth/refresh":
            return await self._refresh(request)
        if path == "/login":
            return self._login(request)

        header = request.headers.get("Authorization", "")
        token = header.removeprefix("Bearer ") if header.startswith("Bearer ") else None
        if path in self.rejected_paths or token not in self.valid_tokens:
            return httpx.Response(401, json={"message": "Unauthenticated."})

        if path == "/me":
            return httpx.Response(200, json=TEST_USER)
        if path == "/logout":
            return httpx.Response(self.logout_status)
        if path == "/boom":
            return httpx.Response(500, json={"message": "Server Error"})
        if path == "/empty":
            return httpx.Response(204)
        return httpx.Response(200, json={"path": path, "token": token})

    async def _refresh(self, request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(self.refresh_delay)
        if self.on_refresh is not None:
            self.on_refresh()

        refresh_token = json.loads(request.content).get("refresh_token")
        issued = self.refresh_tokens.pop(refresh_token, None)
        if issued is None:
            return httpx.Response(401, json={"message": "Invalid refresh token."})
        if self.refresh_payload is not None:
            return httpx.Response(200, json=self.refresh_payload)

        access, refresh = issued
        self.valid_tokens = {access}
        return httpx.Response(
            200,
            json={"access_token": access, "refresh_token": refresh, "expires_in": 3600},
        )

    def _login(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        if body.get("password") != "secret":
            return httpx.Response(422, json={"message": "Invalid credentials."})
        self.valid_tokens.add("login-access")
        self.refresh_tokens["login-refresh"] = ("fresh-access", "refresh-2")
        return httpx.Response(
            200,
            json={"token": "login-access", "refresh_token": "login-refresh", "user": TEST_USER},
        )


@pytest.fixture
def config():
    """Config fixture pointing at the fake backend"""
    return Config(base_url=BASE_URL, log_level="DEBUG")


@pytest.fixture
def backend():
    """Fresh fake backend per test"""
    return FakeBackend()


@pytest.fixture
def store():
    """Store holding an expired access token and a valid refresh token"""
    return MemoryCredentialStore(access="stale-access", refresh="refresh-1")


@pytest.fixture
def http_client(backend):
    """httpx AsyncClient wired to the fake backend"""
    return httpx.AsyncClient(
        base_url=BASE_URL, transport=httpx.MockTransport(backend.handler)
    )


@pytest.fixture
def client(config, store, http_client):
    """PosClient wired to the fake backend"""
    return PosClient(config, store=store, http_client=http_client)


@pytest.fixture
def clean_env():
    """Fixture that temporarily clears POSCLIENT_* environment variables.

    This ensures Config tests see the true defaults without interference
    from environment variables that might be set in the user's shell.
    """
    saved = {
        key: value for key, value in os.environ.items() if key.startswith("POSCLIENT_")
    }

    for key in saved:
        os.environ.pop(key, None)

    try:
        yield
    finally:
        for key in [k for k in os.environ if k.startswith("POSCLIENT_")]:
            os.environ.pop(key, None)
        for key, value in saved.items():
            os.environ[key] = value


@pytest.fixture
def clean_config(clean_env):
    """Fixture that provides a Config instance with clean environment."""
    return Config()

"""POS API Client Package

An asyncio HTTP client for the POS backend that stamps the stored access token
on every request and transparently renews it, once per expiry event, when the
backend rejects it.
"""

from .account import AuthApi
from .auth import RefreshCoordinator, authenticate
from .client import PosClient, get_client
from .config import Config, get_config, setup_logging
from .consts import PACKAGE_VERSION
from .credentials import (
    FileCredentialStore,
    MemoryCredentialStore,
    create_credential_store,
)
from .exceptions import (
    ConfigError,
    MissingRefreshToken,
    NetworkError,
    OtherHttpError,
    PosClientError,
    RefreshError,
    SessionExpired,
)
from .guard import ResponseGuard
from .models import PendingRequest, RefreshState
from .protocols import CredentialStore
from .session import AuthSession
from .transport import TransportInvoker

__version__ = PACKAGE_VERSION

__all__ = [
    "__version__",
    "get_config",
    "get_client",
    "setup_logging",
    "authenticate",
    "create_credential_store",
    "Config",
    "PosClient",
    "AuthApi",
    "AuthSession",
    "RefreshCoordinator",
    "ResponseGuard",
    "TransportInvoker",
    "PendingRequest",
    "RefreshState",
    "CredentialStore",
    "MemoryCredentialStore",
    "FileCredentialStore",
    "PosClientError",
    "ConfigError",
    "NetworkError",
    "OtherHttpError",
    "RefreshError",
    "MissingRefreshToken",
    "SessionExpired",
]

"""High-value constants for the pos-client package."""

# Package metadata
PACKAGE_VERSION = "0.4.0"
CLIENT_NAME = "pos-client"
USER_AGENT = f"{CLIENT_NAME}/{PACKAGE_VERSION}"

# External API contract consts
REFRESH_URL_PATH = "/auth/refresh"
LOGIN_URL_PATH = "/login"
REGISTER_URL_PATH = "/register"
LOGOUT_URL_PATH = "/logout"
CURRENT_USER_URL_PATH = "/me"

# Credential storage keys
ACCESS_TOKEN_STORAGE_KEY = "pos.accessToken"
REFRESH_TOKEN_STORAGE_KEY = "pos.refreshToken"

# Business logic consts
BEARER_SCHEME = "Bearer"
DEFAULT_BASE_URL = "http://localhost:8000/api"
DEFAULT_TIMEOUT_SECONDS = 30

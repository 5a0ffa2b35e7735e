"""Configuration management."""

import logging
from functools import cache
from typing import Literal

from pydantic import ConfigDict, Field, computed_field, field_validator
from pydantic_settings import BaseSettings

from .consts import (
    ACCESS_TOKEN_STORAGE_KEY,
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT_SECONDS,
    REFRESH_TOKEN_STORAGE_KEY,
    REFRESH_URL_PATH,
)


class Config(BaseSettings):
    """Configuration with computed API endpoints."""

    model_config = ConfigDict(
        env_prefix="POSCLIENT_", case_sensitive=False, extra="ignore"
    )
    base_url: str = Field(
        default=DEFAULT_BASE_URL,
        description="Base URL of the POS backend API",
    )
    log_level: str = Field(
        default="INFO",
        pattern=r"^(DEBUG|INFO|WARNING|ERROR)$",
        description="Logging level",
    )
    timeout_seconds: int = Field(
        default=DEFAULT_TIMEOUT_SECONDS,
        gt=0,
        le=300,
        description="HTTP request timeout in seconds",
    )
    credential_store: Literal["memory", "file"] = Field(
        default="memory", description="Where access and refresh tokens are kept"
    )
    credentials_file: str = Field(
        default="~/.pos-client/credentials.json",
        description="Path to the credentials JSON file (file store only)",
    )
    access_token_key: str = Field(
        default=ACCESS_TOKEN_STORAGE_KEY,
        min_length=1,
        description="Storage key for the access token",
    )
    refresh_token_key: str = Field(
        default=REFRESH_TOKEN_STORAGE_KEY,
        min_length=1,
        description="Storage key for the refresh token",
    )

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slashes(cls, value: str) -> str:
        return value.rstrip("/")

    @computed_field
    @property
    def refresh_url(self) -> str:
        """URL for renewing access tokens."""
        return f"{self.base_url}{REFRESH_URL_PATH}"


@cache
def get_config() -> Config:
    """Get a cached Config instance."""
    return Config()


def setup_logging(log_level: str = "INFO") -> logging.Logger:
    """Configure logging for the entire application"""
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        force=True,  # Override any existing configuration
    )
    return logging.getLogger("pos-client")

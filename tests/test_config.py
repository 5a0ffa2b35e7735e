"""Tests for config module"""

import logging
import os

import pytest
from pydantic import ValidationError

from pos_client.config import Config, setup_logging
from pos_client.consts import DEFAULT_BASE_URL, REFRESH_URL_PATH


class TestConfig:
    """Test Config class functionality"""

    def test_config_defaults_and_creation(self, clean_config):
        """Test config creation and default values"""
        assert clean_config.base_url == DEFAULT_BASE_URL
        assert clean_config.log_level == "INFO"
        assert clean_config.timeout_seconds == 30
        assert clean_config.credential_store == "memory"
        assert clean_config.access_token_key == "pos.accessToken"
        assert clean_config.refresh_token_key == "pos.refreshToken"

        # Test computed properties
        assert clean_config.refresh_url == f"{DEFAULT_BASE_URL}{REFRESH_URL_PATH}"

    @pytest.mark.parametrize(
        "base_url", ["https://pos.example.com/api/", "https://pos.example.com/api///"]
    )
    def test_trailing_slashes_stripped(self, base_url):
        config = Config(base_url=base_url)

        assert config.base_url == "https://pos.example.com/api"
        assert config.refresh_url == "https://pos.example.com/api/auth/refresh"

    def test_config_env_override(self, clean_env):
        """Test environment variable override"""
        os.environ["POSCLIENT_BASE_URL"] = "https://test.example.com/api"
        os.environ["POSCLIENT_CREDENTIAL_STORE"] = "file"

        config = Config()
        assert config.base_url == "https://test.example.com/api"
        assert config.credential_store == "file"

    @pytest.mark.parametrize("log_level", ["DEBUG", "INFO", "WARNING", "ERROR"])
    def test_valid_log_levels(self, log_level):
        """Test that all valid log levels are accepted"""
        config = Config(log_level=log_level)
        assert config.log_level == log_level

    @pytest.mark.parametrize(
        "invalid_level", ["TRACE", "debug", "info", "FATAL", "NONE"]
    )
    def test_invalid_log_levels(self, invalid_level):
        """Test that invalid log levels are rejected"""
        with pytest.raises(ValidationError):
            Config(log_level=invalid_level)

    def test_timeout_validation(self):
        """Test timeout seconds validation"""
        assert Config(timeout_seconds=120).timeout_seconds == 120

        with pytest.raises(ValidationError):
            Config(timeout_seconds=0)

        with pytest.raises(ValidationError):
            Config(timeout_seconds=500)

    def test_credential_store_validation(self):
        with pytest.raises(ValidationError):
            Config(credential_store="redis")

    def test_empty_storage_key_rejected(self):
        with pytest.raises(ValidationError):
            Config(access_token_key="")


def test_setup_logging():
    logger = setup_logging("DEBUG")

    assert logger.name == "pos-client"
    assert logging.getLogger().level == logging.DEBUG

"""Unit tests for configuration module."""

import os
from unittest.mock import patch

from beacn_gateway.core.config import Settings, setup_logging


class TestSettings:
    """Tests for Settings class."""

    def test_default_values(self):
        """Test settings have sensible defaults."""
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings()

        assert settings.vendor_id == 0x33AE
        assert settings.product_id == 0x0001
        assert settings.interface == 3
        assert settings.alt_setting == 1
        assert settings.transfer_timeout == 3.0
        assert settings.request_timeout == 5.0
        assert settings.queue_size == 30
        assert settings.api_host == "127.0.0.1"
        assert settings.api_port == 8000
        assert settings.log_level == "INFO"

    def test_env_override_product_id(self):
        """Test product id override from environment."""
        with patch.dict(os.environ, {"BEACN_PRODUCT_ID": "4"}):
            settings = Settings()

        assert settings.product_id == 4

    def test_env_override_transfer_timeout(self):
        """Test transfer timeout override from environment."""
        with patch.dict(os.environ, {"BEACN_TRANSFER_TIMEOUT": "0.5"}):
            settings = Settings()

        assert settings.transfer_timeout == 0.5

    def test_env_override_queue_size(self):
        with patch.dict(os.environ, {"BEACN_QUEUE_SIZE": "8"}):
            settings = Settings()

        assert settings.queue_size == 8

    def test_env_override_api_port(self):
        """Test API port override from environment."""
        with patch.dict(os.environ, {"BEACN_API_PORT": "9000"}):
            settings = Settings()

        assert settings.api_port == 9000

    def test_env_override_log_level(self):
        """Test log level override from environment."""
        with patch.dict(os.environ, {"BEACN_LOG_LEVEL": "DEBUG"}):
            settings = Settings()

        assert settings.log_level == "DEBUG"

    def test_env_prefix(self):
        """Test that non-prefixed env vars are ignored."""
        with patch.dict(os.environ, {"API_PORT": "1234"}, clear=True):
            settings = Settings()

        assert settings.api_port == 8000


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_setup_logging_info(self):
        """Test setting up INFO logging."""
        setup_logging("INFO")

    def test_setup_logging_case_insensitive(self):
        """Test log level is case insensitive."""
        setup_logging("debug")

    def test_setup_logging_invalid_defaults_to_info(self):
        """Test invalid level defaults to INFO."""
        setup_logging("INVALID")

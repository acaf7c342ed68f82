"""Application configuration using pydantic-settings."""

import logging
import sys

from pydantic_settings import BaseSettings, SettingsConfigDict

from beacn_gateway.protocol.constants import (
    ALT_SETTING,
    INTERFACE,
    PRODUCT_ID,
    TRANSFER_TIMEOUT,
    VENDOR_ID,
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings can be overridden via environment variables
    prefixed with BEACN_ (e.g., BEACN_TRANSFER_TIMEOUT).
    """

    vendor_id: int = VENDOR_ID
    product_id: int = PRODUCT_ID
    interface: int = INTERFACE
    alt_setting: int = ALT_SETTING
    transfer_timeout: float = TRANSFER_TIMEOUT
    request_timeout: float = 5.0
    queue_size: int = 30
    api_host: str = "127.0.0.1"
    api_port: int = 8000
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="BEACN_")


def setup_logging(level: str = "INFO") -> None:
    """Configure application logging.

    Args:
        level: Log level string (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )

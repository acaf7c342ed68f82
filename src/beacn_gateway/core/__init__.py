"""Core application functionality."""

from beacn_gateway.core.config import Settings, setup_logging
from beacn_gateway.core.errors import GatewayError
from beacn_gateway.core.models import ColourModel, LedState

__all__ = [
    "ColourModel",
    "GatewayError",
    "LedState",
    "Settings",
    "setup_logging",
]

"""Beacn parameter protocol implementation."""

from beacn_gateway.protocol.catalog import (
    PARAMETERS,
    LedMode,
    LedParameter,
    ParameterGroup,
    ParameterSpec,
    find_parameter,
    get_parameter,
    parameters_in_group,
)
from beacn_gateway.protocol.codec import RGB, decode_value, encode_value
from beacn_gateway.protocol.constants import OP_READ, OP_WRITE, SHUTDOWN_SENTINEL, DataType
from beacn_gateway.protocol.frames import Frame, validate_fetch_reply

# DeviceActor imported lazily to avoid circular import with core.errors
# (core -> core.lighting -> protocol.handler -> core.errors -> core)


def __getattr__(name: str):
    if name == "DeviceActor":
        from beacn_gateway.protocol.handler import DeviceActor

        return DeviceActor
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "PARAMETERS",
    "RGB",
    "DataType",
    "DeviceActor",
    "Frame",
    "LedMode",
    "LedParameter",
    "OP_READ",
    "OP_WRITE",
    "ParameterGroup",
    "ParameterSpec",
    "SHUTDOWN_SENTINEL",
    "decode_value",
    "encode_value",
    "find_parameter",
    "get_parameter",
    "parameters_in_group",
    "validate_fetch_reply",
]

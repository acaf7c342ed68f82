"""Typed parameter access on top of the device actor.

The actor deals only in 4-byte wire values. This layer resolves names
through the catalog, validates and encodes outgoing values and decodes
replies with the codec.
"""

import logging
from typing import Any

from beacn_gateway.core.models import ColourModel, LedState
from beacn_gateway.protocol.catalog import ParameterGroup, ParameterSpec, get_parameter, parameters_in_group
from beacn_gateway.protocol.codec import RGB, DomainValue, decode_value, encode_value
from beacn_gateway.protocol.constants import TYPE_NAMES, DataType
from beacn_gateway.protocol.handler import DeviceActor

logger = logging.getLogger(__name__)


def _parse_number(text: str) -> int | float | None:
    """Parse decimal (``08``), prefixed (``0x0a``) or float (``50.0``) text."""
    text = text.strip()
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return int(text, 0)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        return None


def parse_value(spec: ParameterSpec, raw: Any) -> DomainValue:
    """Convert an API/CLI value into the parameter's domain type.

    Colours accept ``#rrggbb`` strings, ``{red, green, blue}`` mappings or
    RGB instances. Numbers accept ints, floats or numeric strings.

    Raises:
        ValueError: If the value cannot be converted.
    """
    if spec.data_type == DataType.RGB:
        if isinstance(raw, RGB):
            return raw
        if isinstance(raw, ColourModel):
            return raw.to_rgb()
        if isinstance(raw, str):
            return RGB.from_hex(raw)
        if isinstance(raw, dict):
            try:
                return ColourModel(**raw).to_rgb()
            except Exception as e:
                raise ValueError(f"Invalid colour for {spec.name}: {raw!r}") from e
        raise ValueError(f"Invalid colour for {spec.name}: {raw!r}")

    if isinstance(raw, bool):
        raise ValueError(f"{spec.name} expects a number, got {raw!r}")

    if isinstance(raw, str):
        number = _parse_number(raw)
        if number is None:
            raise ValueError(f"{spec.name} expects a number, got {raw!r}")
        raw = number

    if spec.data_type == DataType.FLOAT:
        if not isinstance(raw, (int, float)):
            raise ValueError(f"{spec.name} expects a number, got {raw!r}")
        return float(raw)

    if isinstance(raw, float) and raw.is_integer():
        return int(raw)
    return raw


def format_value(spec: ParameterSpec, value: DomainValue) -> Any:
    """JSON-friendly form of a decoded value."""
    if isinstance(value, RGB):
        return value.to_hex()
    return value


def describe(spec: ParameterSpec, value: DomainValue) -> dict[str, Any]:
    """Catalog metadata plus current value, as used by the API."""
    return {
        "name": spec.name,
        "group": int(spec.group),
        "child_id": spec.child_id,
        "type": TYPE_NAMES[spec.data_type],
        "description": spec.description,
        "value": format_value(spec, value),
        "min": spec.min_value,
        "max": spec.max_value,
        "choices": {int(k): v for k, v in spec.choices.items()} or None,
    }


class LightingController:
    """Reads and writes named parameters through a DeviceActor."""

    def __init__(self, actor: DeviceActor, request_timeout: float | None = None):
        """
        Args:
            actor: Started device actor.
            request_timeout: Seconds to wait for each reply (None waits forever).
        """
        self._actor = actor
        self._request_timeout = request_timeout

    @property
    def actor(self) -> DeviceActor:
        return self._actor

    async def read(self, name: str) -> DomainValue:
        """Fetch and decode a parameter.

        Raises:
            KeyError: If the parameter is unknown.
            GatewayError: On any device fault.
        """
        spec = get_parameter(name)
        wire = await self._actor.fetch(spec, timeout=self._request_timeout)
        return decode_value(wire, spec.data_type)

    async def write(self, name: str, value: Any) -> DomainValue:
        """Validate, encode and write a parameter.

        Returns:
            The value confirmed by the device, decoded.

        Raises:
            KeyError: If the parameter is unknown.
            ValueError: If the value is not acceptable for the parameter.
            GatewayError: On any device fault.
        """
        spec = get_parameter(name)
        domain = parse_value(spec, value)
        spec.validate(domain)

        wire = encode_value(domain, spec.data_type)
        confirmed = await self._actor.set(spec, wire, timeout=self._request_timeout)

        result = decode_value(confirmed, spec.data_type)
        logger.info(f"Parameter {spec.name} set to {format_value(spec, result)}")
        return result

    async def read_group(self, group: int = ParameterGroup.LED) -> dict[str, DomainValue]:
        """Fetch every parameter of a group, in catalog order."""
        values: dict[str, DomainValue] = {}
        for spec in parameters_in_group(group):
            wire = await self._actor.fetch(spec, timeout=self._request_timeout)
            values[spec.name] = decode_value(wire, spec.data_type)
        return values

    async def snapshot(self) -> LedState:
        """Load the full LED state."""
        values = await self.read_group(ParameterGroup.LED)
        fields: dict[str, Any] = {}
        for name, value in values.items():
            fields[name] = ColourModel.from_rgb(value) if isinstance(value, RGB) else value
        return LedState(**fields)

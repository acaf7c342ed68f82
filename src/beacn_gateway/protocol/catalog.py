"""Parameter catalog: the addressable settings of the device.

Each parameter has a fixed ``(group_id, child_id)`` address and a data
type. Adding a parameter is an edit to ``_LED_PARAMETERS``, never a
protocol change.
"""

import math
from dataclasses import dataclass, field
from enum import IntEnum
from types import MappingProxyType
from typing import Any, Mapping

from .codec import RGB
from .constants import DataType


class ParameterGroup(IntEnum):
    """Functional subsystem (first address byte)."""

    LED = 0x01


class LedParameter(IntEnum):
    """Child ids within the LED group. Ids 3 and 10 are reserved."""

    MODE = 0
    COLOUR1 = 1
    COLOUR2 = 2
    SPEED = 4
    BRIGHTNESS = 5
    METER_SOURCE = 6
    METER_SENSITIVITY = 7
    MUTE_MODE = 8
    MUTE_COLOUR = 9
    SUSPEND_MODE = 11
    SUSPEND_BRIGHTNESS = 12


class LedMode(IntEnum):
    """Lighting styles accepted by the MODE parameter."""

    SOLID = 0x00
    SPECTRUM_CYCLE = 0x01
    GRADIENT = 0x03
    REACTIVE_RING = 0x05
    REACTIVE_BAR_UP = 0x06
    REACTIVE_BAR_DOWN = 0x07
    SPARKLE_RANDOM = 0x0A
    SPARKLE_METER = 0x0B


@dataclass(frozen=True)
class ParameterSpec:
    """Metadata for a single catalog entry.

    Attributes:
        name: Stable parameter name used by the API and CLI
        group: Group id (address byte 0)
        child_id: Child id (address bytes 1-2, little-endian)
        data_type: Domain type of the wire value
        description: Human-readable label
        min_value: Inclusive lower bound for numeric values
        max_value: Inclusive upper bound for numeric values
        choices: Allowed values mapped to labels, for enumerated settings
    """

    name: str
    group: ParameterGroup
    child_id: int
    data_type: DataType
    description: str = ""
    min_value: float | None = None
    max_value: float | None = None
    choices: Mapping[int, str] = field(default_factory=dict)

    @property
    def address(self) -> tuple[int, int]:
        return int(self.group), self.child_id

    def validate(self, value: Any) -> None:
        """Check a domain value against type, limits and choices.

        Raises:
            ValueError: If the value is not acceptable for this parameter.
        """
        if self.data_type == DataType.RGB:
            if not isinstance(value, RGB):
                raise ValueError(f"{self.name} expects a colour value")
            return

        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"{self.name} expects a number, got {value!r}")

        if not math.isfinite(value):
            raise ValueError(f"{self.name} expects a finite number, got {value!r}")

        if self.data_type != DataType.FLOAT and not float(value).is_integer():
            raise ValueError(f"{self.name} expects an integer, got {value!r}")

        if self.choices and int(value) not in self.choices:
            allowed = ", ".join(str(c) for c in self.choices)
            raise ValueError(f"Value {value} not allowed for {self.name}. Allowed: {allowed}")

        if self.min_value is not None and value < self.min_value:
            raise ValueError(f"Value {value} below minimum {self.min_value} for {self.name}")

        if self.max_value is not None and value > self.max_value:
            raise ValueError(f"Value {value} above maximum {self.max_value} for {self.name}")


def _led(child: LedParameter, data_type: DataType, description: str, **kwargs: Any) -> ParameterSpec:
    return ParameterSpec(
        name=child.name.lower(),
        group=ParameterGroup.LED,
        child_id=int(child),
        data_type=data_type,
        description=description,
        **kwargs,
    )


_LED_PARAMETERS = (
    _led(
        LedParameter.MODE,
        DataType.UINT32,
        "Lighting style",
        choices={
            LedMode.SOLID: "Solid Colour",
            LedMode.SPECTRUM_CYCLE: "Spectrum Cycle",
            LedMode.GRADIENT: "Gradient",
            LedMode.REACTIVE_RING: "Reactive Meter: Whole Ring",
            LedMode.REACTIVE_BAR_UP: "Reactive Meter: Bar Up",
            LedMode.REACTIVE_BAR_DOWN: "Reactive Meter: Bar Down",
            LedMode.SPARKLE_RANDOM: "Sparkle: Random",
            LedMode.SPARKLE_METER: "Sparkle: Meter",
        },
    ),
    _led(LedParameter.COLOUR1, DataType.RGB, "Primary colour"),
    _led(LedParameter.COLOUR2, DataType.RGB, "Secondary colour"),
    _led(LedParameter.SPEED, DataType.INT32, "Speed and direction", min_value=-10, max_value=10),
    _led(LedParameter.BRIGHTNESS, DataType.INT32, "Ring brightness", min_value=0, max_value=100),
    _led(
        LedParameter.METER_SOURCE,
        DataType.UINT32,
        "Meter source",
        choices={0: "Microphone", 1: "Headphones"},
    ),
    _led(
        LedParameter.METER_SENSITIVITY,
        DataType.FLOAT,
        "Meter sensitivity",
        min_value=0.0,
        max_value=10.0,
    ),
    _led(
        LedParameter.MUTE_MODE,
        DataType.UINT32,
        "Behaviour when muted",
        choices={0: "Do Nothing", 1: "Solid Colour", 2: "Turn Off"},
    ),
    _led(LedParameter.MUTE_COLOUR, DataType.RGB, "Colour when muted"),
    _led(
        LedParameter.SUSPEND_MODE,
        DataType.UINT32,
        "Behaviour when USB is suspended",
        choices={0: "Do Nothing", 1: "Turn Off", 2: "Dim"},
    ),
    _led(
        LedParameter.SUSPEND_BRIGHTNESS,
        DataType.UINT32,
        "Brightness when USB is suspended",
        min_value=0,
        max_value=100,
    ),
)

PARAMETERS: Mapping[str, ParameterSpec] = MappingProxyType({p.name: p for p in _LED_PARAMETERS})

_BY_ADDRESS = {p.address: p for p in _LED_PARAMETERS}


def get_parameter(name: str) -> ParameterSpec:
    """Look up a parameter by name.

    Raises:
        KeyError: If no parameter has that name.
    """
    try:
        return PARAMETERS[name.lower()]
    except KeyError:
        raise KeyError(f"Unknown parameter: {name}") from None


def find_parameter(group: int, child_id: int) -> ParameterSpec | None:
    """Look up a parameter by its wire address."""
    return _BY_ADDRESS.get((group, child_id))


def parameters_in_group(group: int) -> list[ParameterSpec]:
    """All parameters of a group, ordered by child id."""
    return sorted((p for p in PARAMETERS.values() if p.group == group), key=lambda p: p.child_id)

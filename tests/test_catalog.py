"""Unit tests for the parameter catalog."""

import pytest

from beacn_gateway.protocol.catalog import (
    PARAMETERS,
    LedMode,
    LedParameter,
    ParameterGroup,
    find_parameter,
    get_parameter,
    parameters_in_group,
)
from beacn_gateway.protocol.codec import RGB
from beacn_gateway.protocol.constants import DataType


class TestAddresses:
    """Tests for parameter identity."""

    def test_led_group_id(self):
        """The LED subsystem is group 0x01."""
        assert ParameterGroup.LED == 0x01
        assert all(p.group == ParameterGroup.LED for p in PARAMETERS.values())

    def test_child_ids(self):
        """Child ids match the device's table."""
        expected = {
            "mode": 0,
            "colour1": 1,
            "colour2": 2,
            "speed": 4,
            "brightness": 5,
            "meter_source": 6,
            "meter_sensitivity": 7,
            "mute_mode": 8,
            "mute_colour": 9,
            "suspend_mode": 11,
            "suspend_brightness": 12,
        }
        assert {name: p.child_id for name, p in PARAMETERS.items()} == expected

    def test_reserved_ids_unused(self):
        """Child ids 3 and 10 are never addressed."""
        assert find_parameter(ParameterGroup.LED, 3) is None
        assert find_parameter(ParameterGroup.LED, 10) is None

    def test_addresses_unique(self):
        """No two parameters share an address."""
        addresses = [p.address for p in PARAMETERS.values()]
        assert len(addresses) == len(set(addresses))

    def test_catalog_is_read_only(self):
        """The table cannot be modified at runtime."""
        with pytest.raises(TypeError):
            PARAMETERS["extra"] = PARAMETERS["mode"]  # type: ignore[index]


class TestDataTypes:
    """Each parameter carries the type the device stores."""

    @pytest.mark.parametrize(
        "name,data_type",
        [
            ("mode", DataType.UINT32),
            ("colour1", DataType.RGB),
            ("colour2", DataType.RGB),
            ("speed", DataType.INT32),
            ("brightness", DataType.INT32),
            ("meter_source", DataType.UINT32),
            ("meter_sensitivity", DataType.FLOAT),
            ("mute_mode", DataType.UINT32),
            ("mute_colour", DataType.RGB),
            ("suspend_mode", DataType.UINT32),
            ("suspend_brightness", DataType.UINT32),
        ],
    )
    def test_type(self, name, data_type):
        assert get_parameter(name).data_type == data_type


class TestLookup:
    """Tests for lookup helpers."""

    def test_get_parameter(self):
        """Lookup by name is case-insensitive."""
        assert get_parameter("Brightness") is PARAMETERS["brightness"]

    def test_get_unknown(self):
        """Unknown names raise KeyError."""
        with pytest.raises(KeyError, match="Unknown parameter"):
            get_parameter("colour3")

    def test_find_by_address(self):
        """Lookup by (group, child) returns the catalog entry."""
        spec = find_parameter(0x01, LedParameter.MUTE_COLOUR)
        assert spec is not None
        assert spec.name == "mute_colour"

    def test_group_order_is_stable(self):
        """Group enumeration is ordered by child id and repeatable."""
        first = [p.child_id for p in parameters_in_group(ParameterGroup.LED)]

        assert first == [0, 1, 2, 4, 5, 6, 7, 8, 9, 11, 12]
        assert [p.child_id for p in parameters_in_group(ParameterGroup.LED)] == first

    def test_unknown_group_is_empty(self):
        """A group with no entries enumerates nothing."""
        assert parameters_in_group(0x7F) == []


class TestValidate:
    """Tests for ParameterSpec.validate."""

    def test_mode_choices(self):
        """Only known lighting styles are accepted."""
        spec = get_parameter("mode")
        for mode in LedMode:
            spec.validate(int(mode))

        with pytest.raises(ValueError, match="not allowed"):
            spec.validate(2)

    def test_speed_range(self):
        """Speed accepts -10..10."""
        spec = get_parameter("speed")
        spec.validate(-10)
        spec.validate(10)

        with pytest.raises(ValueError, match="below minimum"):
            spec.validate(-11)
        with pytest.raises(ValueError, match="above maximum"):
            spec.validate(11)

    def test_integer_required(self):
        """Integer parameters reject fractional values."""
        with pytest.raises(ValueError, match="expects an integer"):
            get_parameter("brightness").validate(50.5)

    def test_integral_float_accepted(self):
        """A float with no fraction is fine for an integer parameter."""
        get_parameter("brightness").validate(50.0)

    def test_float_range(self):
        """Meter sensitivity accepts 0.0..10.0."""
        spec = get_parameter("meter_sensitivity")
        spec.validate(2.5)

        with pytest.raises(ValueError, match="above maximum"):
            spec.validate(10.5)
        with pytest.raises(ValueError, match="finite"):
            spec.validate(float("nan"))

    def test_bool_rejected(self):
        """Booleans are not numbers here."""
        with pytest.raises(ValueError, match="expects a number"):
            get_parameter("mute_mode").validate(True)

    def test_colour(self):
        """Colour parameters need an RGB value."""
        spec = get_parameter("colour1")
        spec.validate(RGB(1, 2, 3))

        with pytest.raises(ValueError, match="colour"):
            spec.validate(0xFF0000)

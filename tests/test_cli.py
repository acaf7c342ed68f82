"""Tests for the beacn-ctl command line."""

import json
from unittest.mock import patch

import pytest

from beacn_gateway import cli
from beacn_gateway.core.errors import DeviceNotFoundError
from beacn_gateway.protocol.handler import DeviceActor


@pytest.fixture
def device(fake_connection):
    """Route the CLI to a simulated device."""
    conn = fake_connection
    with patch("beacn_gateway.cli.create_actor", side_effect=lambda settings: DeviceActor(conn)):
        yield conn


class TestList:
    def test_lists_catalog(self, capsys):
        """Listing needs no device."""
        with patch("beacn_gateway.cli.create_actor") as create:
            assert cli.main(["list"]) == 0
            create.assert_not_called()

        out = capsys.readouterr().out
        assert "brightness" in out
        assert "0..100" in out
        assert "3=Gradient" in out


class TestGet:
    def test_get_number(self, device, capsys):
        assert cli.main(["get", "brightness"]) == 0

        assert capsys.readouterr().out.strip() == "40"
        assert device.closed is True

    def test_get_colour(self, device, capsys):
        assert cli.main(["get", "colour1"]) == 0

        assert capsys.readouterr().out.strip() == "#0a141e"

    def test_unknown_parameter(self, device):
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["get", "volume"])

        assert exc_info.value.code == 2
        assert device.opened is False


class TestSet:
    def test_set(self, device, capsys):
        assert cli.main(["set", "mode", "0"]) == 0

        assert capsys.readouterr().out.strip() == "0"
        assert device.values[(0x01, 0)] == bytes(4)

    def test_set_leading_zero(self, device, capsys):
        assert cli.main(["set", "brightness", "08"]) == 0

        assert capsys.readouterr().out.strip() == "8"
        assert device.values[(0x01, 5)] == (8).to_bytes(4, "little")

    def test_set_colour(self, device, capsys):
        assert cli.main(["set", "mute_colour", "#00ff00"]) == 0

        assert capsys.readouterr().out.strip() == "#00ff00"
        assert device.values[(0x01, 9)] == bytes([0x00, 0xFF, 0x00, 0x00])

    def test_invalid_value_not_sent(self, device):
        """Values are validated before the device is opened."""
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["set", "brightness", "500"])

        assert exc_info.value.code == 2
        assert device.writes == []

    def test_not_confirmed(self, device):
        device.write_filter = lambda value: bytes(4)

        assert cli.main(["set", "brightness", "80"]) == 1
        assert device.closed is True


class TestDump:
    def test_dump(self, device, capsys):
        assert cli.main(["dump"]) == 0

        state = json.loads(capsys.readouterr().out)
        assert state["mode"] == 3
        assert state["colour2"] == {"red": 255, "green": 0, "blue": 0}
        assert state["speed"] == -3


class TestDeviceUnavailable:
    def test_not_found(self, device):
        device.open_error = DeviceNotFoundError("USB device 33ae:0001 not found")

        assert cli.main(["dump"]) == 1


def test_no_command():
    assert cli.main([]) == 1

"""Shared test fixtures."""

import threading
import time

import pytest

from beacn_gateway.core.errors import TransportTimeoutError
from beacn_gateway.protocol.constants import OP_WRITE

# Wire values the simulated device starts with, keyed by (group, child_id)
DEFAULT_VALUES = {
    (0x01, 0): bytes([0x03, 0x00, 0x00, 0x00]),  # mode = gradient
    (0x01, 1): bytes([30, 20, 10, 0]),  # colour1 = rgb(10, 20, 30)
    (0x01, 2): bytes([0, 0, 255, 0xFF]),  # colour2 = red, alpha byte set
    (0x01, 4): (-3).to_bytes(4, "little", signed=True),  # speed
    (0x01, 5): (40).to_bytes(4, "little"),  # brightness
    (0x01, 6): (1).to_bytes(4, "little"),  # meter_source = headphones
    (0x01, 7): bytes.fromhex("0000c040"),  # meter_sensitivity = 6.0
    (0x01, 8): (1).to_bytes(4, "little"),  # mute_mode
    (0x01, 9): bytes([0, 0, 128, 0]),  # mute_colour
    (0x01, 11): (2).to_bytes(4, "little"),  # suspend_mode
    (0x01, 12): (25).to_bytes(4, "little"),  # suspend_brightness
}


class FakeConnection:
    """Simulated Beacn Mic behind the blocking connection interface.

    Fails with AssertionError if two calls ever overlap, and records the
    thread every call runs on.
    """

    def __init__(self, values: dict | None = None, delay: float = 0.0):
        self.values = dict(DEFAULT_VALUES if values is None else values)
        self.delay = delay
        self.open_error: Exception | None = None
        # Raised by the next write/read, in order
        self.errors: list[Exception] = []
        # Returned by the next reads instead of the simulated reply
        self.reply_overrides: list[bytes] = []
        # Applied to SET values before storing (simulates clamping)
        self.write_filter = None

        self.writes: list[bytes] = []
        self.thread_ids: set[int] = set()
        self.violations = 0
        self.opened = False
        self.closed = False
        self._busy = threading.Lock()
        self._pending: bytes | None = None

    def _enter(self) -> None:
        self.thread_ids.add(threading.get_ident())
        if not self._busy.acquire(blocking=False):
            self.violations += 1
            raise AssertionError("Concurrent access to USB connection")

    def _exit(self) -> None:
        self._busy.release()

    def open(self) -> None:
        self._enter()
        try:
            if self.open_error is not None:
                raise self.open_error
            self.opened = True
        finally:
            self._exit()

    def write(self, data: bytes) -> None:
        self._enter()
        try:
            if self.delay:
                time.sleep(self.delay)
            if self.errors:
                raise self.errors.pop(0)

            data = bytes(data)
            self.writes.append(data)
            key = (data[0], data[1] | (data[2] << 8))

            if data[3] == OP_WRITE:
                stored = data[4:8]
                if self.write_filter is not None:
                    stored = self.write_filter(stored)
                self.values[key] = stored
                self._pending = None
            else:
                self._pending = data[:3] + bytes([OP_WRITE]) + self.values.get(key, bytes(4))
        finally:
            self._exit()

    def read(self, size: int) -> bytes:
        self._enter()
        try:
            if self.delay:
                time.sleep(self.delay)
            if self.errors:
                raise self.errors.pop(0)

            if self.reply_overrides:
                reply = self.reply_overrides.pop(0)
            elif self._pending is not None:
                reply = self._pending
            else:
                raise TransportTimeoutError("No reply pending")

            self._pending = None
            return reply[:size]
        finally:
            self._exit()

    def close(self) -> None:
        self._enter()
        try:
            self.closed = True
        finally:
            self._exit()


@pytest.fixture
def fake_connection() -> FakeConnection:
    """Simulated device with default LED values."""
    return FakeConnection()

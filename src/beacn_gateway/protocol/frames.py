"""Frame construction and reply validation for the Beacn parameter protocol."""

import struct
from typing import Optional

from ..core.errors import ProtocolViolationError
from .constants import (
    FETCH_FRAME_LEN,
    OP_READ,
    OP_WRITE,
    REPLY_LEN,
    SET_FRAME_LEN,
    VALUE_LEN,
)


class Frame:
    """
    Represents a Beacn request frame.

    Attributes:
        group: Parameter group id (8-bit)
        child_id: Parameter child id (16-bit)
        opcode: OP_READ for FETCH, OP_WRITE for SET
        value: 4-byte wire value (SET only)
    """

    def __init__(self, group: int, child_id: int, opcode: int, value: bytes = b""):
        """
        Initialize a frame.

        Args:
            group: Group id (0-255)
            child_id: Child id (0-65535)
            opcode: Opcode byte
            value: Wire value, required for SET frames

        Raises:
            ValueError: If a SET frame is not given exactly 4 value bytes
        """
        if opcode == OP_WRITE and len(value) != VALUE_LEN:
            raise ValueError(f"SET frame needs a {VALUE_LEN}-byte value, got {len(value)}")
        if opcode == OP_READ and value:
            raise ValueError("FETCH frame carries no value")

        self.group = group
        self.child_id = child_id
        self.opcode = opcode
        self.value = bytes(value)

    @classmethod
    def fetch(cls, group: int, child_id: int) -> "Frame":
        return cls(group, child_id, OP_READ)

    @classmethod
    def set(cls, group: int, child_id: int, value: bytes) -> "Frame":
        return cls(group, child_id, OP_WRITE, value)

    @property
    def is_fetch(self) -> bool:
        return self.opcode == OP_READ

    def as_fetch(self) -> "Frame":
        """FETCH frame for the same parameter (used to confirm a SET)."""
        return Frame.fetch(self.group, self.child_id)

    def header(self) -> bytes:
        """First four bytes: ``[group, child_lo, child_hi, opcode]``."""
        return struct.pack("<BHB", self.group, self.child_id, self.opcode)

    def to_bytes(self) -> bytes:
        """
        Convert frame to bytes for transmission.

        Frame structure:
        FETCH: [GROUP][CHILD_L][CHILD_H][0xA3]
        SET:   [GROUP][CHILD_L][CHILD_H][0xA4][V0][V1][V2][V3]

        Example:
            >>> Frame.fetch(0x01, 0).to_bytes()
            b'\\x01\\x00\\x00\\xa3'
        """
        return self.header() + self.value

    @classmethod
    def from_bytes(cls, data: bytes) -> Optional["Frame"]:
        """
        Parse a request frame from raw bytes.

        Returns:
            Parsed Frame, or None if length and opcode do not form a valid
            FETCH or SET frame
        """
        if len(data) == FETCH_FRAME_LEN and data[3] == OP_READ:
            group, child_id, opcode = struct.unpack("<BHB", data)
            return cls(group, child_id, opcode)

        if len(data) == SET_FRAME_LEN and data[3] == OP_WRITE:
            group, child_id, opcode = struct.unpack("<BHB", data[:4])
            return cls(group, child_id, opcode, data[4:])

        return None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Frame):
            return NotImplemented
        return self.to_bytes() == other.to_bytes()

    def __repr__(self) -> str:
        """String representation for debugging."""
        kind = "FETCH" if self.is_fetch else "SET"
        value = f", value={self.value.hex()}" if self.value else ""
        return f"Frame({kind}, group=0x{self.group:02X}, child={self.child_id}{value})"


def validate_fetch_reply(request: Frame, reply: bytes) -> bytes:
    """Check a FETCH reply against its request and extract the wire value.

    The reply must be 8 bytes, echo the request's group id and low child
    byte in bytes 0-1, and carry OP_WRITE in byte 3. The device answers a
    read with the write opcode. Byte 2 is not checked.

    Args:
        request: FETCH frame that was sent
        reply: Raw bytes read back

    Returns:
        The 4-byte wire value

    Raises:
        ProtocolViolationError: If the reply does not answer the request
    """
    sent = request.to_bytes()

    if len(reply) != REPLY_LEN:
        raise ProtocolViolationError(
            f"Expected {REPLY_LEN}-byte reply to {request!r}, got {len(reply)} bytes: {bytes(reply).hex()}"
        )

    if reply[0:2] != sent[0:2] or reply[3] != OP_WRITE:
        raise ProtocolViolationError(f"Reply header {bytes(reply[:4]).hex()} does not match request {sent.hex()}")

    return bytes(reply[4:8])

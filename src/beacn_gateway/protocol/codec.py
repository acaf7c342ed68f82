"""Value encoding and decoding for the Beacn parameter protocol.

Every parameter travels as exactly four bytes. The functions here only
reinterpret those bytes; which interpretation applies is decided by the
parameter catalog.
"""

import re
import struct
from dataclasses import dataclass
from typing import Union

from .constants import VALUE_LEN, DataType

_HEX_COLOUR_RE = re.compile(r"^#?([0-9a-fA-F]{6})$")


@dataclass(frozen=True)
class RGB:
    """Colour value as stored on the device.

    Attributes:
        red: Red channel (0-255)
        green: Green channel (0-255)
        blue: Blue channel (0-255)
        alpha: Fourth wire byte. Read back from the device but always
            written as zero.
    """

    red: int = 0
    green: int = 0
    blue: int = 0
    alpha: int = 0

    @classmethod
    def from_hex(cls, value: str) -> "RGB":
        """Parse a ``#rrggbb`` string.

        Example:
            >>> RGB.from_hex("#0a141e")
            RGB(red=10, green=20, blue=30, alpha=0)
        """
        match = _HEX_COLOUR_RE.match(value.strip())
        if match is None:
            raise ValueError(f"Invalid colour: {value!r} (expected #rrggbb)")
        raw = bytes.fromhex(match.group(1))
        return cls(red=raw[0], green=raw[1], blue=raw[2])

    def to_hex(self) -> str:
        """Format as ``#rrggbb`` (alpha is not included)."""
        return f"#{self.red:02x}{self.green:02x}{self.blue:02x}"


DomainValue = Union[int, float, RGB]


def _check_wire(data: bytes) -> bytes:
    if len(data) != VALUE_LEN:
        raise ValueError(f"Wire value must be {VALUE_LEN} bytes, got {len(data)}")
    return bytes(data)


def _pack(fmt: str, value, type_name: str) -> bytes:
    try:
        return struct.pack(fmt, value)
    except struct.error as e:
        raise ValueError(f"Value {value!r} out of range for {type_name}") from e


def _integral(value, type_name: str) -> int:
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"Value {value!r} is not an integer, cannot encode as {type_name}")
    return int(value)


def encode_u32(value: int) -> bytes:
    return _pack("<I", _integral(value, "uint32"), "uint32")


def decode_u32(data: bytes) -> int:
    return struct.unpack("<I", _check_wire(data))[0]


def encode_i32(value: int) -> bytes:
    return _pack("<i", _integral(value, "int32"), "int32")


def decode_i32(data: bytes) -> int:
    return struct.unpack("<i", _check_wire(data))[0]


def encode_f32(value: float) -> bytes:
    return _pack("<f", float(value), "float")


def decode_f32(data: bytes) -> float:
    # No rounding: the device's bit pattern is passed through as-is
    return struct.unpack("<f", _check_wire(data))[0]


def encode_rgb(value: RGB) -> bytes:
    """Encode a colour as ``[blue, green, red, 0]``.

    The fourth byte is always zero, whatever ``value.alpha`` holds.

    Raises:
        ValueError: If a channel is outside 0-255
    """
    for channel in (value.red, value.green, value.blue):
        if not 0 <= channel <= 0xFF:
            raise ValueError(f"Colour channel {channel} out of range 0-255")
    return bytes([value.blue, value.green, value.red, 0x00])


def decode_rgb(data: bytes) -> RGB:
    """Decode ``[blue, green, red, alpha]`` into an RGB value."""
    data = _check_wire(data)
    return RGB(red=data[2], green=data[1], blue=data[0], alpha=data[3])


_ENCODERS = {
    DataType.UINT32: encode_u32,
    DataType.INT32: encode_i32,
    DataType.FLOAT: encode_f32,
    DataType.RGB: encode_rgb,
}

_DECODERS = {
    DataType.UINT32: decode_u32,
    DataType.INT32: decode_i32,
    DataType.FLOAT: decode_f32,
    DataType.RGB: decode_rgb,
}


def encode_value(value: DomainValue, data_type: int) -> bytes:
    """
    Encode a Python value to a 4-byte wire value according to data type.

    Args:
        value: Python value to encode
        data_type: Protocol data type

    Returns:
        Encoded 4 bytes

    Raises:
        ValueError: If data type is unsupported or value is out of range

    Example:
        >>> encode_value(3, DataType.UINT32)
        b'\\x03\\x00\\x00\\x00'
        >>> encode_value(RGB(10, 20, 30), DataType.RGB)
        b'\\x1e\\x14\\n\\x00'
    """
    try:
        encoder = _ENCODERS[DataType(data_type)]
    except ValueError:
        raise ValueError(f"Unsupported data type: {data_type}") from None

    if data_type == DataType.RGB and not isinstance(value, RGB):
        raise ValueError(f"Expected RGB value, got {type(value).__name__}")

    return encoder(value)


def decode_value(data: bytes, data_type: int) -> DomainValue:
    """
    Decode a 4-byte wire value to a Python value according to data type.

    Args:
        data: Wire value (exactly 4 bytes)
        data_type: Protocol data type

    Returns:
        Decoded Python value

    Raises:
        ValueError: If data type is unsupported or data is not 4 bytes
    """
    try:
        decoder = _DECODERS[DataType(data_type)]
    except ValueError:
        raise ValueError(f"Unsupported data type: {data_type}") from None

    return decoder(data)

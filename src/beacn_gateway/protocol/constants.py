"""Protocol constants for Beacn Mic communication."""

from enum import IntEnum

# ============================================================================
# Device Identity
# ============================================================================

VENDOR_ID = 0x33AE
PRODUCT_ID = 0x0001

# ============================================================================
# USB Transport
# ============================================================================

INTERFACE = 3
ALT_SETTING = 1
EP_OUT = 0x03
EP_IN = 0x83

TRANSFER_TIMEOUT = 3.0  # Per bulk transfer (seconds)

# ============================================================================
# Frame Structure
# ============================================================================

OP_READ = 0xA3
OP_WRITE = 0xA4

HEADER_LEN = 4
VALUE_LEN = 4
FETCH_FRAME_LEN = HEADER_LEN
SET_FRAME_LEN = HEADER_LEN + VALUE_LEN
REPLY_LEN = HEADER_LEN + VALUE_LEN

# Reply sent to a Shutdown request
SHUTDOWN_SENTINEL = bytes(VALUE_LEN)


# ============================================================================
# Data Types
# ============================================================================


class DataType(IntEnum):
    """Domain type of a parameter's 4-byte wire value."""

    UINT32 = 1
    INT32 = 2
    FLOAT = 3
    RGB = 4


TYPE_NAMES = {
    DataType.UINT32: "uint32",
    DataType.INT32: "int32",
    DataType.FLOAT: "float",
    DataType.RGB: "rgb",
}

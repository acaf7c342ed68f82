"""USB transport layer."""

from beacn_gateway.usb.connection import UsbConnection

__all__ = ["UsbConnection"]

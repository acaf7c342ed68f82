"""USB bulk connection to the Beacn Mic using pyusb.

All methods are blocking. The device actor calls them from its single
worker thread; nothing else may touch a UsbConnection.
"""

import logging

import usb.core
import usb.util

from ..core.errors import (
    DeviceConfigurationError,
    DeviceNotFoundError,
    TransportError,
    TransportTimeoutError,
)
from ..protocol.constants import (
    ALT_SETTING,
    EP_IN,
    EP_OUT,
    INTERFACE,
    PRODUCT_ID,
    TRANSFER_TIMEOUT,
    VENDOR_ID,
)

logger = logging.getLogger(__name__)


class UsbConnection:
    """Owns one open, configured USB device handle.

    Opening runs the sequence the device needs before it will answer
    parameter requests: find the device, detach any kernel driver bound
    to the control interface, claim the interface and select its
    alternate setting.
    """

    def __init__(
        self,
        vendor_id: int = VENDOR_ID,
        product_id: int = PRODUCT_ID,
        interface: int = INTERFACE,
        alt_setting: int = ALT_SETTING,
        ep_out: int = EP_OUT,
        ep_in: int = EP_IN,
        timeout: float = TRANSFER_TIMEOUT,
    ):
        """
        Initialize USB connection manager.

        Args:
            vendor_id: USB vendor id to match
            product_id: USB product id to match
            interface: Interface number to claim
            alt_setting: Alternate setting to select on that interface
            ep_out: Bulk OUT endpoint address
            ep_in: Bulk IN endpoint address
            timeout: Per-transfer timeout in seconds (default: 3.0)
        """
        self.vendor_id = vendor_id
        self.product_id = product_id
        self.interface = interface
        self.alt_setting = alt_setting
        self.ep_out = ep_out
        self.ep_in = ep_in
        self.timeout = timeout

        self._dev: usb.core.Device | None = None
        self._detached = False
        self._claimed = False

    @property
    def connected(self) -> bool:
        """Check if the device is open and configured."""
        return self._dev is not None and self._claimed

    @property
    def _timeout_ms(self) -> int:
        return int(self.timeout * 1000)

    def open(self) -> None:
        """
        Find and configure the device.

        Raises:
            DeviceNotFoundError: If the device is absent or no USB backend is available
            DeviceConfigurationError: If driver detach, claim or alt-setting fails
        """
        if self.connected:
            logger.debug("Already connected to %04x:%04x", self.vendor_id, self.product_id)
            return

        logger.info("Locating device %04x:%04x", self.vendor_id, self.product_id)
        try:
            dev = usb.core.find(idVendor=self.vendor_id, idProduct=self.product_id)
        except (usb.core.USBError, usb.core.NoBackendError) as e:
            raise DeviceNotFoundError(f"USB lookup failed: {e}") from e

        if dev is None:
            raise DeviceNotFoundError(f"USB device {self.vendor_id:04x}:{self.product_id:04x} not found")

        logger.debug("Found device at bus %s address %s", dev.bus, dev.address)
        self._dev = dev

        try:
            self._configure(dev)
        except DeviceConfigurationError:
            self.close()
            raise

        logger.info(
            "Opened device %04x:%04x (interface %d, alt %d, EP OUT=0x%02x, EP IN=0x%02x)",
            self.vendor_id,
            self.product_id,
            self.interface,
            self.alt_setting,
            self.ep_out,
            self.ep_in,
        )

    def _configure(self, dev: usb.core.Device) -> None:
        try:
            if dev.is_kernel_driver_active(self.interface):
                dev.detach_kernel_driver(self.interface)
                self._detached = True
                logger.debug("Detached kernel driver from interface %d", self.interface)
        except NotImplementedError:
            # Backend cannot query kernel drivers (non-Linux)
            pass
        except usb.core.USBError as e:
            raise DeviceConfigurationError(f"Kernel driver detach failed: {e}") from e

        try:
            usb.util.claim_interface(dev, self.interface)
            self._claimed = True
        except usb.core.USBError as e:
            raise DeviceConfigurationError(f"Unable to claim interface {self.interface}: {e}") from e

        try:
            dev.set_interface_altsetting(interface=self.interface, alternate_setting=self.alt_setting)
        except usb.core.USBError as e:
            raise DeviceConfigurationError(
                f"Unable to select alternate setting {self.alt_setting} on interface {self.interface}: {e}"
            ) from e

    def write(self, data: bytes) -> None:
        """
        Bulk write to the OUT endpoint.

        Raises:
            TransportTimeoutError: If the transfer times out
            TransportError: On any other USB failure or a short write
        """
        dev = self._require_open()
        try:
            written = dev.write(self.ep_out, data, self._timeout_ms)
        except usb.core.USBTimeoutError as e:
            raise TransportTimeoutError(f"Bulk write timed out after {self.timeout}s") from e
        except usb.core.USBError as e:
            raise TransportError(f"Bulk write failed: {e}") from e

        if written != len(data):
            raise TransportError(f"Short bulk write: {written}/{len(data)} bytes")

        logger.debug("TX %s", bytes(data).hex())

    def read(self, size: int) -> bytes:
        """
        Bulk read from the IN endpoint.

        Args:
            size: Maximum number of bytes to read

        Raises:
            TransportTimeoutError: If the transfer times out
            TransportError: On any other USB failure
        """
        dev = self._require_open()
        try:
            data = bytes(dev.read(self.ep_in, size, self._timeout_ms))
        except usb.core.USBTimeoutError as e:
            raise TransportTimeoutError(f"Bulk read timed out after {self.timeout}s") from e
        except usb.core.USBError as e:
            raise TransportError(f"Bulk read failed: {e}") from e

        logger.debug("RX %s", data.hex())
        return data

    def close(self) -> None:
        """Release the interface and the device handle."""
        dev = self._dev
        if dev is None:
            return

        if self._claimed:
            try:
                usb.util.release_interface(dev, self.interface)
            except usb.core.USBError as e:
                logger.warning("Failed to release interface %d: %s", self.interface, e)
            self._claimed = False

        if self._detached:
            try:
                dev.attach_kernel_driver(self.interface)
            except usb.core.USBError as e:
                logger.warning("Failed to re-attach kernel driver: %s", e)
            self._detached = False

        usb.util.dispose_resources(dev)
        self._dev = None
        logger.info("USB device closed")

    def _require_open(self) -> usb.core.Device:
        if self._dev is None or not self._claimed:
            raise TransportError("Device is not open")
        return self._dev

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

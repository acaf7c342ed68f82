"""Domain-specific errors for beacn-gateway."""


class GatewayError(Exception):
    """Base error for beacn-gateway."""


class DeviceError(GatewayError):
    """Base error for device open/configuration failures."""


class DeviceNotFoundError(DeviceError):
    """Raised when no matching USB device is present or it cannot be opened."""


class DeviceConfigurationError(DeviceError):
    """Raised when detaching the kernel driver, claiming the interface or
    selecting the alternate setting fails."""


class TransportError(GatewayError):
    """Raised when a bulk write or read fails."""


class TransportTimeoutError(TransportError):
    """Raised when a bulk transfer does not complete within its timeout."""


class ProtocolViolationError(GatewayError):
    """Raised when a reply header does not match the request it answers.

    The session is likely desynchronized; re-opening the device may be
    needed rather than a plain retry.
    """


class ConfirmationMismatchError(GatewayError):
    """Raised when the read-back after a SET does not echo the written value."""

    def __init__(self, message: str, expected: bytes, actual: bytes) -> None:
        super().__init__(message)
        self.expected = expected
        self.actual = actual


class ActorStoppedError(GatewayError):
    """Raised for requests the device actor will never service."""

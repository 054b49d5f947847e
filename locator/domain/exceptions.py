"""
Exception hierarchy for the device locator.

Every error raised by the domain and application layers inherits from
LocatorError. The API layer maps each subclass to an HTTP status; nothing
here is fatal to the process.
"""

# -----------------------------------------------------------------------------
# Standard library
# -----------------------------------------------------------------------------
from typing import Any, Dict, Optional


# -----------------------------------------------------------------------------
# Base
# -----------------------------------------------------------------------------


class LocatorError(Exception):
    """Base exception for all device locator errors."""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}


# -----------------------------------------------------------------------------
# Client errors
# -----------------------------------------------------------------------------


class InvalidArgumentError(LocatorError, ValueError):
    """Raised when a request field is missing or malformed."""
    pass


class DeviceNotFoundError(LocatorError):
    """Raised when a device id or push token is not registered."""

    def __init__(self, device_ref: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(f"Device not found: {device_ref}", details)
        self.device_ref = device_ref


class InvalidStateTransitionError(LocatorError):
    """Raised when a tracking session is moved to a state it cannot enter."""

    def __init__(self, current: str, target: str):
        super().__init__(
            f"Invalid tracking transition {current} -> {target}",
            {"current": current, "target": target},
        )
        self.current = current
        self.target = target


# -----------------------------------------------------------------------------
# Upstream errors
# -----------------------------------------------------------------------------


class PushDeliveryFailedError(LocatorError):
    """Raised when the push transport rejects or fails to send a wake signal."""
    pass


class StoreUnavailableError(LocatorError):
    """Raised when the persistence layer cannot complete an operation."""
    pass

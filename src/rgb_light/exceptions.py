"""
Exception hierarchy for the RGB indicator light.

All exceptions inherit from :class:`LightError` so callers can catch
broadly (``except LightError``) or narrowly (``except DeviceNotFound``).
Argument problems share the :class:`ValidationError` branch and are always
raised before any device I/O.
"""


class LightError(Exception):
    """Base exception for all RGB light errors."""


class ValidationError(LightError):
    """Raised when an argument fails pre-send validation."""


class InvalidLightSelection(ValidationError):
    """Raised when a light number other than 1 is requested."""


class InvalidArgument(ValidationError):
    """Raised when a blink duration is negative."""


class InvalidEnumValue(ValidationError):
    """Raised when a color, alarm, or level is outside its defined set."""


class UnsupportedOperation(LightError):
    """Raised for operations the device does not implement."""


class DeviceNotFound(LightError):
    """Raised when no port matches the hardware identifier."""


class DeviceUnavailable(LightError):
    """Raised when the device cannot be opened or is not claimed."""


class DeviceCommandFailure(LightError):
    """Raised when the device reports a failed command."""

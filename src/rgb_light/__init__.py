"""RGB Indicator Light Python Interface"""

from .blink import BlinkState, BlinkTask
from .config import LightConfig, load_config
from .constants import MAX_LIGHTS, PRODUCT_ID, REVISION, VENDOR_ID
from .exceptions import (
    DeviceCommandFailure,
    DeviceNotFound,
    DeviceUnavailable,
    InvalidArgument,
    InvalidEnumValue,
    InvalidLightSelection,
    LightError,
    UnsupportedOperation,
    ValidationError,
)
from .health import HealthChecker
from .locator import DeviceEntry, PortLocator, RegistryBackend, SerialPortBackend
from .mapping import to_device_color
from .models import (
    CAPABILITIES,
    DeviceColor,
    HardwareIdentifier,
    HealthCheckLevel,
    LightAlarm,
    LightCapabilities,
    LightColor,
    LightRequest,
    SessionState,
)
from .session import LightSession, get_session
from .transport import ColorTransport, TransportFactory

__all__ = [
    "BlinkState",
    "BlinkTask",
    "CAPABILITIES",
    "ColorTransport",
    "DeviceColor",
    "DeviceCommandFailure",
    "DeviceEntry",
    "DeviceNotFound",
    "DeviceUnavailable",
    "HardwareIdentifier",
    "HealthCheckLevel",
    "HealthChecker",
    "InvalidArgument",
    "InvalidEnumValue",
    "InvalidLightSelection",
    "LightAlarm",
    "LightCapabilities",
    "LightColor",
    "LightConfig",
    "LightError",
    "LightRequest",
    "LightSession",
    "MAX_LIGHTS",
    "PRODUCT_ID",
    "PortLocator",
    "REVISION",
    "RegistryBackend",
    "SerialPortBackend",
    "SessionState",
    "TransportFactory",
    "UnsupportedOperation",
    "VENDOR_ID",
    "ValidationError",
    "get_session",
    "load_config",
    "to_device_color",
]
__version__ = "0.1.0"

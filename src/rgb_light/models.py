"""
Value types shared by the light session: enums, the hardware match pattern,
the declared capability set, and per-call request validation.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import TypeVar

from .constants import MAX_LIGHTS, PRODUCT_ID, REVISION, VENDOR_ID
from .exceptions import InvalidArgument, InvalidEnumValue, InvalidLightSelection

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class LightColor(IntEnum):
    """Abstract colors a host may request (POS light-color codes)."""

    PRIMARY = 0x1
    CUSTOM1 = 0x10000
    CUSTOM2 = 0x20000
    CUSTOM3 = 0x40000
    CUSTOM4 = 0x80000
    CUSTOM5 = 0x100000


class LightAlarm(IntEnum):
    """Abstract alarm values (POS light-alarm codes)."""

    NONE = 0x1
    SLOW = 0x10
    MEDIUM = 0x20
    FAST = 0x30
    CUSTOM1 = 0x10000
    CUSTOM2 = 0x20000


class DeviceColor(IntEnum):
    """Color commands understood by the device, in canonical order."""

    OFF = 0
    RED = 1
    GREEN = 2
    BLUE = 3
    YELLOW = 4
    ORANGE = 5
    MAGENTA = 6


class HealthCheckLevel(IntEnum):
    """Health check depth."""

    INTERNAL = 1
    EXTERNAL = 2
    INTERACTIVE = 3


class SessionState(Enum):
    """Claim state of a :class:`~rgb_light.session.LightSession`."""

    UNCLAIMED = "unclaimed"
    CLAIMED = "claimed"


E = TypeVar("E", bound=IntEnum)


def coerce_enum(enum_cls: type[E], value: object, label: str) -> E:
    """Return *value* as a member of *enum_cls* or raise :class:`InvalidEnumValue`.

    Combined flag values and bools are rejected; only defined members pass.
    """
    if isinstance(value, bool):
        raise InvalidEnumValue(f"Invalid {label} {value!r}; expected one of {list(enum_cls)}")
    try:
        return enum_cls(value)
    except (ValueError, TypeError) as err:
        raise InvalidEnumValue(
            f"Invalid {label} {value!r}; expected one of {list(enum_cls)}"
        ) from err


def validate_light_number(light_number: int) -> None:
    if light_number != MAX_LIGHTS:
        raise InvalidLightSelection(
            f"Invalid light selected ({light_number}), only {MAX_LIGHTS} light supported"
        )


# ---------------------------------------------------------------------------
# Hardware identifier
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class HardwareIdentifier:
    """USB vendor/product/revision triple the light is discovered by."""

    vendor_id: str = VENDOR_ID
    product_id: str = PRODUCT_ID
    revision: str = REVISION

    @property
    def pattern(self) -> re.Pattern[str]:
        """Case-insensitive pattern matched against enumeration identifiers."""
        return re.compile(
            rf"^VID_{re.escape(self.vendor_id)}.PID_{re.escape(self.product_id)}",
            re.IGNORECASE,
        )

    def matches(self, identifier: str) -> bool:
        return self.pattern.match(identifier) is not None

    def __str__(self) -> str:
        return f"USB\\VID_{self.vendor_id}&PID_{self.product_id}&REV_{self.revision}"


# ---------------------------------------------------------------------------
# Capabilities
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LightCapabilities:
    """Capability set declared to the host."""

    max_lights: int = MAX_LIGHTS
    colors: frozenset[LightColor] = field(default_factory=lambda: frozenset(LightColor))
    alarms: frozenset[LightAlarm] = field(
        default_factory=lambda: frozenset({LightAlarm.NONE})
    )
    blink: bool = True


CAPABILITIES = LightCapabilities()


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LightRequest:
    """Arguments of a single ``switch_on`` call."""

    light_number: int
    on_ms: int
    off_ms: int
    color: LightColor
    alarm: LightAlarm = LightAlarm.NONE

    def validate(self) -> LightRequest:
        """Check every argument and return a copy with coerced enum members.

        Checks run in a fixed order and the first failure wins: light
        number, blink durations, alarm, color.

        Raises:
            InvalidLightSelection: If ``light_number`` is not 1.
            InvalidArgument: If either duration is negative.
            InvalidEnumValue: If the alarm or color is not a defined value.
        """
        validate_light_number(self.light_number)
        if self.on_ms < 0 or self.off_ms < 0:
            raise InvalidArgument(
                f"Blink on/off durations must be >= 0, got {self.on_ms}/{self.off_ms}"
            )
        alarm = coerce_enum(LightAlarm, self.alarm, "alarm")
        color = coerce_enum(LightColor, self.color, "color")
        return LightRequest(self.light_number, self.on_ms, self.off_ms, color, alarm)

    @property
    def blinks(self) -> bool:
        """``True`` when both durations are non-zero."""
        return self.on_ms != 0 and self.off_ms != 0

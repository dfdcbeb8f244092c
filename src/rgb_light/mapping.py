"""Translation from abstract host colors to device color commands."""

from __future__ import annotations

from .models import DeviceColor, LightColor

_COLOR_MAP: dict[LightColor, DeviceColor] = {
    LightColor.PRIMARY: DeviceColor.GREEN,
    LightColor.CUSTOM1: DeviceColor.RED,
    LightColor.CUSTOM2: DeviceColor.YELLOW,
    LightColor.CUSTOM3: DeviceColor.ORANGE,
    LightColor.CUSTOM4: DeviceColor.BLUE,
    LightColor.CUSTOM5: DeviceColor.MAGENTA,
}


def to_device_color(color: object) -> DeviceColor:
    """Return the device command for *color*; anything unmapped is ``OFF``."""
    try:
        return _COLOR_MAP.get(color, DeviceColor.OFF)  # type: ignore[call-overload]
    except TypeError:  # unhashable
        return DeviceColor.OFF

"""
Session configuration loaded from a YAML file.

Example ``config/light.yaml``::

    # port: COM7              # optional; skips discovery when set
    hardware_id:
      vendor_id: "03EB"
      product_id: "2404"
      revision: "0100"
    blink_mode: software      # or "hardware"

Every key is optional; ``LightConfig()`` carries the same defaults.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from .constants import (
    BLINK_MODE_HARDWARE,
    BLINK_MODE_SOFTWARE,
    DEFAULT_BLINK_MODE,
    PRODUCT_ID,
    REVISION,
    VENDOR_ID,
)
from .exceptions import InvalidEnumValue, ValidationError
from .models import HardwareIdentifier

logger = logging.getLogger(__name__)

_BLINK_MODES = (BLINK_MODE_SOFTWARE, BLINK_MODE_HARDWARE)
_HEX4 = re.compile(r"^[0-9A-Fa-f]{4}$")


@dataclass(frozen=True)
class LightConfig:
    """Validated session configuration."""

    port: Optional[str] = None
    hardware_id: HardwareIdentifier = field(default_factory=HardwareIdentifier)
    blink_mode: str = DEFAULT_BLINK_MODE

    @property
    def hardware_blink(self) -> bool:
        return self.blink_mode == BLINK_MODE_HARDWARE


def load_config(path: str | Path) -> LightConfig:
    """Load and validate a light configuration from a YAML file.

    Args:
        path: Path to the YAML config file.

    Returns:
        A validated :class:`LightConfig`.

    Raises:
        FileNotFoundError: If *path* does not exist.
        ValidationError: If the config is malformed or contains invalid values.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        raw = yaml.safe_load(f)

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ValidationError(f"Config file must be a YAML mapping, got {type(raw).__name__}")

    port = raw.get("port")
    if port is not None and (not isinstance(port, str) or not port):
        raise ValidationError("'port' must be a non-empty string when given")

    hardware_id = _parse_hardware_id(raw.get("hardware_id", {}))

    blink_mode = raw.get("blink_mode", DEFAULT_BLINK_MODE)
    if blink_mode not in _BLINK_MODES:
        raise InvalidEnumValue(
            f"'blink_mode' must be one of {list(_BLINK_MODES)}, got {blink_mode!r}"
        )

    config = LightConfig(port=port, hardware_id=hardware_id, blink_mode=blink_mode)
    logger.debug("Loaded config from %s: %s", path, config)
    return config


def _parse_hardware_id(data: object) -> HardwareIdentifier:
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValidationError("'hardware_id' must be a mapping")
    return HardwareIdentifier(
        vendor_id=_require_hex4(data, "vendor_id", VENDOR_ID),
        product_id=_require_hex4(data, "product_id", PRODUCT_ID),
        revision=_require_hex4(data, "revision", REVISION),
    )


def _require_hex4(data: dict, key: str, default: str) -> str:
    val = data.get(key, default)
    # Unquoted values are ints to YAML (and 0100 is octal), so only strings pass.
    if not isinstance(val, str) or not _HEX4.match(val):
        raise ValidationError(
            f"hardware_id: '{key}' must be a quoted string of 4 hex digits, got {val!r}"
        )
    return val.upper()

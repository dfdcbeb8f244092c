"""Shared runtime constants for the RGB indicator light.

This is the canonical source of truth for the hardware match pattern,
capability limits, and health-check texts.  Other modules should import
from here rather than defining their own copies.
"""

# ---------------------------------------------------------------------------
# Hardware match pattern
# ---------------------------------------------------------------------------

VENDOR_ID = "03EB"
PRODUCT_ID = "2404"
REVISION = "0100"

PORT_NAME_ATTRIBUTE = "PortName"

# ---------------------------------------------------------------------------
# Capability limits
# ---------------------------------------------------------------------------

MAX_LIGHTS = 1
READ_ID_FAILED = -1  # Sentinel returned by the transport's identity query

# ---------------------------------------------------------------------------
# Health check
# ---------------------------------------------------------------------------

HEALTH_CHECK_HOLD_MS = 1000
HEALTH_INTERNAL_OK = "Internal HCheck: Successful"
HEALTH_INTERNAL_FAILED = "Internal HCheck: Failed"
HEALTH_EXTERNAL_COMPLETE = "External HCheck: Complete"

# ---------------------------------------------------------------------------
# Session defaults
# ---------------------------------------------------------------------------

BLINK_MODE_SOFTWARE = "software"
BLINK_MODE_HARDWARE = "hardware"
DEFAULT_BLINK_MODE = BLINK_MODE_SOFTWARE
DEFAULT_CLAIM_TIMEOUT_MS = 1000

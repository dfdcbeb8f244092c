"""Self-test of a claimed light: identity query and a full visual color cycle."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from .constants import (
    HEALTH_CHECK_HOLD_MS,
    HEALTH_EXTERNAL_COMPLETE,
    HEALTH_INTERNAL_FAILED,
    HEALTH_INTERNAL_OK,
)
from .exceptions import DeviceCommandFailure, UnsupportedOperation
from .models import DeviceColor, HealthCheckLevel, coerce_enum

if TYPE_CHECKING:
    from .session import LightSession

logger = logging.getLogger(__name__)


class HealthChecker:
    """Runs health checks against a session and remembers the last outcome.

    Args:
        session: The session whose device is tested.
        hold_ms: How long each color is shown during the external check.
    """

    def __init__(self, session: LightSession, hold_ms: int = HEALTH_CHECK_HOLD_MS) -> None:
        self._session = session
        self.hold_ms = hold_ms
        self.text = ""

    def check(self, level: HealthCheckLevel) -> str:
        """Run the check for *level*, record its outcome and return it.

        A failed identity query is reported in the returned text, not
        raised.

        Raises:
            UnsupportedOperation: For :attr:`HealthCheckLevel.INTERACTIVE`.
            InvalidEnumValue: If *level* is not a defined level.
            DeviceUnavailable: If the session is not claimed.
        """
        level = coerce_enum(HealthCheckLevel, level, "health check level")
        if level is HealthCheckLevel.INTERACTIVE:
            raise UnsupportedOperation("Interactive CheckHealth not supported")

        if level is HealthCheckLevel.INTERNAL:
            result = self._internal()
        else:
            result = self._external()

        self.text = result
        logger.info("Health check %s: %s", level.name, result)
        return result

    def _internal(self) -> str:
        try:
            device_id = self._session.read_device_id()
        except DeviceCommandFailure as exc:
            logger.warning("Identity query failed: %s", exc)
            return HEALTH_INTERNAL_FAILED
        logger.debug("Device id: %#x", device_id)
        return HEALTH_INTERNAL_OK

    def _external(self) -> str:
        # Blinking is stopped for good; the device's saved-color slot is reused here.
        with self._session.exclusive(stop_blinking=True) as tx:
            tx.save_color()
            for color in DeviceColor:
                tx.set_color(color)
                time.sleep(self.hold_ms / 1000)
            tx.resume_color()
        return HEALTH_EXTERNAL_COMPLETE

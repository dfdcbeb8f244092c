"""
RGB Indicator Light Session

Claim/release lifecycle and color commands for a single-unit RGB light
driven over a serial command transport.

Capabilities:
    - 1 light
    - Colors: PRIMARY (green), CUSTOM1-5 (red, yellow, orange, blue, magenta)
    - Alarms: NONE only
    - Blinking: yes (software loop, or the controller's own flashing)
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

import serial

from .blink import BlinkTask
from .config import LightConfig, load_config
from .constants import DEFAULT_CLAIM_TIMEOUT_MS, READ_ID_FAILED
from .exceptions import (
    DeviceCommandFailure,
    DeviceUnavailable,
    UnsupportedOperation,
)
from .health import HealthChecker
from .locator import PortLocator
from .mapping import to_device_color
from .models import (
    CAPABILITIES,
    DeviceColor,
    HealthCheckLevel,
    LightAlarm,
    LightCapabilities,
    LightColor,
    LightRequest,
    SessionState,
    validate_light_number,
)
from .transport import ColorTransport, TransportFactory

logger = logging.getLogger(__name__)


class LightSession:
    """Exclusive session on one RGB indicator light.

    Use as a context manager for automatic claim/release::

        with LightSession(open_controller) as light:
            light.switch_on(1, 500, 500, LightColor.CUSTOM1)

    Callers must not invoke ``switch_on``/``switch_off``/``check_health``
    concurrently on the same session.

    Args:
        transport_factory: Opens a :class:`ColorTransport` for a port.
        locator: Port discovery (default: pyserial port listing).
        config: Session configuration (default: :class:`LightConfig`).
    """

    def __init__(
        self,
        transport_factory: TransportFactory,
        locator: Optional[PortLocator] = None,
        config: Optional[LightConfig] = None,
    ) -> None:
        self.config = config if config is not None else LightConfig()
        self.port: Optional[str] = None
        self._factory = transport_factory
        self._locator = locator if locator is not None else PortLocator()
        self._lock = threading.Lock()
        self._state = SessionState.UNCLAIMED
        self._transport: Optional[ColorTransport] = None
        self._blink: Optional[BlinkTask] = None
        self._health = HealthChecker(self)

    # -- Context manager ----------------------------------------------------

    def __enter__(self) -> LightSession:
        self.claim(DEFAULT_CLAIM_TIMEOUT_MS)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.release()

    # -- Properties ---------------------------------------------------------

    @property
    def capabilities(self) -> LightCapabilities:
        return CAPABILITIES

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_claimed(self) -> bool:
        return self._state is SessionState.CLAIMED

    @property
    def blink_active(self) -> bool:
        """Return ``True`` while a software blink loop is running."""
        task = self._blink
        return task is not None and not task.cancelled and task.is_alive

    @property
    def blink_task(self) -> Optional[BlinkTask]:
        """The most recently started blink task, if any."""
        return self._blink

    @property
    def check_health_text(self) -> str:
        """Outcome of the last health check (empty until one has run)."""
        return self._health.text

    # -- Claim / release ----------------------------------------------------

    def claim(self, timeout_ms: int = DEFAULT_CLAIM_TIMEOUT_MS) -> None:
        """Locate the device and open a transport to it.

        A negative *timeout_ms* waits forever.  Claiming an already claimed
        session does nothing.

        Raises:
            DeviceNotFound: If no port matches the configured hardware id.
            DeviceUnavailable: If the transport cannot be opened.
        """
        with self._lock:
            if self._state is SessionState.CLAIMED:
                logger.debug("Already claimed on %s", self.port)
                return

            port = self.config.port or self._locator.locate(self.config.hardware_id)
            timeout_s = None if timeout_ms < 0 else timeout_ms / 1000
            logger.info("Claiming light on %s", port)
            try:
                transport = self._factory(port, timeout_s)
            except (serial.SerialException, OSError) as exc:
                raise DeviceUnavailable(f"Cannot open {port}: {exc}") from exc

            self._transport = transport
            self._state = SessionState.CLAIMED
            self.port = port

    def release(self) -> None:
        """Stop blinking and close the transport (safe to call multiple times).

        The blink thread is signalled but not joined.
        """
        with self._lock:
            if self._state is SessionState.UNCLAIMED:
                return
            transport = self._transport
            self._cancel_blink()
            try:
                if transport is not None:
                    transport.close()
            finally:
                self._transport = None
                self._state = SessionState.UNCLAIMED
                logger.info("Released light on %s", self.port)
                self.port = None

    @contextmanager
    def exclusive(self, stop_blinking: bool = False) -> Iterator[ColorTransport]:
        """Hold the command lock and yield the open transport.

        Args:
            stop_blinking: Cancel any software blink before yielding.

        Raises:
            DeviceUnavailable: If the session is not claimed.
        """
        with self._lock:
            transport = self._require_claimed()
            if stop_blinking:
                self._cancel_blink()
            yield transport

    # -- Light control ------------------------------------------------------

    def switch_on(
        self,
        light_number: int,
        blink_on_ms: int,
        blink_off_ms: int,
        color: LightColor,
        alarm: LightAlarm = LightAlarm.NONE,
    ) -> None:
        """Show *color*, blinking when both durations are non-zero.

        All arguments are validated before anything is sent to the device.

        Raises:
            InvalidLightSelection: If *light_number* is not 1.
            InvalidArgument: If a duration is negative.
            InvalidEnumValue: If *alarm* or *color* is not a defined value.
            DeviceUnavailable: If the session is not claimed.
        """
        request = LightRequest(light_number, blink_on_ms, blink_off_ms, color, alarm).validate()
        device_color = to_device_color(request.color)
        hardware_blink = self.config.hardware_blink
        task: Optional[BlinkTask] = None

        with self.exclusive(stop_blinking=True) as tx:
            # Publish the replacement before the color goes out
            if request.blinks and not hardware_blink:
                task = BlinkTask(tx, self._lock, request.on_ms, request.off_ms)
                self._blink = task

            logger.debug("Switch on: %s -> %s", request.color.name, device_color.name)
            tx.set_color(device_color)

            if hardware_blink:
                if request.blinks:
                    tx.set_flashing_period(request.on_ms, request.off_ms)
                tx.set_flashing(request.blinks)

        if task is not None:
            task.start()

    def switch_off(self, light_number: int) -> None:
        """Turn the light off and stop any blinking.

        Raises:
            InvalidLightSelection: If *light_number* is not 1.
            DeviceUnavailable: If the session is not claimed.
        """
        validate_light_number(light_number)
        with self.exclusive(stop_blinking=True) as tx:
            if self.config.hardware_blink:
                tx.set_flashing(False)
            logger.debug("Switch off")
            tx.set_color(DeviceColor.OFF)

    # -- Diagnostics --------------------------------------------------------

    def read_device_id(self) -> int:
        """Query the device identity.

        Raises:
            DeviceUnavailable: If the session is not claimed.
            DeviceCommandFailure: If the query fails.
        """
        with self.exclusive() as tx:
            try:
                device_id = tx.read_id()
            except (serial.SerialException, OSError) as exc:
                raise DeviceCommandFailure(f"Identity query failed: {exc}") from exc
        if device_id == READ_ID_FAILED:
            raise DeviceCommandFailure("Identity query failed: device returned -1")
        return device_id

    def check_health(self, level: HealthCheckLevel) -> str:
        """Run a health check; see :class:`~rgb_light.health.HealthChecker`."""
        return self._health.check(level)

    def direct_io(self, command: int, data: int, obj: object) -> None:
        raise UnsupportedOperation("DirectIO not supported")

    # -- Internal -----------------------------------------------------------

    def _require_claimed(self) -> ColorTransport:
        """Return the open transport or raise."""
        if self._state is not SessionState.CLAIMED or self._transport is None:
            raise DeviceUnavailable("Light not claimed — call claim() first.")
        return self._transport

    def _cancel_blink(self) -> None:
        """Cancel the active blink task; caller holds the command lock."""
        if self._blink is not None:
            self._blink.cancel()
            self._blink = None


# ---------------------------------------------------------------------------
# Convenience factory
# ---------------------------------------------------------------------------


def get_session(
    transport_factory: TransportFactory,
    config_path: Optional[str | Path] = None,
) -> LightSession:
    """Return a session, optionally configured from a YAML file.

    Example::

        with get_session(open_controller, "config/light.yaml") as light:
            light.switch_on(1, 0, 0, LightColor.PRIMARY)
    """
    config = load_config(config_path) if config_path is not None else None
    return LightSession(transport_factory, config=config)

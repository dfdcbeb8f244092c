"""
Software blinking for the RGB light.

A :class:`BlinkTask` runs in a daemon thread and alternates between the
color the device showed when the task started and ``OFF``.  Cancellation is
cooperative: :meth:`BlinkTask.cancel` sets an event that the loop waits on,
so the thread exits at its next hold at the latest.

Every device write made by the loop happens under the owning session's
command lock and only after confirming the task has not been cancelled.
The session cancels a task under that same lock, so once ``cancel`` has
returned a superseded task can no longer touch the device.
"""

from __future__ import annotations

import logging
import threading
from enum import Enum
from typing import Callable, Optional

from .models import DeviceColor
from .transport import ColorTransport

logger = logging.getLogger(__name__)


class BlinkState(Enum):
    RUNNING = "running"
    CANCELLED = "cancelled"


class BlinkTask:
    """Background on/off loop bound to one transport.

    Args:
        transport: Open device handle to blink.
        lock: The session's command lock; held for each device write.
        on_ms: Time the saved color is shown per cycle.
        off_ms: Time the light is off per cycle.
    """

    def __init__(
        self,
        transport: ColorTransport,
        lock: threading.Lock,
        on_ms: int,
        off_ms: int,
    ) -> None:
        self.on_ms = on_ms
        self.off_ms = off_ms
        self.error: Optional[BaseException] = None
        self._transport = transport
        self._lock = lock
        self._cancelled = threading.Event()
        self._thread: Optional[threading.Thread] = None

    # -- Lifecycle ----------------------------------------------------------

    def start(self) -> None:
        """Start the loop thread (no-op if already started)."""
        if self._thread is not None:
            return
        self._thread = threading.Thread(
            target=self._run,
            name=f"rgb-light-blink-{self.on_ms}/{self.off_ms}",
            daemon=True,
        )
        self._thread.start()
        logger.debug("Started blinking (%d ms on / %d ms off)", self.on_ms, self.off_ms)

    def cancel(self) -> None:
        """Signal the loop to stop.

        Does not wait for the thread.  Callers that need the no-write
        guarantee must hold the command lock while cancelling.
        """
        if not self._cancelled.is_set():
            self._cancelled.set()
            logger.debug("Cancelled blinking")

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for the thread to exit; return ``True`` if it has."""
        if self._thread is None:
            return True
        self._thread.join(timeout)
        return not self._thread.is_alive()

    @property
    def state(self) -> BlinkState:
        return BlinkState.CANCELLED if self._cancelled.is_set() else BlinkState.RUNNING

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    # -- Loop ---------------------------------------------------------------

    def _write(self, action: Callable[..., None], *args: object) -> bool:
        """Run *action* under the lock unless cancelled; return ``False`` to stop."""
        with self._lock:
            if self._cancelled.is_set():
                return False
            action(*args)
            return True

    def _hold(self, duration_ms: int) -> bool:
        """Wait *duration_ms*; return ``False`` if cancelled meanwhile."""
        return not self._cancelled.wait(duration_ms / 1000)

    def _run(self) -> None:
        tx = self._transport
        try:
            if not self._write(tx.save_color):
                return
            while True:
                if not (self._write(tx.resume_color) and self._hold(self.on_ms)):
                    break
                if not (self._write(tx.set_color, DeviceColor.OFF) and self._hold(self.off_ms)):
                    break
        except Exception as exc:
            self.error = exc
            self._cancelled.set()
            logger.exception("Blink loop stopped by transport error")
        finally:
            logger.debug("Blink thread exiting")

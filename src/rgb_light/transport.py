"""
Command transport interface for the RGB indicator light.

The transport owns the serial link to the controller and knows how a
semantic request ("show red", "save the current color") becomes bytes on
the wire.  This package only consumes it: a
:class:`~rgb_light.session.LightSession` is given a *factory* that opens a
transport for a resolved port at claim time.

Typical usage (via :class:`~rgb_light.session.LightSession`)::

    session = LightSession(transport_factory=open_controller)
    session.claim(1000)
    session.switch_on(1, 0, 0, LightColor.PRIMARY)
    session.release()
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, Optional

from .models import DeviceColor


class ColorTransport(ABC):
    """Open handle to a single RGB controller.

    Implementations raise :class:`serial.SerialException` (or another
    :class:`OSError`) when the link fails.
    """

    # -- Color --------------------------------------------------------------

    @abstractmethod
    def set_color(self, color: DeviceColor) -> None:
        """Show *color* immediately."""

    @abstractmethod
    def save_color(self) -> None:
        """Remember the color currently shown."""

    @abstractmethod
    def resume_color(self) -> None:
        """Show the color remembered by :meth:`save_color`."""

    # -- Hardware flashing --------------------------------------------------

    @abstractmethod
    def set_flashing(self, enabled: bool) -> None:
        """Enable or disable the controller's built-in flashing."""

    @abstractmethod
    def set_flashing_period(self, on_ms: int, off_ms: int) -> None:
        """Program the built-in flashing on/off period."""

    # -- Identity -----------------------------------------------------------

    @abstractmethod
    def read_id(self) -> int:
        """Return the device id, or ``-1`` if the query failed."""

    # -- Lifecycle ----------------------------------------------------------

    @abstractmethod
    def close(self) -> None:
        """Close the link (safe to call multiple times)."""


#: Opens a transport for ``(port, timeout_s)``; ``timeout_s`` of ``None`` waits forever.
TransportFactory = Callable[[str, Optional[float]], ColorTransport]

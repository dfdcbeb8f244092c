"""
Port discovery: resolve a :class:`~rgb_light.models.HardwareIdentifier` to
the serial port the light is attached to.

The search itself is platform independent.  Backends only expose the
platform's device-enumeration index as a flat stream of
:class:`DeviceEntry` objects:

* :class:`SerialPortBackend` (default) uses pyserial's port listing and
  works on Linux, macOS and Windows.
* :class:`RegistryBackend` walks ``HKLM\\SYSTEM\\CurrentControlSet\\Enum``
  on Windows and reads each instance's ``PortName`` value.

When several devices match, the first one encountered wins.  Traversal
order is whatever the backend yields and is not guaranteed to be stable
across reboots or re-plugs.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Mapping, Optional

import serial.tools.list_ports

from .constants import PORT_NAME_ATTRIBUTE
from .exceptions import DeviceNotFound
from .models import HardwareIdentifier

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeviceEntry:
    """One node of the enumeration index.

    *instances* holds one attribute mapping per child key and may be a lazy
    iterable; it is only consumed for entries whose identifier matches.
    """

    identifier: str
    instances: Iterable[Mapping[str, str]] = ()


class EnumerationBackend(ABC):
    """Source of :class:`DeviceEntry` objects for :class:`PortLocator`."""

    @abstractmethod
    def entries(self) -> Iterator[DeviceEntry]:
        """Yield every enumerated device in traversal order."""


# ---------------------------------------------------------------------------
# Backends
# ---------------------------------------------------------------------------


class SerialPortBackend(EnumerationBackend):
    """Enumerate USB serial ports via :func:`serial.tools.list_ports.comports`."""

    def entries(self) -> Iterator[DeviceEntry]:
        for info in serial.tools.list_ports.comports():
            # Skip if no VID/PID (built-in UARTs, Bluetooth serial, ...)
            if info.vid is None or info.pid is None:
                continue
            identifier = f"VID_{info.vid:04X}&PID_{info.pid:04X}"
            yield DeviceEntry(identifier, ({PORT_NAME_ATTRIBUTE: info.device},))


class RegistryBackend(EnumerationBackend):
    """Walk the Windows device enumeration tree.

    Layout::

        HKLM\\SYSTEM\\CurrentControlSet\\Enum\\<bus>\\<device id>\\<instance>
            \\Device Parameters  -> PortName

    Args:
        registry: Module providing the :mod:`winreg` API.  Defaults to
            :mod:`winreg` itself, which only exists on Windows.
    """

    ENUM_KEY = "SYSTEM\\CurrentControlSet\\Enum"
    PARAMETERS_KEY = "Device Parameters"

    def __init__(self, registry: Optional[Any] = None) -> None:
        if registry is None:
            import winreg as registry  # Windows only
        self._reg = registry

    def entries(self) -> Iterator[DeviceEntry]:
        reg = self._reg
        with reg.OpenKey(reg.HKEY_LOCAL_MACHINE, self.ENUM_KEY) as root:
            buses = list(_subkeys(reg, root))
        for bus in buses:
            bus_path = f"{self.ENUM_KEY}\\{bus}"
            try:
                with reg.OpenKey(reg.HKEY_LOCAL_MACHINE, bus_path) as bus_key:
                    device_ids = list(_subkeys(reg, bus_key))
            except OSError as exc:
                logger.debug("Skipping %s: %s", bus_path, exc)
                continue
            for device_id in device_ids:
                yield DeviceEntry(device_id, self._instances(f"{bus_path}\\{device_id}"))

    def _instances(self, device_path: str) -> Iterator[Mapping[str, str]]:
        """Yield ``{PortName: ...}`` for each instance below *device_path*."""
        reg = self._reg
        try:
            with reg.OpenKey(reg.HKEY_LOCAL_MACHINE, device_path) as device_key:
                instances = list(_subkeys(reg, device_key))
        except OSError as exc:
            logger.debug("Skipping %s: %s", device_path, exc)
            return
        for instance in instances:
            params_path = f"{device_path}\\{instance}\\{self.PARAMETERS_KEY}"
            try:
                with reg.OpenKey(reg.HKEY_LOCAL_MACHINE, params_path) as params:
                    port, _ = reg.QueryValueEx(params, PORT_NAME_ATTRIBUTE)
            except OSError:
                logger.debug("No %s under %s", PORT_NAME_ATTRIBUTE, params_path)
                continue
            yield {PORT_NAME_ATTRIBUTE: port}


def _subkeys(reg: Any, key: Any) -> Iterator[str]:
    """Yield the names of *key*'s subkeys (``EnumKey`` raises OSError at the end)."""
    index = 0
    while True:
        try:
            yield reg.EnumKey(key, index)
        except OSError:
            return
        index += 1


# ---------------------------------------------------------------------------
# Locator
# ---------------------------------------------------------------------------


class PortLocator:
    """Resolve a hardware identifier to a port name.

    Args:
        backend: Enumeration backend (default :class:`SerialPortBackend`).
    """

    def __init__(self, backend: Optional[EnumerationBackend] = None) -> None:
        self._backend = backend if backend is not None else SerialPortBackend()

    def candidates(self, hardware_id: HardwareIdentifier) -> Iterator[str]:
        """Yield every port whose device matches *hardware_id*, in traversal order."""
        for entry in self._backend.entries():
            if not hardware_id.matches(entry.identifier):
                continue
            for attributes in entry.instances:
                port = attributes.get(PORT_NAME_ATTRIBUTE)
                if port:
                    yield port

    def list_candidates(self, hardware_id: HardwareIdentifier) -> list[str]:
        return list(self.candidates(hardware_id))

    def locate(self, hardware_id: HardwareIdentifier = HardwareIdentifier()) -> str:
        """Return the first port matching *hardware_id*.

        Raises:
            DeviceNotFound: If no enumerated device matches, or the device
                index cannot be read.
        """
        try:
            port = next(self.candidates(hardware_id), None)
        except OSError as exc:
            raise DeviceNotFound(f"Cannot enumerate devices for {hardware_id}: {exc}") from exc
        if port is None:
            raise DeviceNotFound(f"No port found for {hardware_id}")
        logger.info("Found %s on %s", hardware_id, port)
        return port

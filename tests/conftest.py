"""Shared pytest fixtures for RGB light tests."""

from __future__ import annotations

import threading
from typing import Iterable, Iterator, NamedTuple

import pytest

from rgb_light import ColorTransport, DeviceColor, LightSession, PortLocator
from rgb_light.locator import DeviceEntry, EnumerationBackend

LIGHT_PORT = "COM7"
LIGHT_IDENTIFIER = "VID_03EB&PID_2404&REV_0100"


class Call(NamedTuple):
    name: str
    args: tuple
    thread: threading.Thread


class FakeTransport(ColorTransport):
    """Recording stand-in for the device command transport.

    Every call is logged as a :class:`Call` together with the thread that
    made it, so tests can tell foreground commands apart from writes made
    by the blink loop.

    Set :attr:`fail_on` to a method name to make that method raise
    :attr:`failure`.
    """

    def __init__(self) -> None:
        self.calls: list[Call] = []
        self.read_id_value: int = 0x2404
        self.closed: bool = False
        self.fail_on: str | None = None
        self.failure: BaseException = OSError("link down")
        self._lock = threading.Lock()

    # -- Helpers for tests --------------------------------------------------

    def names(self) -> list[str]:
        with self._lock:
            return [c.name for c in self.calls]

    def snapshot(self) -> list[Call]:
        with self._lock:
            return list(self.calls)

    def colors(self) -> list[DeviceColor]:
        """Arguments of every ``set_color`` call, in order."""
        return [c.args[0] for c in self.snapshot() if c.name == "set_color"]

    def calls_from(self, thread: threading.Thread) -> list[Call]:
        return [c for c in self.snapshot() if c.thread is thread]

    def clear(self) -> None:
        with self._lock:
            self.calls.clear()

    def _record(self, name: str, *args: object) -> None:
        with self._lock:
            self.calls.append(Call(name, args, threading.current_thread()))
        if self.fail_on == name:
            raise self.failure

    # -- ColorTransport interface -------------------------------------------

    def set_color(self, color: DeviceColor) -> None:
        self._record("set_color", color)

    def save_color(self) -> None:
        self._record("save_color")

    def resume_color(self) -> None:
        self._record("resume_color")

    def set_flashing(self, enabled: bool) -> None:
        self._record("set_flashing", enabled)

    def set_flashing_period(self, on_ms: int, off_ms: int) -> None:
        self._record("set_flashing_period", on_ms, off_ms)

    def read_id(self) -> int:
        self._record("read_id")
        return self.read_id_value

    def close(self) -> None:
        self.closed = True
        self._record("close")


class FakeFactory:
    """Transport factory that hands out one :class:`FakeTransport`."""

    def __init__(self, transport: FakeTransport) -> None:
        self.transport = transport
        self.opened: list[tuple[str, float | None]] = []
        self.error: BaseException | None = None

    def __call__(self, port: str, timeout: float | None) -> FakeTransport:
        self.opened.append((port, timeout))
        if self.error is not None:
            raise self.error
        return self.transport


class FakeBackend(EnumerationBackend):
    """Enumeration backend over a fixed list of entries."""

    def __init__(self, entries: Iterable[DeviceEntry] = ()) -> None:
        self._entries = list(entries)
        self.walks = 0

    def entries(self) -> Iterator[DeviceEntry]:
        self.walks += 1
        yield from self._entries


# ---------------------------------------------------------------------------
# Fake winreg
# ---------------------------------------------------------------------------


def reg_key(keys: dict | None = None, values: dict | None = None) -> dict:
    """Build a node for :class:`FakeRegistry`."""
    return {"keys": keys or {}, "values": values or {}}


class _FakeHKey:
    def __init__(self, node: dict) -> None:
        self.node = node

    def __enter__(self) -> _FakeHKey:
        return self

    def __exit__(self, *exc: object) -> None:
        pass


class FakeRegistry:
    """Implements the slice of :mod:`winreg` used by ``RegistryBackend``."""

    HKEY_LOCAL_MACHINE = object()

    def __init__(self, root: dict, denied: Iterable[str] = ()) -> None:
        self._root = root
        self._denied = set(denied)

    def OpenKey(self, key: object, sub_key: str) -> _FakeHKey:  # noqa: N802
        if sub_key in self._denied:
            raise PermissionError(f"Access denied: {sub_key}")
        node = self._root if key is self.HKEY_LOCAL_MACHINE else key.node  # type: ignore[attr-defined]
        for part in sub_key.split("\\"):
            try:
                node = node["keys"][part]
            except KeyError:
                raise FileNotFoundError(sub_key) from None
        return _FakeHKey(node)

    def EnumKey(self, key: _FakeHKey, index: int) -> str:  # noqa: N802
        names = list(key.node["keys"])
        if index >= len(names):
            raise OSError("No more data is available")
        return names[index]

    def QueryValueEx(self, key: _FakeHKey, name: str) -> tuple[str, int]:  # noqa: N802
        try:
            return key.node["values"][name], 1
        except KeyError:
            raise FileNotFoundError(name) from None


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def fake_transport() -> FakeTransport:
    """Return a fresh ``FakeTransport`` instance."""
    return FakeTransport()


@pytest.fixture()
def factory(fake_transport: FakeTransport) -> FakeFactory:
    return FakeFactory(fake_transport)


@pytest.fixture()
def backend() -> FakeBackend:
    """Return a backend that enumerates exactly one light on ``COM7``."""
    return FakeBackend([DeviceEntry(LIGHT_IDENTIFIER, ({"PortName": LIGHT_PORT},))])


@pytest.fixture()
def locator(backend: FakeBackend) -> PortLocator:
    return PortLocator(backend)


@pytest.fixture()
def unclaimed(factory: FakeFactory, locator: PortLocator) -> Iterator[LightSession]:
    """Return a session that has not been claimed yet."""
    session = LightSession(factory, locator=locator)
    yield session
    session.release()


@pytest.fixture()
def session(unclaimed: LightSession, fake_transport: FakeTransport) -> LightSession:
    """Return a claimed session wired to a fake transport."""
    unclaimed.claim(1000)
    # Reset so tests don't see claim-time traffic
    fake_transport.clear()
    return unclaimed

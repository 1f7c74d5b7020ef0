import io
from typing import Dict, Optional, Union

import pytest

from device import Sighting, SourceKind
from errors import AcquisitionError
from printer import EventPrinter
from registry import DeviceRegistry
from sources.base import BaseSource


class FakeSource(BaseSource):
    """Serves canned table text; an exception value makes that table fail."""

    def __init__(self, tables: Optional[Dict[SourceKind, Union[str, Exception]]] = None):
        self.tables = tables or {}
        self.closed = False

    def acquire(self, kind: SourceKind) -> str:
        value = self.tables.get(kind, "")
        if isinstance(value, Exception):
            raise value
        return value

    def close(self) -> None:
        self.closed = True


class FakeClock:
    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def sighting(ip: str, mac: Optional[str] = None, interface: Optional[str] = "eth0",
             source: SourceKind = SourceKind.ARP_TABLE) -> Sighting:
    return Sighting(ip=ip, mac=mac, interface=interface, source=source)


@pytest.fixture
def registry():
    return DeviceRegistry()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def output():
    return io.StringIO()


@pytest.fixture
def printer(output):
    return EventPrinter(verbose=False, stream=output, color=False)


@pytest.fixture
def arp_failure():
    return AcquisitionError("arp: command not found")


@pytest.fixture
def arp_text():
    return (
        "? (192.168.1.1) at aa:bb:cc:dd:ee:01 [ether] on eth0\n"
        "? (192.168.1.20) at aa:bb:cc:dd:ee:02 [ether] on wlan0\n"
    )


@pytest.fixture
def neigh_text():
    return (
        "192.168.1.1 dev eth0 lladdr aa:bb:cc:dd:ee:01 REACHABLE\n"
        "192.168.1.30 dev eth0 lladdr aa:bb:cc:dd:ee:03 STALE\n"
        "192.168.1.99 dev eth0  FAILED\n"
    )

# device.py
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class SourceKind(Enum):
    """Origin table of a sighting. Declaration order is the merge order."""
    ARP_TABLE = "arp"
    NEIGHBOR_TABLE = "neigh"

    @property
    def order(self) -> int:
        return list(SourceKind).index(self)


class EventKind(Enum):
    CONNECTED = "CONNECTED"
    DISCONNECTED = "DISCONNECTED"


@dataclass(frozen=True)
class Sighting:
    ip: str
    mac: Optional[str]  # None when the table has no resolved hardware address
    interface: Optional[str]
    source: SourceKind

    @property
    def key(self) -> str:
        return self.mac or self.ip


@dataclass
class TrackedDevice:
    key: str
    ip: str
    mac: Optional[str] = None
    interface: Optional[str] = None
    last_seen: float = 0.0
    connected: bool = False


@dataclass(frozen=True)
class Event:
    kind: EventKind
    ip: str
    mac: Optional[str]
    interface: Optional[str]
    timestamp: float

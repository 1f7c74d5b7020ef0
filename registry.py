# registry.py
"""Device presence state machine.

The registry folds each poll cycle's sightings into one record per device
and derives connect/disconnect events from elapsed time since last sighting.
"""
import logging
from typing import Dict, Iterable, List, Mapping, Optional

from device import Event, EventKind, Sighting, TrackedDevice

logger = logging.getLogger(__name__)


def _processing_order(sighting: Sighting):
    # MAC-bearing sightings first so MAC-less ones can resolve to them by IP,
    # then ARP table before neighbor table; the last one processed wins.
    return (sighting.mac is None, sighting.source.order, sighting.ip,
            sighting.mac or "", sighting.interface or "")


class DeviceRegistry:
    """Tracks devices by MAC (or IP when no MAC is known).

    Not safe for concurrent use; one poll loop owns it.
    """

    def __init__(self):
        self._devices: Dict[str, TrackedDevice] = {}

    def __len__(self) -> int:
        return len(self._devices)

    def __contains__(self, key: str) -> bool:
        return key in self._devices

    def get(self, key: str) -> Optional[TrackedDevice]:
        return self._devices.get(key)

    def devices(self) -> List[TrackedDevice]:
        return list(self._devices.values())

    def connected_devices(self) -> List[TrackedDevice]:
        return [device for device in self._devices.values() if device.connected]

    @staticmethod
    def resolve_key(sighting: Sighting, cycle_macs: Optional[Mapping[str, str]] = None) -> str:
        """Returns the identity key a sighting belongs to.

        A MAC-less sighting borrows the MAC another sighting of the same
        cycle reports for its IP; otherwise it is keyed by IP.
        """
        if sighting.mac:
            return sighting.mac
        return (cycle_macs or {}).get(sighting.ip, sighting.ip)

    def _adopt_unresolved(self, mac: str, ip: str) -> Optional[TrackedDevice]:
        """Moves an IP-keyed record whose MAC has now resolved under `mac`."""
        unresolved = self._devices.get(ip)
        if unresolved is None or unresolved.mac is not None:
            return None
        del self._devices[ip]

        device = self._devices.get(mac)
        if device is None:
            unresolved.key = mac
            self._devices[mac] = unresolved
            logger.debug(f"Device {ip} resolved to {mac}")
            return unresolved

        device.connected = device.connected or unresolved.connected
        device.last_seen = max(device.last_seen, unresolved.last_seen)
        logger.debug(f"Merged unresolved device {ip} into {mac}")
        return device

    def _merge(self, sighting: Sighting, key: str, now: float) -> TrackedDevice:
        device = None
        if sighting.mac:
            device = self._adopt_unresolved(sighting.mac, sighting.ip)
        if device is None:
            device = self._devices.get(key)
        if device is None:
            device = TrackedDevice(key=key, ip=sighting.ip)
            self._devices[key] = device
            logger.debug(f"Tracking new device {key}")
        elif device.interface and sighting.interface and device.interface != sighting.interface:
            logger.debug(f"Device {key} moved from {device.interface} to {sighting.interface}")

        device.ip = sighting.ip
        if sighting.mac:
            device.mac = sighting.mac
        if sighting.interface:
            device.interface = sighting.interface
        device.last_seen = now
        return device

    def update(self, sightings: Iterable[Sighting], now: float, disconnect_timeout: float) -> List[Event]:
        """Applies one poll cycle and returns its events.

        Connected events come first (in first-touch order), then
        Disconnected events. An empty sighting set only ages devices.
        """
        ordered = sorted(sightings, key=_processing_order)
        cycle_macs = {s.ip: s.mac for s in ordered if s.mac}

        touched: Dict[str, TrackedDevice] = {}
        for sighting in ordered:
            device = self._merge(sighting, self.resolve_key(sighting, cycle_macs), now)
            touched.setdefault(device.key, device)

        events: List[Event] = []
        for device in touched.values():
            if not device.connected:
                device.connected = True
                events.append(self._event(EventKind.CONNECTED, device, now))

        for key, device in self._devices.items():
            if key in touched or not device.connected:
                continue
            if now - device.last_seen >= disconnect_timeout:
                device.connected = False
                events.append(self._event(EventKind.DISCONNECTED, device, now))

        return events

    def evict_stale(self, now: float, retention: float) -> int:
        """Forgets disconnected devices not seen for `retention` seconds.

        A retention of zero or less keeps every device. Returns the number
        of devices removed.
        """
        if retention <= 0:
            return 0
        stale = [key for key, device in self._devices.items()
                 if not device.connected and now - device.last_seen >= retention]
        for key in stale:
            del self._devices[key]
            logger.debug(f"Evicted stale device {key}")
        return len(stale)

    @staticmethod
    def _event(kind: EventKind, device: TrackedDevice, now: float) -> Event:
        return Event(kind=kind, ip=device.ip, mac=device.mac,
                     interface=device.interface, timestamp=now)

# poller.py
import time
import logging
import threading
from enum import Enum
from typing import Callable, List, Set

from device import Event, Sighting
from parsers import parse_snapshot
from printer import EventPrinter
from registry import DeviceRegistry
from settings import MonitorConfig
from sources import BaseSource

logger = logging.getLogger(__name__)


class DriverState(Enum):
    RUNNING = "running"
    STOPPED = "stopped"


class PollDriver:
    """Polls the neighbor tables at a fixed interval and reports presence changes.

    One thread drives everything: the registry is only touched from tick().
    stop() may be called from another thread; the
    current tick finishes before the loop exits.
    """

    def __init__(self, source: BaseSource, registry: DeviceRegistry, printer: EventPrinter,
                 config: MonitorConfig, clock: Callable[[], float] = time.monotonic):
        self.source = source
        self.registry = registry
        self.printer = printer
        self.config = config
        self.clock = clock
        self.state = DriverState.RUNNING
        self._stop_event = threading.Event()

    def _filter(self, sightings: Set[Sighting]) -> Set[Sighting]:
        if not self.config.interface:
            return sightings
        return {s for s in sightings if s.interface == self.config.interface}

    def tick(self) -> List[Event]:
        """Runs one poll cycle and returns the events it produced."""
        raw = self.source.snapshot()
        sightings = self._filter(parse_snapshot(raw))
        now = self.clock()

        events = self.registry.update(sightings, now, self.config.disconnect_timeout)
        evicted = self.registry.evict_stale(now, self.config.retention)
        logger.debug(f"Cycle: {len(sightings)} sightings, {len(events)} events, {evicted} evicted")

        self.printer.emit(events, len(self.registry.connected_devices()))
        return events

    def run(self) -> None:
        """Polls until stop() is called."""
        logger.info(f"Polling every {self.config.interval}s")
        try:
            while not self._stop_event.is_set():
                self.tick()
                self._stop_event.wait(self.config.interval)
        finally:
            self.state = DriverState.STOPPED
            self.source.close()
            logger.info("Polling stopped")

    def stop(self) -> None:
        self._stop_event.set()

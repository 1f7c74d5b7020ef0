# printer.py
import sys
from datetime import datetime
from typing import Iterable, Optional, TextIO

from colorama import Fore, Style

from device import Event, EventKind

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

EVENT_COLORS = {
    EventKind.CONNECTED: Fore.GREEN,
    EventKind.DISCONNECTED: Fore.RED,
}


class EventPrinter:
    """Renders presence events as timestamped console lines."""

    def __init__(self, verbose: bool = False, stream: Optional[TextIO] = None, color: bool = True):
        self.verbose = verbose
        self.stream = stream or sys.stdout
        self.color = color

    def _paint(self, text: str, color: str) -> str:
        if not self.color:
            return text
        return f"{color}{text}{Style.RESET_ALL}"

    @staticmethod
    def _timestamp() -> str:
        return datetime.now().strftime(TIMESTAMP_FORMAT)

    def format_event(self, event: Event) -> str:
        label = self._paint(f"[{event.kind.value}]", EVENT_COLORS[event.kind])
        return (
            f"[{self._timestamp()}] {label} "
            f"IP: {self._paint(event.ip, Fore.BLUE)} | "
            f"MAC: {self._paint(event.mac or 'unknown', Fore.YELLOW)} | "
            f"Interface: {self._paint(event.interface or 'unknown', Fore.MAGENTA)}"
        )

    def emit(self, events: Iterable[Event], connected_count: int) -> None:
        """Prints one poll cycle's events, in the order given."""
        for event in events:
            print(self.format_event(event), file=self.stream)
        if self.verbose and connected_count == 0:
            print(f"[{self._timestamp()}] No devices detected", file=self.stream)
        self.stream.flush()

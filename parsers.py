# parsers.py
import re
import logging
from typing import Callable, Iterable, Mapping, Optional, Set, Tuple

from device import Sighting, SourceKind
from utils import format_mac, canonical_ip, is_reportable_ip

logger = logging.getLogger(__name__)

# "? (192.168.1.1) at aa:bb:cc:dd:ee:ff [ether] on wlan0"
# "? (192.168.1.1) at 0:11:22:33:44:55 on en0 ifscope [ethernet]"
ARP_PATTERN = re.compile(
    r"^(?P<arp_hostname>\S+)\s+\((?P<ip>[^)\s]+)\)\s+at\s+(?P<mac>\S+)(?P<rest>.*)$",
    re.IGNORECASE,
)
ARP_INTERFACE_PATTERN = re.compile(r"\bon\s+(?P<interface>\S+)")

UNRESOLVED_MACS = {"<incomplete>", "(incomplete)", "incomplete"}
SKIPPED_NEIGHBOR_STATES = {"FAILED"}


def _resolve_mac(raw: str) -> Tuple[bool, Optional[str]]:
    """Returns (ok, mac). ok is False when a MAC is present but malformed."""
    if raw.lower() in UNRESOLVED_MACS:
        return True, None
    mac = format_mac(raw)
    return mac is not None, mac


def _make_sighting(ip: str, mac: Optional[str], interface: Optional[str],
                   source: SourceKind) -> Optional[Sighting]:
    canonical = canonical_ip(ip)
    if canonical is None:
        return None
    if not is_reportable_ip(canonical):
        logger.debug(f"Ignoring non-device address {canonical}")
        return None
    return Sighting(ip=canonical, mac=mac, interface=interface, source=source)


def _parse_lines(lines: Iterable[str], parser_func: Callable[[str], Optional[Sighting]]) -> Set[Sighting]:
    """Helper function to parse lines of output, skipping unparseable ones."""
    sightings: Set[Sighting] = set()
    for line in lines:
        if not line.strip():
            continue
        sighting = parser_func(line)
        if sighting:
            sightings.add(sighting)
        else:
            logger.debug(f"Skipped line: {line!r}")
    return sightings


def parse_arp_line(line: str) -> Optional[Sighting]:
    """Parses a single line of `arp -a` output."""
    match = ARP_PATTERN.match(line.strip())
    if not match:
        return None

    ok, mac = _resolve_mac(match.group("mac"))
    if not ok:
        return None

    iface_match = ARP_INTERFACE_PATTERN.search(match.group("rest"))
    interface = iface_match.group("interface") if iface_match else None
    return _make_sighting(match.group("ip"), mac, interface, SourceKind.ARP_TABLE)


def parse_neighbor_line(line: str) -> Optional[Sighting]:
    """Parses a single line of `ip neigh show` output.

    e.g. ``192.168.1.1 dev eth0 lladdr aa:bb:cc:dd:ee:ff REACHABLE``
    """
    parts = line.split()
    if len(parts) < 2:
        return None
    if SKIPPED_NEIGHBOR_STATES.intersection(parts[1:]):
        return None

    mac = None
    interface = None
    recognised = False
    for i, token in enumerate(parts[1:-1], start=1):
        if token == "lladdr":
            ok, mac = _resolve_mac(parts[i + 1])
            if not ok:
                return None
            recognised = True
        elif token == "dev":
            interface = parts[i + 1]
            recognised = True

    if not recognised:
        return None
    return _make_sighting(parts[0], mac, interface, SourceKind.NEIGHBOR_TABLE)


def parse_arp_table(arp_output: str) -> Set[Sighting]:
    """Parses the ARP table output."""
    return _parse_lines(arp_output.splitlines(), parse_arp_line)


def parse_neighbor_table(neigh_output: str) -> Set[Sighting]:
    """Parses the IP neighbor table output."""
    return _parse_lines(neigh_output.splitlines(), parse_neighbor_line)


PARSERS = {
    SourceKind.ARP_TABLE: parse_arp_table,
    SourceKind.NEIGHBOR_TABLE: parse_neighbor_table,
}


def parse_snapshot(snapshots: Mapping[SourceKind, str]) -> Set[Sighting]:
    """Combines the sightings of every table in the snapshot.

    Duplicates across tables are kept; the registry merges them by key.
    """
    sightings: Set[Sighting] = set()
    for kind, text in snapshots.items():
        if text:
            sightings |= PARSERS[kind](text)
    return sightings

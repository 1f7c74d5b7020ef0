# scan.py
import sys
import logging
from typing import List, Optional

from errors import ConfigurationError
from parsers import parse_snapshot
from settings import DEFAULT_SETTINGS_FILE, load_config
from sources import get_source

logger = logging.getLogger(__name__)


def main(argv: Optional[List[str]] = None) -> int:
    """Prints the devices currently in the neighbor tables, once."""

    argv = sys.argv[1:] if argv is None else argv
    settings_file = argv[0] if argv else DEFAULT_SETTINGS_FILE
    try:
        config = load_config(settings_file)
        source = get_source(config)
    except ConfigurationError as err:
        logger.error(f"Invalid configuration: {err}")
        return 2

    try:
        sightings = parse_snapshot(source.snapshot())
    finally:
        source.close()

    for sighting in sorted(sightings, key=lambda s: (s.source.order, s.ip)):
        print(f"{sighting.source.value:<6} {sighting.ip:<40} {sighting.mac or 'unknown':<17} "
              f"{sighting.interface or ''}")
    return 0

if __name__ == "__main__":
    sys.exit(main())

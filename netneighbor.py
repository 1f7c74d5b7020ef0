# netneighbor.py
import sys
import signal
import logging
import argparse
from concurrent.futures import ThreadPoolExecutor, wait
from typing import List, Optional

from colorama import init as colorama_init

from errors import ConfigurationError
from poller import PollDriver
from printer import EventPrinter
from registry import DeviceRegistry
from settings import DEFAULT_SETTINGS_FILE, SOURCES, load_config, monitor_config
from sources import get_source

logger = logging.getLogger(__name__)

SIGNAL_CHECK_INTERVAL = 0.2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Network connection monitor: reports devices joining and leaving the local segment "
                    "by watching the ARP cache and IP neighbor table.")
    parser.add_argument("-i", "--interval", type=float, help="Refresh interval in seconds")
    parser.add_argument("-n", "--interface", help="Network interface to monitor (e.g. wlan0, eth0)")
    parser.add_argument("--all-interfaces", action="store_true",
                        help="Monitor all interfaces, ignoring any configured interface")
    parser.add_argument("--disconnect-timeout", type=float,
                        help="Seconds a device may go unseen before it is reported disconnected")
    parser.add_argument("--retention", type=float,
                        help="Seconds to remember a disconnected device (0 keeps it forever)")
    parser.add_argument("-v", "--verbose", action="store_true", default=None, help="Show verbose output")
    parser.add_argument("--source", choices=SOURCES, help="Where to read the neighbor tables from")
    parser.add_argument("--config", default=DEFAULT_SETTINGS_FILE, help="Path to the settings file")
    parser.add_argument("--no-color", action="store_true", help="Disable colored output")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser


def cli_overrides(args: argparse.Namespace) -> dict:
    """Maps parsed arguments onto dotted settings keys."""
    overrides = {
        "general.interval": args.interval,
        "general.disconnect_timeout": args.disconnect_timeout,
        "general.retention": args.retention,
        "general.verbose": args.verbose,
        "general.source": args.source,
        "general.interface": args.interface,
    }
    if args.all_interfaces:
        overrides["general.interface"] = ""
    return overrides


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.debug:
        logging.basicConfig(level=logging.DEBUG, format='%(asctime)s - %(levelname)s - %(message)s')
    else:
        logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')

    try:
        config = load_config(args.config, cli_overrides(args))
        settings = monitor_config(config)
        source = get_source(config)
    except ConfigurationError as err:
        logger.error(f"Invalid configuration: {err}")
        return 2

    colorama_init()
    print("NetNeighbor - Network Connection Monitor")
    print(f"Monitoring every {settings.interval} seconds")
    print(f"Disconnection timeout: {settings.disconnect_timeout} seconds")
    if settings.interface:
        print(f"Interface: {settings.interface}")
    else:
        print("Monitoring all interfaces")
    print("Press Ctrl+C to stop\n")

    printer = EventPrinter(verbose=settings.verbose, color=not args.no_color)
    driver = PollDriver(source, DeviceRegistry(), printer, settings)

    # The poll loop runs on a worker thread; signal handlers only record the
    # signal and the main thread calls stop().
    stop_requested = []

    def _handle_signal(signum, frame):
        stop_requested.append(signum)

    signal.signal(signal.SIGINT, _handle_signal)
    signal.signal(signal.SIGTERM, _handle_signal)

    with ThreadPoolExecutor(max_workers=1, thread_name_prefix="poller") as pool:
        future = pool.submit(driver.run)
        while not wait([future], timeout=SIGNAL_CHECK_INTERVAL).done:
            if stop_requested:
                logger.debug(f"Received signal {stop_requested[0]}, stopping")
                driver.stop()
        future.result()
    return 0


if __name__ == "__main__":
    sys.exit(main())

# sources/local.py
import shlex
import logging
import subprocess
from typing import Dict

from dynaconf import Dynaconf

from .base import BaseSource
from device import SourceKind
from errors import AcquisitionError

logger = logging.getLogger(__name__)


class LocalSource(BaseSource):
    """Reads the ARP cache and neighbor table of this host via system commands."""

    def __init__(self, config: Dynaconf):
        self.config = config
        self.commands: Dict[SourceKind, str] = {
            SourceKind.ARP_TABLE: config.get("arp_cmd", "arp -a -n"),
            SourceKind.NEIGHBOR_TABLE: config.get("neigh_cmd", "ip neigh show"),
        }
        self.command_timeout = config.get("command_timeout", 5)

    def acquire(self, kind: SourceKind) -> str:
        command = self.commands[kind]
        logger.debug(f"Running '{command}'")
        try:
            result = subprocess.run(
                shlex.split(command),
                capture_output=True,
                text=True,
                timeout=self.command_timeout,
                check=False,
            )
        except FileNotFoundError as err:
            raise AcquisitionError(f"Command not found: {command}") from err
        except subprocess.TimeoutExpired as err:
            raise AcquisitionError(f"Command '{command}' timed out after {self.command_timeout}s") from err
        except OSError as err:
            raise AcquisitionError(f"Could not run '{command}': {err}") from err

        if result.returncode != 0:
            raise AcquisitionError(
                f"Command '{command}' exited with {result.returncode}: {result.stderr.strip()}"
            )
        return result.stdout

# sources/ssh.py
import logging
from typing import Dict, Optional

from dynaconf import Dynaconf

from .base import BaseSource
from device import SourceKind
from errors import AcquisitionError
from utils import SSHClient

logger = logging.getLogger(__name__)


class SSHSource(BaseSource):
    """Reads the neighbor tables of one remote host (e.g. a router) over SSH.

    The connection is opened on first use and reopened after it drops.
    """

    def __init__(self, config: Dynaconf, commands: Optional[Dynaconf] = None):
        self.config = config
        self.host = config.get("host")
        self.user = config.get("user")
        self.ssh_timeout = config.get("ssh_timeout", 10)
        commands = commands or {}
        self.commands: Dict[SourceKind, str] = {
            SourceKind.ARP_TABLE: commands.get("arp_cmd", "arp -a -n"),
            SourceKind.NEIGHBOR_TABLE: commands.get("neigh_cmd", "ip neigh show"),
        }
        self.client = SSHClient(hostname=self.host, username=self.user,
                                password=config.get("password"), timeout=self.ssh_timeout)

    def _ensure_connected(self) -> None:
        if self.client.connected:
            return
        self.client.close()
        if not self.client.connect():
            raise AcquisitionError(f"Could not connect to {self.user}@{self.host}")
        logger.info(f"Connected to {self.user}@{self.host}")

    def acquire(self, kind: SourceKind) -> str:
        self._ensure_connected()
        try:
            return self.client.execute_command(self.commands[kind])
        except AcquisitionError:
            if not self.client.connected:
                self.client.close()
            raise

    def close(self) -> None:
        self.client.close()

# utils.py
import re
import paramiko
import logging
import getpass
import ipaddress
from typing import Optional

from errors import AcquisitionError

logger = logging.getLogger(__name__)

_MAC_PATTERN = re.compile(r"^[0-9a-f]{1,2}(:[0-9a-f]{1,2}){5}$")


def format_mac(mac: str) -> Optional[str]:
    """Formats a MAC address to lowercase with colons and two-digit octets.

    Returns None when the value is not a 48-bit hardware address (for example
    ``<incomplete>`` or ``(incomplete)``).
    """
    mac = mac.lower().replace("-", ":")
    if not _MAC_PATTERN.match(mac):
        return None
    return ":".join(octet.zfill(2) for octet in mac.split(":"))


def canonical_ip(ip: str) -> Optional[str]:
    """Returns the canonical text of an IPv4/IPv6 address, or None if invalid."""
    try:
        return str(ipaddress.ip_address(ip))
    except ValueError:
        return None


def is_reportable_ip(ip: str) -> bool:
    """Checks that an address can belong to a device on the local segment.

    Loopback, multicast, unspecified and 255.x broadcast addresses are not.
    """
    try:
        addr = ipaddress.ip_address(ip)
    except ValueError:
        return False
    if addr.is_loopback or addr.is_multicast or addr.is_unspecified:
        return False
    if addr.version == 4 and ip.startswith("255."):
        return False
    return True


class SSHClient:
    """A utility class for handling SSH connections and command execution."""

    def __init__(self, hostname: str, username: str, password: Optional[str] = None,
                  timeout: int = 10):
        self.hostname = hostname
        self.username = username
        self.password = password
        self.timeout = timeout
        self.client: Optional[paramiko.SSHClient] = None

    @property
    def connected(self) -> bool:
        if not self.client:
            return False
        transport = self.client.get_transport()
        return bool(transport and transport.is_active())

    def connect(self) -> bool:
        """Connects to the SSH server, using default SSH keys and agent."""
        self.client = paramiko.SSHClient()
        self.client.set_missing_host_key_policy(paramiko.AutoAddPolicy())
        try:
            if self.password:
                self.client.connect(hostname=self.hostname, username=self.username,
                                        password=self.password, timeout=self.timeout)
            else:
                # Key-based authentication first (look_for_keys=True, allow_agent=True)
                try:
                    self.client.connect(hostname=self.hostname, username=self.username,
                                            timeout=self.timeout, look_for_keys=True, allow_agent=True)
                except paramiko.ssh_exception.PasswordRequiredException:
                    self.password = getpass.getpass(f"Enter password for {self.username}@{self.hostname}: ")
                    self.client.connect(hostname=self.hostname, username=self.username,
                                        password=self.password, timeout=self.timeout)

            return True
        except (paramiko.SSHException, OSError) as e:
            logger.error(f"Error connecting to {self.hostname}: {e}")
            self.client = None
            return False

    def execute_command(self, command: str) -> str:
        """Executes a command on the connected SSH server.

        Raises AcquisitionError when not connected, on transport errors, or
        when the remote command exits non-zero.
        """
        if not self.client:
            raise AcquisitionError("SSH client not connected. Call connect() first.")
        try:
            stdin, stdout, stderr = self.client.exec_command(command, timeout=self.timeout)
            output = stdout.read().decode(errors="replace")
            error = stderr.read().decode(errors="replace").strip()
            status = stdout.channel.recv_exit_status()
        except (paramiko.SSHException, OSError) as e:
            raise AcquisitionError(f"Error executing command '{command}' on {self.hostname}: {e}") from e
        if status != 0:
            raise AcquisitionError(f"Command '{command}' on {self.hostname} exited with {status}: {error}")
        if error:
            logger.warning(f"Command '{command}' returned error: {error}")
        return output

    def close(self):
        """Closes the SSH connection."""
        if self.client:
            self.client.close()
            self.client = None

# settings.py
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from dynaconf import Dynaconf, Validator
from dynaconf.validator import ValidationError

from errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_FILE = "config/settings.toml"
SOURCES = ("local", "ssh")

VALIDATORS = [
    Validator("general.interval", default=2, is_type_of=(int, float), gt=0),
    Validator("general.disconnect_timeout", default=10, is_type_of=(int, float), gt=0),
    Validator("general.retention", default=0, is_type_of=(int, float), gte=0),
    Validator("general.verbose", default=False, is_type_of=bool),
    Validator("general.source", default="local", is_in=SOURCES),
    Validator("local.arp_cmd", default="arp -a -n"),
    Validator("local.neigh_cmd", default="ip neigh show"),
    Validator("local.command_timeout", default=5, is_type_of=(int, float), gt=0),
    Validator("ssh.ssh_timeout", default=10, is_type_of=(int, float), gt=0),
    Validator("ssh.host", "ssh.user", must_exist=True,
              when=Validator("general.source", eq="ssh")),
]


@dataclass(frozen=True)
class MonitorConfig:
    """Validated settings the poll loop runs with."""
    interval: float
    disconnect_timeout: float
    interface: Optional[str] = None
    verbose: bool = False
    retention: float = 0


def load_config(settings_file: str = DEFAULT_SETTINGS_FILE,
                overrides: Optional[Dict[str, Any]] = None) -> Dynaconf:
    """Loads settings from file and NETNEIGHBOR_* env vars, then validates.

    `overrides` maps dotted keys (e.g. ``general.interval``) to values that
    take precedence over the file; None values are ignored.

    Raises:
        ConfigurationError: if any setting is invalid.
    """
    config = Dynaconf(
        settings_files=[settings_file],
        envvar_prefix="NETNEIGHBOR",
    )
    for key, value in (overrides or {}).items():
        if value is not None:
            config.set(key, value)

    config.validators.register(*VALIDATORS)
    try:
        config.validators.validate()
    except ValidationError as err:
        raise ConfigurationError(str(err)) from err
    return config


def monitor_config(config: Dynaconf) -> MonitorConfig:
    """Builds the poll loop configuration from validated settings."""
    return MonitorConfig(
        interval=config.general.interval,
        disconnect_timeout=config.general.disconnect_timeout,
        interface=config.general.get("interface") or None,
        verbose=config.general.verbose,
        retention=config.general.retention,
    )

# sources/__init__.py
from dynaconf import Dynaconf

from errors import ConfigurationError
from .base import BaseSource
from .local import LocalSource
from .ssh import SSHSource


def get_source(config: Dynaconf) -> BaseSource:
    """Source factory: returns the acquisition backend named in `general.source`."""

    source_type = config.general.source

    if source_type == "local":
        return LocalSource(config.local)
    elif source_type == "ssh":
        # The remote host runs the same table commands as a local one.
        return SSHSource(config.ssh, commands=config.local)
    else:
        raise ConfigurationError(f"Unsupported source type: {source_type}")


__all__ = ["BaseSource", "LocalSource", "SSHSource", "get_source"]

# errors.py


class NetNeighborError(Exception):
    """Base class for netneighbor errors."""


class AcquisitionError(NetNeighborError):
    """A neighbor table could not be read (missing command, non-zero exit, timeout)."""


class ConfigurationError(NetNeighborError):
    """Settings are invalid; raised before the poll loop starts."""

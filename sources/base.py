# sources/base.py
import logging
from abc import ABC, abstractmethod
from typing import Dict, Tuple

from device import SourceKind
from errors import AcquisitionError

logger = logging.getLogger(__name__)


class BaseSource(ABC):
    """Abstract base class for reading the neighbor tables of a host."""

    kinds: Tuple[SourceKind, ...] = (SourceKind.ARP_TABLE, SourceKind.NEIGHBOR_TABLE)

    @abstractmethod
    def acquire(self, kind: SourceKind) -> str:
        """Returns the raw text of one table.

        Raises:
            AcquisitionError: if the table could not be read.
        """

    def snapshot(self) -> Dict[SourceKind, str]:
        """Reads every table; a table that fails to read comes back as ''."""
        raw: Dict[SourceKind, str] = {}
        for kind in self.kinds:
            try:
                raw[kind] = self.acquire(kind)
            except AcquisitionError as err:
                logger.warning(f"Could not read {kind.value} table: {err}")
                raw[kind] = ""
        return raw

    def close(self) -> None:
        """Releases any resources held between snapshots."""

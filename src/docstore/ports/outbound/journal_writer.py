"""Journal writer port.

This outbound port defines the contract for the append-only journal that
sits beside a store's snapshot file. The writer handles the low-level
details of appending records with the configured durability.
"""

from __future__ import annotations

from abc import abstractmethod
from enum import Enum
from pathlib import Path
from typing import Protocol

from docstore.domain.entities import JournalRecord


class SyncMode(Enum):
    """Journal sync modes with different durability/performance tradeoffs.

    FSYNC: Flush and fsync after every record (safest)
    FLUSH: Flush Python's buffer after every record, leave the rest to the OS
    NONE: Rely on buffering until close (fastest)
    """

    FSYNC = "fsync"
    FLUSH = "flush"
    NONE = "none"


class JournalWriter(Protocol):
    """Protocol for appending journal records.

    Key guarantees:
    - Records are written in append order, one per line
    - close() leaves every appended record on disk

    Thread Safety:
        Single writer assumed. The store serializes all appends.
    """

    @property
    @abstractmethod
    def path(self) -> Path:
        """Return the journal file path."""
        ...

    @property
    @abstractmethod
    def sync_mode(self) -> SyncMode:
        """Return the current sync mode."""
        ...

    @property
    @abstractmethod
    def closed(self) -> bool:
        """Return True once the writer has been closed."""
        ...

    @abstractmethod
    def append(self, record: JournalRecord) -> None:
        """Append one record to the journal.

        Raises:
            OSError: If the writer is closed or the write fails.
            TypeError: If the document payload is not JSON-serializable.
        """
        ...

    @abstractmethod
    def close(self) -> None:
        """Flush and close the journal stream. Idempotent."""
        ...

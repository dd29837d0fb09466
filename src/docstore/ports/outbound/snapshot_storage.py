"""Snapshot storage port.

A snapshot is the full point-in-time state of a store: a mapping from
collection name to that collection's documents, in collection order.
"""

from __future__ import annotations

from abc import abstractmethod
from pathlib import Path
from typing import Any, Protocol


SnapshotData = dict[str, list[dict[str, Any]]]


class SnapshotStorage(Protocol):
    """Protocol for reading and writing whole-store snapshots."""

    @property
    @abstractmethod
    def path(self) -> Path:
        """Return the snapshot file path."""
        ...

    @abstractmethod
    def write(self, data: SnapshotData) -> None:
        """Replace the snapshot with data.

        Raises:
            OSError: If the file cannot be written.
            TypeError: If a document is not serializable.
        """
        ...

    @abstractmethod
    def read(self) -> SnapshotData:
        """Read the snapshot back.

        Raises:
            OSError: If the file is missing or unreadable.
            ValueError: If the content is not a valid snapshot.
        """
        ...

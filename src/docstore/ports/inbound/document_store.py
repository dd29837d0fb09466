"""Document store port.

This inbound port defines the contract the application layer offers to
callers: registering collections, journaling their mutations, committing
the journal, and exchanging full snapshots with the backing file.

Persistence states:
    - Unpersisted: no backing file, or the journal could not be opened.
      Mutations are in-memory only.
    - Journaling: the journal (``<filename>.swp``) is open in append mode
      and every collection mutation is appended to it.
"""

from __future__ import annotations

from abc import abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from docstore.domain.services.collection import Collection


@dataclass
class ReplayStats:
    """Statistics from replaying a journal during commit."""

    records_read: int = 0  # Records decoded from the journal
    inserted: int = 0  # Inserts applied
    insert_duplicates: int = 0  # Inserts skipped, id already live
    updated: int = 0  # Updates merged into a stored document
    update_misses: int = 0  # Updates whose id was not found
    deleted: int = 0  # Documents removed
    skipped_collections: set[str] = field(default_factory=set)  # Unknown names
    duration_ms: float = 0.0


class DocumentStorePort(Protocol):
    """Protocol for document store operations.

    Thread Safety:
        None. All operations run to completion on the caller's thread.
        Callers must not interleave ``commit`` with mutations: a mutation
        arriving while the journal is closed for replay is not journaled.
    """

    @abstractmethod
    def add_collection(self, collection: Collection) -> DocumentStorePort:
        """Register a collection and journal its mutations.

        Raises:
            TypeMismatchError: If the collection is not of the store's
                required collection type.
        """
        ...

    @abstractmethod
    def get_collection(self, name: str) -> Collection | None:
        """Return the named collection, or None.

        Raises:
            InvalidArgumentError: If name is not text.
        """
        ...

    @abstractmethod
    def commit(self) -> DocumentStorePort:
        """Replay the journal into the collections and reset it.

        Raises:
            StoreIOError: If the journal cannot be read.
            CorruptJournalError: If a journal line cannot be decoded.
        """
        ...

    @abstractmethod
    def save(self) -> DocumentStorePort:
        """Write a full snapshot of every collection to the backing file.

        Raises:
            StoreIOError: If the snapshot cannot be written.
        """
        ...

    @abstractmethod
    def load(self) -> DocumentStorePort:
        """Replace in-memory collections with the backing file's snapshot.

        Raises:
            StoreIOError: If the snapshot is missing or unparsable.
        """
        ...

    @abstractmethod
    def close(self) -> None:
        """Close the journal stream; pending records stay in the journal file."""
        ...

    @property
    def name(self) -> str:
        """Return the store name."""
        ...

    @property
    def last_replay_stats(self) -> ReplayStats | None:
        """Return statistics of the most recent commit, if any."""
        ...

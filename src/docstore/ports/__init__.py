"""Ports layer - interface definitions following Hexagonal Architecture.

Ports are abstract interfaces (protocols) that define contracts:
- Inbound ports: APIs offered to clients (DocumentStorePort, error taxonomy)
- Outbound ports: Dependencies on the filesystem (JournalWriter, SnapshotStorage)

Adapters implement these ports with concrete functionality.
"""

from docstore.ports.inbound import (
    CorruptJournalError,
    DocStoreError,
    DocumentStorePort,
    InvalidArgumentError,
    NotUniqueError,
    ReplayStats,
    StoreIOError,
    TypeMismatchError,
)
from docstore.ports.outbound import JournalWriter, SnapshotData, SnapshotStorage, SyncMode

__all__ = [
    # Inbound ports
    "CorruptJournalError",
    "DocStoreError",
    "DocumentStorePort",
    "InvalidArgumentError",
    "NotUniqueError",
    "ReplayStats",
    "StoreIOError",
    "TypeMismatchError",
    # Outbound ports
    "JournalWriter",
    "SnapshotData",
    "SnapshotStorage",
    "SyncMode",
]

"""Outbound ports - interfaces for the files a store persists to."""

from docstore.ports.outbound.journal_writer import JournalWriter, SyncMode
from docstore.ports.outbound.snapshot_storage import SnapshotData, SnapshotStorage

__all__ = [
    "JournalWriter",
    "SyncMode",
    "SnapshotData",
    "SnapshotStorage",
]

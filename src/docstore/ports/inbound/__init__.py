"""Inbound ports - API contracts offered to callers of the document store."""

from docstore.ports.inbound.document_store import DocumentStorePort, ReplayStats
from docstore.ports.inbound.errors import (
    CorruptJournalError,
    DocStoreError,
    InvalidArgumentError,
    NotUniqueError,
    StoreIOError,
    TypeMismatchError,
)

__all__ = [
    "DocumentStorePort",
    "ReplayStats",
    # Errors
    "CorruptJournalError",
    "DocStoreError",
    "InvalidArgumentError",
    "NotUniqueError",
    "StoreIOError",
    "TypeMismatchError",
]

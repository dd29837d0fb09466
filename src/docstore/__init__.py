"""
docstore - Embedded journaled document store

Named collections of schema-less documents, queried with a small
predicate language and made durable through an append-only journal plus
whole-store snapshots.
"""

__version__ = "0.1.0"

from docstore.application import DocumentStore
from docstore.domain.services import Collection
from docstore.domain.value_objects import ID_FIELD
from docstore.infrastructure.config import CollectionConfig, StoreConfig
from docstore.ports.inbound.errors import (
    CorruptJournalError,
    DocStoreError,
    InvalidArgumentError,
    NotUniqueError,
    StoreIOError,
    TypeMismatchError,
)

__all__ = [
    "__version__",
    "Collection",
    "CollectionConfig",
    "CorruptJournalError",
    "DocStoreError",
    "DocumentStore",
    "ID_FIELD",
    "InvalidArgumentError",
    "NotUniqueError",
    "StoreConfig",
    "StoreIOError",
    "TypeMismatchError",
]

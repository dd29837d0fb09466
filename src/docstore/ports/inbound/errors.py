"""Error taxonomy for the document store.

Absence is never an error: lookups return ``None`` and queries return an
empty list. Everything else that goes wrong surfaces as one of the
exceptions below.
"""

from __future__ import annotations

from pathlib import Path


class DocStoreError(Exception):
    """Base class for document store errors."""


class InvalidArgumentError(DocStoreError, ValueError):
    """Raised when an operation receives an argument of the wrong shape.

    Always raised synchronously at the call site: non-mapping documents,
    patches or queries, unknown query operators, non-text identifiers or
    collection names.
    """


class NotUniqueError(DocStoreError):
    """Raised when an identifier-scoped operation did not affect exactly one document."""

    def __init__(self, message: str, affected: int) -> None:
        super().__init__(message)
        self.affected = affected


class TypeMismatchError(DocStoreError, TypeError):
    """Raised when a collection does not satisfy the store's required collection type."""


class StoreIOError(DocStoreError):
    """Raised when a snapshot or journal file operation fails.

    The underlying exception is chained as ``__cause__``.
    """

    def __init__(self, message: str, path: Path | None = None) -> None:
        super().__init__(message if path is None else f"{message} [{path}]")
        self.path = path


class CorruptJournalError(DocStoreError):
    """Raised when a journal line cannot be decoded during commit.

    Covers undecodable JSON and records naming an unrecognized operation
    kind. The journal is decoded in full before any record is applied, so
    a corrupt journal leaves the collections untouched.
    """

    def __init__(self, message: str, path: Path, line_number: int) -> None:
        super().__init__(f"{message} ({path}:{line_number})")
        self.path = path
        self.line_number = line_number
        self.quarantined_to: Path | None = None

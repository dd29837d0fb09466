"""Domain entities for the document store.

Exports:
    Journal:
        - OperationKind: insert / update / delete
        - JournalRecord: One journaled mutation, with its line codec
"""

from docstore.domain.entities.journal_record import JournalRecord, OperationKind

__all__ = [
    "JournalRecord",
    "OperationKind",
]

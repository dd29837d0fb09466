"""Journal record types.

Every collection mutation observed by a persisted store becomes one
journal record per affected document:

    Operation | Payload           | Replay Action
    ----------|-------------------|---------------------------------------
    INSERT    | inserted document | Append unless the id is already live
    UPDATE    | updated document  | Merge into the stored document by id
    DELETE    | deleted document  | Remove every document with that id

Wire format is one JSON object per line, newline-terminated::

    {"collection": "dresses", "operation": "insert", "document": {...}}

``json.dumps`` escapes control characters inside strings, so an encoded
record never contains a raw line break.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any

from docstore.domain.value_objects import ID_FIELD, DocumentId, is_document_id


class OperationKind(str, Enum):
    """Kinds of collection mutation recorded in the journal."""

    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"


@dataclass
class JournalRecord:
    """One journaled mutation of one document.

    Attributes:
        collection: Name of the collection the mutation happened in.
        operation: What happened to the document.
        document: The document payload as it was after the mutation
            (for deletes, the removed document).
    """

    collection: str
    operation: OperationKind
    document: dict[str, Any]

    @property
    def document_id(self) -> DocumentId | None:
        """Return the identifier carried by the payload, if any."""
        value = self.document.get(ID_FIELD)
        return DocumentId(value) if is_document_id(value) else None

    def to_line(self) -> str:
        """Serialize the record to a single newline-terminated line."""
        return json.dumps(
            {
                "collection": self.collection,
                "operation": self.operation.value,
                "document": self.document,
            },
            separators=(",", ":"),
        ) + "\n"

    @classmethod
    def from_line(cls, line: str) -> JournalRecord:
        """Deserialize a record from one journal line.

        Raises:
            ValueError: If the line is not valid JSON, is missing a field,
                or names an unknown operation kind.
        """
        try:
            raw = json.loads(line)
        except json.JSONDecodeError as e:
            raise ValueError(f"Undecodable journal line: {e.msg}") from e

        if not isinstance(raw, dict):
            raise ValueError("Journal record must be a JSON object")

        collection = raw.get("collection")
        if not isinstance(collection, str):
            raise ValueError("Journal record is missing its collection name")

        try:
            operation = OperationKind(raw.get("operation"))
        except ValueError:
            raise ValueError(f"Unknown operation kind: {raw.get('operation')!r}")

        document = raw.get("document")
        if not isinstance(document, dict):
            raise ValueError("Journal record payload must be a JSON object")

        return cls(collection=collection, operation=operation, document=document)

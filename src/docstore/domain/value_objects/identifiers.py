"""Document identifiers.

Every stored document carries exactly one reserved field, ``_id``, holding
a short URL-safe text identifier generated at insert time.
"""

from __future__ import annotations

import secrets
from typing import NewType


DocumentId = NewType("DocumentId", str)
"""Identifier of a document within a collection. Assigned once, never reassigned."""

ID_FIELD = "_id"
"""Reserved document field holding the identifier."""

# 9 random bytes -> 12 URL-safe characters
ID_ENTROPY_BYTES = 9


def generate_document_id() -> DocumentId:
    """Return a fresh random document identifier."""
    return DocumentId(secrets.token_urlsafe(ID_ENTROPY_BYTES))


def is_document_id(value: object) -> bool:
    """Return True if value has the shape of a document identifier."""
    return isinstance(value, str) and value != ""

"""Value objects for the document store domain.

Exports:
    Identifiers:
        - DocumentId: Type-safe document identifier
        - ID_FIELD: Reserved field name holding the identifier
        - generate_document_id: Fresh identifier factory
        - is_document_id: Shape check for identifiers
"""

from docstore.domain.value_objects.identifiers import (
    ID_FIELD,
    DocumentId,
    generate_document_id,
    is_document_id,
)

__all__ = [
    "DocumentId",
    "ID_FIELD",
    "generate_document_id",
    "is_document_id",
]

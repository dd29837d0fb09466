"""Named, ordered collection of schema-less documents.

A collection owns the documents inserted into it, assigns each one an
identifier, and applies insert/update/delete mutations. Every mutation is
reported to registered listeners:

    Event  | Listener payload
    -------|----------------------------------
    insert | the inserted document
    update | list of updated documents
    delete | list of removed documents

A store subscribes to these events to journal mutations.

Sharp edge:
    Documents returned by ``find``/``find_all``/``insert`` are the stored
    objects themselves, not copies. Mutating them directly bypasses the
    listeners and therefore the journal.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Mapping
from typing import Any, Callable, Iterable

from docstore.domain.services import query_engine
from docstore.domain.value_objects import (
    ID_FIELD,
    DocumentId,
    generate_document_id,
)
from docstore.infrastructure.config import CollectionConfig
from docstore.ports.inbound.errors import InvalidArgumentError, NotUniqueError


Document = dict[str, Any]
Listener = Callable[[Any], None]

INSERT_EVENT = "insert"
UPDATE_EVENT = "update"
DELETE_EVENT = "delete"
MUTATION_EVENTS = (INSERT_EVENT, UPDATE_EVENT, DELETE_EVENT)


def document_id_of(document: Mapping[str, Any]) -> Any:
    """Return a hashable key for the document's identity.

    Text identifiers key by value; documents loaded with a missing or
    malformed identifier fall back to object identity.
    """
    document_id = document.get(ID_FIELD)
    if isinstance(document_id, str):
        return document_id
    return ("object", id(document))


def merge_into(target: Document, patch: Mapping[str, Any]) -> None:
    """Overwrite target's keys with patch's keys, in place.

    Keys absent from the patch are left untouched. The identifier field is
    never overwritten.
    """
    for key, value in patch.items():
        if key == ID_FIELD:
            continue
        target[key] = value


class Collection:
    """In-memory document collection with mutation notifications.

    Insertion order is preserved. Identifiers are unique among live
    documents as long as documents only enter through ``insert``;
    ``replace_documents`` (used by snapshot loading) takes its input as-is.

    An index of live text identifiers backs id generation and replay. It
    follows every method here; appending to the ``find_all`` list directly
    bypasses it.

    Example:
        >>> dresses = Collection(CollectionConfig(name="dresses"))
        >>> doc = dresses.insert({"dress": "noir", "size": 27})
        >>> dresses.find({"size": 27}) == [doc]
        True
    """

    def __init__(
        self,
        config: CollectionConfig,
        documents: Iterable[Document] | None = None,
    ) -> None:
        """Initialize the collection.

        Args:
            config: Collection configuration (its name).
            documents: Optional documents to seed the collection with,
                taken as-is.
        """
        self._config = config
        self._documents: list[Document] = []
        # Live text ids -> number of stored documents carrying them
        self._id_counts: Counter[str] = Counter()
        self._listeners: dict[str, list[Listener]] = {event: [] for event in MUTATION_EVENTS}
        if documents is not None:
            self.replace_documents(documents)

    @property
    def name(self) -> str:
        """Return the collection name."""
        return self._config.name

    @property
    def config(self) -> CollectionConfig:
        return self._config

    def __len__(self) -> int:
        return len(self._documents)

    def __repr__(self) -> str:
        return f"Collection(name={self.name!r}, documents={len(self._documents)})"

    # -------------------------------------------------------------------------
    # Listeners
    # -------------------------------------------------------------------------

    def on(self, event: str, listener: Listener) -> None:
        """Register a listener for a mutation event.

        Raises:
            InvalidArgumentError: If event is not insert/update/delete.
        """
        self._check_event(event)
        self._listeners[event].append(listener)

    def off(self, event: str, listener: Listener) -> None:
        """Remove a previously registered listener; unknown listeners are ignored."""
        self._check_event(event)
        if listener in self._listeners[event]:
            self._listeners[event].remove(listener)

    def _check_event(self, event: str) -> None:
        if event not in MUTATION_EVENTS:
            raise InvalidArgumentError(
                f"Unknown collection event {event!r}; expected one of {MUTATION_EVENTS}"
            )

    def _emit(self, event: str, payload: Any) -> None:
        for listener in list(self._listeners[event]):
            listener(payload)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def find_all(self) -> list[Document]:
        """Return the live document sequence (not a copy)."""
        return self._documents

    def find_by_id(self, document_id: str) -> Document | None:
        """Return the document with the given identifier, or None.

        Scans from the newest entry backward, so if duplicate identifiers
        were ever loaded the latest one wins.

        Raises:
            InvalidArgumentError: If document_id is not text.
        """
        if not isinstance(document_id, str):
            raise InvalidArgumentError(
                f"Document id must be text, got {type(document_id).__name__}"
            )
        for document in reversed(self._documents):
            if document.get(ID_FIELD) == document_id:
                return document
        return None

    def find(self, query: Mapping[str, Any]) -> list[Document]:
        """Return every matching document in insertion order.

        Results are deduplicated by identifier, keeping the first
        occurrence.

        Raises:
            InvalidArgumentError: If query is malformed.
        """
        query_engine.validate_query(query)

        result: list[Document] = []
        seen: set[str] = set()
        for document in self._documents:
            if not query_engine.matches(document, query):
                continue
            document_id = document.get(ID_FIELD)
            if isinstance(document_id, str):
                if document_id in seen:
                    continue
                seen.add(document_id)
            result.append(document)
        return result

    def find_one(self, query: Mapping[str, Any]) -> Document | None:
        """Return the first matching document, or None."""
        query_engine.validate_query(query)
        for document in self._documents:
            if query_engine.matches(document, query):
                return document
        return None

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def insert(self, document: Document) -> Document:
        """Insert a document, assigning it a fresh identifier.

        The given dict itself is stored (and returned), with the
        identifier written into it.

        Raises:
            InvalidArgumentError: If document is not a dict.
        """
        if not isinstance(document, dict):
            raise InvalidArgumentError(
                f"Collection.insert accepts only a dict, got {type(document).__name__}"
            )

        document[ID_FIELD] = self._new_id()
        self._append(document)
        self._emit(INSERT_EVENT, document)
        return document

    def _new_id(self) -> DocumentId:
        document_id = generate_document_id()
        while document_id in self._id_counts:
            document_id = generate_document_id()
        return document_id

    def has_id(self, document_id: str) -> bool:
        """Return True if a live document carries this identifier."""
        return document_id in self._id_counts

    def _append(self, document: Document) -> None:
        self._documents.append(document)
        document_id = document.get(ID_FIELD)
        if isinstance(document_id, str):
            self._id_counts[document_id] += 1

    def _remove_where(self, predicate: Callable[[Document], bool]) -> None:
        kept: list[Document] = []
        for document in self._documents:
            if not predicate(document):
                kept.append(document)
                continue
            document_id = document.get(ID_FIELD)
            if isinstance(document_id, str):
                self._id_counts[document_id] -= 1
                if not self._id_counts[document_id]:
                    del self._id_counts[document_id]
        self._documents[:] = kept

    def update(self, query: Mapping[str, Any], patch: Mapping[str, Any]) -> list[Document]:
        """Merge patch into every matching stored document.

        Returns:
            The updated documents (the stored objects).

        Raises:
            InvalidArgumentError: If query or patch is not a mapping.
        """
        if not isinstance(query, Mapping) or not isinstance(patch, Mapping):
            raise InvalidArgumentError("Collection.update accepts only mappings as arguments")

        result = self.find(query)
        for document in result:
            merge_into(document, patch)

        if result:
            self._emit(UPDATE_EVENT, result)
        return result

    def update_by_id(self, document_id: str, patch: Mapping[str, Any]) -> Document:
        """Merge patch into the document with the given identifier.

        Raises:
            InvalidArgumentError: If document_id is not text.
            NotUniqueError: If not exactly one document was updated.
        """
        self._check_id(document_id)
        result = self.update({ID_FIELD: document_id}, patch)
        if len(result) != 1:
            raise NotUniqueError(
                f"update_by_id({document_id!r}) affected {len(result)} documents",
                affected=len(result),
            )
        return result[0]

    def delete(self, query: Mapping[str, Any]) -> list[Document]:
        """Remove every matching document.

        Returns:
            The removed documents.

        Raises:
            InvalidArgumentError: If query is not a mapping.
        """
        if not isinstance(query, Mapping):
            raise InvalidArgumentError("Collection.delete accepts only a mapping as argument")

        result = self.find(query)
        if result:
            removed_ids = {document_id_of(document) for document in result}
            self._remove_where(lambda document: document_id_of(document) in removed_ids)
            self._emit(DELETE_EVENT, result)
        return result

    def delete_by_id(self, document_id: str) -> Document:
        """Remove the document with the given identifier.

        Raises:
            InvalidArgumentError: If document_id is not text.
            NotUniqueError: If not exactly one document was removed.
        """
        self._check_id(document_id)
        result = self.delete({ID_FIELD: document_id})
        if len(result) != 1:
            raise NotUniqueError(
                f"delete_by_id({document_id!r}) affected {len(result)} documents",
                affected=len(result),
            )
        return result[0]

    def insert_or_update(
        self, query: Mapping[str, Any], document: Document
    ) -> list[Document]:
        """Update matching documents, or insert document if none match.

        Not atomic: a concurrent insert between the match and the insert
        is not detected.
        """
        result = self.update(query, document)
        if not result:
            result = [self.insert(document)]
        return result

    def replace_documents(self, documents: Iterable[Document]) -> None:
        """Replace the whole document sequence without notifying listeners.

        Used when loading a snapshot; identifiers are not re-validated.
        """
        documents = list(documents)
        self._documents[:] = []
        self._id_counts.clear()
        for document in documents:
            self._append(document)

    def restore(self, document: Document) -> None:
        """Append a journaled document without notifying listeners.

        Used by journal replay; the caller decides whether the identifier
        is already live.
        """
        self._append(document)

    def discard_by_id(self, document_id: str) -> int:
        """Remove every document with the identifier, without notifying listeners.

        Returns:
            The number of documents removed.
        """
        before = len(self._documents)
        self._remove_where(lambda document: document.get(ID_FIELD) == document_id)
        return before - len(self._documents)

    def _check_id(self, document_id: Any) -> None:
        if not isinstance(document_id, str):
            raise InvalidArgumentError(
                f"Document id must be text, got {type(document_id).__name__}"
            )

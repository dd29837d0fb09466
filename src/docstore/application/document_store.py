"""Document Store - named collections with journal-and-snapshot persistence.

This module provides the DocumentStore class that owns a set of named
collections, journals their mutations, and exchanges full snapshots with
a backing file.

Usage:
    from docstore.application import DocumentStore
    from docstore.domain.services import Collection
    from docstore.infrastructure.config import CollectionConfig, StoreConfig

    store = DocumentStore(StoreConfig(filename=Path("/var/lib/app/data.json")))
    store.add_collection(Collection(CollectionConfig(name="dresses")))

    store.get_collection("dresses").insert({"dress": "noir", "size": 27})

    store.commit().save()   # drain the journal, then snapshot
    store.close()

Files:
    <filename>       snapshot, written by save() and read by load()
    <filename>.swp   journal, appended on every mutation, drained by commit()
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import Any, Callable

from docstore.adapters.outbound.file_journal import FileJournal
from docstore.adapters.outbound.file_snapshot import FileSnapshot
from docstore.domain.entities import JournalRecord, OperationKind
from docstore.domain.services.collection import MUTATION_EVENTS, Collection
from docstore.domain.services.replay_service import ReplayService
from docstore.infrastructure.config import CollectionConfig, Settings, StoreConfig
from docstore.infrastructure.logging import get_logger
from docstore.infrastructure.metrics import MetricsRegistry, get_metrics
from docstore.infrastructure.tracing import store_span
from docstore.ports.inbound.document_store import ReplayStats
from docstore.ports.inbound.errors import (
    CorruptJournalError,
    InvalidArgumentError,
    StoreIOError,
    TypeMismatchError,
)
from docstore.ports.outbound.journal_writer import JournalWriter, SyncMode
from docstore.ports.outbound.snapshot_storage import SnapshotStorage


logger = get_logger(__name__)

CORRUPT_SUFFIX = ".corrupt"


class DocumentStore:
    """Owns named collections and makes their mutations durable.

    Without a ``filename`` the store is purely in-memory. With one, the
    journal is opened at construction; if that fails the store logs a
    warning and stays in-memory.

    Sharp edge:
        Documents handed out by collections are live references. Changing
        them directly is neither observed nor journaled; use the
        collection's update methods.

    Thread Safety:
        None. ``commit`` closes the journal, replays it and only then opens
        a fresh one; a mutation arriving in between is not journaled.
    """

    def __init__(
        self,
        config: StoreConfig,
        *,
        collection_type: type[Collection] = Collection,
        metrics: MetricsRegistry | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            config: Store configuration (name, optional backing file).
            collection_type: Collection class the store accepts; also used
                to construct collections found only in a loaded snapshot.
            metrics: Metrics registry (defaults to the global one).
        """
        self._config = config
        self._collection_type = collection_type
        self._metrics = metrics or get_metrics()
        self._log = logger.bind(store=config.name)

        self._collections: dict[str, Collection] = {}
        self._subscriptions: dict[str, list[tuple[str, Callable[[Any], None]]]] = {}
        self._journal: JournalWriter | None = None
        self._last_replay_stats: ReplayStats | None = None

        if config.filename is not None:
            self._journal = self._open_journal()

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        collection_type: type[Collection] = Collection,
        metrics: MetricsRegistry | None = None,
    ) -> DocumentStore:
        """Create a store from process settings."""
        return cls(settings.store, collection_type=collection_type, metrics=metrics)

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def name(self) -> str:
        return self._config.name

    @property
    def filename(self) -> Path | None:
        """Return the snapshot path, or None for an in-memory store."""
        return self._config.filename

    @property
    def journal_path(self) -> Path | None:
        return self._config.journal_path

    @property
    def is_journaling(self) -> bool:
        """Return True if mutations are currently being journaled."""
        return self._journal is not None and not self._journal.closed

    @property
    def collections(self) -> dict[str, Collection]:
        """Return the registered collections by name."""
        return self._collections

    @property
    def last_replay_stats(self) -> ReplayStats | None:
        """Return statistics of the most recent commit, if any."""
        return self._last_replay_stats

    # -------------------------------------------------------------------------
    # Collections
    # -------------------------------------------------------------------------

    def add_collection(self, collection: Collection) -> DocumentStore:
        """Register a collection and journal its mutations.

        A collection already registered under the same name is replaced
        and the store stops listening to it.

        Raises:
            TypeMismatchError: If collection is not a ``collection_type``.
        """
        if not isinstance(collection, self._collection_type):
            raise TypeMismatchError(
                f"{self._config.name} accepts only {self._collection_type.__name__} "
                f"instances, got {type(collection).__name__}"
            )

        name = collection.name
        self._unsubscribe(name)

        subscriptions = []
        for event in MUTATION_EVENTS:
            listener = self._make_listener(collection, event)
            collection.on(event, listener)
            subscriptions.append((event, listener))

        self._subscriptions[name] = subscriptions
        self._collections[name] = collection
        self._metrics.collections.labels(store=self._config.name).set(len(self._collections))
        return self

    def get_collection(self, name: str) -> Collection | None:
        """Return the named collection, or None.

        Raises:
            InvalidArgumentError: If name is not text.
        """
        if not isinstance(name, str):
            raise InvalidArgumentError(
                f"Collection name must be text, got {type(name).__name__}"
            )
        return self._collections.get(name)

    def _make_listener(self, collection: Collection, event: str) -> Callable[[Any], None]:
        def listener(payload: Any) -> None:
            self.write(collection, event, payload)

        return listener

    def _unsubscribe(self, name: str) -> None:
        previous = self._collections.get(name)
        for event, listener in self._subscriptions.pop(name, []):
            if previous is not None:
                previous.off(event, listener)

    # -------------------------------------------------------------------------
    # Journal
    # -------------------------------------------------------------------------

    def _open_journal(self) -> JournalWriter | None:
        path = self._config.journal_path
        if path is None:
            return None
        try:
            return FileJournal(path, SyncMode(self._config.journal.sync_mode))
        except OSError as e:
            self._log.warning("journal_open_failed", path=str(path), error=str(e))
            return None

    def write(self, collection: Collection, kind: str, payload: Any) -> DocumentStore:
        """Journal one collection mutation.

        ``payload`` is the inserted document, or the list of updated or
        deleted documents; each document becomes one journal record.
        Failures are logged, never raised: a failed write is a durability
        gap, not an error for the mutating caller.
        """
        documents = payload if isinstance(payload, list) else [payload]

        try:
            operation = OperationKind(kind)
        except ValueError:
            operation = None

        if (
            not isinstance(collection, Collection)
            or operation is None
            or not all(isinstance(document, dict) for document in documents)
        ):
            self._metrics.journal_write_failures_total.labels(reason="invalid_arguments").inc()
            self._log.error("journal_write_invalid_arguments", kind=kind)
            return self

        self._metrics.mutations_total.labels(
            collection=collection.name, operation=operation.value
        ).inc(len(documents))

        if self._journal is None or self._journal.closed:
            if self._config.filename is not None:
                self._metrics.journal_write_failures_total.labels(reason="no_journal").inc()
                self._log.error(
                    "journal_write_skipped",
                    collection=collection.name,
                    operation=operation.value,
                    reason="journal not open",
                )
            return self

        for document in documents:
            record = JournalRecord(
                collection=collection.name, operation=operation, document=document
            )
            try:
                self._journal.append(record)
            except (OSError, TypeError, ValueError) as e:
                self._metrics.journal_write_failures_total.labels(reason="io_error").inc()
                self._log.error(
                    "journal_write_failed",
                    collection=collection.name,
                    operation=operation.value,
                    error=str(e),
                )
            else:
                self._metrics.journal_records_written_total.inc()

        return self

    def commit(self) -> DocumentStore:
        """Replay the journal into the collections and start a fresh one.

        Raises:
            StoreIOError: If the store has no backing file, or the journal
                cannot be read or removed.
            CorruptJournalError: If a journal line cannot be decoded.
                Nothing is applied; the journal is moved aside to
                ``<filename>.swp.corrupt`` and a fresh journal is opened.
        """
        journal_path = self._require_path(self._config.journal_path, "commit")
        start_time = time.time()

        with store_span("commit", self._config.name, path=str(journal_path)) as span:
            if self._journal is not None:
                self._journal.close()
                self._journal = None

            try:
                if journal_path.is_file():
                    self._last_replay_stats = self._replay(journal_path)
                    try:
                        journal_path.unlink()
                    except OSError as e:
                        raise StoreIOError("Unable to remove journal", journal_path) from e
                else:
                    self._last_replay_stats = ReplayStats()
            finally:
                self._journal = self._open_journal()

            span.set_attribute("docstore.records", self._last_replay_stats.records_read)

        self._metrics.commit_duration_seconds.observe(time.time() - start_time)
        self._log.info(
            "journal_committed",
            records=self._last_replay_stats.records_read,
            inserted=self._last_replay_stats.inserted,
            updated=self._last_replay_stats.updated,
            deleted=self._last_replay_stats.deleted,
        )
        return self

    def _replay(self, journal_path: Path) -> ReplayStats:
        replay_service = ReplayService(self._collections, self._metrics)
        try:
            return replay_service.replay(FileJournal.read_records(journal_path))
        except CorruptJournalError as e:
            quarantine = journal_path.with_name(journal_path.name + CORRUPT_SUFFIX)
            try:
                journal_path.replace(quarantine)
                e.quarantined_to = quarantine
            except OSError as move_error:
                self._log.error(
                    "journal_quarantine_failed", path=str(journal_path), error=str(move_error)
                )
            self._log.error(
                "journal_corrupt",
                path=str(journal_path),
                line=e.line_number,
                quarantined_to=str(e.quarantined_to) if e.quarantined_to else None,
            )
            raise
        except OSError as e:
            raise StoreIOError("Unable to read journal", journal_path) from e

    # -------------------------------------------------------------------------
    # Snapshot
    # -------------------------------------------------------------------------

    def save(self) -> DocumentStore:
        """Write every collection to the snapshot file, replacing it.

        Raises:
            StoreIOError: If the snapshot cannot be written.
        """
        filename = self._require_path(self._config.filename, "save")
        snapshot: SnapshotStorage = FileSnapshot(filename)
        start_time = time.time()

        with store_span("save", self._config.name, path=str(filename)):
            data = {name: list(collection.find_all()) for name, collection in self._collections.items()}
            try:
                snapshot.write(data)
            except (OSError, TypeError, ValueError) as e:
                raise StoreIOError("Unable to persist datastore to file", filename) from e

        self._metrics.snapshot_duration_seconds.labels(direction="save").observe(
            time.time() - start_time
        )
        self._log.info("snapshot_saved", path=str(filename), collections=len(data))
        return self

    def load(self) -> DocumentStore:
        """Load the snapshot file into the store.

        Existing collections named in the snapshot have their documents
        replaced wholesale; other names get a new collection, registered
        like any other so later mutations are journaled. Collections absent
        from the snapshot are left alone. Identifiers are not re-validated.

        Raises:
            StoreIOError: If the snapshot is missing or unparsable.
        """
        filename = self._require_path(self._config.filename, "load")
        snapshot: SnapshotStorage = FileSnapshot(filename)
        start_time = time.time()

        with store_span("load", self._config.name, path=str(filename)) as span:
            try:
                data = snapshot.read()
            except (OSError, ValueError) as e:
                raise StoreIOError("Unable to load datastore from file", filename) from e

            for name, documents in data.items():
                collection = self._collections.get(name)
                if collection is not None:
                    collection.replace_documents(documents)
                else:
                    self.add_collection(
                        self._collection_type(CollectionConfig(name=name), documents)
                    )

            span.set_attribute("docstore.collections", len(data))

        self._metrics.snapshot_duration_seconds.labels(direction="load").observe(
            time.time() - start_time
        )
        self._log.info("snapshot_loaded", path=str(filename), collections=len(data))
        return self

    def _require_path(self, path: Path | None, operation: str) -> Path:
        if path is None:
            raise StoreIOError(f"Cannot {operation}: store {self._config.name!r} has no backing file")
        return path

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def close(self) -> None:
        """Close the journal stream. Pending records stay in the journal file."""
        if self._journal is not None:
            self._journal.close()
            self._journal = None

    def __enter__(self) -> DocumentStore:
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.close()

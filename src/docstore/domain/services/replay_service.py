"""Journal replay service.

Commit drains the journal into the in-memory collections. Replay is
idempotent, so replaying records whose effects are already live (the
normal case: every journaled mutation was applied in memory first) leaves
the collections unchanged.

    Operation | Replay Action
    ----------|--------------------------------------------------------
    INSERT    | Append the payload unless its id is already live
    UPDATE    | Merge the payload into the stored document with that id
    DELETE    | Remove every document with that id

Two Phases:
    1. Decode: read every record; any undecodable line aborts here
    2. Apply: replay the decoded records in journal order

Because decoding completes before anything is applied, a corrupt journal
leaves the collections exactly as they were.
"""

from __future__ import annotations

import time
from collections.abc import Mapping
from typing import Iterable

from docstore.domain.entities import JournalRecord, OperationKind
from docstore.domain.services.collection import Collection, merge_into
from docstore.infrastructure.logging import get_logger
from docstore.infrastructure.metrics import MetricsRegistry, get_metrics
from docstore.ports.inbound.document_store import ReplayStats


logger = get_logger(__name__)


class ReplayService:
    """Applies journal records to a set of named collections.

    Usage:
        replay = ReplayService(store.collections)
        stats = replay.replay(FileJournal.read_records(journal_path))

    Thread Safety:
        Replay must not run concurrently with collection mutations.
    """

    def __init__(
        self,
        collections: Mapping[str, Collection],
        metrics: MetricsRegistry | None = None,
    ) -> None:
        """Initialize the replay service.

        Args:
            collections: Collections by name; records naming anything else
                are skipped.
            metrics: Metrics registry (defaults to the global one).
        """
        self._collections = collections
        self._metrics = metrics or get_metrics()

    def replay(self, records: Iterable[JournalRecord]) -> ReplayStats:
        """Decode all records, then apply them in order.

        Returns:
            Statistics about the replay.

        Raises:
            CorruptJournalError: Propagated from decoding, before any
                record has been applied.
        """
        start_time = time.time()
        stats = ReplayStats()

        # Phase 1: Decode
        decoded = list(records)
        stats.records_read = len(decoded)

        # Phase 2: Apply
        for record in decoded:
            self._apply(record, stats)

        stats.duration_ms = (time.time() - start_time) * 1000
        return stats

    def _apply(self, record: JournalRecord, stats: ReplayStats) -> None:
        collection = self._collections.get(record.collection)
        if collection is None:
            if record.collection not in stats.skipped_collections:
                logger.warning(
                    "replay_unknown_collection",
                    collection=record.collection,
                )
            stats.skipped_collections.add(record.collection)
            return

        document_id = record.document_id
        if document_id is None:
            logger.warning(
                "replay_record_without_id",
                collection=record.collection,
                operation=record.operation.value,
            )
            return

        if record.operation is OperationKind.INSERT:
            if not collection.has_id(document_id):
                collection.restore(record.document)
                stats.inserted += 1
            else:
                stats.insert_duplicates += 1

        elif record.operation is OperationKind.UPDATE:
            stored = collection.find_by_id(document_id)
            if stored is None:
                stats.update_misses += 1
                logger.debug(
                    "replay_update_missing_document",
                    collection=record.collection,
                    document_id=document_id,
                )
            else:
                merge_into(stored, record.document)
                stats.updated += 1

        elif record.operation is OperationKind.DELETE:
            stats.deleted += collection.discard_by_id(document_id)

        self._metrics.records_replayed_total.labels(
            operation=record.operation.value
        ).inc()

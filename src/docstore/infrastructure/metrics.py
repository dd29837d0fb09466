"""Prometheus metrics for the document store."""

from __future__ import annotations

from prometheus_client import (
    Counter,
    Gauge,
    Histogram,
    Info,
    start_http_server,
    REGISTRY,
    CollectorRegistry,
)

from docstore.infrastructure.config import JOURNAL_SUFFIX


class MetricsRegistry:
    """Registry of all document store metrics."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """Initialize metrics registry."""
        self._registry = registry or REGISTRY

        # Collection metrics
        self.mutations_total = Counter(
            "docstore_mutations_total",
            "Total number of collection mutations observed by a store",
            ["collection", "operation"],  # insert, update, delete
            registry=self._registry,
        )

        self.collections = Gauge(
            "docstore_collections",
            "Number of collections registered in the store",
            ["store"],
            registry=self._registry,
        )

        # Journal metrics
        self.journal_records_written_total = Counter(
            "docstore_journal_records_written_total",
            "Total journal records appended",
            registry=self._registry,
        )

        self.journal_write_failures_total = Counter(
            "docstore_journal_write_failures_total",
            "Mutations that could not be journaled",
            ["reason"],  # no_journal, invalid_arguments, io_error
            registry=self._registry,
        )

        # Commit metrics
        self.commit_duration_seconds = Histogram(
            "docstore_commit_duration_seconds",
            "Journal commit duration in seconds",
            buckets=(0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0),
            registry=self._registry,
        )

        self.records_replayed_total = Counter(
            "docstore_records_replayed_total",
            "Journal records replayed during commit",
            ["operation"],
            registry=self._registry,
        )

        # Snapshot metrics
        self.snapshot_duration_seconds = Histogram(
            "docstore_snapshot_duration_seconds",
            "Snapshot save/load duration in seconds",
            ["direction"],  # save, load
            buckets=(0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0),
            registry=self._registry,
        )

        self.info = Info(
            "docstore",
            "Document store information",
            registry=self._registry,
        )


# Global metrics registry
_metrics: MetricsRegistry | None = None


def setup_metrics(
    port: int | None = 8001,
    registry: CollectorRegistry | None = None,
) -> MetricsRegistry:
    """
    Create the process-wide metrics registry.

    Args:
        port: Port for the metrics HTTP server, or None to only collect
        registry: Optional custom registry

    Returns:
        The metrics registry
    """
    global _metrics
    _metrics = MetricsRegistry(registry)

    from docstore import __version__
    _metrics.info.info({
        "version": __version__,
        "journal_suffix": JOURNAL_SUFFIX,
    })

    if port is not None:
        start_http_server(port, registry=registry or REGISTRY)

    return _metrics


def get_metrics() -> MetricsRegistry:
    """Get the global metrics registry, creating it on first use."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsRegistry()
    return _metrics

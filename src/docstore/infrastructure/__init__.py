"""Infrastructure layer - cross-cutting concerns."""

from docstore.infrastructure.config import (
    CollectionConfig,
    JournalConfig,
    ObservabilityConfig,
    Settings,
    StoreConfig,
    get_settings,
)
from docstore.infrastructure.logging import setup_logging, setup_logging_from, get_logger
from docstore.infrastructure.metrics import setup_metrics, get_metrics, MetricsRegistry
from docstore.infrastructure.tracing import setup_tracing, get_tracer, store_span

__all__ = [
    "CollectionConfig",
    "JournalConfig",
    "ObservabilityConfig",
    "Settings",
    "StoreConfig",
    "get_settings",
    "setup_logging",
    "setup_logging_from",
    "get_logger",
    "setup_metrics",
    "get_metrics",
    "MetricsRegistry",
    "setup_tracing",
    "get_tracer",
    "store_span",
]

"""OpenTelemetry tracing for store operations.

Only the file-touching store operations (commit, save, load) open spans;
per-document collection calls are too fine-grained to be worth tracing.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Generator

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    SimpleSpanProcessor,
    SpanExporter,
)

from docstore.infrastructure.config import ObservabilityConfig


SPAN_PREFIX = "docstore."
ATTRIBUTE_PREFIX = "docstore."

_tracer: trace.Tracer | None = None


def setup_tracing(
    config: ObservabilityConfig,
    *,
    exporter: SpanExporter | None = None,
    install_global: bool = True,
) -> trace.Tracer:
    """
    Configure the tracer used by store operations.

    Spans go to the OTLP collector at ``config.otel_endpoint`` when one is
    set (batched), and to ``exporter`` when given (exported synchronously,
    which is what tests and ad-hoc debugging want).

    Args:
        config: Observability configuration
        exporter: Extra span exporter
        install_global: Also install the provider as the process-wide one

    Returns:
        The tracer store operations will use
    """
    global _tracer

    from docstore import __version__

    resource = Resource.create(
        {
            "service.name": config.otel_service_name,
            "service.version": __version__,
        }
    )
    provider = TracerProvider(resource=resource)

    if config.otel_endpoint:
        provider.add_span_processor(
            BatchSpanProcessor(OTLPSpanExporter(endpoint=config.otel_endpoint, insecure=True))
        )
    if exporter is not None:
        provider.add_span_processor(SimpleSpanProcessor(exporter))

    if install_global:
        trace.set_tracer_provider(provider)

    _tracer = provider.get_tracer(config.otel_service_name, __version__)
    return _tracer


def get_tracer() -> trace.Tracer:
    """Return the configured tracer, falling back to the global provider's."""
    global _tracer
    if _tracer is None:
        _tracer = trace.get_tracer("docstore")
    return _tracer


@contextmanager
def store_span(
    operation: str,
    store: str,
    **attributes: Any,
) -> Generator[trace.Span, None, None]:
    """
    Open a span around one store operation.

    The span is named ``docstore.<operation>``; ``store`` and every keyword
    attribute are recorded under the ``docstore.`` namespace. Exceptions
    escaping the block are recorded on the span and mark it as failed.

    Example:
        with store_span("commit", "wardrobe", path="/data/w.db.swp") as span:
            ...
            span.set_attribute("docstore.records", 12)
    """
    tracer = get_tracer()
    with tracer.start_as_current_span(SPAN_PREFIX + operation) as span:
        span.set_attribute(ATTRIBUTE_PREFIX + "store", store)
        for key, value in attributes.items():
            if value is not None:
                span.set_attribute(ATTRIBUTE_PREFIX + key, value)
        yield span

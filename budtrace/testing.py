"""Test utilities for budtrace.

Captures spans created through an ObjectTracer in memory, without any
exporter or global provider.

Example:
    >>> from budtrace.testing import capture_spans
    >>> with capture_spans() as capture:
    ...     with capture.object_tracer.start_span_from_object(obj, "sync"):
    ...         pass
    ...     spans = capture.get_finished_spans()
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from opentelemetry.sdk.trace import ReadableSpan, TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.sdk.trace.sampling import Sampler

from budtrace._internal.provider import new_tracer_provider
from budtrace._internal.tracer import ObjectTracer


@dataclass
class SpanCapture:
    """In-memory tracing setup handed out by capture_spans()."""

    tracer_provider: TracerProvider
    exporter: InMemorySpanExporter
    object_tracer: ObjectTracer

    def get_finished_spans(self) -> tuple[ReadableSpan, ...]:
        return self.exporter.get_finished_spans()

    def clear(self) -> None:
        self.exporter.clear()


@contextmanager
def capture_spans(sampler: Sampler | None = None, service_name: str = "budtrace-test") -> Iterator[SpanCapture]:
    """Provide an ObjectTracer whose finished spans are kept in memory.

    Args:
        sampler: Sampler override. Defaults to the production ParentBased(ALWAYS_OFF).
        service_name: service.name resource attribute.
    """
    exporter = InMemorySpanExporter()
    provider = new_tracer_provider(
        None,
        service_name,
        sampler=sampler,
        span_processors=[SimpleSpanProcessor(exporter)],
    )
    try:
        yield SpanCapture(tracer_provider=provider, exporter=exporter, object_tracer=ObjectTracer(provider))
    finally:
        provider.shutdown()

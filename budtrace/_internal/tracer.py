"""ObjectTracer - trace propagation through object writes and reads.

ObjectTracer is built from an explicit TracerProvider handle; it never
reads or replaces the global OTEL provider. It ties the embedder and the
selector to real span creation:

    writer:  encode_context_into_object(obj)       -> annotation + record
    reader:  start_span_from_object(obj, "sync")   -> child RecordingSpan

Example:
    >>> object_tracer = ObjectTracer(new_tracer_provider(config))
    >>> with object_tracer.start_span_from_object(obj, "reconcile", observed_generation=4):
    ...     ...
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from opentelemetry import context as otel_context
from opentelemetry import trace as otel_trace
from opentelemetry.trace import SpanKind, TracerProvider

from budtrace._internal.codec import SpanContext
from budtrace._internal.constants import (
    INSTRUMENTING_MODULE_NAME,
    OBJECT_GENERATION,
    OBJECT_NAME,
    OBJECT_NAMESPACE,
)
from budtrace._internal.embedder import attach, stamp_trace_record
from budtrace._internal.selector import context_from_annotation, context_with_object
from budtrace._internal.span import RecordingSpan
from budtrace._internal.version import __version__

if TYPE_CHECKING:
    from budtrace._internal.objects import ObjectMeta

logger = structlog.get_logger(__name__)


class ObjectTracer:
    """Starts spans from, and records spans into, traced objects."""

    def __init__(
        self,
        tracer_provider: TracerProvider,
        instrumenting_module_name: str = INSTRUMENTING_MODULE_NAME,
    ) -> None:
        """Initialize the object tracer.

        Args:
            tracer_provider: Provider that creates the real spans.
            instrumenting_module_name: Instrumentation scope name.
        """
        self._tracer_provider = tracer_provider
        self._tracer = tracer_provider.get_tracer(instrumenting_module_name, __version__)

    @property
    def tracer_provider(self) -> TracerProvider:
        return self._tracer_provider

    def context_with_object(
        self,
        obj: ObjectMeta,
        observed_generation: int,
        context: otel_context.Context | None = None,
    ) -> otel_context.Context:
        """Get a context carrying the context selected from the object's records."""
        return context_with_object(obj, observed_generation, context)

    def start_span_from_object(
        self,
        obj: ObjectMeta,
        name: str,
        *,
        observed_generation: int | None = None,
        context: otel_context.Context | None = None,
        kind: SpanKind = SpanKind.INTERNAL,
    ) -> RecordingSpan:
        """Start a span that continues the trace recorded on an object.

        With observed_generation, the parent is selected from the per-writer
        records; without it, the annotation slot is used. An object without
        an annotation yields a span started from ``context`` as-is.

        Args:
            obj: The object being acted on.
            name: Span name.
            observed_generation: Generation the caller holds, if known.
            context: Context to start from. Defaults to the current context.
            kind: OTEL span kind.

        Returns:
            The started span. The caller ends it.
        """
        if observed_generation is not None:
            parent = context_with_object(obj, observed_generation, context)
        else:
            parent = context_from_annotation(obj, context)

        attributes: dict[str, str | int] = {OBJECT_NAME: obj.name, OBJECT_GENERATION: obj.generation}
        if obj.namespace:
            attributes[OBJECT_NAMESPACE] = obj.namespace

        span = self._tracer.start_span(name, context=parent, kind=kind, attributes=attributes)
        logger.debug(
            "object_span_started",
            span_name=name,
            object=obj.name,
            trace_id=f"{span.get_span_context().trace_id:032x}",
        )
        return RecordingSpan(span)

    def encode_context_into_object(
        self,
        obj: ObjectMeta,
        context: otel_context.Context | None = None,
        *,
        manager: str | None = None,
    ) -> SpanContext | None:
        """Store the current span's context on an object.

        The annotation slot is overwritten. With a manager, that writer's
        TraceRecord is stamped too. Nothing is written when there is no
        valid current span.

        Args:
            obj: The object being written.
            context: Context holding the current span. Defaults to the current context.
            manager: Field-manager name of the writer.

        Returns:
            The stored context, or None if nothing was written.
        """
        otel_span_context = otel_trace.get_current_span(context).get_span_context()
        if not otel_span_context.is_valid:
            logger.debug("object_encode_skipped", object=obj.name)
            return None

        span_context = SpanContext.from_otel(otel_span_context)
        attach(obj, span_context)
        if manager is not None:
            stamp_trace_record(obj, manager, span_context)
        return span_context

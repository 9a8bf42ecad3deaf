"""Context Selector - picks the trace context relevant to a read.

An object can carry one TraceRecord per writer, stamped at different
generations. Given the generation the caller has observed, selection is:

1. Drop records of writers that touched only the status subresource.
   Status reconciliation reacts to state; it does not cause it.
2. Class the rest as "ahead" (generation > observed), "current"
   (generation == observed) or stale (generation < observed, dropped).
3. Pick the first "ahead" record, else the first "current" one, else the
   sentinel context.

Selection never fails and never returns None. Ties within a class go to
the first record in writer-insertion order.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

import structlog
from opentelemetry import context as otel_context

from budtrace._internal.codec import SENTINEL_SPAN_CONTEXT, SpanContext, format_hex, parse_trace_record
from budtrace._internal.embedder import read_annotation
from budtrace._internal.exceptions import DecodeError
from budtrace._internal.objects import ObjectMeta
from budtrace._internal.span import PassiveSpan

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class TraceRecord:
    """A writer's SpanContext together with the generation it was written at."""

    span_context: SpanContext
    generation: int
    status_only: bool = False
    manager: str = ""


def trace_records(obj: ObjectMeta) -> list[TraceRecord]:
    """Collect the TraceRecords carried by an object's managed-fields entries.

    Entries without a trace slot, or with a malformed one, are skipped.

    Args:
        obj: The object to read.

    Returns:
        Records in writer-insertion order.
    """
    records: list[TraceRecord] = []
    for entry in obj.managed_fields:
        if not entry.trace_context:
            logger.debug("trace_record_skipped", object=obj.name, manager=entry.manager, reason="empty")
            continue
        try:
            span_context, generation = parse_trace_record(entry.trace_context)
        except DecodeError as e:
            logger.warning(
                "trace_record_skipped", object=obj.name, manager=entry.manager, reason="malformed", error=e.message
            )
            continue
        records.append(
            TraceRecord(
                span_context=span_context,
                generation=generation,
                status_only=entry.status_only,
                manager=entry.manager,
            )
        )
    return records


def select_span_context(records: Iterable[TraceRecord], observed_generation: int) -> SpanContext:
    """Pick the single context relevant to a read at the observed generation.

    Args:
        records: TraceRecords in writer-insertion order.
        observed_generation: Generation the caller holds.

    Returns:
        The chosen context, or SENTINEL_SPAN_CONTEXT if none is eligible.
    """
    ahead: list[TraceRecord] = []
    current: list[TraceRecord] = []

    for record in records:
        if record.status_only:
            continue
        if record.generation > observed_generation:
            ahead.append(record)
        elif record.generation == observed_generation:
            current.append(record)

    if ahead:
        chosen, reason = ahead[0], "ahead"
    elif current:
        chosen, reason = current[0], "current"
    else:
        logger.debug("trace_context_sentinel", observed_generation=observed_generation)
        return SENTINEL_SPAN_CONTEXT

    logger.debug(
        "trace_context_selected",
        reason=reason,
        manager=chosen.manager,
        generation=chosen.generation,
        observed_generation=observed_generation,
        trace_context=format_hex(chosen.span_context),
        candidates=len(ahead) + len(current),
    )
    return chosen.span_context


def context_with_object(
    obj: ObjectMeta,
    observed_generation: int,
    context: otel_context.Context | None = None,
) -> otel_context.Context:
    """Get a context whose current span is the one selected from the object.

    No span is started; the selected identity is carried by a PassiveSpan.

    Args:
        obj: The object to read.
        observed_generation: Generation the caller holds.
        context: Context to extend. Defaults to the current context.

    Returns:
        A context in which new spans become children of the selected one.
    """
    span_context = select_span_context(trace_records(obj), observed_generation)
    return PassiveSpan(span_context).as_parent(context)


def context_from_annotation(
    obj: ObjectMeta,
    context: otel_context.Context | None = None,
) -> otel_context.Context:
    """Get a context whose current span is the one in the annotation slot.

    Returns:
        The extended context. When the object has no usable annotation,
        ``context`` unchanged, or the current context if none was given.
    """
    span_context = read_annotation(obj)
    if span_context is None:
        return context if context is not None else otel_context.get_current()
    return PassiveSpan(span_context).as_parent(context)

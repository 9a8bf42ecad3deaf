"""Context Embedder - writes and reads trace context on object metadata.

Two independent side channels are handled here:

- The annotation slot (TRACE_ANNOTATION_KEY) holds the single most recent
  context, base64-encoded. Every attach() overwrites it.
- Each writer's managed-fields entry holds that writer's TraceRecord in
  the hex-hyphenated form with its generation.

Reading never fails: an absent, empty or corrupt value means "no context".
"""

from __future__ import annotations

import structlog

from budtrace._internal.codec import SpanContext, decode, encode, format_hex, format_trace_record
from budtrace._internal.constants import FIELD_METADATA, FIELD_STATUS, TRACE_ANNOTATION_KEY
from budtrace._internal.exceptions import DecodeError
from budtrace._internal.objects import ManagedFieldsEntry, ObjectMeta

logger = structlog.get_logger(__name__)


def attach(obj: ObjectMeta, span_context: SpanContext) -> None:
    """Store a context in the object's annotation slot, replacing any prior value."""
    obj.annotations[TRACE_ANNOTATION_KEY] = encode(span_context)
    logger.debug("trace_context_attached", object=obj.name, trace_context=format_hex(span_context))


def detach(obj: ObjectMeta, *, records: bool = False) -> None:
    """Remove the annotation slot. Does nothing if it is absent.

    Args:
        obj: The object to modify.
        records: Also clear every writer's trace slot.
    """
    obj.annotations.pop(TRACE_ANNOTATION_KEY, None)
    if records:
        clear_trace_records(obj)


def read_annotation(obj: ObjectMeta) -> SpanContext | None:
    """Get the context from the annotation slot, or None if there is no usable one."""
    encoded = obj.annotations.get(TRACE_ANNOTATION_KEY)
    if not encoded:
        return None
    try:
        return decode(encoded)
    except DecodeError as e:
        logger.warning("trace_annotation_invalid", object=obj.name, error=e.message)
        return None


def string_span_context_from_object(obj: ObjectMeta) -> str:
    """Get the annotation context in hex form, or "" if there is none."""
    span_context = read_annotation(obj)
    if span_context is None:
        return ""
    return format_hex(span_context)


def stamp_trace_record(
    obj: ObjectMeta,
    manager: str,
    span_context: SpanContext,
    *,
    status_only: bool = False,
) -> ManagedFieldsEntry:
    """Record a writer's context at the object's current generation.

    Creates the writer's managed-fields entry if it does not exist yet.

    Args:
        obj: The object being written.
        manager: The writer's field-manager name.
        span_context: The writer's current context.
        status_only: Whether a newly created entry owns only status fields.

    Returns:
        The updated managed-fields entry.
    """
    entry = obj.find_managed_fields(manager)
    if entry is None:
        entry = ManagedFieldsEntry(
            manager=manager,
            fields_v1={FIELD_STATUS if status_only else FIELD_METADATA: {}},
            subresource="status" if status_only else None,
        )
        obj.managed_fields.append(entry)

    entry.trace_context = format_trace_record(span_context, obj.generation)
    logger.debug(
        "trace_record_stamped",
        object=obj.name,
        manager=manager,
        generation=obj.generation,
        trace_context=entry.trace_context,
    )
    return entry


def clear_trace_records(obj: ObjectMeta, manager: str | None = None) -> None:
    """Empty the trace slot of one writer, or of all writers when manager is None."""
    for entry in obj.managed_fields:
        if manager is None or entry.manager == manager:
            entry.trace_context = None

"""Context propagation through cluster objects.

Writers stamp their current span onto the object they write; readers
recover a parent context from the object they read. Both sides work on an
in-memory ObjectMeta snapshot and never fail because of missing or corrupt
trace metadata.

Example:
    >>> from budtrace.propagate import attach, context_with_object
    >>> attach(obj, span_context)                      # writer side
    >>> ctx = context_with_object(obj, observed_generation=3)  # reader side
"""

from __future__ import annotations

from budtrace._internal.embedder import (
    attach,
    clear_trace_records,
    detach,
    read_annotation,
    stamp_trace_record,
    string_span_context_from_object,
)
from budtrace._internal.selector import (
    context_from_annotation,
    context_with_object,
    select_span_context,
    trace_records,
)

__all__ = [
    "attach",
    "clear_trace_records",
    "context_from_annotation",
    "context_with_object",
    "detach",
    "read_annotation",
    "select_span_context",
    "stamp_trace_record",
    "string_span_context_from_object",
    "trace_records",
]

"""Public type definitions for budtrace.

This module contains the public types that users can import for type hints.

Example:
    >>> from budtrace.types import ObjectSpan, SpanMode
    >>> def describe(span: ObjectSpan) -> str:
    ...     return span.mode.value
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from budtrace._internal.codec import SpanContext
from budtrace._internal.objects import FieldsV1, ManagedFieldsEntry, ObjectMeta
from budtrace._internal.selector import TraceRecord
from budtrace._internal.span import ObjectSpan, PassiveSpan, RecordingSpan, SpanMode

# Attribute value types following OTEL specification
AttributeValue = str | bool | int | float | Sequence[str] | Sequence[bool] | Sequence[int] | Sequence[float]

# Attributes dictionary type
Attributes = Mapping[str, AttributeValue]

__all__ = [
    "AttributeValue",
    "Attributes",
    "FieldsV1",
    "ManagedFieldsEntry",
    "ObjectMeta",
    "ObjectSpan",
    "PassiveSpan",
    "RecordingSpan",
    "SpanContext",
    "SpanMode",
    "TraceRecord",
]

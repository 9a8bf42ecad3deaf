"""Span variants for budtrace.

A span handed out by budtrace is one of two variants, tagged by SpanMode:

- RecordingSpan wraps a live OTEL span created by the SDK. It records
  attributes and exceptions and is ended by its owner.
- PassiveSpan wraps a SpanContext recovered from an object. It only
  exposes context-read operations, so it cannot be mistaken for a live,
  exporting span.

OTEL's context API needs an object implementing the full Span interface
to act as a parent. PassiveSpan.to_otel() provides PropagationSpan for
that: every mutating or recording call on it is a no-op.

Example:
    >>> passive = PassiveSpan(SpanContext(trace_id=1, span_id=2))
    >>> ctx = passive.as_parent()
    >>> with tracer.start_as_current_span("reconcile", context=ctx):
    ...     pass
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import TYPE_CHECKING, Any

from opentelemetry import context as otel_context
from opentelemetry import trace as otel_trace
from opentelemetry.trace import Status, StatusCode
from opentelemetry.util import types as otel_types

from budtrace._internal.codec import SpanContext

if TYPE_CHECKING:
    from budtrace.types import Attributes


class SpanMode(str, Enum):
    """Whether a span records telemetry or only carries an identity."""

    RECORDING = "recording"
    PASSIVE = "passive"


class PropagationSpan(otel_trace.Span):
    """OTEL Span that carries a recovered context and records nothing."""

    def __init__(self, span_context: SpanContext) -> None:
        self._span_context = span_context.to_otel()

    def get_span_context(self) -> otel_trace.SpanContext:
        return self._span_context

    def is_recording(self) -> bool:
        return False

    def end(self, end_time: int | None = None) -> None:
        pass

    def set_attributes(self, attributes: Mapping[str, otel_types.AttributeValue]) -> None:
        pass

    def set_attribute(self, key: str, value: otel_types.AttributeValue) -> None:
        pass

    def add_event(
        self,
        name: str,
        attributes: otel_types.Attributes = None,
        timestamp: int | None = None,
    ) -> None:
        pass

    def add_link(
        self,
        context: otel_trace.SpanContext,
        attributes: otel_types.Attributes = None,
    ) -> None:
        pass

    def update_name(self, name: str) -> None:
        pass

    def set_status(self, status: Status | StatusCode, description: str | None = None) -> None:
        pass

    def record_exception(
        self,
        exception: BaseException,
        attributes: otel_types.Attributes = None,
        timestamp: int | None = None,
        escaped: bool = False,
    ) -> None:
        pass

    def __repr__(self) -> str:
        return f"PropagationSpan({self._span_context!r})"


class PassiveSpan:
    """A recovered span identity, usable only as a propagation parent."""

    mode = SpanMode.PASSIVE

    __slots__ = ("_span_context",)

    def __init__(self, span_context: SpanContext) -> None:
        self._span_context = span_context

    @property
    def span_context(self) -> SpanContext:
        return self._span_context

    def is_recording(self) -> bool:
        return False

    def to_otel(self) -> PropagationSpan:
        """Get the OTEL-facing adapter for this identity."""
        return PropagationSpan(self._span_context)

    def as_parent(self, context: otel_context.Context | None = None) -> otel_context.Context:
        """Get a context in which this identity is the current span.

        Args:
            context: Context to extend. Defaults to the current context.

        Returns:
            A new context; spans started in it become children of this one.
        """
        return otel_trace.set_span_in_context(self.to_otel(), context)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PassiveSpan):
            return NotImplemented
        return self._span_context == other._span_context

    def __hash__(self) -> int:
        return hash(self._span_context)

    def __repr__(self) -> str:
        return f"PassiveSpan({self._span_context})"


class RecordingSpan:
    """High-level wrapper around a live OTEL Span.

    Example:
        >>> with object_tracer.start_span_from_object(obj, "reconcile") as span:
        ...     span.set_attribute("result", "success")
    """

    mode = SpanMode.RECORDING

    def __init__(self, span: otel_trace.Span) -> None:
        """Initialize RecordingSpan wrapper.

        Args:
            span: The underlying OTEL Span.
        """
        self._span = span

    @property
    def otel_span(self) -> otel_trace.Span:
        return self._span

    @property
    def span_context(self) -> SpanContext:
        return SpanContext.from_otel(self._span.get_span_context())

    def is_recording(self) -> bool:
        return self._span.is_recording()

    def set_attribute(self, key: str, value: Any) -> None:
        """Set a single attribute on the span.

        Args:
            key: Attribute key.
            value: Attribute value.
        """
        self._span.set_attribute(key, value)

    def set_attributes(self, attributes: Attributes) -> None:
        """Set multiple attributes on the span.

        Args:
            attributes: Dictionary of attributes to set.
        """
        self._span.set_attributes(dict(attributes))

    def record_exception(self, exception: BaseException) -> None:
        """Record an exception on the span.

        Args:
            exception: The exception to record.
        """
        self._span.record_exception(exception)

    def end(self) -> None:
        self._span.end()

    def context(self, context: otel_context.Context | None = None) -> otel_context.Context:
        """Get a context in which this span is the current span."""
        return otel_trace.set_span_in_context(self._span, context)

    def __enter__(self) -> RecordingSpan:
        """Enter context manager."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        """Exit context manager, recording any exception."""
        if exc_val is not None:
            self.record_exception(exc_val)
            self._span.set_status(Status(StatusCode.ERROR, str(exc_val)))
        self._span.end()


ObjectSpan = RecordingSpan | PassiveSpan

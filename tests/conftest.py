"""Pytest configuration and fixtures for budtrace tests."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest
from opentelemetry.sdk.trace.sampling import ALWAYS_ON

from budtrace._internal.codec import SpanContext, format_trace_record
from budtrace._internal.objects import ManagedFieldsEntry, ObjectMeta
from budtrace.testing import SpanCapture, capture_spans

# ============ Span Context Fixtures ============


@pytest.fixture
def sampled_context() -> SpanContext:
    """A valid, sampled span context."""
    return SpanContext(
        trace_id=0x4BF92F3577B34DA6A3CE929D0E0E4736,
        span_id=0x00F067AA0BA902B7,
        flags=1,
    )


@pytest.fixture
def unsampled_context() -> SpanContext:
    """A valid span context with no flags set."""
    return SpanContext(
        trace_id=0x0AF7651916CD43DD8448EB211C80319C,
        span_id=0xB7AD6B7169203331,
        flags=0,
    )


# ============ Object Fixtures ============


@pytest.fixture
def make_record_entry():
    """Build a managed-fields entry carrying a trace record."""

    def _make(
        manager: str, span_context: SpanContext, generation: int, *, status_only: bool = False
    ) -> ManagedFieldsEntry:
        return ManagedFieldsEntry(
            manager=manager,
            fields_v1={"f:status": {}} if status_only else {"f:metadata": {}, "f:spec": {}},
            trace_context=format_trace_record(span_context, generation),
            subresource="status" if status_only else None,
        )

    return _make


@pytest.fixture
def traced_object() -> ObjectMeta:
    """An object with no trace context on it yet."""
    return ObjectMeta(name="web", namespace="default", generation=3)


# ============ Tracing Fixtures ============


@pytest.fixture
def capture() -> Iterator[SpanCapture]:
    """In-memory capture with the production sampler."""
    with capture_spans() as span_capture:
        yield span_capture


@pytest.fixture
def capture_always_on() -> Iterator[SpanCapture]:
    """In-memory capture that samples every span, including new roots."""
    with capture_spans(sampler=ALWAYS_ON) as span_capture:
        yield span_capture


# ============ Configuration Fixtures ============


@pytest.fixture
def write_config(tmp_path: Path):
    """Write a configuration document and return its path."""

    def _write(content: str, name: str = "tracing.yaml") -> Path:
        path = tmp_path / name
        path.write_text(content)
        return path

    return _write

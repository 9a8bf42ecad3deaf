"""SpanContext value type and its textual encodings.

Two independent encodings are provided, and they are not interchangeable:

- Binary + base64, stored in an object's annotation slot::

      base64(trace_id[16] | span_id[8] | flags[1])

- Hex-hyphenated, stored in a writer's managed-fields trace slot::

      <32-hex trace_id>-<16-hex span_id>-<flags:02d>

  The per-writer slot appends the writer's generation at write time as a
  final ``-<generation>`` segment.

Example:
    >>> ctx = SpanContext(trace_id=1, span_id=2, flags=1)
    >>> decode(encode(ctx)) == ctx
    True
    >>> format_hex(ctx)
    '00000000000000000000000000000001-0000000000000002-01'
"""

from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass

from opentelemetry import trace as otel_trace
from opentelemetry.trace import TraceFlags

from budtrace._internal.constants import (
    BINARY_CONTEXT_SIZE,
    SENTINEL_SPAN_ID,
    SENTINEL_TRACE_FLAGS,
    SENTINEL_TRACE_ID,
    SPAN_ID_HEX_LENGTH,
    SPAN_ID_SIZE,
    TRACE_ID_HEX_LENGTH,
    TRACE_ID_SIZE,
)
from budtrace._internal.exceptions import DecodeError

_HEX_CONTEXT = rf"([0-9a-fA-F]{{{TRACE_ID_HEX_LENGTH}}})-([0-9a-fA-F]{{{SPAN_ID_HEX_LENGTH}}})-(\d{{1,3}})"
_HEX_PATTERN = re.compile(_HEX_CONTEXT)
_RECORD_PATTERN = re.compile(rf"{_HEX_CONTEXT}-(\d+)")


@dataclass(frozen=True)
class SpanContext:
    """Minimal identity of a span: trace id, span id and trace flags.

    Attributes:
        trace_id: 128-bit trace identifier.
        span_id: 64-bit span identifier.
        flags: 8-bit trace flags (bit 0 is "sampled").
    """

    trace_id: int
    span_id: int
    flags: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.trace_id < 1 << 128:
            raise ValueError(f"trace_id out of range: {self.trace_id}")
        if not 0 <= self.span_id < 1 << 64:
            raise ValueError(f"span_id out of range: {self.span_id}")
        if not 0 <= self.flags < 1 << 8:
            raise ValueError(f"flags out of range: {self.flags}")

    @property
    def is_valid(self) -> bool:
        """Whether both identifiers are non-zero."""
        return self.trace_id != 0 and self.span_id != 0

    @property
    def sampled(self) -> bool:
        return bool(self.flags & TraceFlags.SAMPLED)

    @classmethod
    def from_otel(cls, span_context: otel_trace.SpanContext) -> SpanContext:
        """Build from an OpenTelemetry SpanContext, dropping trace state."""
        return cls(
            trace_id=span_context.trace_id,
            span_id=span_context.span_id,
            flags=int(span_context.trace_flags),
        )

    def to_otel(self) -> otel_trace.SpanContext:
        """Convert to an OpenTelemetry SpanContext.

        Recovered contexts always come from another process, so the result
        is marked remote.
        """
        return otel_trace.SpanContext(
            trace_id=self.trace_id,
            span_id=self.span_id,
            is_remote=True,
            trace_flags=TraceFlags(self.flags),
        )

    def __str__(self) -> str:
        return format_hex(self)


SENTINEL_SPAN_CONTEXT = SpanContext(
    trace_id=SENTINEL_TRACE_ID,
    span_id=SENTINEL_SPAN_ID,
    flags=SENTINEL_TRACE_FLAGS,
)


def encode(span_context: SpanContext) -> str:
    """Encode a SpanContext for the annotation slot.

    Args:
        span_context: The context to encode.

    Returns:
        Standard base64 text of the 25-byte binary layout.
    """
    raw = (
        span_context.trace_id.to_bytes(TRACE_ID_SIZE, "big")
        + span_context.span_id.to_bytes(SPAN_ID_SIZE, "big")
        + bytes([span_context.flags])
    )
    return base64.b64encode(raw).decode("ascii")


def decode(text: str) -> SpanContext:
    """Decode an annotation value produced by encode().

    Bytes beyond the fixed layout are ignored.

    Args:
        text: Base64 text.

    Returns:
        The decoded SpanContext.

    Raises:
        DecodeError: If the text is not valid base64 or the payload is
            shorter than the fixed layout.
    """
    try:
        raw = base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(f"invalid base64 span context: {e}", value=text) from e

    if len(raw) < BINARY_CONTEXT_SIZE:
        raise DecodeError(
            f"span context payload too short: {len(raw)} < {BINARY_CONTEXT_SIZE} bytes",
            value=text,
        )

    return SpanContext(
        trace_id=int.from_bytes(raw[:TRACE_ID_SIZE], "big"),
        span_id=int.from_bytes(raw[TRACE_ID_SIZE : TRACE_ID_SIZE + SPAN_ID_SIZE], "big"),
        flags=raw[TRACE_ID_SIZE + SPAN_ID_SIZE],
    )


def format_hex(span_context: SpanContext) -> str:
    """Render ``<32-hex>-<16-hex>-<flags:02d>``."""
    return (
        f"{span_context.trace_id:0{TRACE_ID_HEX_LENGTH}x}"
        f"-{span_context.span_id:0{SPAN_ID_HEX_LENGTH}x}"
        f"-{span_context.flags:02d}"
    )


def _from_hex_groups(trace_hex: str, span_hex: str, flags: str, text: str) -> SpanContext:
    try:
        return SpanContext(trace_id=int(trace_hex, 16), span_id=int(span_hex, 16), flags=int(flags))
    except ValueError as e:
        raise DecodeError(f"invalid span context {text!r}: {e}", value=text) from e


def parse_hex(text: str) -> SpanContext:
    """Parse the output of format_hex().

    Raises:
        DecodeError: If the text is malformed.
    """
    match = _HEX_PATTERN.fullmatch(text)
    if match is None:
        raise DecodeError(f"malformed span context {text!r}", value=text)
    return _from_hex_groups(*match.groups(), text=text)


def format_trace_record(span_context: SpanContext, generation: int) -> str:
    """Render the per-writer trace slot: hex form plus ``-<generation>``."""
    if generation < 0:
        raise ValueError(f"generation must not be negative: {generation}")
    return f"{format_hex(span_context)}-{generation}"


def parse_trace_record(text: str) -> tuple[SpanContext, int]:
    """Parse a per-writer trace slot.

    Returns:
        The SpanContext and the writer's generation at write time.

    Raises:
        DecodeError: If the text is malformed.
    """
    match = _RECORD_PATTERN.fullmatch(text)
    if match is None:
        raise DecodeError(f"malformed trace record {text!r}", value=text)
    trace_hex, span_hex, flags, generation = match.groups()
    return _from_hex_groups(trace_hex, span_hex, flags, text=text), int(generation)

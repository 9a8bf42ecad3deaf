"""budtrace - Trace context propagation through cluster object mutations.

Built on OpenTelemetry, budtrace carries a span identity across the gap
between a request that writes an object and the controllers that later
read and rewrite it.

Example:
    >>> import budtrace
    >>> provider = budtrace.new_tracer_provider(budtrace.load_configuration("tracing.yaml"))
    >>> object_tracer = budtrace.ObjectTracer(provider)
    >>> object_tracer.encode_context_into_object(obj, manager="kubectl")   # writer
    >>> with object_tracer.start_span_from_object(obj, "reconcile", observed_generation=2):
    ...     pass                                                          # reader

Two side channels are used, each with its own encoding:
    - Annotation slot (trace.kubernetes.io/context): one base64 context,
      overwritten on every write.
    - Per-writer managed-fields slot: hex context plus the writer's
      generation, one per writer.

Environment variables:
    BUDTRACE_SERVICE_NAME: Service name
    BUDTRACE_CONFIG_FILE: Exporter configuration file
    BUDTRACE_LOG_LEVEL: Log level
    BUDTRACE_LOG_JSON: Force JSON log output (true/false)
    BUDTRACE_DEBUG: Debug logging (true/false)
"""

from budtrace._internal.codec import (
    SENTINEL_SPAN_CONTEXT,
    SpanContext,
    decode,
    encode,
    format_hex,
    format_trace_record,
    parse_hex,
    parse_trace_record,
)
from budtrace._internal.config import (
    ServiceReference,
    TracingClientConfiguration,
    TracingSettings,
    default_configuration,
    exporter_endpoint,
    load_configuration,
    read_configuration,
    validate_configuration,
)
from budtrace._internal.constants import TRACE_ANNOTATION_KEY
from budtrace._internal.embedder import (
    attach,
    clear_trace_records,
    detach,
    read_annotation,
    stamp_trace_record,
    string_span_context_from_object,
)
from budtrace._internal.exceptions import BudTraceException, ConfigurationError, DecodeError, FieldError
from budtrace._internal.logging import configure_logging
from budtrace._internal.objects import ManagedFieldsEntry, ObjectMeta, is_status_only
from budtrace._internal.provider import new_tracer_provider
from budtrace._internal.selector import (
    TraceRecord,
    context_from_annotation,
    context_with_object,
    select_span_context,
    trace_records,
)
from budtrace._internal.span import ObjectSpan, PassiveSpan, PropagationSpan, RecordingSpan, SpanMode
from budtrace._internal.tracer import ObjectTracer
from budtrace._internal.version import __version__

__all__ = [
    "SENTINEL_SPAN_CONTEXT",
    "TRACE_ANNOTATION_KEY",
    "BudTraceException",
    "ConfigurationError",
    "DecodeError",
    "FieldError",
    "ManagedFieldsEntry",
    "ObjectMeta",
    "ObjectSpan",
    "ObjectTracer",
    "PassiveSpan",
    "PropagationSpan",
    "RecordingSpan",
    "ServiceReference",
    "SpanContext",
    "SpanMode",
    "TraceRecord",
    "TracingClientConfiguration",
    "TracingSettings",
    "__version__",
    "attach",
    "clear_trace_records",
    "configure_logging",
    "context_from_annotation",
    "context_with_object",
    "decode",
    "default_configuration",
    "detach",
    "encode",
    "exporter_endpoint",
    "format_hex",
    "format_trace_record",
    "is_status_only",
    "load_configuration",
    "new_tracer_provider",
    "parse_hex",
    "parse_trace_record",
    "read_annotation",
    "read_configuration",
    "select_span_context",
    "stamp_trace_record",
    "string_span_context_from_object",
    "trace_records",
    "validate_configuration",
]

"""Constants for budtrace.

This module defines the keys and well-known values shared by the codec,
embedder, selector and configuration modules:
- Object metadata keys (annotation slot, managed-field scopes)
- Binary payload layout for the annotation encoding
- The sentinel SpanContext returned when no record is eligible
- Exporter configuration defaults

Centralized constants ensure consistency and prevent typos.
"""

from __future__ import annotations

# Annotation slot holding the single most recent encoded SpanContext.
# Only characters allowed in qualified metadata keys.
TRACE_ANNOTATION_KEY = "trace.kubernetes.io/context"

# Top-level field-set keys used to classify a managed-fields entry
FIELD_METADATA = "f:metadata"
FIELD_SPEC = "f:spec"
FIELD_STATUS = "f:status"

# Binary layout: trace_id (16) | span_id (8) | flags (1)
TRACE_ID_SIZE = 16
SPAN_ID_SIZE = 8
TRACE_FLAGS_SIZE = 1
BINARY_CONTEXT_SIZE = TRACE_ID_SIZE + SPAN_ID_SIZE + TRACE_FLAGS_SIZE

TRACE_ID_HEX_LENGTH = TRACE_ID_SIZE * 2
SPAN_ID_HEX_LENGTH = SPAN_ID_SIZE * 2

# Fallback context when selection finds no eligible record
SENTINEL_TRACE_ID = 0x6617856F277E317FA7AAB4C66E0041C9
SENTINEL_SPAN_ID = 0x2AA8325022D99D40
SENTINEL_TRACE_FLAGS = 0

# Exporter configuration document
CONFIG_KIND = "OpenTelemetryClientConfiguration"
CONFIG_API_VERSION = "apiserver.k8s.io/v1alpha1"
DEFAULT_EXPORTER_PORT = 55680
DEFAULT_EXPORTER_URL = "localhost:55680"

# Process defaults
DEFAULT_SERVICE_NAME = "kube-apiserver"
INSTRUMENTING_MODULE_NAME = "budtrace"

# Span attributes set on spans started from objects
OBJECT_NAME = "budtrace.object.name"
OBJECT_NAMESPACE = "budtrace.object.namespace"
OBJECT_GENERATION = "budtrace.object.generation"

__all__ = [
    "BINARY_CONTEXT_SIZE",
    "CONFIG_API_VERSION",
    "CONFIG_KIND",
    "DEFAULT_EXPORTER_PORT",
    "DEFAULT_EXPORTER_URL",
    "DEFAULT_SERVICE_NAME",
    "FIELD_METADATA",
    "FIELD_SPEC",
    "FIELD_STATUS",
    "INSTRUMENTING_MODULE_NAME",
    "OBJECT_GENERATION",
    "OBJECT_NAME",
    "OBJECT_NAMESPACE",
    "SENTINEL_SPAN_ID",
    "SENTINEL_TRACE_FLAGS",
    "SENTINEL_TRACE_ID",
    "SPAN_ID_HEX_LENGTH",
    "SPAN_ID_SIZE",
    "TRACE_ANNOTATION_KEY",
    "TRACE_FLAGS_SIZE",
    "TRACE_ID_HEX_LENGTH",
    "TRACE_ID_SIZE",
]

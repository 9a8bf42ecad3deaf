"""Internal implementation details for budtrace.

WARNING: This module is internal and should not be imported directly.
All public API is exported from the top-level budtrace package.

The internal structure:
- codec.py: SpanContext value type and its two textual encodings
- objects.py: ObjectMeta / ManagedFieldsEntry object model
- embedder.py: Annotation slot and per-writer slot writers
- selector.py: Generation-based context selection
- span.py: RecordingSpan / PassiveSpan variants
- tracer.py: ObjectTracer facade over an explicit TracerProvider
- config.py: Exporter configuration document and process settings
- provider.py: TracerProvider factory
- logging.py: structlog configuration
- constants.py: Annotation keys, sentinel values and defaults
- exceptions.py: Exception hierarchy
"""

from __future__ import annotations

__all__: list[str] = []

"""TracerProvider factory for budtrace.

Builds an OTEL SDK TracerProvider from a validated exporter configuration
document. The provider is returned to the caller as an explicit handle and
is never installed as the global provider.

Sampling uses ParentBased(ALWAYS_OFF): the sampling decision of a
propagated parent is kept, but no new traces are started locally.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

import structlog
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import SpanProcessor, TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.trace.sampling import ALWAYS_OFF, ParentBased, Sampler

from budtrace._internal.config import exporter_endpoint
from budtrace._internal.constants import DEFAULT_SERVICE_NAME
from budtrace._internal.version import __version__

if TYPE_CHECKING:
    from budtrace._internal.config import TracingClientConfiguration

logger = structlog.get_logger(__name__)


def create_resource(service_name: str) -> Resource:
    """Create an OTEL Resource identifying the service."""
    return Resource.create(
        {
            SERVICE_NAME: service_name,
            "telemetry.sdk.name": "budtrace",
            "telemetry.sdk.version": __version__,
        }
    )


def new_tracer_provider(
    config: TracingClientConfiguration | None,
    service_name: str = DEFAULT_SERVICE_NAME,
    *,
    sampler: Sampler | None = None,
    span_processors: Sequence[SpanProcessor] = (),
) -> TracerProvider:
    """Create a TracerProvider exporting to the configured endpoint.

    Args:
        config: Defaulted and validated document. None disables exporting.
        service_name: Value of the service.name resource attribute.
        sampler: Sampler override. Defaults to ParentBased(ALWAYS_OFF).
        span_processors: Extra processors to register, e.g. for tests.

    Returns:
        A new SDK TracerProvider. The caller owns its shutdown.
    """
    provider = TracerProvider(
        sampler=sampler or ParentBased(ALWAYS_OFF),
        resource=create_resource(service_name),
    )

    if config is not None:
        endpoint = exporter_endpoint(config)
        provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint, insecure=True)))
        logger.info("tracer_provider_created", service_name=service_name, endpoint=endpoint)
    else:
        logger.info("tracer_provider_created", service_name=service_name, endpoint=None)

    for span_processor in span_processors:
        provider.add_span_processor(span_processor)

    return provider

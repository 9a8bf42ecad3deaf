"""Structured logging configuration for budtrace.

All modules log through ``structlog.get_logger(__name__)``. Applications
call configure_logging() once at startup; until then structlog's defaults
apply.
"""

from __future__ import annotations

import logging
import sys

import structlog

from budtrace._internal.config import TracingSettings


def configure_logging(settings: TracingSettings | None = None) -> None:
    """Configure structlog and the standard library root logger.

    Console rendering is used in debug mode, JSON otherwise (or when
    ``log_json`` is set).

    Args:
        settings: Process settings. Defaults to TracingSettings() from the environment.
    """
    settings = settings or TracingSettings()

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if settings.debug and not settings.log_json:
        processors = shared_processors + [
            structlog.dev.ConsoleRenderer(colors=True),
        ]
    else:
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    log_level = "DEBUG" if settings.debug else settings.log_level
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, log_level, logging.INFO),
    )

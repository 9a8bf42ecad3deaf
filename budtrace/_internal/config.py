"""Configuration management for budtrace.

Two kinds of configuration live here:

- TracingClientConfiguration: the declarative exporter document, read from
  the file named on the command line. It selects either a direct exporter
  URL or an in-cluster service reference::

      apiVersion: apiserver.k8s.io/v1alpha1
      kind: OpenTelemetryClientConfiguration
      service:
        name: otel-collector
        namespace: observability

- TracingSettings: process settings from environment variables
  (BUDTRACE_*), following the pydantic-settings pattern.

Loading a document is read -> default -> validate. Any failure raises
ConfigurationError, which is fatal at startup.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal
from urllib.parse import urlsplit

import structlog
import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from budtrace._internal.constants import (
    CONFIG_KIND,
    DEFAULT_EXPORTER_PORT,
    DEFAULT_EXPORTER_URL,
    DEFAULT_SERVICE_NAME,
)
from budtrace._internal.exceptions import ConfigurationError, FieldError

logger = structlog.get_logger(__name__)

INVALID = "Invalid"
REQUIRED = "Required"


class ServiceReference(BaseModel):
    """Reference to an in-cluster exporter service."""

    model_config = ConfigDict(extra="ignore")

    name: str = ""
    namespace: str = ""
    port: int | None = Field(default=None, ge=1, le=65535)


class TracingClientConfiguration(BaseModel):
    """Exporter configuration document. ``url`` and ``service`` are mutually exclusive."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    api_version: str = Field(default="", alias="apiVersion")
    kind: str = ""
    url: str | None = None
    service: ServiceReference | None = None


class TracingSettings(BaseSettings):
    """Process settings for budtrace, read from BUDTRACE_* environment variables."""

    model_config = SettingsConfigDict(env_prefix="BUDTRACE_", extra="ignore")

    service_name: str = DEFAULT_SERVICE_NAME
    config_file: Path | None = None
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_json: bool = False
    debug: bool = False


def read_configuration(config_file: str | Path) -> TracingClientConfiguration:
    """Read the exporter configuration document from a file.

    Args:
        config_file: Path to the YAML document.

    Returns:
        The parsed document, not yet defaulted or validated.

    Raises:
        ConfigurationError: If the path is empty, the file cannot be read or
            parsed, or the document is not an OpenTelemetryClientConfiguration.
    """
    if not str(config_file):
        raise ConfigurationError("opentelemetry config file was empty")

    try:
        data = Path(config_file).read_text()
    except OSError as e:
        raise ConfigurationError(f"unable to read opentelemetry configuration from {str(config_file)!r} [{e}]") from e

    try:
        document = yaml.safe_load(data) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"unable to parse opentelemetry configuration: {e}") from e

    if not isinstance(document, dict):
        raise ConfigurationError(f"invalid service configuration object {type(document).__name__!r}")

    kind = document.get("kind") or ""
    if kind != CONFIG_KIND:
        raise ConfigurationError(f'invalid service configuration object "{kind}"')

    try:
        return TracingClientConfiguration.model_validate(document)
    except ValidationError as e:
        errors = [
            FieldError(
                type=INVALID,
                field=".".join(str(part) for part in err["loc"]),
                detail=err["msg"],
                value=err.get("input"),
            )
            for err in e.errors()
        ]
        raise ConfigurationError("invalid opentelemetry configuration", errors=errors) from e


def default_configuration(config: TracingClientConfiguration | None) -> None:
    """Fill unset fields with their defaults, in place.

    A service without a port gets the default OTLP port. A document with
    neither url nor service gets the default URL.
    """
    if config is None:
        return
    if config.service is not None and config.service.port is None:
        config.service.port = DEFAULT_EXPORTER_PORT
    if config.service is None and config.url is None:
        config.url = DEFAULT_EXPORTER_URL


def _validate_service(service: ServiceReference, path: str) -> list[FieldError]:
    errors: list[FieldError] = []
    if not service.name:
        errors.append(FieldError(type=REQUIRED, field=f"{path}.name", detail="service name is required"))
    if not service.namespace:
        errors.append(FieldError(type=REQUIRED, field=f"{path}.namespace", detail="service namespace is required"))
    return errors


def _validate_url(url: str, path: str) -> list[FieldError]:
    try:
        urlsplit(url)
    except ValueError as e:
        return [FieldError(type=INVALID, field=path, detail=f"Unable to parse URL: {e}", value=url)]
    return []


def validate_configuration(config: TracingClientConfiguration | None) -> list[FieldError]:
    """Validate the exporter configuration document.

    Args:
        config: The document. None means tracing is disabled.

    Returns:
        Every validation error found; empty if the document is valid.
    """
    errors: list[FieldError] = []
    if config is None:
        return errors
    if config.service is not None and config.url is not None:
        errors.append(
            FieldError(
                type=INVALID,
                field="service",
                detail="Service and URL cannot both be set",
                value=config.service.model_dump(),
            )
        )
    if config.service is not None:
        errors.extend(_validate_service(config.service, "service"))
    if config.url is not None:
        errors.extend(_validate_url(config.url, "url"))
    return errors


def exporter_endpoint(config: TracingClientConfiguration) -> str:
    """Get the exporter address a defaulted document points at."""
    if config.service is not None:
        port = config.service.port or DEFAULT_EXPORTER_PORT
        return f"{config.service.name}.{config.service.namespace}:{port}"
    return config.url or DEFAULT_EXPORTER_URL


def load_configuration(config_file: str | Path) -> TracingClientConfiguration:
    """Read, default and validate the exporter configuration document.

    Raises:
        ConfigurationError: On any read or validation failure, carrying
            every field error found.
    """
    config = read_configuration(config_file)
    default_configuration(config)
    errors = validate_configuration(config)
    if errors:
        logger.error("tracing_configuration_invalid", config_file=str(config_file), errors=[str(e) for e in errors])
        raise ConfigurationError("failed to validate opentelemetry configuration", errors=errors)
    logger.info("tracing_configuration_loaded", config_file=str(config_file), endpoint=exporter_endpoint(config))
    return config

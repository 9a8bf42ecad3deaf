"""Tests for exporter configuration and process settings.

Tests cover:
- Reading the configuration document from a file
- Defaulting and validation
- Exporter endpoint resolution
- TracingSettings from environment variables
"""

from __future__ import annotations

from pathlib import Path

import pytest

from budtrace._internal.config import (
    INVALID,
    REQUIRED,
    ServiceReference,
    TracingClientConfiguration,
    TracingSettings,
    default_configuration,
    exporter_endpoint,
    load_configuration,
    read_configuration,
    validate_configuration,
)
from budtrace._internal.constants import DEFAULT_EXPORTER_PORT, DEFAULT_EXPORTER_URL
from budtrace._internal.exceptions import ConfigurationError

HEADER = "apiVersion: apiserver.k8s.io/v1alpha1\nkind: OpenTelemetryClientConfiguration\n"

# =============================================================================
# read_configuration Tests
# =============================================================================


class TestReadConfiguration:
    """Tests for read_configuration()."""

    def test_url_document(self, write_config) -> None:
        """Test reading a document with a direct URL."""
        config = read_configuration(write_config(HEADER + "url: collector.local:4317\n"))
        assert config.api_version == "apiserver.k8s.io/v1alpha1"
        assert config.url == "collector.local:4317"
        assert config.service is None

    def test_service_document(self, write_config) -> None:
        """Test reading a document with a service reference."""
        path = write_config(HEADER + "service:\n  name: otel-collector\n  namespace: observability\n  port: 4317\n")
        config = read_configuration(path)
        assert config.service == ServiceReference(name="otel-collector", namespace="observability", port=4317)

    def test_empty_path(self) -> None:
        """Test that an empty path is rejected."""
        with pytest.raises(ConfigurationError, match="config file was empty"):
            read_configuration("")

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test that an unreadable file is rejected."""
        with pytest.raises(ConfigurationError, match="unable to read opentelemetry configuration from"):
            read_configuration(tmp_path / "missing.yaml")

    def test_empty_file(self, write_config) -> None:
        """Test that an empty document has the wrong kind."""
        with pytest.raises(ConfigurationError) as exc_info:
            read_configuration(write_config(""))
        assert exc_info.value.message == 'invalid service configuration object ""'

    def test_wrong_kind(self, write_config) -> None:
        """Test that other object kinds are rejected."""
        with pytest.raises(ConfigurationError) as exc_info:
            read_configuration(write_config("apiVersion: apps/v1\nkind: DaemonSet\n"))
        assert exc_info.value.message == 'invalid service configuration object "DaemonSet"'

    def test_malformed_yaml(self, write_config) -> None:
        """Test that unparseable YAML is rejected."""
        with pytest.raises(ConfigurationError, match="unable to parse"):
            read_configuration(write_config("kind: [unclosed\n"))

    def test_non_mapping_document(self, write_config) -> None:
        """Test that a document that is not a mapping is rejected."""
        with pytest.raises(ConfigurationError):
            read_configuration(write_config("- a\n- b\n"))

    def test_port_out_of_range(self, write_config) -> None:
        """Test that field-level type errors become FieldErrors."""
        path = write_config(HEADER + "service:\n  name: c\n  namespace: n\n  port: 70000\n")
        with pytest.raises(ConfigurationError) as exc_info:
            read_configuration(path)
        (error,) = exc_info.value.errors
        assert error.type == INVALID
        assert error.field == "service.port"


# =============================================================================
# Defaulting and Validation Tests
# =============================================================================


class TestDefaultConfiguration:
    """Tests for default_configuration()."""

    def test_none_is_noop(self) -> None:
        """Test that a missing document is left alone."""
        default_configuration(None)

    def test_default_url(self) -> None:
        """Test that a bare document points at the default URL."""
        config = TracingClientConfiguration()
        default_configuration(config)
        assert config.url == DEFAULT_EXPORTER_URL
        assert config.service is None

    def test_default_port(self) -> None:
        """Test that a service without a port gets the default port."""
        config = TracingClientConfiguration(service=ServiceReference(name="c", namespace="n"))
        default_configuration(config)
        assert config.service is not None
        assert config.service.port == DEFAULT_EXPORTER_PORT
        assert config.url is None

    def test_explicit_values_kept(self) -> None:
        """Test that set fields are not overwritten."""
        config = TracingClientConfiguration(url="collector:4317")
        default_configuration(config)
        assert config.url == "collector:4317"


class TestValidateConfiguration:
    """Tests for validate_configuration()."""

    def test_none_is_valid(self) -> None:
        """Test that a missing document has no errors."""
        assert validate_configuration(None) == []

    def test_url_is_valid(self) -> None:
        """Test that a parseable URL has no errors."""
        assert validate_configuration(TracingClientConfiguration(url="localhost:55680")) == []

    def test_service_and_url_conflict(self) -> None:
        """Test that url and service are mutually exclusive."""
        config = TracingClientConfiguration(url="x:1", service=ServiceReference(name="c", namespace="n", port=1))
        errors = validate_configuration(config)
        assert [(e.type, e.field) for e in errors] == [(INVALID, "service")]
        assert errors[0].detail == "Service and URL cannot both be set"

    def test_service_requires_name_and_namespace(self) -> None:
        """Test that every missing service field is reported."""
        errors = validate_configuration(TracingClientConfiguration(service=ServiceReference(port=1)))
        assert [(e.type, e.field) for e in errors] == [
            (REQUIRED, "service.name"),
            (REQUIRED, "service.namespace"),
        ]

    def test_unparseable_url(self) -> None:
        """Test that an unparseable URL is reported."""
        errors = validate_configuration(TracingClientConfiguration(url="http://[::1"))
        assert [(e.type, e.field) for e in errors] == [(INVALID, "url")]
        assert errors[0].value == "http://[::1"


class TestExporterEndpoint:
    """Tests for exporter_endpoint()."""

    def test_service_endpoint(self) -> None:
        """Test that a service resolves to its in-cluster address."""
        config = TracingClientConfiguration(service=ServiceReference(name="c", namespace="n", port=4317))
        assert exporter_endpoint(config) == "c.n:4317"

    def test_url_endpoint(self) -> None:
        """Test that a URL is used as-is."""
        assert exporter_endpoint(TracingClientConfiguration(url="collector:4317")) == "collector:4317"


class TestLoadConfiguration:
    """Tests for load_configuration()."""

    def test_loads_and_defaults(self, write_config) -> None:
        """Test the full read, default, validate sequence."""
        config = load_configuration(write_config(HEADER + "service:\n  name: c\n  namespace: n\n"))
        assert exporter_endpoint(config) == f"c.n:{DEFAULT_EXPORTER_PORT}"

    def test_header_only_uses_default_url(self, write_config) -> None:
        """Test that a document with only a header exports to the default URL."""
        assert load_configuration(write_config(HEADER)).url == DEFAULT_EXPORTER_URL

    def test_collects_all_errors(self, write_config) -> None:
        """Test that validation errors are aggregated into one failure."""
        path = write_config(HEADER + "url: x:1\nservice:\n  port: 80\n")
        with pytest.raises(ConfigurationError) as exc_info:
            load_configuration(path)
        assert exc_info.value.message == "failed to validate opentelemetry configuration"
        assert [e.field for e in exc_info.value.errors] == ["service", "service.name", "service.namespace"]


# =============================================================================
# TracingSettings Tests
# =============================================================================


class TestTracingSettings:
    """Tests for TracingSettings."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test default values with a clean environment."""
        for name in ("SERVICE_NAME", "CONFIG_FILE", "LOG_LEVEL", "LOG_JSON", "DEBUG"):
            monkeypatch.delenv(f"BUDTRACE_{name}", raising=False)
        settings = TracingSettings()
        assert settings.service_name == "kube-apiserver"
        assert settings.config_file is None
        assert settings.log_level == "INFO"
        assert not settings.debug

    def test_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that BUDTRACE_* variables are read."""
        monkeypatch.setenv("BUDTRACE_SERVICE_NAME", "controller-manager")
        monkeypatch.setenv("BUDTRACE_CONFIG_FILE", "/etc/tracing.yaml")
        monkeypatch.setenv("BUDTRACE_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("BUDTRACE_DEBUG", "true")
        settings = TracingSettings()
        assert settings.service_name == "controller-manager"
        assert settings.config_file == Path("/etc/tracing.yaml")
        assert settings.log_level == "DEBUG"
        assert settings.debug

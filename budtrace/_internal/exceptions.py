"""Custom exceptions for budtrace."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


class BudTraceException(Exception):
    """Base exception for all budtrace errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class DecodeError(BudTraceException):
    """An encoded SpanContext could not be decoded.

    Callers treat this exactly like "no context present".
    """

    def __init__(self, message: str, value: str | None = None) -> None:
        super().__init__(message, details={"value": value} if value is not None else None)
        self.value = value


@dataclass(frozen=True)
class FieldError:
    """A single validation error on a configuration field."""

    type: str
    field: str
    detail: str
    value: Any = None

    def __str__(self) -> str:
        return f"{self.field}: {self.type}: {self.detail}"


class ConfigurationError(BudTraceException):
    """The exporter configuration document is unusable. Fatal at startup."""

    def __init__(self, message: str, errors: list[FieldError] | None = None) -> None:
        self.errors = errors or []
        super().__init__(
            message,
            details={"errors": [str(e) for e in self.errors]} if self.errors else None,
        )

"""Error hierarchy for the fetch → normalize → sink pipeline.

Every failure the pipeline can detect is a ``NoaaTempsError`` subclass so the
CLI can report it and exit non-zero. Nothing here is retried.
"""

from __future__ import annotations

from typing import Any


class NoaaTempsError(Exception):
    """Base class for all pipeline errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if not self.details:
            return self.message
        context = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
        return f"{self.message} ({context})"


class ConfigError(NoaaTempsError):
    """Invalid or incomplete pipeline configuration."""


class TransportError(NoaaTempsError):
    """Network failure or non-success HTTP status."""

    def __init__(
        self,
        message: str,
        url: str,
        status_code: int | None = None,
        body: str = "",
    ):
        details: dict[str, Any] = {"url": url}
        if status_code is not None:
            details["status"] = status_code
        if body:
            details["body"] = body[:300]
        super().__init__(message, details)
        self.url = url
        self.status_code = status_code
        self.body = body


class EmptyResultError(NoaaTempsError):
    """The service answered but sent no payload at all."""


class MalformedEnvelopeError(NoaaTempsError):
    """The response is missing the structure we expect (e.g. ``results``)."""

    def __init__(self, message: str, missing_key: str | None = None):
        super().__init__(message, {"missing_key": missing_key} if missing_key else None)
        self.missing_key = missing_key


class MalformedDateError(NoaaTempsError):
    """A date field could not be parsed as a calendar date."""

    def __init__(self, value: Any, field: str = "date"):
        super().__init__(f"Unparsable date in {field!r}", {"value": value})
        self.value = value
        self.field = field


class MalformedValueError(NoaaTempsError):
    """A temperature value is not numeric."""

    def __init__(self, value: Any, field: str):
        super().__init__(f"Non-numeric temperature value in {field!r}", {"value": value})
        self.value = value
        self.field = field


__all__ = [
    "ConfigError",
    "EmptyResultError",
    "MalformedDateError",
    "MalformedEnvelopeError",
    "MalformedValueError",
    "NoaaTempsError",
    "TransportError",
]

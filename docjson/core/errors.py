"""Error taxonomy for the extraction pipeline.

Every failure carries the HTTP status it is surfaced with. All of them are
terminal: no stage of the pipeline retries.
"""

from __future__ import annotations


class ExtractionError(Exception):
    """Base class for failures that end an extraction request."""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class ValidationError(ExtractionError):
    """The request itself is unusable (no files, malformed schema)."""

    status_code = 400


class ConfigurationError(ExtractionError):
    """The server is missing configuration needed to reach the provider."""

    status_code = 400


class UpstreamError(ExtractionError):
    """The provider answered with a non-2xx status; body is passed through."""

    def __init__(self, status_code: int, body: str):
        self.body = body
        super().__init__(body, status_code=status_code)


class ProtocolError(ExtractionError):
    """The provider answered 2xx but the payload is not usable."""

    status_code = 502


class ProviderTimeoutError(ExtractionError):
    """A provider call ran past the patience threshold without caller cancellation."""

    status_code = 504

    def __init__(self, message: str = "Timed out by OpenAI."):
        super().__init__(message)


class RequestCancelledError(ExtractionError):
    """The caller cancelled the request."""

    # Non-standard "client closed request"
    status_code = 499

    def __init__(self, message: str = "Request cancelled."):
        super().__init__(message)


__all__ = [
    "ConfigurationError",
    "ExtractionError",
    "ProtocolError",
    "ProviderTimeoutError",
    "RequestCancelledError",
    "UpstreamError",
    "ValidationError",
]

"""
Shared error handling for the Lessons Proxy.
"""

from typing import Dict, Any, Iterable, Optional
from pydantic import BaseModel
from opentelemetry import trace


class ErrorResponse(BaseModel):
    """Standard error response format."""

    message: str


class ProxyException(Exception):
    """Base exception for Lessons Proxy services."""

    status_code = 500

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self, prefix: Optional[str] = None) -> ErrorResponse:
        """Convert to the {message} error envelope."""
        message = f"{prefix}: {self.message}" if prefix else self.message
        return ErrorResponse(message=message)

    def trace_id(self) -> Optional[str]:
        """Trace ID of the span active when the error is reported."""
        current_span = trace.get_current_span()
        if current_span and current_span.is_recording():
            span_context = current_span.get_span_context()
            if span_context.trace_id != 0:
                return f"{span_context.trace_id:032x}"
        return None


class ConfigurationError(ProxyException):
    """Missing or invalid process configuration."""

    def __init__(self, message: str = "Invalid configuration", details: Optional[Dict[str, Any]] = None):
        super().__init__("CONFIGURATION_ERROR", message, details)


class ValidationError(ProxyException):
    """Validation-related errors."""

    status_code = 400

    def __init__(self, message: str = "Validation failed", details: Optional[Dict[str, Any]] = None,
                 code: str = "VALIDATION_ERROR"):
        super().__init__(code, message, details)


class MissingParameterError(ValidationError):
    """One or more required path parameters are absent."""

    def __init__(self, missing: Iterable[str]):
        self.missing = list(missing)
        super().__init__(
            f"Missing required parameters: {', '.join(self.missing)}",
            details={"missing": self.missing},
            code="MISSING_PARAMETER",
        )


class UpstreamError(ProxyException):
    """Origin answered with a non-success status."""

    def __init__(self, status_code: int, status_text: str, body: str):
        self.upstream_status = status_code
        self.status_text = status_text
        self.body = body
        super().__init__(
            "UPSTREAM_ERROR",
            f"GitHub API error: {status_code} {status_text} - {body}",
            details={"status_code": status_code, "status_text": status_text},
        )


class EmptyResultError(ProxyException):
    """Origin answered successfully but with nothing usable."""

    def __init__(self, message: str = "Empty response data from GitHub", details: Optional[Dict[str, Any]] = None):
        super().__init__("EMPTY_RESULT", message, details)


class TransportError(ProxyException):
    """Network failure talking to the origin, or an unparseable response."""

    def __init__(self, message: str = "Origin transport error", details: Optional[Dict[str, Any]] = None):
        super().__init__("TRANSPORT_ERROR", message, details)

"""
Exception types shared by the Nutri Scan handlers.

Only RequestValidationError maps to a client error (400). Everything else
reaches the caller as a 500 with the exception message.
"""

from typing import Optional


class NutriScanError(Exception):
    """Base class for all errors raised by the handlers."""
    pass


class RequestValidationError(NutriScanError):
    """Request body is missing a required field or has an invalid value."""
    pass


class ConfigurationError(NutriScanError):
    """Required configuration (e.g. the upstream API key) is not available."""
    pass


class UpstreamTransportError(NutriScanError):
    """The request to the upstream API failed at the network level."""
    pass


class UpstreamAPIError(NutriScanError):
    """The upstream API answered with a non-success status."""

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"API error {status_code}: {body}")


class InvalidUpstreamStructure(NutriScanError):
    """The upstream envelope does not have the expected shape."""

    def __init__(self, field_path: str, reason: Optional[str] = None):
        self.field_path = field_path
        message = f"Invalid upstream response structure: missing {field_path}"
        if reason:
            message = f"Invalid upstream response structure: {reason}"
        super().__init__(message)

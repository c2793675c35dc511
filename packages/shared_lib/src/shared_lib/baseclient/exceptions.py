"""
Custom exceptions for the shared base client.

This module provides specialized exceptions for transport-level failures
raised by BaseClient, so callers can tell failures that carry an HTTP
response apart from failures where the server was never reached.
"""

from typing import Any


class ClientError(Exception):
    """Base exception for all base client errors."""

    def __init__(self, message: str, *args, **kwargs):
        super().__init__(message, *args)
        self.message = message
        self.details = kwargs


class HTTPError(ClientError):
    """Raised when the server answered with an error status code."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_body: Any = None,
        response: Any = None,
    ):
        super().__init__(message, status_code=status_code, response_body=response_body)
        self.status_code = status_code
        self.response_body = response_body
        self.response = response


class ProxyError(ClientError):
    """Raised when there's an issue with the proxy configuration or connection."""

    pass


class ConnectionError(ClientError):
    """Raised when the request failed before any response was received."""

    pass


class ConfigurationError(ClientError):
    """Raised when there's an issue with client configuration."""

    pass


class TimeoutError(ClientError):
    """Raised when a request times out."""

    pass

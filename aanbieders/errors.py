"""
Exception hierarchy for the Aanbieders API client.
"""

from typing import Optional


class AanbiedersError(Exception):
    """Base exception for all client errors."""
    pass


class ConfigError(AanbiedersError):
    """Invalid or missing configuration (credentials, output mode)."""
    pass


class EncodingError(AanbiedersError):
    """Parameter value shape not supported by the codec."""

    def __init__(self, message: str, key: Optional[str] = None):
        super().__init__(message)
        self.key = key


class TransportError(AanbiedersError):
    """
    HTTP exchange failed.

    Raised for network/TLS failures and for non-2xx responses. For the
    latter, status_code and body hold what the server sent.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: Optional[str] = None
    ):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class TransportTimeoutError(TransportError):
    """Request timed out before the server answered."""
    pass


class ResponseParseError(AanbiedersError):
    """Response body is not valid JSON."""

    def __init__(self, message: str, body: Optional[str] = None):
        super().__init__(message)
        self.body = body

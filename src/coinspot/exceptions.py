"""Exceptions raised by the CoinSpot client."""

from __future__ import annotations

from typing import Any


class CoinSpotError(Exception):
    """Base exception for CoinSpot client errors."""
    pass


class ConfigurationError(CoinSpotError):
    """Raised when a call needs credentials the client was not given."""
    pass


class TransportError(CoinSpotError):
    """Raised on connection, DNS, TLS or timeout failures."""
    pass


class HTTPStatusError(TransportError):
    """Raised when the server answers with an HTTP error status."""

    def __init__(self, status: int, body: str = ""):
        super().__init__(f"HTTP {status}: {body[:200]}")
        self.status = status
        self.body = body


class DecodeError(CoinSpotError):
    """Raised when a response body is not valid JSON."""

    def __init__(self, message: str, body: str = ""):
        super().__init__(message)
        self.body = body


class ServiceError(CoinSpotError):
    """Raised for payloads reporting a non-ok status (only when enabled)."""

    def __init__(self, message: str, payload: Any = None):
        super().__init__(message)
        self.payload = payload

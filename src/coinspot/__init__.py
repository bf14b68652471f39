"""coinspot: async client for the CoinSpot exchange API."""

from .client import CoinSpotClient, __version__
from .config import load_settings
from .exceptions import (
    CoinSpotError,
    ConfigurationError,
    DecodeError,
    HTTPStatusError,
    ServiceError,
    TransportError,
)
from .init import create_client_from_settings
from .request import Request, SignedEnvelope
from .settings import DEFAULT_BASE_URL, ClientConfig, Settings

__all__ = [
    "CoinSpotClient",
    "ClientConfig",
    "Settings",
    "DEFAULT_BASE_URL",
    "load_settings",
    "create_client_from_settings",
    "Request",
    "SignedEnvelope",
    "CoinSpotError",
    "ConfigurationError",
    "TransportError",
    "HTTPStatusError",
    "DecodeError",
    "ServiceError",
    "__version__",
]

"""Client initialization from settings."""

from __future__ import annotations

import logging

from .client import CoinSpotClient
from .settings import Settings

logger = logging.getLogger(__name__)


def create_client_from_settings(settings: Settings, *, raise_on_error: bool = False) -> CoinSpotClient:
    """Create a CoinSpot client from loaded settings."""
    config = settings.coinspot
    if not config.has_credentials:
        logger.warning("No CoinSpot credentials configured, only public endpoints will work")

    client = CoinSpotClient.from_config(config, raise_on_error=raise_on_error)
    logger.info("Initialized CoinSpot client for %s", config.base_url)
    return client

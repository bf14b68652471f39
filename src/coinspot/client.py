"""CoinSpot exchange client."""

from __future__ import annotations

import asyncio
import json
import logging
import platform
from typing import Any, Callable, Mapping, Sequence

import aiohttp

from .exceptions import (
    ConfigurationError,
    DecodeError,
    HTTPStatusError,
    ServiceError,
    TransportError,
)
from .request import Request, SignedEnvelope, sparse_fields
from .settings import DEFAULT_BASE_URL, ClientConfig
from .signing import current_nonce

__version__ = "0.1.0"

USER_AGENT = (
    f"coinspot/{__version__} "
    f"(python {platform.python_version()}; {platform.system().lower()})"
)

logger = logging.getLogger(__name__)


class CoinSpotClient:
    """CoinSpot exchange client.

    Market data needs no credentials. Everything else is a signed POST and
    requires both ``auth_key`` and ``auth_secret``; missing credentials are
    reported before any request is made. No request is made at construction,
    so bad credentials only show up on the first private call.

    Responses are returned exactly as decoded from JSON. Business failures
    such as insufficient funds arrive as ordinary payloads unless
    ``raise_on_error`` is set, in which case a payload whose ``status`` is not
    ``"ok"`` raises :class:`ServiceError`.

    Example:
        >>> async with CoinSpotClient("key", "secret") as client:
        ...     balances = await client.get_balances()
    """

    def __init__(
        self,
        auth_key: str | None = None,
        auth_secret: str | None = None,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 10.0,
        proxy: str | None = None,
        nonce_factory: Callable[[], int] | None = None,
        raise_on_error: bool = False,
    ):
        """Initialize client.

        Args:
            auth_key: API key from the CoinSpot account settings page
            auth_secret: API secret paired with the key
            base_url: API root, only worth changing for testing
            timeout: Total timeout per request in seconds
            proxy: Optional HTTP proxy URL
            nonce_factory: Callable returning the nonce for each signed call
            raise_on_error: Raise ServiceError for non-ok payloads
        """
        self.config = ClientConfig(
            base_url=base_url,
            auth_key=auth_key,
            auth_secret=auth_secret,
            timeout=timeout,
            proxy=proxy,
        )
        self.nonce_factory = nonce_factory or current_nonce
        self.raise_on_error = raise_on_error
        self.session: aiohttp.ClientSession | None = None

    @classmethod
    def from_config(
        cls,
        config: ClientConfig,
        *,
        nonce_factory: Callable[[], int] | None = None,
        raise_on_error: bool = False,
    ) -> "CoinSpotClient":
        """Build a client from a config; connection fields come from the config only."""
        secret = config.auth_secret.get_secret_value() if config.auth_secret else None
        return cls(
            config.auth_key,
            secret,
            base_url=config.base_url,
            timeout=config.timeout,
            proxy=config.proxy,
            nonce_factory=nonce_factory,
            raise_on_error=raise_on_error,
        )

    async def __aenter__(self) -> "CoinSpotClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self.session is None:
            self.session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.config.timeout),
            )
        return self.session

    def _get_headers(self, envelope: SignedEnvelope | None = None) -> dict[str, str]:
        headers = {"User-Agent": USER_AGENT}
        if envelope is not None:
            headers.update(envelope.headers(self.config.auth_key or ""))
        return headers

    async def _get(self, path: Sequence[str]) -> Any:
        request = Request.public(*path)
        url = request.url(self.config.base_url)
        session = await self._ensure_session()
        logger.debug("GET %s", url)

        try:
            async with session.get(url, headers=self._get_headers(), proxy=self.config.proxy) as resp:
                return await self._handle_response(resp, url)
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            logger.warning("GET %s failed: %s", url, exc)
            raise TransportError(f"GET {url} failed: {exc}") from exc

    async def _post(self, path: Sequence[str], fields: Mapping[str, Any] | None = None) -> Any:
        """Sign and send a private request."""
        if not self.config.has_credentials:
            raise ConfigurationError("auth_key and auth_secret are required to call this method")

        request = Request.private(*path, fields=fields)
        envelope = request.sign(
            self.config.auth_secret.get_secret_value(),
            self.nonce_factory(),
        )
        url = request.url(self.config.base_url)
        session = await self._ensure_session()
        logger.debug("POST %s nonce=%s", url, envelope.nonce)

        try:
            async with session.post(
                url,
                data=envelope.body,
                headers=self._get_headers(envelope),
                proxy=self.config.proxy,
            ) as resp:
                return await self._handle_response(resp, url)
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            logger.warning("POST %s failed: %s", url, exc)
            raise TransportError(f"POST {url} failed: {exc}") from exc

    async def _handle_response(self, resp: aiohttp.ClientResponse, url: str) -> Any:
        raw = await resp.read()
        if resp.status >= 400:
            logger.warning("%s returned HTTP %s", url, resp.status)
            raise HTTPStatusError(resp.status, raw.decode("utf-8", errors="replace"))

        # UnicodeDecodeError is a ValueError
        try:
            data = json.loads(raw.decode("utf-8"))
        except ValueError as exc:
            logger.warning("Invalid JSON from %s: %s", url, exc)
            text = raw.decode("utf-8", errors="replace")
            raise DecodeError(f"Invalid JSON response from {url}: {exc}", text) from exc

        if self.raise_on_error:
            _raise_for_service_error(data)
        return data

    async def get_latest_prices(self) -> dict[str, Any]:
        """Get the latest prices. Needs no credentials.

        Returns:
            Payload with one entry per coin under ``prices``
        """
        return await self._get(["latest"])

    async def list_open_orders(self, cointype: str | None = None) -> dict[str, Any]:
        """List open buy and sell orders on the market.

        Args:
            cointype: Coin symbol such as BTC, LTC, DOGE (optional)

        Returns:
            Payload with ``buyorders`` and ``sellorders`` arrays
        """
        return await self._post(["orders"], sparse_fields(cointype=cointype))

    async def list_order_history(self, cointype: str | None = None) -> dict[str, Any]:
        """List the last 1,000 completed orders.

        Args:
            cointype: Coin symbol (optional)
        """
        return await self._post(["orders", "history"], sparse_fields(cointype=cointype))

    async def get_balances(self) -> dict[str, Any]:
        """Get the balance of every coin in the account."""
        return await self._post(["my", "balances"])

    async def list_my_orders(self) -> dict[str, Any]:
        """List the account's own buy and sell orders."""
        return await self._post(["my", "orders"])

    async def quote_buy(self, cointype: str, amount: Any) -> dict[str, Any]:
        """Quote a quick buy. This is an estimate, not a commitment.

        Args:
            cointype: Coin symbol
            amount: Number of coins to buy

        Returns:
            Payload with the ``quote`` rate and ``timeframe`` in hours
        """
        return await self._post(["quote", "buy"], sparse_fields(cointype=cointype, amount=amount))

    async def quote_sell(self, cointype: str, amount: Any) -> dict[str, Any]:
        """Quote a quick sell. This is an estimate, not a commitment."""
        return await self._post(["quote", "sell"], sparse_fields(cointype=cointype, amount=amount))

    async def place_buy_order(self, cointype: str, amount: Any, rate: Any) -> dict[str, Any]:
        """Place a buy order. This spends money.

        Amount (max 8 decimal places) and rate in AUD (max 6 decimal places)
        are sent as given; rounding is the caller's job.

        Args:
            cointype: Coin symbol
            amount: Number of coins to buy
            rate: Price per coin in AUD
        """
        return await self._post(
            ["my", "buy"],
            sparse_fields(cointype=cointype, amount=amount, rate=rate),
        )

    async def place_sell_order(self, cointype: str, amount: Any, rate: Any) -> dict[str, Any]:
        """Place a sell order. Same precision rules as :meth:`place_buy_order`."""
        return await self._post(
            ["my", "sell"],
            sparse_fields(cointype=cointype, amount=amount, rate=rate),
        )

    async def cancel_buy_order(self, order_id: Any) -> dict[str, Any]:
        """Cancel an unfilled buy order."""
        return await self._post(["my", "buy", "cancel"], sparse_fields(id=order_id))

    async def cancel_sell_order(self, order_id: Any) -> dict[str, Any]:
        """Cancel an unfilled sell order."""
        return await self._post(["my", "sell", "cancel"], sparse_fields(id=order_id))

    async def send_coin(self, cointype: str, address: str, amount: Any) -> dict[str, Any]:
        """Send coins to an external wallet. Funds leave the account.

        Args:
            cointype: Coin symbol
            address: Destination wallet address
            amount: Number of coins to send
        """
        return await self._post(
            ["my", "coin", "send"],
            sparse_fields(cointype=cointype, address=address, amount=amount),
        )

    async def deposit_coin_address(self, cointype: str) -> dict[str, Any]:
        """Get the deposit address for a coin.

        Returns:
            Payload with the ``address`` to deposit to
        """
        return await self._post(["my", "coin", "deposit"], sparse_fields(cointype=cointype))

    async def close(self) -> None:
        """Close the HTTP session."""
        if self.session:
            await self.session.close()
            self.session = None


def _raise_for_service_error(data: Any) -> None:
    if not isinstance(data, dict) or "status" not in data:
        return
    if data["status"] != "ok":
        message = data.get("message") or f"status {data['status']!r}"
        raise ServiceError(str(message), data)

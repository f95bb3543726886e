"""BinanceCandleSource: market data via the public Binance REST API.

Uses a single shared httpx.AsyncClient per connection. Transport and
HTTP status failures are translated into the ExchangeError hierarchy
here so callers never see httpx exceptions.
"""

from __future__ import annotations

import asyncio
from typing import Any, Self

import httpx
import structlog

from dashboard.exchange.binance.mappers import (
    klines_to_candles,
    ticker_24hr_from_json,
    ticker_price_from_json,
)
from dashboard.exchange.errors import (
    ExchangeAPIError,
    ExchangeConnectionError,
    ExchangeDataError,
    ExchangeNotConnectedError,
    ExchangeTimeoutError,
)
from dashboard.exchange.types import Candle, KlineInterval, Ticker24hr, TickerPrice

logger = structlog.get_logger()

DEFAULT_BASE_URL = "https://api.binance.com/api/v3"
MAX_KLINE_LIMIT = 1000


class BinanceCandleSource:
    """CandleSource implementation backed by the Binance public REST API.

    No credentials are needed; every endpoint used here is public.
    Pass ``transport`` to route requests through a mock in tests.
    """

    def __init__(
        self,
        config: Any = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url: str = getattr(config, "base_url", DEFAULT_BASE_URL)
        self._timeout: float = getattr(config, "timeout_seconds", 10.0)
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._lifecycle_lock = asyncio.Lock()

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    async def connect(self) -> None:
        """Open the shared HTTP client."""
        async with self._lifecycle_lock:
            if self._client is not None:
                logger.warning("BinanceCandleSource already connected")
                return
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
            )
            logger.info("BinanceCandleSource connected", base_url=self._base_url)

    async def disconnect(self) -> None:
        """Close the HTTP client and release its connection pool."""
        async with self._lifecycle_lock:
            if self._client is None:
                return
            await self._client.aclose()
            self._client = None
            logger.info("BinanceCandleSource disconnected")

    async def get_klines(
        self,
        symbol: str,
        interval: KlineInterval | str,
        limit: int = 100,
    ) -> list[Candle]:
        """Fetch the most recent ``limit`` klines, ordered by open time."""
        if not 1 <= limit <= MAX_KLINE_LIMIT:
            raise ValueError(
                f"limit must be between 1 and {MAX_KLINE_LIMIT}, got {limit}",
            )
        interval = KlineInterval(interval)
        payload = await self._get(
            "/klines",
            {"symbol": symbol, "interval": interval.value, "limit": limit},
            context=symbol,
        )
        return klines_to_candles(payload)

    async def get_ticker_price(
        self,
        symbol: str | None = None,
    ) -> TickerPrice | list[TickerPrice]:
        """Latest price for ``symbol``, or for every symbol when omitted."""
        params = {"symbol": symbol} if symbol else None
        payload = await self._get(
            "/ticker/price",
            params,
            context=symbol or "all symbols",
        )
        if symbol:
            return ticker_price_from_json(payload)
        if not isinstance(payload, list):
            raise ExchangeDataError(
                f"Expected a list of tickers, got {type(payload).__name__}",
            )
        return [ticker_price_from_json(item) for item in payload]

    async def get_ticker_24hr(self, symbol: str) -> Ticker24hr:
        """Rolling 24-hour statistics for a single symbol."""
        if not symbol:
            raise ValueError("symbol is required for 24hr ticker statistics")
        payload = await self._get("/ticker/24hr", {"symbol": symbol}, context=symbol)
        return ticker_24hr_from_json(payload)

    async def _get(
        self,
        path: str,
        params: dict[str, Any] | None,
        context: str,
    ) -> Any:
        """GET ``path`` and return the decoded JSON body."""
        if self._client is None:
            raise ExchangeNotConnectedError("Not connected. Call connect() first.")

        try:
            response = await self._client.get(path, params=params)
        except httpx.TimeoutException as e:
            logger.error("Exchange request timed out", path=path, symbol=context)
            raise ExchangeTimeoutError(
                f"Timed out requesting {path} for {context}",
            ) from e
        except httpx.RequestError as e:
            logger.error(
                "Exchange request failed",
                path=path,
                symbol=context,
                error=str(e),
            )
            raise ExchangeConnectionError(
                f"Could not reach exchange for {context}: {e}",
            ) from e

        if response.is_error:
            error = _api_error(response)
            logger.error(
                "Exchange API error",
                path=path,
                symbol=context,
                status_code=error.status_code,
                code=error.code,
                message=error.message,
            )
            raise error

        try:
            return response.json()
        except ValueError as e:
            raise ExchangeDataError(
                f"Response from {path} for {context} is not valid JSON",
            ) from e

    async def __aenter__(self) -> Self:
        await self.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object | None,
    ) -> None:
        await self.disconnect()


def _api_error(response: httpx.Response) -> ExchangeAPIError:
    """Build an ExchangeAPIError, using the ``{code, msg}`` body when present."""
    message = response.reason_phrase or "request failed"
    code: int | None = None
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        message = str(body.get("msg", message))
        raw_code = body.get("code")
        if isinstance(raw_code, int):
            code = raw_code
    elif response.text:
        message = f"{message}: {response.text[:200]}"
    return ExchangeAPIError(response.status_code, message, code)

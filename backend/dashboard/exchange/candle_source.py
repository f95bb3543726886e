"""CandleSource protocol: abstract interface for market data sources.

All exchange implementations (Binance, fake) must satisfy this protocol.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from dashboard.exchange.types import Candle, KlineInterval, Ticker24hr, TickerPrice


@runtime_checkable
class CandleSource(Protocol):
    """Async interface for historical klines and ticker statistics.

    Implementations must support ``async with`` for lifecycle management.
    Every fetch either returns fully mapped domain objects or raises an
    ExchangeError; partial results are never returned.
    """

    async def connect(self) -> None:
        """Open the connection to the data source."""
        ...

    async def disconnect(self) -> None:
        """Tear down the connection and release resources."""
        ...

    async def get_klines(
        self,
        symbol: str,
        interval: KlineInterval | str,
        limit: int = 100,
    ) -> list[Candle]:
        """Fetch the most recent klines for a symbol.

        Args:
            symbol: Trading pair (e.g. "BTCUSDT").
            interval: Kline interval (e.g. "1m", "4h", "1d").
            limit: Number of klines to retrieve.

        Returns:
            List of Candle objects ordered by open time ascending.
        """
        ...

    async def get_ticker_price(
        self,
        symbol: str | None = None,
    ) -> TickerPrice | list[TickerPrice]:
        """Latest price for one symbol, or for all symbols when omitted."""
        ...

    async def get_ticker_24hr(self, symbol: str) -> Ticker24hr:
        """Rolling 24-hour statistics for one symbol."""
        ...

    async def __aenter__(self) -> CandleSource:
        """Connect on context manager entry."""
        ...

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object | None,
    ) -> None:
        """Disconnect on context manager exit."""
        ...

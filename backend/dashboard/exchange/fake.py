"""FakeCandleSource: in-memory market data for tests and offline runs.

Lightweight implementation of CandleSource for exercising the session
and the CLI without network access.
"""

from __future__ import annotations

import asyncio
from typing import Self

from dashboard.exchange.errors import ExchangeError
from dashboard.exchange.types import Candle, KlineInterval, Ticker24hr, TickerPrice


class FakeCandleSource:
    """In-memory CandleSource.

    Supply canned klines/tickers at construction, or mutate them during
    a test via set_klines() and push_candle(). Set ``failure`` to make
    every fetch raise, and ``gate`` to hold fetches until it is set.
    """

    def __init__(
        self,
        klines: dict[str, list[Candle]] | None = None,
        tickers: dict[str, Ticker24hr] | None = None,
    ) -> None:
        self._klines: dict[tuple[str, str | None], list[Candle]] = {}
        for symbol, candles in (klines or {}).items():
            self.set_klines(symbol, candles)
        self._tickers: dict[str, Ticker24hr] = dict(tickers or {})
        self.failure: ExchangeError | None = None
        self.gate: asyncio.Event | None = None
        self.kline_requests: list[tuple[str, str, int]] = []
        self._connected = False

    @property
    def is_connected(self) -> bool:
        return self._connected

    def set_klines(
        self,
        symbol: str,
        candles: list[Candle],
        interval: KlineInterval | str | None = None,
    ) -> None:
        """Replace the klines served for ``symbol`` (optionally per interval)."""
        key = KlineInterval(interval).value if interval is not None else None
        self._klines[(symbol, key)] = sorted(candles, key=lambda c: c.open_time)

    def push_candle(
        self,
        symbol: str,
        candle: Candle,
        interval: KlineInterval | str | None = None,
    ) -> None:
        """Revise the candle with the same open time, or append a new one."""
        key = KlineInterval(interval).value if interval is not None else None
        series = self._klines.setdefault((symbol, key), [])
        for i, existing in enumerate(series):
            if existing.open_time == candle.open_time:
                series[i] = candle
                return
        series.append(candle)
        series.sort(key=lambda c: c.open_time)

    def set_ticker(self, ticker: Ticker24hr) -> None:
        self._tickers[ticker.symbol] = ticker

    async def connect(self) -> None:
        self._connected = True

    async def disconnect(self) -> None:
        self._connected = False

    async def get_klines(
        self,
        symbol: str,
        interval: KlineInterval | str,
        limit: int = 100,
    ) -> list[Candle]:
        interval = KlineInterval(interval)
        self.kline_requests.append((symbol, interval.value, limit))
        await self._wait_and_maybe_fail()
        series = self._klines.get((symbol, interval.value))
        if series is None:
            series = self._klines.get((symbol, None), [])
        return list(series[-limit:])

    async def get_ticker_price(
        self,
        symbol: str | None = None,
    ) -> TickerPrice | list[TickerPrice]:
        await self._wait_and_maybe_fail()
        if symbol is not None:
            return TickerPrice(symbol, self._tickers[symbol].last_price)
        return [TickerPrice(t.symbol, t.last_price) for t in self._tickers.values()]

    async def get_ticker_24hr(self, symbol: str) -> Ticker24hr:
        await self._wait_and_maybe_fail()
        return self._tickers[symbol]

    async def _wait_and_maybe_fail(self) -> None:
        if self.gate is not None:
            await self.gate.wait()
        if self.failure is not None:
            raise self.failure

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

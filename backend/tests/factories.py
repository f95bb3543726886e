"""Shared test factories for creating domain objects.

Provides make_candle(), make_series() and make_ticker() with sensible
defaults so tests can focus on the values they care about, and a
RecordingDisplay that captures what a session pushes to the screen.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from dashboard.engine.indicators import IndicatorSummary
from dashboard.engine.reconciler import ChartSnapshot
from dashboard.exchange.types import Candle, Ticker24hr
from dashboard.presentation.display import Section

# 2026-02-10 00:00:00 UTC
DEFAULT_OPEN_TIME = 1_770_681_600_000
FOUR_HOURS_MS = 4 * 3_600_000
ONE_DAY_MS = 86_400_000


def make_candle(
    *,
    open_time: int = DEFAULT_OPEN_TIME,
    close: float = 100.0,
    open: float | None = None,
    high: float | None = None,
    low: float | None = None,
    volume: float = 10.0,
    step_ms: int = FOUR_HOURS_MS,
    number_of_trades: int = 50,
) -> Candle:
    """Create a Candle with sensible defaults around ``close``."""
    open_price = close if open is None else open
    return Candle(
        open_time=open_time,
        open=open_price,
        high=max(open_price, close) + 1.0 if high is None else high,
        low=max(min(open_price, close) - 1.0, 0.01) if low is None else low,
        close=close,
        volume=volume,
        close_time=open_time + step_ms - 1,
        quote_asset_volume=volume * close,
        number_of_trades=number_of_trades,
        taker_buy_base_asset_volume=volume / 2,
        taker_buy_quote_asset_volume=volume * close / 2,
    )


def make_series(
    closes: Sequence[float],
    *,
    start: int = DEFAULT_OPEN_TIME,
    step_ms: int = FOUR_HOURS_MS,
) -> list[Candle]:
    """Consecutive candles, one per close, ``step_ms`` apart."""
    return [
        make_candle(open_time=start + i * step_ms, close=c, step_ms=step_ms)
        for i, c in enumerate(closes)
    ]


def make_ticker(
    *,
    symbol: str = "BTCUSDT",
    last_price: float = 65_000.0,
    price_change: float = 100.0,
    price_change_percent: float = 0.15,
) -> Ticker24hr:
    """Create a Ticker24hr with sensible defaults."""
    return Ticker24hr(
        symbol=symbol,
        price_change=price_change,
        price_change_percent=price_change_percent,
        weighted_avg_price=last_price,
        prev_close_price=last_price - price_change,
        last_price=last_price,
        last_qty=0.01,
        bid_price=last_price - 0.5,
        bid_qty=1.0,
        ask_price=last_price + 0.5,
        ask_qty=1.0,
        open_price=last_price - price_change,
        high_price=last_price + 500,
        low_price=last_price - 500,
        volume=1234.5,
        quote_volume=1234.5 * last_price,
        open_time=DEFAULT_OPEN_TIME,
        close_time=DEFAULT_OPEN_TIME + ONE_DAY_MS - 1,
        count=98765,
    )


class RecordingDisplay:
    """Display that records every call for assertions."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, Any]] = []

    def show_indicators(self, symbol: str, summary: IndicatorSummary) -> None:
        self.calls.append(("show_indicators", symbol, summary))

    def show_chart(self, symbol: str, snapshot: ChartSnapshot) -> None:
        self.calls.append(("show_chart", symbol, snapshot))

    def redraw_chart(self, symbol: str, snapshot: ChartSnapshot) -> None:
        self.calls.append(("redraw_chart", symbol, snapshot))

    def show_price(self, symbol: str, ticker: Ticker24hr) -> None:
        self.calls.append(("show_price", symbol, ticker))

    def show_error(self, symbol: str, section: Section, message: str) -> None:
        self.calls.append(("show_error", symbol, (section, message)))

    def log_poll_error(
        self,
        symbol: str,
        section: Section,
        error: Exception,
    ) -> None:
        self.calls.append(("log_poll_error", symbol, (section, error)))

    def names(self) -> list[str]:
        return [name for name, _, _ in self.calls]

    def of(self, name: str) -> list[Any]:
        return [payload for n, _, payload in self.calls if n == name]

"""Exchange domain types shared across the dashboard.

Frozen dataclasses for value objects. Prices and volumes are floats
(the indicator engine works on floats); timestamps are epoch
milliseconds as the exchange reports them.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from dashboard.utils.time import ms_to_datetime


class KlineInterval(str, Enum):
    """Kline (candle) intervals accepted by the exchange."""

    M1 = "1m"
    M3 = "3m"
    M5 = "5m"
    M15 = "15m"
    M30 = "30m"
    H1 = "1h"
    H2 = "2h"
    H4 = "4h"
    H6 = "6h"
    H8 = "8h"
    H12 = "12h"
    D1 = "1d"
    D3 = "3d"
    W1 = "1w"
    MO1 = "1M"

    @property
    def is_intraday(self) -> bool:
        """True for intervals shorter than one day."""
        return self.value[-1] in ("m", "h")


# --- Value Objects (frozen) ---


@dataclass(frozen=True)
class Candle:
    """OHLCV kline for one time bucket of a traded symbol.

    Within one series candles are sorted ascending by ``open_time``
    and no two share an ``open_time``.
    """

    open_time: int
    open: float
    high: float
    low: float
    close: float
    volume: float
    close_time: int
    quote_asset_volume: float = 0.0
    number_of_trades: int = 0
    taker_buy_base_asset_volume: float = 0.0
    taker_buy_quote_asset_volume: float = 0.0

    @property
    def opened_at(self) -> datetime:
        return ms_to_datetime(self.open_time)

    @property
    def closed_at(self) -> datetime:
        return ms_to_datetime(self.close_time)


@dataclass(frozen=True)
class TickerPrice:
    """Latest traded price for a symbol."""

    symbol: str
    price: float


@dataclass(frozen=True)
class Ticker24hr:
    """Rolling 24-hour statistics used by the price cards."""

    symbol: str
    price_change: float
    price_change_percent: float
    weighted_avg_price: float
    prev_close_price: float
    last_price: float
    last_qty: float
    bid_price: float
    bid_qty: float
    ask_price: float
    ask_qty: float
    open_price: float
    high_price: float
    low_price: float
    volume: float
    quote_volume: float
    open_time: int
    close_time: int
    count: int

"""Binance REST payload to domain type converters.

Binance returns prices and volumes as decimal strings and klines as
positional arrays. All string-to-float conversion happens here.
"""

from __future__ import annotations

from typing import Any

from dashboard.exchange.errors import ExchangeDataError
from dashboard.exchange.types import Candle, Ticker24hr, TickerPrice

# Positional layout of one kline row; index 11 is unused by the exchange.
_KLINE_FIELDS = 11

_TICKER_24HR_FLOAT_FIELDS: dict[str, str] = {
    "price_change": "priceChange",
    "price_change_percent": "priceChangePercent",
    "weighted_avg_price": "weightedAvgPrice",
    "prev_close_price": "prevClosePrice",
    "last_price": "lastPrice",
    "last_qty": "lastQty",
    "bid_price": "bidPrice",
    "bid_qty": "bidQty",
    "ask_price": "askPrice",
    "ask_qty": "askQty",
    "open_price": "openPrice",
    "high_price": "highPrice",
    "low_price": "lowPrice",
    "volume": "volume",
    "quote_volume": "quoteVolume",
}


def kline_to_candle(row: list[Any]) -> Candle:
    """Convert one positional kline row to a Candle."""
    if not isinstance(row, list) or len(row) < _KLINE_FIELDS:
        raise ExchangeDataError(f"Malformed kline row: {row!r}")
    try:
        return Candle(
            open_time=int(row[0]),
            open=float(row[1]),
            high=float(row[2]),
            low=float(row[3]),
            close=float(row[4]),
            volume=float(row[5]),
            close_time=int(row[6]),
            quote_asset_volume=float(row[7]),
            number_of_trades=int(row[8]),
            taker_buy_base_asset_volume=float(row[9]),
            taker_buy_quote_asset_volume=float(row[10]),
        )
    except (TypeError, ValueError) as e:
        raise ExchangeDataError(f"Malformed kline row: {row!r}") from e


def klines_to_candles(payload: Any) -> list[Candle]:
    """Convert a klines response body to Candles, preserving order."""
    if not isinstance(payload, list):
        raise ExchangeDataError(
            f"Expected a list of klines, got {type(payload).__name__}",
        )
    return [kline_to_candle(row) for row in payload]


def ticker_price_from_json(data: Any) -> TickerPrice:
    """Convert a ``{"symbol": ..., "price": ...}`` object."""
    try:
        return TickerPrice(symbol=data["symbol"], price=float(data["price"]))
    except (KeyError, TypeError, ValueError) as e:
        raise ExchangeDataError(f"Malformed ticker price: {data!r}") from e


def ticker_24hr_from_json(data: Any) -> Ticker24hr:
    """Convert a 24hr ticker statistics object."""
    try:
        floats = {
            field: float(data[key])
            for field, key in _TICKER_24HR_FLOAT_FIELDS.items()
        }
        return Ticker24hr(
            symbol=data["symbol"],
            open_time=int(data["openTime"]),
            close_time=int(data["closeTime"]),
            count=int(data["count"]),
            **floats,
        )
    except (KeyError, TypeError, ValueError) as e:
        raise ExchangeDataError(f"Malformed 24hr ticker: {data!r}") from e

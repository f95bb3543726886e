"""Exchange abstraction layer (the Candle Source).

Re-exports all public types, protocols, and errors for convenient imports:
    from dashboard.exchange import Candle, CandleSource, ExchangeError
"""

from dashboard.exchange.candle_source import CandleSource
from dashboard.exchange.errors import (
    ExchangeAPIError,
    ExchangeConnectionError,
    ExchangeDataError,
    ExchangeError,
    ExchangeNotConnectedError,
    ExchangeTimeoutError,
)
from dashboard.exchange.types import Candle, KlineInterval, Ticker24hr, TickerPrice

__all__ = [
    "Candle",
    "CandleSource",
    "ExchangeAPIError",
    "ExchangeConnectionError",
    "ExchangeDataError",
    "ExchangeError",
    "ExchangeNotConnectedError",
    "ExchangeTimeoutError",
    "KlineInterval",
    "Ticker24hr",
    "TickerPrice",
]

"""Binance public REST API implementation."""

from dashboard.exchange.binance.client import BinanceCandleSource

__all__ = [
    "BinanceCandleSource",
]

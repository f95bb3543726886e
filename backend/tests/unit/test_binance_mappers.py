"""Tests for Binance payload mappers."""

from __future__ import annotations

import pytest

from dashboard.exchange.binance.mappers import (
    kline_to_candle,
    klines_to_candles,
    ticker_24hr_from_json,
    ticker_price_from_json,
)
from dashboard.exchange.errors import ExchangeDataError

RAW_KLINE = [
    1499040000000,
    "0.01634790",
    "0.80000000",
    "0.01575800",
    "0.01577100",
    "148976.11427815",
    1499644799999,
    "2434.19055334",
    308,
    "1756.87402397",
    "28.46694368",
    "0",
]

RAW_TICKER_24HR = {
    "symbol": "BNBBTC",
    "priceChange": "-94.99999800",
    "priceChangePercent": "-95.960",
    "weightedAvgPrice": "0.29628482",
    "prevClosePrice": "0.10002000",
    "lastPrice": "4.00000200",
    "lastQty": "200.00000000",
    "bidPrice": "4.00000000",
    "bidQty": "100.00000000",
    "askPrice": "4.00000200",
    "askQty": "100.00000000",
    "openPrice": "99.00000000",
    "highPrice": "100.00000000",
    "lowPrice": "0.10000000",
    "volume": "8913.30000000",
    "quoteVolume": "15.30000000",
    "openTime": 1499783499040,
    "closeTime": 1499869899040,
    "firstId": 28385,
    "lastId": 28460,
    "count": 76,
}


class TestKlineMapping:
    """Positional kline rows become Candles."""

    def test_all_fields_mapped(self) -> None:
        candle = kline_to_candle(RAW_KLINE)
        assert candle.open_time == 1499040000000
        assert candle.open == pytest.approx(0.0163479)
        assert candle.high == pytest.approx(0.8)
        assert candle.low == pytest.approx(0.015758)
        assert candle.close == pytest.approx(0.015771)
        assert candle.volume == pytest.approx(148976.11427815)
        assert candle.close_time == 1499644799999
        assert candle.quote_asset_volume == pytest.approx(2434.19055334)
        assert candle.number_of_trades == 308
        assert candle.taker_buy_base_asset_volume == pytest.approx(1756.87402397)
        assert candle.taker_buy_quote_asset_volume == pytest.approx(28.46694368)

    def test_prices_are_float(self) -> None:
        candle = kline_to_candle(RAW_KLINE)
        assert isinstance(candle.close, float)
        assert isinstance(candle.open_time, int)

    def test_order_preserved(self) -> None:
        second = [RAW_KLINE[0] + 60_000, *RAW_KLINE[1:]]
        candles = klines_to_candles([RAW_KLINE, second])
        assert [c.open_time for c in candles] == [RAW_KLINE[0], second[0]]

    def test_empty_payload(self) -> None:
        assert klines_to_candles([]) == []

    def test_short_row_rejected(self) -> None:
        with pytest.raises(ExchangeDataError, match="Malformed kline"):
            kline_to_candle(RAW_KLINE[:5])

    def test_non_numeric_rejected(self) -> None:
        bad = list(RAW_KLINE)
        bad[4] = "not-a-number"
        with pytest.raises(ExchangeDataError):
            kline_to_candle(bad)

    def test_non_list_payload_rejected(self) -> None:
        with pytest.raises(ExchangeDataError, match="list of klines"):
            klines_to_candles({"code": -1121, "msg": "Invalid symbol."})


class TestTickerMapping:
    """Ticker objects become typed values."""

    def test_ticker_price(self) -> None:
        ticker = ticker_price_from_json({"symbol": "BTCUSDT", "price": "65000.10"})
        assert ticker.symbol == "BTCUSDT"
        assert ticker.price == pytest.approx(65000.10)

    def test_ticker_price_missing_field(self) -> None:
        with pytest.raises(ExchangeDataError):
            ticker_price_from_json({"symbol": "BTCUSDT"})

    def test_ticker_24hr(self) -> None:
        ticker = ticker_24hr_from_json(RAW_TICKER_24HR)
        assert ticker.symbol == "BNBBTC"
        assert ticker.price_change == pytest.approx(-94.999998)
        assert ticker.price_change_percent == pytest.approx(-95.96)
        assert ticker.last_price == pytest.approx(4.000002)
        assert ticker.quote_volume == pytest.approx(15.3)
        assert ticker.open_time == 1499783499040
        assert ticker.count == 76

    def test_ticker_24hr_missing_field(self) -> None:
        data = dict(RAW_TICKER_24HR)
        del data["lastPrice"]
        with pytest.raises(ExchangeDataError, match="24hr ticker"):
            ticker_24hr_from_json(data)

"""Tests for the in-memory and demo candle sources."""

from __future__ import annotations

import asyncio

import pytest

from dashboard.exchange.candle_source import CandleSource
from dashboard.exchange.demo import DemoCandleSource, interval_ms, random_walk
from dashboard.exchange.errors import ExchangeConnectionError
from dashboard.exchange.fake import FakeCandleSource
from dashboard.exchange.types import KlineInterval
from tests.factories import make_candle, make_series, make_ticker


class TestFakeCandleSource:
    """FakeCandleSource serves canned and pushed data."""

    def test_satisfies_protocol(self) -> None:
        assert isinstance(FakeCandleSource(), CandleSource)

    async def test_context_manager(self) -> None:
        source = FakeCandleSource()
        async with source:
            assert source.is_connected is True
        assert source.is_connected is False

    async def test_returns_most_recent_limit(self) -> None:
        source = FakeCandleSource(klines={"BTCUSDT": make_series([1.0, 2.0, 3.0])})
        candles = await source.get_klines("BTCUSDT", "4h", 2)
        assert [c.close for c in candles] == [2.0, 3.0]
        assert source.kline_requests == [("BTCUSDT", "4h", 2)]

    async def test_per_interval_data(self) -> None:
        source = FakeCandleSource()
        source.set_klines("BTCUSDT", make_series([1.0]), "1d")
        source.set_klines("BTCUSDT", make_series([9.0, 8.0]), "4h")
        assert [c.close for c in await source.get_klines("BTCUSDT", "1d", 10)] == [1.0]
        assert len(await source.get_klines("BTCUSDT", "4h", 10)) == 2

    async def test_unknown_symbol_is_empty(self) -> None:
        assert await FakeCandleSource().get_klines("NOPE", "1d", 5) == []

    async def test_push_candle_revises_or_appends(self) -> None:
        series = make_series([1.0, 2.0])
        source = FakeCandleSource(klines={"BTCUSDT": series})
        source.push_candle("BTCUSDT", make_candle(open_time=series[1].open_time, close=2.5))
        source.push_candle(
            "BTCUSDT", make_candle(open_time=series[1].open_time + 1, close=3.0)
        )
        candles = await source.get_klines("BTCUSDT", "4h", 10)
        assert [c.close for c in candles] == [1.0, 2.5, 3.0]

    async def test_failure_raises(self) -> None:
        source = FakeCandleSource()
        source.failure = ExchangeConnectionError("down")
        with pytest.raises(ExchangeConnectionError):
            await source.get_klines("BTCUSDT", "1d", 1)

    async def test_gate_holds_fetch(self) -> None:
        source = FakeCandleSource(klines={"BTCUSDT": make_series([1.0])})
        source.gate = asyncio.Event()
        task = asyncio.create_task(source.get_klines("BTCUSDT", "4h", 1))
        await asyncio.sleep(0)
        assert not task.done()
        source.gate.set()
        assert len(await task) == 1

    async def test_tickers(self) -> None:
        source = FakeCandleSource(tickers={"BTCUSDT": make_ticker(last_price=10.0)})
        assert (await source.get_ticker_24hr("BTCUSDT")).last_price == 10.0
        price = await source.get_ticker_price("BTCUSDT")
        assert price.price == 10.0  # type: ignore[union-attr]
        assert len(await source.get_ticker_price()) == 1  # type: ignore[arg-type]


class TestDemoCandleSource:
    """Generated data keeps moving between requests."""

    def test_random_walk_is_contiguous(self) -> None:
        import random

        candles = random_walk(100.0, 10, "4h", 10**12, random.Random(1))
        step = interval_ms("4h")
        assert len(candles) == 10
        assert all(
            b.open_time - a.open_time == step
            for a, b in zip(candles, candles[1:], strict=False)
        )
        assert candles[-1].open_time <= 10**12
        assert all(c.low <= min(c.open, c.close) for c in candles)
        assert all(c.high >= max(c.open, c.close) for c in candles)

    async def test_history_and_ticker_available(self) -> None:
        source = DemoCandleSource(["BTCUSDT"], seed=7)
        daily = await source.get_klines("BTCUSDT", KlineInterval.D1, 100)
        assert len(daily) == 100
        ticker = await source.get_ticker_24hr("BTCUSDT")
        assert ticker.symbol == "BTCUSDT"

    async def test_extra_intervals_generated(self) -> None:
        source = DemoCandleSource(["ETHUSDT"], intervals=["1h"], seed=3)
        assert len(await source.get_klines("ETHUSDT", "1h", 50)) == 50

    async def test_series_advances_per_request(self) -> None:
        source = DemoCandleSource(["BTCUSDT"], seed=11)
        first = await source.get_klines("BTCUSDT", "4h", 2)
        second = await source.get_klines("BTCUSDT", "4h", 2)
        assert first != second
        assert second[-1].open_time >= first[-1].open_time

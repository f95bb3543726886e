"""Generated market data for running the dashboard without network access.

DemoCandleSource serves a random-walk history per symbol and advances
it on every kline request: usually the newest candle is revised, and
now and then a new candle opens. This exercises the same revise /
append / evict paths the live exchange does.
"""

from __future__ import annotations

import random
from collections.abc import Sequence

from dashboard.exchange.fake import FakeCandleSource
from dashboard.exchange.types import Candle, KlineInterval, Ticker24hr
from dashboard.utils.time import datetime_to_ms, utc_now

_INTERVAL_MS: dict[KlineInterval, int] = {
    KlineInterval.M1: 60_000,
    KlineInterval.M3: 3 * 60_000,
    KlineInterval.M5: 5 * 60_000,
    KlineInterval.M15: 15 * 60_000,
    KlineInterval.M30: 30 * 60_000,
    KlineInterval.H1: 3_600_000,
    KlineInterval.H2: 2 * 3_600_000,
    KlineInterval.H4: 4 * 3_600_000,
    KlineInterval.H6: 6 * 3_600_000,
    KlineInterval.H8: 8 * 3_600_000,
    KlineInterval.H12: 12 * 3_600_000,
    KlineInterval.D1: 86_400_000,
    KlineInterval.D3: 3 * 86_400_000,
    KlineInterval.W1: 7 * 86_400_000,
    KlineInterval.MO1: 30 * 86_400_000,
}

HISTORY_SIZE = 300
NEW_CANDLE_PROBABILITY = 0.2


def interval_ms(interval: KlineInterval | str) -> int:
    """Approximate length of one candle in milliseconds."""
    return _INTERVAL_MS[KlineInterval(interval)]


def random_walk(
    start_price: float,
    count: int,
    interval: KlineInterval | str,
    end_ms: int,
    rng: random.Random,
) -> list[Candle]:
    """``count`` consecutive candles whose last one opens before ``end_ms``."""
    step = interval_ms(interval)
    first_open = (end_ms // step - count + 1) * step
    candles: list[Candle] = []
    price = start_price
    for i in range(count):
        open_price = price
        close = max(open_price * (1 + rng.gauss(0, 0.01)), 0.0001)
        high = max(open_price, close) * (1 + abs(rng.gauss(0, 0.003)))
        low = min(open_price, close) * (1 - abs(rng.gauss(0, 0.003)))
        volume = abs(rng.gauss(1000, 250))
        open_time = first_open + i * step
        candles.append(
            Candle(
                open_time=open_time,
                open=open_price,
                high=high,
                low=low,
                close=close,
                volume=volume,
                close_time=open_time + step - 1,
                quote_asset_volume=volume * close,
                number_of_trades=int(volume),
            )
        )
        price = close
    return candles


class DemoCandleSource(FakeCandleSource):
    """FakeCandleSource whose series keep moving between requests."""

    def __init__(
        self,
        symbols: Sequence[str],
        intervals: Sequence[KlineInterval | str] = (),
        seed: int | None = None,
    ) -> None:
        super().__init__()
        self._rng = random.Random(seed)
        self._symbols = list(symbols)
        generated = {KlineInterval.D1, KlineInterval.H4}
        generated.update(KlineInterval(i) for i in intervals)
        now_ms = datetime_to_ms(utc_now())
        for symbol in self._symbols:
            start = self._rng.uniform(1, 50_000)
            for interval in sorted(generated, key=interval_ms):
                self.set_klines(
                    symbol,
                    random_walk(start, HISTORY_SIZE, interval, now_ms, self._rng),
                    interval,
                )
            self._refresh_ticker(symbol)

    async def get_klines(
        self,
        symbol: str,
        interval: KlineInterval | str,
        limit: int = 100,
    ) -> list[Candle]:
        self._advance(symbol, KlineInterval(interval))
        return await super().get_klines(symbol, interval, limit)

    def _advance(self, symbol: str, interval: KlineInterval) -> None:
        series = self._klines.get((symbol, interval.value))
        if not series:
            return
        last = series[-1]
        if self._rng.random() < NEW_CANDLE_PROBABILITY:
            (candle,) = random_walk(
                last.close,
                1,
                interval,
                last.open_time + interval_ms(interval),
                self._rng,
            )
        else:
            close = max(last.close * (1 + self._rng.gauss(0, 0.002)), 0.0001)
            candle = Candle(
                open_time=last.open_time,
                open=last.open,
                high=max(last.high, close),
                low=min(last.low, close),
                close=close,
                volume=last.volume + abs(self._rng.gauss(10, 3)),
                close_time=last.close_time,
                quote_asset_volume=last.quote_asset_volume,
                number_of_trades=last.number_of_trades + 1,
            )
        self.push_candle(symbol, candle, interval)
        self._refresh_ticker(symbol)

    def _refresh_ticker(self, symbol: str) -> None:
        daily = self._klines[(symbol, KlineInterval.D1.value)]
        intraday = self._klines[(symbol, KlineInterval.H4.value)]
        last = intraday[-1]
        window = intraday[-6:]
        prev_close = daily[-2].close if len(daily) > 1 else daily[-1].open
        change = last.close - prev_close
        volume = sum(c.volume for c in window)
        self.set_ticker(
            Ticker24hr(
                symbol=symbol,
                price_change=change,
                price_change_percent=change / prev_close * 100,
                weighted_avg_price=sum(c.close for c in window) / len(window),
                prev_close_price=prev_close,
                last_price=last.close,
                last_qty=1.0,
                bid_price=last.close * 0.9999,
                bid_qty=1.0,
                ask_price=last.close * 1.0001,
                ask_qty=1.0,
                open_price=window[0].open,
                high_price=max(c.high for c in window),
                low_price=min(c.low for c in window),
                volume=volume,
                quote_volume=sum(c.quote_asset_volume for c in window),
                open_time=window[0].open_time,
                close_time=last.close_time,
                count=sum(c.number_of_trades for c in window),
            )
        )


def demo_source(
    symbols: Sequence[str],
    intervals: Sequence[KlineInterval | str] = (),
    seed: int | None = None,
) -> DemoCandleSource:
    return DemoCandleSource(symbols, intervals, seed)

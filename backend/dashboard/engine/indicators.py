"""Technical indicators over a closing-price series.

Pure functions: no state is retained between calls and the input is
never mutated. Insufficient data is not an error; every function
returns an empty result instead, and callers show "not enough data".

Index alignment:
- sma:  len(prices) - period + 1 values, value i covers prices[i:i+period]
- ema:  same length as prices; indices < period - 1 are None
- rsi:  len(prices) - period values
- macd: three equal-length sequences aligned to the end of prices
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from dashboard.exchange.types import Candle


def _check_period(name: str, period: int) -> None:
    if period < 1:
        raise ValueError(f"{name} period must be >= 1, got {period}")


def closes(candles: Iterable[Candle]) -> list[float]:
    """Price series (closing prices) index-aligned with ``candles``."""
    return [c.close for c in candles]


def sma(prices: Sequence[float], period: int) -> list[float]:
    """Simple moving average, each window summed independently."""
    _check_period("SMA", period)
    if len(prices) < period:
        return []
    return [
        sum(prices[i : i + period]) / period
        for i in range(len(prices) - period + 1)
    ]


def ema(prices: Sequence[float], period: int) -> list[float | None]:
    """Exponential moving average seeded with the SMA of the first window.

    The result has one slot per price. Slots before ``period - 1`` have
    no value yet and hold None.
    """
    _check_period("EMA", period)
    n = len(prices)
    if n < period:
        return []
    multiplier = 2 / (period + 1)
    values: list[float | None] = [None] * n
    prev = sum(prices[:period]) / period
    values[period - 1] = prev
    for i in range(period, n):
        prev = (prices[i] - prev) * multiplier + prev
        values[i] = prev
    return values


def _rsi_value(avg_gain: float, avg_loss: float) -> float:
    if avg_loss == 0:
        return 100.0
    rs = avg_gain / avg_loss
    return 100 - 100 / (1 + rs)


def rsi(prices: Sequence[float], period: int = 14) -> list[float]:
    """Relative Strength Index with Wilder smoothing. Values in [0, 100]."""
    _check_period("RSI", period)
    if len(prices) < period + 1:
        return []

    deltas = [prices[i] - prices[i - 1] for i in range(1, len(prices))]
    gains = [max(d, 0.0) for d in deltas]
    losses = [max(-d, 0.0) for d in deltas]

    avg_gain = sum(gains[:period]) / period
    avg_loss = sum(losses[:period]) / period
    values = [_rsi_value(avg_gain, avg_loss)]

    for i in range(period, len(deltas)):
        avg_gain = (avg_gain * (period - 1) + gains[i]) / period
        avg_loss = (avg_loss * (period - 1) + losses[i]) / period
        values.append(_rsi_value(avg_gain, avg_loss))
    return values


@dataclass(frozen=True)
class MACDValue:
    """One aligned MACD point."""

    macd: float
    signal: float
    histogram: float


@dataclass(frozen=True)
class MACDResult:
    """MACD line, signal line and histogram of identical length.

    The last element of each sequence corresponds to the last price.
    """

    macd_line: tuple[float, ...] = ()
    signal_line: tuple[float, ...] = ()
    histogram: tuple[float, ...] = ()

    def __post_init__(self) -> None:
        if not (
            len(self.macd_line) == len(self.signal_line) == len(self.histogram)
        ):
            raise ValueError("MACD sequences must have identical length")

    def __len__(self) -> int:
        return len(self.histogram)

    @property
    def is_empty(self) -> bool:
        return not self.histogram

    @property
    def latest(self) -> MACDValue | None:
        if self.is_empty:
            return None
        return MACDValue(
            macd=self.macd_line[-1],
            signal=self.signal_line[-1],
            histogram=self.histogram[-1],
        )


def _align_trailing(*series: Sequence[float]) -> list[tuple[float, ...]]:
    """Right-align sequences: keep the last ``min(len)`` items of each."""
    length = min(len(s) for s in series)
    if length == 0:
        return [() for _ in series]
    return [tuple(s[len(s) - length :]) for s in series]


def macd(
    prices: Sequence[float],
    short_period: int = 12,
    long_period: int = 26,
    signal_period: int = 9,
) -> MACDResult:
    """Moving Average Convergence/Divergence.

    Needs at least ``long_period + signal_period`` prices, otherwise the
    result is empty.
    """
    _check_period("MACD short", short_period)
    _check_period("MACD long", long_period)
    _check_period("MACD signal", signal_period)
    if len(prices) < long_period + signal_period:
        return MACDResult()

    ema_short = ema(prices, short_period)
    ema_long = ema(prices, long_period)

    macd_line: list[float] = []
    for short_value, long_value in zip(
        ema_short[long_period - 1 :], ema_long[long_period - 1 :], strict=True
    ):
        if short_value is None or long_value is None:
            continue
        macd_line.append(short_value - long_value)

    if len(macd_line) < signal_period:
        return MACDResult()

    signal_full = ema(macd_line, signal_period)
    signal_line = [v for v in signal_full if v is not None]
    histogram = [
        m - s for m, s in zip(macd_line[signal_period - 1 :], signal_line, strict=True)
    ]

    aligned_macd, aligned_signal, aligned_hist = _align_trailing(
        macd_line, signal_line, histogram
    )
    return MACDResult(
        macd_line=aligned_macd,
        signal_line=aligned_signal,
        histogram=aligned_hist,
    )


@dataclass(frozen=True)
class IndicatorSummary:
    """Latest indicator values for the summary cards.

    An indicator field is None when there were not enough candles for
    its window.
    """

    symbol: str
    candle_count: int
    last_close: float | None = None
    sma: float | None = None
    rsi: float | None = None
    macd: MACDValue | None = None
    sma_period: int = 20
    rsi_period: int = 14
    macd_periods: tuple[int, int, int] = (12, 26, 9)

    @property
    def has_sma(self) -> bool:
        return self.sma is not None

    @property
    def has_rsi(self) -> bool:
        return self.rsi is not None

    @property
    def has_macd(self) -> bool:
        return self.macd is not None


def summarize(
    symbol: str,
    candles: Sequence[Candle],
    config: Any = None,
) -> IndicatorSummary:
    """Compute the latest SMA/RSI/MACD for a candle history.

    ``config`` is an IndicatorConfig (or anything with the same
    attributes); defaults are SMA 20, RSI 14, MACD 12/26/9.
    """
    sma_period: int = getattr(config, "sma_period", 20)
    rsi_period: int = getattr(config, "rsi_period", 14)
    macd_periods = (
        getattr(config, "macd_short", 12),
        getattr(config, "macd_long", 26),
        getattr(config, "macd_signal", 9),
    )

    prices = closes(candles)
    sma_values = sma(prices, sma_period)
    rsi_values = rsi(prices, rsi_period)
    macd_result = macd(prices, *macd_periods)

    return IndicatorSummary(
        symbol=symbol,
        candle_count=len(prices),
        last_close=prices[-1] if prices else None,
        sma=sma_values[-1] if sma_values else None,
        rsi=rsi_values[-1] if rsi_values else None,
        macd=macd_result.latest,
        sma_period=sma_period,
        rsi_period=rsi_period,
        macd_periods=macd_periods,
    )

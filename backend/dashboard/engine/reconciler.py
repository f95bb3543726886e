"""Bounded, deduplicated candle series kept fresh by repeated polls.

Push-based: call reconcile() with each freshly fetched batch. Every
candle in the batch either revises the candle with the same open time,
is appended after the current tail, or is dropped as stale. The series
then evicts from the head until it fits its capacity.

The chart labels and values are kept in lock-step with the candles so
the display can redraw from a snapshot without re-deriving them.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable
from dataclasses import dataclass

import structlog

from dashboard.exchange.types import Candle, KlineInterval
from dashboard.utils.time import format_label

logger = structlog.get_logger()

DEFAULT_CAPACITY = 180


@dataclass(frozen=True)
class ChartSnapshot:
    """Display-ready projection of the series: one label and value per candle."""

    labels: tuple[str, ...] = ()
    values: tuple[float, ...] = ()

    def __len__(self) -> int:
        return len(self.values)


@dataclass(frozen=True)
class ReconcileResult:
    """Outcome of one reconcile() call."""

    updated: int = 0
    appended: int = 0
    dropped: int = 0
    evicted: int = 0

    @property
    def changed(self) -> bool:
        """True when the display needs a redraw."""
        return self.updated + self.appended > 0


class SeriesReconciler:
    """Owns the live candle series for one displayed chart.

    Invariants after every call: candles are strictly ascending by
    open_time, and ``len(labels) == len(values) == len(series) <= capacity``.
    Candles are never reordered; they are revised in place, appended at
    the tail or evicted from the head.
    """

    def __init__(
        self,
        capacity: int = DEFAULT_CAPACITY,
        interval: KlineInterval | str = KlineInterval.H4,
        symbol: str = "",
    ) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self.capacity = capacity
        self.interval = KlineInterval(interval)
        self.symbol = symbol
        self._series: deque[Candle] = deque()
        self._labels: deque[str] = deque()
        self._values: deque[float] = deque()

    def load(self, candles: Iterable[Candle]) -> ChartSnapshot:
        """Replace the series with an initial batch.

        The batch is sorted by open_time, duplicates keep the last
        record seen, and only the newest ``capacity`` candles are kept.
        """
        by_open_time: dict[int, Candle] = {}
        for candle in candles:
            by_open_time[candle.open_time] = candle
        ordered = sorted(by_open_time.values(), key=lambda c: c.open_time)

        self._series.clear()
        self._labels.clear()
        self._values.clear()
        for candle in ordered[-self.capacity :]:
            self._push(candle)

        logger.info(
            "Chart series loaded",
            symbol=self.symbol,
            candles=len(self._series),
            capacity=self.capacity,
        )
        return self.snapshot()

    def reconcile(self, candles: Iterable[Candle]) -> ReconcileResult:
        """Merge a freshly polled batch, in the order received."""
        updated = appended = dropped = 0

        for candle in candles:
            index = self._find(candle.open_time)
            if index is not None:
                if self._series[index].close != candle.close:
                    self._series[index] = candle
                    self._values[index] = candle.close
                    updated += 1
                continue

            last_open_time = self.last_open_time
            if last_open_time is None or candle.open_time > last_open_time:
                self._push(candle)
                appended += 1
            else:
                # Older than the tail with no exact match: stale or a gap.
                dropped += 1

        evicted = 0
        if updated or appended:
            while len(self._series) > self.capacity:
                self._series.popleft()
                self._labels.popleft()
                self._values.popleft()
                evicted += 1

        result = ReconcileResult(
            updated=updated,
            appended=appended,
            dropped=dropped,
            evicted=evicted,
        )
        logger.debug(
            "Chart series reconciled",
            symbol=self.symbol,
            updated=updated,
            appended=appended,
            dropped=dropped,
            evicted=evicted,
            size=len(self._series),
        )
        return result

    def snapshot(self) -> ChartSnapshot:
        """Immutable copy of the current labels and values."""
        return ChartSnapshot(labels=tuple(self._labels), values=tuple(self._values))

    @property
    def series(self) -> tuple[Candle, ...]:
        return tuple(self._series)

    @property
    def labels(self) -> tuple[str, ...]:
        return tuple(self._labels)

    @property
    def values(self) -> tuple[float, ...]:
        return tuple(self._values)

    @property
    def last_open_time(self) -> int | None:
        """open_time of the newest candle, or None when empty."""
        if not self._series:
            return None
        return self._series[-1].open_time

    def __len__(self) -> int:
        return len(self._series)

    def _push(self, candle: Candle) -> None:
        self._series.append(candle)
        self._labels.append(format_label(candle.open_time, self.interval.is_intraday))
        self._values.append(candle.close)

    def _find(self, open_time: int) -> int | None:
        """Index of the candle with ``open_time``, scanning from the tail.

        Polls revise recent candles, so the scan stops as soon as it
        passes below ``open_time``.
        """
        for index in range(len(self._series) - 1, -1, -1):
            current = self._series[index].open_time
            if current == open_time:
                return index
            if current < open_time:
                return None
        return None

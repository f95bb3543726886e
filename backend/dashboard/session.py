"""DashboardSession: one symbol's live view with an explicit lifecycle.

start() performs the initial loads and launches two repeating timers:
one refreshes the price card, the other polls recent klines and
reconciles them into the chart series. stop() cancels the timers.

Concurrency model (single event loop):
- Each timer tick spawns one poll task; a poll of the same kind that is
  still in flight makes the new tick a no-op, so at most one
  reconciliation mutates the series at a time.
- Fetching is the only suspension point; reconciliation runs to
  completion synchronously once data is available.
- In-flight fetches are not cancelled by stop(), but their results are
  discarded once the session is no longer live.
"""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import Callable, Coroutine, Sequence
from typing import Any, Self

import structlog

from dashboard.config import AppConfig
from dashboard.engine.indicators import IndicatorSummary, summarize
from dashboard.engine.reconciler import ReconcileResult, SeriesReconciler
from dashboard.exchange.candle_source import CandleSource
from dashboard.exchange.errors import ExchangeError
from dashboard.exchange.types import Ticker24hr
from dashboard.presentation.display import Display, Section
from dashboard.utils.logging import new_cycle_id

logger = structlog.get_logger()


class DashboardSession:
    """Owns the chart series, timers and poll state for one symbol."""

    def __init__(
        self,
        symbol: str,
        source: CandleSource,
        display: Display,
        config: AppConfig | None = None,
    ) -> None:
        self.symbol = symbol
        self._source = source
        self._display = display
        self._config = config if config is not None else AppConfig()
        self.reconciler = SeriesReconciler(
            capacity=self._config.chart.capacity,
            interval=self._config.chart.interval,
            symbol=symbol,
        )
        self.summary: IndicatorSummary | None = None
        self.ticker: Ticker24hr | None = None
        self._log = logger.bind(symbol=symbol)
        self._live = False
        self._chart_ready = False
        self._chart_in_flight = False
        self._price_in_flight = False
        self._timers: list[asyncio.Task[None]] = []
        self._pending: set[asyncio.Task[Any]] = set()

    @property
    def is_live(self) -> bool:
        return self._live

    @property
    def chart_ready(self) -> bool:
        """True once the initial chart load succeeded."""
        return self._chart_ready

    @property
    def pending_polls(self) -> int:
        return len(self._pending)

    # --- Lifecycle ---

    async def start(self) -> None:
        """Run the initial loads, then start the refresh timers."""
        if self._live:
            self._log.warning("Dashboard session already started")
            return
        self._live = True
        self._log.info("Dashboard session starting")

        _, chart_ok, _ = await asyncio.gather(
            self._load_indicators(),
            self._load_chart(),
            self._load_price(),
        )
        if not self._live:
            return

        polling = self._config.polling
        self._timers.append(
            asyncio.create_task(
                self._run_timer(polling.price_interval_ms, self.poll_price),
                name=f"{self.symbol}-price-timer",
            )
        )
        if chart_ok:
            self._timers.append(
                asyncio.create_task(
                    self._run_timer(polling.chart_interval_ms, self.poll_chart),
                    name=f"{self.symbol}-chart-timer",
                )
            )
        self._log.info(
            "Dashboard session started",
            timers=len(self._timers),
            price_interval_ms=polling.price_interval_ms,
            chart_interval_ms=polling.chart_interval_ms,
        )

    async def stop(self) -> None:
        """Cancel both timers. Late poll results will be discarded."""
        if not self._live and not self._timers:
            return
        self._live = False
        for timer in self._timers:
            timer.cancel()
        await asyncio.gather(*self._timers, return_exceptions=True)
        self._timers.clear()
        self._log.info("Dashboard session stopped", in_flight=len(self._pending))

    async def drain(self) -> None:
        """Wait for polls that are still in flight to finish."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def __aenter__(self) -> Self:
        await self.start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object | None,
    ) -> None:
        await self.stop()

    # --- Initial loads ---

    async def _load_indicators(self) -> bool:
        cfg = self._config.indicators
        try:
            candles = await self._source.get_klines(
                self.symbol, cfg.interval, cfg.history_limit
            )
        except ExchangeError as e:
            self._log.error("Indicator history unavailable", error=str(e))
            self._display.show_error(self.symbol, Section.INDICATORS, str(e))
            return False
        if not self._live:
            return False
        self.summary = summarize(self.symbol, candles, cfg)
        self._display.show_indicators(self.symbol, self.summary)
        return True

    async def _load_chart(self) -> bool:
        cfg = self._config.chart
        try:
            candles = await self._source.get_klines(
                self.symbol, cfg.interval, cfg.history_limit
            )
        except ExchangeError as e:
            self._log.error("Chart history unavailable", error=str(e))
            self._display.show_error(self.symbol, Section.CHART, str(e))
            return False
        if not self._live:
            return False
        snapshot = self.reconciler.load(candles)
        self._chart_ready = True
        self._display.show_chart(self.symbol, snapshot)
        return True

    async def _load_price(self) -> bool:
        try:
            ticker = await self._source.get_ticker_24hr(self.symbol)
        except ExchangeError as e:
            self._log.error("Price card unavailable", error=str(e))
            self._display.show_error(self.symbol, Section.PRICE, str(e))
            return False
        if not self._live:
            return False
        self.ticker = ticker
        self._display.show_price(self.symbol, ticker)
        return True

    # --- Polls ---

    async def poll_chart(self) -> ReconcileResult | None:
        """Fetch recent klines and merge them into the chart series.

        Returns None when the poll was skipped, failed, or arrived after
        the session stopped.
        """
        if not self._live:
            return None
        if self._chart_in_flight:
            self._log.debug("Chart poll still in flight, skipping tick")
            return None

        self._chart_in_flight = True
        try:
            cycle_id = new_cycle_id()
            cfg = self._config.chart
            try:
                candles = await self._source.get_klines(
                    self.symbol, cfg.interval, cfg.poll_limit
                )
            except ExchangeError as e:
                self._log.warning("Chart poll failed", cycle_id=cycle_id, error=str(e))
                if self._live:
                    self._display.log_poll_error(self.symbol, Section.CHART, e)
                return None

            if not self._live:
                self._log.info("Discarding chart poll after stop", cycle_id=cycle_id)
                return None

            result = self.reconciler.reconcile(candles)
            if result.changed:
                self._display.redraw_chart(self.symbol, self.reconciler.snapshot())
            return result
        finally:
            self._chart_in_flight = False

    async def poll_price(self) -> Ticker24hr | None:
        """Refresh the price card. Returns None when skipped or failed."""
        if not self._live:
            return None
        if self._price_in_flight:
            self._log.debug("Price poll still in flight, skipping tick")
            return None

        self._price_in_flight = True
        try:
            cycle_id = new_cycle_id()
            try:
                ticker = await self._source.get_ticker_24hr(self.symbol)
            except ExchangeError as e:
                self._log.warning("Price poll failed", cycle_id=cycle_id, error=str(e))
                if self._live:
                    self._display.log_poll_error(self.symbol, Section.PRICE, e)
                return None

            if not self._live:
                self._log.info("Discarding price poll after stop", cycle_id=cycle_id)
                return None

            self.ticker = ticker
            self._display.show_price(self.symbol, ticker)
            return ticker
        finally:
            self._price_in_flight = False

    # --- Timers ---

    async def _run_timer(
        self,
        period_ms: int,
        poll: Callable[[], Coroutine[Any, Any, Any]],
    ) -> None:
        """Spawn ``poll()`` every ``period_ms`` until cancelled."""
        period = period_ms / 1000
        while self._live:
            await asyncio.sleep(period)
            if not self._live:
                return
            self._spawn(poll())

    def _spawn(self, coro: Coroutine[Any, Any, Any]) -> None:
        task = asyncio.create_task(coro)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)


async def run_dashboard(
    symbols: Sequence[str],
    source: CandleSource,
    display: Display,
    config: AppConfig | None = None,
    stop_event: asyncio.Event | None = None,
) -> list[DashboardSession]:
    """Run one session per symbol on a shared source until stopped.

    Returns when ``stop_event`` is set, or runs until cancelled.
    """
    config = config if config is not None else AppConfig()
    stop_event = stop_event if stop_event is not None else asyncio.Event()
    sessions = [DashboardSession(s, source, display, config) for s in symbols]

    async with contextlib.AsyncExitStack() as stack:
        await stack.enter_async_context(source)
        for session in sessions:
            await stack.enter_async_context(session)
        logger.info("Dashboard running", symbols=list(symbols))
        await stop_event.wait()
    return sessions

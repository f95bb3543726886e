"""Terminal rendering of the dashboard using click."""

from __future__ import annotations

import click
import structlog

from dashboard.engine.indicators import IndicatorSummary
from dashboard.engine.reconciler import ChartSnapshot
from dashboard.exchange.types import Ticker24hr
from dashboard.presentation.display import Section

logger = structlog.get_logger()

NOT_ENOUGH_DATA = "not enough data"
SPARK_CHARS = "▁▂▃▄▅▆▇█"


def format_indicator_summary(summary: IndicatorSummary) -> list[str]:
    """Lines of the indicator card; missing values read "not enough data"."""
    short, long_, signal = summary.macd_periods
    lines = [f"Indicators ({summary.candle_count} candles)"]
    if summary.last_close is not None:
        lines.append(f"  Last close:  {summary.last_close:,.4f}")
    sma_text = f"{summary.sma:,.4f}" if summary.sma is not None else NOT_ENOUGH_DATA
    lines.append(f"  SMA({summary.sma_period}):     {sma_text}")
    rsi_text = f"{summary.rsi:.2f}" if summary.rsi is not None else NOT_ENOUGH_DATA
    lines.append(f"  RSI({summary.rsi_period}):     {rsi_text}")
    if summary.macd is not None:
        macd_text = (
            f"{summary.macd.macd:,.4f} signal {summary.macd.signal:,.4f} "
            f"hist {summary.macd.histogram:+,.4f}"
        )
    else:
        macd_text = NOT_ENOUGH_DATA
    lines.append(f"  MACD({short},{long_},{signal}): {macd_text}")
    return lines


def sparkline(values: tuple[float, ...] | list[float], width: int = 60) -> str:
    """Compress a value series into a one-line block-character chart."""
    if not values:
        return ""
    step = max(1, -(-len(values) // width))
    sampled = list(values[::step])
    low, high = min(sampled), max(sampled)
    span = high - low
    if span == 0:
        return SPARK_CHARS[0] * len(sampled)
    top = len(SPARK_CHARS) - 1
    return "".join(SPARK_CHARS[round((v - low) / span * top)] for v in sampled)


def format_chart(snapshot: ChartSnapshot) -> list[str]:
    if not snapshot.values:
        return ["Chart: no candles"]
    return [
        f"Chart {snapshot.labels[0]} .. {snapshot.labels[-1]} "
        f"({len(snapshot)} candles, last {snapshot.values[-1]:,.4f})",
        f"  {sparkline(snapshot.values)}",
    ]


def format_price(ticker: Ticker24hr) -> str:
    return (
        f"Price {ticker.last_price:,.4f} "
        f"({ticker.price_change:+,.4f} / {ticker.price_change_percent:+.2f}%) "
        f"H {ticker.high_price:,.4f} L {ticker.low_price:,.4f} "
        f"Vol {ticker.volume:,.2f}"
    )


class ConsoleDisplay:
    """Display implementation that echoes each update to the terminal."""

    def show_indicators(self, symbol: str, summary: IndicatorSummary) -> None:
        for line in [f"[{symbol}]", *format_indicator_summary(summary)]:
            click.echo(line)

    def show_chart(self, symbol: str, snapshot: ChartSnapshot) -> None:
        for line in format_chart(snapshot):
            click.echo(f"[{symbol}] {line}")

    def redraw_chart(self, symbol: str, snapshot: ChartSnapshot) -> None:
        self.show_chart(symbol, snapshot)

    def show_price(self, symbol: str, ticker: Ticker24hr) -> None:
        click.echo(f"[{symbol}] {format_price(ticker)}")

    def show_error(self, symbol: str, section: Section, message: str) -> None:
        click.secho(
            f"[{symbol}] {section.value} unavailable: {message}",
            fg="red",
            err=True,
        )

    def log_poll_error(
        self,
        symbol: str,
        section: Section,
        error: Exception,
    ) -> None:
        # Poll failures stay off the dashboard; the last good state remains.
        logger.warning(
            "Poll failed, keeping last state",
            symbol=symbol,
            section=section.value,
            error=str(error),
        )

"""Click CLI commands for the market-data dashboard."""

from __future__ import annotations

import asyncio
import contextlib
from typing import TYPE_CHECKING

import click

from dashboard.config import AppConfig
from dashboard.exchange.types import KlineInterval
from dashboard.utils.logging import setup_logging

if TYPE_CHECKING:
    from dashboard.exchange.candle_source import CandleSource
    from dashboard.exchange.types import Candle, Ticker24hr, TickerPrice

_INTERVAL_CHOICES = [i.value for i in KlineInterval]


def _make_source(
    config: AppConfig,
    offline: bool = False,
    symbols: list[str] | None = None,
) -> CandleSource:
    """Build the candle source: live Binance, or canned demo data."""
    if offline:
        from dashboard.exchange.demo import demo_source

        return demo_source(
            symbols or config.watchlist,
            (config.indicators.interval, config.chart.interval),
        )

    from dashboard.exchange.binance.client import BinanceCandleSource

    return BinanceCandleSource(config.exchange)


@click.group()
def cli() -> None:
    """Dashboard: polls exchange klines, computes indicators, keeps charts fresh."""


@cli.command()
@click.option(
    "--symbols",
    default=None,
    help="Comma-separated symbols (default: configured watchlist).",
)
@click.option(
    "--offline",
    is_flag=True,
    default=False,
    help="Use generated demo data instead of the exchange.",
)
def watch(symbols: str | None, offline: bool) -> None:
    """Run the live dashboard until interrupted (Ctrl-C)."""
    from dashboard.presentation.console import ConsoleDisplay
    from dashboard.session import run_dashboard

    config = AppConfig()
    setup_logging(level=config.log_level, log_format=config.log_format)
    selected = (
        [s.strip().upper() for s in symbols.split(",") if s.strip()]
        if symbols
        else config.watchlist
    )
    source = _make_source(config, offline, selected)

    click.echo(f"Watching {', '.join(selected)} (Ctrl-C to stop)")
    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(run_dashboard(selected, source, ConsoleDisplay(), config))
    click.echo("Dashboard stopped.")


@cli.command()
@click.argument("symbol")
@click.option(
    "--interval",
    type=click.Choice(_INTERVAL_CHOICES),
    default=None,
    help="Candle interval (default: configured indicator interval).",
)
@click.option("--limit", type=int, default=None, help="Candles of history.")
def indicators(symbol: str, interval: str | None, limit: int | None) -> None:
    """Compute SMA, RSI and MACD for SYMBOL once."""
    from dashboard.engine.indicators import summarize
    from dashboard.exchange.errors import ExchangeError
    from dashboard.presentation.console import format_indicator_summary

    config = AppConfig()
    cfg = config.indicators
    symbol = symbol.upper()

    async def _fetch() -> list[Candle]:
        async with _make_source(config) as source:
            return await source.get_klines(
                symbol, interval or cfg.interval, limit or cfg.history_limit
            )

    try:
        candles = asyncio.run(_fetch())
    except (ExchangeError, ValueError) as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"=== {symbol} ===")
    for line in format_indicator_summary(summarize(symbol, candles, cfg)):
        click.echo(line)


@cli.command()
@click.argument("symbol")
@click.option(
    "--interval",
    type=click.Choice(_INTERVAL_CHOICES),
    default="1d",
    help="Candle interval (default: 1d).",
)
@click.option("--limit", type=int, default=5, help="Number of candles (default: 5).")
def klines(symbol: str, interval: str, limit: int) -> None:
    """Print the most recent klines for SYMBOL."""
    from dashboard.exchange.errors import ExchangeError
    from dashboard.utils.time import format_timestamp

    config = AppConfig()
    symbol = symbol.upper()

    async def _fetch() -> list[Candle]:
        async with _make_source(config) as source:
            return await source.get_klines(symbol, interval, limit)

    try:
        candles = asyncio.run(_fetch())
    except (ExchangeError, ValueError) as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"{'Open time':<28} {'Open':>14} {'High':>14} {'Low':>14} "
               f"{'Close':>14} {'Volume':>16}")
    for c in candles:
        click.echo(
            f"{format_timestamp(c.opened_at):<28} {c.open:>14.4f} {c.high:>14.4f} "
            f"{c.low:>14.4f} {c.close:>14.4f} {c.volume:>16.4f}"
        )


@cli.command()
@click.argument("symbol", required=False)
def price(symbol: str | None) -> None:
    """Show 24h statistics for SYMBOL, or latest prices for the watchlist."""
    from dashboard.exchange.errors import ExchangeError
    from dashboard.presentation.console import format_price

    config = AppConfig()

    async def _fetch() -> Ticker24hr | TickerPrice | list[TickerPrice]:
        async with _make_source(config) as source:
            if symbol:
                return await source.get_ticker_24hr(symbol.upper())
            return await source.get_ticker_price()

    try:
        result = asyncio.run(_fetch())
    except (ExchangeError, ValueError) as e:
        raise click.ClickException(str(e)) from e

    if symbol:
        click.echo(f"[{symbol.upper()}] {format_price(result)}")
        return
    watched = {t.symbol: t for t in result if t.symbol in config.watchlist}
    for s in config.watchlist:
        ticker = watched.get(s)
        click.echo(f"{s:<12} {ticker.price:,.4f}" if ticker else f"{s:<12} not found")


@cli.command()
def config() -> None:
    """Show current configuration."""
    cfg = AppConfig()

    click.echo("=== Dashboard Configuration ===\n")

    click.echo(f"Log Level:    {cfg.log_level}")
    click.echo(f"Log Format:   {cfg.log_format}")
    click.echo("")

    click.echo("[Exchange]")
    click.echo(f"  Base URL:   {cfg.exchange.base_url}")
    click.echo(f"  Timeout:    {cfg.exchange.timeout_seconds}s")
    click.echo("")

    click.echo("[Polling]")
    click.echo(f"  Price Card: {cfg.polling.price_interval_ms} ms")
    click.echo(f"  Chart:      {cfg.polling.chart_interval_ms} ms")
    click.echo("")

    click.echo("[Chart]")
    click.echo(f"  Interval:   {cfg.chart.interval.value}")
    click.echo(f"  History:    {cfg.chart.history_limit} candles")
    click.echo(f"  Capacity:   {cfg.chart.capacity} candles")
    click.echo("")

    ind = cfg.indicators
    click.echo("[Indicators]")
    click.echo(f"  Interval:   {ind.interval.value}")
    click.echo(f"  History:    {ind.history_limit} candles")
    click.echo(f"  SMA:        {ind.sma_period}")
    click.echo(f"  RSI:        {ind.rsi_period}")
    click.echo(f"  MACD:       {ind.macd_short}/{ind.macd_long}/{ind.macd_signal}")
    click.echo("")

    click.echo(f"Watchlist:    {', '.join(cfg.watchlist)}")

"""Display protocol: what the dashboard session pushes to a renderer.

Initial loads call show_* (or show_error when the section cannot be
drawn); successful polls call redraw_chart/show_price; failed polls
call log_poll_error and leave the last good state on screen.
"""

from __future__ import annotations

from enum import Enum
from typing import Protocol, runtime_checkable

from dashboard.engine.indicators import IndicatorSummary
from dashboard.engine.reconciler import ChartSnapshot
from dashboard.exchange.types import Ticker24hr


class Section(str, Enum):
    """Independently refreshed areas of one symbol's view."""

    INDICATORS = "indicators"
    CHART = "chart"
    PRICE = "price"


@runtime_checkable
class Display(Protocol):
    """Renderer for one or more symbols' dashboard views."""

    def show_indicators(self, symbol: str, summary: IndicatorSummary) -> None:
        """Render the indicator summary card."""
        ...

    def show_chart(self, symbol: str, snapshot: ChartSnapshot) -> None:
        """Render the chart for the first time."""
        ...

    def redraw_chart(self, symbol: str, snapshot: ChartSnapshot) -> None:
        """Redraw the chart after a poll changed the series."""
        ...

    def show_price(self, symbol: str, ticker: Ticker24hr) -> None:
        """Render or refresh the price card."""
        ...

    def show_error(self, symbol: str, section: Section, message: str) -> None:
        """Replace a section with a blocking error after a failed initial load."""
        ...

    def log_poll_error(
        self,
        symbol: str,
        section: Section,
        error: Exception,
    ) -> None:
        """Record a failed poll. The section keeps its last good state."""
        ...

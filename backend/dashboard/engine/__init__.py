"""Engine layer: indicator calculation and chart series reconciliation."""

from dashboard.engine.indicators import (
    IndicatorSummary,
    MACDResult,
    MACDValue,
    closes,
    ema,
    macd,
    rsi,
    sma,
    summarize,
)
from dashboard.engine.reconciler import ChartSnapshot, ReconcileResult, SeriesReconciler

__all__ = [
    "ChartSnapshot",
    "IndicatorSummary",
    "MACDResult",
    "MACDValue",
    "ReconcileResult",
    "SeriesReconciler",
    "closes",
    "ema",
    "macd",
    "rsi",
    "sma",
    "summarize",
]

"""Pydantic Settings configuration models.

3-tier config hierarchy (lowest to highest priority):
1. Pydantic defaults (in code below)
2. .env file (loaded by Pydantic Settings)
3. Environment variables (e.g., DASH_CHART__CAPACITY=240)
"""

from __future__ import annotations

import re

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from dashboard.exchange.types import KlineInterval

VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})
VALID_LOG_FORMATS = frozenset({"console", "json"})
MAX_HISTORY_LIMIT = 1000
_SYMBOL_PATTERN = re.compile(r"^[A-Z0-9]{2,20}$")


class ExchangeConfig(BaseModel):
    """Public exchange REST endpoint."""

    base_url: str = "https://api.binance.com/api/v3"
    timeout_seconds: float = Field(default=10.0, gt=0, le=60)


class PollingConfig(BaseModel):
    """Refresh periods of the two dashboard timers, in milliseconds."""

    price_interval_ms: int = Field(default=5000, ge=1000, le=600_000)
    chart_interval_ms: int = Field(default=30_000, ge=1000, le=3_600_000)


class ChartConfig(BaseModel):
    """Live price chart: candle interval, initial history and capacity."""

    interval: KlineInterval = KlineInterval.H4
    history_limit: int = Field(default=180, ge=1, le=MAX_HISTORY_LIMIT)
    poll_limit: int = Field(default=2, ge=1, le=MAX_HISTORY_LIMIT)
    capacity: int = Field(default=180, ge=1, le=MAX_HISTORY_LIMIT)


class IndicatorConfig(BaseModel):
    """Indicator periods and the candle history they are computed over."""

    interval: KlineInterval = KlineInterval.D1
    history_limit: int = Field(default=100, ge=1, le=MAX_HISTORY_LIMIT)
    sma_period: int = Field(default=20, ge=1, le=200)
    rsi_period: int = Field(default=14, ge=1, le=100)
    macd_short: int = Field(default=12, ge=1, le=100)
    macd_long: int = Field(default=26, ge=2, le=200)
    macd_signal: int = Field(default=9, ge=1, le=100)

    @model_validator(mode="after")
    def validate_macd_periods(self) -> IndicatorConfig:
        if self.macd_short >= self.macd_long:
            raise ValueError(
                f"macd_short must be less than macd_long, "
                f"got {self.macd_short} >= {self.macd_long}"
            )
        return self


class AppConfig(BaseSettings):
    """Top-level dashboard configuration.

    Env var examples:
        DASH_LOG_LEVEL=DEBUG
        DASH_POLLING__CHART_INTERVAL_MS=60000
        DASH_CHART__INTERVAL=1h
        DASH_WATCHLIST='["BTCUSDT","ETHUSDT"]'
    """

    model_config = SettingsConfigDict(
        env_prefix="DASH_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "INFO"
    log_format: str = "console"
    exchange: ExchangeConfig = ExchangeConfig()
    polling: PollingConfig = PollingConfig()
    chart: ChartConfig = ChartConfig()
    indicators: IndicatorConfig = IndicatorConfig()
    watchlist: list[str] = Field(
        default=["BTCUSDT", "ETHUSDT", "FILUSDT", "FETUSDT", "ADAUSDT"],
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        v = v.upper()
        if v not in VALID_LOG_LEVELS:
            raise ValueError(
                f"log_level must be one of {sorted(VALID_LOG_LEVELS)}, got {v}"
            )
        return v

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        v = v.lower()
        if v not in VALID_LOG_FORMATS:
            raise ValueError(
                f"log_format must be one of {sorted(VALID_LOG_FORMATS)}, got {v}"
            )
        return v

    @field_validator("watchlist")
    @classmethod
    def validate_watchlist(cls, v: list[str]) -> list[str]:
        if len(v) == 0:
            raise ValueError("Watchlist must not be empty")
        for symbol in v:
            if not _SYMBOL_PATTERN.match(symbol):
                raise ValueError(f"Invalid symbol: {symbol}")
        return v

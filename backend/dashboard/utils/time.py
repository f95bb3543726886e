"""UTC helpers and epoch-millisecond conversions.

All times are UTC. The exchange reports candle boundaries as integer
epoch milliseconds; these helpers convert them for logs and chart labels.
"""

from __future__ import annotations

from datetime import UTC, datetime

DAILY_LABEL_FORMAT = "%Y-%m-%d"
INTRADAY_LABEL_FORMAT = "%Y-%m-%d %H:%M"


def utc_now() -> datetime:
    """Return the current UTC datetime, timezone-aware."""
    return datetime.now(UTC)


def format_timestamp(dt: datetime) -> str:
    """Format a datetime as ISO 8601 with microsecond precision and Z suffix.

    Output format: YYYY-MM-DDTHH:MM:SS.ffffffZ
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    utc_dt = dt.astimezone(UTC)
    return utc_dt.strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def parse_timestamp(s: str) -> datetime:
    """Parse an ISO 8601 timestamp with Z suffix back to UTC datetime."""
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    return datetime.fromisoformat(s)


def ms_to_datetime(ms: int) -> datetime:
    """Convert epoch milliseconds to a timezone-aware UTC datetime."""
    return datetime.fromtimestamp(ms / 1000, tz=UTC)


def datetime_to_ms(dt: datetime) -> int:
    """Convert a datetime to epoch milliseconds. Naive values are UTC."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return int(dt.timestamp() * 1000)


def format_label(ms: int, intraday: bool = True) -> str:
    """Chart axis label for a candle opening at ``ms``.

    Daily and longer candles show only the date; intraday candles
    include the hour and minute.
    """
    fmt = INTRADAY_LABEL_FORMAT if intraday else DAILY_LABEL_FORMAT
    return ms_to_datetime(ms).strftime(fmt)

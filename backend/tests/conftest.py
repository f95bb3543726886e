"""Shared test fixtures for the dashboard."""

from __future__ import annotations

import os
from collections.abc import AsyncIterator
from types import SimpleNamespace
from typing import Any

import pytest

from tests.factories import RecordingDisplay


@pytest.fixture
def display() -> RecordingDisplay:
    return RecordingDisplay()


@pytest.fixture
def live_exchange_config() -> Any:
    """Exchange config for live API tests.

    Skips the test unless DASH_LIVE_TESTS=1 is set.
    """
    if os.environ.get("DASH_LIVE_TESTS", "") != "1":
        pytest.skip("Live exchange tests disabled. Set DASH_LIVE_TESTS=1.")

    return SimpleNamespace(
        base_url=os.environ.get(
            "DASH_EXCHANGE__BASE_URL", "https://api.binance.com/api/v3"
        ),
        timeout_seconds=10.0,
    )


@pytest.fixture
async def binance_source(live_exchange_config: Any) -> AsyncIterator[Any]:
    """Create and connect a BinanceCandleSource for integration tests."""
    from dashboard.exchange.binance.client import BinanceCandleSource

    source = BinanceCandleSource(live_exchange_config)
    await source.connect()
    try:
        yield source
    finally:
        await source.disconnect()

"""Tests for the exchange error hierarchy."""

from __future__ import annotations

from dashboard.exchange.errors import (
    ExchangeAPIError,
    ExchangeConnectionError,
    ExchangeDataError,
    ExchangeError,
    ExchangeNotConnectedError,
    ExchangeTimeoutError,
)


class TestExchangeErrorHierarchy:
    """All errors inherit from ExchangeError."""

    def test_connection_error_is_exchange_error(self) -> None:
        assert issubclass(ExchangeConnectionError, ExchangeError)

    def test_timeout_error_is_exchange_error(self) -> None:
        assert issubclass(ExchangeTimeoutError, ExchangeError)

    def test_api_error_is_exchange_error(self) -> None:
        assert issubclass(ExchangeAPIError, ExchangeError)

    def test_data_error_is_exchange_error(self) -> None:
        assert issubclass(ExchangeDataError, ExchangeError)

    def test_not_connected_error_is_exchange_error(self) -> None:
        assert issubclass(ExchangeNotConnectedError, ExchangeError)


class TestExchangeAPIError:
    """ExchangeAPIError stores status code, message and remote code."""

    def test_status_code_and_message(self) -> None:
        err = ExchangeAPIError(status_code=429, message="Too many requests")
        assert err.status_code == 429
        assert err.message == "Too many requests"
        assert err.code is None
        assert str(err) == "Exchange API error 429: Too many requests"

    def test_remote_code_in_message(self) -> None:
        err = ExchangeAPIError(400, "Invalid symbol.", code=-1121)
        assert err.code == -1121
        assert str(err) == "Exchange API error 400 (code -1121): Invalid symbol."

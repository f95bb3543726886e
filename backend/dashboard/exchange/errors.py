"""Exchange error hierarchy.

All Candle Source failures inherit from ExchangeError, so the session
and the CLI can catch them at the fetch boundary. The indicator engine
and the reconciler never raise these.
"""

from __future__ import annotations


class ExchangeError(Exception):
    """Base exception for all exchange-related errors."""


class ExchangeConnectionError(ExchangeError):
    """Transport failures: DNS, refused connection, dropped socket."""


class ExchangeTimeoutError(ExchangeError):
    """Request timeout when communicating with the exchange."""


class ExchangeAPIError(ExchangeError):
    """Non-success HTTP response from the exchange.

    Stores the HTTP status code, the human-readable message and, when
    the response body carried one, the exchange's own error code.
    """

    def __init__(
        self,
        status_code: int,
        message: str,
        code: int | None = None,
    ) -> None:
        self.status_code = status_code
        self.message = message
        self.code = code
        detail = f"Exchange API error {status_code}"
        if code is not None:
            detail += f" (code {code})"
        super().__init__(f"{detail}: {message}")


class ExchangeDataError(ExchangeError):
    """Response payload could not be mapped to domain types."""


class ExchangeNotConnectedError(ExchangeError):
    """Method called before connect() was called."""

"""Error kinds raised by drivers and the request layer."""

from __future__ import annotations

from typing import Any


class CoinfeedError(Exception):
    """Base class for all coinfeed errors."""

    def __init__(
        self,
        message: str,
        *,
        driver: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.driver = driver
        self.details = details or {}

    def __str__(self) -> str:
        if self.driver:
            return f"[{self.driver}] {self.message}"
        return self.message


class FetchFailed(CoinfeedError):
    """Network, HTTP status or payload decode failure."""

    def __init__(
        self,
        message: str,
        *,
        url: str | None = None,
        driver: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, driver=driver, details=details)
        self.url = url


class MalformedSymbol(CoinfeedError, ValueError):
    """A market symbol could not be split into exactly base and quote."""

    def __init__(self, symbol: Any, delimiter: str, *, driver: str | None = None):
        super().__init__(
            f"Cannot split market symbol {symbol!r} on {delimiter!r}",
            driver=driver,
        )
        self.symbol = symbol
        self.delimiter = delimiter


class UnresolvedHistoricalWindow(FetchFailed):
    """No indexed block was found inside the lookup window."""

    def __init__(
        self,
        timestamp: int,
        window: int,
        *,
        url: str | None = None,
        driver: str | None = None,
    ):
        super().__init__(
            f"No block indexed between {timestamp} and {timestamp + window}",
            url=url,
            driver=driver,
            details={"timestamp": timestamp, "window": window},
        )
        self.timestamp = timestamp
        self.window = window

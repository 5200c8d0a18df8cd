"""Protocol definition for ticker drivers."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any, ClassVar, Protocol


_NUMERIC_FIELDS = (
    "open",
    "high",
    "low",
    "close",
    "base_volume",
    "quote_volume",
    "bid",
    "ask",
)


@dataclass(frozen=True, slots=True)
class Ticker:
    """Normalized statistics of a single market pair.

    Numeric fields are ``None`` when the source does not report them and
    ``nan`` when the source reported something that is not a number.
    """

    base: str
    quote: str
    base_name: str | None = None
    quote_name: str | None = None
    base_reference: str | None = None
    quote_reference: str | None = None
    open: float | None = None
    high: float | None = None
    low: float | None = None
    close: float | None = None
    base_volume: float | None = None
    quote_volume: float | None = None
    bid: float | None = None
    ask: float | None = None

    def __post_init__(self) -> None:
        for name in ("base", "quote"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value:
                raise ValueError(f"Ticker.{name} must be a non-empty string, got {value!r}")

        for name in _NUMERIC_FIELDS:
            value = getattr(self, name)
            if value is None or type(value) is float:
                continue
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise TypeError(f"Ticker.{name} must be a float, got {type(value).__name__}")
            # frozen, so bypass __setattr__
            object.__setattr__(self, name, float(value))

    @property
    def pair(self) -> str:
        return f"{self.base}/{self.quote}"

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls))


@dataclass(frozen=True, slots=True)
class DriverSupports:
    """Capabilities a driver declares."""

    specific_markets: bool = False


class Driver(Protocol):
    """Protocol for ticker drivers."""

    name: str
    supports: ClassVar[DriverSupports]
    markets: list[str] | None

    async def fetch_tickers(self, *, deterministic: bool = False) -> list[Ticker]:
        """Fetch a snapshot of every ticker the source reports.

        Args:
            deterministic: Pin time-dependent queries to fixed values so the
                requests can be matched against stored fixtures

        Returns:
            List of Ticker objects

        Raises:
            FetchFailed: If any request or payload decode fails
            MalformedSymbol: If a market symbol cannot be split
        """
        ...

    async def close(self) -> None:
        """Release the HTTP session if the driver owns one."""
        ...

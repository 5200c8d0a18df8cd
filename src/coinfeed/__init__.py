"""coinfeed: normalized market tickers from exchange and DEX APIs."""

from .settings import Settings
from .errors import CoinfeedError, FetchFailed, MalformedSymbol, UnresolvedHistoricalWindow
from .drivers import Driver, Ticker, create_driver, parse_to_float, split_market_symbol

__all__ = [
    "Settings",
    "CoinfeedError",
    "FetchFailed",
    "MalformedSymbol",
    "UnresolvedHistoricalWindow",
    "Driver",
    "Ticker",
    "create_driver",
    "parse_to_float",
    "split_market_symbol",
]

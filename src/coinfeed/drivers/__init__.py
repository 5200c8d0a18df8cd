"""Ticker drivers and the shared normalization layer."""

from .protocol import Driver, DriverSupports, Ticker
from .normalization import UNKNOWN, is_unknown, parse_to_float, split_market_symbol
from .request import HttpRequester, ProxyConfig, RequestDescriptor
from .base import BaseDriver
from .factory import DRIVERS, create_driver

__all__ = [
    "Driver",
    "DriverSupports",
    "Ticker",
    "UNKNOWN",
    "is_unknown",
    "parse_to_float",
    "split_market_symbol",
    "HttpRequester",
    "ProxyConfig",
    "RequestDescriptor",
    "BaseDriver",
    "DRIVERS",
    "create_driver",
]

"""Factory for creating driver instances."""

from __future__ import annotations

from typing import Any, Iterable, Type

from .base import BaseDriver
from .bitmart import BitmartDriver
from .gate import GateDriver
from .request import Request
from .uniswap3 import Uniswap3Driver
from .xmex import XmexDriver


DRIVERS: dict[str, Type[BaseDriver]] = {
    "bitmart": BitmartDriver,
    "gate": GateDriver,
    "uniswap3": Uniswap3Driver,
    "xmex": XmexDriver,
}


def create_driver(
    name: str,
    request: Request | None = None,
    *,
    markets: Iterable[str] | None = None,
    **options: Any,
) -> BaseDriver:
    """Create a driver instance.

    Args:
        name: Driver name (bitmart, gate, uniswap3, xmex)
        request: Shared request collaborator (optional)
        markets: Markets to restrict the fetch to, for drivers that support it
        **options: Driver-specific options; unknown keys are ignored

    Returns:
        Configured driver

    Raises:
        ValueError: If the driver is not registered
    """
    driver_class = DRIVERS.get(name.lower())
    if driver_class is None:
        supported = ", ".join(DRIVERS.keys())
        raise ValueError(f"Unsupported driver: {name}. Supported drivers: {supported}")

    return driver_class(request, markets=markets, **options)

"""Concurrent ticker collection across many drivers.

This is the degraded-mode layer above the driver contract: a driver either
returns all of its tickers or fails as a whole, and a failing driver does
not prevent the others from reporting.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Mapping

from .drivers.protocol import Driver, Ticker

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CollectionResult:
    tickers: dict[str, list[Ticker]] = field(default_factory=dict)
    errors: dict[str, Exception] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def ticker_count(self) -> int:
        return sum(len(t) for t in self.tickers.values())


async def collect_tickers(drivers: Mapping[str, Driver], *, deterministic: bool = False) -> CollectionResult:
    """Run every driver concurrently and gather tickers and failures by driver name."""
    names = list(drivers)
    logger.info("collecting tickers from %d drivers", len(names))

    outcomes = await asyncio.gather(
        *(drivers[name].fetch_tickers(deterministic=deterministic) for name in names),
        return_exceptions=True,
    )

    result = CollectionResult()
    for name, outcome in zip(names, outcomes):
        if isinstance(outcome, BaseException) and not isinstance(outcome, Exception):
            # cancellation and interpreter exits are not driver failures
            raise outcome
        if isinstance(outcome, Exception):
            logger.error("driver %s failed: %s", name, outcome)
            result.errors[name] = outcome
            continue
        logger.debug("driver %s returned %d tickers", name, len(outcome))
        result.tickers[name] = outcome

    logger.info(
        "collected %d tickers, %d of %d drivers failed",
        result.ticker_count,
        len(result.errors),
        len(names),
    )
    return result


async def close_drivers(drivers: Mapping[str, Driver]) -> None:
    """Close every driver, logging close failures."""
    for name, driver in drivers.items():
        try:
            await driver.close()
        except Exception as e:
            logger.error("failed to close driver %s: %s", name, e)

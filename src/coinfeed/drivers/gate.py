"""Gate.io exchange driver."""

from __future__ import annotations

import logging
from typing import Any, Sequence

from pydantic import BaseModel, RootModel

from .base import BaseDriver
from .normalization import parse_to_float
from .protocol import DriverSupports, Ticker
from .request import Request, RequestDescriptor

logger = logging.getLogger(__name__)


class GateTicker(BaseModel):
    currency_pair: str
    last: str | float | None = None
    high_24h: str | float | None = None
    low_24h: str | float | None = None
    highest_bid: str | float | None = None
    lowest_ask: str | float | None = None
    base_volume: str | float | None = None
    quote_volume: str | float | None = None


class GateTickers(RootModel[list[GateTicker]]):
    pass


class GateDriver(BaseDriver):
    """Gate.io spot driver.

    Markets are currency pairs such as ``BTC_USDT``. The endpoint returns
    every pair, so a market restriction is applied to the response.
    """

    name = "gate"
    supports = DriverSupports(specific_markets=True)

    def __init__(
        self,
        request: Request | None = None,
        *,
        markets: Sequence[str] | None = None,
        base_url: str = "https://api.gateio.ws",
        **options: Any,
    ):
        super().__init__(request, markets=markets, **options)
        self.base_url = base_url

    def get_tickers_url(self) -> str:
        return f"{self.base_url}/api/v4/spot/tickers"

    async def fetch_tickers(self, *, deterministic: bool = False) -> list[Ticker]:
        url = self.get_tickers_url()
        params = None
        if self.markets is not None and len(self.markets) == 1:
            params = {"currency_pair": self.markets[0]}

        payload = await self.request(RequestDescriptor("GET", url, params=params))
        tickers = self.decode(GateTickers, payload, url=url).root

        result = []
        for ticker in tickers:
            if not self.wants_market(ticker.currency_pair):
                continue
            base, quote = self.split_symbol(ticker.currency_pair, "_")
            result.append(
                Ticker(
                    base=base,
                    quote=quote,
                    high=parse_to_float(ticker.high_24h),
                    low=parse_to_float(ticker.low_24h),
                    close=parse_to_float(ticker.last),
                    base_volume=parse_to_float(ticker.base_volume),
                    quote_volume=parse_to_float(ticker.quote_volume),
                    bid=parse_to_float(ticker.highest_bid),
                    ask=parse_to_float(ticker.lowest_ask),
                )
            )

        logger.debug("%s: %d of %d pairs kept", self.name, len(result), len(tickers))
        return result

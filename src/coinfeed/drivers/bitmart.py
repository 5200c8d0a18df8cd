"""BitMart exchange driver."""

from __future__ import annotations

from pydantic import BaseModel

from .base import BaseDriver
from .normalization import parse_to_float
from .protocol import Ticker

TICKERS_URL = "https://api-cloud.bitmart.com/spot/v1/ticker"

RawNumber = str | float | None


class BitmartTicker(BaseModel):
    url: str
    open_24h: RawNumber = None
    high_24h: RawNumber = None
    low_24h: RawNumber = None
    close_24h: RawNumber = None
    base_volume_24h: RawNumber = None
    quote_volume_24h: RawNumber = None
    best_bid: RawNumber = None
    best_ask: RawNumber = None


class BitmartData(BaseModel):
    tickers: list[BitmartTicker]


class BitmartPayload(BaseModel):
    data: BitmartData


class BitmartDriver(BaseDriver):
    """BitMart spot driver.

    The pair is only exposed inside the trading page URL, e.g.
    ``https://www.bitmart.com/trade?symbol=BTC_USDT``.
    """

    name = "bitmart"

    async def fetch_tickers(self, *, deterministic: bool = False) -> list[Ticker]:
        payload = await self.request(TICKERS_URL)
        tickers = self.decode(BitmartPayload, payload, url=TICKERS_URL).data.tickers

        result = []
        for ticker in tickers:
            base, quote = self.split_symbol(ticker.url.rsplit("=", 1)[-1], "_")
            result.append(
                Ticker(
                    base=base,
                    quote=quote,
                    open=parse_to_float(ticker.open_24h),
                    high=parse_to_float(ticker.high_24h),
                    low=parse_to_float(ticker.low_24h),
                    close=parse_to_float(ticker.close_24h),
                    base_volume=parse_to_float(ticker.base_volume_24h),
                    quote_volume=parse_to_float(ticker.quote_volume_24h),
                    bid=parse_to_float(ticker.best_bid),
                    ask=parse_to_float(ticker.best_ask),
                )
            )
        return result

"""XMEX exchange driver."""

from __future__ import annotations

from pydantic import BaseModel

from .base import BaseDriver
from .normalization import parse_to_float
from .protocol import Ticker

TICKERS_URL = "http://hqdj.xmex.co:8080/xmex2/api/v1/allticker"


class XmexTicker(BaseModel):
    symbol: str
    high: str | float | None = None
    low: str | float | None = None
    last: str | float | None = None
    buy: str | float | None = None
    sell: str | float | None = None
    vol: str | float | None = None


class XmexPayload(BaseModel):
    ticker: list[XmexTicker]


class XmexDriver(BaseDriver):
    """XMEX driver. Reports no open price and no base volume."""

    name = "xmex"

    async def fetch_tickers(self, *, deterministic: bool = False) -> list[Ticker]:
        payload = await self.request(TICKERS_URL)
        tickers = self.decode(XmexPayload, payload, url=TICKERS_URL).ticker

        result = []
        for ticker in tickers:
            base, quote = self.split_symbol(ticker.symbol, "_")
            result.append(
                Ticker(
                    base=base,
                    quote=quote,
                    high=parse_to_float(ticker.high),
                    low=parse_to_float(ticker.low),
                    close=parse_to_float(ticker.last),
                    bid=parse_to_float(ticker.buy),
                    ask=parse_to_float(ticker.sell),
                    quote_volume=parse_to_float(ticker.vol),
                )
            )
        return result

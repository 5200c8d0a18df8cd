"""Uniswap v3 subgraph driver."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Sequence

from pydantic import BaseModel, ConfigDict, Field

from .base import BaseDriver
from .normalization import parse_to_float
from .protocol import DriverSupports, Ticker
from .request import Request
from .subgraph import (
    BLOCK_WINDOW_SECONDS,
    ETHEREUM_BLOCKS_URL,
    index_by_id,
    query_subgraph,
    resolve_block,
    timestamp_24h_ago,
    trailing_volume,
)

logger = logging.getLogger(__name__)

UNISWAP3_POOLS_URL = "https://api.thegraph.com/subgraphs/name/uniswap/uniswap-v3"
POOL_LIMIT = 1000


class Token(BaseModel):
    id: str
    symbol: str = Field(min_length=1)
    name: str | None = None


class Pool(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    token0: Token
    token1: Token
    token1_price: str | float | None = Field(default=None, alias="token1Price")
    volume_token0: str | float = Field(alias="volumeToken0")
    volume_token1: str | float = Field(alias="volumeToken1")


class PoolsPayload(BaseModel):
    pools: list[Pool]


def build_pools_query(ids: Sequence[str] | None = None, block_number: int | None = None) -> str:
    """GraphQL query for the top pools by USD volume.

    Without ids, every pool with liquidity and volume qualifies.
    """
    if ids is not None:
        select = f"where: {{id_in: {json.dumps(list(ids))}}}"
    else:
        select = "where: {liquidity_gt: 0, volumeUSD_gt: 0}"
    block = f"block: {{number: {block_number}}}" if block_number is not None else ""

    return f"""
    {{
      pools(first: {POOL_LIMIT} {select} {block} orderBy: volumeUSD orderDirection: desc) {{
        id
        token0 {{id symbol name}}
        token1 {{id symbol name}}
        token1Price volumeToken0 volumeToken1
      }}
    }}
    """


class Uniswap3Driver(BaseDriver):
    """Uniswap v3 driver.

    The subgraph only exposes lifetime volumes per pool, so every fetch also
    loads the same pools as of a block mined 24 hours ago and reports the
    difference.
    """

    name = "uniswap3"
    supports = DriverSupports(specific_markets=True)

    def __init__(
        self,
        request: Request | None = None,
        *,
        markets: Sequence[str] | None = None,
        pools_url: str = UNISWAP3_POOLS_URL,
        blocks_url: str = ETHEREUM_BLOCKS_URL,
        block_window: int = BLOCK_WINDOW_SECONDS,
        **options: Any,
    ):
        super().__init__(request, markets=markets, **options)
        self.pools_url = pools_url
        self.blocks_url = blocks_url
        self.block_window = block_window

    async def get_pools(self, ids: Sequence[str] | None = None, block_number: int | None = None) -> list[Pool]:
        """Fetch pools, optionally restricted to ids and pinned to a block."""
        with self.tagged_errors():
            data = await query_subgraph(self.request, self.pools_url, build_pools_query(ids, block_number))
        return self.decode(PoolsPayload, data, url=self.pools_url).pools

    async def block_number_24h_ago(self, *, deterministic: bool = False) -> int:
        """Number of the block mined about 24 hours ago."""
        timestamp = timestamp_24h_ago(deterministic=deterministic)
        with self.tagged_errors():
            return await resolve_block(
                self.request,
                timestamp,
                window=self.block_window,
                url=self.blocks_url,
            )

    async def fetch_tickers(self, *, deterministic: bool = False) -> list[Ticker]:
        # a failure in either lookup cancels the other
        try:
            async with asyncio.TaskGroup() as tg:
                pools_task = tg.create_task(self.get_pools(self.markets))
                block_task = tg.create_task(self.block_number_24h_ago(deterministic=deterministic))
        except ExceptionGroup as group:
            raise group.exceptions[0] from None

        pools = pools_task.result()
        block_number = block_task.result()
        if not pools:
            return []

        pools_24h_ago = await self.get_pools([pool.id for pool in pools], block_number)
        indexed_24h_ago = index_by_id(pools_24h_ago)
        logger.debug(
            "%s: %d pools now, %d at block %d",
            self.name,
            len(pools),
            len(pools_24h_ago),
            block_number,
        )

        tickers = []
        for pool in pools:
            past = indexed_24h_ago.get(pool.id)
            tickers.append(
                Ticker(
                    base=pool.token0.symbol,
                    base_name=pool.token0.name,
                    base_reference=pool.token0.id,
                    quote=pool.token1.symbol,
                    quote_name=pool.token1.name,
                    quote_reference=pool.token1.id,
                    close=parse_to_float(pool.token1_price),
                    base_volume=trailing_volume(pool.volume_token0, past.volume_token0 if past else None),
                    quote_volume=trailing_volume(pool.volume_token1, past.volume_token1 if past else None),
                )
            )
        return tickers

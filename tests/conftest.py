"""Pytest configuration and fixtures."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from coinfeed.drivers.request import RequestDescriptor, as_descriptor
from coinfeed.drivers.subgraph import ETHEREUM_BLOCKS_URL
from coinfeed.drivers.uniswap3 import UNISWAP3_POOLS_URL


def create_async_response(status=200, json_data=None):
    """Create a mock async response."""
    resp = AsyncMock()
    resp.status = status
    resp.json = AsyncMock(return_value=json_data if json_data is not None else {})
    resp.__aenter__ = AsyncMock(return_value=resp)
    resp.__aexit__ = AsyncMock(return_value=None)
    return resp


def make_pool(pool_id, volume_token0, volume_token1, token1_price="1850.25"):
    """A pool as returned by the Uniswap v3 subgraph."""
    return {
        "id": pool_id,
        "token0": {"id": "0xc02a", "symbol": "WETH", "name": "Wrapped Ether"},
        "token1": {"id": "0xa0b8", "symbol": "USDC", "name": "USD Coin"},
        "token1Price": token1_price,
        "volumeToken0": volume_token0,
        "volumeToken1": volume_token1,
    }


@pytest.fixture
def current_pools():
    """Pools with lifetime volumes as of now."""
    return [
        make_pool("A", "100", "2000"),
        make_pool("B", "25", "500"),
    ]


@pytest.fixture
def historical_pools():
    """Pools as of the block mined 24h ago; B did not exist yet."""
    return [make_pool("A", "60", "1500")]


@pytest.fixture
def blocks():
    """Blocks subgraph answer; numbers come back as strings."""
    return [{"number": "12900000", "timestamp": "1627305600"}]


@pytest.fixture
def subgraph_request(current_pools, historical_pools, blocks):
    """Fake request collaborator answering the pools and blocks subgraphs.

    Any response can be replaced with an exception instance to make that
    request fail. Every request descriptor is recorded in ``.calls``.
    """

    def build(current=None, historical=None, block_list=None):
        responses = {
            "current": current if current is not None else {"data": {"pools": current_pools}},
            "historical": historical if historical is not None else {"data": {"pools": historical_pools}},
            "blocks": block_list if block_list is not None else {"data": {"blocks": blocks}},
        }

        async def handler(target):
            descriptor = as_descriptor(target)
            query = descriptor.json_body["query"]
            if descriptor.url == ETHEREUM_BLOCKS_URL:
                response = responses["blocks"]
            elif descriptor.url == UNISWAP3_POOLS_URL and "block: {number:" in query:
                response = responses["historical"]
            elif descriptor.url == UNISWAP3_POOLS_URL:
                response = responses["current"]
            else:
                raise AssertionError(f"unexpected request to {descriptor.url}")
            if isinstance(response, Exception):
                raise response
            return response

        return AsyncMock(side_effect=handler)

    return build


def queries_sent(request_mock, url):
    """GraphQL queries posted to ``url`` by a fake request collaborator."""
    queries = []
    for call in request_mock.await_args_list:
        descriptor = call.args[0]
        if isinstance(descriptor, RequestDescriptor) and descriptor.url == url:
            queries.append(descriptor.json_body["query"])
    return queries


@pytest.fixture
def mock_session():
    """aiohttp session stand-in."""
    session = MagicMock()
    session.close = AsyncMock()
    return session

"""Tests for subgraph helpers: time window, block lookup and volume delta."""

import math
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from coinfeed.drivers.request import RequestDescriptor
from coinfeed.drivers.subgraph import (
    DAY_SECONDS,
    ETHEREUM_BLOCKS_URL,
    FIXTURE_TIMESTAMP,
    index_by_id,
    query_subgraph,
    resolve_block,
    timestamp_24h_ago,
    trailing_volume,
)
from coinfeed.errors import FetchFailed, UnresolvedHistoricalWindow


class TestTimestamp24hAgo:
    def test_from_injected_now(self):
        assert timestamp_24h_ago(1_700_000_000.4) == 1_700_000_000 - DAY_SECONDS

    def test_rounds_to_whole_seconds(self):
        assert timestamp_24h_ago(1_700_000_000.6) == 1_700_000_001 - DAY_SECONDS

    def test_deterministic_mode_is_pinned(self):
        assert timestamp_24h_ago(deterministic=True) == FIXTURE_TIMESTAMP == 1627305331
        assert timestamp_24h_ago(1_700_000_000, deterministic=True) == 1627305331

    def test_defaults_to_wall_clock(self, monkeypatch):
        monkeypatch.setattr("coinfeed.drivers.subgraph.time.time", lambda: 1_650_000_000.0)
        assert timestamp_24h_ago() == 1_650_000_000 - DAY_SECONDS


class TestTrailingVolume:
    def test_difference(self):
        assert trailing_volume("100", "60") == 40.0

    def test_zero_baseline_when_missing(self):
        assert trailing_volume("25", None) == 25.0

    def test_negative_noise_not_clamped(self):
        assert trailing_volume("10", "10.5") == -0.5

    def test_unparseable_current_is_unknown(self):
        assert math.isnan(trailing_volume("", "60"))

    def test_accepts_numbers(self):
        assert trailing_volume(12.5, 2) == 10.5


class TestIndexById:
    def test_maps_ids(self):
        a = SimpleNamespace(id="A")
        b = SimpleNamespace(id="B")

        assert index_by_id([a, b]) == {"A": a, "B": b}

    def test_empty(self):
        assert index_by_id([]) == {}


class TestQuerySubgraph:
    @pytest.mark.asyncio
    async def test_posts_query_and_returns_data(self):
        request = AsyncMock(return_value={"data": {"pools": []}})

        data = await query_subgraph(request, "https://graph.test", "{ pools { id } }")

        assert data == {"pools": []}
        request.assert_awaited_once_with(
            RequestDescriptor("POST", "https://graph.test", json_body={"query": "{ pools { id } }"})
        )

    @pytest.mark.asyncio
    async def test_graphql_errors(self):
        request = AsyncMock(return_value={"errors": [{"message": "Store error"}], "data": None})

        with pytest.raises(FetchFailed, match="Store error") as exc_info:
            await query_subgraph(request, "https://graph.test", "{}")

        assert exc_info.value.url == "https://graph.test"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [[], "oops", {"data": None}, {}])
    async def test_missing_data(self, payload):
        request = AsyncMock(return_value=payload)

        with pytest.raises(FetchFailed):
            await query_subgraph(request, "https://graph.test", "{}")


class TestResolveBlock:
    @pytest.mark.asyncio
    async def test_single_nearest_match(self):
        request = AsyncMock(return_value={"data": {"blocks": [{"number": "12900000", "timestamp": "1627305900"}]}})

        number = await resolve_block(request, 1627305331)

        assert number == 12900000
        descriptor = request.await_args.args[0]
        assert descriptor.url == ETHEREUM_BLOCKS_URL
        assert "timestamp_gt: 1627305331" in descriptor.json_body["query"]
        assert "timestamp_lt: 1627305931" in descriptor.json_body["query"]

    @pytest.mark.asyncio
    async def test_no_match_in_window(self):
        request = AsyncMock(return_value={"data": {"blocks": []}})

        with pytest.raises(UnresolvedHistoricalWindow) as exc_info:
            await resolve_block(request, 1627305331, window=600)

        assert isinstance(exc_info.value, FetchFailed)
        assert exc_info.value.details == {"timestamp": 1627305331, "window": 600}
        request.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_bad_block_shape(self):
        request = AsyncMock(return_value={"data": {"blocks": [{"number": "not-a-number"}]}})

        with pytest.raises(FetchFailed, match="Unexpected blocks payload"):
            await resolve_block(request, 1627305331)

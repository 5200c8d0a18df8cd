"""Helpers for drivers backed by indexed on-chain (GraphQL subgraph) data.

Subgraphs report cumulative lifetime volumes. A trailing 24h volume is the
difference between the current cumulative figure and the one recorded at a
block mined roughly 24 hours ago.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Iterable, Mapping, TypeVar

from pydantic import BaseModel, ValidationError

from ..errors import FetchFailed, UnresolvedHistoricalWindow
from .normalization import parse_to_float
from .request import Request, RequestDescriptor

logger = logging.getLogger(__name__)

ETHEREUM_BLOCKS_URL = "https://api.thegraph.com/subgraphs/name/blocklytics/ethereum-blocks"

DAY_SECONDS = 24 * 60 * 60
BLOCK_WINDOW_SECONDS = 600

# Timestamp the stored fixtures were recorded against.
FIXTURE_TIMESTAMP = 1627305331

ItemT = TypeVar("ItemT")


class Block(BaseModel):
    number: int
    timestamp: int


class BlocksPayload(BaseModel):
    blocks: list[Block]


def timestamp_24h_ago(now: float | None = None, *, deterministic: bool = False) -> int:
    """Unix timestamp, in seconds, of the moment 24 hours before ``now``."""
    if deterministic:
        return FIXTURE_TIMESTAMP
    if now is None:
        now = time.time()
    return round(now) - DAY_SECONDS


async def query_subgraph(request: Request, url: str, query: str) -> dict[str, Any]:
    """POST a GraphQL query and return its ``data`` mapping.

    Raises:
        FetchFailed: If the transport fails or the response carries GraphQL
            errors instead of data
    """
    payload = await request(RequestDescriptor("POST", url, json_body={"query": query}))

    if not isinstance(payload, Mapping):
        raise FetchFailed(f"Subgraph returned {type(payload).__name__}, expected an object", url=url)

    errors = payload.get("errors")
    if errors:
        messages = "; ".join(str(e.get("message", e)) if isinstance(e, Mapping) else str(e) for e in errors)
        raise FetchFailed(f"Subgraph query failed: {messages}", url=url, details={"errors": errors})

    data = payload.get("data")
    if not isinstance(data, Mapping):
        raise FetchFailed("Subgraph response has no data", url=url)

    return dict(data)


async def resolve_block(
    request: Request,
    timestamp: int,
    *,
    window: int = BLOCK_WINDOW_SECONDS,
    url: str = ETHEREUM_BLOCKS_URL,
) -> int:
    """Find the block mined closest to the end of ``(timestamp, timestamp + window)``.

    The window is not widened when nothing is indexed inside it.

    Raises:
        UnresolvedHistoricalWindow: If no block falls inside the window
    """
    query = f"""
    {{
      blocks(
        first: 1,
        orderBy: timestamp,
        orderDirection: desc,
        where: {{timestamp_gt: {timestamp}, timestamp_lt: {timestamp + window}}}
      ) {{
        number
        timestamp
      }}
    }}
    """
    data = await query_subgraph(request, url, query)

    try:
        blocks = BlocksPayload.model_validate(data).blocks
    except ValidationError as exc:
        raise FetchFailed(f"Unexpected blocks payload: {exc.error_count()} errors", url=url) from exc

    if not blocks:
        raise UnresolvedHistoricalWindow(timestamp, window, url=url)

    block = blocks[0]
    logger.debug("Resolved block %d (timestamp %d) for target %d", block.number, block.timestamp, timestamp)
    return block.number


def index_by_id(items: Iterable[ItemT]) -> dict[str, ItemT]:
    """Map each item's ``id`` attribute to the item."""
    return {item.id: item for item in items}  # type: ignore[attr-defined]


def trailing_volume(current: Any, historical: Any | None) -> float:
    """Volume traded since the historical snapshot.

    A market missing from the historical snapshot (created within the
    window, or an indexing gap) gets a zero baseline. The result is not
    clamped: upstream revisions can make it slightly negative.
    """
    baseline = parse_to_float(historical) if historical is not None else 0.0
    return parse_to_float(current) - baseline

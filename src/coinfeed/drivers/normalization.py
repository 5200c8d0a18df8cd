"""Numeric and symbol normalization utilities for exchange payloads."""

from __future__ import annotations

import math
import re
from typing import Any

from ..errors import MalformedSymbol

UNKNOWN = math.nan

_DECIMAL_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")


def parse_to_float(value: Any) -> float:
    """Coerce a payload value to float.

    Accepts the shapes exchanges put numbers in:
    - "45000.5" -> 45000.5
    - "-1e-3" -> -0.001
    - 12 -> 12.0
    - None, "", "n/a" -> nan

    Args:
        value: Raw value from a decoded payload

    Returns:
        The parsed float, or UNKNOWN (nan) when the value is missing or not
        a decimal number
    """
    if value is None or isinstance(value, bool):
        return UNKNOWN

    if isinstance(value, (int, float)):
        return float(value)

    if isinstance(value, str):
        text = value.strip()
        if _DECIMAL_RE.match(text):
            return float(text)

    return UNKNOWN


def is_unknown(value: float | None) -> bool:
    """Return True for a missing or unparseable numeric value."""
    return value is None or math.isnan(value)


def split_market_symbol(symbol: str, delimiter: str = "_") -> tuple[str, str]:
    """Split a combined market symbol into base and quote.

    Handles the delimiters exchanges use:
    - BTC_USDT, "_" -> (BTC, USDT)
    - BTC-USDT, "-" -> (BTC, USDT)

    Case is preserved; surrounding whitespace is stripped from each part.

    Args:
        symbol: Combined market symbol
        delimiter: Separator between base and quote

    Returns:
        Tuple of (base, quote)

    Raises:
        MalformedSymbol: If the split does not yield exactly two non-empty parts
    """
    if not isinstance(symbol, str) or not delimiter:
        raise MalformedSymbol(symbol, delimiter)

    parts = [part.strip() for part in symbol.split(delimiter)]
    if len(parts) != 2 or not all(parts):
        raise MalformedSymbol(symbol, delimiter)

    return parts[0], parts[1]

"""
Decimal helpers shared by the calculator, aggregator and reporter.
"""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Optional

# Leading numeric prefix, the same part a lenient float parse would consume.
_NUMERIC_PREFIX = re.compile(r"^\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)")


def round_half_up(value: Decimal, places: int) -> Decimal:
    """
    Round half away from zero to a fixed number of decimal places.

    Precision is widened as needed so large values quantize instead of
    signalling `InvalidOperation`.
    """
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() + places + 2)
        return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def format_decimal(value: Decimal) -> str:
    """Plain notation, no exponent, trailing zeros kept as stored."""
    return format(value, "f")


def numeric_prefix(text: Optional[str]) -> Optional[float]:
    """
    Parse the leading number of `text`, ignoring any residue.

    "10" -> 10.0, "6 in" -> 6.0, "abc" -> None.
    """
    if text is None:
        return None
    match = _NUMERIC_PREFIX.match(text)
    if not match:
        return None
    return float(match.group(1))


def parse_decimal(text: Optional[str]) -> Optional[Decimal]:
    """Strict decimal parse; None for blank or malformed input."""
    if text is None or not str(text).strip():
        return None
    try:
        return Decimal(str(text).strip())
    except InvalidOperation:
        return None


__all__ = ["format_decimal", "numeric_prefix", "parse_decimal", "round_half_up"]

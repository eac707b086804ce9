"""
Aggregation of the calculation history by material pair.

Entries are grouped by (electrode, filler). The joint count is added in full;
the filler and electrode weights of each entry are rounded to three places
before they join the running total, so three contributions of 1.0005 give
3.003, not round(3.0015) = 3.002.
"""

from __future__ import annotations

import warnings
from decimal import Decimal
from enum import Enum
from typing import Dict, Iterable, Tuple

from weldcalc.domain.models import AggregatedEntry, HistoryEntry
from weldcalc.utils.logging import get_logger
from weldcalc.utils.numbers import round_half_up

log = get_logger(__name__)

CONTRIBUTION_PLACES = 3

MaterialKey = Tuple[str, str]


class AggregationPolicy(Enum):
    INCREMENTAL = "incremental"
    ROUND_ONCE = "round_once"  # deprecated


def aggregate(
    history: Iterable[HistoryEntry],
    policy: AggregationPolicy = AggregationPolicy.INCREMENTAL,
) -> Dict[MaterialKey, AggregatedEntry]:
    """
    Group `history` into running totals keyed by (electrode, filler).

    Keys keep the order in which each pair is first seen. Entries saved
    without a grade carry no material codes and are left out.
    """
    if policy is AggregationPolicy.ROUND_ONCE:
        warnings.warn(
            "Round-once aggregation is deprecated; contributions are rounded individually.",
            DeprecationWarning,
            stacklevel=2,
        )

    totals: Dict[MaterialKey, AggregatedEntry] = {}
    skipped = 0
    for entry in history:
        result = entry.result
        if not result.has_material:
            skipped += 1
            continue

        key = (result.electrode, result.filler)
        bucket = totals.get(key)
        if bucket is None:
            bucket = totals[key] = AggregatedEntry(electrode=key[0], filler=key[1])

        filler = result.filler_weight
        electrode = result.electrode_weight
        if policy is AggregationPolicy.INCREMENTAL:
            filler = round_half_up(filler, CONTRIBUTION_PLACES)
            electrode = round_half_up(electrode, CONTRIBUTION_PLACES)

        bucket.total_joints += entry.quantity
        bucket.total_filler += filler
        bucket.total_electrode += electrode

    if policy is AggregationPolicy.ROUND_ONCE:
        for bucket in totals.values():
            bucket.total_filler = round_half_up(bucket.total_filler, CONTRIBUTION_PLACES)
            bucket.total_electrode = round_half_up(bucket.total_electrode, CONTRIBUTION_PLACES)

    if skipped:
        log.warning(
            "History entries without material codes left out of aggregation",
            extra={"skipped": skipped},
        )
    return totals


__all__ = ["AggregationPolicy", "MaterialKey", "aggregate"]

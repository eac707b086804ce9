"""
Weight calculation for a single submission.

Each of the four per-joint weights of a pipe record is multiplied by the joint
count and rounded half away from zero on the decimal value. Three decimal
places is the current policy; the eight-place variant is what earlier releases
stored and is kept only so old numbers can be reproduced.
"""

from __future__ import annotations

import math
import warnings
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Dict, Optional, Union

from weldcalc.domain.errors import InvalidSelectionError
from weldcalc.domain.models import CalculationResult, GradeInfo, PipeRecord, WeightItem
from weldcalc.utils.numbers import parse_decimal, round_half_up


# Integer digits a joint count may carry.
MAX_QUANTITY_DIGITS = 15


class RoundingPolicy(Enum):
    THREE_PLACES = 3
    LEGACY_EIGHT_PLACES = 8  # deprecated

    @property
    def places(self) -> int:
        return self.value


def parse_quantity(value: Union[str, int, float, Decimal, None]) -> Decimal:
    """
    Parse a joint count.

    Raises
    ------
    InvalidSelectionError
        For empty, unparsable, non-finite, zero or negative input, and for
        counts with more than `MAX_QUANTITY_DIGITS` integer digits.
    """
    message = "Please fill all fields with valid values"
    if value is None or isinstance(value, bool):
        raise InvalidSelectionError(message)
    if isinstance(value, float) and not math.isfinite(value):
        raise InvalidSelectionError(message)
    try:
        quantity = Decimal(str(value).strip())
    except InvalidOperation:
        raise InvalidSelectionError(message) from None
    if not quantity.is_finite() or quantity <= 0 or quantity.adjusted() >= MAX_QUANTITY_DIGITS:
        raise InvalidSelectionError(message)
    if quantity.as_tuple().exponent > 0:
        # "1e2" -> 100, keeps plain notation in history and reports
        try:
            quantity = quantity.quantize(Decimal(1))
        except InvalidOperation:
            raise InvalidSelectionError(message) from None
    return quantity


def unit_weights(record: PipeRecord) -> Dict[WeightItem, Decimal]:
    """Per-joint weights of `record`; blank cells count as zero."""
    weights: Dict[WeightItem, Decimal] = {}
    for item in WeightItem:
        text = record.unit_weight_text(item)
        if not text.strip():
            weights[item] = Decimal(0)
            continue
        value = parse_decimal(text)
        if value is None or not value.is_finite() or value < 0:
            raise InvalidSelectionError(
                f"Pipe data has an invalid {item.label} weight: '{text}'"
            )
        weights[item] = value
    return weights


def compute(
    record: PipeRecord,
    quantity: Decimal,
    grade_info: Optional[GradeInfo] = None,
    policy: RoundingPolicy = RoundingPolicy.THREE_PLACES,
) -> CalculationResult:
    """
    Total weights for `quantity` joints of `record`.

    Parameters
    ----------
    record : PipeRecord
        The resolved pipe specification.
    quantity : Decimal
        Joint count, already validated by `parse_quantity`.
    grade_info : GradeInfo, optional
        Material codes to attach; omitted when grades are not tracked.
    policy : RoundingPolicy
        Decimal places for the totals.

    Returns
    -------
    CalculationResult
        All four line items, zero ones included.
    """
    if policy is RoundingPolicy.LEGACY_EIGHT_PLACES:
        warnings.warn(
            "Eight-place rounding is deprecated; totals are rounded to three places.",
            DeprecationWarning,
            stacklevel=2,
        )
    weights = {
        item: round_half_up(unit * quantity, policy.places)
        for item, unit in unit_weights(record).items()
    }
    return CalculationResult(
        weights=weights,
        electrode=grade_info.electrode if grade_info else None,
        filler=grade_info.filler if grade_info else None,
    )


__all__ = ["MAX_QUANTITY_DIGITS", "RoundingPolicy", "compute", "parse_quantity", "unit_weights"]

"""
Cascading selection over the pipe table.

Joint type narrows the available sizes, and joint type plus size narrow the
available thicknesses, so the user is never offered a combination the table
has no row for. Sizes and thicknesses are ordered by their numeric value
("2" < "3" < "10"), while matching is exact string equality on the values as
they appear in the table.
"""

from __future__ import annotations

import math
from typing import Iterable, List, Optional, Sequence

from weldcalc.domain.errors import DataUnavailableError, RecordNotFoundError
from weldcalc.domain.models import PipeRecord
from weldcalc.utils.numbers import numeric_prefix


def _unique(values: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(values))


def _numeric_sort(values: Iterable[str]) -> List[str]:
    """Sort by leading numeric value; unparsable values go last, in order."""

    def key(value: str) -> float:
        number = numeric_prefix(value)
        return math.inf if number is None or math.isnan(number) else number

    return sorted(_unique(values), key=key)


class PipeCatalog:
    """
    Read-only view over the loaded pipe records.

    A catalog built with `available=False` stands for a dataset that failed to
    load: every option set is empty and resolution raises
    `DataUnavailableError`.
    """

    def __init__(self, records: Sequence[PipeRecord], available: bool = True) -> None:
        self._records: tuple[PipeRecord, ...] = tuple(records)
        self.available = available

    @classmethod
    def unavailable(cls) -> "PipeCatalog":
        return cls((), available=False)

    @property
    def records(self) -> tuple[PipeRecord, ...]:
        return self._records

    def __len__(self) -> int:
        return len(self._records)

    def _matching(
        self, joint_type: Optional[str] = None, size: Optional[str] = None
    ) -> List[PipeRecord]:
        return [
            r
            for r in self._records
            if (not joint_type or r.joint_type == joint_type)
            and (size is None or r.nominal_size == size)
        ]

    def distinct_joint_types(self) -> List[str]:
        """Joint types present in the table, lexicographically sorted."""
        return sorted(_unique(r.joint_type for r in self._records if r.joint_type is not None))

    def distinct_sizes(self, joint_type: Optional[str] = None) -> List[str]:
        """Nominal sizes for `joint_type` (all rows when unset), numerically sorted."""
        return _numeric_sort(r.nominal_size for r in self._matching(joint_type))

    def distinct_thicknesses(
        self, joint_type: Optional[str] = None, size: Optional[str] = None
    ) -> List[str]:
        """Thicknesses for the size (and joint type); empty until a size is chosen."""
        if not size:
            return []
        return _numeric_sort(r.thickness for r in self._matching(joint_type, size))

    def find_record(
        self, joint_type: Optional[str], size: str, thickness: str
    ) -> Optional[PipeRecord]:
        """First row in file order matching the selection, or None."""
        for record in self._records:
            if record.nominal_size != size or record.thickness != thickness:
                continue
            if joint_type and record.joint_type != joint_type:
                continue
            return record
        return None

    def resolve_record(self, joint_type: Optional[str], size: str, thickness: str) -> PipeRecord:
        if not self.available:
            raise DataUnavailableError("Could not load pipe data")
        record = self.find_record(joint_type, size, thickness)
        if record is None:
            raise RecordNotFoundError(joint_type, size, thickness)
        return record


__all__ = ["PipeCatalog"]

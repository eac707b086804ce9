"""
Grade → electrode/filler lookup.

The table is configuration, not code: it ships as `resources/grades.json` and
can be replaced through `Settings.grades_path`. Once loaded it is read-only.
"""
from __future__ import annotations

import json
from importlib import resources
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional

from pydantic import TypeAdapter, ValidationError

from weldcalc.domain.errors import DataUnavailableError, UnknownGradeError
from weldcalc.domain.models import GradeInfo
from weldcalc.utils.logging import get_logger

log = get_logger(__name__)

_GRADE_TABLE_ADAPTER = TypeAdapter(Dict[str, GradeInfo])


class GradeTable(Mapping[str, GradeInfo]):
    """Immutable grade name → `GradeInfo` mapping, in table order."""

    def __init__(self, grades: Mapping[str, GradeInfo]) -> None:
        self._grades: Mapping[str, GradeInfo] = MappingProxyType(dict(grades))

    def __getitem__(self, grade: str) -> GradeInfo:
        return self._grades[grade]

    def __iter__(self) -> Iterator[str]:
        return iter(self._grades)

    def __len__(self) -> int:
        return len(self._grades)

    def names(self) -> List[str]:
        return list(self._grades)

    def resolve(self, grade: str) -> GradeInfo:
        """
        Electrode and filler codes for `grade`.

        Callers validate the grade first; an unknown grade is a bug on their
        side and raises `UnknownGradeError`.
        """
        try:
            return self._grades[grade]
        except KeyError:
            raise UnknownGradeError(grade) from None


def _read_table_text(path: Optional[Path]) -> str:
    if path is None:
        return resources.files("weldcalc.resources").joinpath("grades.json").read_text(
            encoding="utf-8"
        )
    return Path(path).read_text(encoding="utf-8")


def load_grade_table(path: Optional[Path] = None) -> GradeTable:
    """Load the packaged grade table, or the JSON file at `path`."""
    try:
        raw = json.loads(_read_table_text(path))
        grades = _GRADE_TABLE_ADAPTER.validate_python(raw)
    except (OSError, ValueError, ValidationError) as exc:
        raise DataUnavailableError(f"Could not load grade table: {exc}") from exc
    log.debug("Grade table loaded", extra={"grades": len(grades), "source": str(path or "package")})
    return GradeTable(grades)


__all__ = ["GradeTable", "load_grade_table"]

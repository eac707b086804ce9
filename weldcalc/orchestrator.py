"""
Orchestrator tying the catalog, calculator and history together.

Usage (example from CLI):
    from weldcalc.orchestrator import CalculationOrchestrator

    app = CalculationOrchestrator.from_settings()
    outcome = app.submit("C.S", None, "6", "7.11", "4", confirm=lambda existing: False)
    print(outcome.entry.result.displayed_weights())

Exports are written as `welding_calculations_<date>.csv` and
`welding_aggregated_<date>.csv` in the requested directory.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

from weldcalc.config import Settings, get_settings
from weldcalc.domain.errors import DataUnavailableError, EmptyHistoryError, InvalidSelectionError
from weldcalc.domain.grades import GradeTable, load_grade_table
from weldcalc.domain.models import AggregatedEntry, HistoryEntry
from weldcalc.engine.aggregator import AggregationPolicy, MaterialKey, aggregate
from weldcalc.engine.calculator import RoundingPolicy, compute, parse_quantity, unit_weights
from weldcalc.engine.catalog import PipeCatalog
from weldcalc.infrastructure.dataset import load_dataset
from weldcalc.infrastructure.history import (
    ConfirmDuplicate,
    HistoryRepository,
    KeyValueHistoryRepository,
)
from weldcalc.infrastructure.store import JsonFileKeyValueStore
from weldcalc.reporter import export_filename, to_aggregated_csv, to_csv
from weldcalc.utils.logging import get_logger

log = get_logger(__name__)

_INVALID_SELECTION = "Please fill all fields with valid values"


@dataclass(frozen=True)
class SubmissionOutcome:
    """The computed entry and whether it made it into the history."""

    entry: HistoryEntry
    stored: bool


def load_catalog(settings: Settings) -> PipeCatalog:
    """
    Load the pipe dataset named in `settings`.

    A failed load is not fatal: it yields an unavailable catalog, which offers
    no options and refuses calculations.
    """
    try:
        records = load_dataset(
            settings.dataset_path,
            columns=settings.columns,
            attempts=settings.dataset_read_attempts,
            backoff=settings.dataset_retry_backoff,
        )
    except DataUnavailableError as exc:
        log.error("Pipe data unavailable", extra={"error": str(exc)})
        return PipeCatalog.unavailable()
    return PipeCatalog(records)


class CalculationOrchestrator:
    """Application service behind every user action."""

    def __init__(
        self,
        catalog: PipeCatalog,
        grades: GradeTable,
        repository: HistoryRepository,
        clock: Callable[[], datetime] = datetime.now,
        timestamp_format: str = "%m/%d/%Y, %I:%M:%S %p",
        rounding: RoundingPolicy = RoundingPolicy.THREE_PLACES,
    ) -> None:
        self.catalog = catalog
        self.grades = grades
        self.repository = repository
        self._clock = clock
        self._timestamp_format = timestamp_format
        self._rounding = rounding

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        repository: Optional[HistoryRepository] = None,
    ) -> "CalculationOrchestrator":
        settings = settings or get_settings()
        if repository is None:
            repository = KeyValueHistoryRepository(
                JsonFileKeyValueStore(settings.history_path), key=settings.history_key
            )
        return cls(
            catalog=load_catalog(settings),
            grades=load_grade_table(settings.grades_path),
            repository=repository,
            timestamp_format=settings.timestamp_format,
        )

    # ── Selection ──────────────────────────────────────────

    def joint_types(self) -> List[str]:
        return self.catalog.distinct_joint_types()

    def sizes(self, joint_type: Optional[str] = None) -> List[str]:
        return self.catalog.distinct_sizes(joint_type or None)

    def thicknesses(self, joint_type: Optional[str] = None, size: Optional[str] = None) -> List[str]:
        return self.catalog.distinct_thicknesses(joint_type or None, size or None)

    # ── Calculation ────────────────────────────────────────

    def submit(
        self,
        grade: Optional[str],
        joint_type: Optional[str],
        size: Optional[str],
        thickness: Optional[str],
        quantity: Union[str, int, float, None],
        confirm: ConfirmDuplicate,
    ) -> SubmissionOutcome:
        """
        Validate a selection, compute its weights and record it.

        Raises
        ------
        DataUnavailableError
            If the pipe dataset did not load.
        InvalidSelectionError
            For a missing/unknown grade, size or thickness, or a bad quantity.
        RecordNotFoundError
            If no pipe row matches the selection.
        """
        if not self.catalog.available:
            raise DataUnavailableError("Could not load pipe data")
        if not grade or grade not in self.grades or not size or not thickness:
            raise InvalidSelectionError(_INVALID_SELECTION)
        qty = parse_quantity(quantity)

        record = self.catalog.resolve_record(joint_type or None, size, thickness)
        result = compute(record, qty, self.grades.resolve(grade), policy=self._rounding)
        entry = HistoryEntry(
            timestamp=self._clock().strftime(self._timestamp_format),
            grade=grade,
            joint_type=record.joint_type,
            nominal_size=record.nominal_size,
            thickness=record.thickness,
            quantity=qty,
            unit_weights=unit_weights(record),
            result=result,
        )
        stored = self.repository.append_with_duplicate_check(entry, confirm)
        return SubmissionOutcome(entry=entry, stored=stored)

    # ── History ────────────────────────────────────────────

    def history(self) -> List[HistoryEntry]:
        return self.repository.load()

    def latest(self) -> Optional[HistoryEntry]:
        history = self.history()
        return history[0] if history else None

    def delete(self, index: int) -> HistoryEntry:
        return self.repository.remove_at(index)

    def clear(self) -> None:
        self.repository.clear()

    def aggregate(
        self, policy: AggregationPolicy = AggregationPolicy.INCREMENTAL
    ) -> Dict[MaterialKey, AggregatedEntry]:
        return aggregate(self.history(), policy=policy)

    # ── Exports ────────────────────────────────────────────

    def history_csv(self) -> str:
        return to_csv(self.history())

    def aggregated_csv(self) -> str:
        history = self.history()
        if not history:
            raise EmptyHistoryError()
        return to_aggregated_csv(aggregate(history))

    def _write_export(self, text: str, directory: Path, aggregated: bool, today: Optional[date]) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / export_filename(aggregated, today)
        path.write_text(text, encoding="utf-8")
        log.info("Export written", extra={"path": str(path), "aggregated": aggregated})
        return path

    def export_history(self, directory: Path | str, today: Optional[date] = None) -> Path:
        return self._write_export(self.history_csv(), Path(directory), False, today)

    def export_aggregated(self, directory: Path | str, today: Optional[date] = None) -> Path:
        return self._write_export(self.aggregated_csv(), Path(directory), True, today)


__all__ = ["CalculationOrchestrator", "SubmissionOutcome", "load_catalog"]

from __future__ import annotations

import csv
import io
from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest

from weldcalc.config import Settings
from weldcalc.domain.errors import (
    DataUnavailableError,
    EmptyHistoryError,
    InvalidSelectionError,
    RecordNotFoundError,
)
from weldcalc.domain.models import WeightItem
from weldcalc.engine.catalog import PipeCatalog
from weldcalc.infrastructure.history import KeyValueHistoryRepository
from weldcalc.infrastructure.store import InMemoryKeyValueStore
from weldcalc.orchestrator import CalculationOrchestrator

TODAY = date(2026, 10, 19)


def _never(existing):
    return False


def _always(existing):
    return True


def test_submit_computes_and_stores(orchestrator: CalculationOrchestrator):
    outcome = orchestrator.submit("C.S", "BW", "2", "5.54", "4", confirm=_never)

    entry = outcome.entry
    assert outcome.stored
    assert entry.timestamp == "10/19/2026, 04:47:00 PM"
    assert entry.quantity == Decimal("4")
    assert entry.result.weight(WeightItem.FILLER_2_4) == Decimal("0.124")
    assert entry.result.weight(WeightItem.ELECTRODE_2_5) == Decimal("0.232")
    assert (entry.result.electrode, entry.result.filler) == ("E7018", "ER70S-6")
    assert entry.unit_weights[WeightItem.FILLER_2_4] == Decimal("0.031")
    assert orchestrator.history() == [entry]
    assert orchestrator.latest() == entry


def test_submit_uses_first_matching_row(orchestrator: CalculationOrchestrator):
    entry = orchestrator.submit("C.S", "BW", "2", "5.54", "1", confirm=_never).entry

    # the later duplicate row carries 0.999
    assert entry.result.filler_weight == Decimal("0.031")


def test_submit_without_joint_type_takes_record_joint_type(orchestrator: CalculationOrchestrator):
    entry = orchestrator.submit("C.S", None, "2", "3.91", "1", confirm=_never).entry

    assert entry.joint_type == "SW"


@pytest.mark.parametrize(
    "grade, size, thickness, quantity",
    [
        (None, "2", "5.54", "4"),
        ("", "2", "5.54", "4"),
        ("Inconel 625", "2", "5.54", "4"),
        ("C.S", None, "5.54", "4"),
        ("C.S", "2", "", "4"),
        ("C.S", "2", "5.54", "0"),
        ("C.S", "2", "5.54", "-3"),
        ("C.S", "2", "5.54", "many"),
    ],
)
def test_invalid_selection_leaves_history_untouched(
    orchestrator: CalculationOrchestrator, grade, size, thickness, quantity
):
    with pytest.raises(InvalidSelectionError, match="Please fill all fields with valid values"):
        orchestrator.submit(grade, "BW", size, thickness, quantity, confirm=_never)

    assert orchestrator.history() == []


def test_unknown_combination_is_not_found(orchestrator: CalculationOrchestrator):
    with pytest.raises(RecordNotFoundError, match="No pipe found with selected specifications"):
        orchestrator.submit("C.S", "SW", "10", "9.27", "1", confirm=_never)

    assert orchestrator.history() == []


def test_unavailable_catalog_refuses_calculation(grades, repository):
    orchestrator = CalculationOrchestrator(PipeCatalog.unavailable(), grades, repository)

    assert orchestrator.joint_types() == []
    assert orchestrator.sizes() == []
    with pytest.raises(DataUnavailableError):
        orchestrator.submit("C.S", "BW", "2", "5.54", "1", confirm=_never)


def test_declined_duplicate_is_computed_but_not_stored(orchestrator: CalculationOrchestrator):
    orchestrator.submit("C.S", "BW", "2", "5.54", "4", confirm=_never)

    outcome = orchestrator.submit("SS 316L", "BW", "2", "5.54", "4", confirm=_never)

    assert not outcome.stored
    assert outcome.entry.result.electrode == "E316L-16"
    assert len(orchestrator.history()) == 1


def test_confirmed_duplicate_is_stored(orchestrator: CalculationOrchestrator):
    orchestrator.submit("C.S", "BW", "2", "5.54", "4", confirm=_never)

    assert orchestrator.submit("C.S", "BW", "2", "5.54", "4", confirm=_always).stored
    assert len(orchestrator.history()) == 2


def test_delete_and_clear(orchestrator: CalculationOrchestrator):
    for size, thickness in (("2", "5.54"), ("3", "7.62"), ("10", "9.27")):
        orchestrator.submit("C.S", "BW", size, thickness, "1", confirm=_never)

    removed = orchestrator.delete(0)

    assert removed.nominal_size == "10"
    assert [e.nominal_size for e in orchestrator.history()] == ["3", "2"]

    orchestrator.clear()

    assert orchestrator.history() == []
    assert orchestrator.aggregate() == {}


def test_aggregate_over_history(orchestrator: CalculationOrchestrator):
    orchestrator.submit("C.S", "BW", "2", "5.54", "4", confirm=_never)
    orchestrator.submit("C.S Galv", "BW", "3", "7.62", "10", confirm=_never)

    totals = orchestrator.aggregate()

    carbon = totals[("E7018", "ER70S-6")]
    assert carbon.total_joints == Decimal("14")
    assert carbon.total_filler == Decimal("0.124") + Decimal("3.336")


def test_export_history_writes_dated_file(orchestrator: CalculationOrchestrator, tmp_path: Path):
    orchestrator.submit("C.S", "BW", "2", "5.54", "4", confirm=_never)

    path = orchestrator.export_history(tmp_path / "out", today=TODAY)

    assert path.name == "welding_calculations_2026-10-19.csv"
    rows = list(csv.reader(io.StringIO(path.read_text(encoding="utf-8"))))
    assert len(rows) == 2
    assert rows[1][1] == "C.S"


def test_export_aggregated_writes_dated_file(orchestrator: CalculationOrchestrator, tmp_path: Path):
    orchestrator.submit("C.S", "BW", "2", "5.54", "4", confirm=_never)

    path = orchestrator.export_aggregated(tmp_path, today=TODAY)

    assert path.name == "welding_aggregated_2026-10-19.csv"
    assert path.read_text(encoding="utf-8").splitlines()[1] == '"E7018","ER70S-6",4,0.12,0.23'


@pytest.mark.parametrize("aggregated", [False, True])
def test_export_of_empty_history_writes_nothing(
    orchestrator: CalculationOrchestrator, tmp_path: Path, aggregated: bool
):
    export = orchestrator.export_aggregated if aggregated else orchestrator.export_history

    with pytest.raises(EmptyHistoryError):
        export(tmp_path, today=TODAY)

    assert list(tmp_path.iterdir()) == []


def test_from_settings_with_missing_dataset_is_unavailable(tmp_path: Path):
    settings = Settings(
        dataset_path=tmp_path / "missing.txt",
        dataset_retry_backoff=0,
        history_path=tmp_path / "store.json",
    )

    orchestrator = CalculationOrchestrator.from_settings(
        settings, repository=KeyValueHistoryRepository(InMemoryKeyValueStore())
    )

    assert not orchestrator.catalog.available
    assert orchestrator.joint_types() == []
    assert "C.S" in orchestrator.grades


def test_from_settings_loads_dataset(tmp_path: Path, pipe_table_text: str):
    dataset = tmp_path / "db.txt"
    dataset.write_text(pipe_table_text, encoding="utf-8")

    orchestrator = CalculationOrchestrator.from_settings(
        Settings(dataset_path=dataset, history_path=tmp_path / "store.json")
    )

    assert orchestrator.catalog.available
    assert orchestrator.joint_types() == ["BW", "SW"]
    assert orchestrator.history() == []

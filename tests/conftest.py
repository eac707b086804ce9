"""
Pytest configuration for the welding consumables calculator.

Provides fixtures for:
- A small pipe table with deliberately awkward ordering and a duplicate row
- Catalog, grade table and in-memory history repository
- An orchestrator with a fixed clock
- Settings/environment isolation for CLI tests
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Callable, Generator, List, Optional

import pytest

from weldcalc.config import get_settings
from weldcalc.domain.grades import GradeTable, load_grade_table
from weldcalc.domain.models import CalculationResult, HistoryEntry, PipeRecord, WeightItem
from weldcalc.engine.catalog import PipeCatalog
from weldcalc.infrastructure.dataset import parse_pipe_table, records_from_rows
from weldcalc.infrastructure.history import KeyValueHistoryRepository
from weldcalc.infrastructure.store import InMemoryKeyValueStore
from weldcalc.orchestrator import CalculationOrchestrator

HEADER = "J_type\tN-SIZE\tThk\tFiller Ф2#4\tElec# Ф2#5\tElec# Ф3#25\tElec# Ф4"

# Sizes out of order, "10" before "2" and "3"; ("BW", "2", "5.54") appears twice.
PIPE_TABLE = "\n".join(
    [
        HEADER,
        "BW\t10\t9.27\t0.134\t0.148\t0.337\t0",
        "BW\t2\t5.54\t0.031\t0.058\t0\t0",
        "BW\t3\t7.62\t0.3336\t0.071\t0.098\t0",
        "SW\t2\t3.91\t0.062\t0\t0\t0",
        "BW\t2\t3.91\t0.028\t0.035\t0\t0",
        "\t16\t9.53\t0.2\t0.215\t0.498\t0.486",
        "BW\t2\t5.54\t0.999\t0.999\t0\t0",
        "",
    ]
)

FIXED_NOW = datetime(2026, 10, 19, 16, 47, 0)


@pytest.fixture
def pipe_table_text() -> str:
    return PIPE_TABLE


@pytest.fixture
def pipe_records(pipe_table_text: str) -> List[PipeRecord]:
    return records_from_rows(parse_pipe_table(pipe_table_text))


@pytest.fixture
def catalog(pipe_records: List[PipeRecord]) -> PipeCatalog:
    return PipeCatalog(pipe_records)


@pytest.fixture(scope="session")
def grades() -> GradeTable:
    return load_grade_table()


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def repository(store: InMemoryKeyValueStore) -> KeyValueHistoryRepository:
    return KeyValueHistoryRepository(store)


@pytest.fixture
def orchestrator(
    catalog: PipeCatalog, grades: GradeTable, repository: KeyValueHistoryRepository
) -> CalculationOrchestrator:
    return CalculationOrchestrator(
        catalog=catalog,
        grades=grades,
        repository=repository,
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture
def make_entry() -> Callable[..., HistoryEntry]:
    """Build history entries directly, bypassing the calculator."""

    def _make(
        grade: Optional[str] = "C.S",
        joint_type: Optional[str] = "BW",
        size: str = "2",
        thickness: str = "5.54",
        quantity: str = "1",
        filler: str = "0",
        electrodes: tuple[str, str, str] = ("0", "0", "0"),
        electrode_code: Optional[str] = "E7018",
        filler_code: Optional[str] = "ER70S-6",
        timestamp: str = "10/19/2026, 04:47:00 PM",
    ) -> HistoryEntry:
        weights = {
            WeightItem.FILLER_2_4: Decimal(filler),
            WeightItem.ELECTRODE_2_5: Decimal(electrodes[0]),
            WeightItem.ELECTRODE_3_25: Decimal(electrodes[1]),
            WeightItem.ELECTRODE_4_0: Decimal(electrodes[2]),
        }
        return HistoryEntry(
            timestamp=timestamp,
            grade=grade,
            joint_type=joint_type,
            nominal_size=size,
            thickness=thickness,
            quantity=Decimal(quantity),
            result=CalculationResult(
                weights=weights, electrode=electrode_code, filler=filler_code
            ),
        )

    return _make


@pytest.fixture
def cli_env(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, pipe_table_text: str
) -> Generator[Path, None, None]:
    """
    Point the CLI at a temporary dataset, history store and export directory.

    Returns the temporary root.
    """
    dataset = tmp_path / "db.txt"
    dataset.write_text(pipe_table_text, encoding="utf-8")
    monkeypatch.setenv("WELDCALC_DATASET", str(dataset))
    monkeypatch.setenv("WELDCALC_HISTORY", str(tmp_path / "store.json"))
    monkeypatch.setenv("WELDCALC_EXPORT_DIR", str(tmp_path / "exports"))
    monkeypatch.setenv("WELDCALC_DATASET_RETRY_BACKOFF", "0")
    monkeypatch.setenv("WELDCALC_LOG_LEVEL", "CRITICAL")
    get_settings.cache_clear()
    yield tmp_path
    get_settings.cache_clear()

"""
weldcalc - filler rod and electrode consumption for pipe-joint welding.

Looks up per-joint consumable weights in a tab-delimited pipe table, scales
them by joint count, keeps a local calculation history and exports it as CSV,
either entry by entry or totalled per electrode/filler pair.

The package is organised in layers:

- `weldcalc.domain`: models, grade table, errors
- `weldcalc.engine`: cascading selection, weight calculation, aggregation
- `weldcalc.infrastructure`: dataset loading and history persistence
- `weldcalc.orchestrator`: the application service used by the CLI
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from weldcalc.config import DatasetColumns, Settings, get_settings
from weldcalc.domain import (
    AggregatedEntry,
    CalculationResult,
    GradeInfo,
    GradeTable,
    HistoryEntry,
    PipeRecord,
    WeightItem,
    WeldCalcError,
    load_grade_table,
)
from weldcalc.engine import AggregationPolicy, PipeCatalog, RoundingPolicy, aggregate, compute
from weldcalc.infrastructure import (
    HistoryRepository,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueHistoryRepository,
    load_dataset,
)
from weldcalc.orchestrator import CalculationOrchestrator, SubmissionOutcome
from weldcalc.reporter import to_aggregated_csv, to_csv
from weldcalc.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "DatasetColumns",
    "Settings",
    "get_settings",
    # Domain
    "AggregatedEntry",
    "CalculationResult",
    "GradeInfo",
    "GradeTable",
    "HistoryEntry",
    "PipeRecord",
    "WeightItem",
    "WeldCalcError",
    "load_grade_table",
    # Engine
    "AggregationPolicy",
    "PipeCatalog",
    "RoundingPolicy",
    "aggregate",
    "compute",
    # Persistence
    "HistoryRepository",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueHistoryRepository",
    "load_dataset",
    # Orchestration
    "CalculationOrchestrator",
    "SubmissionOutcome",
    # Reports
    "to_aggregated_csv",
    "to_csv",
    # Logging
    "configure_logging",
    "get_logger",
]

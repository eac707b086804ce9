"""
Domain package for the welding consumables calculator.

Data definitions, the grade table and the error hierarchy. No I/O beyond
loading the grade table.
"""

from weldcalc.domain.errors import (
    DataUnavailableError,
    EmptyHistoryError,
    InvalidSelectionError,
    RecordNotFoundError,
    ShareError,
    UnknownGradeError,
    WeldCalcError,
)
from weldcalc.domain.grades import GradeTable, load_grade_table
from weldcalc.domain.models import (
    AggregatedEntry,
    CalculationResult,
    GradeInfo,
    HistoryEntry,
    PipeRecord,
    WeightItem,
)

__all__ = [
    # Models
    "AggregatedEntry",
    "CalculationResult",
    "GradeInfo",
    "HistoryEntry",
    "PipeRecord",
    "WeightItem",
    # Grades
    "GradeTable",
    "load_grade_table",
    # Errors
    "WeldCalcError",
    "DataUnavailableError",
    "InvalidSelectionError",
    "RecordNotFoundError",
    "UnknownGradeError",
    "EmptyHistoryError",
    "ShareError",
]

"""
Engine package: selection, calculation and aggregation rules.

Pure functions and in-memory objects only; persistence is injected from
`weldcalc.infrastructure`.
"""

from weldcalc.engine.aggregator import AggregationPolicy, aggregate
from weldcalc.engine.calculator import RoundingPolicy, compute, parse_quantity, unit_weights
from weldcalc.engine.catalog import PipeCatalog

__all__ = [
    "AggregationPolicy",
    "aggregate",
    "RoundingPolicy",
    "compute",
    "parse_quantity",
    "unit_weights",
    "PipeCatalog",
]

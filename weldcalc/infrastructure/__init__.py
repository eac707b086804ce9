"""
Infrastructure package for the welding consumables calculator.

I/O lives here: reading the pipe dataset and persisting the calculation
history. Calculation rules stay in `weldcalc.engine`.
"""

from weldcalc.infrastructure.dataset import (
    load_dataset,
    parse_header,
    parse_pipe_table,
    records_from_rows,
)
from weldcalc.infrastructure.history import (
    AbstractHistoryRepository,
    HistoryRepository,
    KeyValueHistoryRepository,
)
from weldcalc.infrastructure.store import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStore,
)

__all__ = [
    "load_dataset",
    "parse_header",
    "parse_pipe_table",
    "records_from_rows",
    "AbstractHistoryRepository",
    "HistoryRepository",
    "KeyValueHistoryRepository",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueStore",
]

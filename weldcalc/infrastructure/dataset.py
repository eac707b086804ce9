"""
Pipe dataset loading.

The dataset is plain tab-delimited text: a header row followed by one row per
pipe specification. Parsing keeps every cell as text; the catalog and the
calculator interpret numbers later.

Reads are retried with exponential backoff (tenacity) when the error looks
transient, which matters when the table sits on a network share.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, List, Sequence

from pydantic import ValidationError
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from weldcalc.config import DatasetColumns
from weldcalc.domain.errors import DataUnavailableError
from weldcalc.domain.models import PipeRecord
from weldcalc.utils.logging import get_logger

log = get_logger(__name__)

_TRANSIENT_ERRORS = (TimeoutError, ConnectionError, InterruptedError)


def _table_lines(text: str) -> List[str]:
    lines = [line.rstrip("\r") for line in text.lstrip("\ufeff").split("\n")]
    return [line for line in lines if line.strip()]


def parse_header(text: str) -> List[str]:
    """Column names from the first non-blank line; empty for an empty table."""
    lines = _table_lines(text)
    return [h.strip() for h in lines[0].split("\t")] if lines else []


def parse_pipe_table(text: str) -> List[Dict[str, str]]:
    """
    Split tab-delimited text into header → value mappings.

    Blank lines are skipped and short rows are padded with empty strings.
    """
    lines = _table_lines(text)
    if not lines:
        return []

    headers = parse_header(lines[0])
    rows: List[Dict[str, str]] = []
    for line in lines[1:]:
        values = [v.strip() for v in line.split("\t")]
        values += [""] * (len(headers) - len(values))
        rows.append(dict(zip(headers, values)))
    return rows


def records_from_rows(
    rows: Iterable[Dict[str, str]],
    columns: DatasetColumns | None = None,
    header: Sequence[str] | None = None,
) -> List[PipeRecord]:
    """
    Map raw rows onto `PipeRecord`s using the configured column names.

    Required columns are checked against `header` when given (so a table with
    no data rows is still validated), otherwise against the first row.
    """
    columns = columns or DatasetColumns()
    rows = list(rows)
    present = header if header is not None else (list(rows[0]) if rows else None)
    if present is not None:
        missing = [name for name in columns.required().values() if name not in present]
        if missing:
            raise DataUnavailableError(
                f"Pipe data is missing required column(s): {', '.join(missing)}"
            )

    records: List[PipeRecord] = []
    for line_no, row in enumerate(rows, start=2):
        fields = {attr: row[name] for attr, name in columns.required().items()}
        fields["joint_type"] = row.get(columns.joint_type)
        try:
            records.append(PipeRecord(**fields))
        except ValidationError as exc:
            raise DataUnavailableError(f"Invalid pipe data on line {line_no}: {exc}") from exc
    return records


def read_dataset_text(path: Path, attempts: int = 3, backoff: float = 1.0) -> str:
    """
    Read the dataset file, retrying transient I/O failures.

    Raises
    ------
    DataUnavailableError
        If the file is missing, unreadable or not UTF-8.
    """
    retrying = Retrying(
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=backoff, max=10),
        retry=retry_if_exception_type(_TRANSIENT_ERRORS),
        reraise=True,
    )
    try:
        for attempt in retrying:
            with attempt:
                return Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        log.error("Error loading pipe data", extra={"path": str(path), "error": str(exc)})
        raise DataUnavailableError("Could not load pipe data") from exc
    raise DataUnavailableError("Could not load pipe data")  # pragma: no cover


def load_dataset(
    path: Path,
    columns: DatasetColumns | None = None,
    attempts: int = 3,
    backoff: float = 1.0,
) -> List[PipeRecord]:
    """Read and parse the pipe table at `path`."""
    text = read_dataset_text(path, attempts=attempts, backoff=backoff)
    records = records_from_rows(parse_pipe_table(text), columns, header=parse_header(text))
    log.info("Pipe data loaded", extra={"path": str(path), "records": len(records)})
    return records


__all__ = [
    "load_dataset",
    "parse_header",
    "parse_pipe_table",
    "read_dataset_text",
    "records_from_rows",
]

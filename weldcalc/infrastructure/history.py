"""
Calculation history repository.

The history is one newest-first sequence of `HistoryEntry` stored as a JSON
array under a single key of a `KeyValueStore`. Every mutation reads the whole
sequence, changes a copy and writes the whole sequence back, so a failed
operation leaves the previous history untouched.

`HistoryRepository` is the interface the orchestrator depends on;
`AbstractHistoryRepository` implements the operations on top of two raw
read/write hooks.
"""

from __future__ import annotations

import abc
from contextlib import contextmanager
from typing import Callable, Iterator, List, Optional, Protocol, runtime_checkable

from pydantic import TypeAdapter, ValidationError

from weldcalc.domain.errors import DataUnavailableError, InvalidSelectionError
from weldcalc.domain.models import HistoryEntry
from weldcalc.infrastructure.store import KeyValueStore
from weldcalc.utils.logging import get_logger

log = get_logger(__name__)

DEFAULT_HISTORY_KEY = "pipeCalculations"

ConfirmDuplicate = Callable[[HistoryEntry], bool]

_HISTORY_ADAPTER = TypeAdapter(List[HistoryEntry])


@contextmanager
def _store_errors(action: str) -> Iterator[None]:
    """Report store failures (I/O, corrupt JSON) as `DataUnavailableError`."""
    try:
        yield
    except (OSError, ValueError) as exc:
        log.error("History store failure", extra={"action": action, "error": str(exc)})
        raise DataUnavailableError(f"Could not {action} history store: {exc}") from exc


@runtime_checkable
class HistoryRepository(Protocol):
    """Persistence contract for the calculation history."""

    def load(self) -> List[HistoryEntry]:
        """Return the history, newest first. An empty store is an empty list."""
        ...

    def append_with_duplicate_check(
        self, entry: HistoryEntry, confirm: ConfirmDuplicate
    ) -> bool:
        """
        Prepend `entry` unless it duplicates a stored entry and `confirm` declines.

        Parameters
        ----------
        entry : HistoryEntry
            The new calculation.
        confirm : Callable[[HistoryEntry], bool]
            Called with the existing entry when a duplicate is found.

        Returns
        -------
        bool
            True when the entry was persisted.
        """
        ...

    def remove_at(self, index: int) -> HistoryEntry:
        """Delete and return the entry at `index` (0 = newest)."""
        ...

    def clear(self) -> None:
        ...


class AbstractHistoryRepository(abc.ABC):
    """
    Implements the repository operations over raw read/write hooks.

    Subclasses provide `_read_raw` (None when nothing is stored), `_write_raw`
    and `_delete_raw`.
    """

    @abc.abstractmethod
    def _read_raw(self) -> Optional[str]:  # pragma: no cover - interface only
        raise NotImplementedError

    @abc.abstractmethod
    def _write_raw(self, payload: str) -> None:  # pragma: no cover - interface only
        raise NotImplementedError

    @abc.abstractmethod
    def _delete_raw(self) -> None:  # pragma: no cover - interface only
        raise NotImplementedError

    def load(self) -> List[HistoryEntry]:
        raw = self._read_raw()
        if not raw:
            return []
        try:
            return _HISTORY_ADAPTER.validate_json(raw)
        except ValidationError as exc:
            raise DataUnavailableError(f"Stored history is unreadable: {exc}") from exc

    def _save(self, entries: List[HistoryEntry]) -> None:
        payload = _HISTORY_ADAPTER.dump_json(entries).decode("utf-8")
        self._write_raw(payload)

    @staticmethod
    def find_duplicate(
        entry: HistoryEntry, history: List[HistoryEntry]
    ) -> Optional[HistoryEntry]:
        key = entry.duplicate_key()
        return next((item for item in history if item.duplicate_key() == key), None)

    def append_with_duplicate_check(
        self, entry: HistoryEntry, confirm: ConfirmDuplicate
    ) -> bool:
        history = self.load()
        existing = self.find_duplicate(entry, history)
        if existing is not None and not confirm(existing):
            log.warning(
                "Duplicate calculation discarded",
                extra={"size": entry.nominal_size, "thickness": entry.thickness},
            )
            return False

        self._save([entry, *history])
        log.info(
            "Calculation stored",
            extra={
                "grade": entry.grade,
                "size": entry.nominal_size,
                "thickness": entry.thickness,
                "joints": str(entry.quantity),
                "duplicate": existing is not None,
            },
        )
        return True

    def remove_at(self, index: int) -> HistoryEntry:
        history = self.load()
        if not 0 <= index < len(history):
            raise InvalidSelectionError(
                f"No history entry at position {index + 1} (history has {len(history)})"
            )
        removed = history.pop(index)
        self._save(history)
        log.info("History entry removed", extra={"index": index})
        return removed

    def clear(self) -> None:
        self._delete_raw()
        log.info("History cleared")


class KeyValueHistoryRepository(AbstractHistoryRepository):
    """History stored as a JSON array under one key of a `KeyValueStore`."""

    def __init__(self, store: KeyValueStore, key: str = DEFAULT_HISTORY_KEY) -> None:
        self.store = store
        self.key = key

    def _read_raw(self) -> Optional[str]:
        with _store_errors("read"):
            return self.store.get(self.key)

    def _write_raw(self, payload: str) -> None:
        with _store_errors("write"):
            self.store.set(self.key, payload)

    def _delete_raw(self) -> None:
        with _store_errors("clear"):
            self.store.delete(self.key)


__all__ = [
    "AbstractHistoryRepository",
    "ConfirmDuplicate",
    "DEFAULT_HISTORY_KEY",
    "HistoryRepository",
    "KeyValueHistoryRepository",
]

"""
Sharing calculation results outside the application.

A single result is shared as a text message through a WhatsApp link. The
aggregated report is shared as a CSV file opened with the platform handler;
when that handler is unavailable the CSV text goes out as a share link
instead. Opening is delegated to `typer.launch` (injectable for tests).
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable
from urllib.parse import quote

import typer

from weldcalc.domain.errors import ShareError
from weldcalc.domain.models import HistoryEntry
from weldcalc.utils.logging import get_logger
from weldcalc.utils.numbers import format_decimal

log = get_logger(__name__)

SHARE_URL = "https://wa.me/?text="

Opener = Callable[[str], int]


@dataclass(frozen=True)
class ShareOutcome:
    method: str  # "link" or "file"
    target: str


def compose_share_message(entry: HistoryEntry) -> str:
    """Plain-text summary of one calculation."""
    qty = format_decimal(entry.quantity)
    blocks = []
    for item, total in entry.result.displayed_weights():
        line = f"{item.label}: {format_decimal(total)} KG"
        unit = entry.unit_weights.get(item)
        if unit is not None:
            line += f"\n{format_decimal(unit)} KG/joint × {qty} joints = {format_decimal(total)} KG"
        blocks.append(line)
    if entry.result.has_material:
        blocks.append(f"Electrode: {entry.result.electrode}\nFiller: {entry.result.filler}")
    return ("🔧 Welding Weight Calculation Results:\n\n" + "\n\n".join(blocks)).strip()


def share_link(text: str) -> str:
    return SHARE_URL + quote(text, safe="!~*'()")


def _open(opener: Opener, target: str) -> None:
    try:
        code = opener(target)
    except OSError as exc:
        raise ShareError(f"Could not open share target: {exc}") from exc
    if code:
        raise ShareError(f"Share handler exited with status {code}")


def share_results(entry: HistoryEntry, opener: Opener = typer.launch) -> ShareOutcome:
    """Open a share link carrying the summary of `entry`."""
    if not entry.result.displayed_weights():
        raise ShareError("No results to share")
    url = share_link(compose_share_message(entry))
    _open(opener, url)
    log.info("Results shared", extra={"method": "link"})
    return ShareOutcome(method="link", target=url)


def share_file(csv_text: str, path: Path, opener: Opener = typer.launch) -> ShareOutcome:
    """
    Write `csv_text` to `path` and hand it to the platform handler.

    Falls back to a share link with the CSV content when the file cannot be
    opened. Raises `ShareError` only if both routes fail.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(csv_text, encoding="utf-8")
    except OSError as exc:
        raise ShareError(f"Could not write {path}: {exc}") from exc

    try:
        _open(opener, str(path))
        log.info("Report shared", extra={"method": "file", "path": str(path)})
        return ShareOutcome(method="file", target=str(path))
    except ShareError as exc:
        log.warning("File sharing unavailable, falling back to link", extra={"error": str(exc)})

    url = share_link(f"Welding consumables by material:\n\n{csv_text}")
    _open(opener, url)
    log.info("Report shared", extra={"method": "link"})
    return ShareOutcome(method="link", target=url)


__all__ = ["ShareOutcome", "compose_share_message", "share_file", "share_link", "share_results"]

"""
Report rendering: CSV exports and terminal tables.

The CSV column layout is fixed; spreadsheets built on earlier exports depend
on it. String fields are quoted, numbers are written unquoted: per-entry
weights exactly as stored, aggregated totals with two decimals.
"""

from __future__ import annotations

import csv
import io
from datetime import date
from decimal import Decimal
from typing import Iterable, List, Mapping, Optional, Sequence

from rich import box
from rich.console import Console
from rich.table import Table

from weldcalc.domain.errors import EmptyHistoryError
from weldcalc.domain.grades import GradeTable
from weldcalc.domain.models import AggregatedEntry, HistoryEntry, WeightItem
from weldcalc.utils.numbers import format_decimal, round_half_up

HISTORY_COLUMNS: List[str] = [
    "Timestamp",
    "Grade",
    "J Type",
    "N-SIZE",
    "Thickness",
    "Joints",
    *[f"{item.label} (KG)" for item in WeightItem],
    "Electrode",
    "Filler",
]

AGGREGATED_COLUMNS: List[str] = [
    "Electrode",
    "Filler",
    "Total Joints",
    "Total Filler (KG)",
    "Total Electrode (KG)",
]

TOTAL_PLACES = 2


class _PlainNumber(Decimal):
    """Decimal that the csv module writes unquoted and without an exponent."""

    def __str__(self) -> str:
        return format_decimal(self)


def _write_csv(header: Sequence[str], rows: Iterable[Sequence[object]]) -> str:
    buf = io.StringIO()
    csv.writer(buf, lineterminator="\n").writerow(header)
    # Decimals count as numbers for QUOTE_NONNUMERIC, so only text gets quoted.
    # Numeric cells arrive as _PlainNumber so str() never yields an exponent.
    csv.writer(buf, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n").writerows(rows)
    return buf.getvalue()


def to_csv(history: Sequence[HistoryEntry]) -> str:
    """
    Per-entry export, newest first.

    Raises
    ------
    EmptyHistoryError
        When there is nothing to export.
    """
    if not history:
        raise EmptyHistoryError()
    rows = [
        [
            entry.timestamp,
            entry.grade or "",
            entry.joint_type or "",
            entry.nominal_size,
            entry.thickness,
            _PlainNumber(entry.quantity),
            *[_PlainNumber(entry.result.weight(item)) for item in WeightItem],
            entry.result.electrode or "",
            entry.result.filler or "",
        ]
        for entry in history
    ]
    return _write_csv(HISTORY_COLUMNS, rows)


def to_aggregated_csv(aggregated: Mapping[object, AggregatedEntry]) -> str:
    """
    Aggregated export, one row per (electrode, filler) pair.

    Raises
    ------
    EmptyHistoryError
        When there is nothing to export.
    """
    if not aggregated:
        raise EmptyHistoryError()
    rows = [
        [
            item.electrode,
            item.filler,
            _PlainNumber(item.total_joints),
            _PlainNumber(round_half_up(item.total_filler, TOTAL_PLACES)),
            _PlainNumber(round_half_up(item.total_electrode, TOTAL_PLACES)),
        ]
        for item in aggregated.values()
    ]
    return _write_csv(AGGREGATED_COLUMNS, rows)


def export_filename(aggregated: bool, today: Optional[date] = None) -> str:
    stamp = (today or date.today()).isoformat()
    kind = "aggregated" if aggregated else "calculations"
    return f"welding_{kind}_{stamp}.csv"


# ── Terminal output ────────────────────────────────────────


def _kg(value: Decimal) -> str:
    return f"{format_decimal(value)} KG"


def render_result(entry: HistoryEntry, console: Optional[Console] = None) -> None:
    """Show the weights of one calculation and its material codes."""
    console = console or Console()
    title = (
        f"{entry.grade or 'No grade'} │ {entry.joint_type or 'All'} │ "
        f"{entry.nominal_size} │ {entry.thickness} │ Joints: {format_decimal(entry.quantity)}"
    )
    table = Table(title=title, box=box.ROUNDED)
    table.add_column("Item", style="cyan", no_wrap=True)
    table.add_column("Weight", justify="right", style="bold green")
    table.add_column("Calculation", style="dim")

    for item, total in entry.result.displayed_weights():
        unit = entry.unit_weights.get(item)
        calc = (
            f"{format_decimal(unit)} KG/joint × {format_decimal(entry.quantity)} joints"
            f" = {_kg(total)}"
            if unit is not None
            else ""
        )
        table.add_row(item.label, _kg(total), calc)

    if entry.result.has_material:
        table.add_section()
        table.add_row("Electrode", entry.result.electrode, "")
        table.add_row("Filler", entry.result.filler, "")

    console.print(table)


def render_history(history: Sequence[HistoryEntry], console: Optional[Console] = None) -> None:
    console = console or Console()
    if not history:
        console.print("[yellow]No calculations yet[/yellow]")
        return

    table = Table(title="Calculation History", box=box.ROUNDED, caption="Newest first")
    table.add_column("#", justify="right", style="magenta")
    table.add_column("Timestamp", style="dim")
    table.add_column("Grade", style="cyan")
    table.add_column("Selection")
    table.add_column("Joints", justify="right", style="blue")
    table.add_column("Weights", style="green")

    for position, entry in enumerate(history, start=1):
        weights = "\n".join(
            f"{item.label}: {_kg(total)}" for item, total in entry.result.displayed_weights()
        )
        table.add_row(
            str(position),
            entry.timestamp,
            entry.grade or "-",
            f"{entry.joint_type or 'All'} - {entry.nominal_size} - {entry.thickness}",
            format_decimal(entry.quantity),
            weights or "-",
        )
    console.print(table)


def render_aggregated(
    aggregated: Mapping[object, AggregatedEntry], console: Optional[Console] = None
) -> None:
    console = console or Console()
    if not aggregated:
        console.print("[yellow]No results to display.[/yellow]")
        return

    table = Table(title="Consumables by Material", box=box.ROUNDED)
    table.add_column("Electrode", style="cyan", no_wrap=True)
    table.add_column("Filler", style="cyan", no_wrap=True)
    table.add_column("Total Joints", justify="right", style="magenta")
    table.add_column("Total Filler (KG)", justify="right", style="bold green")
    table.add_column("Total Electrode (KG)", justify="right", style="bold green")

    for item in aggregated.values():
        table.add_row(
            item.electrode,
            item.filler,
            format_decimal(item.total_joints),
            format_decimal(round_half_up(item.total_filler, TOTAL_PLACES)),
            format_decimal(round_half_up(item.total_electrode, TOTAL_PLACES)),
        )
    console.print(table)


def render_grades(grades: GradeTable, console: Optional[Console] = None) -> None:
    console = console or Console()
    table = Table(title="Grades", box=box.ROUNDED)
    table.add_column("Grade", style="cyan", no_wrap=True)
    table.add_column("Electrode", style="green")
    table.add_column("Filler", style="green")
    for name, info in grades.items():
        table.add_row(name, info.electrode, info.filler)
    console.print(table)


def render_options(title: str, values: Sequence[str], console: Optional[Console] = None) -> None:
    console = console or Console()
    if not values:
        console.print(f"[dim]{title}: (none available)[/dim]")
        return
    console.print(f"[bold]{title}:[/bold] " + ", ".join(values))


__all__ = [
    "AGGREGATED_COLUMNS",
    "HISTORY_COLUMNS",
    "export_filename",
    "render_aggregated",
    "render_grades",
    "render_history",
    "render_options",
    "render_result",
    "to_aggregated_csv",
    "to_csv",
]

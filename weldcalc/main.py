from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from weldcalc.config import get_settings
from weldcalc.domain.errors import EmptyHistoryError, WeldCalcError
from weldcalc.domain.models import HistoryEntry
from weldcalc.orchestrator import CalculationOrchestrator
from weldcalc.reporter import (
    export_filename,
    render_aggregated,
    render_grades,
    render_history,
    render_options,
    render_result,
)
from weldcalc.share import share_file, share_results
from weldcalc.utils.logging import configure_logging

app = typer.Typer(help="Welding consumables calculator for pipe joints.")
console = Console()


def _orchestrator() -> CalculationOrchestrator:
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    try:
        return CalculationOrchestrator.from_settings(settings)
    except WeldCalcError as exc:
        _fail(exc)
        raise  # unreachable, _fail always exits


def _fail(exc: Exception) -> None:
    typer.echo(f"Error: {exc}", err=True)
    raise typer.Exit(code=1)


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"dataset={settings.dataset_path} | history={settings.history_path} "
        f"(key={settings.history_key}) | export_dir={settings.export_dir} | env={settings.app_env}"
    )


@app.command()
def grades() -> None:
    """
    List known grades with their electrode and filler codes.
    """
    render_grades(_orchestrator().grades, console)


@app.command()
def options(
    joint_type: Optional[str] = typer.Option(None, "--joint-type", "-j", help="Filter by joint type."),
    size: Optional[str] = typer.Option(None, "--size", "-n", help="Filter by nominal size."),
) -> None:
    """
    Show the selectable joint types, sizes and thicknesses for the current filters.
    """
    orchestrator = _orchestrator()
    if not orchestrator.catalog.available:
        _fail(WeldCalcError("Could not load pipe data"))
    render_options("J Type", orchestrator.joint_types(), console)
    render_options("N-SIZE", orchestrator.sizes(joint_type), console)
    render_options("Thickness", orchestrator.thicknesses(joint_type, size), console)


@app.command()
def calc(
    grade: str = typer.Option(..., "--grade", "-g", help="Material grade, see `grades`."),
    size: str = typer.Option(..., "--size", "-n", help="Nominal size (N-SIZE)."),
    thickness: str = typer.Option(..., "--thickness", "-t", help="Wall thickness (Thk)."),
    joint_type: Optional[str] = typer.Option(None, "--joint-type", "-j", help="Joint type (J Type)."),
    quantity: str = typer.Option("1", "--quantity", "-q", help="Number of joints."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Store duplicates without asking."),
) -> None:
    """
    Calculate filler and electrode weights and add them to the history.
    """
    orchestrator = _orchestrator()

    def confirm(existing: HistoryEntry) -> bool:
        if yes:
            return True
        return typer.confirm(
            f"This exact calculation already exists in history ({existing.timestamp}). Add it again?",
            default=False,
        )

    try:
        outcome = orchestrator.submit(grade, joint_type, size, thickness, quantity, confirm)
    except WeldCalcError as exc:
        _fail(exc)
    render_result(outcome.entry, console)
    if not outcome.stored:
        typer.echo("Not added to history.")


@app.command()
def history() -> None:
    """
    Show the calculation history, newest first.
    """
    try:
        render_history(_orchestrator().history(), console)
    except WeldCalcError as exc:
        _fail(exc)


@app.command()
def delete(
    position: int = typer.Argument(..., help="Entry number as shown by `history` (1 = newest)."),
) -> None:
    """
    Delete one history entry.
    """
    try:
        removed = _orchestrator().delete(position - 1)
    except WeldCalcError as exc:
        _fail(exc)
    typer.echo(f"Deleted {removed.joint_type or 'All'} - {removed.nominal_size} - {removed.thickness}.")


@app.command()
def clear(
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation."),
) -> None:
    """
    Delete the whole calculation history.
    """
    if not yes and not typer.confirm("Are you sure you want to clear all history?", default=False):
        typer.echo("History kept.")
        return
    try:
        _orchestrator().clear()
    except WeldCalcError as exc:
        _fail(exc)
    typer.echo("History cleared.")


@app.command()
def aggregate() -> None:
    """
    Show total consumables per electrode/filler pair.
    """
    try:
        render_aggregated(_orchestrator().aggregate(), console)
    except WeldCalcError as exc:
        _fail(exc)


@app.command()
def export(
    aggregated: bool = typer.Option(False, "--aggregated", "-a", help="Export totals per material pair."),
    output_dir: Optional[Path] = typer.Option(None, "--output-dir", "-o", help="Target directory."),
) -> None:
    """
    Export the history (or its aggregate) as CSV.
    """
    orchestrator = _orchestrator()
    directory = output_dir or get_settings().export_dir
    try:
        if aggregated:
            path = orchestrator.export_aggregated(directory)
        else:
            path = orchestrator.export_history(directory)
    except WeldCalcError as exc:
        _fail(exc)
    typer.echo(f"Exported to {path}")


@app.command()
def share(
    aggregated: bool = typer.Option(False, "--aggregated", "-a", help="Share the aggregated CSV."),
) -> None:
    """
    Share the latest result, or the aggregated report, via the platform handler.
    """
    orchestrator = _orchestrator()
    try:
        if aggregated:
            text = orchestrator.aggregated_csv()
            path = Path(get_settings().export_dir) / export_filename(True)
            outcome = share_file(text, path)
        else:
            latest = orchestrator.latest()
            if latest is None:
                raise EmptyHistoryError("No results to share")
            outcome = share_results(latest)
    except WeldCalcError as exc:
        _fail(exc)
    typer.echo(f"Shared via {outcome.method}: {outcome.target}")


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()

"""
Synthetic pipe dataset generator.

Writes a tab-delimited table in the layout the calculator loads (header row
plus one row per joint type / size / thickness), with deterministic
pseudo-random consumable weights. Useful for demos and for exercising the
loader with larger tables than `data/db.txt`.
"""

from __future__ import annotations

import csv
import random
import sys
from pathlib import Path

import typer

from weldcalc.config import DatasetColumns

app = typer.Typer(help="Generate a synthetic tab-delimited pipe dataset.")

JOINT_TYPES = ["BW", "SW", "BR", ""]
SIZES = ["0.5", "0.75", "1", "1.5", "2", "3", "4", "6", "8", "10", "12", "14", "16", "18", "20", "24"]
SCHEDULE_FACTORS = [0.06, 0.08, 0.11, 0.15]


def _header(columns: DatasetColumns) -> list[str]:
    return [
        columns.joint_type,
        columns.nominal_size,
        columns.thickness,
        columns.filler_2_4,
        columns.electrode_2_5,
        columns.electrode_3_25,
        columns.electrode_4_0,
    ]


def _generate_rows_tsv(tsv_path: Path, rows: int, seed: int) -> int:
    """Write up to `rows` data rows; returns the number written."""
    rng = random.Random(seed)
    columns = DatasetColumns()
    written = 0

    with tsv_path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f, delimiter="\t", lineterminator="\n")
        writer.writerow(_header(columns))

        for joint_type in JOINT_TYPES:
            for size in SIZES:
                diameter = float(size) * 25.4
                for factor in SCHEDULE_FACTORS:
                    if written >= rows:
                        return written
                    thickness = round(2.0 + diameter * factor / 4, 2)
                    base = diameter * thickness / 10_000
                    filler = round(base * rng.uniform(0.8, 1.2), 3)
                    # thinner walls never need the larger electrodes
                    elec_25 = round(base * rng.uniform(1.0, 1.4), 3) if thickness > 3 else 0
                    elec_325 = round(base * rng.uniform(1.8, 2.4), 3) if thickness > 5 else 0
                    elec_4 = round(base * rng.uniform(2.0, 3.0), 3) if thickness > 9 else 0
                    writer.writerow(
                        [joint_type, size, f"{thickness:g}", filler, elec_25, elec_325, elec_4]
                    )
                    written += 1
    return written


@app.command()
def main(
    rows: int = typer.Option(200, "--rows", "-r", help="Maximum number of data rows."),
    seed: int = typer.Option(42, "--seed", help="Random seed for reproducible weights."),
    output: Path = typer.Option(Path("data/generated.txt"), "--output", "-o", help="Target file."),
) -> None:
    output.parent.mkdir(parents=True, exist_ok=True)
    written = _generate_rows_tsv(output, rows=rows, seed=seed)
    typer.echo(f"Wrote {written} rows to {output}")


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        sys.exit(130)

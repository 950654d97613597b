"""
Sample input generator for the person ETL job.

Writes deterministic pseudo-random `firstName,lastName` lines (no header),
the format `person-etl run --input` consumes.
"""

from __future__ import annotations

import random
import sys
import time
from pathlib import Path

import typer

app = typer.Typer(help="Generate a synthetic firstName,lastName CSV for the import job.")

FIRST_NAMES = ["Jill", "Joe", "Justin", "Jane", "John", "Ada", "Grace", "Linus", "Alan", "Barbara"]
LAST_NAMES = ["Doe", "Smith", "Lovelace", "Hopper", "Torvalds", "Turing", "Liskov"]


def _generate_rows_csv(csv_path: Path, rows: int, seed: int) -> int:
    rng = random.Random(seed)
    with csv_path.open("w", newline="", encoding="utf-8") as f:
        for _ in range(rows):
            f.write(f"{rng.choice(FIRST_NAMES)},{rng.choice(LAST_NAMES)}\n")
    return rows


@app.command()
def main(
    output: Path = typer.Option(
        Path("data/sample-data.csv"),
        "--output",
        "-o",
        help="CSV output path.",
    ),
    rows: int = typer.Option(
        25,
        "--rows",
        "-r",
        help="Number of lines to generate.",
    ),
    seed: int = typer.Option(
        42,
        "--seed",
        help="Deterministic RNG seed.",
    ),
) -> None:
    """
    Generate the CSV file.
    """
    start = time.perf_counter()
    output.parent.mkdir(parents=True, exist_ok=True)
    typer.echo(f"Generating {rows:,} rows -> {output} (seed={seed})")
    _generate_rows_csv(output, rows=rows, seed=seed)
    typer.echo(f"Done in {time.perf_counter() - start:.2f}s")


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)

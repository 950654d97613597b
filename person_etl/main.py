from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import psycopg
import typer

from person_etl.config import get_settings
from person_etl.infrastructure.db_factory import ensure_schema, get_sync_connection
from person_etl.job import JobConfig, run_job
from person_etl.pipeline.abstract import StepStatus
from person_etl.pipeline.writer import InMemoryPersonWriter
from person_etl.reporter import print_summary
from person_etl.utils.logging import configure_logging

app = typer.Typer(help="Person ETL: CSV -> uppercase -> Postgres, in chunks.")


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    config = JobConfig.from_settings(settings)
    typer.echo(
        f"DB={settings.db_user}@{settings.db_host}:{settings.db_port}/{settings.db_name} | "
        f"input={config.input_path} chunk={config.chunk_size} table={config.table} "
        f"checkpoint={config.checkpoint_path or '-'}"
    )


@app.command("init-db")
def init_db(
    dsn: Optional[str] = typer.Option(None, "--dsn", help="Optional DSN override for Postgres."),
    keep: bool = typer.Option(False, "--keep", help="Keep an existing table and its rows."),
) -> None:
    """
    Create the `people` table.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.json_logs)
    try:
        conn = get_sync_connection(dsn)
    except psycopg.Error as exc:
        typer.echo(f"Cannot connect to database: {exc}", err=True)
        raise typer.Exit(code=1)
    try:
        ensure_schema(conn, drop_existing=not keep)
    finally:
        conn.close()
    typer.echo("Schema ready.")


@app.command()
def run(
    input_path: Optional[Path] = typer.Option(
        None,
        "--input",
        "-i",
        help="CSV file with firstName,lastName lines (default: bundled sample data).",
    ),
    chunk_size: Optional[int] = typer.Option(
        None,
        "--chunk-size",
        "-c",
        min=1,
        help="Records per transaction (default from settings).",
    ),
    dsn: Optional[str] = typer.Option(None, "--dsn", help="Optional DSN override for Postgres."),
    checkpoint: Optional[Path] = typer.Option(
        None,
        "--checkpoint",
        help="Restart log of committed chunks; committed records are skipped on rerun.",
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Keep written chunks in memory instead of Postgres."
    ),
    json_logs: Optional[bool] = typer.Option(
        None, "--json-logs/--console-logs", help="Log format (default from settings)."
    ),
) -> None:
    """
    Run the import job once. Exits 1 when the job FAILED or its completion
    listener could not report the persisted rows.
    """
    settings = get_settings()
    configure_logging(
        level=settings.log_level,
        json_logs=settings.json_logs if json_logs is None else json_logs,
    )
    config = JobConfig.from_settings(
        settings,
        input_path=input_path,
        chunk_size=chunk_size,
        dsn=dsn,
        checkpoint_path=checkpoint,
    )

    writer = InMemoryPersonWriter() if dry_run else None
    execution = run_job(config, writer=writer)
    print_summary(execution)

    if execution.status is not StepStatus.COMPLETED:
        typer.echo(f"Job {config.job_name} FAILED: {execution.step.exit_description}", err=True)
        raise typer.Exit(code=1)
    if execution.step.listener_errors:
        typer.echo(
            f"Job {config.job_name} COMPLETED but the completion listener failed: "
            f"{execution.step.listener_description}",
            err=True,
        )
        raise typer.Exit(code=1)


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()

from __future__ import annotations

from typing import Optional

from rich import box
from rich.console import Console
from rich.table import Table

from person_etl.job import JobExecution
from person_etl.pipeline.abstract import StepStatus

_STATUS_STYLE = {
    StepStatus.COMPLETED: "bold green",
    StepStatus.FAILED: "bold red",
}


def build_summary_table(execution: JobExecution) -> Table:
    """
    Render a job execution as a rich table: one row for the step counters,
    followed by the rows the completion listener found in the sink.
    """
    step = execution.step
    style = _STATUS_STYLE.get(execution.status, "yellow")

    table = Table(
        title=f"{execution.job_name} [{style}]{execution.status.value}[/{style}]",
        box=box.ROUNDED,
        caption=f"chunk size {step.chunk_size}",
    )
    table.add_column("Step", style="cyan", no_wrap=True)
    table.add_column("Read", justify="right", style="magenta")
    table.add_column("Written", justify="right", style="magenta")
    table.add_column("Commits", justify="right", style="blue")
    table.add_column("Skipped", justify="right", style="blue")
    table.add_column("Duration (s)", justify="right", style="green")
    table.add_column("Peak Memory (MB)", justify="right", style="yellow")

    mem_bytes = execution.peak_rss_bytes or 0
    table.add_row(
        step.step_name,
        f"{step.read_count:,}",
        f"{step.write_count:,}",
        str(step.commit_count),
        str(step.skipped_count),
        f"{execution.duration_seconds:.2f}",
        f"{mem_bytes / (1024 * 1024):.2f}",
    )
    return table


def print_summary(execution: JobExecution, console: Optional[Console] = None) -> None:
    console = console or Console()
    console.print(build_summary_table(execution))

    if execution.found:
        found = Table(title="Rows in the database", box=box.SIMPLE)
        found.add_column("firstName", style="cyan")
        found.add_column("lastName", style="cyan")
        for person in execution.found:
            found.add_row(person.first_name, person.last_name)
        console.print(found)

    if execution.status is StepStatus.FAILED:
        console.print(f"[red]{execution.step.exit_description}[/red]")
    if execution.step.listener_errors:
        console.print(
            f"[yellow]Completion listener failed: {execution.step.listener_description}[/yellow]"
        )


__all__ = ["build_summary_table", "print_summary"]

"""
Job wiring for the person ETL pipeline.

Everything is constructed explicitly from a `JobConfig`; there is no
registry. Usage:

    from person_etl.job import JobConfig, run_job

    execution = run_job(JobConfig(input_path="people.csv", dsn="postgresql://..."))
    print(execution.status)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from importlib import resources
from pathlib import Path
from typing import List, Optional, Sequence

from pydantic import BaseModel, Field

from person_etl.config import Settings
from person_etl.errors import BatchJobError
from person_etl.infrastructure.db_factory import connection_factory
from person_etl.listener import InMemoryCompletionListener, JobCompletionNotificationListener
from person_etl.pipeline.abstract import (
    ItemWriter,
    JobExecutionListener,
    StepExecution,
    StepStatus,
)
from person_etl.pipeline.checkpoint import ChunkCheckpointLog
from person_etl.pipeline.processor import PersonItemProcessor
from person_etl.pipeline.reader import CsvPersonReader
from person_etl.pipeline.step import DEFAULT_CHUNK_SIZE, ChunkStep
from person_etl.pipeline.writer import InMemoryPersonWriter, PostgresPersonWriter
from person_etl.utils.logging import get_logger
from person_etl.utils.profiler import profile_block

log = get_logger(__name__)


def sample_data_path() -> Path:
    """Path of the bundled five-record sample file."""
    return Path(str(resources.files("person_etl.resources").joinpath("sample-data.csv")))


class JobConfig(BaseModel):
    """
    Explicit job configuration: input, chunking and sink.
    """

    input_path: Path = Field(default_factory=sample_data_path)
    chunk_size: int = Field(DEFAULT_CHUNK_SIZE, ge=1)
    dsn: Optional[str] = None
    table: str = "people"
    checkpoint_path: Optional[Path] = None
    job_name: str = "importUserJob"

    model_config = {"frozen": True}

    @classmethod
    def from_settings(cls, settings: Settings, **overrides) -> "JobConfig":
        values = {
            "chunk_size": settings.chunk_size,
            "dsn": settings.dsn,
            "table": settings.target_table,
        }
        if settings.input_path:
            values["input_path"] = Path(settings.input_path)
        if settings.checkpoint_path:
            values["checkpoint_path"] = Path(settings.checkpoint_path)
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


@dataclass
class JobExecution:
    job_name: str
    step: StepExecution
    start_time: datetime
    end_time: Optional[datetime] = None
    duration_seconds: float = 0.0
    peak_rss_bytes: Optional[int] = None
    found: List = field(default_factory=list)

    @property
    def status(self) -> StepStatus:
        return self.step.status

    @property
    def exception(self) -> Optional[BaseException]:
        return self.step.exception


def build_step(
    config: JobConfig,
    writer: Optional[ItemWriter] = None,
    listeners: Optional[Sequence[JobExecutionListener]] = None,
) -> ChunkStep:
    """
    Assemble reader, processor, writer and listeners for one execution.

    Without an explicit writer the Postgres writer and the database-backed
    completion listener are used.
    """
    if writer is None:
        writer = PostgresPersonWriter(connect=connection_factory(config.dsn), table=config.table)
    if listeners is None:
        if isinstance(writer, InMemoryPersonWriter):
            listeners = [InMemoryCompletionListener(writer)]
        else:
            listeners = [
                JobCompletionNotificationListener(connection_factory(config.dsn), config.table)
            ]
    checkpoint = ChunkCheckpointLog(config.checkpoint_path) if config.checkpoint_path else None
    return ChunkStep(
        reader=CsvPersonReader(config.input_path),
        processor=PersonItemProcessor(),
        writer=writer,
        chunk_size=config.chunk_size,
        listeners=listeners,
        checkpoint=checkpoint,
    )


def run_job(
    config: JobConfig,
    writer: Optional[ItemWriter] = None,
    listeners: Optional[Sequence[JobExecutionListener]] = None,
) -> JobExecution:
    """
    Run the job once and return its execution.

    Job errors do not escape: a FAILED execution carries the exception.
    A completion listener that raises leaves the import COMPLETED; its error
    is kept in `execution.step.listener_errors`.
    """
    step = build_step(config, writer=writer, listeners=listeners)
    job = JobExecution(
        job_name=config.job_name,
        step=step.execution,
        start_time=datetime.now(timezone.utc),
    )
    log.info(
        f"[JOB START] {config.job_name}",
        extra={"job": config.job_name, "input": str(config.input_path), "chunk_size": config.chunk_size},
    )

    with profile_block(config.job_name) as stats:
        try:
            step.execute()
        except BatchJobError:
            log.exception(f"[JOB FAILED] {config.job_name}", extra={"job": config.job_name})

    job.end_time = datetime.now(timezone.utc)
    job.duration_seconds = stats.duration_seconds
    job.peak_rss_bytes = stats.peak_rss_bytes
    for listener in step.listeners:
        job.found.extend(getattr(listener, "found", []))

    log.info(
        f"[JOB {job.status.value}] {config.job_name}",
        extra={
            "job": config.job_name,
            "status": job.status.value,
            "duration": round(job.duration_seconds, 3),
        },
    )
    return job


__all__ = ["JobConfig", "JobExecution", "build_step", "run_job", "sample_data_path"]

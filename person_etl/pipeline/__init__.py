"""
Pipeline package for the person ETL job.

Re-exports the stage contracts and the concrete reader, processor, writers
and chunk step so callers can import from `person_etl.pipeline` directly.
"""

from person_etl.pipeline.abstract import (
    ItemProcessor,
    ItemReader,
    ItemWriter,
    JobExecutionListener,
    StepExecution,
    StepStatus,
)
from person_etl.pipeline.checkpoint import ChunkCheckpointLog
from person_etl.pipeline.processor import PersonItemProcessor, transform
from person_etl.pipeline.reader import CsvPersonReader, ListPersonReader
from person_etl.pipeline.step import DEFAULT_CHUNK_SIZE, ChunkStep
from person_etl.pipeline.writer import InMemoryPersonWriter, PostgresPersonWriter

__all__ = [
    # Contracts
    "ItemProcessor",
    "ItemReader",
    "ItemWriter",
    "JobExecutionListener",
    "StepExecution",
    "StepStatus",
    # Stages
    "CsvPersonReader",
    "ListPersonReader",
    "PersonItemProcessor",
    "transform",
    "InMemoryPersonWriter",
    "PostgresPersonWriter",
    # Driver
    "ChunkCheckpointLog",
    "ChunkStep",
    "DEFAULT_CHUNK_SIZE",
]

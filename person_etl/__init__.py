"""
Person ETL - a chunk-oriented CSV to Postgres import job.

Reads `firstName,lastName` lines, uppercases both fields and inserts the
result into the `people` table in transactional chunks:

- Lazy flat-file reader
- Stateless uppercase processor
- Transactional Postgres chunk writer
- Chunk step driver with an optional restart log
- Completion listener that reports the persisted rows
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from person_etl.config import Settings, get_settings
from person_etl.domain.models import Person
from person_etl.errors import BatchJobError, ParseError, ResourceError, WriteError
from person_etl.job import JobConfig, JobExecution, run_job
from person_etl.pipeline.abstract import StepExecution, StepStatus
from person_etl.pipeline.step import ChunkStep
from person_etl.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Domain
    "Person",
    # Errors
    "BatchJobError",
    "ParseError",
    "ResourceError",
    "WriteError",
    # Job
    "ChunkStep",
    "JobConfig",
    "JobExecution",
    "StepExecution",
    "StepStatus",
    "run_job",
    # Logging
    "configure_logging",
    "get_logger",
]

"""
Pipeline interfaces and execution contracts for the person ETL job.

The chunk step only talks to these protocols, so a reader, processor or
writer can be swapped (CSV vs. in-memory, Postgres vs. list) without touching
the driver loop.
"""

from __future__ import annotations

import abc
import enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterator, List, Optional, Protocol, Sequence, runtime_checkable

from person_etl.domain.models import Person


class StepStatus(str, enum.Enum):
    INIT = "INIT"
    RUNNING = "RUNNING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"

    @property
    def is_terminal(self) -> bool:
        return self in (StepStatus.COMPLETED, StepStatus.FAILED)


@dataclass
class StepExecution:
    """
    Counters and outcome of one chunk step run.
    """

    step_name: str
    chunk_size: int
    status: StepStatus = StepStatus.INIT
    read_count: int = 0
    write_count: int = 0
    commit_count: int = 0
    skipped_count: int = 0
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    exception: Optional[BaseException] = field(default=None, repr=False)
    listener_errors: List[BaseException] = field(default_factory=list, repr=False)

    @property
    def exit_description(self) -> str:
        if self.exception is None:
            return ""
        return f"{type(self.exception).__name__}: {self.exception}"

    @property
    def listener_description(self) -> str:
        return "; ".join(f"{type(exc).__name__}: {exc}" for exc in self.listener_errors)


@runtime_checkable
class ItemReader(Protocol):
    """
    Lazy, forward-only source of records.

    Implementations raise `ResourceError` when opening fails and `ParseError`
    on malformed input; exhaustion is plain `StopIteration`.
    """

    def open(self) -> None: ...

    def __iter__(self) -> Iterator[Person]: ...

    def close(self) -> None: ...


@runtime_checkable
class ItemProcessor(Protocol):
    """Pure record-to-record transformation."""

    def process(self, item: Person) -> Person: ...


@runtime_checkable
class ItemWriter(Protocol):
    """
    Chunk sink.

    `write` persists the whole chunk atomically or raises `WriteError`
    after rolling it back.
    """

    def open(self) -> None: ...

    def write(self, chunk: Sequence[Person]) -> None: ...

    def close(self) -> None: ...


class JobExecutionListener(abc.ABC):
    """
    Hooks around a step run. Subclasses override what they need.
    """

    def before_job(self, execution: StepExecution) -> None:
        """Called once when the step enters RUNNING."""

    @abc.abstractmethod
    def after_job(self, execution: StepExecution) -> None:  # pragma: no cover - interface only
        """Called once after the step reached COMPLETED."""
        raise NotImplementedError


__all__ = [
    "ItemProcessor",
    "ItemReader",
    "ItemWriter",
    "JobExecutionListener",
    "StepExecution",
    "StepStatus",
]

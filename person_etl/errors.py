"""
Error taxonomy for the person ETL job.

Every error here is fatal to a run: the step transitions to FAILED and the
exception propagates to the caller. Nothing is retried.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:  # pragma: no cover
    from person_etl.pipeline.abstract import StepExecution


class BatchJobError(Exception):
    """Base class for all job failures."""

    #: Filled in by the step that observed the failure.
    execution: Optional["StepExecution"] = None


class ResourceError(BatchJobError):
    """The input resource cannot be opened or read."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot open input resource '{path}': {reason}")


class ParseError(BatchJobError):
    """A line does not split into exactly two fields."""

    def __init__(self, line_number: int, line: str, field_count: int) -> None:
        self.line_number = line_number
        self.line = line
        self.field_count = field_count
        super().__init__(
            f"Line {line_number}: expected 2 fields, got {field_count} in {line!r}"
        )


class WriteError(BatchJobError):
    """A chunk could not be persisted; the whole chunk was rolled back."""

    def __init__(self, reason: str, chunk_number: Optional[int] = None, size: int = 0) -> None:
        self.reason = reason
        self.chunk_number = chunk_number
        self.size = size
        super().__init__(reason)

    def __str__(self) -> str:
        # chunk_number may be renumbered by the step after the writer raised
        if self.chunk_number is None:
            return self.reason
        return f"Chunk {self.chunk_number} ({self.size} items) rolled back: {self.reason}"


__all__ = ["BatchJobError", "ResourceError", "ParseError", "WriteError"]

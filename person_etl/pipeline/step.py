"""
Chunk-oriented step: read, transform, buffer, flush.

State machine: INIT -> RUNNING -> {COMPLETED | FAILED}. A full buffer is
flushed synchronously through the writer; the remainder is flushed once at
end of input, and never when it is empty. Reader and writer are closed on
every exit path.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional, Sequence

from person_etl.domain.models import Person
from person_etl.errors import BatchJobError, WriteError
from person_etl.pipeline.abstract import (
    ItemProcessor,
    ItemReader,
    ItemWriter,
    JobExecutionListener,
    StepExecution,
    StepStatus,
)
from person_etl.pipeline.checkpoint import ChunkCheckpointLog
from person_etl.utils.logging import get_logger

log = get_logger(__name__)

DEFAULT_CHUNK_SIZE = 10


class ChunkStep:
    """
    Drive one reader/processor/writer pipeline to completion.

    Parameters
    ----------
    reader, processor, writer
        Pipeline stages; see `person_etl.pipeline.abstract`.
    chunk_size : int
        Buffer capacity; a write happens each time it is reached.
    listeners : sequence of JobExecutionListener
        `after_job` runs once per listener after COMPLETED, never after FAILED.
        A listener that raises is logged and recorded in
        `execution.listener_errors`; the step stays COMPLETED.
    checkpoint : ChunkCheckpointLog, optional
        Restart log; committed records are skipped on the next run.
    name : str
        Step name used in logs.
    """

    def __init__(
        self,
        reader: ItemReader,
        processor: ItemProcessor,
        writer: ItemWriter,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        listeners: Sequence[JobExecutionListener] = (),
        checkpoint: Optional[ChunkCheckpointLog] = None,
        name: str = "step1",
    ) -> None:
        if chunk_size < 1:
            raise ValueError(f"chunk_size must be >= 1, got {chunk_size}")
        self.reader = reader
        self.processor = processor
        self.writer = writer
        self.chunk_size = chunk_size
        self.listeners = list(listeners)
        self.checkpoint = checkpoint
        self.execution = StepExecution(step_name=name, chunk_size=chunk_size)

    @property
    def status(self) -> StepStatus:
        return self.execution.status

    def execute(self) -> StepExecution:
        """
        Run the step once.

        Returns
        -------
        StepExecution
            The COMPLETED execution.

        Raises
        ------
        BatchJobError
            ResourceError, ParseError or WriteError; the execution is FAILED
            and attached to the exception as `execution`.
        """
        if self.execution.status is not StepStatus.INIT:
            raise RuntimeError(
                f"Step '{self.execution.step_name}' already executed "
                f"(status={self.execution.status.value})"
            )

        execution = self.execution
        execution.status = StepStatus.RUNNING
        execution.start_time = datetime.now(timezone.utc)
        log.info(
            f"[STEP START] {execution.step_name}",
            extra={"step": execution.step_name, "chunk_size": self.chunk_size},
        )

        try:
            for listener in self.listeners:
                listener.before_job(execution)
            self.reader.open()
            self.writer.open()
            self._run_chunks()
        except BatchJobError as exc:
            self._finish(StepStatus.FAILED, exc)
            exc.execution = execution
            log.error(
                f"[STEP FAILED] {execution.step_name}: {execution.exit_description}",
                extra={
                    "step": execution.step_name,
                    "read": execution.read_count,
                    "written": execution.write_count,
                    "commits": execution.commit_count,
                },
            )
            raise
        except Exception as exc:
            self._finish(StepStatus.FAILED, exc)
            raise
        finally:
            self._release()

        self._finish(StepStatus.COMPLETED)
        log.info(
            f"[STEP COMPLETE] {execution.step_name}",
            extra={
                "step": execution.step_name,
                "read": execution.read_count,
                "written": execution.write_count,
                "commits": execution.commit_count,
                "skipped": execution.skipped_count,
            },
        )
        if self.checkpoint is not None:
            self.checkpoint.clear()
        for listener in self.listeners:
            try:
                listener.after_job(execution)
            except Exception as exc:  # noqa: BLE001 - committed chunks stay committed
                execution.listener_errors.append(exc)
                log.exception(
                    f"[LISTENER FAILED] {type(listener).__name__}",
                    extra={"step": execution.step_name},
                )
        return execution

    def _run_chunks(self) -> None:
        execution = self.execution
        to_skip, chunk_number = self.checkpoint.resume_point() if self.checkpoint else (0, 0)
        if to_skip:
            log.info(
                "Resuming after committed chunks",
                extra={"skip_items": to_skip, "last_chunk": chunk_number},
            )

        buffer: List[Person] = []
        for item in self.reader:
            if execution.skipped_count < to_skip:
                execution.skipped_count += 1
                continue
            execution.read_count += 1
            buffer.append(self.processor.process(item))
            if len(buffer) >= self.chunk_size:
                chunk_number += 1
                self._flush(buffer, chunk_number)
                buffer = []

        if buffer:
            chunk_number += 1
            self._flush(buffer, chunk_number)

    def _flush(self, chunk: List[Person], chunk_number: int) -> None:
        try:
            self.writer.write(chunk)
        except WriteError as exc:
            # writers count from 1 per instance; a resumed run continues the log's numbering
            exc.chunk_number = chunk_number
            exc.size = len(chunk)
            raise
        self.execution.write_count += len(chunk)
        self.execution.commit_count += 1
        if self.checkpoint is not None:
            self.checkpoint.append(chunk_number, len(chunk))
        log.debug("Chunk flushed", extra={"chunk": chunk_number, "items": len(chunk)})

    def _finish(self, status: StepStatus, exc: Optional[BaseException] = None) -> None:
        self.execution.status = status
        self.execution.exception = exc
        self.execution.end_time = datetime.now(timezone.utc)

    def _release(self) -> None:
        try:
            self.reader.close()
        finally:
            self.writer.close()


__all__ = ["ChunkStep", "DEFAULT_CHUNK_SIZE"]

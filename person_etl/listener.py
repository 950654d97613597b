"""
Completion listener: report what landed in the sink.
"""

from __future__ import annotations

from typing import List

from psycopg import sql

from person_etl.domain.models import Person
from person_etl.infrastructure.db_factory import ConnectionFactory
from person_etl.pipeline.abstract import JobExecutionListener, StepExecution
from person_etl.utils.logging import get_logger

log = get_logger(__name__)


def select_statement(table: str) -> sql.Composed:
    return sql.SQL("SELECT first_name, last_name FROM {} ORDER BY person_id").format(
        sql.Identifier(table)
    )


class JobCompletionNotificationListener(JobExecutionListener):
    """
    After a COMPLETED run, query every persisted row and log it.

    A fresh connection is used so only committed rows are visible.
    """

    def __init__(self, connect: ConnectionFactory, table: str = "people") -> None:
        self._connect = connect
        self.table = table
        self.found: List[Person] = []

    def after_job(self, execution: StepExecution) -> None:
        log.info("!!! JOB FINISHED! Time to verify the results")
        conn = self._connect()
        try:
            with conn.cursor() as cur:
                cur.execute(select_statement(self.table))
                rows = cur.fetchall()
        finally:
            conn.close()

        self.found = [Person(first_name=first, last_name=last) for first, last in rows]
        for person in self.found:
            log.info(f"Found <{person}> in the database.")


class InMemoryCompletionListener(JobExecutionListener):
    """Same report, read from an in-memory writer."""

    def __init__(self, writer) -> None:
        self.writer = writer
        self.found: List[Person] = []

    def after_job(self, execution: StepExecution) -> None:
        log.info("!!! JOB FINISHED! Time to verify the results")
        self.found = list(self.writer.items)
        for person in self.found:
            log.info(f"Found <{person}> in the database.")


__all__ = [
    "InMemoryCompletionListener",
    "JobCompletionNotificationListener",
    "select_statement",
]

"""
Chunk writers for the `people` sink.

`PostgresPersonWriter` persists each chunk inside one psycopg transaction:
either every row of the chunk is committed or none is. The connection lives
for one job execution and is released by `close()`.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

import psycopg
from psycopg import Connection, sql

from person_etl.domain.models import Person
from person_etl.errors import WriteError
from person_etl.infrastructure.db_factory import ConnectionFactory, connection_factory
from person_etl.utils.logging import get_logger

log = get_logger(__name__)


def insert_statement(table: str) -> sql.Composed:
    return sql.SQL("INSERT INTO {} (first_name, last_name) VALUES (%s, %s)").format(
        sql.Identifier(table)
    )


class PostgresPersonWriter:
    """
    Insert chunks of Person records into a Postgres table.

    Parameters
    ----------
    connect : ConnectionFactory, optional
        Zero-argument callable returning a psycopg connection. Defaults to
        the retrying factory bound to `dsn` (or settings).
    dsn : str, optional
        Connection string used when `connect` is not given.
    table : str
        Target table; must already exist.
    """

    def __init__(
        self,
        connect: Optional[ConnectionFactory] = None,
        dsn: Optional[str] = None,
        table: str = "people",
    ) -> None:
        self._connect = connect or connection_factory(dsn)
        self.table = table
        self._conn: Optional[Connection] = None
        self._chunks_written = 0

    def open(self) -> None:
        if self._conn is not None:
            return
        try:
            self._conn = self._connect()
        except psycopg.Error as exc:
            raise WriteError(f"Cannot connect to sink: {exc}") from exc

    def write(self, chunk: Sequence[Person]) -> None:
        if not chunk:
            return
        self.open()
        assert self._conn is not None
        chunk_number = self._chunks_written + 1
        try:
            with self._conn.transaction():
                with self._conn.cursor() as cur:
                    cur.executemany(insert_statement(self.table), [p.as_row() for p in chunk])
        except psycopg.Error as exc:
            log.error(
                "Chunk rolled back",
                extra={"items": len(chunk), "table": self.table},
            )
            raise WriteError(
                str(exc),
                chunk_number=chunk_number,
                size=len(chunk),
            ) from exc
        self._chunks_written = chunk_number
        log.debug("Chunk committed", extra={"chunk": chunk_number, "items": len(chunk)})

    def close(self) -> None:
        if self._conn is None:
            return
        try:
            self._conn.close()
        finally:
            self._conn = None

    @property
    def closed(self) -> bool:
        return self._conn is None


class InMemoryPersonWriter:
    """
    List-backed writer with the same all-or-nothing chunk semantics.

    `fail_on_chunk` makes the given 1-based chunk raise `WriteError`, leaving
    earlier chunks in `items`.
    """

    def __init__(self, fail_on_chunk: Optional[int] = None) -> None:
        self.items: List[Person] = []
        self.chunks: List[List[Person]] = []
        self.fail_on_chunk = fail_on_chunk
        self.closed = True
        self.open_calls = 0
        self.close_calls = 0

    def open(self) -> None:
        self.open_calls += 1
        self.closed = False

    def write(self, chunk: Sequence[Person]) -> None:
        if not chunk:
            return
        chunk_number = len(self.chunks) + 1
        if chunk_number == self.fail_on_chunk:
            raise WriteError(
                "simulated failure",
                chunk_number=chunk_number,
                size=len(chunk),
            )
        self.chunks.append(list(chunk))
        self.items.extend(chunk)

    def close(self) -> None:
        self.close_calls += 1
        self.closed = True


__all__ = ["InMemoryPersonWriter", "PostgresPersonWriter", "insert_statement"]

"""
Database connection factory utilities for the person ETL job.

Provides DSN composition, a retrying connection factory, and schema
provisioning for the `people` table. Only establishing a connection is
retried (transient network errors); chunk writes never are.
"""

from __future__ import annotations

from importlib import resources
from typing import Callable, Optional

import psycopg
from psycopg import Connection
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from person_etl.config import get_settings
from person_etl.utils.logging import get_logger

log = get_logger(__name__)

ConnectionFactory = Callable[[], Connection]


def build_dsn() -> str:
    """Compose a DSN string from settings."""
    return get_settings().dsn


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type((psycopg.OperationalError, psycopg.InterfaceError)),
    reraise=True,
)
def get_sync_connection(dsn: Optional[str] = None) -> Connection:
    """
    Acquire a dedicated synchronous connection with automatic retry.

    Retries up to 3 times with exponential backoff for transient connection errors.

    Parameters
    ----------
    dsn : str, optional
        Connection string; defaults to the one built from settings.

    Returns
    -------
    Connection
        A new psycopg connection instance (autocommit off).

    Raises
    ------
    psycopg.OperationalError
        If connection fails after all retry attempts.
    """
    settings = get_settings()
    return psycopg.connect(dsn or build_dsn(), connect_timeout=settings.db_connect_timeout)


def connection_factory(dsn: Optional[str] = None) -> ConnectionFactory:
    """Bind a DSN into a zero-argument connection factory."""

    def _connect() -> Connection:
        return get_sync_connection(dsn)

    return _connect


def load_schema_sql() -> str:
    """Return the DDL shipped with the package."""
    return resources.files("person_etl.resources").joinpath("schema.sql").read_text(encoding="utf-8")


def ensure_schema(conn: Connection, drop_existing: bool = True) -> None:
    """
    Provision the `people` table.

    With `drop_existing` the table is recreated, matching a fresh run of the
    job; otherwise existing rows are kept.
    """
    ddl = load_schema_sql()
    if not drop_existing:
        ddl = ddl.replace("DROP TABLE IF EXISTS people;", "").replace(
            "CREATE TABLE people", "CREATE TABLE IF NOT EXISTS people"
        )
    with conn.transaction():
        with conn.cursor() as cur:
            cur.execute(ddl)
    log.info("Schema provisioned", extra={"drop_existing": drop_existing})


__all__ = [
    "ConnectionFactory",
    "build_dsn",
    "connection_factory",
    "ensure_schema",
    "get_sync_connection",
    "load_schema_sql",
]

"""
Pytest configuration for the person ETL job.

Provides fixtures for:
- Input files (sample data, generated data, malformed data)
- Fake psycopg connections with all-or-nothing transaction semantics
- Database connection management for integration tests
"""

from __future__ import annotations

import contextlib
import os
from pathlib import Path
from typing import Generator, List, Optional, Tuple

import psycopg
import pytest

from person_etl.config import Settings, get_settings
from person_etl.infrastructure.db_factory import ensure_schema

SAMPLE_LINES = ["Jill,Doe", "Joe,Doe", "Justin,Doe", "Jane,Doe", "John,Doe"]


@pytest.fixture(autouse=True)
def _clear_settings_cache() -> Generator[None, None, None]:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def write_csv(tmp_path: Path):
    """Write lines to a fresh CSV file and return its path."""

    def _write(lines: List[str], name: str = "people.csv") -> Path:
        path = tmp_path / name
        path.write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def sample_csv(write_csv) -> Path:
    return write_csv(SAMPLE_LINES)


def _make_lines(count: int) -> List[str]:
    return [f"first{i},last{i}" for i in range(count)]


@pytest.fixture
def make_lines():
    """Build `count` distinct lowercase input lines."""
    return _make_lines


class FakeCursor:
    def __init__(self, conn: "FakeConnection") -> None:
        self._conn = conn

    def __enter__(self) -> "FakeCursor":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        del exc_type, exc, tb

    def executemany(self, query, params_seq) -> None:
        self._conn.statements.append(query)
        for params in params_seq:
            if self._conn.fail_on_value is not None and self._conn.fail_on_value in params:
                raise psycopg.errors.StringDataRightTruncation("value too long")
            self._conn.pending.append(tuple(params))

    def execute(self, query, params=None) -> None:
        self._conn.statements.append(query)

    def fetchall(self) -> List[Tuple[str, str]]:
        return list(self._conn.rows)


class FakeConnection:
    """
    Minimal stand-in for psycopg.Connection.

    Rows inserted inside `transaction()` move to `rows` only when the block
    exits cleanly; otherwise they are discarded.
    """

    def __init__(self, fail_on_value: Optional[str] = None) -> None:
        self.rows: List[Tuple[str, str]] = []
        self.pending: List[Tuple[str, str]] = []
        self.statements: list = []
        self.fail_on_value = fail_on_value
        self.commits = 0
        self.rollbacks = 0
        self.closed = False

    def cursor(self) -> FakeCursor:
        if self.closed:
            raise psycopg.InterfaceError("the connection is closed")
        return FakeCursor(self)

    @contextlib.contextmanager
    def transaction(self):
        self.pending = []
        try:
            yield self
        except BaseException:
            self.pending = []
            self.rollbacks += 1
            raise
        self.rows.extend(self.pending)
        self.pending = []
        self.commits += 1

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_connection() -> FakeConnection:
    return FakeConnection()


@pytest.fixture
def make_fake_connection():
    return FakeConnection


# Integration fixtures


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """
    Settings fixture with test-specific overrides.

    Can be overridden via environment variables in CI or local testing.
    """
    return Settings(
        db_host=os.getenv("DB_HOST", "localhost"),
        db_port=int(os.getenv("DB_PORT", "5432")),
        db_user=os.getenv("DB_USER", "postgres"),
        db_password=os.getenv("DB_PASSWORD", "postgres"),
        db_name=os.getenv("DB_NAME", "person_etl"),
        log_level="DEBUG",
    )


@pytest.fixture(scope="session")
def test_dsn(test_settings: Settings) -> str:
    return test_settings.dsn


@pytest.fixture(scope="session")
def db_connection_available(test_dsn: str) -> bool:
    """
    Check if database is reachable.

    Used to conditionally skip integration tests when DB is not available.
    """
    try:
        with psycopg.connect(test_dsn, connect_timeout=5) as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1;")
                cur.fetchone()
        return True
    except psycopg.Error:
        return False


@pytest.fixture(scope="session")
def db_connection(
    test_dsn: str, db_connection_available: bool
) -> Generator[psycopg.Connection, None, None]:
    """
    Provide a session-scoped autocommit connection for integration tests.

    Skips tests if database is not available.
    """
    if not db_connection_available:
        pytest.skip("Database not available for integration tests")

    conn = psycopg.connect(test_dsn, autocommit=True)
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="function")
def clean_people_table(db_connection: psycopg.Connection) -> Generator[None, None, None]:
    """
    Recreate the people table before each test function.
    """
    ensure_schema(db_connection, drop_existing=True)
    yield
    with db_connection.cursor() as cur:
        cur.execute("TRUNCATE TABLE people RESTART IDENTITY;")


@pytest.fixture
def fetch_people(db_connection: psycopg.Connection):
    """Return the rows currently committed in the people table."""

    def _fetch() -> List[Tuple[str, str]]:
        with db_connection.cursor() as cur:
            cur.execute("SELECT first_name, last_name FROM people ORDER BY person_id;")
            return [tuple(row) for row in cur.fetchall()]

    return _fetch

"""
Integration tests for the person ETL job against a real PostgreSQL instance.

These tests verify that:
1. The sample job persists five uppercased rows in one chunk
2. A failing chunk leaves earlier chunks committed and later ones absent
3. The completion listener reads back what was committed

Run with: RUN_INTEGRATION_TESTS=1 pytest tests/integration/
"""

from __future__ import annotations

import os

import pytest

from person_etl.errors import WriteError
from person_etl.job import JobConfig, run_job
from person_etl.pipeline.abstract import StepStatus
from person_etl.pipeline.processor import PersonItemProcessor
from person_etl.pipeline.reader import CsvPersonReader
from person_etl.pipeline.step import ChunkStep
from person_etl.pipeline.writer import PostgresPersonWriter

CHUNK_SIZE = 10

pytestmark = pytest.mark.skipif(
    os.getenv("RUN_INTEGRATION_TESTS", "0") != "1",
    reason="Integration tests require RUN_INTEGRATION_TESTS=1 and reachable Postgres",
)


class TestSampleJob:
    def test_sample_job_persists_uppercased_rows(self, clean_people_table, test_dsn, fetch_people):
        execution = run_job(JobConfig(dsn=test_dsn))

        assert execution.status is StepStatus.COMPLETED
        assert execution.step.commit_count == 1
        assert fetch_people() == [
            ("JILL", "DOE"),
            ("JOE", "DOE"),
            ("JUSTIN", "DOE"),
            ("JANE", "DOE"),
            ("JOHN", "DOE"),
        ]
        assert [p.first_name for p in execution.found] == ["JILL", "JOE", "JUSTIN", "JANE", "JOHN"]

    def test_row_count_matches_input(
        self, clean_people_table, test_dsn, fetch_people, write_csv, make_lines
    ):
        path = write_csv(make_lines(37))
        execution = run_job(JobConfig(input_path=path, dsn=test_dsn))

        assert execution.status is StepStatus.COMPLETED
        assert execution.step.commit_count == 4
        assert len(fetch_people()) == 37


class TestChunkAtomicity:
    def test_failed_chunk_is_absent_and_earlier_chunks_remain(
        self, clean_people_table, test_dsn, fetch_people, write_csv, make_lines
    ):
        # first_name is VARCHAR(20); the 15th record overflows it and fails chunk 2
        lines = make_lines(14) + ["x" * 30 + ",Doe"] + make_lines(10)
        step = ChunkStep(
            CsvPersonReader(write_csv(lines)),
            PersonItemProcessor(),
            PostgresPersonWriter(dsn=test_dsn),
            CHUNK_SIZE,
        )

        with pytest.raises(WriteError):
            step.execute()

        rows = fetch_people()
        assert step.status is StepStatus.FAILED
        assert len(rows) == CHUNK_SIZE
        assert rows[0] == ("FIRST0", "LAST0")
        assert step.writer.closed

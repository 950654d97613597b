from pathlib import Path
from time import sleep

from person_etl import config
from person_etl.infrastructure.db_factory import load_schema_sql
from person_etl.pipeline.reader import CsvPersonReader
from person_etl.utils import profiler
from scripts import generate_data


def test_settings_defaults(monkeypatch):
    for var in ("DB_HOST", "DB_PORT", "CHUNK_SIZE", "TARGET_TABLE"):
        monkeypatch.delenv(var, raising=False)
    settings = config.Settings(_env_file=None)
    assert settings.db_host == "localhost"
    assert settings.db_port == 5432
    assert settings.chunk_size == 10
    assert settings.target_table == "people"
    assert settings.dsn.startswith("postgresql://")


def test_get_settings_is_cached():
    assert config.get_settings() is config.get_settings()


def test_profile_block_measures_time():
    with profiler.profile_block("sleep") as stats:
        sleep(0.05)
    assert stats.duration_seconds >= 0.05
    assert stats.peak_rss_bytes is None or stats.peak_rss_bytes > 0


def test_schema_defines_people_table():
    ddl = load_schema_sql()
    assert "CREATE TABLE people" in ddl
    assert "first_name" in ddl and "last_name" in ddl


def test_generate_data_writes_readable_csv(tmp_path: Path):
    csv_path = tmp_path / "people.csv"
    generate_data._generate_rows_csv(csv_path, rows=12, seed=123)
    with CsvPersonReader(csv_path) as reader:
        people = list(reader)
    assert len(people) == 12
    assert all(p.first_name in generate_data.FIRST_NAMES for p in people)

from __future__ import annotations

import json
import logging

from person_etl.utils.logging import _json_formatter

EXPECTED_ITEMS = 10
EXPECTED_CHUNK = 3


def _record() -> logging.LogRecord:
    return logging.LogRecord(
        name="test.logger",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="hello",
        args=(),
        exc_info=None,
    )


def test_json_formatter_promotes_standard_extra_fields() -> None:
    record = _record()
    record.items = EXPECTED_ITEMS
    record.step = "step1"

    payload = json.loads(_json_formatter(record))

    assert payload["level"] == "INFO"
    assert payload["logger"] == "test.logger"
    assert payload["message"] == "hello"
    assert payload["items"] == EXPECTED_ITEMS
    assert payload["step"] == "step1"
    assert "pathname" not in payload


def test_json_formatter_supports_legacy_nested_extra_field() -> None:
    record = _record()
    record.extra = {"chunk": EXPECTED_CHUNK}

    payload = json.loads(_json_formatter(record))

    assert payload["chunk"] == EXPECTED_CHUNK

"""
Flat-file reader for `firstName,lastName` records.

The file is consumed line by line; nothing is buffered beyond the current
line. No header row, no quoting or escaping.
"""

from __future__ import annotations

from pathlib import Path
from typing import IO, Iterator, Optional

from person_etl.domain.models import Person
from person_etl.errors import ParseError, ResourceError
from person_etl.utils.logging import get_logger

log = get_logger(__name__)

FIELD_NAMES = ("firstName", "lastName")


def parse_line(line: str, line_number: int, delimiter: str = ",") -> Person:
    """
    Map one delimited line onto a Person.

    Raises
    ------
    ParseError
        If the line does not split into exactly two fields.
    """
    tokens = line.split(delimiter)
    if len(tokens) != len(FIELD_NAMES):
        raise ParseError(line_number, line, len(tokens))
    first_name, last_name = (token.strip() for token in tokens)
    return Person(first_name=first_name, last_name=last_name)


class CsvPersonReader:
    """
    Read Person records from a delimited text file.

    Usable as a context manager; iteration opens the file on demand.
    """

    def __init__(self, path: Path | str, delimiter: str = ",", encoding: str = "utf-8") -> None:
        self.path = Path(path)
        self.delimiter = delimiter
        self.encoding = encoding
        self._handle: Optional[IO[str]] = None

    def open(self) -> None:
        if self._handle is not None:
            return
        try:
            self._handle = self.path.open("r", encoding=self.encoding, newline="")
        except OSError as exc:
            raise ResourceError(str(self.path), exc.strerror or str(exc)) from exc
        log.debug("Opened input resource", extra={"path": str(self.path)})

    def __iter__(self) -> Iterator[Person]:
        self.open()
        assert self._handle is not None
        try:
            for line_number, raw in enumerate(self._handle, start=1):
                line = raw.rstrip("\r\n")
                if not line.strip():
                    continue
                yield parse_line(line, line_number, self.delimiter)
        except UnicodeDecodeError as exc:
            raise ResourceError(str(self.path), f"undecodable content ({exc.reason})") from exc

    def close(self) -> None:
        if self._handle is None:
            return
        try:
            self._handle.close()
        finally:
            self._handle = None

    @property
    def closed(self) -> bool:
        return self._handle is None

    def __enter__(self) -> "CsvPersonReader":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class ListPersonReader:
    """In-memory reader over already-built records."""

    def __init__(self, items: list[Person]) -> None:
        self.items = list(items)
        self.closed = True

    def open(self) -> None:
        self.closed = False

    def __iter__(self) -> Iterator[Person]:
        self.open()
        return iter(self.items)

    def close(self) -> None:
        self.closed = True


__all__ = ["CsvPersonReader", "ListPersonReader", "parse_line"]

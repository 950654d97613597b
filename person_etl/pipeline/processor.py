"""
Record transformation: uppercase both name fields.
"""

from __future__ import annotations

from person_etl.domain.models import Person
from person_etl.utils.logging import get_logger

log = get_logger(__name__)


def transform(person: Person) -> Person:
    """Return a new Person with both fields uppercased."""
    return Person(first_name=person.first_name.upper(), last_name=person.last_name.upper())


class PersonItemProcessor:
    """Stateless processor that logs every conversion."""

    def process(self, item: Person) -> Person:
        transformed = transform(item)
        log.info(f"Converting ({item}) into ({transformed}).")
        return transformed


__all__ = ["PersonItemProcessor", "transform"]

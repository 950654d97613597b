"""
Domain package for the person ETL job.

Exports the record type that flows through reader, processor and writer.
"""

from person_etl.domain.models import Person

__all__ = [
    "Person",
]

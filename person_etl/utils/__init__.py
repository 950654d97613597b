"""
Utilities package for the person ETL job.

Exports shared helpers for logging and profiling.
Keep this package lightweight and free of domain-specific logic.
"""

from person_etl.utils.logging import configure_logging, get_logger
from person_etl.utils.profiler import ProfileStats, profile_block

__all__ = [
    "configure_logging",
    "get_logger",
    "ProfileStats",
    "profile_block",
]

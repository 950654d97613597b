"""
Infrastructure package for the person ETL job.

Centralizes database connectivity and schema provisioning. Keep this layer
focused on I/O and resource management, decoupled from pipeline logic.
"""

from person_etl.infrastructure.db_factory import (
    ConnectionFactory,
    build_dsn,
    connection_factory,
    ensure_schema,
    get_sync_connection,
)

__all__ = [
    "ConnectionFactory",
    "build_dsn",
    "connection_factory",
    "ensure_schema",
    "get_sync_connection",
]

"""SQL database engine and connection table via SQLAlchemy Core."""

from connectctl.infrastructure.database.engine import create_db_engine, init_database
from connectctl.infrastructure.database.schema import (
    DEFAULT_TABLE_NAME,
    build_connections_table,
    connections,
    metadata,
)

__all__ = [
    "DEFAULT_TABLE_NAME",
    "build_connections_table",
    "connections",
    "create_db_engine",
    "init_database",
    "metadata",
]

"""Database engine setup.

SQLite is the default store (WAL mode for concurrent readers); any URL
SQLAlchemy understands works. SQLAlchemy Core (not ORM) is used because
the repository maps rows to :class:`Connection` values itself.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from sqlalchemy import Table, create_engine, event
from sqlalchemy.engine import Engine, make_url

from connectctl.infrastructure.database.schema import (
    DEFAULT_TABLE_NAME,
    build_connections_table,
    connections,
)

logger = logging.getLogger(__name__)


def create_db_engine(url: str) -> Engine:
    """Create an engine; SQLite databases get WAL mode and a parent directory."""
    parsed = make_url(url)
    engine = create_engine(parsed, echo=False)

    if parsed.get_backend_name() == "sqlite":
        database = parsed.database
        if database and database != ":memory:":
            Path(database).parent.mkdir(parents=True, exist_ok=True)

        @event.listens_for(engine, "connect")
        def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.close()

    return engine


def init_database(url: str, table_name: str = DEFAULT_TABLE_NAME) -> tuple[Engine, Table]:
    """Create the engine and the connection table *table_name*.

    Idempotent — safe to call against an existing database.

    Returns the engine and the table the repository should use.
    """
    engine = create_db_engine(url)
    table = connections if table_name == DEFAULT_TABLE_NAME else build_connections_table(table_name)
    table.metadata.create_all(engine, tables=[table])
    logger.debug("Initialized connection table %s at %s", table_name, engine.url)
    return engine, table

"""SQLAlchemy Core table definition for materialized connections.

The table name is configurable (``persistence.managed_class.connection``),
so tables are produced by :func:`build_connections_table`. The module-level
``connections`` table is the default mapping.
"""

from __future__ import annotations

from sqlalchemy import Column, Index, Integer, MetaData, Table, Text

DEFAULT_TABLE_NAME = "connections"

metadata = MetaData()


def build_connections_table(name: str = DEFAULT_TABLE_NAME, meta: MetaData | None = None) -> Table:
    """Define the connection table *name* on *meta* (a fresh MetaData if None)."""
    meta = meta if meta is not None else MetaData()
    table = Table(
        name,
        meta,
        Column("id", Integer, primary_key=True, autoincrement=True),
        Column("source_id", Text, nullable=False),
        Column("destination_id", Text, nullable=False),
        Column("type", Text, nullable=False),
        Column("distance", Integer, nullable=False, default=1, server_default="1"),
        # ":a:b:" so linker membership is a LIKE lookup; "" when direct
        Column("linker_nodes", Text, nullable=False, default="", server_default=""),
        Column("created_at", Text, nullable=False),  # ISO 8601, UTC
    )
    Index(f"ix_{name}_source", table.c.source_id)
    Index(f"ix_{name}_destination", table.c.destination_id)
    Index(f"ix_{name}_type", table.c.type)
    return table


connections = build_connections_table(DEFAULT_TABLE_NAME, metadata)

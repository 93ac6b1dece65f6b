"""Relational repository on SQLAlchemy Core.

Rows map to :class:`Connection` values; endpoints are rebuilt from their
stored ids through ``node_factory`` (``NodeRef`` by default), since the
repository never owns application nodes.

Linker paths are stored as ``":a:b:"`` so a membership test is a single
``LIKE '%:b:%'``. Node ids containing ``:`` cannot be encoded.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from datetime import datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import and_, delete, exists, insert, or_, select, update

from connectctl.domain.connection import Connection, Node, NodeRef
from connectctl.infrastructure.repositories.base import as_connection_list, effective_distance

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement, Select, Table
    from sqlalchemy.engine import Engine, RowMapping

logger = logging.getLogger(__name__)

LINKER_SEPARATOR = ":"


def encode_linker_nodes(linker_nodes: Sequence[str]) -> str:
    """Encode a linker path for storage.

    Examples:
        >>> encode_linker_nodes(["a", "b"])
        ':a:b:'
        >>> encode_linker_nodes([])
        ''
    """
    for node_id in linker_nodes:
        if LINKER_SEPARATOR in node_id:
            msg = f"Node id {node_id!r} contains the reserved separator {LINKER_SEPARATOR!r}"
            raise ValueError(msg)
    if not linker_nodes:
        return ""
    return f"{LINKER_SEPARATOR}{LINKER_SEPARATOR.join(linker_nodes)}{LINKER_SEPARATOR}"


def decode_linker_nodes(raw: str | None) -> list[str]:
    """Decode a stored linker path.

    Examples:
        >>> decode_linker_nodes(":a:b:")
        ['a', 'b']
        >>> decode_linker_nodes("")
        []
    """
    if not raw:
        return []
    return [part for part in raw.strip(LINKER_SEPARATOR).split(LINKER_SEPARATOR) if part]


class SqlConnectionRepository:
    """Connection storage in a relational table.

    Parameters:
        engine: SQLAlchemy engine the table lives in.
        table: Connection table (see :func:`build_connections_table`).
        node_factory: Rebuilds an endpoint from its stored id.
    """

    def __init__(
        self,
        engine: Engine,
        table: Table,
        *,
        node_factory: Callable[[str], Node] = NodeRef,
    ) -> None:
        self._engine = engine
        self._table = table
        self._node_factory = node_factory

    @property
    def engine(self) -> Engine:
        return self._engine

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create_empty_connection(self) -> Connection:
        return Connection()

    def update(self, connections: Iterable[Connection]) -> None:
        t = self._table
        inserted = updated = 0
        with self._engine.begin() as conn:
            for connection in connections:
                values = self._to_row(connection)
                if connection.id is None:
                    result = conn.execute(insert(t).values(**values))
                    connection.id = int(result.inserted_primary_key[0])
                    inserted += 1
                else:
                    conn.execute(update(t).where(t.c.id == connection.id).values(**values))
                    updated += 1
        logger.debug("Wrote connections: inserted=%d updated=%d", inserted, updated)

    def destroy(self, connections: Connection | Iterable[Connection]) -> None:
        ids = [c.id for c in as_connection_list(connections) if c.id is not None]
        if not ids:
            return
        with self._engine.begin() as conn:
            conn.execute(delete(self._table).where(self._table.c.id.in_(ids)))
        logger.debug("Deleted %d connection row(s)", len(ids))

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def are_connected(self, a: Node, b: Node, filters: Mapping[str, Any]) -> bool:
        t = self._table
        pair = or_(
            and_(t.c.source_id == a.id, t.c.destination_id == b.id),
            and_(t.c.source_id == b.id, t.c.destination_id == a.id),
        )
        stmt = select(exists().where(pair, *self._filter_clauses(filters)))
        with self._engine.connect() as conn:
            return bool(conn.execute(stmt).scalar())

    def get_connections_with_source(
        self, node: Node, filters: Mapping[str, Any]
    ) -> Sequence[Connection]:
        return self._fetch(self._table.c.source_id == node.id, filters)

    def get_connections_with_destination(
        self, node: Node, filters: Mapping[str, Any]
    ) -> Sequence[Connection]:
        return self._fetch(self._table.c.destination_id == node.id, filters)

    def get_connections(
        self,
        node: Node,
        filters: Mapping[str, Any],
        include_indirect: bool = False,
    ) -> Sequence[Connection]:
        t = self._table
        clauses: list[ColumnElement[bool]] = [
            or_(t.c.source_id == node.id, t.c.destination_id == node.id)
        ]
        distance = effective_distance(filters, include_indirect)
        if distance is not None:
            clauses.append(t.c.distance == distance)
        return self._fetch(and_(*clauses), filters)

    def get_connections_by_linker_nodes(
        self, nodes: Sequence[Node], filters: Mapping[str, Any]
    ) -> Sequence[Connection]:
        if not nodes:
            return []
        t = self._table
        membership = or_(
            *(
                t.c.linker_nodes.contains(
                    f"{LINKER_SEPARATOR}{node.id}{LINKER_SEPARATOR}", autoescape=True
                )
                for node in nodes
            )
        )
        return self._fetch(membership, filters)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _filter_clauses(self, filters: Mapping[str, Any]) -> list[ColumnElement[bool]]:
        t = self._table
        clauses: list[ColumnElement[bool]] = []
        if "type" in filters:
            clauses.append(t.c.type == filters["type"])
        if "distance" in filters:
            clauses.append(t.c.distance == filters["distance"])
        return clauses

    def _fetch(self, where: ColumnElement[bool], filters: Mapping[str, Any]) -> list[Connection]:
        stmt: Select[Any] = (
            select(self._table)
            .where(where, *self._filter_clauses(filters))
            .order_by(self._table.c.id)
        )
        with self._engine.connect() as conn:
            rows = conn.execute(stmt).mappings().all()
        return [self._from_row(row) for row in rows]

    def _to_row(self, connection: Connection) -> dict[str, Any]:
        return {
            "source_id": connection.source_id,
            "destination_id": connection.destination_id,
            "type": connection.type,
            "distance": connection.distance,
            "linker_nodes": encode_linker_nodes(connection.linker_nodes),
            "created_at": connection.created_at.isoformat(),
        }

    def _from_row(self, row: RowMapping) -> Connection:
        return Connection(
            id=int(row["id"]),
            source=self._node_factory(str(row["source_id"])),
            destination=self._node_factory(str(row["destination_id"])),
            type=str(row["type"]),
            distance=int(row["distance"]),
            linker_nodes=decode_linker_nodes(row["linker_nodes"]),
            created_at=datetime.fromisoformat(str(row["created_at"])),
        )

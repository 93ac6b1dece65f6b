"""In-process repository backed by a dict.

Stores copies and hands out copies, so a record changed by the manager
only becomes visible to other readers once it has been passed to
:meth:`InMemoryConnectionRepository.update`.
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any

from connectctl.domain.connection import Connection, Node
from connectctl.infrastructure.repositories.base import as_connection_list, effective_distance

logger = logging.getLogger(__name__)


def _matches(connection: Connection, filters: Mapping[str, Any]) -> bool:
    if "type" in filters and connection.type != filters["type"]:
        return False
    return "distance" not in filters or connection.distance == filters["distance"]


class InMemoryConnectionRepository:
    """Connection storage for tests and short-lived processes."""

    def __init__(self) -> None:
        self._rows: dict[int, Connection] = {}
        self._ids = itertools.count(1)

    def __len__(self) -> int:
        return len(self._rows)

    def all(self) -> list[Connection]:
        """Return copies of every stored record."""
        return [row.copy() for row in self._rows.values()]

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create_empty_connection(self) -> Connection:
        return Connection()

    def update(self, connections: Iterable[Connection]) -> None:
        pending = list(connections)
        for connection in pending:
            if connection.source is None or connection.destination is None:
                msg = f"Cannot store {connection!r} without both endpoints"
                raise ValueError(msg)
        for connection in pending:
            if connection.id is None:
                connection.id = next(self._ids)
            self._rows[connection.id] = connection.copy()
        logger.debug("Stored connections, total=%d", len(self._rows))

    def destroy(self, connections: Connection | Iterable[Connection]) -> None:
        for connection in as_connection_list(connections):
            if connection.id is not None:
                self._rows.pop(connection.id, None)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def _select(
        self,
        predicate: Callable[[Connection], bool],
        filters: Mapping[str, Any],
    ) -> list[Connection]:
        return [
            row.copy() for row in self._rows.values() if _matches(row, filters) and predicate(row)
        ]

    def are_connected(self, a: Node, b: Node, filters: Mapping[str, Any]) -> bool:
        return bool(self._select(lambda c: c.connects(a.id, b.id), filters))

    def get_connections_with_source(
        self, node: Node, filters: Mapping[str, Any]
    ) -> Sequence[Connection]:
        return self._select(lambda c: c.source_id == node.id, filters)

    def get_connections_with_destination(
        self, node: Node, filters: Mapping[str, Any]
    ) -> Sequence[Connection]:
        return self._select(lambda c: c.destination_id == node.id, filters)

    def get_connections(
        self,
        node: Node,
        filters: Mapping[str, Any],
        include_indirect: bool = False,
    ) -> Sequence[Connection]:
        distance = effective_distance(filters, include_indirect)
        return self._select(
            lambda c: c.touches(node.id) and (distance is None or c.distance == distance),
            filters,
        )

    def get_connections_by_linker_nodes(
        self, nodes: Sequence[Node], filters: Mapping[str, Any]
    ) -> Sequence[Connection]:
        wanted = {node.id for node in nodes}
        return self._select(lambda c: not wanted.isdisjoint(c.linker_nodes), filters)

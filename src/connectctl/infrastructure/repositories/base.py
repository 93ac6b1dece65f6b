"""Repository contract consumed by the connection manager.

Every read and write of :class:`Connection` records goes through this
protocol so storage can be swapped without touching the propagation code.

Filter semantics shared by all backends:

- ``type`` matches exactly; ``distance`` matches exactly.
- ``get_connections(include_indirect=False)`` returns direct connections
  only, unless the filters name a distance explicitly.
- Results come back in insertion order.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any, Protocol, runtime_checkable

from connectctl.domain.connection import Connection, Node


@runtime_checkable
class ConnectionRepository(Protocol):
    """Create, query, and delete :class:`Connection` records."""

    def create_empty_connection(self) -> Connection:
        """Return a fresh, unsaved connection for the manager to fill in."""
        ...

    def update(self, connections: Iterable[Connection]) -> None:
        """Insert new records and write back modified ones, as one unit."""
        ...

    def destroy(self, connections: Connection | Iterable[Connection]) -> None:
        """Delete one record or many, as one unit."""
        ...

    def are_connected(self, a: Node, b: Node, filters: Mapping[str, Any]) -> bool:
        """Whether any matching record links *a* and *b* in either direction."""
        ...

    def get_connections_with_source(
        self, node: Node, filters: Mapping[str, Any]
    ) -> Sequence[Connection]: ...

    def get_connections_with_destination(
        self, node: Node, filters: Mapping[str, Any]
    ) -> Sequence[Connection]: ...

    def get_connections(
        self,
        node: Node,
        filters: Mapping[str, Any],
        include_indirect: bool = False,
    ) -> Sequence[Connection]:
        """Records touching *node* at either endpoint."""
        ...

    def get_connections_by_linker_nodes(
        self, nodes: Sequence[Node], filters: Mapping[str, Any]
    ) -> Sequence[Connection]:
        """Records whose linker path contains any of *nodes*."""
        ...


def as_connection_list(connections: Connection | Iterable[Connection]) -> list[Connection]:
    """Normalize the single-or-many argument accepted by ``destroy``."""
    if isinstance(connections, Connection):
        return [connections]
    return list(connections)


def effective_distance(filters: Mapping[str, Any], include_indirect: bool) -> int | None:
    """Distance constraint implied by *filters* and *include_indirect*.

    Returns None when every distance is acceptable.
    """
    if "distance" in filters:
        return int(filters["distance"])
    if include_indirect:
        return None
    return 1

"""Connection value type and the node capability it links.

A :class:`Connection` is one materialized edge. Direct edges have
``distance == 1`` and no linker nodes; derived edges record the ordered ids
of the intermediate nodes they pass through.

INVARIANT: ``distance == len(linker_nodes) + 1`` for every persisted record.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Node(Protocol):
    """Anything that can be connected. Only a stable id is required."""

    @property
    def id(self) -> str: ...


def _require(node: Node | None, end: str) -> Node:
    if node is None:
        msg = f"Connection has no {end} node"
        raise ValueError(msg)
    return node


@dataclass(frozen=True)
class NodeRef:
    """A node known only by its id (used by storage backends and the CLI)."""

    id: str


@dataclass(eq=False)
class Connection:
    """A directed, typed edge between two nodes, direct or derived.

    Compared by identity: two records describing the same pair are still two
    records until the repository reconciles them.
    """

    source: Node | None = None
    destination: Node | None = None
    type: str = ""
    distance: int = 1
    linker_nodes: list[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    id: int | None = None

    def __post_init__(self) -> None:
        if self.distance < 1:
            msg = f"Connection distance must be >= 1, got {self.distance}"
            raise ValueError(msg)

    # ------------------------------------------------------------------
    # Path mutation
    # ------------------------------------------------------------------

    def set_path(self, linker_nodes: list[str]) -> None:
        """Replace the linker path and derive the distance from it."""
        self.linker_nodes = list(linker_nodes)
        self.distance = len(self.linker_nodes) + 1

    def make_direct(self) -> None:
        """Turn this record into a direct edge."""
        self.set_path([])

    # ------------------------------------------------------------------
    # Endpoint helpers
    # ------------------------------------------------------------------

    @property
    def source_id(self) -> str:
        return _require(self.source, "source").id

    @property
    def destination_id(self) -> str:
        return _require(self.destination, "destination").id

    @property
    def is_direct(self) -> bool:
        return self.distance == 1

    def touches(self, node_id: str) -> bool:
        """Whether *node_id* is one of the two endpoints."""
        return node_id in (self.source_id, self.destination_id)

    def other_end(self, node_id: str) -> Node:
        """Return the endpoint opposite *node_id*."""
        if self.source_id == node_id:
            return _require(self.destination, "destination")
        if self.destination_id == node_id:
            return _require(self.source, "source")
        msg = f"Node {node_id!r} is not an endpoint of this connection"
        raise ValueError(msg)

    def connects(self, a_id: str, b_id: str) -> bool:
        """Whether this record links *a_id* and *b_id*, in either direction."""
        return {self.source_id, self.destination_id} == {a_id, b_id}

    def copy(self) -> Connection:
        """Shallow copy with an independent linker list (nodes stay shared)."""
        return replace(self, linker_nodes=list(self.linker_nodes))

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "source": self.source_id,
            "destination": self.destination_id,
            "type": self.type,
            "distance": self.distance,
            "linker_nodes": list(self.linker_nodes),
            "created_at": self.created_at.isoformat(),
        }

    def __repr__(self) -> str:
        ends = [n.id if n is not None else "?" for n in (self.source, self.destination)]
        path = "->".join([ends[0], *self.linker_nodes, ends[1]])
        return f"Connection({self.type!r}, {path}, distance={self.distance})"

"""Batch command objects for bulk connect/disconnect."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from connectctl.domain.connection import Node
    from connectctl.domain.filters import ConnectionFilters


@dataclass(frozen=True)
class ConnectCommand:
    source: Node
    destination: Node
    type: str


@dataclass(frozen=True)
class DisconnectCommand:
    source: Node
    destination: Node
    filters: ConnectionFilters = field(default_factory=dict)  # type: ignore[assignment]


@dataclass
class ConnectionBatch:
    """Ordered connect and disconnect commands applied by the bulk operations.

    Usage::

        batch = ConnectionBatch().connect(a, b, "follow").connect(b, c, "follow")
        manager.connect_bulk(batch)
    """

    connect_commands: list[ConnectCommand] = field(default_factory=list)
    disconnect_commands: list[DisconnectCommand] = field(default_factory=list)

    def connect(self, source: Node, destination: Node, type: str) -> ConnectionBatch:
        self.connect_commands.append(ConnectCommand(source, destination, type))
        return self

    def disconnect(
        self,
        source: Node,
        destination: Node,
        filters: ConnectionFilters | None = None,
    ) -> ConnectionBatch:
        self.disconnect_commands.append(DisconnectCommand(source, destination, filters or {}))
        return self

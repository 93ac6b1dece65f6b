"""ConnectionManager — connect/disconnect with materialized indirect paths.

On connect, the manager writes the direct edge plus derived edges that
extend each endpoint's existing neighborhood by one hop through the new
edge. On disconnect, it removes the edge and every derived edge whose
linker path ran through either endpoint. Each call reads a snapshot,
computes in memory, then issues one bulk write.

Derivation is bounded per call: a source-side neighbor is paired with the
destination and a destination-side neighbor with the source, but two
neighbors are never paired with each other.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from connectctl.domain.errors import AlreadyConnectedError, NotConnectedError
from connectctl.domain.filters import FilterValidator
from connectctl.domain.types import ConnectionEvent

if TYPE_CHECKING:
    from connectctl.domain.commands import ConnectionBatch
    from connectctl.domain.connection import Connection, Node
    from connectctl.infrastructure.repositories.base import ConnectionRepository
    from connectctl.plugins.sink import ConnectionEventSink

logger = logging.getLogger(__name__)


def _describe(node: Node) -> str:
    return f"{type(node).__name__} ({node.id})"


def _pair_key(connection: Connection) -> tuple[str, frozenset[str]]:
    return (connection.type, frozenset((connection.source_id, connection.destination_id)))


def _merge(connections: list[Connection]) -> list[Connection]:
    """Keep one record per type and endpoint pair, preferring the shortest path.

    Ties keep the record seen first. A replacement takes over the stored id
    of the record it displaces so the write stays an update.
    """
    kept: dict[tuple[str, frozenset[str]], Connection] = {}
    for connection in connections:
        key = _pair_key(connection)
        current = kept.get(key)
        if current is None:
            kept[key] = connection
        elif connection.distance < current.distance:
            if connection.id is None:
                connection.id = current.id
            kept[key] = connection
        elif current.id is None:
            current.id = connection.id
    return list(kept.values())


def _unique(connections: list[Connection]) -> list[Connection]:
    """Drop repeated records, keeping first occurrence order."""
    seen: set[int] = set()
    result: list[Connection] = []
    for connection in connections:
        key = connection.id if connection.id is not None else -id(connection)
        if key not in seen:
            seen.add(key)
            result.append(connection)
    return result


class ConnectionManager:
    """Orchestrates connection writes and queries over a repository.

    Parameters:
        repository: Storage for :class:`Connection` records.
        filter_validator: Checks query filters before they reach storage.
        event_sink: Optional receiver for connect/disconnect events.
    """

    def __init__(
        self,
        repository: ConnectionRepository,
        filter_validator: FilterValidator | None = None,
        event_sink: ConnectionEventSink | None = None,
    ) -> None:
        self._repository = repository
        self._filter_validator = filter_validator or FilterValidator()
        self._event_sink = event_sink

    @property
    def repository(self) -> ConnectionRepository:
        return self._repository

    @property
    def filter_validator(self) -> FilterValidator:
        return self._filter_validator

    @property
    def event_sink(self) -> ConnectionEventSink | None:
        return self._event_sink

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def connect(self, source: Node, destination: Node, type: str) -> list[Connection]:
        """Connect *source* to *destination* and materialize derived edges.

        Returns the direct edge first, then the derived edges from the
        source side, then those from the destination side.

        Raises:
            AlreadyConnectedError: A direct *type* edge already links the
                two nodes in either direction.
        """
        connections = self._build_connections(source, destination, type)
        self._repository.update(connections)
        logger.debug(
            "Connected %s -> %s (%s): %d record(s) written",
            source.id,
            destination.id,
            type,
            len(connections),
        )
        self._notify(ConnectionEvent.CONNECTED, connections[0])
        return connections

    def disconnect(
        self,
        source: Node,
        destination: Node,
        filters: Mapping[str, Any] | None = None,
    ) -> ConnectionManager:
        """Remove the direct edge and every derived edge that relied on it.

        Raises:
            InvalidFilterError: *filters* is malformed.
            NotConnectedError: No direct edge of ``filters["type"]`` links the
                two nodes, or nothing matches *filters*.
        """
        connections = self._collect_for_destroy(source, destination, filters or {})
        self._repository.destroy(connections)
        logger.debug(
            "Disconnected %s -> %s: %d record(s) removed",
            source.id,
            destination.id,
            len(connections),
        )
        for connection in connections:
            self._notify(ConnectionEvent.DISCONNECTED, connection)
        return self

    def connect_bulk(self, batch: ConnectionBatch) -> list[Connection]:
        """Apply every connect command, then persist once.

        Commands read the repository as it was before the batch. The first
        failing command aborts the batch before anything is written; naming
        the same pair and type twice counts as a failure. When several
        commands derive the same pair, only the shortest path is written.
        """
        connections: list[Connection] = []
        direct: list[Connection] = []
        pairs: set[tuple[str, frozenset[str]]] = set()
        for command in batch.connect_commands:
            pair = (command.type, frozenset((command.source.id, command.destination.id)))
            if pair in pairs:
                msg = (
                    f"Objects {_describe(command.source)} and {_describe(command.destination)}"
                    " are connected twice in one batch"
                )
                raise AlreadyConnectedError(msg)
            pairs.add(pair)
            created = self._build_connections(command.source, command.destination, command.type)
            direct.append(created[0])
            connections.extend(created)

        connections = _merge(connections)
        self._repository.update(connections)
        logger.debug(
            "Bulk connect: %d command(s), %d record(s) written",
            len(batch.connect_commands),
            len(connections),
        )
        for connection in direct:
            self._notify(ConnectionEvent.CONNECTED, connection)
        return connections

    def disconnect_bulk(self, batch: ConnectionBatch) -> ConnectionManager:
        """Apply every disconnect command, then delete once."""
        doomed: list[Connection] = []
        for command in batch.disconnect_commands:
            doomed.extend(
                self._collect_for_destroy(command.source, command.destination, command.filters)
            )

        doomed = _unique(doomed)
        self._repository.destroy(doomed)
        logger.debug(
            "Bulk disconnect: %d command(s), %d record(s) removed",
            len(batch.disconnect_commands),
            len(doomed),
        )
        for connection in doomed:
            self._notify(ConnectionEvent.DISCONNECTED, connection)
        return self

    def destroy(self, connection: Connection) -> ConnectionManager:
        """Delete a single record as-is, without cascading."""
        self._repository.destroy(connection)
        return self

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def are_connected(
        self, node_a: Node, node_b: Node, filters: Mapping[str, Any] | None = None
    ) -> bool:
        """Whether a matching connection links the nodes, in either direction."""
        filters = filters or {}
        self._filter_validator.validate_filters(filters)
        return self._repository.are_connected(node_a, node_b, filters)

    def is_connected_to(
        self, source: Node, destination: Node, filters: Mapping[str, Any] | None = None
    ) -> bool:
        """Whether a matching connection runs from *source* to *destination*."""
        incoming = self.get_connections_to(destination, filters)
        return any(connection.source_id == source.id for connection in incoming)

    def has_connections(self, node: Node, filters: Mapping[str, Any] | None = None) -> bool:
        return len(self.get_connections(node, filters)) > 0

    def get_connections_to(
        self, node: Node, filters: Mapping[str, Any] | None = None
    ) -> Sequence[Connection]:
        filters = filters or {}
        self._filter_validator.validate_filters(filters)
        return self._repository.get_connections_with_destination(node, filters)

    def get_connections_from(
        self, node: Node, filters: Mapping[str, Any] | None = None
    ) -> Sequence[Connection]:
        filters = filters or {}
        self._filter_validator.validate_filters(filters)
        return self._repository.get_connections_with_source(node, filters)

    def get_connections(
        self,
        node: Node,
        filters: Mapping[str, Any] | None = None,
        include_indirect: bool = False,
    ) -> Sequence[Connection]:
        filters = filters or {}
        self._filter_validator.validate_filters(filters)
        return self._repository.get_connections(node, filters, include_indirect)

    # ------------------------------------------------------------------
    # Propagation
    # ------------------------------------------------------------------

    def _build_connections(self, source: Node, destination: Node, type: str) -> list[Connection]:
        """Compute the direct edge and its derived edges without persisting."""
        if self.are_connected(source, destination, {"type": type, "distance": 1}):
            msg = (
                f"Objects {_describe(source)} and {_describe(destination)} are already connected"
            )
            raise AlreadyConnectedError(msg)

        source_connections = list(self.get_connections(source, {"type": type}, True))
        destination_connections = list(self.get_connections(destination, {"type": type}, True))

        # A derived edge between the two nodes becomes the direct one.
        direct: Connection | None = None
        remaining: list[Connection] = []
        for connection in source_connections:
            if direct is None and connection.touches(destination.id):
                connection.make_direct()
                direct = connection
            else:
                remaining.append(connection)
        source_connections = remaining

        if direct is None:
            direct = self._repository.create_empty_connection()
            direct.type = type
            direct.source = source
            direct.destination = destination
            direct.make_direct()

        return [
            direct,
            *self._derive(source, source_connections, destination, destination_connections),
            *self._derive(destination, destination_connections, source, source_connections),
        ]

    def _derive(
        self,
        pivot: Node,
        pivot_connections: Sequence[Connection],
        target: Node,
        target_connections: Sequence[Connection],
    ) -> list[Connection]:
        """Extend each of *pivot*'s connections by one hop to *target*.

        A candidate whose endpoint pair is already stored among
        *target_connections* only replaces the stored path when strictly
        shorter; otherwise it is dropped.
        """
        derived: list[Connection] = []
        for connection in pivot_connections:
            if connection.touches(target.id):
                continue

            candidate = self._repository.create_empty_connection()
            candidate.type = connection.type
            if connection.source_id == pivot.id:
                candidate.source = target
                candidate.destination = connection.destination
            else:
                candidate.source = connection.source
                candidate.destination = target
            candidate.set_path([*connection.linker_nodes, pivot.id])

            existing = next(
                (
                    stored
                    for stored in target_connections
                    if stored.connects(candidate.source_id, candidate.destination_id)
                ),
                None,
            )
            if existing is None:
                derived.append(candidate)
            elif candidate.distance < existing.distance:
                existing.set_path(candidate.linker_nodes)
                derived.append(existing)
        return derived

    # ------------------------------------------------------------------
    # Pruning
    # ------------------------------------------------------------------

    def _collect_for_destroy(
        self, source: Node, destination: Node, filters: Mapping[str, Any]
    ) -> list[Connection]:
        """Gather the edge between the nodes and every derived edge through it."""
        self._filter_validator.validate_filters(filters)

        direct_filters: dict[str, Any] = {"distance": 1}
        if "type" in filters:
            direct_filters["type"] = filters["type"]
        if not self.are_connected(source, destination, direct_filters):
            msg = f"Objects {_describe(source)} and {_describe(destination)} are not connected"
            raise NotConnectedError(msg)

        primary = [
            connection
            for connection in self._repository.get_connections(source, filters)
            if connection.touches(destination.id)
        ]
        if not primary:
            msg = f"Objects {_describe(source)} and {_describe(destination)} are not connected"
            raise NotConnectedError(msg)

        cascade_filters = {"type": filters["type"]} if "type" in filters else {}
        return _unique(
            [
                *primary,
                *self._repository.get_connections_by_linker_nodes([destination], cascade_filters),
                *self._repository.get_connections_by_linker_nodes([source], cascade_filters),
            ]
        )

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def _notify(self, event: ConnectionEvent, connection: Connection) -> None:
        """Forward *event* to the sink. Sink failures never fail the caller."""
        if self._event_sink is None:
            return
        try:
            self._event_sink.notify(event, connection)
        except Exception:
            logger.warning("Event sink failed for %s", event, exc_info=True)

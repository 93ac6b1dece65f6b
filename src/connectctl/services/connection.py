"""ConnectionService — ServiceResult facade over the ConnectionManager.

Node ids arrive as strings (CLI arguments) and are wrapped in
:class:`NodeRef`. Domain errors become failed results carrying the
error's ``code`` and the call's arguments; anything else propagates.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from connectctl.config.logging import operation_context
from connectctl.domain.connection import NodeRef
from connectctl.domain.errors import ConnectctlError
from connectctl.domain.types import Direction
from connectctl.services.result import ServiceResult

if TYPE_CHECKING:
    from connectctl.services.manager import ConnectionManager

logger = logging.getLogger(__name__)


def _filters(type: str | None, distance: int | None) -> dict[str, Any]:
    filters: dict[str, Any] = {}
    if type is not None:
        filters["type"] = type
    if distance is not None:
        filters["distance"] = distance
    return filters


def _failure(op: str, exc: ConnectctlError, **detail: Any) -> ServiceResult:
    logger.debug("%s failed: %s", op, exc)
    return ServiceResult.failure(op, exc, **detail)


class ConnectionService:
    """Runs manager operations and reports them as ServiceResult."""

    def __init__(self, manager: ConnectionManager) -> None:
        self._manager = manager

    def connect(self, source_id: str, destination_id: str, type: str) -> ServiceResult:
        op = "connect"
        with operation_context(op, source=source_id, destination=destination_id, type=type):
            try:
                created = self._manager.connect(
                    NodeRef(source_id), NodeRef(destination_id), type
                )
            except ConnectctlError as exc:
                return _failure(
                    op, exc, source=source_id, destination=destination_id, type=type
                )

        return ServiceResult.success(
            op,
            connection=created[0].to_dict(),
            derived=[c.to_dict() for c in created[1:]],
            count=len(created),
        )

    def disconnect(
        self,
        source_id: str,
        destination_id: str,
        *,
        type: str | None = None,
        distance: int | None = None,
    ) -> ServiceResult:
        op = "disconnect"
        filters = _filters(type, distance)
        with operation_context(op, source=source_id, destination=destination_id, type=type):
            try:
                self._manager.disconnect(NodeRef(source_id), NodeRef(destination_id), filters)
            except ConnectctlError as exc:
                return _failure(
                    op, exc, source=source_id, destination=destination_id, filters=filters
                )

        return ServiceResult.success(
            op, source=source_id, destination=destination_id, filters=filters
        )

    def list_connections(
        self,
        node_id: str,
        *,
        type: str | None = None,
        distance: int | None = None,
        include_indirect: bool = False,
        direction: Direction = Direction.ANY,
    ) -> ServiceResult:
        op = "list_connections"
        node = NodeRef(node_id)
        filters = _filters(type, distance)
        with operation_context(op, node=node_id, type=type):
            try:
                if direction is Direction.FROM:
                    items = self._manager.get_connections_from(node, filters)
                elif direction is Direction.TO:
                    items = self._manager.get_connections_to(node, filters)
                else:
                    items = self._manager.get_connections(node, filters, include_indirect)
            except ConnectctlError as exc:
                return _failure(op, exc, node=node_id, filters=filters)

        return ServiceResult.success(
            op,
            node=node_id,
            direction=str(direction),
            count=len(items),
            items=[c.to_dict() for c in items],
        )

    def check(
        self,
        node_a_id: str,
        node_b_id: str,
        *,
        type: str | None = None,
        distance: int | None = None,
        directed: bool = False,
    ) -> ServiceResult:
        op = "check"
        a, b = NodeRef(node_a_id), NodeRef(node_b_id)
        filters = _filters(type, distance)
        with operation_context(op, source=node_a_id, destination=node_b_id, type=type):
            try:
                if directed:
                    connected = self._manager.is_connected_to(a, b, filters)
                else:
                    connected = self._manager.are_connected(a, b, filters)
            except ConnectctlError as exc:
                return _failure(op, exc, a=node_a_id, b=node_b_id, filters=filters)

        return ServiceResult.success(
            op, a=node_a_id, b=node_b_id, directed=directed, connected=connected
        )

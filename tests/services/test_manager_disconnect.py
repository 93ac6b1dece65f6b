"""Tests for ConnectionManager.disconnect and cascade removal."""

from __future__ import annotations

from typing import Any, NoReturn

import pytest

from connectctl.domain.connection import NodeRef
from connectctl.domain.errors import InvalidFilterError, NotConnectedError
from connectctl.domain.types import ConnectionEvent
from connectctl.infrastructure.repositories.base import ConnectionRepository
from connectctl.services.manager import ConnectionManager

A, B, C, D = NodeRef("a"), NodeRef("b"), NodeRef("c"), NodeRef("d")
X, Y = NodeRef("x"), NodeRef("y")
F = "follow"


class _UntouchableRepository:
    """Fails the test on any storage access."""

    def __getattr__(self, name: str) -> NoReturn:
        raise AssertionError(f"repository.{name} should not be reached")


def _chain(manager: ConnectionManager, *pairs: tuple[NodeRef, NodeRef]) -> None:
    for source, destination in pairs:
        manager.connect(source, destination, F)


class TestDisconnect:
    def test_removes_edge_and_dependent_path(self, manager: ConnectionManager, edges: Any) -> None:
        _chain(manager, (A, B), (B, C))
        result = manager.disconnect(A, B, {"type": F})
        assert result is manager
        assert edges(manager, A, B, C) == {("b", "c", F, 1, ())}

    def test_reverse_argument_order(self, manager: ConnectionManager, edges: Any) -> None:
        _chain(manager, (A, B), (B, C))
        manager.disconnect(B, A, {"type": F})
        assert edges(manager, A, B, C) == {("b", "c", F, 1, ())}

    def test_without_filters(self, manager: ConnectionManager) -> None:
        _chain(manager, (A, B))
        manager.disconnect(A, B)
        assert not manager.are_connected(A, B)

    def test_middle_of_chain(self, manager: ConnectionManager, edges: Any) -> None:
        _chain(manager, (A, B), (B, C), (C, D))
        manager.disconnect(B, C, {"type": F})
        remaining = edges(manager, A, B, C, D)
        assert remaining == {("a", "b", F, 1, ()), ("c", "d", F, 1, ())}
        for _, _, _, _, linkers in remaining:
            assert "b" not in linkers
            assert "c" not in linkers

    def test_paths_through_an_endpoint_are_removed(
        self, manager: ConnectionManager, edges: Any
    ) -> None:
        """Derived paths via b go too, even when they never used a-b."""
        _chain(manager, (X, B), (B, Y), (A, B))
        assert manager.are_connected(X, Y, {"type": F, "distance": 2})

        manager.disconnect(A, B, {"type": F})

        assert edges(manager, A, B, X, Y) == {
            ("x", "b", F, 1, ()),
            ("b", "y", F, 1, ()),
        }

    def test_other_types_untouched(self, manager: ConnectionManager, edges: Any) -> None:
        _chain(manager, (A, B), (B, C))
        manager.connect(A, B, "block")
        manager.connect(B, D, "block")

        manager.disconnect(A, B, {"type": F})

        assert edges(manager, A, B, C, D) == {
            ("b", "c", F, 1, ()),
            ("a", "b", "block", 1, ()),
            ("b", "d", "block", 1, ()),
            ("a", "d", "block", 2, ("b",)),
        }

    def test_reconnect_after_disconnect(self, manager: ConnectionManager) -> None:
        _chain(manager, (A, B), (B, C))
        manager.disconnect(A, B, {"type": F})
        created = manager.connect(A, B, F)
        assert len(created) == 2
        assert manager.are_connected(A, C, {"type": F, "distance": 2})


class TestDisconnectPrerequisites:
    def test_nothing_between_nodes(self, manager: ConnectionManager, edges: Any) -> None:
        _chain(manager, (A, B))
        with pytest.raises(NotConnectedError, match="are not connected") as exc_info:
            manager.disconnect(A, C, {"type": F})
        assert exc_info.value.code == "NOT_CONNECTED"
        assert edges(manager, A, B) == {("a", "b", F, 1, ())}

    def test_derived_only_is_not_enough(self, manager: ConnectionManager, edges: Any) -> None:
        _chain(manager, (A, B), (B, C))
        before = edges(manager, A, B, C)
        with pytest.raises(NotConnectedError):
            manager.disconnect(A, C, {"type": F})
        assert edges(manager, A, B, C) == before

    def test_type_must_match(self, manager: ConnectionManager) -> None:
        _chain(manager, (A, B))
        with pytest.raises(NotConnectedError):
            manager.disconnect(A, B, {"type": "block"})
        assert manager.are_connected(A, B, {"type": F})

    def test_filters_matching_nothing(self, manager: ConnectionManager, edges: Any) -> None:
        _chain(manager, (A, B), (B, C))
        before = edges(manager, A, B, C)
        with pytest.raises(NotConnectedError):
            manager.disconnect(A, B, {"type": F, "distance": 2})
        assert edges(manager, A, B, C) == before

    def test_message(self, manager: ConnectionManager) -> None:
        with pytest.raises(NotConnectedError) as exc_info:
            manager.disconnect(A, B, {"type": F})
        assert str(exc_info.value) == "Objects NodeRef (a) and NodeRef (b) are not connected"

    def test_invalid_filters_rejected_before_storage(self) -> None:
        manager = ConnectionManager(_UntouchableRepository())  # type: ignore[arg-type]
        with pytest.raises(InvalidFilterError):
            manager.disconnect(A, B, {"colour": "red"})


class TestDisconnectEvents:
    def test_one_event_per_removed_record(
        self, repository: ConnectionRepository, recording_sink: Any
    ) -> None:
        manager = ConnectionManager(repository, event_sink=recording_sink)
        _chain(manager, (A, B), (B, C))
        manager.disconnect(A, B, {"type": F})

        removed = recording_sink.of(ConnectionEvent.DISCONNECTED)
        assert sorted((c.source_id, c.destination_id) for c in removed) == [
            ("a", "b"),
            ("a", "c"),
        ]

    def test_no_event_when_rejected(
        self, repository: ConnectionRepository, recording_sink: Any
    ) -> None:
        manager = ConnectionManager(repository, event_sink=recording_sink)
        with pytest.raises(NotConnectedError):
            manager.disconnect(A, B, {"type": F})
        assert recording_sink.events == []


class TestDestroy:
    def test_removes_single_record_without_cascade(
        self, manager: ConnectionManager, edges: Any
    ) -> None:
        _chain(manager, (A, B), (B, C))
        (direct,) = manager.get_connections(A, {"type": F})
        manager.destroy(direct)
        assert edges(manager, A, B, C) == {
            ("b", "c", F, 1, ()),
            ("a", "c", F, 2, ("b",)),
        }

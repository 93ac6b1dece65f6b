"""Tests for ConnectionManager read operations."""

from __future__ import annotations

from typing import Any, NoReturn

import pytest

from connectctl.domain.connection import Connection, NodeRef
from connectctl.domain.errors import InvalidFilterError
from connectctl.services.manager import ConnectionManager

A, B, C, D = NodeRef("a"), NodeRef("b"), NodeRef("c"), NodeRef("d")
F = "follow"


def _pairs(connections: Any) -> list[tuple[str, str]]:
    return sorted((c.source_id, c.destination_id) for c in connections)


@pytest.fixture
def chain(manager: ConnectionManager) -> ConnectionManager:
    """a -> b -> c with a derived a -> c, plus a block edge c -> d."""
    manager.connect(A, B, F)
    manager.connect(B, C, F)
    manager.connect(C, D, "block")
    return manager


class TestAreConnected:
    def test_either_direction(self, chain: ConnectionManager) -> None:
        assert chain.are_connected(A, B)
        assert chain.are_connected(B, A)

    def test_type_filter(self, chain: ConnectionManager) -> None:
        assert chain.are_connected(C, D, {"type": "block"})
        assert not chain.are_connected(C, D, {"type": F})

    def test_distance_filter(self, chain: ConnectionManager) -> None:
        assert chain.are_connected(A, C, {"distance": 2})
        assert not chain.are_connected(A, C, {"distance": 1})

    def test_unknown_nodes(self, chain: ConnectionManager) -> None:
        assert not chain.are_connected(NodeRef("zz"), A)


class TestIsConnectedTo:
    def test_respects_direction(self, chain: ConnectionManager) -> None:
        assert chain.is_connected_to(A, B)
        assert not chain.is_connected_to(B, A)

    def test_includes_derived(self, chain: ConnectionManager) -> None:
        assert chain.is_connected_to(A, C)
        assert chain.is_connected_to(A, C, {"type": F, "distance": 2})
        assert not chain.is_connected_to(A, C, {"distance": 1})


class TestHasConnections:
    def test_direct_edges_count(self, chain: ConnectionManager) -> None:
        assert chain.has_connections(A)
        assert chain.has_connections(D, {"type": "block"})
        assert not chain.has_connections(D, {"type": F})

    def test_isolated_node(self, chain: ConnectionManager) -> None:
        assert not chain.has_connections(NodeRef("zz"))


class TestGetConnections:
    def test_direct_only_by_default(self, chain: ConnectionManager) -> None:
        assert _pairs(chain.get_connections(A)) == [("a", "b")]
        assert _pairs(chain.get_connections(C)) == [("b", "c"), ("c", "d")]

    def test_include_indirect(self, chain: ConnectionManager) -> None:
        assert _pairs(chain.get_connections(A, {}, include_indirect=True)) == [
            ("a", "b"),
            ("a", "c"),
        ]

    def test_explicit_distance_wins(self, chain: ConnectionManager) -> None:
        assert _pairs(chain.get_connections(C, {"distance": 2})) == [("a", "c")]

    def test_type_filter(self, chain: ConnectionManager) -> None:
        assert _pairs(chain.get_connections(C, {"type": "block"})) == [("c", "d")]

    def test_returns_connection_records(self, chain: ConnectionManager) -> None:
        (record,) = chain.get_connections(A)
        assert isinstance(record, Connection)
        assert record.source == A
        assert record.destination == B

    def test_from_and_to_include_all_distances(self, chain: ConnectionManager) -> None:
        assert _pairs(chain.get_connections_from(A)) == [("a", "b"), ("a", "c")]
        assert _pairs(chain.get_connections_to(C)) == [("a", "c"), ("b", "c")]
        assert _pairs(chain.get_connections_to(C, {"distance": 1})) == [("b", "c")]
        assert chain.get_connections_from(D) == []


class TestFilterValidation:
    class _Untouchable:
        def __getattr__(self, name: str) -> NoReturn:
            raise AssertionError(f"repository.{name} should not be reached")

    @pytest.mark.parametrize(
        ("method", "args"),
        [
            ("are_connected", (A, B)),
            ("is_connected_to", (A, B)),
            ("has_connections", (A,)),
            ("get_connections", (A,)),
            ("get_connections_from", (A,)),
            ("get_connections_to", (A,)),
        ],
    )
    def test_rejected_before_storage(self, method: str, args: tuple[NodeRef, ...]) -> None:
        manager = ConnectionManager(self._Untouchable())  # type: ignore[arg-type]
        with pytest.raises(InvalidFilterError):
            getattr(manager, method)(*args, {"distance": -1})

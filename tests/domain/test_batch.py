"""Tests for ConnectionBatch command collection."""

from __future__ import annotations

from connectctl.domain.commands import ConnectCommand, ConnectionBatch, DisconnectCommand
from connectctl.domain.connection import NodeRef

A, B, C = NodeRef("a"), NodeRef("b"), NodeRef("c")


class TestConnectionBatch:
    def test_empty(self) -> None:
        batch = ConnectionBatch()
        assert batch.connect_commands == []
        assert batch.disconnect_commands == []

    def test_connect_is_chainable_and_ordered(self) -> None:
        batch = ConnectionBatch().connect(A, B, "follow").connect(B, C, "block")
        assert batch.connect_commands == [
            ConnectCommand(A, B, "follow"),
            ConnectCommand(B, C, "block"),
        ]

    def test_disconnect_defaults_to_no_filters(self) -> None:
        batch = ConnectionBatch().disconnect(A, B)
        assert batch.disconnect_commands == [DisconnectCommand(A, B, {})]

    def test_disconnect_keeps_filters(self) -> None:
        batch = ConnectionBatch().disconnect(A, B, {"type": "follow"})
        assert batch.disconnect_commands[0].filters == {"type": "follow"}

    def test_lists_are_independent(self) -> None:
        batch = ConnectionBatch().connect(A, B, "follow").disconnect(B, C)
        assert len(batch.connect_commands) == 1
        assert len(batch.disconnect_commands) == 1

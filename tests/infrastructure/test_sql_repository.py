"""Tests for the SQLAlchemy-backed connection repository."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import pytest
from sqlalchemy import select

from connectctl.domain.connection import Connection, NodeRef
from connectctl.infrastructure.database.engine import init_database
from connectctl.infrastructure.repositories.base import ConnectionRepository
from connectctl.infrastructure.repositories.sql import (
    SqlConnectionRepository,
    decode_linker_nodes,
    encode_linker_nodes,
)

A, B, C = NodeRef("a"), NodeRef("b"), NodeRef("c")


def _derived(source: NodeRef, destination: NodeRef, path: list[str]) -> Connection:
    connection = Connection(source=source, destination=destination, type="follow")
    connection.set_path(path)
    return connection


class TestLinkerEncoding:
    def test_encode(self) -> None:
        assert encode_linker_nodes(["a", "b"]) == ":a:b:"
        assert encode_linker_nodes([]) == ""

    def test_decode(self) -> None:
        assert decode_linker_nodes(":a:b:") == ["a", "b"]
        assert decode_linker_nodes("") == []
        assert decode_linker_nodes(None) == []

    def test_separator_in_id_rejected(self) -> None:
        with pytest.raises(ValueError, match="reserved separator"):
            encode_linker_nodes(["ns:a"])


class TestSqlRepository:
    def test_satisfies_protocol(self, sql_repository: SqlConnectionRepository) -> None:
        assert isinstance(sql_repository, ConnectionRepository)

    def test_update_assigns_ids(self, sql_repository: SqlConnectionRepository) -> None:
        first = Connection(source=A, destination=B, type="follow")
        second = _derived(A, C, ["b"])
        sql_repository.update([first, second])
        assert first.id is not None
        assert second.id is not None
        assert first.id != second.id

    def test_round_trip(self, sql_repository: SqlConnectionRepository) -> None:
        original = _derived(A, C, ["b"])
        sql_repository.update([original])
        (loaded,) = sql_repository.get_connections_with_source(A, {})
        assert loaded.id == original.id
        assert loaded.source == A
        assert loaded.destination == C
        assert loaded.linker_nodes == ["b"]
        assert loaded.distance == 2
        assert loaded.created_at == original.created_at

    def test_update_existing_row(self, sql_repository: SqlConnectionRepository) -> None:
        record = _derived(A, C, ["b", "x"])
        sql_repository.update([record])
        record.make_direct()
        sql_repository.update([record])
        (loaded,) = sql_repository.get_connections(A, {})
        assert loaded.id == record.id
        assert loaded.distance == 1
        assert loaded.linker_nodes == []

    def test_destroy_single_and_many(self, sql_repository: SqlConnectionRepository) -> None:
        records = [
            Connection(source=A, destination=B, type="follow"),
            Connection(source=B, destination=C, type="follow"),
            _derived(A, C, ["b"]),
        ]
        sql_repository.update(records)
        sql_repository.destroy(records[0])
        sql_repository.destroy(records[1:])
        assert sql_repository.get_connections(B, {}, include_indirect=True) == []
        assert not sql_repository.are_connected(A, C, {})

    def test_missing_endpoint_rolls_back(
        self, sql_repository: SqlConnectionRepository
    ) -> None:
        with pytest.raises(ValueError, match="no destination node"):
            sql_repository.update([Connection(source=A, destination=B), Connection(source=A)])
        assert sql_repository.get_connections(A, {}) == []

    def test_destroy_ignores_unsaved(self, sql_repository: SqlConnectionRepository) -> None:
        sql_repository.destroy([Connection(source=A, destination=B)])

    def test_linker_lookup_matches_whole_ids(
        self, sql_repository: SqlConnectionRepository
    ) -> None:
        sql_repository.update(
            [
                _derived(A, C, ["b"]),
                _derived(A, C, ["bb"]),
                _derived(B, C, ["xzy"]),
                _derived(A, B, ["x%y"]),
            ]
        )
        found = sql_repository.get_connections_by_linker_nodes([NodeRef("b")], {})
        assert [c.linker_nodes for c in found] == [["b"]]
        # LIKE wildcards in ids are matched literally.
        assert sql_repository.get_connections_by_linker_nodes([NodeRef("x_y")], {}) == []
        found = sql_repository.get_connections_by_linker_nodes([NodeRef("x%y")], {})
        assert [c.linker_nodes for c in found] == [["x%y"]]

    def test_linker_lookup_any_of(self, sql_repository: SqlConnectionRepository) -> None:
        sql_repository.update([_derived(A, C, ["b"]), _derived(B, C, ["a"])])
        found = sql_repository.get_connections_by_linker_nodes([A, B], {})
        assert len(found) == 2
        assert sql_repository.get_connections_by_linker_nodes([], {}) == []

    def test_custom_table_name(self, tmp_path: Path) -> None:
        engine, table = init_database(f"sqlite:///{tmp_path / 'x.db'}", "friendships")
        repo = SqlConnectionRepository(engine, table)
        repo.update([Connection(source=A, destination=B, type="friend")])
        with engine.connect() as conn:
            rows = conn.execute(select(table.c.source_id)).all()
        assert table.name == "friendships"
        assert [r[0] for r in rows] == ["a"]
        engine.dispose()

    def test_records_survive_new_repository(self, tmp_path: Path) -> None:
        url = f"sqlite:///{tmp_path / 'x.db'}"
        engine, table = init_database(url)
        SqlConnectionRepository(engine, table).update([_derived(A, C, ["b"])])
        engine.dispose()

        engine, table = init_database(url)
        repo = SqlConnectionRepository(engine, table)
        assert repo.are_connected(C, A, {"distance": 2})
        engine.dispose()

    def test_node_factory(self, tmp_path: Path) -> None:
        @dataclass(frozen=True)
        class User:
            id: str

        engine, table = init_database(f"sqlite:///{tmp_path / 'x.db'}")
        repo = SqlConnectionRepository(engine, table, node_factory=User)
        repo.update([Connection(source=A, destination=B, type="follow")])
        (loaded,) = repo.get_connections(A, {})
        assert loaded.source == User("a")
        engine.dispose()

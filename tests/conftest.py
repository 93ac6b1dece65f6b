"""Shared pytest fixtures for connectctl tests."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
from click.testing import CliRunner

from connectctl.domain.connection import Connection, Node
from connectctl.domain.types import ConnectionEvent
from connectctl.infrastructure.database.engine import init_database
from connectctl.infrastructure.repositories.base import ConnectionRepository
from connectctl.infrastructure.repositories.memory import InMemoryConnectionRepository
from connectctl.infrastructure.repositories.sql import SqlConnectionRepository
from connectctl.services.manager import ConnectionManager

EdgeKey = tuple[str, str, str, int, tuple[str, ...]]


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def _isolated_project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run the CLI from an empty temp directory with no inherited config.

    The default SQLite database lands in ``tmp_path/.connectctl/``.
    """
    monkeypatch.delenv("CONNECTCTL_CONFIG", raising=False)
    monkeypatch.delenv("CONNECTCTL_PERSISTENCE__TYPE", raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture(autouse=True)
def _restore_logging() -> Iterator[None]:
    """Undo handler changes made by configure_logging() in CLI tests."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def memory_repository() -> InMemoryConnectionRepository:
    return InMemoryConnectionRepository()


@pytest.fixture
def sql_repository(tmp_path: Path) -> Iterator[SqlConnectionRepository]:
    """SQLite-backed repository on a throwaway database file."""
    engine, table = init_database(f"sqlite:///{tmp_path / 'connections.db'}")
    try:
        yield SqlConnectionRepository(engine, table)
    finally:
        engine.dispose()


@pytest.fixture(params=["memory", "sql"])
def repository(request: pytest.FixtureRequest) -> ConnectionRepository:
    """Each behavioural test runs against both storage backends."""
    name = "memory_repository" if request.param == "memory" else "sql_repository"
    repo: ConnectionRepository = request.getfixturevalue(name)
    return repo


@pytest.fixture
def manager(repository: ConnectionRepository) -> ConnectionManager:
    return ConnectionManager(repository)


class RecordingSink:
    """Event sink that keeps every notification it receives."""

    def __init__(self) -> None:
        self.events: list[tuple[ConnectionEvent, Connection]] = []

    def notify(self, event: ConnectionEvent, connection: Connection) -> None:
        self.events.append((event, connection))

    def of(self, event: ConnectionEvent) -> list[Connection]:
        return [c for e, c in self.events if e is event]


@pytest.fixture
def recording_sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def edges() -> Callable[..., set[EdgeKey]]:
    """Snapshot every stored record touching the given nodes.

    Each record becomes ``(source, destination, type, distance, linkers)``.
    """

    def snapshot(manager: ConnectionManager, *nodes: Node) -> set[EdgeKey]:
        seen: dict[int | None, Connection] = {}
        for node in nodes:
            for connection in manager.get_connections(node, {}, include_indirect=True):
                seen[connection.id] = connection
        return {
            (
                c.source_id,
                c.destination_id,
                c.type,
                c.distance,
                tuple(c.linker_nodes),
            )
            for c in seen.values()
        }

    return snapshot

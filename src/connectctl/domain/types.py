"""Classification enums shared across layers."""

from __future__ import annotations

from enum import StrEnum


class ConnectionEvent(StrEnum):
    """Lifecycle events emitted by the connection manager."""

    CONNECTED = "connected"
    DISCONNECTED = "disconnected"


class PersistenceType(StrEnum):
    """Supported persistence drivers."""

    SQLALCHEMY = "sqlalchemy"
    MEMORY = "memory"
    CUSTOM = "custom"


class Direction(StrEnum):
    """Direction selector for connection listings."""

    ANY = "any"
    FROM = "from"
    TO = "to"

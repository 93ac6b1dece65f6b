"""Connection repository contract and bundled backends."""

from connectctl.infrastructure.repositories.base import ConnectionRepository
from connectctl.infrastructure.repositories.memory import InMemoryConnectionRepository
from connectctl.infrastructure.repositories.sql import SqlConnectionRepository

__all__ = ["ConnectionRepository", "InMemoryConnectionRepository", "SqlConnectionRepository"]

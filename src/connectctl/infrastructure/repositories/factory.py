"""Select and build the repository named by ``[persistence]``."""

from __future__ import annotations

import importlib
import logging
from typing import TYPE_CHECKING

from connectctl.domain.errors import ConfigurationError
from connectctl.domain.types import PersistenceType
from connectctl.infrastructure.database.engine import init_database
from connectctl.infrastructure.repositories.base import ConnectionRepository
from connectctl.infrastructure.repositories.memory import InMemoryConnectionRepository
from connectctl.infrastructure.repositories.sql import SqlConnectionRepository

if TYPE_CHECKING:
    from connectctl.config.settings import ConnectSettings

logger = logging.getLogger(__name__)


def create_repository(settings: ConnectSettings) -> ConnectionRepository:
    """Build the repository for ``settings.persistence.type``.

    Raises:
        ConfigurationError: The custom factory cannot be imported or does not
            return a repository.
    """
    persistence = settings.persistence
    logger.debug("Creating %s repository", persistence.type)

    if persistence.type is PersistenceType.MEMORY:
        return InMemoryConnectionRepository()

    if persistence.type is PersistenceType.SQLALCHEMY:
        engine, table = init_database(settings.database_url, persistence.table_name)
        return SqlConnectionRepository(engine, table)

    assert persistence.repository is not None
    return _load_custom(persistence.repository, settings)


def _load_custom(target: str, settings: ConnectSettings) -> ConnectionRepository:
    """Import ``package.module:factory`` and call it with *settings*."""
    module_name, _, attr = target.partition(":")
    if not module_name or not attr:
        msg = f"Custom repository must be given as 'module:factory', got {target!r}"
        raise ConfigurationError(msg)

    try:
        module = importlib.import_module(module_name)
        factory = getattr(module, attr)
    except (ImportError, AttributeError) as exc:
        msg = f"Cannot import custom repository {target!r}: {exc}"
        raise ConfigurationError(msg) from exc

    repository = factory(settings)
    if not isinstance(repository, ConnectionRepository):
        msg = f"Custom repository {target!r} does not implement ConnectionRepository"
        raise ConfigurationError(msg)
    return repository

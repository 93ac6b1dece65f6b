"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, connectctl.toml only contains
overrides. A fresh project needs no config file at all (SQLite under
``.connectctl/``).
"""

from __future__ import annotations

import re

from pydantic import BaseModel, Field, field_validator, model_validator

from connectctl.domain.types import PersistenceType

_TABLE_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class ManagedClassConfig(BaseModel):
    """[persistence.managed_class] section — storage mapping for each record kind."""

    model_config = {"frozen": True}

    connection: str = "connections"


class PersistenceConfig(BaseModel):
    """[persistence] section."""

    model_config = {"frozen": True}

    type: PersistenceType = PersistenceType.SQLALCHEMY
    url: str | None = None
    managed_class: ManagedClassConfig | None = Field(default_factory=ManagedClassConfig)
    repository: str | None = None  # "package.module:factory" for type = "custom"

    @field_validator("type", mode="before")
    @classmethod
    def _supported_driver(cls, value: object) -> object:
        supported = [t.value for t in PersistenceType]
        if value not in supported:
            msg = f"The driver {value!r} is not supported. Please choose one of {supported}"
            raise ValueError(msg)
        return value

    @model_validator(mode="after")
    def _driver_requirements(self) -> PersistenceConfig:
        if self.type is PersistenceType.SQLALCHEMY:
            table = self.managed_class.connection if self.managed_class else ""
            if not table:
                msg = 'You need to specify a "managed_class" when using sqlalchemy persistence type.'
                raise ValueError(msg)
            if not _TABLE_NAME.match(table):
                msg = f"managed_class.connection must be a plain table name, got {table!r}"
                raise ValueError(msg)
        if self.type is PersistenceType.CUSTOM and not self.repository:
            msg = 'You need to specify a "repository" factory when using custom persistence type.'
            raise ValueError(msg)
        return self

    @property
    def table_name(self) -> str:
        return self.managed_class.connection if self.managed_class else "connections"


class EventsConfig(BaseModel):
    """[events] section."""

    model_config = {"frozen": True}

    enabled: bool = True


class ConnectConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    persistence: PersistenceConfig = Field(default_factory=PersistenceConfig)
    events: EventsConfig = Field(default_factory=EventsConfig)

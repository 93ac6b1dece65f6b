"""Locate and read connectctl configuration.

Configuration lives either in a dedicated ``connectctl.toml`` or in the
``[tool.connectctl]`` table of a project's ``pyproject.toml``. Lookup order:

1. ``CONNECTCTL_CONFIG``: an explicit file, used as-is.
2. Walking up from the start directory, the first directory holding
   ``connectctl.toml``, or a ``pyproject.toml`` that has the tool table.
   Within one directory ``connectctl.toml`` wins.
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import Any

from connectctl.config.models import ConnectConfig
from connectctl.domain.errors import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "connectctl.toml"
PYPROJECT_FILENAME = "pyproject.toml"
CONFIG_ENV_VAR = "CONNECTCTL_CONFIG"
TOOL_TABLE = "connectctl"


def _parse(path: Path) -> dict[str, Any]:
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {path}: {exc}"
        raise ConfigurationError(msg) from exc


def _tool_table(data: dict[str, Any]) -> dict[str, Any] | None:
    tool = data.get("tool")
    table = tool.get(TOOL_TABLE) if isinstance(tool, dict) else None
    return table if isinstance(table, dict) else None


def read_config_file(path: Path) -> dict[str, Any]:
    """Return the connectctl settings held in *path*.

    For ``pyproject.toml`` that is the ``[tool.connectctl]`` table (empty when
    absent); any other file is read whole.

    Raises:
        ConfigurationError: The file is not valid TOML.
    """
    data = _parse(path)
    if path.name == PYPROJECT_FILENAME:
        return _tool_table(data) or {}
    return data


def _declares_tool_table(pyproject: Path) -> bool:
    try:
        return _tool_table(_parse(pyproject)) is not None
    except ConfigurationError as exc:
        logger.warning("Skipping %s during config discovery: %s", pyproject, exc)
        return False


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file governing *start* (default: cwd), or None."""
    explicit = os.environ.get(CONFIG_ENV_VAR)
    if explicit:
        path = Path(explicit)
        return path if path.is_file() else None

    start_dir = (start or Path.cwd()).resolve()
    for directory in (start_dir, *start_dir.parents):
        dedicated = directory / CONFIG_FILENAME
        if dedicated.is_file():
            return dedicated
        pyproject = directory / PYPROJECT_FILENAME
        if pyproject.is_file() and _declares_tool_table(pyproject):
            return pyproject
    return None


def load_config(path: Path | None = None, cwd: Path | None = None) -> ConnectConfig:
    """Validate the discovered (or given) config; defaults when there is none."""
    path = path if path is not None else find_config(cwd)
    if path is None:
        return ConnectConfig()
    return ConnectConfig.model_validate(read_config_file(path))

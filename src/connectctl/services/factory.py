"""Wire a ConnectionManager from settings."""

from __future__ import annotations

from typing import TYPE_CHECKING

from connectctl.domain.filters import FilterValidator
from connectctl.infrastructure.repositories.factory import create_repository
from connectctl.plugins.manager import PluginManager
from connectctl.plugins.sink import NullEventSink, PluginEventSink
from connectctl.services.manager import ConnectionManager

if TYPE_CHECKING:
    from connectctl.config.settings import ConnectSettings
    from connectctl.plugins.sink import ConnectionEventSink


def build_manager(
    settings: ConnectSettings,
    *,
    plugin_manager: PluginManager | None = None,
) -> ConnectionManager:
    """Build a manager with the configured repository and event sink.

    When events are enabled and no *plugin_manager* is given, entry-point
    plugins are discovered and loaded.
    """
    sink: ConnectionEventSink
    if settings.events.enabled:
        if plugin_manager is None:
            plugin_manager = PluginManager()
            plugin_manager.discover_and_load()
        sink = PluginEventSink(plugin_manager)
    else:
        sink = NullEventSink()

    return ConnectionManager(
        create_repository(settings),
        filter_validator=FilterValidator(),
        event_sink=sink,
    )

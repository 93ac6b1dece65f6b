"""Event sinks receiving connect/disconnect notifications.

The manager calls ``notify`` synchronously after a write succeeds and
swallows (logs) anything a sink raises, so sinks cannot fail an operation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from connectctl.domain.types import ConnectionEvent

if TYPE_CHECKING:
    from connectctl.domain.connection import Connection
    from connectctl.plugins.manager import PluginManager


@runtime_checkable
class ConnectionEventSink(Protocol):
    def notify(self, event: ConnectionEvent, connection: Connection) -> None: ...


class NullEventSink:
    """Sink that drops every event."""

    def notify(self, event: ConnectionEvent, connection: Connection) -> None:
        return None


class PluginEventSink:
    """Sink that dispatches events to pluggy hooks.

    ``CONNECTED`` → ``post_connect``, ``DISCONNECTED`` → ``post_disconnect``.
    """

    _HOOKS = {
        ConnectionEvent.CONNECTED: "post_connect",
        ConnectionEvent.DISCONNECTED: "post_disconnect",
    }

    def __init__(self, plugin_manager: PluginManager) -> None:
        self._pm = plugin_manager

    def notify(self, event: ConnectionEvent, connection: Connection) -> None:
        hook_fn = getattr(self._pm.hook, self._HOOKS[event])
        hook_fn(connection=connection)

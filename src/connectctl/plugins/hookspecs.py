"""Pluggy hook specifications for connection lifecycle events.

Hooks are dispatched synchronously by :class:`PluginEventSink` after the
repository write has succeeded.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from connectctl.domain.connection import Connection

hookspec = pluggy.HookspecMarker("connectctl")
hookimpl = pluggy.HookimplMarker("connectctl")


class ConnectctlHookSpec:
    """Hook specifications for the connectctl plugin system."""

    @hookspec
    def post_connect(self, connection: Connection) -> None:
        """Called with the direct edge after a connect is persisted."""

    @hookspec
    def post_disconnect(self, connection: Connection) -> None:
        """Called once per removed record after a disconnect is persisted."""

"""Extension layer — plugin system via pluggy.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints.
INVARIANT: Plugin failures are warnings, never errors.
"""

from connectctl.plugins.manager import PluginManager
from connectctl.plugins.sink import ConnectionEventSink, NullEventSink, PluginEventSink

__all__ = ["ConnectionEventSink", "NullEventSink", "PluginEventSink", "PluginManager"]

"""Error kinds raised by the connection engine.

Each error carries a stable ``code`` so adapters (CLI, service results)
can report failures without matching on exception classes.
"""

from __future__ import annotations


class ConnectctlError(Exception):
    """Base class for all connectctl errors."""

    code = "CONNECTCTL_ERROR"


class AlreadyConnectedError(ConnectctlError):
    """A direct connection of the requested type already exists."""

    code = "ALREADY_CONNECTED"


class NotConnectedError(ConnectctlError):
    """No matching direct connection exists between the two nodes."""

    code = "NOT_CONNECTED"


class InvalidFilterError(ConnectctlError, ValueError):
    """A query filter uses an unknown key or an invalid value."""

    code = "INVALID_FILTER"


class ConfigurationError(ConnectctlError):
    """Persistence settings cannot be turned into a working repository."""

    code = "INVALID_CONFIG"

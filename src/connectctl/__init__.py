"""connectctl — typed node connections with materialized indirect paths."""

from connectctl.domain.commands import ConnectionBatch
from connectctl.domain.connection import Connection, Node, NodeRef
from connectctl.domain.errors import (
    AlreadyConnectedError,
    ConnectctlError,
    InvalidFilterError,
    NotConnectedError,
)
from connectctl.services.manager import ConnectionManager

__version__ = "0.1.0"

__all__ = [
    "AlreadyConnectedError",
    "ConnectctlError",
    "Connection",
    "ConnectionBatch",
    "ConnectionManager",
    "InvalidFilterError",
    "Node",
    "NodeRef",
    "NotConnectedError",
    "__version__",
]

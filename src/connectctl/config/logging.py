"""Log setup for connectctl: stdlib loggers rendered by structlog.

Library modules log through ``logging.getLogger(__name__)``. The CLI calls
:func:`configure_logging` once, which sends every record to stderr through
a structlog ``ProcessorFormatter`` (console lines on a TTY, or JSON lines
with ``--log-json``).

Records emitted while an operation runs inside :func:`operation_context`
carry that operation's fields (``op``, node ids, type), so the manager's
debug lines can be tied back to the command that caused them.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

PACKAGE_LOGGER = "connectctl"

# Chatty dependencies stay at WARNING even under --verbose.
_QUIET_LOGGERS = ("sqlalchemy", "pluggy")


@contextmanager
def operation_context(op: str, **fields: Any) -> Iterator[None]:
    """Attach *op* and *fields* to every record logged inside the block."""
    bound = {key: value for key, value in fields.items() if value is not None}
    with structlog.contextvars.bound_contextvars(op=op, **bound):
        yield


def _static_fields(**fields: str) -> Processor:
    def add(_logger: WrappedLogger, _method: str, event_dict: EventDict) -> EventDict:
        for key, value in fields.items():
            event_dict.setdefault(key, value)
        return event_dict

    return add


def _pre_chain(backend: str | None) -> list[Processor]:
    chain: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if backend is not None:
        chain.append(_static_fields(backend=backend))
    return chain


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
    backend: str | None = None,
) -> None:
    """Route all stdlib logging to stderr through structlog.

    Args:
        verbose: Show connectctl's DEBUG records (otherwise WARNING and up).
        log_json: Emit one JSON object per line.
        backend: Persistence type stamped on every record, when known.
    """
    pre_chain = _pre_chain(backend)
    renderer: Processor = (
        structlog.processors.JSONRenderer()
        if log_json
        else structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    )

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(logging.WARNING)

    logging.getLogger(PACKAGE_LOGGER).setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

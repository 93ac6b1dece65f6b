"""Commands: connect and disconnect nodes."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from connectctl.commands._base import NODE_ID, CtlCommand
from connectctl.services.connection import ConnectionService

if TYPE_CHECKING:
    from connectctl.commands._context import AppContext


@click.command(
    cls=CtlCommand,
    examples="""\
  connectctl connect alice bob --type friend
  connectctl --json connect bob carol --type friend""",
)
@click.argument("source", type=NODE_ID)
@click.argument("destination", type=NODE_ID)
@click.option("-t", "--type", "type_", required=True, help="Connection type (e.g. follow).")
@click.pass_obj
def connect(app: AppContext, source: str, destination: str, type_: str) -> None:
    """Connect SOURCE to DESTINATION and derive indirect connections."""
    app.emit(ConnectionService(app.manager).connect(source, destination, type_))


@click.command(
    cls=CtlCommand,
    examples="""\
  connectctl disconnect alice bob --type friend
  connectctl disconnect alice bob --type friend --distance 1""",
)
@click.argument("source", type=NODE_ID)
@click.argument("destination", type=NODE_ID)
@click.option("-t", "--type", "type_", required=True, help="Connection type to remove.")
@click.option("--distance", type=click.IntRange(min=0), default=None, help="Only this distance.")
@click.pass_obj
def disconnect(
    app: AppContext,
    source: str,
    destination: str,
    type_: str,
    distance: int | None,
) -> None:
    """Remove the connection and every indirect connection relying on it."""
    app.emit(
        ConnectionService(app.manager).disconnect(
            source, destination, type=type_, distance=distance
        )
    )

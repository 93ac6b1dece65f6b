"""Commands: list connections and check connectivity."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from connectctl.commands._base import NODE_ID, CtlCommand
from connectctl.domain.types import Direction
from connectctl.services.connection import ConnectionService

if TYPE_CHECKING:
    from connectctl.commands._context import AppContext


@click.command(
    "list",
    cls=CtlCommand,
    examples="""\
  connectctl list alice
  connectctl list alice --type friend --indirect
  connectctl list alice --direction from --distance 2
  connectctl -q list alice""",
)
@click.argument("node", type=NODE_ID)
@click.option("-t", "--type", "type_", default=None, help="Only this connection type.")
@click.option("--distance", type=click.IntRange(min=0), default=None, help="Only this distance.")
@click.option("--indirect", is_flag=True, help="Include derived (distance > 1) connections.")
@click.option(
    "--direction",
    type=click.Choice([d.value for d in Direction]),
    default=Direction.ANY.value,
    show_default=True,
    help="Connections from NODE, to NODE, or either.",
)
@click.pass_obj
def list_cmd(
    app: AppContext,
    node: str,
    type_: str | None,
    distance: int | None,
    indirect: bool,
    direction: str,
) -> None:
    """List the connections of NODE."""
    app.emit(
        ConnectionService(app.manager).list_connections(
            node,
            type=type_,
            distance=distance,
            include_indirect=indirect,
            direction=Direction(direction),
        )
    )


@click.command(
    cls=CtlCommand,
    examples="""\
  connectctl check alice carol --type friend
  connectctl check alice bob --type friend --distance 1 --directed""",
)
@click.argument("node_a", type=NODE_ID)
@click.argument("node_b", type=NODE_ID)
@click.option("-t", "--type", "type_", default=None, help="Only this connection type.")
@click.option("--distance", type=click.IntRange(min=0), default=None, help="Only this distance.")
@click.option("--directed", is_flag=True, help="Require a connection from NODE_A to NODE_B.")
@click.pass_obj
def check(
    app: AppContext,
    node_a: str,
    node_b: str,
    type_: str | None,
    distance: int | None,
    directed: bool,
) -> None:
    """Check whether NODE_A and NODE_B are connected."""
    app.emit(
        ConnectionService(app.manager).check(
            node_a, node_b, type=type_, distance=distance, directed=directed
        )
    )

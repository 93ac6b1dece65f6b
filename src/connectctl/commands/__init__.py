"""Subcommand modules for connectctl.

Provides register_commands(), which uses deferred imports to keep
``connectctl --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from connectctl.commands.connect import connect, disconnect
    from connectctl.commands.query import check, list_cmd

    cli.add_command(connect)
    cli.add_command(disconnect)
    cli.add_command(list_cmd)
    cli.add_command(check)

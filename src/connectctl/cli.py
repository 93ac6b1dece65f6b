"""Root CLI group for connectctl with global flags and command registration."""

from __future__ import annotations

import click
from pydantic import ValidationError

from connectctl import __version__
from connectctl.commands import register_commands
from connectctl.commands._base import CtlGroup
from connectctl.commands._context import AppContext
from connectctl.config.settings import ConnectSettings
from connectctl.domain.errors import ConfigurationError


@click.group(cls=CtlGroup, invoke_without_command=True)
@click.version_option(version=__version__, prog_name="connectctl")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug logging.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
) -> None:
    """connectctl — typed node connections with indirect paths."""
    ctx.ensure_object(dict)
    try:
        settings = ConnectSettings.from_cli(
            config_path=config_path,
            json_output=json_output,
            quiet=quiet,
            verbose=verbose,
            log_json=log_json,
        )
    except (ConfigurationError, ValidationError) as exc:
        raise click.ClickException(str(exc)) from exc
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)

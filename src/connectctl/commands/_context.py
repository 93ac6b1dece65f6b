"""AppContext — shared Click context for all commands.

Created once by the root CLI group and passed to subcommands via
``@click.pass_obj``. The manager is built lazily so ``--help`` and
``--version`` never touch storage.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from connectctl.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from connectctl.config.settings import ConnectSettings
    from connectctl.services.manager import ConnectionManager
    from connectctl.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy."""

    def __init__(self, settings: ConnectSettings) -> None:
        self.settings = settings
        self._manager: ConnectionManager | None = None

        from connectctl.config.logging import configure_logging

        configure_logging(
            verbose=settings.verbose,
            log_json=settings.log_json,
            backend=str(settings.persistence.type),
        )

    @property
    def manager(self) -> ConnectionManager:
        """The connection manager (created on first access)."""
        if self._manager is None:
            from connectctl.domain.errors import ConfigurationError
            from connectctl.services.factory import build_manager

            try:
                self._manager = build_manager(self.settings)
            except ConfigurationError as exc:
                raise click.ClickException(str(exc)) from exc
        return self._manager

    def emit(self, result: ServiceResult) -> None:
        """Print a ServiceResult; failures go to stderr with exit code 1."""
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)

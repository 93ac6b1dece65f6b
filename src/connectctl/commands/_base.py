"""Click building blocks shared by connectctl commands.

- :class:`CtlCommand` / :class:`CtlGroup` take an ``examples=`` string and
  expose it through an eager ``--examples`` flag, so ``--help`` stays short.
- :data:`NODE_ID` normalizes node id arguments before they reach the
  service layer.
"""

from __future__ import annotations

import textwrap
from typing import Any

import click


class NodeIdParamType(click.ParamType):
    """A node id: surrounding whitespace stripped, never empty."""

    name = "node"

    def convert(self, value: Any, param: click.Parameter | None, ctx: click.Context | None) -> str:
        node_id = str(value).strip()
        if not node_id:
            self.fail("node id must not be empty", param, ctx)
        return node_id


NODE_ID = NodeIdParamType()


class _ExamplesMixin:
    examples: str | None
    params: list[click.Parameter]

    def _init_examples(self, examples: str | None) -> None:
        self.examples = examples
        if examples:
            self.params.append(
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    expose_value=False,
                    is_eager=True,
                    callback=self._print_examples,
                    help="Show usage examples and exit.",
                )
            )

    def _print_examples(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(textwrap.dedent(self.examples or "").rstrip())
        ctx.exit(0)


class CtlCommand(_ExamplesMixin, click.Command):
    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples)


class CtlGroup(_ExamplesMixin, click.Group):
    """Group whose subcommands are :class:`CtlCommand` unless told otherwise."""

    command_class = CtlCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples)

"""Rich Console factory and theme for connectctl output.

Consoles render into a StringIO buffer so renderers can keep a
``-> str`` contract. Without a terminal (tests, pipes) Rich drops colors.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

CTL_THEME = Theme(
    {
        "ctl.ok": "bold green",
        "ctl.error": "bold red",
        "ctl.op": "bold cyan",
        "ctl.key": "dim",
        "ctl.id": "bold blue",
        "ctl.type": "magenta",
        "ctl.direct": "green",
        "ctl.derived": "yellow",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    return Console(
        file=StringIO(),
        theme=CTL_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()

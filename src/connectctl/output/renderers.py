"""Operation-specific Rich renderers for ServiceResult.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from connectctl.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from connectctl.services.result import ServiceResult


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a string via Rich."""
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Minimal output: ids for listings, a status word otherwise."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    items = result.data.get("items")
    if isinstance(items, list):
        return "\n".join(str(item.get("id", "")) for item in items)
    if "connected" in result.data:
        return "yes" if result.data["connected"] else "no"
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="ctl.ok"), Text(f"  {result.op}", style="ctl.op"))


def _field(console: Console, key: str, value: Any) -> None:
    if isinstance(value, (dict, list)):
        value = json.dumps(value, separators=(",", ":"))
    style = "ctl.id" if key in ("id", "source", "destination", "node", "a", "b") else ""
    console.print(Text(f"  {key}: ", style="ctl.key"), Text(str(value), style=style), sep="")


def _path(item: dict[str, Any]) -> str:
    return " → ".join([item["source"], *item.get("linker_nodes", []), item["destination"]])


def _connection_table(items: list[dict[str, Any]], *, verbose: bool = False) -> Table:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="ctl.id", no_wrap=True)
    table.add_column("Type", style="ctl.type")
    table.add_column("Distance", justify="right")
    table.add_column("Path")
    if verbose:
        table.add_column("Created", style="dim")

    for item in items:
        distance = int(item.get("distance", 1))
        row: list[str | Text] = [
            str(item.get("id", "")),
            str(item.get("type", "")),
            Text(str(distance), style="ctl.direct" if distance == 1 else "ctl.derived"),
            Text(_path(item)),
        ]
        if verbose:
            row.append(str(item.get("created_at", "")))
        table.add_row(*row)
    return table


# ── Renderers ─────────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    code = f" [{err.code}]" if err else ""
    console.print(
        Text("ERROR", style="ctl.error"),
        Text(f"  {result.op}{code} —", style="ctl.op"),
        Text(msg),
    )

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


def _render_connect(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    direct = result.data["connection"]
    _field(console, "id", direct["id"])
    _field(console, "path", _path(direct))
    _field(console, "type", direct["type"])
    derived = result.data.get("derived", [])
    _field(console, "derived", len(derived))
    if derived and verbose:
        console.print(_connection_table(derived, verbose=verbose))


def _render_connection_list(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    items = result.data.get("items", [])
    console.print(_connection_table(items, verbose=verbose))
    console.print(f"\n{result.data.get('count', len(items))} connections")


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)


_OP_RENDERERS: dict[str, Any] = {
    "connect": _render_connect,
    "list_connections": _render_connection_list,
}

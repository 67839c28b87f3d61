"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from stowr.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from stowr.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op}: {msg}"
    if "output" in result.data:
        return str(result.data["output"])
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK/ERROR status line."""
    label = Text("OK", style="stowr.ok")
    op = Text(f"  {result.op}", style="stowr.op")
    console.print(label, op, sep="")


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="stowr.key")
    if key in ("source", "output"):
        v = Text(str(value), style="stowr.path")
    else:
        v = Text(str(value))
    console.print(k, v, sep="")


def _row(table: Table, *cells: str) -> None:
    """Add a row without interpreting brackets in cells as markup."""
    table.add_row(*(Text(cell) for cell in cells))


def _fields(fields: list[dict[str, Any]]) -> str:
    return ", ".join(f"{f['name']}: {f['type']}" for f in fields)


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="stowr.error")
    op = Text(f"  {result.op}", style="stowr.op")
    code = Text(f" [{err.code}]" if err else "", style="stowr.key")
    console.print(label, op, code, Text(f" {msg}"), sep="")

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(Text(f"    {k}: {v}"))


# ── Generation renderers ──────────────────────────────────────────────


def _render_generate(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render generate/check results."""
    d = result.data
    _status_line(console, result)
    _field(console, "output", d.get("output", ""))
    if result.op == "generate" and d.get("up_to_date"):
        _field(console, "status", "unchanged")
    entities = d.get("entities", [])
    aggregates = set(d.get("aggregates", []))
    if entities:
        labels = [f"{name} (aggregate)" if name in aggregates else name for name in entities]
        _field(console, "entities", ", ".join(labels))
    if verbose:
        _field(console, "source", d.get("source", ""))


def _render_inspect(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render one table row per generated artifact of each entity."""
    _status_line(console, result)
    _field(console, "source", result.data.get("source", ""))

    for entity in result.data.get("entities", []):
        console.print()
        table = Table(
            title=entity["name"],
            title_justify="left",
            show_header=True,
            pad_edge=False,
            expand=False,
        )
        table.add_column("Artifact", style="stowr.name", no_wrap=True)
        table.add_column("Kind", style="stowr.type")
        table.add_column("Detail")

        _row(table, entity["tag"], "tag", "")
        _row(table, entity["id"], "id", f"RepositoryId[{entity['tag']}]")
        _row(table, entity["name"], "record", _fields(entity.get("fields", [])))
        if "command_type" in entity:
            for kind in ("command_type", "event_type"):
                for variant in entity.get("variants", []):
                    detail = _fields(variant["fields"])
                    if verbose:
                        detail = f"{detail}  <- {variant['method']}".lstrip()
                    name = f"{entity[kind]}.{variant['name']}"
                    _row(table, name, kind.removesuffix("_type"), detail)
        _row(table, entity["repository"], "repository", entity["id"])
        _row(table, entity["repo_alias"], "alias", entity["repository"])
        console.print(table)


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "generate": _render_generate,
    "check": _render_generate,
    "inspect": _render_inspect,
}

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
from rich.tree import Tree

from paramguard.output.console import create_console, get_output, style_for_type

if TYPE_CHECKING:
    from rich.console import Console

    from paramguard.services.result import ServiceResult


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
        return f"ERROR: {result.op} — {msg}"
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK status line."""
    console.print(Text.assemble(("OK", "guard.ok"), (f"  {result.op}", "guard.op")))


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="guard.key")
    if key in ("field", "path"):
        v = Text(str(value), style="guard.path")
    else:
        v = Text(str(value))
    console.print(Text.assemble(k, v))


def _error_table(errors: list[dict[str, Any]]) -> Table:
    """Build a table of field errors (path, kind, message)."""
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Path", style="guard.path", no_wrap=True)
    table.add_column("Kind", style="guard.kind")
    table.add_column("Message")
    for error in errors:
        table.add_row(
            Text(str(error.get("path", ""))),
            Text(str(error.get("kind", ""))),
            Text(str(error.get("message", ""))),
        )
    return table


def _render_meta(console: Console, result: ServiceResult) -> None:
    if not result.meta:
        return
    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        console.print(f"    {k}: {v}")


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    console.print(
        Text.assemble(("ERROR", "guard.error"), (f"  {result.op}", "guard.op"), " — ", msg)
    )

    if err is None:
        return
    if "field" in err.detail:
        _field(console, "field", err.detail["field"])

    info = err.detail.get("additional_info")
    listed = info.get("errors") if isinstance(info, dict) else None
    if not listed and verbose:
        listed = result.data.get("errors")
    if listed:
        console.print(_error_table(listed))

    if verbose and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            if k == "additional_info":
                continue
            console.print(Text(f"    {k}: {v}"))


# ── Check renderers ───────────────────────────────────────────────────


def _render_check(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render a passing (or unchecked) validation run."""
    _status_line(console, result)
    _field(console, "rules", result.data.get("rules", ""))
    _field(console, "status", result.data.get("status", ""))
    if verbose:
        _render_meta(console, result)


def _node_label(node: dict[str, Any]) -> Text:
    field_type = node.get("type")
    label = Text(str(node.get("field") or "<unnamed>"), style="guard.field")
    label.append(f"  {field_type or '<no type>'}", style=style_for_type(field_type))
    for group in node.get("constraints", []):
        label.append(f"  {json.dumps(group, separators=(',', ':'), default=str)}", style="dim")
    return label


def _add_nodes(tree: Tree, nodes: list[dict[str, Any]]) -> None:
    for node in nodes:
        branch = tree.add(_node_label(node))
        _add_nodes(branch, node.get("children", []))


def _render_rules(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render a rule tree."""
    _status_line(console, result)
    _field(console, "rules", result.data.get("rules", ""))
    _field(console, "count", result.data.get("count", 0))
    tree = Tree(Text("rules", style="guard.op"))
    _add_nodes(tree, result.data.get("items", []))
    console.print(tree)


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, json.dumps(value, separators=(",", ":"), default=str))
        else:
            _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "check": _render_check,
    "rules": _render_rules,
}

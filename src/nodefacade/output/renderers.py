"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from nodefacade.output.console import create_console, get_output, style_for_subtype

if TYPE_CHECKING:
    from rich.console import Console

    from nodefacade.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, _json_data(result), console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode: node ids only."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op}: {msg}"

    data = _json_data(result)
    if "ids" in data:
        return "\n".join(str(node_id) for node_id in data["ids"])
    node = data.get("node") or (data.get("details") or {}).get("core")
    if isinstance(node, dict):
        return str(node.get("dataId", node.get("data_id", "")))
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _json_data(result: ServiceResult) -> dict[str, Any]:
    """Result data with nested models reduced to JSON-compatible values."""
    return result.model_dump(mode="json")["data"]


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK/ERROR status line."""
    label = Text("OK", style="nf.ok")
    op = Text(f"  {result.op}", style="nf.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="nf.key")
    if key == "id" or key.endswith("_id"):
        v = Text(str(value), style="nf.id")
    elif key == "path":
        v = Text(str(value), style="nf.path")
    elif key == "name":
        v = Text(str(value), style="nf.name")
    else:
        v = Text(str(value))
    console.print(Text.assemble(k, v))


def _render_meta(console: Console, result: ServiceResult) -> None:
    if not result.meta:
        return
    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        console.print(f"    {k}: {v}")


def _node_label(node: dict[str, Any]) -> Text:
    label = Text()
    label.append(str(node.get("dataId", "")), style="nf.id")
    label.append("  ")
    label.append(str(node.get("name", "")), style=style_for_subtype(node.get("subType", -1)))
    for category in node.get("meta", []):
        for name, attributes in category.items():
            pairs = ", ".join(f"{key}={value}" for key, value in attributes.items())
            label.append(f"  [{name}: {pairs}]", style="dim")
    return label


def _add_children(tree: Tree, node: dict[str, Any]) -> None:
    for child in node.get("children", []):
        _add_children(tree.add(_node_label(child)), child)


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="nf.error")
    op = Text(f"  {result.op}", style="nf.op")
    code = Text(f"  [{err.code}]" if err else "", style="nf.warning")
    console.print(label, op, code, Text(f"  {msg}"))
    if verbose and err and err.detail:
        for key, value in err.detail.items():
            _field(console, key, value)


# ── Operation renderers ───────────────────────────────────────────────


def _render_resolve(
    result: ServiceResult, data: dict[str, Any], console: Console, *, verbose: bool = False
) -> None:
    _status_line(console, result)
    node = data.get("node") or {}
    _field(console, "path", data.get("path", ""))
    _field(console, "data_id", node.get("data_id", ""))
    _field(console, "parent_id", node.get("parent_id", ""))
    _field(console, "name", node.get("name", ""))
    _field(console, "sub_type", node.get("sub_type", ""))
    if verbose:
        _render_meta(console, result)


def _render_tree(
    result: ServiceResult, data: dict[str, Any], console: Console, *, verbose: bool = False
) -> None:
    _status_line(console, result)
    node = data.get("node") or {}
    tree = Tree(_node_label(node))
    _add_children(tree, node)
    console.print(tree)
    if verbose:
        _render_meta(console, result)


def _render_query(
    result: ServiceResult, data: dict[str, Any], console: Console, *, verbose: bool = False
) -> None:
    _status_line(console, result)
    _field(console, "query", data.get("query", ""))
    _field(console, "count", data.get("count", 0))
    items = data.get("items", [])
    if not items:
        return
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="nf.id", no_wrap=True)
    table.add_column("Name", style="nf.name")
    table.add_column("SubType")
    table.add_column("Parent")
    if verbose:
        table.add_column("Modified", style="dim")
    for item in items:
        row = [
            str(item.get("dataId", "")),
            str(item.get("name", "")),
            str(item.get("subType", "")),
            str(item.get("parentId", "")),
        ]
        if verbose:
            row.append(str(item.get("modifyDate", "")))
        table.add_row(*row)
    console.print(table)


def _render_explain(
    result: ServiceResult, data: dict[str, Any], console: Console, *, verbose: bool = False
) -> None:
    _status_line(console, result)
    _field(console, "query", data.get("query", ""))
    console.print(Text(data.get("tree", "").rstrip("\n")))
    if data.get("matches_nothing"):
        console.print(Text("  (no predicate survived compilation; matches nothing)", style="dim"))
        return
    console.print(Syntax(data.get("sql", ""), "sql", theme="ansi_dark", word_wrap=True))
    if data.get("parameters"):
        _field(console, "parameters", json.dumps(data["parameters"], separators=(",", ":")))


def _render_generic(
    result: ServiceResult, data: dict[str, Any], console: Console, *, verbose: bool = False
) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "resolve": _render_resolve,
    "render": _render_tree,
    "render_path": _render_tree,
    "query": _render_query,
    "explain": _render_explain,
}

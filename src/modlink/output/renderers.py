"""Operation-specific Rich renderers for ServiceResult.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from modlink.output.console import create_console, get_output, style_for_change

if TYPE_CHECKING:
    from rich.console import Console

    from modlink.services.result import ServiceResult

# Projection change categories in display order; "unchanged" only when verbose.
_CHANGES = ("created", "replaced", "removed", "unchanged")


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich."""
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode.

    Projection ops print the changed target paths, one per line.
    """
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    if result.op == "sweep":
        return "\n".join(result.data.get("removed", []))
    if "created" in result.data:
        changed: list[str] = []
        for key in ("created", "replaced", "removed"):
            changed.extend(result.data.get(key, []))
        return "\n".join(changed)
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    label = Text("OK", style="ml.ok")
    op = Text(f"  {result.op}", style="ml.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    k = Text(f"  {key}: ", style="ml.key")
    if key == "module":
        v = Text(str(value), style="ml.module")
    elif key in ("root", "config", "working_copy", "descriptor", "modules_dir"):
        v = Text(str(value), style="ml.path")
    else:
        v = Text(str(value))
    console.print(k, v, end="")
    console.print()


def _change_table(data: dict[str, Any], *, verbose: bool) -> Table | None:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Target", no_wrap=True)
    table.add_column("Change")
    rows = 0
    for change in _CHANGES:
        if change == "unchanged" and not verbose:
            continue
        for target in data.get(change, []):
            table.add_row(target, Text(change, style=style_for_change(change)))
            rows += 1
    return table if rows else None


def _summary(data: dict[str, Any]) -> str:
    parts = [f"{len(data.get(change, []))} {change}" for change in _CHANGES]
    return ", ".join(parts)


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="ml.error")
    op = Text(f"  {result.op}", style="ml.op")
    console.print(label, op, Text(" — "), Text(msg))

    if err is None:
        return
    chain = err.detail.get("import_chain")
    if chain:
        console.print(Text(f"  via @import: {' -> '.join(chain)}", style="dim"))
    created = err.detail.get("created")
    if created:
        console.print(Text(f"  entries left in place from this run: {len(created)}"))
        if verbose:
            for target in created:
                console.print(Text(f"    {target}", style="ml.path"))
    if verbose:
        console.print(Text(f"  code: {err.code}", style="dim"))
        stderr = err.detail.get("stderr")
        if stderr:
            console.print(Text(stderr, style="dim"))


# ── Operation renderers ───────────────────────────────────────────────


def _render_projection(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    data = result.data
    _status_line(console, result)
    _field(console, "module", data.get("module", ""))
    if verbose and "working_copy" in data:
        _field(console, "working_copy", data["working_copy"])
    if "mode" in data:
        _field(console, "mode", data["mode"])
    for key in ("orphans_removed", "stale_removed"):
        if data.get(key):
            _field(console, key.replace("_", " "), ", ".join(data[key]))
    table = _change_table(data, verbose=verbose)
    if table is not None:
        console.print(table)
    console.print(Text(f"  {_summary(data)}", style="dim"))


def _render_update_all(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    updated = result.data.get("updated", [])
    if not updated:
        console.print(Text("  No checked-out modules.", style="dim"))
        return
    for module in updated:
        console.print(Text(f"  {module}", style="ml.module"))


def _render_sweep(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _field(console, "removed", result.data.get("count", 0))
    for path in result.data.get("removed", []):
        console.print(Text(f"    {path}", style="ml.path"))


def _render_init(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key in ("root", "config", "modules_dir", "client", "repository"):
        if key in result.data:
            _field(console, key, result.data[key] or "-")


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, list):
            value = ", ".join(map(str, value))
        _field(console, key, value)


_OP_RENDERERS: dict[str, Any] = {
    "checkout": _render_projection,
    "export": _render_projection,
    "update": _render_projection,
    "add": _render_projection,
    "delete": _render_projection,
    "project": _render_projection,
    "update_all": _render_update_all,
    "sweep": _render_sweep,
    "init": _render_init,
}

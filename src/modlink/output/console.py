"""Rich Console factory and theme for modlink output.

Consoles render into a StringIO buffer so renderers keep a plain
``ServiceResult -> str`` contract. Outside a terminal (tests, pipes)
Rich drops color codes on its own.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

MODLINK_THEME = Theme(
    {
        "ml.ok": "bold green",
        "ml.error": "bold red",
        "ml.warning": "bold yellow",
        "ml.op": "bold cyan",
        "ml.key": "dim",
        "ml.module": "bold blue",
        "ml.path": "dim",
        "ml.change.created": "green",
        "ml.change.replaced": "yellow",
        "ml.change.removed": "red",
        "ml.change.unchanged": "dim",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer."""
    return Console(
        file=StringIO(),
        theme=MODLINK_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_change(change: str) -> str:
    return f"ml.change.{change}"

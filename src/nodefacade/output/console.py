"""Rich Console factory and theme for nodefacade output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract. In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

from nodefacade.domain.types import NodeSubtype

FACADE_THEME = Theme(
    {
        "nf.ok": "bold green",
        "nf.error": "bold red",
        "nf.warning": "bold yellow",
        "nf.op": "bold cyan",
        "nf.key": "dim",
        "nf.id": "bold blue",
        "nf.path": "dim",
        "nf.name": "bold",
        "nf.sql": "magenta",
        "nf.subtype.folder": "green",
        "nf.subtype.document": "blue",
        "nf.subtype.alias": "yellow",
        "nf.subtype.volume": "cyan",
    }
)

_SUBTYPE_STYLES: dict[int, str] = {
    NodeSubtype.FOLDER: "nf.subtype.folder",
    NodeSubtype.DOCUMENT: "nf.subtype.document",
    NodeSubtype.ALIAS: "nf.subtype.alias",
    NodeSubtype.PROJECT: "nf.subtype.volume",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=FACADE_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_subtype(sub_type: int) -> str:
    """Return the Rich style name for a node subtype."""
    return _SUBTYPE_STYLES.get(sub_type, "")

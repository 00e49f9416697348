"""Rich console factory and theme for human-readable output.

Consoles render into a StringIO so renderers can return plain strings.
Under CliRunner or a pipe Rich detects no terminal and emits no ANSI codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

GUARD_THEME = Theme(
    {
        "guard.ok": "bold green",
        "guard.error": "bold red",
        "guard.warning": "bold yellow",
        "guard.op": "bold cyan",
        "guard.key": "dim",
        "guard.path": "bold blue",
        "guard.field": "bold",
        "guard.kind": "magenta",
        "guard.type.scalar": "green",
        "guard.type.container": "cyan",
    }
)

_CONTAINER_TYPES = frozenset({"object", "list"})


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=GUARD_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_type(field_type: str | None) -> str:
    """Return the Rich style name for a field type."""
    if not field_type:
        return "guard.warning"
    if field_type in _CONTAINER_TYPES:
        return "guard.type.container"
    return "guard.type.scalar"

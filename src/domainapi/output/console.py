"""Rich Console factory and theme for domainapi output.

Consoles render into a StringIO buffer so formatting stays a pure
``ServiceResult -> str`` function.  Rich drops color codes when not
attached to a terminal.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

API_THEME = Theme(
    {
        "api.ok": "bold green",
        "api.error": "bold red",
        "api.warning": "bold yellow",
        "api.op": "bold cyan",
        "api.key": "dim",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    return Console(
        file=StringIO(),
        theme=API_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()

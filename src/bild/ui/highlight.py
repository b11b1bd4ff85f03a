"""Terminal syntax highlighting for shell command lines."""

from __future__ import annotations

import os
from typing import Optional

from pygments import highlight
from pygments.formatters import Terminal256Formatter
from pygments.lexers import BashLexer
from pygments.util import ClassNotFound

_LEXER = BashLexer()


def color_enabled() -> bool:
    """Colour is on unless NO_COLOR is set (https://no-color.org)."""
    return not os.environ.get("NO_COLOR")


def highlight_command(command: str, color: Optional[bool] = None, style: str = "monokai") -> str:
    """
    Return `command` with ANSI colour codes for display.

    Purely cosmetic. An unknown style falls back to the pygments default.
    """
    if color is None:
        color = color_enabled()
    if not color:
        return command
    try:
        formatter = Terminal256Formatter(style=style)
    except ClassNotFound:
        formatter = Terminal256Formatter()
    return highlight(command, _LEXER, formatter).rstrip("\n")

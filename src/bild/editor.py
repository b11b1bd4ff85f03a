from __future__ import annotations

import os
import shlex
import subprocess
import tempfile
from pathlib import Path
from typing import Callable

from .errors import EditorError
from .settings import DEFAULT_EDITOR
from .ui.console import get_console

# (initial_text, suffix) -> edited text
EditFn = Callable[[str, str], str]


def open_editor(initial: str, *, editor: str = DEFAULT_EDITOR, suffix: str = ".md") -> str:
    """
    Let the operator edit `initial` in an external editor and return the result.

    The text goes into a temporary file (the suffix picks the editor's syntax
    highlighting) which is handed to the editor with inherited streams. When
    the editor exits, whatever the file holds is accepted verbatim; its exit
    status is not treated as a verdict on the edit.

    Args:
        initial: Seed content for the file
        editor: Editor command line, e.g. "vim" or "code --wait"
        suffix: Temporary file suffix

    Raises:
        EditorError: If the editor could not be launched
    """
    console = get_console()
    try:
        argv = shlex.split(editor) or [DEFAULT_EDITOR]
    except ValueError as e:
        raise EditorError(editor, str(e)) from e

    fd, name = tempfile.mkstemp(prefix="bild_edit_", suffix=suffix)
    path = Path(name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(initial)

        try:
            proc = subprocess.run([*argv, str(path)])
        except OSError as e:
            raise EditorError(editor, e.strerror or str(e)) from e

        if proc.returncode != 0:
            console.print_debug(f"editor {argv[0]} exited with {proc.returncode}; reading file anyway")

        # Invalid UTF-8 is replaced, never fatal.
        return path.read_text(encoding="utf-8", errors="replace")
    finally:
        path.unlink(missing_ok=True)


def editor_for(editor: str) -> EditFn:
    """Bind an editor command, producing the callable the edit operations take."""
    def _edit(initial: str, suffix: str) -> str:
        return open_editor(initial, editor=editor, suffix=suffix)
    return _edit

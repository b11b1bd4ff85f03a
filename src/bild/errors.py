from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional


class BildError(Exception):
    """Base class for every fatal bild condition."""

    title = "bild failed"

    @property
    def suggestion(self) -> Optional[str]:
        return None

    @property
    def detail_lines(self) -> List[str]:
        return []


@dataclass(eq=False)
class ConfigIOError(BildError):
    """Configuration file could not be read, written or decoded."""
    path: Path
    message: str
    details: List[str] = field(default_factory=list)

    title = "Configuration error"

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"

    @property
    def detail_lines(self) -> List[str]:
        return list(self.details)


@dataclass(eq=False)
class ResolutionError(BildError):
    """
    A project, phase or directory could not be resolved.

    kind is one of "project", "phase" or "directory"; name is the identifier
    that was missing (may be empty when nothing could be determined).
    """
    kind: str
    name: str
    message: str

    title = "Resolution error"

    def __str__(self) -> str:
        return self.message

    @property
    def suggestion(self) -> Optional[str]:
        if self.kind == "project" and not self.name:
            return "Pass the project name explicitly:\n  bild run <project>"
        if self.kind == "project":
            return f"Register it first:\n  bild edit {self.name}"
        return None


@dataclass(eq=False)
class EditorError(BildError):
    """The external editor could not be launched."""
    editor: str
    message: str

    title = "Editor error"

    def __str__(self) -> str:
        return f"could not launch editor {self.editor!r}: {self.message}"

    @property
    def suggestion(self) -> Optional[str]:
        return "Set $EDITOR (or $VISUAL) to an installed editor."


@dataclass(eq=False)
class CommandExecutionError(BildError):
    """A phase's script exited non-zero or could not be started."""
    phase: str
    exit_code: Optional[int]
    message: str = ""

    title = "Phase failed"

    def __str__(self) -> str:
        if self.exit_code is None:
            return f"phase {self.phase} failed: {self.message}"
        return f"phase {self.phase} failed (exit={self.exit_code})"

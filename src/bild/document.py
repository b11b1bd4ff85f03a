"""
Text formats used to edit phases in an external editor.

Whole-project edits use a small Markdown document: a title, an
instructions block, then one `## <phase>` heading per phase followed by a
fenced block of commands. Reordering the headings reorders the phases.

Single-phase edits use a plain one-command-per-line file in which `#`
lines are comments.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import List, Optional

from .model import Phase, ProjectConfig

TITLE_PREFIX = "# Project:"
HEADING_PREFIX = "## "
FENCE = "```"
FENCE_LANGUAGE = "bash"
INSTRUCTIONS = (
    "Edit commands for each phase below. Instructions:",
    "- Order of phases here determines execution order",
    "- Commands must be inside ``` blocks",
    "- Each phase must be a level 2 heading (##)",
)

# Prefixes of lines that are dropped wherever they appear, including inside
# a fence. This is what makes "-x" or "# Project: ..." unrepresentable as
# commands in the document format.
_IGNORED_PREFIXES = (TITLE_PREFIX, "Edit commands", "-")
_FENCE_RE = re.compile(r"^```[\w+-]*$")


class LineKind(Enum):
    IGNORED = "ignored"
    HEADING = "heading"
    FENCE = "fence"
    CONTENT = "content"


class ScanState(Enum):
    SCANNING = "scanning"                # no phase open yet
    IN_PHASE_HEADER = "in_phase_header"  # phase open, outside a fence
    IN_FENCE = "in_fence"                # phase open, collecting commands


def classify_line(line: str) -> LineKind:
    """
    Classify one document line. Precedence: ignored, heading, fence, content.
    """
    trimmed = line.strip()
    if not trimmed or trimmed.startswith(_IGNORED_PREFIXES):
        return LineKind.IGNORED
    if trimmed.startswith(HEADING_PREFIX):
        return LineKind.HEADING
    if _FENCE_RE.match(trimmed):
        return LineKind.FENCE
    return LineKind.CONTENT


def serialize(project_name: str, project: ProjectConfig) -> str:
    """Render a project as an editable document."""
    parts = [f"{TITLE_PREFIX} {project_name}\n\n"]
    parts.append("\n".join(INSTRUCTIONS) + "\n\n")
    for phase in project.phases:
        parts.append(f"{HEADING_PREFIX}{phase.name}\n\n")
        parts.append(f"{FENCE}{FENCE_LANGUAGE}\n")
        parts.append("\n".join(phase.commands))
        parts.append(f"\n{FENCE}\n\n")
    return "".join(parts)


class PhaseScanner:
    """
    Line-driven state machine that rebuilds phases from a document.

    Feed lines with feed(), then call finish() to get the phases. A phase
    that collected no command lines is dropped.
    """

    def __init__(self):
        self.state = ScanState.SCANNING
        self.phases: List[Phase] = []
        self._name: Optional[str] = None
        self._commands: List[str] = []

    def feed(self, line: str) -> None:
        kind = classify_line(line)

        if kind is LineKind.IGNORED:
            return

        if kind is LineKind.HEADING:
            self._close_phase()
            self._name = line.strip()[len(HEADING_PREFIX):].strip()
            self._commands = []
            self.state = ScanState.IN_PHASE_HEADER
            return

        if kind is LineKind.FENCE:
            if self.state is ScanState.IN_PHASE_HEADER:
                self.state = ScanState.IN_FENCE
            elif self.state is ScanState.IN_FENCE:
                self.state = ScanState.IN_PHASE_HEADER
            return

        if self.state is ScanState.IN_FENCE:
            self._commands.append(line.strip())

    def finish(self) -> List[Phase]:
        self._close_phase()
        self._name = None
        self.state = ScanState.SCANNING
        return self.phases

    def _close_phase(self) -> None:
        if self._name is not None and self._commands:
            self.phases.append(Phase(name=self._name, commands=self._commands))
        self._commands = []


def parse(document: str) -> List[Phase]:
    """Parse an edited document back into an ordered phase list."""
    scanner = PhaseScanner()
    for line in document.split("\n"):
        scanner.feed(line)
    return scanner.finish()


# ---------------------------------------------------------------------
# Single-phase format
# ---------------------------------------------------------------------

def render_phase_commands(phase: Phase) -> str:
    if phase.commands:
        return "\n".join(phase.commands)
    return (
        f"# Enter one command per line for phase '{phase.name}'.\n"
        "# Lines starting with '#' are ignored.\n"
    )


def parse_phase_commands(text: str) -> List[str]:
    commands = []
    for line in text.split("\n"):
        trimmed = line.strip()
        if not trimmed or trimmed.startswith("#"):
            continue
        commands.append(trimmed)
    return commands

"""Console output formatting utilities for bild."""

from __future__ import annotations

import sys
from typing import Optional

from ..model import Config, Phase
from .highlight import highlight_command


class Console:
    """Centralized console output formatting."""

    def __init__(self, debug: bool = False, color: Optional[bool] = None):
        """
        Initialize console formatter.

        Args:
            debug: If True, show debug messages and stack traces
            color: Force command highlighting on/off (None: honour NO_COLOR)
        """
        self.debug = debug
        self.color = color

    def flush(self) -> None:
        # Child processes share our file descriptors; keep ordering intact.
        sys.stdout.flush()
        sys.stderr.flush()

    def highlight(self, command: str) -> str:
        return highlight_command(command, color=self.color)

    # ---- run ----

    def print_working_directory(self, root: Optional[str]) -> None:
        """Print where phases will run."""
        if root is None:
            print("Not a git repository; running in current directory.")
        else:
            print(f"Changing working directory to repository root: {root}")

    def print_config_source(self, project: str, source: str) -> None:
        if source == "local":
            print(f"Using local configuration for project: {project}")
        else:
            self.print_debug(f"Using global configuration for project: {project}")

    def print_phase_start(self, phase: Phase) -> None:
        """Print phase start message."""
        print(f"\nPHASE STARTED: {phase.name}")

    def print_command(self, command: str) -> None:
        """Print a command before it is executed."""
        print(f"$ {self.highlight(command)}")

    def print_phase_failed(self, phase: str, exit_code: Optional[int] = None) -> None:
        """Print phase failure message."""
        print(f"PHASE FAILED: {phase}", file=sys.stderr)
        if exit_code is not None:
            print(f"Exit code: {exit_code}", file=sys.stderr)

    def print_run_summary(self, project: str, phases: list[str]) -> None:
        print(f"\nRUN COMPLETE: {project} ({len(phases)} phase{'' if len(phases) == 1 else 's'})")

    # ---- edit / list / dump ----

    def print_project_updated(self, project: str, phases: list[Phase]) -> None:
        print(f"Project {project} updated with {len(phases)} phase(s).")
        for phase in phases:
            print(f"  Phase {phase.name}: {len(phase.commands)} command(s)")

    def print_phase_updated(self, project: str, phase: str, commands: list[str]) -> None:
        if commands:
            print(f"Project {project}, phase {phase} updated with {len(commands)} command(s).")
        else:
            print(f"Project {project}, phase {phase} has no commands and was removed.")

    def print_projects(self, config: Config) -> None:
        """Print every registered project with its phases and commands."""
        if not config.projects:
            print("No projects registered.")
            return

        print("Registered projects:")
        for name, project in config.projects.items():
            print(f"\nProject: {name}")
            if not project.phases:
                print("  No phases defined.")
                continue
            for phase in project.phases:
                count = len(phase.commands)
                print(f"  Phase: {phase.name} ({count} command{'' if count == 1 else 's'})")
                for command in phase.commands:
                    print(f"      $ {self.highlight(command)}")

    # ---- generic ----

    def print_error(
        self,
        title: str,
        message: str,
        details: Optional[list[str]] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        """
        Print structured error message.

        Args:
            title: Error title
            message: Main error message
            details: Optional list of detail lines
            suggestion: Optional suggestion for user
        """
        print(f"\nERROR: {title}", file=sys.stderr)
        print(f"{message}", file=sys.stderr)
        if details:
            for detail in details:
                print(f"  {detail}", file=sys.stderr)
        if suggestion:
            print(f"\n{suggestion}", file=sys.stderr)

    def print_exception(self, exc: BaseException) -> None:
        """Print exception, with full traceback only in debug mode."""
        if self.debug:
            import traceback
            traceback.print_exception(type(exc), exc, exc.__traceback__)
        else:
            print(f"Error: {exc}", file=sys.stderr)

    def print_info(self, message: str) -> None:
        """Print informational message."""
        print(message)

    def print_debug(self, message: str) -> None:
        """Print debug message (only if debug mode enabled)."""
        if self.debug:
            print(f"[DEBUG] {message}", file=sys.stderr)


# Global console instance (will be initialized by CLI)
_console: Optional[Console] = None


def get_console() -> Console:
    """Get the global console instance."""
    global _console
    if _console is None:
        _console = Console()
    return _console


def set_console(console: Console) -> None:
    """Set the global console instance."""
    global _console
    _console = console

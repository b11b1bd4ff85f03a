from __future__ import annotations

import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional

from .errors import CommandExecutionError, ConfigIOError, ResolutionError
from .git_facts import git
from .model import Phase
from .store import ConfigStore
from .ui.console import Console, get_console

# Prepended to every phase script: the first failing command ends the phase.
ABORT_ON_ERROR = "set -e"
DEFAULT_SHELL = "sh"


@dataclass(frozen=True)
class Resolution:
    """What a run will execute, and where."""
    project: str
    phases: List[Phase]
    source: str  # "local" | "global"
    cwd: Path


def build_script(phase: Phase) -> str:
    """Join a phase's commands into one fail-fast shell script."""
    lines = [ABORT_ON_ERROR, *phase.commands]
    return "\n".join(lines) + "\n"


def select_phases(phases: List[Phase], phase_name: Optional[str]) -> List[Phase]:
    """
    All phases in order, or only the one named `phase_name`.

    Raises:
        ResolutionError: A phase was requested and none has that exact name
    """
    if not phase_name:
        return list(phases)
    for phase in phases:
        if phase.name == phase_name:
            return [phase]
    raise ResolutionError("phase", phase_name, f"phase {phase_name} not found")


class PhaseRunner:
    """
    Resolves which project applies and runs its phases in order.

    Args:
        store: Config store (global file plus local override lookups)
        console: Output sink; defaults to the process console
        locate_root: Returns the version-control root or None
        detect_project: Returns the auto-detected project name or None
        shell: Shell used to run each phase script
    """

    def __init__(
        self,
        store: ConfigStore,
        *,
        console: Optional[Console] = None,
        locate_root: Optional[Callable[[], Optional[Path]]] = None,
        detect_project: Optional[Callable[[], Optional[str]]] = None,
        shell: str = DEFAULT_SHELL,
    ):
        self.store = store
        self.console = console or get_console()
        self.locate_root = locate_root or git.find_root
        self.detect_project = detect_project or git.repo_name
        self.shell = shell

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def enter_root(self) -> Path:
        """Change into the repository root when there is one; return the cwd."""
        root = self.locate_root()
        self.console.print_working_directory(str(root) if root else None)
        if root is not None:
            try:
                os.chdir(root)
            except OSError as e:
                raise ResolutionError(
                    "directory", str(root), f"cannot change directory to {root}: {e.strerror or e}"
                ) from e
        return Path.cwd()

    def resolve(self, project_name: Optional[str] = None, phase_name: Optional[str] = None) -> Resolution:
        cwd = self.enter_root()

        local = self.store.load_local(cwd)
        if local is not None:
            entry = local.first_project()
            if entry is None:
                raise ConfigIOError(self.store.local_path(cwd), "local config defines no project")
            name, project = entry
            if len(local.root) > 1:
                self.console.print_debug(f"local config defines {len(local.root)} projects; using {name}")
            if project_name and project_name != name:
                self.console.print_debug(f"ignoring project {project_name}: local config wins")
            source = "local"
        else:
            name = project_name or self.detect_project()
            if not name:
                raise ResolutionError(
                    "project", "", "project name required when no local config exists"
                )
            config = self.store.load()
            project = config.projects.get(name)
            if project is None:
                raise ResolutionError("project", name, f"project {name} not found")
            source = "global"

        self.console.print_config_source(name, source)
        return Resolution(
            project=name,
            phases=select_phases(project.phases, phase_name),
            source=source,
            cwd=cwd,
        )

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def run_phase(self, phase: Phase) -> None:
        """
        Run one phase as a single child process with inherited stdio.

        Raises:
            CommandExecutionError: The script exited non-zero or did not start
        """
        self.console.print_phase_start(phase)
        for command in phase.commands:
            self.console.print_command(command)
        self.console.flush()

        try:
            proc = subprocess.run([self.shell, "-c", build_script(phase)])
        except OSError as e:
            self.console.print_phase_failed(phase.name)
            raise CommandExecutionError(phase.name, None, e.strerror or str(e)) from e

        if proc.returncode != 0:
            self.console.print_phase_failed(phase.name, proc.returncode)
            raise CommandExecutionError(phase.name, proc.returncode)

    def run_phases(self, phases: List[Phase]) -> List[str]:
        """Run phases strictly in order; the first failure stops the run."""
        ran: List[str] = []
        for phase in phases:
            self.run_phase(phase)
            ran.append(phase.name)
        return ran

    def run(self, project_name: Optional[str] = None, phase_name: Optional[str] = None) -> List[str]:
        """Resolve, then execute. Returns the names of the phases that ran."""
        resolution = self.resolve(project_name, phase_name)
        ran = self.run_phases(resolution.phases)
        self.console.print_run_summary(resolution.project, ran)
        return ran

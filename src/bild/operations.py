from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from . import document
from .editor import EditFn
from .errors import ResolutionError
from .git_facts import git
from .model import Phase, ProjectConfig
from .store import ConfigStore


def edit_project(store: ConfigStore, project_name: str, *, edit: EditFn) -> List[Phase]:
    """
    Edit (and reorder) every phase of a project through the document format.

    The project is created when it does not exist yet. Phases left without
    commands disappear. The config is saved right away.

    Returns:
        The project's new phase list
    """
    config = store.load()
    project = config.projects.get(project_name) or ProjectConfig()

    edited = edit(document.serialize(project_name, project), ".md")
    project.phases = document.parse(edited)

    config.projects[project_name] = project
    store.save(config)
    return project.phases


def edit_phase(store: ConfigStore, project_name: str, phase_name: str, *, edit: EditFn) -> List[str]:
    """
    Edit the commands of one phase, one command per line.

    Missing project or phase are created (a new phase goes last). A phase
    edited down to zero commands is removed rather than stored empty.

    Returns:
        The phase's new command list
    """
    config = store.load()
    project = config.projects.get(project_name) or ProjectConfig()

    phase = project.find_phase(phase_name)
    if phase is None:
        phase = Phase(name=phase_name)
        project.phases.append(phase)

    edited = edit(document.render_phase_commands(phase), ".sh")
    phase.commands = document.parse_phase_commands(edited)
    if not phase.commands:
        project.phases = [p for p in project.phases if p is not phase]

    config.projects[project_name] = project
    store.save(config)
    return phase.commands


def dump_project(store: ConfigStore, project_name: str, *, root: Optional[Path] = None) -> Path:
    """
    Write a project's global configuration into the repository's local file.

    Args:
        root: Target directory; defaults to the git repository root

    Returns:
        Path of the written local config file
    """
    config = store.load()
    project = config.projects.get(project_name)
    if project is None:
        raise ResolutionError("project", project_name, f"project {project_name} not found")

    if root is None:
        root = git.find_root()
        if root is None:
            raise ResolutionError(
                "directory", "", "failed to get git repository root; run dump inside a repository"
            )

    return store.save_local(root, project_name, project)

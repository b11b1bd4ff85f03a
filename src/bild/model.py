from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, Field, RootModel, field_validator


class Phase(BaseModel):
    """A named, ordered group of shell command lines run as one unit."""
    name: str
    commands: List[str] = Field(default_factory=list)

    # Older config files store an empty command list as null.
    @field_validator("commands", mode="before")
    @classmethod
    def _null_commands(cls, value):
        return [] if value is None else value


class ProjectConfig(BaseModel):
    """Phases of one project; list order is execution order."""
    phases: List[Phase] = Field(default_factory=list)

    @field_validator("phases", mode="before")
    @classmethod
    def _null_phases(cls, value):
        return [] if value is None else value

    def find_phase(self, name: str) -> Optional[Phase]:
        for phase in self.phases:
            if phase.name == name:
                return phase
        return None


class Config(BaseModel):
    """The global configuration file: project name -> phases."""
    projects: Dict[str, ProjectConfig] = Field(default_factory=dict)

    @field_validator("projects", mode="before")
    @classmethod
    def _null_projects(cls, value):
        return {} if value is None else value


class LocalConfig(RootModel[Dict[str, ProjectConfig]]):
    """
    Project-root override file.

    Same project mapping as Config but without the "projects" wrapper, and
    normally holding exactly one entry.
    """

    def first_project(self) -> Optional[Tuple[str, ProjectConfig]]:
        for name, project in self.root.items():
            return name, project
        return None

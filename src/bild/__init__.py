from .document import parse, serialize
from .model import Config, LocalConfig, Phase, ProjectConfig
from .runner import PhaseRunner
from .settings import Settings
from .store import ConfigStore

__all__ = [
    "parse",
    "serialize",
    "Config",
    "LocalConfig",
    "Phase",
    "ProjectConfig",
    "PhaseRunner",
    "Settings",
    "ConfigStore",
]

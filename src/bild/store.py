from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from .errors import ConfigIOError
from .model import Config, LocalConfig, ProjectConfig
from .settings import Settings


def _error_lines(exc: ValidationError) -> list[str]:
    lines = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        lines.append(f"{loc}: {err['msg']}" if loc else err["msg"])
    return lines or [str(exc)]


class ConfigStore:
    """JSON persistence for the global config and per-project local overrides."""

    def __init__(self, settings: Settings):
        self.settings = settings

    @property
    def path(self) -> Path:
        return self.settings.config_path

    # ---- global ----

    def load(self) -> Config:
        """
        Load the global configuration.

        A missing file is not an error: an empty Config is returned.

        Raises:
            ConfigIOError: If the file is unreadable or not a valid config.
        """
        if not self.path.exists():
            return Config()
        try:
            data = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigIOError(self.path, f"cannot read: {e.strerror or e}") from e
        except UnicodeDecodeError as e:
            raise ConfigIOError(self.path, f"not valid UTF-8 ({e.reason} at byte {e.start})") from e
        try:
            return Config.model_validate_json(data)
        except ValidationError as e:
            lines = _error_lines(e)
            raise ConfigIOError(self.path, f"invalid configuration ({lines[0]})", lines[1:]) from e

    def save(self, config: Config) -> None:
        """Write the global configuration, creating its directory if needed."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(config.model_dump_json(indent=2) + "\n", encoding="utf-8")
        except OSError as e:
            raise ConfigIOError(self.path, f"cannot write: {e.strerror or e}") from e

    # ---- local ----

    def local_path(self, directory: Optional[Path] = None) -> Path:
        return Path(directory or ".") / self.settings.local_filename

    def load_local(self, directory: Optional[Path] = None) -> Optional[LocalConfig]:
        """
        Load the local override file from `directory` (default: cwd).

        Returns None when there is no local file.
        """
        path = self.local_path(directory)
        if not path.exists():
            return None
        try:
            data = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigIOError(path, f"failed to read local config: {e.strerror or e}") from e
        except UnicodeDecodeError as e:
            raise ConfigIOError(path, f"local config is not valid UTF-8 ({e.reason} at byte {e.start})") from e
        try:
            return LocalConfig.model_validate_json(data)
        except ValidationError as e:
            lines = _error_lines(e)
            raise ConfigIOError(path, f"failed to parse local config ({lines[0]})", lines[1:]) from e

    def save_local(self, root: Path, project_name: str, project: ProjectConfig) -> Path:
        """Write `{project_name: project}` to the local file under `root`."""
        path = self.local_path(root)
        local = LocalConfig({project_name: project})
        try:
            path.write_text(local.model_dump_json(indent=2) + "\n", encoding="utf-8")
        except OSError as e:
            raise ConfigIOError(path, f"failed to write config: {e.strerror or e}") from e
        return path

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

DEFAULT_CONFIG_PATH = Path("~/.config/bild/bild.json")
LOCAL_CONFIG_FILENAME = ".bild.json"
DEFAULT_EDITOR = "vi"


@dataclass(frozen=True)
class Settings:
    """
    Process-wide configuration context.

    Built once by the CLI and handed to every component that needs a storage
    path or the editor command.
    """
    config_path: Path
    local_filename: str = LOCAL_CONFIG_FILENAME
    editor: str = DEFAULT_EDITOR

    @classmethod
    def from_environment(cls, config_file: Optional[str] = None) -> Settings:
        """
        Build settings from the --config flag and the environment.

        Args:
            config_file: Explicit configuration path. A leading "~" is expanded.
                         Falls back to ~/.config/bild/bild.json.
        """
        if not config_file:
            path = DEFAULT_CONFIG_PATH.expanduser()
        elif config_file.startswith("~"):
            # "~x/y" is $HOME/x/y; other users' homes are not looked up.
            path = Path.home() / config_file[1:].lstrip("/")
        else:
            path = Path(config_file)
        editor = os.environ.get("VISUAL") or os.environ.get("EDITOR") or DEFAULT_EDITOR
        return cls(config_path=path, editor=editor)

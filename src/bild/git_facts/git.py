# git.py
# Thin wrapper around the Git CLI. The rest of bild never shells out to git
# directly; it asks this module where the repository is.

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Optional


def _git(args: list[str], cwd: Optional[str] = None) -> str:
    """
    Execute a git command and return its stdout as a clean string.

    Raises:
        subprocess.CalledProcessError: git exited non-zero.
        FileNotFoundError: git is not installed.
    """
    out = subprocess.check_output(
        ["git", *args],
        cwd=cwd,
        text=True,
        stderr=subprocess.DEVNULL,  # "not a git repository" is expected noise
    )
    return out.strip()


def repo_root(cwd: Optional[str] = None) -> Path:
    """
    Return the absolute path to the root of the current Git repository.

    `git rev-parse --show-toplevel` prints the repo root regardless of where
    inside the work tree it is run.
    """
    return Path(_git(["rev-parse", "--show-toplevel"], cwd=cwd))


def find_root(cwd: Optional[str] = None) -> Optional[Path]:
    """
    Like repo_root(), but returns None outside a repository or without git.
    """
    try:
        return repo_root(cwd)
    except (subprocess.CalledProcessError, FileNotFoundError):
        return None


def repo_name(cwd: Optional[str] = None) -> Optional[str]:
    """
    Project name derived from the repository: the root directory's basename.
    """
    # TODO: read the name from `git remote get-url origin` when the checkout
    # directory was renamed.
    root = find_root(cwd)
    return root.name if root else None

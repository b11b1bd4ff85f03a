import json
import shutil
import subprocess

import pytest

from bild.model import Config, Phase, ProjectConfig
from bild.runner import PhaseRunner
from bild.settings import Settings
from bild.store import ConfigStore
from bild.ui.console import Console, set_console


@pytest.fixture(autouse=True)
def plain_console():
    """Deterministic console: no colour, no debug."""
    console = Console(debug=False, color=False)
    set_console(console)
    return console


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """A directory outside any repository, used as the process cwd."""
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.chdir(work)
    return work


@pytest.fixture
def settings(tmp_path):
    return Settings(config_path=tmp_path / "home" / "bild.json", editor="true")


@pytest.fixture
def store(settings):
    return ConfigStore(settings)


@pytest.fixture
def demo_project():
    return ProjectConfig(phases=[
        Phase(name="configure", commands=["echo configuring"]),
        Phase(name="build", commands=["echo building"]),
        Phase(name="test", commands=["echo testing"]),
    ])


@pytest.fixture
def demo_store(store, demo_project):
    store.save(Config(projects={"demo": demo_project}))
    return store


@pytest.fixture
def make_runner(plain_console):
    def _make(store, root=None, detected=None):
        return PhaseRunner(
            store,
            console=plain_console,
            locate_root=lambda: root,
            detect_project=lambda: detected,
        )
    return _make


@pytest.fixture
def temp_git_repo(tmp_path, monkeypatch):
    if shutil.which("git") is None:
        pytest.skip("git is not installed")
    repo = tmp_path / "myrepo"
    repo.mkdir()
    subprocess.run(["git", "init", "-q"], cwd=repo, check=True)
    (repo / "sub").mkdir()
    monkeypatch.chdir(repo / "sub")
    return repo


def write_json(path, data):
    path.write_text(json.dumps(data), encoding="utf-8")

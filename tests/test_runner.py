"""
Tests for phase resolution and execution
========================================

Child processes inherit our stdio, so their output is checked with capfd.
"""

import os

import pytest

from bild.errors import CommandExecutionError, ConfigIOError, ResolutionError
from bild.model import Config, Phase, ProjectConfig
from bild.runner import build_script, select_phases


def _lines(out):
    return [line for line in out.splitlines() if line]


class TestBuildScript:
    def test_abort_directive_first(self):
        script = build_script(Phase(name="p", commands=["a", "b"]))
        assert script == "set -e\na\nb\n"


class TestSelectPhases:
    def test_all_phases_in_order(self, demo_project):
        assert select_phases(demo_project.phases, None) == demo_project.phases

    def test_single_phase(self, demo_project):
        assert [p.name for p in select_phases(demo_project.phases, "build")] == ["build"]

    def test_match_is_case_sensitive(self, demo_project):
        with pytest.raises(ResolutionError) as exc_info:
            select_phases(demo_project.phases, "Build")
        assert exc_info.value.kind == "phase"
        assert exc_info.value.name == "Build"


class TestScenario:
    def test_runs_all_phases_in_order(self, demo_store, make_runner, workdir, capfd):
        ran = make_runner(demo_store).run("demo")

        assert ran == ["configure", "build", "test"]
        out = _lines(capfd.readouterr().out)
        outputs = [line for line in out if line in ("configuring", "building", "testing")]
        assert outputs == ["configuring", "building", "testing"]

    def test_single_phase(self, demo_store, make_runner, workdir, capfd):
        assert make_runner(demo_store).run("demo", "build") == ["build"]

        out = _lines(capfd.readouterr().out)
        assert "building" in out
        assert "configuring" not in out
        assert "testing" not in out

    def test_undefined_phase(self, demo_store, make_runner, workdir, capfd):
        with pytest.raises(ResolutionError, match="deploy"):
            make_runner(demo_store).run("demo", "deploy")
        out = _lines(capfd.readouterr().out)
        assert "configuring" not in out

    def test_commands_printed_before_running(self, demo_store, make_runner, workdir, capfd):
        make_runner(demo_store).run("demo", "build")
        out = _lines(capfd.readouterr().out)
        assert out.index("$ echo building") < out.index("building")


class TestFailFast:
    def test_failure_stops_phase_and_run(self, store, make_runner, workdir, capfd):
        store.save(Config(projects={"p": ProjectConfig(phases=[
            Phase(name="first", commands=["echo ok1", "false", "echo ok2"]),
            Phase(name="second", commands=["echo next"]),
        ])}))

        with pytest.raises(CommandExecutionError) as exc_info:
            make_runner(store).run("p")

        assert exc_info.value.phase == "first"
        assert exc_info.value.exit_code == 1
        out = _lines(capfd.readouterr().out)
        assert "ok1" in out
        assert "ok2" not in out
        assert "next" not in out

    def test_side_effects_of_earlier_phases_remain(self, store, make_runner, workdir):
        store.save(Config(projects={"p": ProjectConfig(phases=[
            Phase(name="a", commands=["touch a.done"]),
            Phase(name="b", commands=["exit 3"]),
            Phase(name="c", commands=["touch c.done"]),
        ])}))

        with pytest.raises(CommandExecutionError) as exc_info:
            make_runner(store).run("p")

        assert exc_info.value.exit_code == 3
        assert (workdir / "a.done").exists()
        assert not (workdir / "c.done").exists()

    def test_commands_share_one_shell(self, store, make_runner, workdir, capfd):
        store.save(Config(projects={"p": ProjectConfig(phases=[
            Phase(name="a", commands=["X=shared", "cd ..", "echo $X", "pwd"]),
        ])}))
        make_runner(store).run("p")
        out = _lines(capfd.readouterr().out)
        assert "shared" in out
        assert str(workdir.parent) in out

    def test_missing_shell_is_execution_error(self, demo_store, plain_console, workdir):
        from bild.runner import PhaseRunner

        runner = PhaseRunner(
            demo_store,
            console=plain_console,
            locate_root=lambda: None,
            detect_project=lambda: None,
            shell="definitely-not-a-shell-bild",
        )
        with pytest.raises(CommandExecutionError) as exc_info:
            runner.run("demo")
        assert exc_info.value.phase == "configure"
        assert exc_info.value.exit_code is None


class TestResolution:
    def test_local_config_wins_over_project_name(self, store, make_runner, workdir, capfd):
        store.save(Config(projects={"Y": ProjectConfig(phases=[
            Phase(name="build", commands=["echo from-global"]),
        ])}))
        store.save_local(workdir, "X", ProjectConfig(phases=[
            Phase(name="build", commands=["echo from-local"]),
        ]))

        resolution = make_runner(store).resolve("Y")
        assert resolution.project == "X"
        assert resolution.source == "local"

        make_runner(store).run("Y")
        out = _lines(capfd.readouterr().out)
        assert "from-local" in out
        assert "from-global" not in out

    def test_local_config_needs_no_global_file(self, store, make_runner, workdir):
        store.path.parent.mkdir(parents=True)
        store.path.write_text("corrupt")
        store.save_local(workdir, "X", ProjectConfig(phases=[Phase(name="a", commands=["true"])]))

        assert make_runner(store).run() == ["a"]

    def test_unparseable_local_config(self, demo_store, make_runner, workdir):
        (workdir / ".bild.json").write_text("{oops")
        with pytest.raises(ConfigIOError):
            make_runner(demo_store).run("demo")

    def test_empty_local_config(self, demo_store, make_runner, workdir):
        (workdir / ".bild.json").write_text("{}")
        with pytest.raises(ConfigIOError, match="no project"):
            make_runner(demo_store).run("demo")

    def test_project_name_required(self, demo_store, make_runner, workdir):
        with pytest.raises(ResolutionError) as exc_info:
            make_runner(demo_store).run()
        assert exc_info.value.kind == "project"
        assert exc_info.value.name == ""

    def test_detected_project_name(self, demo_store, make_runner, workdir):
        resolution = make_runner(demo_store, detected="demo").resolve()
        assert resolution.project == "demo"
        assert resolution.source == "global"

    def test_explicit_name_beats_detected(self, demo_store, make_runner, workdir):
        with pytest.raises(ResolutionError, match="project other not found"):
            make_runner(demo_store, detected="demo").resolve("other")

    def test_changes_into_root(self, demo_store, make_runner, workdir, tmp_path):
        root = tmp_path / "root"
        root.mkdir()
        resolution = make_runner(demo_store, root=root).resolve("demo")

        assert resolution.cwd == root.resolve()
        assert os.getcwd() == str(root.resolve())

    def test_local_config_read_from_root(self, demo_store, make_runner, workdir, tmp_path):
        root = tmp_path / "root"
        root.mkdir()
        demo_store.save_local(root, "rooted", ProjectConfig(phases=[Phase(name="a", commands=["true"])]))

        assert make_runner(demo_store, root=root).resolve("demo").project == "rooted"

    def test_missing_root_directory_is_fatal(self, demo_store, make_runner, workdir, tmp_path):
        with pytest.raises(ResolutionError) as exc_info:
            make_runner(demo_store, root=tmp_path / "gone").resolve("demo")
        assert exc_info.value.kind == "directory"

    def test_no_root_message(self, demo_store, make_runner, workdir, capsys):
        make_runner(demo_store).resolve("demo")
        assert "Not a git repository" in capsys.readouterr().out

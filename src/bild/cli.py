# cli.py
from __future__ import annotations

import click

from .editor import editor_for
from .errors import BildError
from .operations import dump_project, edit_phase, edit_project
from .runner import PhaseRunner
from .settings import Settings
from .store import ConfigStore
from .ui.console import Console, get_console, set_console


class BildGroup(click.Group):
    """
    Click group that is the single error boundary of the tool.

    Everything below raises BildError subclasses; here they become a message
    on stderr and a non-zero exit status.
    """

    def invoke(self, ctx: click.Context):
        try:
            return super().invoke(ctx)
        except BildError as e:
            get_console().print_error(
                e.title, str(e), details=e.detail_lines, suggestion=e.suggestion
            )
            ctx.exit(1)
        except KeyboardInterrupt:
            get_console().print_info("\nInterrupted by user")
            ctx.exit(130)
        except (click.exceptions.Exit, click.ClickException, click.Abort):
            raise
        except Exception as e:
            get_console().print_exception(e)
            ctx.exit(1)


def _settings(ctx: click.Context) -> Settings:
    return ctx.obj["settings"]


def _store(ctx: click.Context) -> ConfigStore:
    return ConfigStore(_settings(ctx))


def _non_empty(ctx, param, value):
    if value is not None and not value.strip():
        raise click.BadParameter("must not be empty")
    return value


@click.group(cls=BildGroup, invoke_without_command=True)
@click.option(
    "--config",
    "config_file",
    default=None,
    envvar="BILD_CONFIG",
    help="Path to configuration file (default: ~/.config/bild/bild.json)",
)
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Enable debug mode (show stack traces and detailed output)",
)
@click.pass_context
def cli(ctx, config_file, debug):
    """bild: register, edit and run per-project build phases.

    With no subcommand, runs every phase of the project deduced from the
    current git repository (or of the local .bild.json).
    """
    set_console(Console(debug=debug))
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug
    ctx.obj["settings"] = Settings.from_environment(config_file)

    if ctx.invoked_subcommand is None:
        PhaseRunner(_store(ctx)).run()


@cli.command()
@click.argument("project", required=False)
@click.argument("phase", required=False)
@click.pass_context
def run(ctx, project, phase):
    """Run build commands for a project (default: run all phases).

    If a PHASE is given only that phase runs. Without PROJECT the name is
    deduced from the git repository. A local .bild.json in the repository
    root always takes precedence.
    """
    PhaseRunner(_store(ctx)).run(project, phase)


@cli.command()
@click.argument("project", callback=_non_empty)
@click.argument("phase", required=False, callback=_non_empty)
@click.pass_context
def edit(ctx, project, phase):
    """Edit build commands for a project in $EDITOR.

    With only PROJECT, all phases are edited (and can be reordered) in one
    document. With PHASE, only that phase is edited, one command per line.
    """
    console = get_console()
    store = _store(ctx)
    edit_fn = editor_for(_settings(ctx).editor)

    if phase is None:
        phases = edit_project(store, project, edit=edit_fn)
        console.print_project_updated(project, phases)
    else:
        commands = edit_phase(store, project, phase, edit=edit_fn)
        console.print_phase_updated(project, phase, commands)


@cli.command(name="list")
@click.pass_context
def list_projects(ctx):
    """List registered projects, their phases and commands."""
    get_console().print_projects(_store(ctx).load())


@cli.command()
@click.argument("project")
@click.pass_context
def dump(ctx, project):
    """Dump a project's configuration to .bild.json in the repository root."""
    path = dump_project(_store(ctx), project)
    get_console().print_info(f"Successfully dumped configuration for project '{project}' to {path}")


def main() -> None:
    cli(prog_name="bild")


if __name__ == "__main__":
    main()

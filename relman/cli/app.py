from __future__ import annotations

import os

import typer

from relman import __version__
from relman.cli.commands.artifactory import artifactory_app
from relman.cli.commands.github import github_app
from relman.cli.commands.local import local_app
from relman.cli.context import QUIET_ENV, VERBOSITY_ENV

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
    help="Release automation: version files, GitHub releases, Artifactory builds.",
)


# Sub-apps
app.add_typer(local_app, name="local")
app.add_typer(github_app, name="github")
app.add_typer(artifactory_app, name="artifactory")


def _print_version(value: bool) -> None:
    # Eager, so it runs before click insists on a subcommand.
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=0)


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit.",
        callback=_print_version,
        is_eager=True,
    ),
    verbose: int = typer.Option(
        0, "--verbose", "-v", count=True, help="Show debug output (repeatable)."
    ),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only show warnings and errors."),
) -> None:
    del version
    os.environ[VERBOSITY_ENV] = str(verbose)
    os.environ[QUIET_ENV] = "1" if quiet else "0"


def main() -> None:
    app()

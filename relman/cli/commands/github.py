"""GitHub commands: release, bump, release-and-bump, artifacts."""

from __future__ import annotations

from pathlib import Path

import typer

from relman.cli.commands._helpers import exit_on_error, read_message, resolve_record
from relman.cli.context import CLIContext, build_context
from relman.git.repository import LocalRepository
from relman.output.errors import github_exit_code
from relman.services.github.api import GitHubClient, GitHubSettings
from relman.services.github.flows import bump, release, release_and_bump, upload_artifacts

github_app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Releases and version bumps on GitHub.",
)

_TOKEN_HELP = "GitHub API token (defaults to $GITHUB_TOKEN)"


def _client(ctx: CLIContext, token: str) -> GitHubClient:
    gh = ctx.config.github
    return GitHubClient(
        GitHubSettings(owner=gh.owner, repo=gh.repo, token=token),
        http=ctx.http,
        console=ctx.console,
    )


@github_app.command("release")
def release_cmd(
    token: str = typer.Option(..., "--api-token", envvar="GITHUB_TOKEN", help=_TOKEN_HELP),
    draft: bool = typer.Option(False, "--draft", help="Mark the release as draft"),
    message: str | None = typer.Option(
        None, "--message", "-m", help="Release body", show_default=False
    ),
    message_file: Path | None = typer.Option(
        None, "--message-file", "-F", help="Read the release body from a file", show_default=False
    ),
) -> None:
    """Tag the current commit with the version in the project's version file."""
    ctx = build_context()
    body = read_message(message, message_file, ctx)
    result = release(
        client=_client(ctx, token),
        repo=LocalRepository(ctx.project_root),
        record=resolve_record(ctx),
        console=ctx.console,
        body=body,
        draft=draft,
    )
    exit_on_error(result, ctx, github_exit_code)


@github_app.command("bump")
def bump_cmd(
    token: str = typer.Option(..., "--api-token", envvar="GITHUB_TOKEN", help=_TOKEN_HELP),
) -> None:
    """Bump the patch version on GitHub, without touching the working copy."""
    ctx = build_context()
    result = bump(
        client=_client(ctx, token),
        repo=LocalRepository(ctx.project_root),
        record=resolve_record(ctx),
        console=ctx.console,
    )
    exit_on_error(result, ctx, github_exit_code)


@github_app.command("release-and-bump")
def release_and_bump_cmd(
    token: str = typer.Option(..., "--api-token", envvar="GITHUB_TOKEN", help=_TOKEN_HELP),
    draft: bool = typer.Option(False, "--draft", help="Mark the release as draft"),
    message: str | None = typer.Option(
        None, "--message", "-m", help="Release body", show_default=False
    ),
    message_file: Path | None = typer.Option(
        None, "--message-file", "-F", help="Read the release body from a file", show_default=False
    ),
) -> None:
    """Release the current version, then bump the patch version."""
    ctx = build_context()
    body = read_message(message, message_file, ctx)
    result = release_and_bump(
        client=_client(ctx, token),
        repo=LocalRepository(ctx.project_root),
        record=resolve_record(ctx),
        console=ctx.console,
        body=body,
        draft=draft,
    )
    exit_on_error(result, ctx, github_exit_code)


@github_app.command("artifacts")
def artifacts_cmd(
    files: list[str] = typer.Argument(
        ..., help="Files to upload, as `path` or `name=path` (name defaults to the file name)"
    ),
    token: str = typer.Option(..., "--api-token", envvar="GITHUB_TOKEN", help=_TOKEN_HELP),
) -> None:
    """Add artifacts to the release of the current version."""
    ctx = build_context()
    result = upload_artifacts(
        client=_client(ctx, token),
        record=resolve_record(ctx),
        specs=files,
        project_root=ctx.project_root,
        console=ctx.console,
    )
    exit_on_error(result, ctx, github_exit_code)

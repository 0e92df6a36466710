"""Local version commands: show, update, list."""

from __future__ import annotations

from enum import StrEnum
from pathlib import Path

import typer

from relman.cli.commands._helpers import exit_on_error, read_message, resolve_record
from relman.cli.context import build_context
from relman.core.result import Err
from relman.git.repository import LocalRepository
from relman.output.errors import local_exit_code
from relman.services.project import (
    format_versions_json,
    format_versions_plain,
    list_versions,
    update_version,
)
from relman.versions.errors import BumpModeConflict
from relman.versions.semver import BumpKind

local_app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Local project operations.",
)


class OutputFormat(StrEnum):
    plain = "plain"
    json = "json"


@local_app.command("show-version")
def show_version_cmd() -> None:
    """Show the current version."""
    ctx = build_context()
    record = resolve_record(ctx)
    version = exit_on_error(record.current_version(), ctx, local_exit_code)
    typer.echo(str(version))


@local_app.command("update-version")
def update_version_cmd(
    at_version: str | None = typer.Option(
        None, "--at-version", help="Specify the version to create.", show_default=False
    ),
    bump_major: bool = typer.Option(False, "--bump-major", help="Bump the major component"),
    bump_minor: bool = typer.Option(False, "--bump-minor", help="Bump the minor component"),
    bump_patch: bool = typer.Option(False, "--bump-patch", help="Bump the patch component"),
    snapshot: bool = typer.Option(False, "--snapshot", help="Update to a snapshot version"),
    commit: bool = typer.Option(False, "--commit", help="Commit the version change"),
    tag: bool = typer.Option(False, "--tag", help="Create an annotated v<version> tag"),
    message: str | None = typer.Option(
        None, "--message", "-m", help="Commit/tag message", show_default=False
    ),
    message_file: Path | None = typer.Option(
        None, "--message-file", "-F", help="Read the message from a file", show_default=False
    ),
) -> None:
    """Bump the version for the project."""
    ctx = build_context()
    text = read_message(message, message_file, ctx)
    record = resolve_record(ctx)

    flags: list[tuple[BumpKind, bool]] = [
        ("major", bump_major),
        ("minor", bump_minor),
        ("patch", bump_patch),
    ]
    bumps = [kind for kind, flag in flags if flag]
    if len(bumps) > 1:
        conflict = BumpModeConflict(chosen=tuple(f"bump-{k}" for k in bumps))
        exit_on_error(Err(conflict), ctx, local_exit_code)

    result = update_version(
        record=record,
        console=ctx.console,
        at_version=at_version,
        bump=bumps[0] if bumps else None,
        snapshot=snapshot,
        repo=LocalRepository(record.project_root) if commit or tag else None,
        commit=commit,
        tag=tag,
        message=text,
    )
    exit_on_error(result, ctx, local_exit_code)


@local_app.command("list-versions")
def list_versions_cmd(
    output_format: OutputFormat = typer.Option(
        OutputFormat.plain, "--output-format", help="Output format"
    ),
) -> None:
    """List released versions (version tags)."""
    ctx = build_context()
    tags = exit_on_error(list_versions(LocalRepository(ctx.project_root)), ctx, local_exit_code)

    if output_format == OutputFormat.json:
        typer.echo(format_versions_json(tags))
        return
    for line in format_versions_plain(tags):
        typer.echo(line)

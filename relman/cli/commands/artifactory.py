"""Artifactory commands: publish, distribute."""

from __future__ import annotations

from pathlib import Path

import typer

from relman.cli.commands._helpers import exit_on_error, resolve_record
from relman.cli.context import CLIContext, build_context
from relman.core.config import ArtifactoryConfig
from relman.output.errors import artifactory_exit_code, local_exit_code
from relman.services.artifactory.api import ArtifactoryClient, ArtifactorySettings
from relman.services.artifactory.flows import distribute, publish

artifactory_app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Publish builds to Artifactory.",
)

_TOKEN_HELP = "Artifactory API token (defaults to $ARTIFACTORY_API_TOKEN)"


def _settings(ctx: CLIContext) -> ArtifactoryConfig:
    return exit_on_error(ctx.config.require_artifactory(), ctx, artifactory_exit_code)


def _client(ctx: CLIContext, config: ArtifactoryConfig, token: str) -> ArtifactoryClient:
    return ArtifactoryClient(
        ArtifactorySettings(server=config.server, repo=config.repo, token=token),
        http=ctx.http,
        console=ctx.console,
    )


@artifactory_app.command("publish")
def publish_cmd(
    repo: Path = typer.Argument(
        ...,
        help="Directory to publish, usually the one containing 'com' or 'org'",
    ),
    build_number: int = typer.Option(..., "--build-number", help="Build number in Artifactory"),
    version_override: str | None = typer.Option(
        None,
        "--version-override",
        help="Publish this version instead of the project's",
        show_default=False,
    ),
    debug: bool = typer.Option(
        False, "--debug", help="Also write upload.tar and build-info.json to the current directory"
    ),
    token: str = typer.Option(
        ..., "--api-token", envvar="ARTIFACTORY_API_TOKEN", help=_TOKEN_HELP
    ),
) -> None:
    """Upload a local repository directory into Artifactory and register the build."""
    ctx = build_context()
    config = _settings(ctx)

    version = version_override
    if version is None:
        record = resolve_record(ctx)
        version = str(exit_on_error(record.current_version(), ctx, local_exit_code))

    result = publish(
        client=_client(ctx, config, token),
        config=config,
        repo_path=ctx.project_root / repo,
        version=version,
        build_name=ctx.config.github.repo,
        build_number=str(build_number),
        console=ctx.console,
        debug_dir=ctx.cwd if debug else None,
    )
    exit_on_error(result, ctx, artifactory_exit_code)


@artifactory_app.command("distribute")
def distribute_cmd(
    build_number: int = typer.Option(..., "--build-number", help="Build number in Artifactory"),
    no_publish: bool = typer.Option(
        False, "--no-publish", help="Distribute without publishing the version"
    ),
    token: str = typer.Option(
        ..., "--api-token", envvar="ARTIFACTORY_API_TOKEN", help=_TOKEN_HELP
    ),
) -> None:
    """Distribute a registered build to the configured remote repository."""
    ctx = build_context()
    config = _settings(ctx)
    result = distribute(
        client=_client(ctx, config, token),
        config=config,
        build_name=ctx.config.github.repo,
        build_number=str(build_number),
        console=ctx.console,
        publish=not no_publish,
        config_path=ctx.config.path,
    )
    exit_on_error(result, ctx, artifactory_exit_code)

"""GitHub release workflows: release, remote bump, artifact upload."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from relman.core.result import Err, Ok, Result
from relman.git.repository import LocalRepository
from relman.output.console import ConsoleProtocol
from relman.services.github.api import GitHubClient
from relman.services.github.commit import commit_remotely
from relman.services.github.errors import GitHubFlowError
from relman.versions.record import VersionRecord
from relman.versions.semver import Version


def default_release_body(version: Version) -> str:
    return f"Tagging version {version}."


def bump_commit_message(version: Version) -> str:
    return f"Bumping version to {version}."


def parse_artifact_specs(specs: Sequence[str], project_root: Path) -> dict[str, Path]:
    """Turn ``path`` / ``name=path`` arguments into ``{asset name: path}``.

    Paths are relative to ``project_root``; the name defaults to the file name.
    """
    files: dict[str, Path] = {}
    for spec in specs:
        name, sep, value = spec.partition("=")
        if not sep:
            value = spec
            name = Path(spec).name
        files[name] = project_root / value
    return files


def release(
    *,
    client: GitHubClient,
    repo: LocalRepository,
    record: VersionRecord,
    console: ConsoleProtocol,
    body: str | None = None,
    draft: bool = False,
) -> Result[Version, GitHubFlowError]:
    """Create release ``v<current version>`` at the local head commit."""
    version = record.current_version()
    if isinstance(version, Err):
        return version

    head = repo.head_commit()
    if isinstance(head, Err):
        return head

    v = version.value
    created = client.create_release(
        head.value, v, body if body is not None else default_release_body(v), draft=draft
    )
    if isinstance(created, Err):
        return created

    kind = "draft release" if draft else "release"
    console.success(f"created {kind} {v.to_tag()} at {head.value[:12]}")
    if created.value.html_url:
        console.info(created.value.html_url)
    return Ok(v)


def bump(
    *,
    client: GitHubClient,
    repo: LocalRepository,
    record: VersionRecord,
    console: ConsoleProtocol,
) -> Result[Version, GitHubFlowError]:
    """Patch-bump the version record on the branch owning the local head.

    The new file content is rendered locally and committed through the
    remote API; the working copy is left untouched.
    """
    current = record.current_version()
    if isinstance(current, Err):
        return current

    head = repo.head_commit()
    if isinstance(head, Err):
        return head

    branch = repo.branch_owning(head.value)
    if isinstance(branch, Err):
        return branch

    toplevel = repo.toplevel()
    if isinstance(toplevel, Err):
        return toplevel

    next_version = current.value.bump("patch")
    console.info(f"next version: {next_version}")

    files = record.render_version(next_version, relative_to=toplevel.value)
    if isinstance(files, Err):
        return files

    updated = commit_remotely(
        client,
        branch=branch.value,
        head_commit=head.value,
        files=files.value,
        message=bump_commit_message(next_version),
    )
    if isinstance(updated, Err):
        return updated

    console.success(
        f"bumped {branch.value} to {next_version} ({updated.value.commit[:12]})"
    )
    return Ok(next_version)


def release_and_bump(
    *,
    client: GitHubClient,
    repo: LocalRepository,
    record: VersionRecord,
    console: ConsoleProtocol,
    body: str | None = None,
    draft: bool = False,
) -> Result[Version, GitHubFlowError]:
    """Release the current version, then bump only if the release succeeded."""
    released = release(
        client=client, repo=repo, record=record, console=console, body=body, draft=draft
    )
    if isinstance(released, Err):
        return released
    return bump(client=client, repo=repo, record=record, console=console)


def upload_artifacts(
    *,
    client: GitHubClient,
    record: VersionRecord,
    specs: Sequence[str],
    project_root: Path,
    console: ConsoleProtocol,
) -> Result[tuple[str, ...], GitHubFlowError]:
    """Attach files to release ``v<current version>``."""
    version = record.current_version()
    if isinstance(version, Err):
        return version

    files = parse_artifact_specs(specs, project_root)
    for name, path in files.items():
        console.debug(f"file to upload: {name} -> {path}")

    return client.add_artifacts_to_release(version.value.to_tag(), files)

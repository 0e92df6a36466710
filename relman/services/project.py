"""Local version workflows: show, update (optionally commit and tag), list."""

from __future__ import annotations

import json
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from relman.core.result import Err, Ok, Result
from relman.git.repository import GitError, LocalRepository, TagInfo
from relman.output.console import ConsoleProtocol
from relman.versions.errors import VersionError
from relman.versions.record import VersionRecord
from relman.versions.semver import BumpKind, Version, parse_version, plan_next_version

_PLAIN_MESSAGE_WIDTH = 25


@dataclass(frozen=True, slots=True)
class VersionTag:
    name: str
    version: Version
    commit: str
    message: str

    def to_json_dict(self) -> dict[str, str]:
        return {
            "name": self.name,
            "version": str(self.version),
            "id": self.commit,
            "message": self.message,
        }


def default_commit_message(version: Version) -> str:
    return f"Incrementing version to {version}."


def update_version(
    *,
    record: VersionRecord,
    console: ConsoleProtocol,
    at_version: str | None = None,
    bump: BumpKind | None = None,
    snapshot: bool = False,
    repo: LocalRepository | None = None,
    commit: bool = False,
    tag: bool = False,
    message: str | None = None,
    clock: Callable[[], float] = time.time,
) -> Result[Version, VersionError | GitError]:
    """Advance the version record by exactly one bump mode.

    With ``commit`` the record's files are committed to ``repo``; with ``tag``
    an annotated ``v<version>`` tag is created at the resulting head. Both use
    ``message`` or the default "Incrementing version to V.".
    """
    if (commit or tag) and repo is None:
        raise ValueError("commit/tag requested without a repository")

    current = record.current_version()
    if isinstance(current, Err):
        return current

    planned = plan_next_version(
        current.value, at_version=at_version, bump=bump, snapshot=snapshot, clock=clock
    )
    if isinstance(planned, Err):
        return planned

    next_version = planned.value
    console.info(f"next version will be {next_version}")

    written = record.update_version(next_version)
    if isinstance(written, Err):
        return written

    text = message if message is not None else default_commit_message(next_version)
    if commit and repo is not None:
        committed = repo.commit_files(record.files_involved(), text)
        if isinstance(committed, Err):
            return committed
        console.success(f"committed {next_version} as {committed.value[:12]}")

    if tag and repo is not None:
        tagged = repo.tag(next_version, text)
        if isinstance(tagged, Err):
            return tagged
        console.success(f"tagged {tagged.value}")

    return Ok(next_version)


def list_versions(repo: LocalRepository) -> Result[list[VersionTag], GitError]:
    """Tags that name a version (``v1.2.3`` or ``1.2.3``), in git's order."""
    tags = repo.list_tags()
    if isinstance(tags, Err):
        return tags
    return Ok([vt for vt in (_version_tag(t) for t in tags.value) if vt is not None])


def _version_tag(tag: TagInfo) -> VersionTag | None:
    raw = tag.name[1:] if tag.name.startswith("v") else tag.name
    parsed = parse_version(raw)
    if isinstance(parsed, Err):
        return None
    return VersionTag(name=tag.name, version=parsed.value, commit=tag.commit, message=tag.message)


def format_versions_plain(tags: Sequence[VersionTag]) -> list[str]:
    lines: list[str] = []
    for t in tags:
        header = t.message[:_PLAIN_MESSAGE_WIDTH].strip()
        lines.append(f"{t.name} - {t.commit} - {header}" if header else f"{t.name} - {t.commit}")
    return lines


def format_versions_json(tags: Sequence[VersionTag]) -> str:
    return json.dumps({"results": [t.to_json_dict() for t in tags]})

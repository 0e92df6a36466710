"""Find publishable files in a Maven-style local repository.

Layout walked, for group ``io.example`` and version ``1.2.3``::

    <repo>/io/example/<module>/1.2.3/<files>

Modules and files are taken in filesystem enumeration order; nothing is
sorted.
"""

from __future__ import annotations

import hashlib
import os
from pathlib import Path

from relman.core.result import Err, Ok, Result
from relman.output.console import ConsoleProtocol
from relman.services.artifactory.errors import (
    ArtifactoryError,
    ArtifactUnreadable,
    GroupPathMissing,
)
from relman.services.artifactory.manifest import Artifact, BuildManifest, Module, now_started

IGNORED_FILES = frozenset({"maven-metadata-local.xml", "maven-metadata.xml"})


def digests(data: bytes) -> tuple[str, str]:
    """Return ``(md5, sha1)`` hex digests of ``data``."""
    return hashlib.md5(data).hexdigest(), hashlib.sha1(data).hexdigest()


def _artifact_type(path: Path) -> str:
    return path.suffix[1:] if path.suffix else ""


def _list_dir(path: Path) -> list[os.DirEntry[str]]:
    with os.scandir(path) as it:
        return list(it)


def discover_module(
    module_dir: Path,
    *,
    group: str,
    version: str,
    console: ConsoleProtocol,
) -> Result[Module | None, ArtifactoryError]:
    """Hash the files of one module's version directory.

    Returns Ok(None) when the version directory cannot be listed; the caller
    skips the module.
    """
    name = module_dir.name
    version_dir = module_dir / version
    try:
        entries = _list_dir(version_dir)
    except OSError as e:
        console.warning(f"skipping module {name}: {version_dir} is not accessible ({e.strerror})")
        return Ok(None)

    artifacts: list[Artifact] = []
    for entry in entries:
        path = Path(entry.path)
        if entry.name in IGNORED_FILES:
            console.debug(f"ignoring {path}")
            continue
        if entry.is_dir():
            console.debug(f"ignoring directory {path}")
            continue

        try:
            data = path.read_bytes()
        except OSError as e:
            return Err(ArtifactUnreadable(path=path, reason=e.strerror or str(e)))

        md5, sha1 = digests(data)
        artifacts.append(
            Artifact(
                type=_artifact_type(path),
                sha1=sha1,
                md5=md5,
                name=entry.name,
                source_path=path,
            )
        )
        console.debug(f"adding artifact {entry.name} (sha1 {sha1})")

    return Ok(
        Module(
            id=f"{group}:{name}:{version}",
            publish_prefix="/".join([*group.split("."), name, version]),
            artifacts=tuple(artifacts),
        )
    )


def discover(
    repo_path: Path,
    *,
    group: str,
    version: str,
    build_name: str,
    build_number: str,
    console: ConsoleProtocol,
    started: str | None = None,
) -> Result[BuildManifest, ArtifactoryError]:
    """Build the manifest of everything publishable under ``repo_path``.

    Args:
        repo_path: Local repository root (the directory containing ``com``,
            ``io``, ``org`` ...).
        group: Dot-separated group coordinate.
        version: Version directory to publish in every module.
        build_name: Build name recorded in the manifest.
        build_number: Build number recorded in the manifest.
        started: Build start timestamp (defaults to now).
    """
    group_dir = repo_path.joinpath(*group.split("."))
    console.info(f"looking in {group_dir} for files to publish")
    try:
        entries = _list_dir(group_dir)
    except OSError:
        return Err(GroupPathMissing(path=group_dir))

    modules: list[Module] = []
    for entry in entries:
        if not entry.is_dir():
            console.debug(f"ignoring {entry.path}: not a module directory")
            continue

        module = discover_module(Path(entry.path), group=group, version=version, console=console)
        if isinstance(module, Err):
            return module
        if module.value is not None:
            modules.append(module.value)

    return Ok(
        BuildManifest(
            name=build_name,
            number=build_number,
            started=started if started is not None else now_started(),
            modules=tuple(modules),
        )
    )

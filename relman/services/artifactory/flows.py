"""Artifactory workflows: publish a build, distribute a registered build."""

from __future__ import annotations

from pathlib import Path

from relman.core.config import ArtifactoryConfig, DistributionRepoMissing
from relman.core.result import Err, Ok, Result
from relman.output.console import ConsoleProtocol
from relman.platform.files import atomic_write_text
from relman.services.artifactory.api import ArtifactoryClient
from relman.services.artifactory.archive import build_archive
from relman.services.artifactory.discovery import discover
from relman.services.artifactory.errors import ArtifactoryFlowError, RepoNotValid
from relman.services.artifactory.manifest import BuildManifest

DEBUG_ARCHIVE_NAME = "upload.tar"
DEBUG_MANIFEST_NAME = "build-info.json"


def publish(
    *,
    client: ArtifactoryClient,
    config: ArtifactoryConfig,
    repo_path: Path,
    version: str,
    build_name: str,
    build_number: str,
    console: ConsoleProtocol,
    debug_dir: Path | None = None,
) -> Result[BuildManifest, ArtifactoryFlowError]:
    """Discover, archive, upload, stamp and register one build.

    Discovery and archiving happen back to back so the hashes in the
    manifest describe the uploaded bytes. Every step after discovery stops
    the publish on failure; objects already uploaded stay in place.

    Args:
        repo_path: Local Maven-style repository to publish from.
        version: Version directory to publish in every module.
        debug_dir: When set, the archive and manifest JSON are also written
            there for inspection.
    """
    if not repo_path.is_dir():
        return Err(RepoNotValid(path=repo_path))

    manifest = discover(
        repo_path,
        group=config.group,
        version=version,
        build_name=build_name,
        build_number=build_number,
        console=console,
    )
    if isinstance(manifest, Err):
        return manifest

    m = manifest.value
    count = sum(len(module.artifacts) for module in m.modules)
    console.info(f"found {count} artifacts in {len(m.modules)} modules")

    archive = build_archive(m)
    if isinstance(archive, Err):
        return archive

    if debug_dir is not None:
        try:
            (debug_dir / DEBUG_ARCHIVE_NAME).write_bytes(archive.value)
            atomic_write_text(debug_dir / DEBUG_MANIFEST_NAME, m.to_json() + "\n")
        except OSError as e:
            console.warning(f"could not write debug files to {debug_dir}: {e}")
        else:
            console.info(f"wrote {DEBUG_ARCHIVE_NAME} and {DEBUG_MANIFEST_NAME} to {debug_dir}")

    uploaded = client.upload_archive(archive.value)
    if isinstance(uploaded, Err):
        return uploaded
    console.success(f"uploaded archive to {uploaded.value}")

    stamped = client.stamp_properties(m)
    if isinstance(stamped, Err):
        return stamped

    registered = client.register_build(m)
    if isinstance(registered, Err):
        return registered

    console.success(f"released build {build_name} #{build_number}")
    return Ok(m)


def distribute(
    *,
    client: ArtifactoryClient,
    config: ArtifactoryConfig,
    build_name: str,
    build_number: str,
    console: ConsoleProtocol,
    publish: bool = True,
    config_path: Path | None = None,
) -> Result[None, ArtifactoryFlowError]:
    """Promote an already-registered build to the configured remote repository."""
    if config.remote_repo is None:
        return Err(DistributionRepoMissing(path=config_path))

    result = client.distribute(
        build_name=build_name,
        build_number=build_number,
        target_repo=config.remote_repo,
        publish=publish,
    )
    if isinstance(result, Err):
        return result

    console.success(f"distributed build {build_name} #{build_number} to {config.remote_repo}")
    return Ok(None)

"""Error presentation utilities.

Centralized error formatting and exit code mapping for consistent UX.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from relman.core.config import ArtifactorySectionMissing, ConfigError, DistributionRepoMissing
from relman.core.errors import ErrorCode
from relman.git.repository import BranchNotFound, GitError
from relman.output.console import Style
from relman.services.artifactory.errors import (
    ArchiveStale,
    ArtifactoryFlowError,
    ArtifactUnreadable,
    GroupPathMissing,
    PropertiesNotSet,
    RepoNotValid,
)
from relman.services.errors import CommunicationError, UnableToCreateRelease, UnableToMakeURI
from relman.services.github.errors import (
    FilesDoNotExist,
    GitHubFlowError,
    ReleaseLookupFailed,
    UnableToCreateCommit,
    UnableToCreateTree,
    UnableToReadCommit,
    UnableToUpdateReference,
    UploadsFailed,
)
from relman.versions.errors import (
    BumpModeConflict,
    InvalidVersion,
    NoProjectFound,
    UnsupportedVersionFile,
    VersionError,
    VersionFileInvalid,
    VersionFileMissing,
)

if TYPE_CHECKING:
    from relman.output.console import ConsoleProtocol

__all__ = [
    "AnyError",
    "artifactory_exit_code",
    "github_exit_code",
    "local_exit_code",
    "print_error",
]

type LocalError = VersionError | GitError | ConfigError
type AnyError = LocalError | GitHubFlowError | ArtifactoryFlowError


def print_error(error: AnyError, console: ConsoleProtocol) -> None:
    """Print any release error to console with appropriate formatting."""
    match error:
        case ConfigError(message=message, path=path):
            console.error(f"config: {message}")
            if path is not None:
                console.print(f"file: {path}", Style.DIM)
        case ArtifactorySectionMissing(path=path):
            console.error("artifactory section of config is missing")
            console.print("hint: add an [artifactory] table with server, repo and group", Style.DIM)
        case DistributionRepoMissing():
            console.error("artifactory section is missing 'remote-repo'")
        case NoProjectFound(searched_from=start):
            console.error(f"could not find a project (Cargo.toml or version.properties) from {start}")
        case UnsupportedVersionFile(path=path):
            console.error(f"unsupported version file: {path}")
            console.print("hint: use Cargo.toml or version.properties", Style.DIM)
        case VersionFileMissing(path=path):
            console.error(f"version file does not exist: {path}")
        case VersionFileInvalid(path=path, reason=reason):
            console.error(f"invalid version file {path}: {reason}")
        case InvalidVersion(text=text):
            console.error(f"not a semantic version: '{text}'")
        case BumpModeConflict(chosen=chosen):
            if chosen:
                console.error(f"choose exactly one bump mode, got: {', '.join(chosen)}")
            else:
                console.error("choose one bump mode")
            console.print(
                "hint: --at-version, --bump-major, --bump-minor, --bump-patch or --snapshot",
                Style.DIM,
            )
        case GitError(command=command, message=message):
            console.error(f"git {command} failed: {message}")
        case BranchNotFound(commit=commit):
            console.error(f"no branch points at {commit}")
        case FilesDoNotExist(names=names):
            console.error(f"file(s) `{', '.join(names)}` do not exist")
        case UnableToReadCommit(sha=sha, status=status):
            console.error(f"unable to read commit {sha} (status {status})")
        case UnableToCreateTree(status=status, message=message):
            console.error(f"unable to create tree (status {status}) {message}".rstrip())
        case UnableToCreateCommit(status=status, message=message):
            console.error(f"unable to create commit (status {status}) {message}".rstrip())
        case UnableToUpdateReference(branch=branch, status=status, message=message):
            console.error(f"unable to update {branch} (status {status}) {message}".rstrip())
        case ReleaseLookupFailed(tag=tag, status=status):
            console.error(f"release {tag} not found (status {status})")
        case UploadsFailed(failed=failed, uploaded=uploaded):
            console.error(f"failed to upload: {', '.join(failed)}")
            if uploaded:
                console.print(f"uploaded: {', '.join(uploaded)}", Style.DIM)
        case UnableToCreateRelease(status=status, message=message):
            console.error(f"remote rejected the request (status {status}) {message}".rstrip())
        case CommunicationError(url=url, message=message):
            console.error(f"communication failed: {message}")
            console.print(f"url: {url}", Style.DIM)
        case UnableToMakeURI(url=url, reason=reason):
            console.error(f"unable to build URL from {url}: {reason}")
        case RepoNotValid(path=path):
            console.error(f"path `{path}` does not exist or is not a directory")
        case GroupPathMissing(path=path):
            console.error(f"group directory not found: {path}")
        case ArtifactUnreadable(path=path, reason=reason):
            console.error(f"unable to read {path}: {reason}")
        case ArchiveStale(path=path):
            console.error(f"{path} changed while publishing")
        case PropertiesNotSet(failures=failures):
            console.error(f"unable to set properties on {len(failures)} module(s)")
            for failure in failures:
                console.print(f"  {failure.publish_prefix} (status {failure.status})", Style.DIM)


def local_exit_code(error: LocalError) -> int:
    """Get exit code for a config, version or git error."""
    match error:
        case ConfigError():
            return int(ErrorCode.CONFIG_ERROR)
        case NoProjectFound():
            return int(ErrorCode.NO_PROJECT_FOUND)
        case VersionFileMissing():
            return int(ErrorCode.FILE_DOES_NOT_EXIST)
        case UnsupportedVersionFile() | VersionFileInvalid():
            return int(ErrorCode.VERSION_FILE_INVALID)
        case InvalidVersion() | BumpModeConflict():
            return int(ErrorCode.INVALID_VERSION)
        case GitError(command="rev-parse HEAD"):
            return int(ErrorCode.UNABLE_TO_GET_HEAD_SHA)
        case GitError():
            return int(ErrorCode.UNKNOWN)
    # Fallback for exhaustiveness
    return int(ErrorCode.UNKNOWN)


def github_exit_code(error: GitHubFlowError) -> int:
    """Get exit code for an error raised by a GitHub command."""
    match error:
        case BranchNotFound():
            return int(ErrorCode.UNABLE_TO_FIND_BRANCH_FOR_SHA)
        case FilesDoNotExist():
            return int(ErrorCode.FILE_DOES_NOT_EXIST)
        case (
            UnableToReadCommit()
            | UnableToCreateTree()
            | UnableToCreateCommit()
            | UnableToUpdateReference()
        ):
            return int(ErrorCode.UNABLE_TO_BUMP_VERSION)
        case UnableToCreateRelease() | ReleaseLookupFailed() | UploadsFailed():
            return int(ErrorCode.GITHUB_ERROR)
        case CommunicationError() | UnableToMakeURI():
            return int(ErrorCode.NETWORK_CALL_FAILED)
        case _:
            return local_exit_code(error)


def artifactory_exit_code(error: ArtifactoryFlowError) -> int:
    """Get exit code for an error raised by an Artifactory command."""
    match error:
        case ArtifactorySectionMissing():
            return int(ErrorCode.ARTIFACTORY_SECTION_MISSING)
        case DistributionRepoMissing():
            return int(ErrorCode.DISTRIBUTION_REPO_MISSING)
        case RepoNotValid() | GroupPathMissing() | ArchiveStale():
            return int(ErrorCode.REPO_NOT_VALID)
        case ArtifactUnreadable():
            return int(ErrorCode.FILE_DOES_NOT_EXIST)
        case (
            PropertiesNotSet() | UnableToCreateRelease() | CommunicationError() | UnableToMakeURI()
        ):
            return int(ErrorCode.ARTIFACTORY_COMMUNICATION_FAILED)
        case _:
            return local_exit_code(error)

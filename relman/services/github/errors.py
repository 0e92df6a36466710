from __future__ import annotations

from dataclasses import dataclass

from relman.git.repository import BranchNotFound, GitError
from relman.services.errors import CommunicationError, UnableToCreateRelease, UnableToMakeURI
from relman.versions.errors import VersionError

__all__ = [
    "CommunicationError",
    "FilesDoNotExist",
    "GitHubError",
    "GitHubFlowError",
    "ReleaseLookupFailed",
    "UnableToCreateCommit",
    "UnableToCreateRelease",
    "UnableToCreateTree",
    "UnableToMakeURI",
    "UnableToReadCommit",
    "UnableToUpdateReference",
    "UploadsFailed",
]


@dataclass(frozen=True, slots=True)
class FilesDoNotExist:
    names: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class UnableToReadCommit:
    sha: str
    status: int


@dataclass(frozen=True, slots=True)
class UnableToCreateTree:
    status: int
    message: str = ""


@dataclass(frozen=True, slots=True)
class UnableToCreateCommit:
    status: int
    message: str = ""


@dataclass(frozen=True, slots=True)
class UnableToUpdateReference:
    branch: str
    status: int
    message: str = ""


@dataclass(frozen=True, slots=True)
class ReleaseLookupFailed:
    tag: str
    status: int


@dataclass(frozen=True, slots=True)
class UploadsFailed:
    failed: tuple[str, ...]
    uploaded: tuple[str, ...]


GitHubError = (
    FilesDoNotExist
    | UnableToCreateRelease
    | UnableToReadCommit
    | UnableToCreateTree
    | UnableToCreateCommit
    | UnableToUpdateReference
    | ReleaseLookupFailed
    | UploadsFailed
    | CommunicationError
    | UnableToMakeURI
)

# Everything a GitHub workflow can fail with, local steps included.
GitHubFlowError = GitHubError | VersionError | GitError | BranchNotFound

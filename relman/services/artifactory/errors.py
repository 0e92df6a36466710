from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from relman.core.config import ArtifactorySectionMissing, DistributionRepoMissing
from relman.services.errors import CommunicationError, UnableToCreateRelease, UnableToMakeURI
from relman.versions.errors import VersionError

__all__ = [
    "ArchiveStale",
    "ArtifactUnreadable",
    "ArtifactoryError",
    "ArtifactoryFlowError",
    "CommunicationError",
    "GroupPathMissing",
    "PropertiesNotSet",
    "PropertyFailure",
    "RepoNotValid",
    "UnableToCreateRelease",
    "UnableToMakeURI",
]


@dataclass(frozen=True, slots=True)
class RepoNotValid:
    """The directory to publish from does not exist or is not a directory."""

    path: Path


@dataclass(frozen=True, slots=True)
class GroupPathMissing:
    path: Path


@dataclass(frozen=True, slots=True)
class ArtifactUnreadable:
    path: Path
    reason: str


@dataclass(frozen=True, slots=True)
class ArchiveStale:
    """A file changed between discovery and archiving."""

    path: Path


@dataclass(frozen=True, slots=True)
class PropertyFailure:
    publish_prefix: str
    status: int


@dataclass(frozen=True, slots=True)
class PropertiesNotSet:
    failures: tuple[PropertyFailure, ...]


ArtifactoryError = (
    RepoNotValid
    | GroupPathMissing
    | ArtifactUnreadable
    | ArchiveStale
    | PropertiesNotSet
    | UnableToCreateRelease
    | CommunicationError
    | UnableToMakeURI
)

ArtifactoryFlowError = (
    ArtifactoryError | ArtifactorySectionMissing | DistributionRepoMissing | VersionError
)

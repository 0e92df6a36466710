"""Artifactory publishing."""

from relman.services.artifactory.api import ArtifactoryClient, ArtifactorySettings
from relman.services.artifactory.archive import build_archive
from relman.services.artifactory.discovery import IGNORED_FILES, digests, discover
from relman.services.artifactory.errors import ArtifactoryError, ArtifactoryFlowError
from relman.services.artifactory.flows import distribute, publish
from relman.services.artifactory.manifest import Artifact, BuildManifest, Module

__all__ = [
    "IGNORED_FILES",
    "Artifact",
    "ArtifactoryClient",
    "ArtifactoryError",
    "ArtifactoryFlowError",
    "ArtifactorySettings",
    "BuildManifest",
    "Module",
    "build_archive",
    "digests",
    "discover",
    "distribute",
    "publish",
]

"""GitHub releases and remote commits."""

from relman.services.github.api import Committer, GitHubClient, GitHubSettings, Release
from relman.services.github.commit import (
    AUTOMATION_COMMITTER,
    CommitCreated,
    HaveHead,
    RefUpdated,
    TreeCreated,
    commit_remotely,
)
from relman.services.github.errors import GitHubError, GitHubFlowError
from relman.services.github.flows import (
    bump,
    parse_artifact_specs,
    release,
    release_and_bump,
    upload_artifacts,
)

__all__ = [
    "AUTOMATION_COMMITTER",
    "CommitCreated",
    "Committer",
    "GitHubClient",
    "GitHubError",
    "GitHubFlowError",
    "GitHubSettings",
    "HaveHead",
    "RefUpdated",
    "Release",
    "TreeCreated",
    "bump",
    "commit_remotely",
    "parse_artifact_specs",
    "release",
    "release_and_bump",
    "upload_artifacts",
]

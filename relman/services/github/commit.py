"""Create a commit on a remote branch without a local working copy.

The commit is assembled from three dependent GitHub git-data calls:

    HaveHead --create_tree--> TreeCreated --create_commit--> CommitCreated
             --update_ref--> RefUpdated

Each transition takes the previous state and returns the next one, or the
error of that step. A failed step ends the sequence. Tree and commit objects
created before the failure are left on the remote: they are unreachable and
content-addressed, so nothing is rolled back.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from relman.core.result import Err, Ok, Result
from relman.services.github.api import Committer, GitHubClient
from relman.services.github.errors import GitHubError

AUTOMATION_COMMITTER = Committer(
    name="release-manager",
    email="release-manager@users.noreply.github.com",
)


@dataclass(frozen=True, slots=True)
class HaveHead:
    branch: str
    head_commit: str
    base_tree: str


@dataclass(frozen=True, slots=True)
class TreeCreated:
    head: HaveHead
    tree: str


@dataclass(frozen=True, slots=True)
class CommitCreated:
    tree: TreeCreated
    commit: str


@dataclass(frozen=True, slots=True)
class RefUpdated:
    created: CommitCreated

    @property
    def branch(self) -> str:
        return self.created.tree.head.branch

    @property
    def commit(self) -> str:
        return self.created.commit


def resolve_head(
    client: GitHubClient, *, branch: str, head_commit: str
) -> Result[HaveHead, GitHubError]:
    base_tree = client.commit_tree(head_commit)
    if isinstance(base_tree, Err):
        return base_tree
    return Ok(HaveHead(branch=branch, head_commit=head_commit, base_tree=base_tree.value))


def create_tree(
    client: GitHubClient, state: HaveHead, files: Mapping[str, str]
) -> Result[TreeCreated, GitHubError]:
    tree = client.create_tree(state.base_tree, files)
    if isinstance(tree, Err):
        return tree
    return Ok(TreeCreated(head=state, tree=tree.value))


def create_commit(
    client: GitHubClient,
    state: TreeCreated,
    message: str,
    committer: Committer = AUTOMATION_COMMITTER,
) -> Result[CommitCreated, GitHubError]:
    commit = client.create_commit(message, state.tree, state.head.head_commit, committer)
    if isinstance(commit, Err):
        return commit
    return Ok(CommitCreated(tree=state, commit=commit.value))


def update_ref(client: GitHubClient, state: CommitCreated) -> Result[RefUpdated, GitHubError]:
    updated = client.update_ref(state.tree.head.branch, state.commit)
    if isinstance(updated, Err):
        return updated
    return Ok(RefUpdated(created=state))


def commit_remotely(
    client: GitHubClient,
    *,
    branch: str,
    head_commit: str,
    files: Mapping[str, str],
    message: str,
) -> Result[RefUpdated, GitHubError]:
    """Commit ``files`` (repository path -> full content) onto ``branch``.

    ``head_commit`` must be the branch tip the new commit builds on.
    """
    return (
        resolve_head(client, branch=branch, head_commit=head_commit)
        .flat_map(lambda head: create_tree(client, head, files))
        .flat_map(lambda tree: create_commit(client, tree, message))
        .flat_map(lambda commit: update_ref(client, commit))
    )

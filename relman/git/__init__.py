"""Local git operations.

Usage:
    from relman.git import LocalRepository

    repo = LocalRepository(Path.cwd())
    head = repo.head_commit()
    if head.is_ok():
        branch = repo.branch_owning(head.unwrap())
"""

from relman.git.repository import (
    BranchNotFound,
    GitError,
    LocalRepository,
    TagInfo,
    branch_owning,
)

__all__ = [
    "BranchNotFound",
    "GitError",
    "LocalRepository",
    "TagInfo",
    "branch_owning",
]

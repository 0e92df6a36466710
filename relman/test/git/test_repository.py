"""Tests for git/repository.py."""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from relman.core.result import Err, Ok
from relman.git.repository import (
    BranchNotFound,
    GitError,
    LocalRepository,
    TagInfo,
    branch_owning,
)
from relman.versions.semver import Version

# =============================================================================
# branch_owning Tests
# =============================================================================


class TestBranchOwning:
    """Tests for the pure branch lookup."""

    BRANCHES = {"origin/main": "c1", "feature/x": "c2", "origin/HEAD": "c3"}

    def test_strips_remote_prefix(self) -> None:
        assert branch_owning(self.BRANCHES, "c1") == Ok("main")

    def test_keeps_slashed_local_name(self) -> None:
        assert branch_owning(self.BRANCHES, "c2") == Ok("feature/x")

    def test_skips_symbolic_head(self) -> None:
        assert branch_owning(self.BRANCHES, "c3") == Err(BranchNotFound(commit="c3"))

    def test_not_found(self) -> None:
        assert branch_owning(self.BRANCHES, "c9") == Err(BranchNotFound(commit="c9"))

    def test_other_remotes(self) -> None:
        branches = {"upstream/release": "c1"}
        assert branch_owning(branches, "c1", remotes=("upstream",)) == Ok("release")


# =============================================================================
# LocalRepository Tests - Mocked subprocess
# =============================================================================


def make_completed_process(
    stdout: str = "",
    stderr: str = "",
    returncode: int = 0,
) -> subprocess.CompletedProcess[str]:
    """Create a mock CompletedProcess."""
    return subprocess.CompletedProcess(
        args=["git"],
        returncode=returncode,
        stdout=stdout,
        stderr=stderr,
    )


class TestLocalRepository:
    """Tests for LocalRepository with subprocess mocked out."""

    @patch("subprocess.run")
    def test_head_commit(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(stdout="abc123\n")

        result = LocalRepository(tmp_path).head_commit()

        assert result == Ok("abc123")
        args = mock_run.call_args[0][0]
        assert args == ["git", "-C", str(tmp_path), "rev-parse", "HEAD"]
        assert mock_run.call_args.kwargs["env"]["GIT_TERMINAL_PROMPT"] == "0"

    @patch("subprocess.run")
    def test_head_commit_outside_repo(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(
            stderr="fatal: not a git repository\n", returncode=128
        )

        result = LocalRepository(tmp_path).head_commit()

        assert result == Err(
            GitError(
                command="rev-parse HEAD",
                message="fatal: not a git repository",
                returncode=128,
            )
        )

    @patch("subprocess.run")
    def test_toplevel_failure_is_not_a_head_lookup(
        self, mock_run: MagicMock, tmp_path: Path
    ) -> None:
        mock_run.return_value = make_completed_process(
            stderr="fatal: not a git repository\n", returncode=128
        )

        result = LocalRepository(tmp_path).toplevel()

        assert isinstance(result, Err)
        assert result.error.command == "rev-parse --show-toplevel"

    @patch("subprocess.run")
    def test_list_branches(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(
            stdout=(
                "refs/heads/main\x1fc1\n"
                "refs/remotes/origin/main\x1fc1\n"
                "refs/remotes/origin/feature/x\x1fc2\n"
            )
        )

        result = LocalRepository(tmp_path).list_branches()

        assert result == Ok({"main": "c1", "origin/main": "c1", "origin/feature/x": "c2"})

    @patch("subprocess.run")
    def test_branch_owning_uses_remotes(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.side_effect = [
            make_completed_process(stdout="refs/remotes/upstream/develop\x1fc7\n"),
            make_completed_process(stdout="upstream\n"),
        ]

        result = LocalRepository(tmp_path).branch_owning("c7")

        assert result == Ok("develop")

    @patch("subprocess.run")
    def test_commit_files(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.side_effect = [
            make_completed_process(),
            make_completed_process(stdout="[main abc] Incrementing version\n"),
            make_completed_process(stdout="def456\n"),
        ]
        record = tmp_path / "Cargo.toml"

        result = LocalRepository(tmp_path).commit_files([record], "Incrementing version to 1.0.1.")

        assert result == Ok("def456")
        commit_args = mock_run.call_args_list[1][0][0]
        assert commit_args[3:] == [
            "commit",
            "-m",
            "Incrementing version to 1.0.1.",
            "--",
            str(record),
        ]

    @patch("subprocess.run")
    def test_commit_files_stops_on_add_failure(
        self, mock_run: MagicMock, tmp_path: Path
    ) -> None:
        mock_run.return_value = make_completed_process(stderr="pathspec error", returncode=128)

        result = LocalRepository(tmp_path).commit_files([tmp_path / "x"], "msg")

        assert isinstance(result, Err)
        assert result.error.command == "add"
        assert mock_run.call_count == 1

    @patch("subprocess.run")
    def test_tag(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process()

        result = LocalRepository(tmp_path).tag(Version(1, 2, 3), "Release 1.2.3")

        assert result == Ok("v1.2.3")
        args = mock_run.call_args[0][0]
        assert args[3:] == ["tag", "-a", "v1.2.3", "-m", "Release 1.2.3"]

    @patch("subprocess.run")
    def test_list_tags(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(
            stdout=(
                "v1.0.0\x1fc1\x1ft1\x1fFirst release\n"
                "light\x1f\x1fc2\x1fcommit subject\n"
                "garbage line\n"
            )
        )

        result = LocalRepository(tmp_path).list_tags()

        assert result == Ok(
            [
                TagInfo(name="v1.0.0", commit="c1", message="First release"),
                TagInfo(name="light", commit="c2", message="commit subject"),
            ]
        )


# =============================================================================
# LocalRepository Tests - Real git
# =============================================================================


def _git(cwd: Path, *args: str) -> str:
    return subprocess.run(
        ["git", *args], cwd=cwd, check=True, capture_output=True, text=True
    ).stdout.strip()


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    _git(tmp_path, "init", "-q", "-b", "main")
    _git(tmp_path, "config", "user.name", "Release Tests")
    _git(tmp_path, "config", "user.email", "release-tests@example.com")
    _git(tmp_path, "config", "commit.gpgsign", "false")
    _git(tmp_path, "config", "tag.gpgsign", "false")
    (tmp_path / "version.properties").write_text("version=1.0.0\n")
    _git(tmp_path, "add", "version.properties")
    _git(tmp_path, "commit", "-q", "-m", "initial")
    return tmp_path


@pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")
class TestLocalRepositoryWithGit:
    """End-to-end checks against a throwaway repository."""

    def test_commit_tag_and_list(self, git_repo: Path) -> None:
        repo = LocalRepository(git_repo)
        record = git_repo / "version.properties"
        record.write_text("version=1.0.1\n")

        head = repo.commit_files([record], "Incrementing version to 1.0.1.")
        assert isinstance(head, Ok)
        assert repo.tag(Version(1, 0, 1), "Incrementing version to 1.0.1.") == Ok("v1.0.1")

        tags = repo.list_tags()
        assert tags == Ok(
            [TagInfo(name="v1.0.1", commit=head.value, message="Incrementing version to 1.0.1.")]
        )

    def test_branch_owning_head(self, git_repo: Path) -> None:
        repo = LocalRepository(git_repo)
        head = repo.head_commit()
        assert isinstance(head, Ok)
        assert repo.branch_owning(head.value) == Ok("main")

    def test_toplevel_from_subdirectory(self, git_repo: Path) -> None:
        sub = git_repo / "crates"
        sub.mkdir()
        assert LocalRepository(sub).toplevel() == Ok(git_repo.resolve())

"""Local git repository adapter.

Thin subprocess wrapper exposing the handful of local operations the release
workflows need: the head commit, the branch owning a commit, committing a set
of files, and annotated version tags. All operations return Result types.

Usage:
    repo = LocalRepository(Path("/path/to/repo"))

    match repo.head_commit():
        case Ok(sha):
            print(f"HEAD is {sha}")
        case Err(e):
            print(f"Error: {e.message}")
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, replace
from pathlib import Path

from relman.core.result import Err, Ok, Result
from relman.platform.process import ProcessError, overlay_env
from relman.platform.process import run as run_process
from relman.versions.semver import Version

_GIT_TIMEOUT_SECONDS = 30.0

_HEADS_PREFIX = "refs/heads/"
_REMOTES_PREFIX = "refs/remotes/"
_FIELD_SEP = "\x1f"

# Never block on a credential prompt; keep messages in English for error output.
_GIT_ENV = {"GIT_TERMINAL_PROMPT": "0", "LC_ALL": "C"}

__all__ = [
    "BranchNotFound",
    "GitError",
    "LocalRepository",
    "TagInfo",
    "branch_owning",
]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git command that failed
        message: Error message
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1


@dataclass(frozen=True, slots=True)
class BranchNotFound:
    """No branch tip equals the commit."""

    commit: str


@dataclass(frozen=True, slots=True)
class TagInfo:
    name: str
    commit: str
    message: str


def branch_owning(
    branches: Mapping[str, str],
    commit: str,
    remotes: Iterable[str] = ("origin",),
) -> Result[str, BranchNotFound]:
    """Return the name of the first branch whose tip is ``commit``.

    ``branches`` maps short ref names (``main``, ``origin/main``) to tip ids.
    A leading ``<remote>/`` is stripped for known remotes; other names are
    returned unchanged, so ``feature/x`` stays ``feature/x``.
    """
    prefixes = tuple(f"{r}/" for r in remotes)
    for name, tip in branches.items():
        if tip != commit or name.endswith("/HEAD"):
            continue
        for prefix in prefixes:
            if name.startswith(prefix):
                return Ok(name[len(prefix) :])
        return Ok(name)
    return Err(BranchNotFound(commit=commit))


class LocalRepository:
    """Git repository on the local filesystem.

    Attributes:
        path: Path to the repository (any directory inside the work tree)
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def toplevel(self) -> Result[Path, GitError]:
        """Root of the work tree containing ``path``."""
        return (
            self._git("rev-parse", "--show-toplevel")
            .map(lambda out: Path(out.strip()))
            .map_err(lambda e: replace(e, command="rev-parse --show-toplevel"))
        )

    def head_commit(self) -> Result[str, GitError]:
        return (
            self._git("rev-parse", "HEAD")
            .map(str.strip)
            .map_err(lambda e: replace(e, command="rev-parse HEAD"))
        )

    def remotes(self) -> Result[tuple[str, ...], GitError]:
        return self._git("remote").map(lambda out: tuple(out.split()))

    def list_branches(self) -> Result[dict[str, str], GitError]:
        """Local and remote-tracking branches, short name -> tip commit."""
        result = self._git(
            "for-each-ref",
            f"--format=%(refname){_FIELD_SEP}%(objectname)",
            "refs/heads",
            "refs/remotes",
        )
        if isinstance(result, Err):
            return result

        branches: dict[str, str] = {}
        for line in result.value.splitlines():
            if _FIELD_SEP not in line:
                continue
            ref, sha = line.split(_FIELD_SEP, 1)
            if ref.startswith(_HEADS_PREFIX):
                branches[ref[len(_HEADS_PREFIX) :]] = sha
            elif ref.startswith(_REMOTES_PREFIX):
                branches[ref[len(_REMOTES_PREFIX) :]] = sha
        return Ok(branches)

    def branch_owning(self, commit: str) -> Result[str, GitError | BranchNotFound]:
        branches = self.list_branches()
        if isinstance(branches, Err):
            return branches

        remotes = self.remotes()
        if isinstance(remotes, Err):
            return remotes

        return branch_owning(branches.value, commit, remotes.value or ("origin",))

    def commit_files(self, paths: Sequence[Path], message: str) -> Result[str, GitError]:
        """Commit exactly ``paths`` and return the new head commit."""
        names = [str(p) for p in paths]

        added = self._git("add", "--", *names)
        if isinstance(added, Err):
            return added

        committed = self._git("commit", "-m", message, "--", *names)
        if isinstance(committed, Err):
            return committed

        return self.head_commit()

    def tag(self, version: Version, message: str) -> Result[str, GitError]:
        """Create an annotated ``v<version>`` tag at HEAD."""
        name = version.to_tag()
        return self._git("tag", "-a", name, "-m", message).map(lambda _: name)

    def list_tags(self) -> Result[list[TagInfo], GitError]:
        """All tags with the commit they point to and their message subject."""
        fmt = _FIELD_SEP.join(
            ["%(refname:short)", "%(*objectname)", "%(objectname)", "%(contents:subject)"]
        )
        result = self._git("for-each-ref", f"--format={fmt}", "refs/tags")
        if isinstance(result, Err):
            return result

        tags: list[TagInfo] = []
        for line in result.value.splitlines():
            fields = line.split(_FIELD_SEP)
            if len(fields) != 4:
                continue
            name, peeled, obj, subject = fields
            # Lightweight tags have no peeled object.
            tags.append(TagInfo(name=name, commit=peeled or obj, message=subject))
        return Ok(tags)

    def _git(self, *args: str) -> Result[str, GitError]:
        result = run_process(
            ["git", "-C", str(self.path), *args],
            cwd=self.path,
            env=overlay_env(_GIT_ENV),
            timeout=_GIT_TIMEOUT_SECONDS,
        )
        match result:
            case Ok(stdout):
                return Ok(stdout)
            case Err(e):
                return Err(_to_git_error(args[0] if args else "", e))


def _to_git_error(command: str, e: ProcessError) -> GitError:
    message = e.stderr.strip() or e.stdout.strip() or f"git {command} failed"
    return GitError(command=command, message=message, returncode=e.returncode)

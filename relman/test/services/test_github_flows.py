from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, cast

from relman.core.result import Err, Ok, Result
from relman.git.repository import BranchNotFound, GitError, LocalRepository
from relman.net.http import HttpResponse, MockHttpClient
from relman.output.console import MockConsole
from relman.services.errors import UnableToCreateRelease
from relman.services.github import flows
from relman.services.github.api import GitHubClient, GitHubSettings
from relman.versions.record import CargoRecord, PropertiesRecord
from relman.versions.semver import Version

API = "https://api.github.com/repos/acme/widget"
UPLOADS = "https://uploads.github.com/repos/acme/widget/releases/7/assets"


@dataclass
class FakeRepo:
    root: Path
    head: str = "head1"
    branches: dict[str, str] | None = None

    def head_commit(self) -> Result[str, GitError]:
        return Ok(self.head)

    def toplevel(self) -> Result[Path, GitError]:
        return Ok(self.root)

    def branch_owning(self, commit: str) -> Result[str, GitError | BranchNotFound]:
        for name, tip in (self.branches or {"main": self.head}).items():
            if tip == commit:
                return Ok(name)
        return Err(BranchNotFound(commit=commit))


def _repo(fake: FakeRepo) -> LocalRepository:
    return cast(LocalRepository, cast(Any, fake))


def _client(http: MockHttpClient, console: MockConsole) -> GitHubClient:
    settings = GitHubSettings(owner="acme", repo="widget", token="t")
    return GitHubClient(settings, http=http, console=console)


def _properties(root: Path, version: str = "1.2.3") -> PropertiesRecord:
    path = root / "version.properties"
    path.write_text(f"version={version}\n")
    return PropertiesRecord(path)


def test_parse_artifact_specs(tmp_path: Path) -> None:
    files = flows.parse_artifact_specs(["build/app.zip", "notes=docs/NOTES.md"], tmp_path)
    assert files == {"app.zip": tmp_path / "build/app.zip", "notes": tmp_path / "docs/NOTES.md"}


def test_release_uses_default_body(tmp_path: Path) -> None:
    http = MockHttpClient()
    http.set_json("POST", f"{API}/releases", {"tag_name": "v1.2.3"}, status=201)
    console = MockConsole()

    result = flows.release(
        client=_client(http, console),
        repo=_repo(FakeRepo(tmp_path)),
        record=_properties(tmp_path),
        console=console,
    )

    assert result == Ok(Version(1, 2, 3))
    body = http.calls[0].json()
    assert isinstance(body, dict)
    assert body["body"] == "Tagging version 1.2.3."
    assert body["target_commitish"] == "head1"
    assert console.find("created release v1.2.3")


def test_bump_commits_rendered_file_and_leaves_working_copy(tmp_path: Path) -> None:
    crate = tmp_path / "crates" / "widget"
    crate.mkdir(parents=True)
    manifest = crate / "Cargo.toml"
    manifest.write_text('[package]\nname = "widget"\nversion = "0.9.9"\n')

    http = MockHttpClient()
    http.set_json("GET", f"{API}/git/commits/head1", {"tree": {"sha": "tree1"}})
    http.set_json("POST", f"{API}/git/trees", {"sha": "tree2"}, status=201)
    http.set_json("POST", f"{API}/git/commits", {"sha": "commit2"}, status=201)
    http.set_json("PATCH", f"{API}/git/refs/heads/develop", {})
    console = MockConsole()

    result = flows.bump(
        client=_client(http, console),
        repo=_repo(FakeRepo(tmp_path, branches={"develop": "head1"})),
        record=CargoRecord(manifest),
        console=console,
    )

    assert result == Ok(Version(0, 9, 10))
    tree = http.calls[1].json()
    assert isinstance(tree, dict)
    assert tree["tree"] == [
        {
            "path": "crates/widget/Cargo.toml",
            "mode": "100644",
            "type": "blob",
            "content": '[package]\nname = "widget"\nversion = "0.9.10"\n',
        }
    ]
    commit = http.calls[2].json()
    assert isinstance(commit, dict)
    assert commit["message"] == "Bumping version to 0.9.10."
    assert manifest.read_text() == '[package]\nname = "widget"\nversion = "0.9.9"\n'


def test_bump_without_owning_branch(tmp_path: Path) -> None:
    http = MockHttpClient()
    console = MockConsole()

    result = flows.bump(
        client=_client(http, console),
        repo=_repo(FakeRepo(tmp_path, branches={"main": "other"})),
        record=_properties(tmp_path),
        console=console,
    )

    assert result == Err(BranchNotFound(commit="head1"))
    assert http.calls == []


def test_release_and_bump_skips_bump_when_release_fails(tmp_path: Path) -> None:
    http = MockHttpClient()
    http.set_response("POST", f"{API}/releases", HttpResponse(422, b'{"message": "exists"}'))
    console = MockConsole()

    result = flows.release_and_bump(
        client=_client(http, console),
        repo=_repo(FakeRepo(tmp_path)),
        record=_properties(tmp_path),
        console=console,
    )

    assert result == Err(UnableToCreateRelease(status=422, message="exists"))
    assert len(http.calls) == 1


def test_upload_artifacts_targets_current_version(tmp_path: Path) -> None:
    (tmp_path / "dist").mkdir()
    (tmp_path / "dist" / "app.zip").write_bytes(b"zip")
    http = MockHttpClient()
    http.set_json(
        "GET",
        f"{API}/releases/tags/v2.0.0",
        {"tag_name": "v2.0.0", "upload_url": UPLOADS + "{?name,label}"},
    )
    http.set_response("POST", f"{UPLOADS}?name=app.zip", HttpResponse(201))
    console = MockConsole()

    result = flows.upload_artifacts(
        client=_client(http, console),
        record=_properties(tmp_path, "2.0.0"),
        specs=["dist/app.zip"],
        project_root=tmp_path,
        console=console,
    )

    assert result == Ok(("app.zip",))

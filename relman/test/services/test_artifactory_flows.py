from __future__ import annotations

import json
from pathlib import Path

from relman.core.config import ArtifactoryConfig, DistributionRepoMissing
from relman.core.result import Err, Ok
from relman.net.http import HttpResponse, MockHttpClient
from relman.output.console import MockConsole
from relman.services.artifactory.api import ArtifactoryClient, ArtifactorySettings
from relman.services.artifactory.errors import RepoNotValid
from relman.services.artifactory.flows import distribute, publish
from relman.services.errors import UnableToCreateRelease

SERVER = "https://artifacts.example.com/artifactory"
CONFIG = ArtifactoryConfig(repo="libs-staging", group="io.example", server=SERVER)
UPLOAD_URL = f"{SERVER}/libs-staging/temp-artifact-1700000000.tar"
PROPS_URL = (
    f"{SERVER}/api/storage/libs-staging/io/example/core/1.0.0"
    "?properties=build.number=7;build.name=widget&recursive=1"
)


def _client(http: MockHttpClient, console: MockConsole) -> ArtifactoryClient:
    settings = ArtifactorySettings(server=SERVER, repo="libs-staging", token="k")
    return ArtifactoryClient(settings, http=http, console=console, clock=lambda: 1700000000)


def _repo(tmp_path: Path) -> Path:
    repo = tmp_path / "repo"
    version_dir = repo / "io" / "example" / "core" / "1.0.0"
    version_dir.mkdir(parents=True)
    (version_dir / "core-1.0.0.jar").write_bytes(b"jar")
    (version_dir / "core-1.0.0.pom").write_bytes(b"<project/>")
    return repo


def _script_success(http: MockHttpClient) -> None:
    http.set_response("PUT", UPLOAD_URL, HttpResponse(201))
    http.set_response("PUT", PROPS_URL, HttpResponse(204))
    http.set_response("PUT", f"{SERVER}/api/build", HttpResponse(204))


def test_publish_runs_every_step(tmp_path: Path) -> None:
    http = MockHttpClient()
    _script_success(http)
    console = MockConsole()

    result = publish(
        client=_client(http, console),
        config=CONFIG,
        repo_path=_repo(tmp_path),
        version="1.0.0",
        build_name="widget",
        build_number="7",
        console=console,
    )

    assert isinstance(result, Ok)
    assert [(c.method, c.url) for c in http.calls] == [
        ("PUT", UPLOAD_URL),
        ("PUT", PROPS_URL),
        ("PUT", f"{SERVER}/api/build"),
    ]
    registered = http.calls[2].json()
    assert isinstance(registered, dict)
    assert registered["name"] == "widget"
    assert registered["number"] == "7"
    assert console.find("found 2 artifacts in 1 modules")
    assert console.find("OK released build widget #7")


def test_publish_writes_debug_files(tmp_path: Path) -> None:
    http = MockHttpClient()
    _script_success(http)
    console = MockConsole()
    debug_dir = tmp_path / "debug"
    debug_dir.mkdir()

    publish(
        client=_client(http, console),
        config=CONFIG,
        repo_path=_repo(tmp_path),
        version="1.0.0",
        build_name="widget",
        build_number="7",
        console=console,
        debug_dir=debug_dir,
    )

    assert (debug_dir / "upload.tar").read_bytes() == http.calls[0].body
    manifest = json.loads((debug_dir / "build-info.json").read_text())
    assert manifest["modules"][0]["id"] == "io.example:core:1.0.0"


def test_publish_stops_when_upload_fails(tmp_path: Path) -> None:
    http = MockHttpClient()
    http.set_response("PUT", UPLOAD_URL, HttpResponse(500, b"disk full"))
    console = MockConsole()

    result = publish(
        client=_client(http, console),
        config=CONFIG,
        repo_path=_repo(tmp_path),
        version="1.0.0",
        build_name="widget",
        build_number="7",
        console=console,
    )

    assert result == Err(UnableToCreateRelease(status=500, message="disk full"))
    assert len(http.calls) == 1


def test_publish_rejects_missing_repo(tmp_path: Path) -> None:
    http = MockHttpClient()
    console = MockConsole()

    result = publish(
        client=_client(http, console),
        config=CONFIG,
        repo_path=tmp_path / "missing",
        version="1.0.0",
        build_name="widget",
        build_number="7",
        console=console,
    )

    assert result == Err(RepoNotValid(path=tmp_path / "missing"))
    assert http.calls == []


def test_distribute_requires_remote_repo() -> None:
    http = MockHttpClient()
    console = MockConsole()

    result = distribute(
        client=_client(http, console),
        config=CONFIG,
        build_name="widget",
        build_number="7",
        console=console,
    )

    assert result == Err(DistributionRepoMissing())
    assert http.calls == []


def test_distribute() -> None:
    http = MockHttpClient()
    http.set_response("POST", f"{SERVER}/api/build/distribute/widget/7", HttpResponse(200))
    console = MockConsole()
    config = ArtifactoryConfig(
        repo="libs-staging", group="io.example", server=SERVER, remote_repo="libs-release"
    )

    result = distribute(
        client=_client(http, console),
        config=config,
        build_name="widget",
        build_number="7",
        console=console,
    )

    assert result == Ok(None)
    assert console.find("distributed build widget #7 to libs-release")

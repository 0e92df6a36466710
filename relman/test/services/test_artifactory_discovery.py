from __future__ import annotations

import io
import json
import tarfile
from datetime import UTC, datetime, timedelta, timezone
from pathlib import Path

import pytest

from relman.core.result import Err, Ok
from relman.output.console import MockConsole
from relman.services.artifactory.archive import archive_path, build_archive
from relman.services.artifactory.discovery import digests, discover
from relman.services.artifactory.errors import (
    ArchiveStale,
    ArtifactUnreadable,
    GroupPathMissing,
)
from relman.services.artifactory.manifest import BuildManifest, format_started

HELLO_MD5 = "5d41402abc4b2a76b9719d911017c592"
HELLO_SHA1 = "aaf4c61ddcc5e8a2dabede0f3b482cd9aea9434d"
STARTED = "2024-01-02T03:04:05.678+0000"


def _module(repo: Path, name: str, version: str, files: dict[str, bytes]) -> Path:
    version_dir = repo / "io" / "example" / name / version
    version_dir.mkdir(parents=True)
    for file_name, data in files.items():
        (version_dir / file_name).write_bytes(data)
    return version_dir


def _discover(repo: Path, console: MockConsole | None = None) -> BuildManifest:
    result = discover(
        repo,
        group="io.example",
        version="1.0.0",
        build_name="widget",
        build_number="42",
        console=console or MockConsole(),
        started=STARTED,
    )
    assert isinstance(result, Ok)
    return result.value


def test_digests() -> None:
    assert digests(b"hello") == (HELLO_MD5, HELLO_SHA1)


def test_discover_hashes_files(tmp_path: Path) -> None:
    _module(tmp_path, "core", "1.0.0", {"core-1.0.0.jar": b"hello"})

    manifest = _discover(tmp_path)

    assert len(manifest.modules) == 1
    module = manifest.modules[0]
    assert module.id == "io.example:core:1.0.0"
    assert module.publish_prefix == "io/example/core/1.0.0"
    artifact = module.artifacts[0]
    assert (artifact.type, artifact.name, artifact.md5, artifact.sha1) == (
        "jar",
        "core-1.0.0.jar",
        HELLO_MD5,
        HELLO_SHA1,
    )


def test_discover_skips_metadata_and_directories(tmp_path: Path) -> None:
    version_dir = _module(
        tmp_path,
        "core",
        "1.0.0",
        {"core-1.0.0.pom": b"<project/>", "maven-metadata-local.xml": b"", "maven-metadata.xml": b""},
    )
    (version_dir / "nested").mkdir()

    manifest = _discover(tmp_path)

    assert [a.name for a in manifest.modules[0].artifacts] == ["core-1.0.0.pom"]


def test_discover_skips_module_without_version(tmp_path: Path) -> None:
    _module(tmp_path, "core", "1.0.0", {"core-1.0.0.jar": b"a"})
    _module(tmp_path, "legacy", "0.9.0", {"legacy-0.9.0.jar": b"b"})
    console = MockConsole()

    manifest = _discover(tmp_path, console)

    assert [m.id for m in manifest.modules] == ["io.example:core:1.0.0"]
    assert console.find("skipping module legacy")


def test_discover_unreadable_file_is_fatal(tmp_path: Path) -> None:
    version_dir = _module(tmp_path, "core", "1.0.0", {"core-1.0.0.jar": b"hello"})
    dangling = version_dir / "core-1.0.0.pom"
    dangling.symlink_to(version_dir / "gone.pom")

    result = discover(
        tmp_path,
        group="io.example",
        version="1.0.0",
        build_name="widget",
        build_number="42",
        console=MockConsole(),
        started=STARTED,
    )

    assert isinstance(result, Err)
    assert isinstance(result.error, ArtifactUnreadable)
    assert result.error.path == dangling


def test_rediscovery_gives_same_digests(tmp_path: Path) -> None:
    _module(tmp_path, "core", "1.0.0", {"core-1.0.0.jar": b"hello", "core-1.0.0.pom": b"<p/>"})

    def digest_pairs(manifest: BuildManifest) -> dict[str, tuple[str, str]]:
        return {a.name: (a.md5, a.sha1) for m in manifest.modules for a in m.artifacts}

    first = digest_pairs(_discover(tmp_path))
    second = digest_pairs(_discover(tmp_path))

    assert first == second
    assert first["core-1.0.0.jar"] == (HELLO_MD5, HELLO_SHA1)


def test_discover_missing_group(tmp_path: Path) -> None:
    result = discover(
        tmp_path,
        group="io.example",
        version="1.0.0",
        build_name="widget",
        build_number="1",
        console=MockConsole(),
    )
    assert result == Err(GroupPathMissing(path=tmp_path / "io" / "example"))


def test_manifest_json_shape(tmp_path: Path) -> None:
    _module(tmp_path, "core", "1.0.0", {"core-1.0.0.jar": b"hello"})

    data = json.loads(_discover(tmp_path).to_json())

    assert data == {
        "version": "1.0.1",
        "name": "widget",
        "number": "42",
        "started": STARTED,
        "modules": [
            {
                "id": "io.example:core:1.0.0",
                "artifacts": [
                    {"type": "jar", "sha1": HELLO_SHA1, "md5": HELLO_MD5, "name": "core-1.0.0.jar"}
                ],
            }
        ],
    }


@pytest.mark.parametrize(
    ("moment", "expected"),
    [
        (datetime(2024, 1, 2, 3, 4, 5, 678901, tzinfo=UTC), "2024-01-02T03:04:05.678+0000"),
        (datetime(2024, 1, 2, 3, 4, 5), "2024-01-02T03:04:05.000+0000"),
        (
            datetime(2024, 6, 1, 12, 0, 0, 5000, tzinfo=timezone(timedelta(hours=2))),
            "2024-06-01T12:00:00.005+0200",
        ),
    ],
)
def test_format_started(moment: datetime, expected: str) -> None:
    assert format_started(moment) == expected


def test_archive_layout(tmp_path: Path) -> None:
    _module(tmp_path, "core", "1.0.0", {"core-1.0.0.jar": b"hello"})
    _module(tmp_path, "api", "1.0.0", {"api-1.0.0.pom": b"<project/>"})
    manifest = _discover(tmp_path)

    result = build_archive(manifest)

    assert isinstance(result, Ok)
    with tarfile.open(fileobj=io.BytesIO(result.value)) as tar:
        names = sorted(tar.getnames())
        core = tar.extractfile("io/example/core/1.0.0/core-1.0.0.jar")
        assert core is not None
        assert core.read() == b"hello"
    assert names == ["io/example/api/1.0.0/api-1.0.0.pom", "io/example/core/1.0.0/core-1.0.0.jar"]


def test_archive_detects_changed_file(tmp_path: Path) -> None:
    version_dir = _module(tmp_path, "core", "1.0.0", {"core-1.0.0.jar": b"hello"})
    manifest = _discover(tmp_path)
    (version_dir / "core-1.0.0.jar").write_bytes(b"changed")

    result = build_archive(manifest)

    assert result == Err(ArchiveStale(path=version_dir / "core-1.0.0.jar"))


def test_archive_path() -> None:
    assert archive_path("/io/example/core/1.0.0/", "a.jar") == "io/example/core/1.0.0/a.jar"

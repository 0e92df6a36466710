"""Build manifest registered with Artifactory (build-info)."""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

BUILD_INFO_VERSION = "1.0.1"


@dataclass(frozen=True, slots=True)
class Artifact:
    """One publishable file.

    ``sha1`` and ``md5`` cover the exact bytes read at discovery time.
    ``source_path`` is local and never serialized.
    """

    type: str
    sha1: str
    md5: str
    name: str
    source_path: Path

    def to_json_dict(self) -> dict[str, str]:
        return {"type": self.type, "sha1": self.sha1, "md5": self.md5, "name": self.name}


@dataclass(frozen=True, slots=True)
class Module:
    """A module coordinate and its artifacts.

    ``publish_prefix`` is the repository-relative directory the artifacts are
    stored under (``io/example/core/1.2.3``). It is never serialized.
    """

    id: str
    publish_prefix: str
    artifacts: tuple[Artifact, ...]

    def to_json_dict(self) -> dict[str, object]:
        return {"id": self.id, "artifacts": [a.to_json_dict() for a in self.artifacts]}


@dataclass(frozen=True, slots=True)
class BuildManifest:
    name: str
    number: str
    started: str
    modules: tuple[Module, ...]

    def to_json_dict(self) -> dict[str, object]:
        return {
            "version": BUILD_INFO_VERSION,
            "name": self.name,
            "number": self.number,
            "started": self.started,
            "modules": [m.to_json_dict() for m in self.modules],
        }

    def to_json(self) -> str:
        return json.dumps(self.to_json_dict())

    def artifacts(self) -> list[tuple[Module, Artifact]]:
        return [(m, a) for m in self.modules for a in m.artifacts]


def format_started(moment: datetime) -> str:
    """ISO-8601 with milliseconds and a numeric offset: 2024-01-02T03:04:05.678+0000."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    millis = moment.microsecond // 1000
    return f"{moment:%Y-%m-%dT%H:%M:%S}.{millis:03d}{moment:%z}"


def now_started() -> str:
    return format_started(datetime.now(UTC))

"""Typed loading of ``.release-manager.toml``.

The config file marks the project root: it is found by walking upward from
the working directory, and every relative path a command receives is
resolved against the directory that holds it.

Example file:

    [github]
    owner = "acme"
    repo = "release-manager"
    version-file = "cli/Cargo.toml"   # optional

    [artifactory]                     # optional
    server = "https://repo.example.com/artifactory"
    repo = "libs-release-local"
    group = "io.example"
    remote-repo = "public-releases"   # needed by `artifactory distribute`
"""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_str, get_table

__all__ = [
    "CONFIG_FILE_NAME",
    "ArtifactoryConfig",
    "ArtifactorySectionMissing",
    "Config",
    "ConfigError",
    "DistributionRepoMissing",
    "GitHubConfig",
    "find_config_upward",
    "load_config",
]

CONFIG_FILE_NAME = ".release-manager.toml"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be found, read or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class ArtifactorySectionMissing:
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class DistributionRepoMissing:
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class GitHubConfig:
    owner: str
    repo: str
    version_file: str | None = None


@dataclass(frozen=True, slots=True)
class ArtifactoryConfig:
    """Binary repository settings.

    Attributes:
        repo: Staging repository builds are published into.
        group: Dot-separated group coordinate, e.g. ``io.example``.
        server: Base URL of the repository manager.
        remote_repo: Target repository for distribution, if any.
    """

    repo: str
    group: str
    server: str
    remote_repo: str | None = None


@dataclass(frozen=True, slots=True)
class Config:
    github: GitHubConfig
    artifactory: ArtifactoryConfig | None = None
    path: Path | None = None

    def require_artifactory(self) -> Result[ArtifactoryConfig, ArtifactorySectionMissing]:
        if self.artifactory is None:
            return Err(ArtifactorySectionMissing(path=self.path))
        return Ok(self.artifactory)

    @classmethod
    def from_dict(
        cls, data: Mapping[str, object], *, path: Path | None = None
    ) -> Result[Config, ConfigError]:
        """Create Config from a mapping (parsed TOML)."""
        github = get_table(data, "github")
        if github is None:
            return Err(ConfigError("missing [github] section", path=path))

        owner = get_str(github, "owner")
        repo = get_str(github, "repo")
        if owner is None or repo is None:
            return Err(ConfigError("[github] requires 'owner' and 'repo'", path=path))

        artifactory: ArtifactoryConfig | None = None
        raw_artifactory = get_table(data, "artifactory")
        if raw_artifactory is not None:
            parsed = _parse_artifactory(raw_artifactory, path=path)
            if isinstance(parsed, Err):
                return parsed
            artifactory = parsed.value

        return Ok(
            cls(
                github=GitHubConfig(
                    owner=owner,
                    repo=repo,
                    version_file=get_str(github, "version-file"),
                ),
                artifactory=artifactory,
                path=path,
            )
        )


def _parse_artifactory(
    table: StrDict, *, path: Path | None
) -> Result[ArtifactoryConfig, ConfigError]:
    missing = [key for key in ("repo", "group", "server") if get_str(table, key) is None]
    if missing:
        return Err(
            ConfigError(f"[artifactory] missing keys: {', '.join(missing)}", path=path)
        )

    # `bintray-repo` is the historical name of `remote-repo`.
    remote_repo = get_str(table, "remote-repo") or get_str(table, "bintray-repo")
    return Ok(
        ArtifactoryConfig(
            repo=get_str(table, "repo") or "",
            group=get_str(table, "group") or "",
            server=get_str(table, "server") or "",
            remote_repo=remote_repo,
        )
    )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and parse errors."""
    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except (UnicodeDecodeError, OSError) as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))

    data = as_str_dict(data_obj)
    if data is None:
        return Err(ConfigError("Config root must be a TOML table", path=path))
    return Ok(data)


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to ``.release-manager.toml``

    Returns:
        Ok(Config) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result
    return Config.from_dict(result.value, path=path)


def find_config_upward(start: Path) -> Path | None:
    """Return the nearest ``.release-manager.toml`` at or above ``start``."""
    for parent in (start, *start.parents):
        candidate = parent / CONFIG_FILE_NAME
        if candidate.is_file():
            return candidate
    return None

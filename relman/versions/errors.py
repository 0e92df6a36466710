from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class NoProjectFound:
    searched_from: Path


@dataclass(frozen=True, slots=True)
class UnsupportedVersionFile:
    path: Path


@dataclass(frozen=True, slots=True)
class VersionFileMissing:
    path: Path


@dataclass(frozen=True, slots=True)
class VersionFileInvalid:
    path: Path
    reason: str


@dataclass(frozen=True, slots=True)
class InvalidVersion:
    text: str


@dataclass(frozen=True, slots=True)
class BumpModeConflict:
    chosen: tuple[str, ...]


VersionError = (
    NoProjectFound
    | UnsupportedVersionFile
    | VersionFileMissing
    | VersionFileInvalid
    | InvalidVersion
    | BumpModeConflict
)

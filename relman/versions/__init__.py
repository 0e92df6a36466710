"""Version values and the files that record them."""

from relman.versions.errors import (
    BumpModeConflict,
    InvalidVersion,
    NoProjectFound,
    UnsupportedVersionFile,
    VersionError,
    VersionFileInvalid,
    VersionFileMissing,
)
from relman.versions.record import (
    CargoRecord,
    PropertiesRecord,
    VersionRecord,
    locate,
    record_for_project,
    record_from_path,
)
from relman.versions.semver import BumpKind, Version, parse_version, plan_next_version

__all__ = [
    "BumpKind",
    "BumpModeConflict",
    "CargoRecord",
    "InvalidVersion",
    "NoProjectFound",
    "PropertiesRecord",
    "UnsupportedVersionFile",
    "Version",
    "VersionError",
    "VersionFileInvalid",
    "VersionFileMissing",
    "VersionRecord",
    "locate",
    "parse_version",
    "plan_next_version",
    "record_for_project",
    "record_from_path",
]

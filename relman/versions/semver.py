from __future__ import annotations

import re
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Literal

from relman.core.result import Err, Ok, Result
from relman.versions.errors import BumpModeConflict, InvalidVersion

BumpKind = Literal["major", "minor", "patch"]

SNAPSHOT_IDENTIFIER = "SNAPSHOT"

_IDENT = r"[0-9A-Za-z-]+"
_SEMVER_RE = re.compile(
    r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    rf"(?:-({_IDENT}(?:\.{_IDENT})*))?"
    rf"(?:\+({_IDENT}(?:\.{_IDENT})*))?$"
)


@dataclass(frozen=True, slots=True)
class Version:
    """Semantic version. Bumps return a new value."""

    major: int
    minor: int
    patch: int
    pre: tuple[str, ...] = ()
    build: tuple[str, ...] = ()

    def __str__(self) -> str:
        out = f"{self.major}.{self.minor}.{self.patch}"
        if self.pre:
            out += "-" + ".".join(self.pre)
        if self.build:
            out += "+" + ".".join(self.build)
        return out

    def to_tag(self) -> str:
        return f"v{self}"

    def bump(self, kind: BumpKind) -> Version:
        match kind:
            case "major":
                return Version(self.major + 1, 0, 0)
            case "minor":
                return Version(self.major, self.minor + 1, 0)
            case "patch":
                return Version(self.major, self.minor, self.patch + 1)
            case _:
                raise AssertionError(f"unexpected bump kind: {kind}")

    def snapshot(self, unix_seconds: int) -> Version:
        # The build stamp only has one-second resolution and follows the wall
        # clock, so two snapshots are not guaranteed to be unique or ordered.
        return Version(
            self.major,
            self.minor,
            self.patch,
            pre=(SNAPSHOT_IDENTIFIER,),
            build=(str(unix_seconds),),
        )


def parse_version(text: str) -> Result[Version, InvalidVersion]:
    m = _SEMVER_RE.match(text.strip())
    if m is None:
        return Err(InvalidVersion(text=text))

    pre = tuple(m.group(4).split(".")) if m.group(4) else ()
    build = tuple(m.group(5).split(".")) if m.group(5) else ()
    for ident in pre:
        # Numeric pre-release identifiers must not carry leading zeros.
        if ident.isdigit() and len(ident) > 1 and ident.startswith("0"):
            return Err(InvalidVersion(text=text))

    return Ok(Version(int(m.group(1)), int(m.group(2)), int(m.group(3)), pre, build))


def plan_next_version(
    current: Version,
    *,
    at_version: str | None = None,
    bump: BumpKind | None = None,
    snapshot: bool = False,
    clock: Callable[[], float] = time.time,
) -> Result[Version, InvalidVersion | BumpModeConflict]:
    """Decide the next version from exactly one bump mode.

    Args:
        current: Version currently held by the version record.
        at_version: Explicit version to set.
        bump: Component to increment.
        snapshot: Turn the current version into ``X.Y.Z-SNAPSHOT+<seconds>``.
        clock: Source of unix time for snapshot builds.
    """
    chosen: list[str] = []
    if at_version is not None:
        chosen.append("at-version")
    if bump is not None:
        chosen.append(f"bump-{bump}")
    if snapshot:
        chosen.append("snapshot")
    if len(chosen) != 1:
        return Err(BumpModeConflict(chosen=tuple(chosen)))

    if at_version is not None:
        return parse_version(at_version)
    if bump is not None:
        return Ok(current.bump(bump))
    return Ok(current.snapshot(int(clock())))

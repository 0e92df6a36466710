"""Version records: the file and field that hold a project's version.

Two formats are supported:

- ``version.properties``: a key-value file whose top-level ``version`` key
  holds the version.
- ``Cargo.toml``: a TOML manifest whose ``package.version`` field holds it.

Both variants parse the whole file before touching it (a file that does not
parse is fatal), then rewrite only the version value in place. Every other
byte, including comments, ordering and line endings, is preserved.

The variant is picked once, when the record is located, and never changes.
"""

from __future__ import annotations

import configparser
import os
import re
import tomllib
from abc import ABC, abstractmethod
from pathlib import Path
from typing import ClassVar

from relman.core.result import Err, Ok, Result
from relman.core.structured import get_nested_str
from relman.platform.files import atomic_write_text, read_text_exact
from relman.versions.errors import (
    NoProjectFound,
    UnsupportedVersionFile,
    VersionError,
    VersionFileInvalid,
    VersionFileMissing,
)
from relman.versions.semver import Version, parse_version

__all__ = [
    "CARGO_TOML_NAME",
    "VERSION_PROPERTIES_NAME",
    "CargoRecord",
    "PropertiesRecord",
    "VersionRecord",
    "locate",
    "record_for_project",
    "record_from_path",
]

VERSION_PROPERTIES_NAME = "version.properties"
CARGO_TOML_NAME = "Cargo.toml"


class VersionRecord(ABC):
    """A project's authoritative version field.

    Attributes:
        record_path: Absolute path of the file holding the version.
    """

    marker: ClassVar[str]

    def __init__(self, record_path: Path) -> None:
        self.record_path = record_path

    @property
    def project_root(self) -> Path:
        return self.record_path.parent

    def files_involved(self) -> list[Path]:
        """Absolute paths touched by an update, in commit order."""
        return [self.record_path]

    def current_version(self) -> Result[Version, VersionError]:
        text = self._read()
        if isinstance(text, Err):
            return text

        raw = self._extract(text.value)
        if isinstance(raw, Err):
            return raw

        parsed = parse_version(raw.value)
        if isinstance(parsed, Err):
            return Err(
                VersionFileInvalid(
                    path=self.record_path, reason=f"invalid version '{raw.value}'"
                )
            )
        return parsed

    def render_version(
        self, version: Version, *, relative_to: Path | None = None
    ) -> Result[dict[str, str], VersionError]:
        """Return ``{relative path: new file content}`` without writing anything.

        Args:
            version: Version to render.
            relative_to: Directory the keys are relative to (defaults to the
                project root). Pass the repository root when the result feeds
                a remote commit.
        """
        text = self._read()
        if isinstance(text, Err):
            return text

        updated = self._rewrite(text.value, version)
        if isinstance(updated, Err):
            return updated

        base = relative_to if relative_to is not None else self.project_root
        key = Path(os.path.relpath(self.record_path, base)).as_posix()
        return Ok({key: updated.value})

    def update_version(self, version: Version) -> Result[None, VersionError]:
        text = self._read()
        if isinstance(text, Err):
            return text

        updated = self._rewrite(text.value, version)
        if isinstance(updated, Err):
            return updated

        try:
            atomic_write_text(self.record_path, updated.value)
        except OSError as e:
            return Err(VersionFileInvalid(path=self.record_path, reason=f"write failed: {e}"))
        return Ok(None)

    def _read(self) -> Result[str, VersionError]:
        try:
            return Ok(read_text_exact(self.record_path))
        except FileNotFoundError:
            return Err(VersionFileMissing(path=self.record_path))
        except (OSError, UnicodeDecodeError) as e:
            return Err(VersionFileInvalid(path=self.record_path, reason=str(e)))

    def _rewrite(self, text: str, version: Version) -> Result[str, VersionFileInvalid]:
        updated = self._replace(text, version)
        if isinstance(updated, Err):
            return updated

        # The edited line must be the field the parser reads back.
        reread = self._extract(updated.value)
        if isinstance(reread, Err):
            return reread
        if reread.value != str(version):
            return self._invalid("version line is not the authoritative version field")
        return updated

    def _invalid(self, reason: str) -> Err[VersionFileInvalid]:
        return Err(VersionFileInvalid(path=self.record_path, reason=reason))

    @abstractmethod
    def _extract(self, text: str) -> Result[str, VersionFileInvalid]:
        """Return the raw version string held by ``text``."""
        ...

    @abstractmethod
    def _replace(self, text: str, version: Version) -> Result[str, VersionFileInvalid]:
        """Return ``text`` with only the version value changed."""
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self.record_path)!r})"


_ROOT_SECTION = "__root__"
_SECTION_HEADER_RE = re.compile(r"(?m)^[ \t]*\[")
_PROPERTIES_VERSION_RE = re.compile(
    r"(?im)^(?P<lead>[ \t]*version[ \t]*[=:][ \t]*)(?P<value>[^\r\n]*?)(?P<trail>[ \t]*)(?=\r?$)"
)


class PropertiesRecord(VersionRecord):
    """``version.properties``: top-level ``version=<semver>`` key."""

    marker = VERSION_PROPERTIES_NAME

    def _parse(self, text: str) -> Result[configparser.ConfigParser, VersionFileInvalid]:
        # Keys above the first [section] header belong to an implicit root section.
        cfg = configparser.ConfigParser(interpolation=None, delimiters=("=", ":"))
        try:
            cfg.read_string(f"[{_ROOT_SECTION}]\n{text}")
        except (configparser.Error, ValueError) as e:
            return self._invalid(f"unparsable properties file: {e}")
        return Ok(cfg)

    def _extract(self, text: str) -> Result[str, VersionFileInvalid]:
        cfg = self._parse(text)
        if isinstance(cfg, Err):
            return cfg

        value = cfg.value.get(_ROOT_SECTION, "version", fallback="").strip()
        if not value:
            return self._invalid("missing 'version' key")
        return Ok(value)

    def _replace(self, text: str, version: Version) -> Result[str, VersionFileInvalid]:
        current = self._extract(text)
        if isinstance(current, Err):
            return current

        header = _SECTION_HEADER_RE.search(text)
        root_end = header.start() if header else len(text)

        m = _PROPERTIES_VERSION_RE.search(text, 0, root_end)
        if m is None:
            return self._invalid("cannot locate 'version' line for in-place edit")

        start, end = m.span("value")
        return Ok(text[:start] + str(version) + text[end:])


_PACKAGE_HEADER_RE = re.compile(
    r"(?m)^[ \t]*\[[ \t]*package[ \t]*\][ \t]*(?:#[^\r\n]*)?(?=\r?$)"
)
_CARGO_VERSION_RE = re.compile(
    r"""(?m)^[ \t]*version[ \t]*=[ \t]*(?P<quote>["'])(?P<value>[^"'\r\n]*)(?P=quote)"""
)


class CargoRecord(VersionRecord):
    """``Cargo.toml``: the ``[package]`` table's ``version`` field."""

    marker = CARGO_TOML_NAME

    def _extract(self, text: str) -> Result[str, VersionFileInvalid]:
        try:
            doc: dict[str, object] = tomllib.loads(text)
        except tomllib.TOMLDecodeError as e:
            return self._invalid(f"invalid TOML: {e}")

        value = get_nested_str(doc, "package", "version")
        if value is None:
            return self._invalid("missing package.version")
        return Ok(value)

    def _replace(self, text: str, version: Version) -> Result[str, VersionFileInvalid]:
        current = self._extract(text)
        if isinstance(current, Err):
            return current

        header = _PACKAGE_HEADER_RE.search(text)
        if header is None:
            return self._invalid("missing [package] table header")

        section_start = header.end()
        next_header = _SECTION_HEADER_RE.search(text, section_start)
        section_end = next_header.start() if next_header else len(text)

        m = _CARGO_VERSION_RE.search(text, section_start, section_end)
        if m is None:
            return self._invalid("cannot locate package.version for in-place edit")

        start, end = m.span("value")
        return Ok(text[:start] + str(version) + text[end:])


RECORD_TYPES: tuple[type[VersionRecord], ...] = (CargoRecord, PropertiesRecord)


def locate(start_dir: Path) -> Result[VersionRecord, NoProjectFound]:
    """Find the nearest enclosing project's version record.

    Looks at the direct children of ``start_dir``, then of each parent in
    turn, and stops at the first directory holding a known marker file. When
    one directory holds several markers, ``Cargo.toml`` wins.
    """
    start = start_dir.resolve()
    for directory in (start, *start.parents):
        for record_type in RECORD_TYPES:
            candidate = directory / record_type.marker
            if candidate.is_file():
                return Ok(record_type(candidate))
    return Err(NoProjectFound(searched_from=start))


def record_from_path(path: Path) -> Result[VersionRecord, VersionError]:
    """Build a record for an explicit file, choosing the variant by file name."""
    for record_type in RECORD_TYPES:
        if path.name == record_type.marker:
            if not path.is_file():
                return Err(VersionFileMissing(path=path))
            return Ok(record_type(path.resolve()))
    return Err(UnsupportedVersionFile(path=path))


def record_for_project(
    project_root: Path,
    *,
    version_file: str | None = None,
    start_dir: Path | None = None,
) -> Result[VersionRecord, VersionError]:
    """Resolve the record a command should act on.

    An explicit ``version_file`` (relative to ``project_root``) wins;
    otherwise the record is located upward from ``start_dir`` (default:
    ``project_root``).
    """
    if version_file is not None:
        return record_from_path(project_root / version_file)
    return locate(start_dir if start_dir is not None else project_root)

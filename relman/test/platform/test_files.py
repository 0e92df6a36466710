from __future__ import annotations

import os
import stat
from pathlib import Path

import pytest

from relman.platform.files import atomic_write_text, read_text_exact


def test_atomic_write_text_creates_parent_dirs(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "version.properties"
    atomic_write_text(path, "version=1.0.0\n")

    assert path.read_text(encoding="utf-8") == "version=1.0.0\n"


def test_atomic_write_text_replaces_existing_content(tmp_path: Path) -> None:
    path = tmp_path / "Cargo.toml"
    path.write_text("old", encoding="utf-8")

    atomic_write_text(path, "new")

    assert path.read_text(encoding="utf-8") == "new"


def test_atomic_write_text_keeps_permissions(tmp_path: Path) -> None:
    path = tmp_path / "version.properties"
    path.write_text("version=1.0.0\n", encoding="utf-8")
    os.chmod(path, 0o600)

    atomic_write_text(path, "version=1.0.1\n")

    assert stat.S_IMODE(path.stat().st_mode) == 0o600


def test_atomic_write_text_cleans_temp_file_on_replace_failure(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    path = tmp_path / "state.json"

    def fail_replace(_src: Path, _dst: Path) -> None:
        raise OSError("replace failed")

    monkeypatch.setattr(os, "replace", fail_replace)

    with pytest.raises(OSError, match="replace failed"):
        atomic_write_text(path, "payload")

    assert list(tmp_path.iterdir()) == []


def test_line_endings_round_trip_byte_for_byte(tmp_path: Path) -> None:
    path = tmp_path / "version.properties"
    path.write_bytes(b"# header\r\nversion=1.0.0\r\n")

    text = read_text_exact(path)
    assert text == "# header\r\nversion=1.0.0\r\n"

    atomic_write_text(path, text)
    assert path.read_bytes() == b"# header\r\nversion=1.0.0\r\n"

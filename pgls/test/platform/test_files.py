from __future__ import annotations

import os
from pathlib import Path

import pytest

from pgls.platform.files import atomic_write_text, is_executable, make_executable


def test_atomic_write_text_creates_parent_dirs(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "state.json"
    atomic_write_text(path, '{"ok":true}\n')

    assert path.read_text(encoding="utf-8") == '{"ok":true}\n'


def test_atomic_write_text_replaces_existing_content(tmp_path: Path) -> None:
    path = tmp_path / "state.json"
    path.write_text("old", encoding="utf-8")

    atomic_write_text(path, "new")

    assert path.read_text(encoding="utf-8") == "new"
    assert list(tmp_path.glob(f".{path.name}.*.tmp")) == []


def test_atomic_write_cleans_temp_file_on_replace_failure(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    path = tmp_path / "state.json"

    def fail_replace(_src: Path, _dst: Path) -> None:
        raise OSError("replace failed")

    monkeypatch.setattr(os, "replace", fail_replace)

    with pytest.raises(OSError, match="replace failed"):
        atomic_write_text(path, "payload")

    assert list(tmp_path.glob(f".{path.name}.*.tmp")) == []


@pytest.mark.skipif(os.name == "nt", reason="no execute bit on Windows")
def test_make_executable(tmp_path: Path) -> None:
    path = tmp_path / "postgres-language-server"
    path.write_bytes(b"bin")
    path.chmod(0o644)
    assert not is_executable(path)

    make_executable(path)

    assert is_executable(path)
    assert path.stat().st_mode & 0o777 == 0o755


def test_is_executable_rejects_missing_and_dirs(tmp_path: Path) -> None:
    assert not is_executable(tmp_path / "missing")
    assert not is_executable(tmp_path)

"""Tests for pgls.services.storage module."""

from __future__ import annotations

from pathlib import Path

from pgls.core.result import Ok
from pgls.output.console import MockConsole
from pgls.services.storage import reset_storage, storage_entries


def _populate(storage: Path) -> None:
    (storage / "global-bin").mkdir(parents=True)
    (storage / "global-bin" / "postgres-language-server").write_bytes(b"a")
    (storage / "tmp-bin").mkdir()
    (storage / "tmp-bin" / "postgres-language-server-0.8.1").write_bytes(b"b")
    (storage / "state.json").write_text("{}", encoding="utf-8")


class TestResetStorage:
    def test_removes_everything(self, tmp_path: Path) -> None:
        _populate(tmp_path)
        (tmp_path / "unrelated.txt").write_text("keep", encoding="utf-8")

        result = reset_storage(tmp_path, MockConsole())

        assert isinstance(result, Ok)
        assert sorted(result.value) == sorted(storage_entries(tmp_path))
        assert not any(p.exists() for p in storage_entries(tmp_path))
        assert (tmp_path / "unrelated.txt").exists()

    def test_nothing_to_remove(self, tmp_path: Path) -> None:
        assert reset_storage(tmp_path, MockConsole()) == Ok([])

    def test_partial(self, tmp_path: Path) -> None:
        (tmp_path / "state.json").write_text("{}", encoding="utf-8")

        assert reset_storage(tmp_path, MockConsole()) == Ok([tmp_path / "state.json"])

"""Tests for pgls.binary.provision module."""

from __future__ import annotations

import shutil
from pathlib import Path

import pytest

from pgls.binary.constants import ServerConstants
from pgls.binary.provision import BinaryProvisioner
from pgls.binary.version import VersionProbe
from pgls.core.errors import InvariantError
from pgls.core.result import Ok
from pgls.output.console import MockConsole
from pgls.platform.detection import Arch, Platform, PlatformInfo
from pgls.platform.files import is_executable

CONSTANTS = ServerConstants.for_platform(PlatformInfo(platform=Platform.LINUX, arch=Arch.X64))


def _binary(tmp_path: Path) -> Path:
    path = tmp_path / "found" / "postgres-language-server"
    path.parent.mkdir(parents=True)
    path.write_bytes(b"server")
    return path


def _provisioner(
    tmp_path: Path,
    console: MockConsole,
    copies: list[tuple[Path, Path]],
    *,
    output: str = "Version: 0.8.1",
) -> BinaryProvisioner:
    def counting_copy(src: Path, dst: Path) -> None:
        copies.append((src, dst))
        shutil.copyfile(src, dst)

    return BinaryProvisioner(
        storage_dir=tmp_path / "storage",
        constants=CONSTANTS,
        probe=VersionProbe(lambda _cmd: Ok(output)),
        console=console,
        copy=counting_copy,
    )


class TestProvision:
    """Per-version copies in tmp-bin."""

    def test_copies_into_version_keyed_path(self, tmp_path: Path) -> None:
        original = _binary(tmp_path)
        copies: list[tuple[Path, Path]] = []

        result = _provisioner(tmp_path, MockConsole(), copies).provision(original)

        expected = tmp_path / "storage" / "tmp-bin" / "postgres-language-server-0.8.1"
        assert result == expected
        assert expected.read_bytes() == b"server"
        assert is_executable(expected)
        assert len(copies) == 1

    def test_second_call_reuses_copy(self, tmp_path: Path) -> None:
        """Provisioning the same version twice copies exactly once."""
        original = _binary(tmp_path)
        copies: list[tuple[Path, Path]] = []
        provisioner = _provisioner(tmp_path, MockConsole(), copies)

        first = provisioner.provision(original)
        second = provisioner.provision(original)

        assert first == second
        assert len(copies) == 1

    def test_reused_copy_is_made_executable(self, tmp_path: Path) -> None:
        original = _binary(tmp_path)
        cached = tmp_path / "storage" / "tmp-bin" / "postgres-language-server-0.8.1"
        cached.parent.mkdir(parents=True)
        cached.write_bytes(b"server")
        cached.chmod(0o644)
        copies: list[tuple[Path, Path]] = []

        result = _provisioner(tmp_path, MockConsole(), copies).provision(original)

        assert result == cached
        assert is_executable(cached)
        assert copies == []

    def test_versions_do_not_collide(self, tmp_path: Path) -> None:
        original = _binary(tmp_path)
        copies: list[tuple[Path, Path]] = []

        a = _provisioner(tmp_path, MockConsole(), copies, output="0.8.0").provision(original)
        b = _provisioner(tmp_path, MockConsole(), copies, output="0.8.1").provision(original)

        assert a is not None and b is not None
        assert a != b
        assert len(copies) == 2

    def test_no_version_is_invariant_error(self, tmp_path: Path) -> None:
        original = _binary(tmp_path)
        provisioner = _provisioner(tmp_path, MockConsole(), [], output="garbage")

        with pytest.raises(InvariantError):
            provisioner.provision(original)

    def test_copy_failure_returns_none(self, tmp_path: Path) -> None:
        """A filesystem error is reported and leaves no partial copy."""
        original = _binary(tmp_path)
        console = MockConsole()

        def failing_copy(src: Path, dst: Path) -> None:
            dst.write_bytes(b"half")
            raise OSError("disk full")

        provisioner = BinaryProvisioner(
            storage_dir=tmp_path / "storage",
            constants=CONSTANTS,
            probe=VersionProbe(lambda _cmd: Ok("0.8.1")),
            console=console,
            copy=failing_copy,
        )

        assert provisioner.provision(original) is None
        assert console.has_warning()
        assert list((tmp_path / "storage" / "tmp-bin").iterdir()) == []

    def test_cache_path(self, tmp_path: Path) -> None:
        provisioner = _provisioner(tmp_path, MockConsole(), [])
        assert provisioner.cache_path("1.0.0") == (
            tmp_path / "storage" / "tmp-bin" / "postgres-language-server-1.0.0"
        )

"""Tests for pgls.platform.detection module."""

from __future__ import annotations

import pytest

from pgls.platform.detection import Arch, Platform, PlatformInfo, detect, detect_platform


class TestPlatform:
    def test_exe_suffix(self) -> None:
        assert Platform.WINDOWS.exe_suffix == ".exe"
        assert Platform.LINUX.exe_suffix == ""
        assert Platform.MACOS.exe_name("postgrestools") == "postgrestools"

    def test_path_delimiter(self) -> None:
        assert Platform.WINDOWS.path_delimiter == ";"
        assert Platform.MACOS.path_delimiter == ":"

    def test_node_names(self) -> None:
        assert Platform.WINDOWS.node_name == "win32"
        assert Platform.MACOS.node_name == "darwin"
        assert Platform.LINUX.node_name == "linux"
        assert Platform.UNKNOWN.node_name is None

    def test_is_unix(self) -> None:
        assert Platform.LINUX.is_unix
        assert not Platform.WINDOWS.is_unix


class TestPlatformInfo:
    @pytest.mark.parametrize(
        ("platform", "arch", "identifier"),
        [
            (Platform.LINUX, Arch.X64, "linux-x64"),
            (Platform.MACOS, Arch.ARM64, "darwin-arm64"),
            (Platform.WINDOWS, Arch.X64, "win32-x64"),
        ],
    )
    def test_identifier(self, platform: Platform, arch: Arch, identifier: str) -> None:
        info = PlatformInfo(platform=platform, arch=arch)
        assert info.identifier == identifier
        assert str(info) == identifier
        assert info.supported

    def test_unknown_is_unsupported(self) -> None:
        assert not PlatformInfo(platform=Platform.UNKNOWN, arch=Arch.X64).supported
        assert not PlatformInfo(platform=Platform.LINUX, arch=Arch.UNKNOWN).supported

    def test_unknown_identifier_never_matches_real_key(self) -> None:
        assert PlatformInfo(platform=Platform.UNKNOWN, arch=Arch.UNKNOWN).identifier == (
            "unknown-unknown"
        )


class TestDetect:
    def test_detect_is_cached(self) -> None:
        assert detect() is detect()

    def test_detect_matches_platform(self) -> None:
        assert detect().platform == detect_platform()

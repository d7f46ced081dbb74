"""Platform and architecture detection.

Detection is done lazily and cached. The names used by the language server's
distribution channels (npm platform names, Rust target triples) hang off the
enums so that every naming decision starts from one detected value.
"""

from __future__ import annotations

import os as _os
import platform as _platform
import sys as _sys
from dataclasses import dataclass
from enum import Enum, auto
from functools import lru_cache

__all__ = [
    "Platform",
    "Arch",
    "PlatformInfo",
    "detect",
    "detect_arch",
    "detect_platform",
]


class Platform(Enum):
    """Operating system platform."""

    LINUX = auto()
    MACOS = auto()
    WINDOWS = auto()
    UNKNOWN = auto()

    def __str__(self) -> str:
        return self.name.lower()

    @property
    def is_unix(self) -> bool:
        """Check if this is a Unix-like platform (Linux or macOS)."""
        return self in (Platform.LINUX, Platform.MACOS)

    @property
    def exe_suffix(self) -> str:
        """Get executable file suffix for this platform."""
        return ".exe" if self == Platform.WINDOWS else ""

    @property
    def path_delimiter(self) -> str:
        """Separator between entries of the PATH environment variable."""
        return ";" if self == Platform.WINDOWS else ":"

    @property
    def node_name(self) -> str | None:
        """Name used by Node.js (``process.platform``) and in settings keys."""
        return {
            Platform.LINUX: "linux",
            Platform.MACOS: "darwin",
            Platform.WINDOWS: "win32",
            Platform.UNKNOWN: None,
        }[self]

    @property
    def rust_target(self) -> str | None:
        """Vendor/OS part of the Rust target triple used in release assets."""
        return {
            Platform.LINUX: "unknown-linux-gnu",
            Platform.MACOS: "apple-darwin",
            Platform.WINDOWS: "pc-windows-msvc",
            Platform.UNKNOWN: None,
        }[self]

    @property
    def npm_target(self) -> str | None:
        """OS suffix of the platform-specific npm sub-package names."""
        return {
            Platform.LINUX: "linux-gnu",
            Platform.MACOS: "apple-darwin",
            Platform.WINDOWS: "windows-msvc",
            Platform.UNKNOWN: None,
        }[self]

    def exe_name(self, name: str) -> str:
        """Get executable name with platform-appropriate suffix.

        Example: exe_name("postgrestools") -> "postgrestools.exe" on Windows.
        """
        return f"{name}{self.exe_suffix}"


class Arch(Enum):
    """CPU architecture."""

    X64 = auto()
    ARM64 = auto()
    UNKNOWN = auto()

    def __str__(self) -> str:
        return self.name.lower()

    @property
    def node_name(self) -> str | None:
        """Name used by Node.js (``process.arch``) and in settings keys."""
        return {Arch.X64: "x64", Arch.ARM64: "arm64", Arch.UNKNOWN: None}[self]

    @property
    def rust_name(self) -> str | None:
        """CPU part of the Rust target triple (``x86_64`` / ``aarch64``)."""
        return {Arch.X64: "x86_64", Arch.ARM64: "aarch64", Arch.UNKNOWN: None}[self]


@dataclass(frozen=True, slots=True)
class PlatformInfo:
    """Detected operating system and architecture.

    Use the `detect()` function to get an instance for the running machine;
    construct one directly in tests.
    """

    platform: Platform
    arch: Arch

    @property
    def is_unix(self) -> bool:
        return self.platform.is_unix

    @property
    def identifier(self) -> str:
        """``{os}-{arch}`` key, e.g. ``linux-x64`` or ``darwin-arm64``.

        Unknown components fall back to the enum's own name so the key never
        matches a real settings entry by accident.
        """
        os_name = self.platform.node_name or str(self.platform)
        arch_name = self.arch.node_name or str(self.arch)
        return f"{os_name}-{arch_name}"

    @property
    def supported(self) -> bool:
        """True when release assets exist for this OS/architecture pair."""
        return self.platform.rust_target is not None and self.arch.rust_name is not None

    def __str__(self) -> str:
        return self.identifier


@lru_cache(maxsize=1)
def detect_platform() -> Platform:
    """Detect the current operating system (cached)."""
    # NOTE: avoid platform.system() on Windows, it may query WMI.
    system = _sys.platform.lower()
    if system.startswith("linux"):
        return Platform.LINUX
    if system.startswith("darwin"):
        return Platform.MACOS
    if system.startswith(("win32", "cygwin", "msys")):
        return Platform.WINDOWS
    return Platform.UNKNOWN


@lru_cache(maxsize=1)
def detect_arch() -> Arch:
    """Detect the current CPU architecture (cached)."""
    if detect_platform() == Platform.WINDOWS:
        env_arch = (
            _os.environ.get("PROCESSOR_ARCHITEW6432")
            or _os.environ.get("PROCESSOR_ARCHITECTURE")
            or ""
        )
        machine = env_arch.lower()
    else:
        machine = _platform.machine().lower()
    if machine in ("x86_64", "amd64"):
        return Arch.X64
    if machine in ("aarch64", "arm64"):
        return Arch.ARM64
    return Arch.UNKNOWN


@lru_cache(maxsize=1)
def detect() -> PlatformInfo:
    """Detect complete platform information (cached)."""
    return PlatformInfo(platform=detect_platform(), arch=detect_arch())

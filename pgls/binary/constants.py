"""Names of the language server's binaries, packages and release assets.

The distribution was renamed from ``postgrestools`` to
``postgres-language-server``; every lookup tries the current name first and
the legacy one second. All platform-dependent names are computed once from a
PlatformInfo into an immutable ServerConstants value.
"""

from __future__ import annotations

from dataclasses import dataclass

from pgls.platform.detection import PlatformInfo

__all__ = [
    "BinaryIdentity",
    "ServerConstants",
    "RELEASE_HOST",
    "RELEASES_API",
    "GLOBAL_BIN_DIR",
    "TMP_BIN_DIR",
]

RELEASE_HOST = "https://github.com/supabase-community/postgres-language-server"
RELEASES_API = "https://api.github.com/repos/supabase-community/postgres-language-server/releases"

GLOBAL_BIN_DIR = "global-bin"
TMP_BIN_DIR = "tmp-bin"

_CURRENT_BASE = "postgres-language-server"
_LEGACY_BASE = "postgrestools"
_CURRENT_PACKAGE = "@postgres-language-server/cli"
_LEGACY_PACKAGE = "@postgrestools/postgrestools"
_CURRENT_SCOPE = "@postgres-language-server"
_LEGACY_SCOPE = "@postgrestools"


@dataclass(frozen=True, slots=True)
class BinaryIdentity:
    """One generation of names for the same binary.

    Attributes:
        base_name: Bare binary name without suffix (e.g. "postgrestools")
        package_name: npm package that depends on the platform packages
        platform_package_name: npm package shipping the binary for this
            OS/arch, or None when no such package is published
        binary_name: File name of the executable, ``.exe`` on Windows
        asset_name: GitHub release asset name for this OS/arch
    """

    base_name: str
    package_name: str
    platform_package_name: str | None
    binary_name: str
    asset_name: str


def _asset_name(base: str, info: PlatformInfo) -> str:
    name = base
    if info.arch.rust_name is not None:
        name += f"_{info.arch.rust_name}"
    if info.platform.rust_target is not None:
        name += f"-{info.platform.rust_target}"
    return name


def _platform_package(scope: str, info: PlatformInfo) -> str | None:
    if info.arch.rust_name is None or info.platform.npm_target is None:
        return None
    return f"{scope}/cli-{info.arch.rust_name}-{info.platform.npm_target}"


def _identity(base: str, package: str, scope: str, info: PlatformInfo) -> BinaryIdentity:
    return BinaryIdentity(
        base_name=base,
        package_name=package,
        platform_package_name=_platform_package(scope, info),
        binary_name=info.platform.exe_name(base),
        asset_name=_asset_name(base, info),
    )


@dataclass(frozen=True, slots=True)
class ServerConstants:
    """Platform-derived constants, built once at startup.

    Usage:
        constants = ServerConstants.for_platform(detect())
        constants.current.binary_name  # "postgres-language-server"
    """

    platform: PlatformInfo
    current: BinaryIdentity
    legacy: BinaryIdentity
    release_host: str = RELEASE_HOST
    releases_api: str = RELEASES_API

    @classmethod
    def for_platform(cls, info: PlatformInfo) -> ServerConstants:
        return cls(
            platform=info,
            current=_identity(_CURRENT_BASE, _CURRENT_PACKAGE, _CURRENT_SCOPE, info),
            legacy=_identity(_LEGACY_BASE, _LEGACY_PACKAGE, _LEGACY_SCOPE, info),
        )

    @property
    def identities(self) -> tuple[BinaryIdentity, BinaryIdentity]:
        """Current identity first, legacy second."""
        return (self.current, self.legacy)

    @property
    def platform_identifier(self) -> str:
        return self.platform.identifier

    @property
    def machine_supported(self) -> bool:
        return self.platform.supported

    def release_asset_url(self, tag: str, identity: BinaryIdentity) -> str:
        """URL of ``identity``'s asset in the release tagged ``tag``."""
        return f"{self.release_host}/releases/download/{tag}/{identity.asset_name}"

    def latest_asset_url(self, identity: BinaryIdentity) -> str:
        """URL of ``identity``'s asset in the newest release."""
        return f"{self.release_host}/releases/latest/download/{identity.asset_name}"

    def versioned_binary_name(self, version: str) -> str:
        """File name of a provisioned copy, e.g. ``postgres-language-server-0.8.1``."""
        return self.platform.platform.exe_name(f"{self.current.base_name}-{version}")

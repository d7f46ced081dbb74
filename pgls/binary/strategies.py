"""Discovery strategies: one per way the binary may have been installed.

A DiscoveryStrategy is a plain record binding a lookup function to its
identity, label and hooks. The lookups themselves live on Lookups, which
holds their collaborators (settings, module resolvers, downloader, prompter).
Every lookup except the download fallback only reads the filesystem.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path
from typing import TYPE_CHECKING

from pgls.core.result import Err

from .modules import PNP_MANIFEST_NAMES
from .prompts import DOWNLOAD_ACCEPT, DOWNLOAD_CONSENT_MESSAGE, DOWNLOAD_DECLINE

if TYPE_CHECKING:
    from pgls.core.config import SettingsStore
    from pgls.output.console import ConsoleProtocol

    from .constants import ServerConstants
    from .downloader import Downloader
    from .modules import ModuleResolver, PnpLoader
    from .prompts import Prompter

__all__ = [
    "StrategyKind",
    "OperatingMode",
    "ResolutionContext",
    "FindResult",
    "DiscoveryStrategy",
    "Lookups",
    "MULTI_ROOT_RELATIVE_PATH_ERROR",
]

MULTI_ROOT_RELATIVE_PATH_ERROR = (
    "Relative paths for the postgres language server binary in a multi-root workspace "
    "setting are not supported. Please use an absolute path."
)


class StrategyKind(Enum):
    """Identity of the strategy that produced a binary."""

    SETTINGS = auto()
    NPM = auto()
    YARN_PNP = auto()
    PATH = auto()
    DOWNLOAD = auto()

    def __str__(self) -> str:
        return self.name.lower()


class OperatingMode(Enum):
    """How many project roots the caller is working with."""

    SINGLE_FILE = auto()  # no root at all, unsupported
    SINGLE_ROOT = auto()
    MULTI_ROOT = auto()

    @classmethod
    def for_root_count(cls, count: int) -> OperatingMode:
        if count == 0:
            return cls.SINGLE_FILE
        if count == 1:
            return cls.SINGLE_ROOT
        return cls.MULTI_ROOT


@dataclass(frozen=True, slots=True)
class ResolutionContext:
    """Input of a resolution attempt.

    Attributes:
        project_root: The single known project root, or None
        mode: Operating mode; relative ``bin`` settings are refused in
            multi-root mode
    """

    project_root: Path | None = None
    mode: OperatingMode = OperatingMode.SINGLE_ROOT

    @classmethod
    def local(cls, root: Path) -> ResolutionContext:
        return cls(project_root=root, mode=OperatingMode.SINGLE_ROOT)

    @classmethod
    def unrooted(cls, mode: OperatingMode = OperatingMode.MULTI_ROOT) -> ResolutionContext:
        return cls(project_root=None, mode=mode)


@dataclass(frozen=True, slots=True)
class FindResult:
    """A binary located by the strategy chain.

    Attributes:
        binary: Absolute path to the binary
        kind: Identity of the strategy that found it
        label: Human-readable strategy label
    """

    binary: Path
    kind: StrategyKind
    label: str


@dataclass(frozen=True, slots=True)
class DiscoveryStrategy:
    """One entry of a strategy chain.

    Attributes:
        kind: Strategy identity, reported in the FindResult
        label: Short label shown to users ("PATH Environment Variable")
        name: Name used in diagnostics ("PATH Env Var Strategy")
        locate: Lookup returning a candidate binary or None
        precondition: Optional gate; a strategy whose precondition is false
            is skipped without counting as a failure
        on_success: Hook called with the accepted binary
    """

    kind: StrategyKind
    label: str
    name: str
    locate: Callable[[ResolutionContext], Path | None]
    precondition: Callable[[ResolutionContext], bool] | None = None
    on_success: Callable[[Path], None] | None = None


def has_project_root(context: ResolutionContext) -> bool:
    return context.project_root is not None


class Lookups:
    """The lookup behind each strategy, bound to its collaborators."""

    def __init__(
        self,
        *,
        constants: ServerConstants,
        settings: SettingsStore,
        console: ConsoleProtocol,
        module_resolver: ModuleResolver,
        pnp_loader: PnpLoader,
        downloader: Downloader,
        prompter: Prompter,
        env: Mapping[str, str] | None = None,
    ) -> None:
        self._constants = constants
        self._settings = settings
        self._console = console
        self._modules = module_resolver
        self._pnp_loader = pnp_loader
        self._downloader = downloader
        self._prompter = prompter
        self._env = env if env is not None else os.environ

    @property
    def console(self) -> ConsoleProtocol:
        return self._console

    def settings(self, context: ResolutionContext) -> Path | None:
        """Binary configured under ``bin``, as a path or per-platform table."""
        self._console.debug("Trying to find binary via settings")

        loaded = self._settings.load(context.project_root)
        if isinstance(loaded, Err):
            self._console.error(f"Invalid settings: {loaded.error}")
            return None

        setting = loaded.value.bin
        if setting is None:
            self._console.debug("Binary path not set in settings")
            return None

        if isinstance(setting, dict):
            identifier = self._constants.platform_identifier
            value = setting.get(identifier)
            if not value:
                self._console.debug(f"No binary setting for platform {identifier}")
                return None
        else:
            value = setting

        candidate = Path(value).expanduser()
        if not candidate.is_absolute():
            if context.mode is OperatingMode.MULTI_ROOT:
                self._console.error(MULTI_ROOT_RELATIVE_PATH_ERROR)
                return None
            if context.project_root is None:
                self._console.error(
                    f"Relative binary path {value!r} in settings cannot be resolved "
                    "without a project root"
                )
                return None
            candidate = context.project_root / candidate

        self._console.debug(f"Looking for binary at {candidate}")
        if candidate.is_file():
            return candidate

        self._console.debug("No binary found at the path configured in settings")
        return None

    def node_modules(self, context: ResolutionContext) -> Path | None:
        """Binary shipped by the platform package of an npm install."""
        root = context.project_root
        if root is None:
            return None
        self._console.debug("Trying to find binary in node_modules")

        for identity in self._constants.identities:
            manifest = self._modules.resolve(f"{identity.package_name}/package.json", root)
            if manifest is None:
                self._console.debug(f"Package {identity.package_name} is not installed")
                continue

            if identity.platform_package_name is None:
                self._console.debug(
                    f"No package for platform {self._constants.platform_identifier} "
                    "available in node_modules"
                )
                return None

            platform_manifest = self._modules.resolve(
                f"{identity.platform_package_name}/package.json", manifest
            )
            if platform_manifest is None:
                self._console.debug(
                    f"{identity.package_name} is installed but "
                    f"{identity.platform_package_name} is not"
                )
                continue

            binary = platform_manifest.parent / identity.binary_name
            if binary.is_file():
                return binary
            self._console.debug(f"Unable to find binary at {binary}")

        return None

    def yarn_pnp(self, context: ResolutionContext) -> Path | None:
        """Binary resolved through a Yarn Plug'n'Play manifest."""
        root = context.project_root
        if root is None:
            return None
        self._console.debug("Trying to find binary in Yarn Plug'n'Play")

        for manifest_name in PNP_MANIFEST_NAMES:
            manifest = root / manifest_name
            if not manifest.is_file():
                self._console.debug(f"No Plug'n'Play manifest {manifest_name}")
                continue

            resolver = self._pnp_loader(manifest)
            for identity in self._constants.identities:
                if identity.platform_package_name is None:
                    self._console.debug(
                        f"No package for platform {self._constants.platform_identifier} "
                        "available in Yarn Plug'n'Play"
                    )
                    continue

                package_json = resolver.resolve(f"{identity.package_name}/package.json", root)
                if package_json is None:
                    self._console.debug(
                        f"Unable to find package {identity.package_name} via Yarn Plug'n'Play"
                    )
                    continue

                binary = resolver.resolve(
                    f"{identity.platform_package_name}/{identity.binary_name}", package_json
                )
                if binary is not None:
                    return binary

        self._console.debug("Couldn't find binary via Yarn Plug'n'Play")
        return None

    def path_env(self, context: ResolutionContext) -> Path | None:
        """First PATH directory holding the binary under either name."""
        self._console.debug("Trying to find binary in PATH")

        path_env = self._env.get("PATH", "")
        if not path_env:
            self._console.debug("PATH environment variable is not set")
            return None

        delimiter = self._constants.platform.platform.path_delimiter
        for directory in path_env.split(delimiter):
            if not directory:
                continue
            for identity in self._constants.identities:
                candidate = Path(directory) / identity.binary_name
                if candidate.is_file():
                    return candidate

        self._console.debug("Couldn't find binary in PATH")
        return None

    def download(self, context: ResolutionContext) -> Path | None:
        """Previously downloaded binary, or a fresh download with consent."""
        self._console.debug("Trying to find downloaded binary")

        installed = self._downloader.installed_binary()
        if installed is not None:
            self._console.info(
                f"Using previously downloaded version {installed.version} at {installed.path}"
            )
            return installed.path

        consent = self._prompter.confirm(
            DOWNLOAD_CONSENT_MESSAGE, accept=DOWNLOAD_ACCEPT, decline=DOWNLOAD_DECLINE
        )
        if not consent:
            self._console.debug("Decided not to download binary, aborting")
            return None

        return self._downloader.prompt_and_download(self._prompter)

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from pgls.binary.constants import ServerConstants
from pgls.binary.downloader import Downloader
from pgls.binary.finder import BinaryFinder
from pgls.binary.http import HttpClient, RealHttpClient
from pgls.binary.modules import ModuleResolver, NodeModuleResolver, NodePnpResolver, PnpLoader
from pgls.binary.prompts import Prompter
from pgls.binary.provision import BinaryProvisioner
from pgls.binary.releases import ReleaseCatalog
from pgls.binary.strategies import Lookups
from pgls.binary.version import VersionProbe
from pgls.cli.prompts import TerminalPrompter
from pgls.core.config import SettingsStore
from pgls.output.console import ConsoleProtocol, RichConsole
from pgls.platform.detection import PlatformInfo, detect
from pgls.platform.paths import global_storage_dir, user_config_dir
from pgls.services.session import SessionService

VERBOSE_ENV = "PGLS_VERBOSE"
SETTINGS_FILE = "settings.toml"


@dataclass(frozen=True, slots=True)
class CLIContext:
    platform: PlatformInfo
    constants: ServerConstants
    storage_dir: Path
    settings: SettingsStore
    console: ConsoleProtocol
    http: HttpClient
    probe: VersionProbe
    catalog: ReleaseCatalog
    downloader: Downloader
    prompter: Prompter
    finder: BinaryFinder
    provisioner: BinaryProvisioner

    def session_service(self) -> SessionService:
        return SessionService(
            constants=self.constants,
            settings=self.settings,
            finder=self.finder,
            probe=self.probe,
            catalog=self.catalog,
            provisioner=self.provisioner,
            http=self.http,
            storage_dir=self.storage_dir,
            console=self.console,
        )


def assemble(
    *,
    platform: PlatformInfo,
    storage_dir: Path,
    settings: SettingsStore,
    console: ConsoleProtocol,
    http: HttpClient,
    prompter: Prompter,
    probe: VersionProbe,
    module_resolver: ModuleResolver,
    pnp_loader: PnpLoader,
    env: Mapping[str, str] | None = None,
) -> CLIContext:
    """Wire every component from its collaborators."""
    constants = ServerConstants.for_platform(platform)
    catalog = ReleaseCatalog(http, constants.releases_api, console=console)
    downloader = Downloader(
        http=http,
        constants=constants,
        storage_dir=storage_dir,
        probe=probe,
        catalog=catalog,
        console=console,
    )
    lookups = Lookups(
        constants=constants,
        settings=settings,
        console=console,
        module_resolver=module_resolver,
        pnp_loader=pnp_loader,
        downloader=downloader,
        prompter=prompter,
        env=env,
    )
    provisioner = BinaryProvisioner(
        storage_dir=storage_dir, constants=constants, probe=probe, console=console
    )
    return CLIContext(
        platform=platform,
        constants=constants,
        storage_dir=storage_dir,
        settings=settings,
        console=console,
        http=http,
        probe=probe,
        catalog=catalog,
        downloader=downloader,
        prompter=prompter,
        finder=BinaryFinder(lookups),
        provisioner=provisioner,
    )


def _pnp_loader(manifest: Path) -> ModuleResolver:
    return NodePnpResolver(manifest)


def build_context() -> CLIContext:
    return assemble(
        platform=detect(),
        storage_dir=global_storage_dir(),
        settings=SettingsStore(user_config_dir() / SETTINGS_FILE),
        console=RichConsole(verbose=os.environ.get(VERBOSE_ENV) == "1"),
        http=RealHttpClient(),
        prompter=TerminalPrompter(),
        probe=VersionProbe(),
        module_resolver=NodeModuleResolver(),
        pnp_loader=_pnp_loader,
    )

"""Locating, downloading and provisioning the language server binary."""

from .constants import BinaryIdentity, ServerConstants
from .downloader import DownloadedBinary, DownloadError, Downloader
from .finder import BinaryFinder, global_strategies, local_strategies, resolve
from .http import HttpClient, HttpError, MockHttpClient, RealHttpClient
from .modules import MockModuleResolver, ModuleResolver, NodeModuleResolver, NodePnpResolver
from .prompts import Prompter, ScriptedPrompter, VersionChoice
from .provision import BinaryProvisioner
from .releases import Release, ReleaseCatalog
from .strategies import (
    DiscoveryStrategy,
    FindResult,
    Lookups,
    OperatingMode,
    ResolutionContext,
    StrategyKind,
)
from .version import VersionProbe

__all__ = [
    "BinaryFinder",
    "BinaryIdentity",
    "BinaryProvisioner",
    "DiscoveryStrategy",
    "DownloadError",
    "DownloadedBinary",
    "Downloader",
    "FindResult",
    "HttpClient",
    "HttpError",
    "Lookups",
    "MockHttpClient",
    "MockModuleResolver",
    "ModuleResolver",
    "NodeModuleResolver",
    "NodePnpResolver",
    "OperatingMode",
    "Prompter",
    "RealHttpClient",
    "Release",
    "ReleaseCatalog",
    "ResolutionContext",
    "ScriptedPrompter",
    "ServerConstants",
    "StrategyKind",
    "VersionChoice",
    "VersionProbe",
    "global_strategies",
    "local_strategies",
    "resolve",
]

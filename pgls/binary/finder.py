"""Strategy chain: ordered discovery with first-success short-circuit.

Two orderings exist. The local one is used when a single project root is
known; the global one otherwise. Explicit settings always come first and the
download fallback always last, since it is the only strategy that may prompt
or touch the network.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from .strategies import (
    DiscoveryStrategy,
    FindResult,
    OperatingMode,
    ResolutionContext,
    StrategyKind,
    has_project_root,
)

if TYPE_CHECKING:
    from pgls.output.console import ConsoleProtocol

    from .strategies import Lookups

__all__ = [
    "BinaryFinder",
    "resolve",
    "local_strategies",
    "global_strategies",
]


def resolve(
    strategies: Sequence[DiscoveryStrategy],
    context: ResolutionContext,
    console: ConsoleProtocol,
) -> FindResult | None:
    """Evaluate ``strategies`` in order and return the first hit.

    Strategies after the first success are never evaluated. An exception
    raised by a strategy is reported and counts as "not found". A candidate
    is only accepted if it exists at the moment of acceptance.

    Returns:
        FindResult, or None when no strategy produced a binary.
    """
    for strategy in strategies:
        if strategy.precondition is not None and not strategy.precondition(context):
            console.debug(f"Skipping {strategy.name}: precondition not met")
            continue

        try:
            binary = strategy.locate(context)
        except Exception as e:  # noqa: BLE001
            console.error(f"{strategy.name} returned an error: {e}")
            continue

        if binary is None:
            console.debug(f"Binary not found with {strategy.name}")
            continue

        if not binary.is_file():
            console.debug(f"{strategy.name} returned {binary}, which does not exist")
            continue

        if strategy.on_success is not None:
            strategy.on_success(binary)
        return FindResult(binary=binary, kind=strategy.kind, label=strategy.label)

    return None


def _report(console: ConsoleProtocol, where: str) -> Callable[[Path], None]:
    def on_success(binary: Path) -> None:
        console.debug(f"Found binary in {where}: {binary}")

    return on_success


def _settings(lookups: Lookups) -> DiscoveryStrategy:
    return DiscoveryStrategy(
        kind=StrategyKind.SETTINGS,
        label="Settings",
        name="Settings Strategy",
        locate=lookups.settings,
        on_success=_report(lookups.console, "settings (postgres-language-server.bin)"),
    )


def _npm(lookups: Lookups) -> DiscoveryStrategy:
    return DiscoveryStrategy(
        kind=StrategyKind.NPM,
        label="NPM node_modules",
        name="Node Modules Strategy",
        locate=lookups.node_modules,
        precondition=has_project_root,
        on_success=_report(lookups.console, "node_modules"),
    )


def _yarn_pnp(lookups: Lookups) -> DiscoveryStrategy:
    return DiscoveryStrategy(
        kind=StrategyKind.YARN_PNP,
        label="Yarn Plug'n'Play node_modules",
        name="Yarn PnP Strategy",
        locate=lookups.yarn_pnp,
        precondition=has_project_root,
        on_success=_report(lookups.console, "Yarn PnP"),
    )


def _path(lookups: Lookups) -> DiscoveryStrategy:
    return DiscoveryStrategy(
        kind=StrategyKind.PATH,
        label="PATH Environment Variable",
        name="PATH Env Var Strategy",
        locate=lookups.path_env,
        on_success=_report(lookups.console, "PATH environment variable"),
    )


def _download(lookups: Lookups) -> DiscoveryStrategy:
    return DiscoveryStrategy(
        kind=StrategyKind.DOWNLOAD,
        label="Downloaded Binary",
        name="Download Strategy",
        locate=lookups.download,
        on_success=_report(lookups.console, "global storage"),
    )


def local_strategies(lookups: Lookups) -> tuple[DiscoveryStrategy, ...]:
    """Settings -> npm -> Yarn PnP -> PATH -> download."""
    return (_settings(lookups), _npm(lookups), _yarn_pnp(lookups), _path(lookups), _download(lookups))


def global_strategies(lookups: Lookups) -> tuple[DiscoveryStrategy, ...]:
    """Settings -> PATH -> download."""
    return (_settings(lookups), _path(lookups), _download(lookups))


class BinaryFinder:
    """Resolves the binary with the ordering that fits the context.

    Usage:
        finder = BinaryFinder(lookups)
        found = finder.find_locally(Path("/proj"))
        if found is not None:
            print(found.binary, found.label)
    """

    def __init__(
        self,
        lookups: Lookups,
        *,
        local: Sequence[DiscoveryStrategy] | None = None,
        global_: Sequence[DiscoveryStrategy] | None = None,
    ) -> None:
        self._console = lookups.console
        self._local = tuple(local) if local is not None else local_strategies(lookups)
        self._global = tuple(global_) if global_ is not None else global_strategies(lookups)

    @property
    def local(self) -> tuple[DiscoveryStrategy, ...]:
        return self._local

    @property
    def global_(self) -> tuple[DiscoveryStrategy, ...]:
        return self._global

    def find(self, context: ResolutionContext) -> FindResult | None:
        """Local ordering when the context has a root, global ordering otherwise."""
        if context.project_root is not None:
            self._console.debug("Using local strategies to find binary")
            found = resolve(self._local, context, self._console)
        else:
            self._console.debug("Using global strategies to find binary")
            found = resolve(self._global, context, self._console)

        if found is None:
            self._console.debug("Unable to find binary")
        return found

    def find_locally(self, root: Path) -> FindResult | None:
        return self.find(ResolutionContext.local(root))

    def find_globally(self, mode: OperatingMode = OperatingMode.MULTI_ROOT) -> FindResult | None:
        return self.find(ResolutionContext.unrooted(mode))

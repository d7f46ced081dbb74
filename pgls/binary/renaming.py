"""Handling of the postgrestools -> postgres-language-server rename."""

from __future__ import annotations

from typing import TYPE_CHECKING, assert_never

from pgls.core.result import Ok

from .strategies import StrategyKind

if TYPE_CHECKING:
    from .constants import ServerConstants
    from .http import HttpClient

__all__ = ["has_new_name", "renaming_message"]

_PACKAGE_MESSAGE = (
    "A new version of the Postgres Language Server is available! Make sure to use the new "
    "`@postgres-language-server/cli` package, as the old `@postgrestools/postgrestools` "
    "is being phased out."
)
_BINARY_MESSAGE = (
    "A new version of the Postgres Language Server is available! Make sure to get the binary "
    "from the new `postgres-language-server` name, as the old `postgrestools` is being "
    "phased out."
)


def has_new_name(http: HttpClient, constants: ServerConstants) -> bool:
    """True if the newest release publishes an asset under the current name."""
    return isinstance(http.head(constants.latest_asset_url(constants.current)), Ok)


def renaming_message(kind: StrategyKind) -> str:
    """Update notice tailored to how the binary was installed."""
    match kind:
        case StrategyKind.NPM | StrategyKind.YARN_PNP:
            return _PACKAGE_MESSAGE
        case StrategyKind.SETTINGS | StrategyKind.PATH | StrategyKind.DOWNLOAD:
            return _BINARY_MESSAGE
        case _:
            assert_never(kind)

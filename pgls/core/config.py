"""Typed settings loading and access.

Settings live in TOML files. The user file (``~/.config/pgls/settings.toml``)
is read first and a workspace file (``{root}/.pgls/settings.toml``) overrides
it key by key. Each file may carry two tables::

    [postgres-language-server]
    bin = "./node_modules/.bin/postgres-language-server"
    enabled = true

    [postgrestools]            # legacy name, consulted as a fallback
    bin = { linux-x64 = "/opt/pgt/postgrestools" }

A key is read from ``postgres-language-server`` unless it is missing, empty or
a boolean there, in which case the ``postgrestools`` value is used.
"""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_table

__all__ = [
    "ConfigError",
    "Settings",
    "SettingsStore",
    "BinSetting",
    "CURRENT_NAMESPACE",
    "LEGACY_NAMESPACE",
    "WORKSPACE_SETTINGS_PATH",
    "load_settings_file",
]

CURRENT_NAMESPACE = "postgres-language-server"
LEGACY_NAMESPACE = "postgrestools"
WORKSPACE_SETTINGS_PATH = Path(".pgls") / "settings.toml"

type BinSetting = str | dict[str, str]


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when a settings file cannot be loaded or parsed."""

    message: str
    path: Path | None = None

    def __str__(self) -> str:
        return self.message


def _empty() -> StrDict:
    return {}


@dataclass(frozen=True, slots=True)
class Settings:
    """Merged view over the current and legacy settings namespaces."""

    current: StrDict = field(default_factory=_empty)
    legacy: StrDict = field(default_factory=_empty)

    def get(self, key: str) -> object | None:
        """Look a key up in the current namespace, then the legacy one."""
        value = self.current.get(key)
        if value is not None and value != "" and not isinstance(value, bool):
            return value
        return self.legacy.get(key)

    def get_flag(self, key: str, default: bool = False) -> bool:
        """Boolean lookup; booleans are read current-first without the fallback rule."""
        for table in (self.current, self.legacy):
            value = table.get(key)
            if isinstance(value, bool):
                return value
        return default

    @property
    def bin(self) -> BinSetting | None:
        """The ``bin`` setting: a path or a ``{os}-{arch}`` -> path table."""
        value = self.get("bin")
        if isinstance(value, str):
            return value or None
        table = as_str_dict(value)
        if table is None:
            return None
        return {k: v for k, v in table.items() if isinstance(v, str)}

    @property
    def enabled(self) -> bool:
        return self.get_flag("enabled", default=True)

    @property
    def config_path(self) -> str | None:
        value = self.get("config_path")
        return value if isinstance(value, str) and value else None

    def overlay(self, other: Settings) -> Settings:
        """Return settings where keys from ``other`` replace keys in self."""
        return Settings(
            current={**self.current, **other.current},
            legacy={**self.legacy, **other.legacy},
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Settings:
        """Create Settings from a mapping (parsed TOML)."""
        return cls(
            current=get_table(data, CURRENT_NAMESPACE) or {},
            legacy=get_table(data, LEGACY_NAMESPACE) or {},
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and parse errors."""
    try:
        data_obj: object = tomllib.loads(path.read_bytes().decode("utf-8"))
    except FileNotFoundError:
        return Err(ConfigError(f"Settings file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax in {path}: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading {path}: {e}", path=path))

    data = as_str_dict(data_obj)
    if data is None:
        return Err(ConfigError("Settings root must be a TOML table", path=path))
    return Ok(data)


def load_settings_file(path: Path) -> Result[Settings, ConfigError]:
    """Load one settings file; a missing file yields empty settings."""
    if not path.exists():
        return Ok(Settings())

    result = _parse_toml(path)
    if isinstance(result, Err):
        return result
    return Ok(Settings.from_dict(result.value))


class SettingsStore:
    """Reads settings scoped to a project root (or unscoped).

    Usage:
        store = SettingsStore(user_config_dir() / "settings.toml")
        result = store.load(Path("/proj"))
    """

    def __init__(self, user_settings_path: Path | None) -> None:
        self._user_settings_path = user_settings_path

    @property
    def user_settings_path(self) -> Path | None:
        return self._user_settings_path

    def load(self, root: Path | None = None) -> Result[Settings, ConfigError]:
        """Load user settings overlaid with the workspace settings of ``root``.

        Args:
            root: Project root, or None for user-level settings only.

        Returns:
            Ok(Settings) on success, Err(ConfigError) if any file is malformed.
        """
        settings = Settings()
        paths: list[Path] = []
        if self._user_settings_path is not None:
            paths.append(self._user_settings_path)
        if root is not None:
            paths.append(root / WORKSPACE_SETTINGS_PATH)

        for path in paths:
            result = load_settings_file(path)
            if isinstance(result, Err):
                return result
            settings = settings.overlay(result.value)
        return Ok(settings)

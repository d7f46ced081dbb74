"""Platform-aware user directories.

The global storage root holds everything this tool writes: the downloaded
binary (``global-bin/``), provisioned per-version copies (``tmp-bin/``) and the
global state file.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from .detection import Platform, detect_platform

__all__ = [
    "APP_NAME",
    "home",
    "user_config_dir",
    "global_storage_dir",
    "clear_caches",
]

APP_NAME = "pgls"


@lru_cache(maxsize=1)
def home() -> Path:
    """Get user's home directory.

    Uses USERPROFILE on Windows, HOME on Unix, then Path.home().
    """
    if detect_platform() == Platform.WINDOWS:
        userprofile = os.environ.get("USERPROFILE")
        if userprofile:
            return Path(userprofile)
    else:
        home_env = os.environ.get("HOME")
        if home_env:
            return Path(home_env)

    return Path.home()


@lru_cache(maxsize=1)
def user_config_dir() -> Path:
    """Get the user-level configuration directory.

    Location: ~/.config/pgls/ (Linux/macOS) or ~/AppData/Roaming/pgls/ (Windows)
    """
    if detect_platform() == Platform.WINDOWS:
        app_data = os.environ.get("APPDATA")
        if app_data:
            return Path(app_data) / APP_NAME
        return home() / "AppData" / "Roaming" / APP_NAME

    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config) / APP_NAME
    return home() / ".config" / APP_NAME


@lru_cache(maxsize=1)
def global_storage_dir() -> Path:
    """Get the global storage root.

    PGLS_STORAGE_DIR wins, then the platform's user data directory:
    %LOCALAPPDATA%/pgls on Windows, $XDG_DATA_HOME/pgls or
    ~/.local/share/pgls elsewhere.
    """
    override = os.environ.get("PGLS_STORAGE_DIR")
    if override:
        return Path(override).expanduser()

    if detect_platform() == Platform.WINDOWS:
        local_app_data = os.environ.get("LOCALAPPDATA")
        if local_app_data:
            return Path(local_app_data) / APP_NAME
        return home() / "AppData" / "Local" / APP_NAME

    xdg_data = os.environ.get("XDG_DATA_HOME")
    if xdg_data:
        return Path(xdg_data) / APP_NAME
    return home() / ".local" / "share" / APP_NAME


def clear_caches() -> None:
    """Clear all cached paths.

    Useful for testing when environment variables change.
    """
    home.cache_clear()
    user_config_dir.cache_clear()
    global_storage_dir.cache_clear()

"""Platform abstraction layer.

Operating system and CPU detection, user directories, subprocess execution
and file helpers.
"""

from .detection import Arch, Platform, PlatformInfo, detect, detect_arch, detect_platform
from .files import atomic_write_text, is_executable, make_executable
from .paths import global_storage_dir, user_config_dir
from .process import ProcessError, run

__all__ = [
    "Arch",
    "Platform",
    "PlatformInfo",
    "ProcessError",
    "atomic_write_text",
    "detect",
    "detect_arch",
    "detect_platform",
    "global_storage_dir",
    "is_executable",
    "make_executable",
    "run",
    "user_config_dir",
]

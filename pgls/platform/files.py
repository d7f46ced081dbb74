"""Filesystem helpers."""

from __future__ import annotations

import os
import stat
import tempfile
from pathlib import Path

__all__ = ["atomic_write_text", "is_executable", "make_executable"]


def atomic_write_text(path: Path, content: str, *, encoding: str = "utf-8") -> None:
    """Write text to path atomically using temp file + replace."""
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{path.name}.",
        suffix=".tmp",
        dir=str(path.parent),
    )
    tmp_path = Path(tmp_name)

    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(content.encode(encoding))
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_path, path)
    finally:
        if tmp_path.exists():
            tmp_path.unlink(missing_ok=True)


def make_executable(path: Path) -> None:
    """Set rwxr-xr-x on path (no-op for the execute bits on Windows)."""
    path.chmod(0o755)


def is_executable(path: Path) -> bool:
    """True if path is a regular file the current user may execute.

    Windows has no execute bit; existence of a regular file is enough there.
    """
    try:
        mode = path.stat().st_mode
    except OSError:
        return False
    if not stat.S_ISREG(mode):
        return False
    if os.name == "nt":
        return True
    return os.access(path, os.X_OK)

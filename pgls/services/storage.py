"""Removal of everything the launcher wrote to global storage."""

from __future__ import annotations

import os
import shutil
import stat
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from pgls.binary.constants import GLOBAL_BIN_DIR, TMP_BIN_DIR
from pgls.binary.state import STATE_FILE
from pgls.core.result import Err, Ok, Result

if TYPE_CHECKING:
    from pgls.output.console import ConsoleProtocol

__all__ = ["ResetError", "reset_storage", "storage_entries"]


@dataclass(frozen=True, slots=True)
class ResetError:
    message: str
    path: Path


def _remove_readonly(_func: Callable[[str], object], path: str, exc: BaseException) -> None:
    if isinstance(exc, PermissionError):
        os.chmod(path, stat.S_IWRITE)
        os.unlink(path)
    else:
        raise exc


def storage_entries(storage_dir: Path) -> list[Path]:
    """Downloaded binaries, provisioned copies and the state file."""
    return [storage_dir / GLOBAL_BIN_DIR, storage_dir / TMP_BIN_DIR, storage_dir / STATE_FILE]


def reset_storage(storage_dir: Path, console: ConsoleProtocol) -> Result[list[Path], ResetError]:
    """Delete the entries of :func:`storage_entries` that exist.

    Returns:
        Ok with the removed paths, or Err on the first path that could not be removed.
    """
    removed: list[Path] = []
    for entry in storage_entries(storage_dir):
        if not entry.exists():
            continue
        try:
            if entry.is_dir():
                shutil.rmtree(entry, onexc=_remove_readonly)
            else:
                entry.unlink()
        except OSError as e:
            return Err(ResetError(message=f"Could not remove {entry}: {e}", path=entry))
        console.debug(f"Removed {entry}")
        removed.append(entry)
    return Ok(removed)

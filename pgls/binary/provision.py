"""Per-version copies of the resolved binary.

The server is never launched from the binary that was found. Package managers
and updates may replace or lock that file while the server runs, so it is
copied once per version to ``{storage}/tmp-bin/postgres-language-server-{version}``
and started from there.
"""

from __future__ import annotations

import os
import shutil
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

from pgls.core.errors import InvariantError
from pgls.platform.files import is_executable, make_executable

from .constants import TMP_BIN_DIR

if TYPE_CHECKING:
    from pgls.output.console import ConsoleProtocol

    from .constants import ServerConstants
    from .version import VersionProbe

__all__ = ["BinaryProvisioner"]

type CopyFn = Callable[[Path, Path], object]


class BinaryProvisioner:
    """Copies a binary into the version-keyed temp cache.

    Usage:
        provisioner = BinaryProvisioner(storage_dir=storage, constants=constants,
                                        probe=probe, console=console)
        launchable = provisioner.provision(found.binary)
    """

    def __init__(
        self,
        *,
        storage_dir: Path,
        constants: ServerConstants,
        probe: VersionProbe,
        console: ConsoleProtocol,
        copy: CopyFn = shutil.copyfile,
    ) -> None:
        self._storage_dir = storage_dir
        self._constants = constants
        self._probe = probe
        self._console = console
        self._copy = copy

    @property
    def cache_dir(self) -> Path:
        return self._storage_dir / TMP_BIN_DIR

    def cache_path(self, version: str) -> Path:
        return self.cache_dir / self._constants.versioned_binary_name(version)

    def provision(self, original: Path) -> Path | None:
        """Return the cached copy of ``original``, creating it if needed.

        An existing copy for the same version is reused as is. Copy failures
        are reported and yield None.

        Raises:
            InvariantError: ``original`` reports no version.
        """
        version = self._probe.version(original)
        if version is None:
            raise InvariantError(f"Binary at {original} exists but reports no version")

        destination = self.cache_path(version)
        if destination.is_file():
            self._console.debug(f"Reusing provisioned binary {destination}")
            try:
                make_executable(destination)
            except OSError as e:
                self._console.warning(f"Error making provisioned binary executable: {e}")
                return None
            return destination

        self._console.debug(
            f"Copying binary to temporary folder: {original} -> {destination} "
            f"(executable: {is_executable(original)})"
        )
        partial = destination.with_name(f".{destination.name}.part")
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            self._copy(original, partial)
            make_executable(partial)
            os.replace(partial, destination)
        except OSError as e:
            partial.unlink(missing_ok=True)
            self._console.warning(f"Error copying binary to temporary folder: {e}")
            return None

        self._console.debug(
            f"Provisioned {destination} (executable: {is_executable(destination)})"
        )
        return destination

"""On-demand download of the language server into global storage.

The downloaded binary lives at a fixed path, ``{storage}/global-bin/{name}``;
the file itself is the record of what is installed, and its version is read
back by probing it.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from pgls.core.errors import InvariantError
from pgls.core.result import Err, Ok, Result
from pgls.platform.files import make_executable

from .constants import GLOBAL_BIN_DIR
from .prompts import VersionChoice
from .renaming import has_new_name

if TYPE_CHECKING:
    from pgls.output.console import ConsoleProtocol

    from .constants import BinaryIdentity, ServerConstants
    from .http import HttpClient
    from .prompts import Prompter
    from .releases import ReleaseCatalog
    from .version import VersionProbe

__all__ = ["Downloader", "DownloadedBinary", "DownloadError", "PickFailure", "VERSION_PICKER_TITLE"]

VERSION_PICKER_TITLE = "Select Postgres Language Server version to download"

type PickFailure = Literal["no_releases", "cancelled"]


@dataclass(frozen=True, slots=True)
class DownloadedBinary:
    """A binary previously downloaded into global storage.

    Attributes:
        version: Version reported by the binary
        path: Location under ``global-bin/``
    """

    version: str
    path: Path


@dataclass(frozen=True, slots=True)
class DownloadError:
    """A download or save that did not complete.

    Attributes:
        version: Release tag that was requested
        url: Asset URL that was fetched
        message: What went wrong
    """

    version: str
    url: str
    message: str

    def __str__(self) -> str:
        if not self.url:
            return f"Failed to download binary version {self.version}: {self.message}"
        return f"Failed to download binary version {self.version} from {self.url}: {self.message}"


class Downloader:
    """Fetches release assets and installs them as the global binary.

    Usage:
        downloader = Downloader(http=http, constants=constants, storage_dir=storage,
                                probe=probe, catalog=catalog, console=console)
        result = downloader.download("0.8.1")
    """

    def __init__(
        self,
        *,
        http: HttpClient,
        constants: ServerConstants,
        storage_dir: Path,
        probe: VersionProbe,
        catalog: ReleaseCatalog,
        console: ConsoleProtocol,
    ) -> None:
        self._http = http
        self._constants = constants
        self._storage_dir = storage_dir
        self._probe = probe
        self._catalog = catalog
        self._console = console

    @property
    def global_bin_dir(self) -> Path:
        return self._storage_dir / GLOBAL_BIN_DIR

    def install_path(self, identity: BinaryIdentity) -> Path:
        """Where a downloaded binary with ``identity``'s name is stored."""
        return self.global_bin_dir / identity.binary_name

    def installed_binary(self) -> DownloadedBinary | None:
        """The previously downloaded binary, current name first.

        Raises:
            InvariantError: A binary exists but reports no version.
        """
        for identity in self._constants.identities:
            path = self.install_path(identity)
            if not path.is_file():
                self._console.debug(f"Downloaded binary does not exist: {path}")
                continue

            version = self._probe.version(path)
            if version is None:
                raise InvariantError(f"Downloaded binary at {path} exists but reports no version")

            self._console.debug(f"Found downloaded binary {path} (version {version})")
            return DownloadedBinary(version=version, path=path)
        return None

    def asset_url(self, version: str, identity: BinaryIdentity) -> str:
        return self._constants.release_asset_url(version, identity)

    def download(self, version: str) -> Result[Path, DownloadError]:
        """Download release ``version`` and install it as the global binary.

        The asset is fetched into a hidden partial file next to the target and
        moved into place only once complete, then marked executable.

        Returns:
            Ok with the installed path, or Err with DownloadError (already
            reported to the console).
        """
        if not self._constants.machine_supported:
            return self._fail(
                DownloadError(
                    version=version,
                    url="",
                    message=f"no release asset is published for {self._constants.platform_identifier}",
                )
            )

        identity = self._constants.current
        if not has_new_name(self._http, self._constants):
            identity = self._constants.legacy

        url = self.asset_url(version, identity)
        dest = self.install_path(identity)
        partial = dest.with_name(f".{dest.name}.part")
        self._console.debug(f"Downloading binary asset from {url}")

        fetched = self._http.download(url, partial)
        if isinstance(fetched, Err):
            partial.unlink(missing_ok=True)
            return self._fail(DownloadError(version=version, url=url, message=str(fetched.error)))

        try:
            os.replace(partial, dest)
            make_executable(dest)
        except OSError as e:
            partial.unlink(missing_ok=True)
            return self._fail(
                DownloadError(version=version, url=url, message=f"could not save to {dest}: {e}")
            )

        self._console.info(f"Downloaded Postgres Language Server {version} to {dest}")
        return Ok(dest)

    def _fail(self, error: DownloadError) -> Err[DownloadError]:
        self._console.error(str(error))
        return Err(error)

    def version_choices(self) -> list[VersionChoice]:
        """Picker entries for every known release, newest first."""
        try:
            installed = self.installed_binary()
        except InvariantError as e:
            self._console.warning(str(e))
            installed = None
        installed_version = installed.version if installed else None

        choices: list[VersionChoice] = []
        for index, release in enumerate(self._catalog.all()):
            markers: list[str] = []
            if index == 0:
                markers.append("latest")
            if release.prerelease:
                markers.append("prerelease")
            if release.tag == installed_version:
                markers.append("(currently installed)")
            choices.append(VersionChoice(tag=release.tag, description=", ".join(markers)))
        return choices

    def pick_version(self, prompter: Prompter) -> Result[str, PickFailure]:
        """Ask which release to install.

        Returns:
            Ok with the chosen tag, Err("no_releases") when the catalog is empty
            (reported as an error), or Err("cancelled") when nothing was picked.
        """
        choices = self.version_choices()
        if not choices:
            self._console.error("No Postgres Language Server releases are available for download")
            return Err("no_releases")

        tag = prompter.select_version(VERSION_PICKER_TITLE, choices)
        if tag is None:
            self._console.debug("No version to download selected, aborting")
            return Err("cancelled")
        return Ok(tag)

    def prompt_and_download(self, prompter: Prompter) -> Path | None:
        """Ask which version to install, then download it.

        Returns:
            Installed path, or None if nothing was picked or the download failed.
        """
        picked = self.pick_version(prompter)
        if isinstance(picked, Err):
            return None

        result = self.download(picked.value)
        if isinstance(result, Err):
            return None
        return result.value

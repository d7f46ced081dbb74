"""Tests for pgls.binary.downloader module."""

from __future__ import annotations

from pathlib import Path

import pytest

from pgls.binary.constants import ServerConstants
from pgls.binary.downloader import VERSION_PICKER_TITLE, Downloader
from pgls.binary.http import HttpError, MockHttpClient
from pgls.binary.prompts import ScriptedPrompter
from pgls.binary.releases import Release, ReleaseCatalog
from pgls.binary.version import VersionProbe
from pgls.core.errors import InvariantError
from pgls.core.result import Err, Ok
from pgls.output.console import MockConsole
from pgls.platform.detection import Arch, Platform, PlatformInfo
from pgls.platform.files import is_executable

CONSTANTS = ServerConstants.for_platform(PlatformInfo(platform=Platform.LINUX, arch=Arch.X64))


def _downloader(
    storage: Path,
    http: MockHttpClient,
    console: MockConsole,
    *,
    version: str | None = "0.8.1",
    releases: list[Release] | None = None,
) -> Downloader:
    output = f"Version: {version}" if version is not None else "no version here"
    return Downloader(
        http=http,
        constants=CONSTANTS,
        storage_dir=storage,
        probe=VersionProbe(lambda _cmd: Ok(output)),
        catalog=ReleaseCatalog.of(
            releases if releases is not None else [Release("0.8.1"), Release("0.8.0")]
        ),
        console=console,
    )


def _new_name_published(http: MockHttpClient) -> None:
    http.set_head(CONSTANTS.latest_asset_url(CONSTANTS.current), 200)


class TestDownload:
    """Downloading a release asset into global storage."""

    def test_downloads_current_name(self, tmp_path: Path) -> None:
        """With the new name published, the asset lands under the current name."""
        http = MockHttpClient()
        console = MockConsole()
        _new_name_published(http)
        url = CONSTANTS.release_asset_url("0.8.1", CONSTANTS.current)
        http.set_download(url, b"\x7fELF")

        result = _downloader(tmp_path, http, console).download("0.8.1")

        dest = tmp_path / "global-bin" / "postgres-language-server"
        assert result == Ok(dest)
        assert dest.read_bytes() == b"\x7fELF"
        assert is_executable(dest)
        assert http.calls_to("download") == [url]
        assert console.has_info()

    def test_falls_back_to_legacy_name(self, tmp_path: Path) -> None:
        """Without the new name, the legacy asset and file name are used."""
        http = MockHttpClient()
        url = CONSTANTS.release_asset_url("0.3.0", CONSTANTS.legacy)
        http.set_download(url, b"bin")

        result = _downloader(tmp_path, http, MockConsole()).download("0.3.0")

        assert result == Ok(tmp_path / "global-bin" / "postgrestools")

    def test_network_failure_reports_url_and_version(self, tmp_path: Path) -> None:
        """A failed fetch leaves nothing behind and names the URL and version."""
        http = MockHttpClient()
        console = MockConsole()
        _new_name_published(http)
        url = CONSTANTS.release_asset_url("0.8.1", CONSTANTS.current)
        http.set_download(url, HttpError(url=url, status=0, message="connection reset"))

        result = _downloader(tmp_path, http, console).download("0.8.1")

        assert isinstance(result, Err)
        assert result.error.url == url
        assert console.has_error()
        assert "0.8.1" in console.text
        assert url in console.text
        bin_dir = tmp_path / "global-bin"
        assert not bin_dir.exists() or list(bin_dir.iterdir()) == []

    def test_replaces_previous_download(self, tmp_path: Path) -> None:
        http = MockHttpClient()
        _new_name_published(http)
        http.set_download(CONSTANTS.release_asset_url("0.8.1", CONSTANTS.current), b"new")
        dest = tmp_path / "global-bin" / "postgres-language-server"
        dest.parent.mkdir(parents=True)
        dest.write_bytes(b"old")

        _downloader(tmp_path, http, MockConsole()).download("0.8.1")

        assert dest.read_bytes() == b"new"


class TestInstalledBinary:
    """Lookup of a previously downloaded binary."""

    def test_none_when_nothing_downloaded(self, tmp_path: Path) -> None:
        assert _downloader(tmp_path, MockHttpClient(), MockConsole()).installed_binary() is None

    def test_current_name_first(self, tmp_path: Path) -> None:
        bin_dir = tmp_path / "global-bin"
        bin_dir.mkdir()
        (bin_dir / "postgres-language-server").write_bytes(b"a")
        (bin_dir / "postgrestools").write_bytes(b"b")

        installed = _downloader(tmp_path, MockHttpClient(), MockConsole()).installed_binary()

        assert installed is not None
        assert installed.path == bin_dir / "postgres-language-server"
        assert installed.version == "0.8.1"

    def test_legacy_name(self, tmp_path: Path) -> None:
        bin_dir = tmp_path / "global-bin"
        bin_dir.mkdir()
        (bin_dir / "postgrestools").write_bytes(b"b")

        installed = _downloader(tmp_path, MockHttpClient(), MockConsole()).installed_binary()

        assert installed is not None
        assert installed.path == bin_dir / "postgrestools"

    def test_existing_binary_without_version_is_invariant_error(self, tmp_path: Path) -> None:
        bin_dir = tmp_path / "global-bin"
        bin_dir.mkdir()
        (bin_dir / "postgres-language-server").write_bytes(b"a")
        downloader = _downloader(tmp_path, MockHttpClient(), MockConsole(), version=None)

        with pytest.raises(InvariantError):
            downloader.installed_binary()


class TestVersionChoices:
    """Entries offered by the version picker."""

    def test_markers(self, tmp_path: Path) -> None:
        bin_dir = tmp_path / "global-bin"
        bin_dir.mkdir()
        (bin_dir / "postgres-language-server").write_bytes(b"a")
        releases = [Release("0.9.0-rc.1", prerelease=True), Release("0.8.1"), Release("0.8.0")]

        choices = _downloader(
            tmp_path, MockHttpClient(), MockConsole(), releases=releases
        ).version_choices()

        assert [c.tag for c in choices] == ["0.9.0-rc.1", "0.8.1", "0.8.0"]
        assert choices[0].description == "latest, prerelease"
        assert choices[1].description == "(currently installed)"
        assert choices[2].description == ""

    def test_prompt_and_download(self, tmp_path: Path) -> None:
        http = MockHttpClient()
        _new_name_published(http)
        http.set_download(CONSTANTS.release_asset_url("0.8.0", CONSTANTS.current), b"bin")
        prompter = ScriptedPrompter(version="0.8.0")

        path = _downloader(tmp_path, http, MockConsole()).prompt_and_download(prompter)

        assert path == tmp_path / "global-bin" / "postgres-language-server"
        assert prompter.asked == [VERSION_PICKER_TITLE]
        assert [c.tag for c in prompter.offered] == ["0.8.1", "0.8.0"]

    def test_cancelled_picker_downloads_nothing(self, tmp_path: Path) -> None:
        http = MockHttpClient()
        path = _downloader(tmp_path, http, MockConsole()).prompt_and_download(ScriptedPrompter())

        assert path is None
        assert http.calls_to("download") == []

    def test_no_releases(self, tmp_path: Path) -> None:
        console = MockConsole()
        prompter = ScriptedPrompter(version="0.8.1")
        downloader = _downloader(tmp_path, MockHttpClient(), console, releases=[])

        assert downloader.prompt_and_download(prompter) is None
        assert prompter.asked == []
        assert console.has_error()


class TestPickVersion:
    """Shared by the download fallback and the download command."""

    def test_chosen_tag(self, tmp_path: Path) -> None:
        prompter = ScriptedPrompter(version="0.8.0")
        picked = _downloader(tmp_path, MockHttpClient(), MockConsole()).pick_version(prompter)
        assert picked == Ok("0.8.0")

    def test_cancelled(self, tmp_path: Path) -> None:
        console = MockConsole()
        picked = _downloader(tmp_path, MockHttpClient(), console).pick_version(ScriptedPrompter())
        assert picked == Err("cancelled")
        assert not console.has_error()

    def test_no_releases_skips_prompt(self, tmp_path: Path) -> None:
        console = MockConsole()
        prompter = ScriptedPrompter(version="0.8.1")
        downloader = _downloader(tmp_path, MockHttpClient(), console, releases=[])

        assert downloader.pick_version(prompter) == Err("no_releases")
        assert prompter.asked == []
        assert console.has_error()


class TestUnsupportedMachine:
    def test_download_refused_without_network(self, tmp_path: Path) -> None:
        http = MockHttpClient()
        console = MockConsole()
        downloader = Downloader(
            http=http,
            constants=ServerConstants.for_platform(
                PlatformInfo(platform=Platform.UNKNOWN, arch=Arch.X64)
            ),
            storage_dir=tmp_path,
            probe=VersionProbe(lambda _cmd: Ok("0.8.1")),
            catalog=ReleaseCatalog.of([Release("0.8.1")]),
            console=console,
        )

        result = downloader.download("0.8.1")

        assert isinstance(result, Err)
        assert "unknown-x64" in result.error.message
        assert http.calls == []

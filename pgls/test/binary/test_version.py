"""Tests for pgls.binary.version module."""

from __future__ import annotations

from pathlib import Path

from pgls.binary.version import VersionProbe, parse_version_output
from pgls.core.result import Err, Ok, Result
from pgls.platform.process import ProcessError


class TestParseVersionOutput:
    def test_labelled_output(self) -> None:
        assert parse_version_output("CLI:    Version: 0.8.1\n") == "0.8.1"

    def test_bare_version(self) -> None:
        assert parse_version_output("0.12.0") == "0.12.0"

    def test_v_prefix_is_dropped(self) -> None:
        assert parse_version_output("postgrestools v0.3.2") == "0.3.2"

    def test_prerelease(self) -> None:
        assert parse_version_output("Version: 1.0.0-rc.1") == "1.0.0-rc.1"

    def test_no_version(self) -> None:
        assert parse_version_output("unknown") is None
        assert parse_version_output("") is None


class TestVersionProbe:
    def test_invokes_binary_with_version_flag(self) -> None:
        seen: list[list[str]] = []

        def runner(cmd: list[str]) -> Result[str, ProcessError]:
            seen.append(cmd)
            return Ok("Version: 0.8.1")

        probe = VersionProbe(runner)
        assert probe.version(Path("/usr/bin/postgres-language-server")) == "0.8.1"
        assert seen == [["/usr/bin/postgres-language-server", "--version"]]

    def test_failed_process_yields_none(self) -> None:
        def runner(cmd: list[str]) -> Result[str, ProcessError]:
            return Err(ProcessError(command=tuple(cmd), returncode=1, stdout="", stderr="boom"))

        assert VersionProbe(runner).version(Path("/bin/false")) is None

    def test_unparsable_output_yields_none(self) -> None:
        probe = VersionProbe(lambda _cmd: Ok("hello"))
        assert probe.version(Path("/bin/echo")) is None

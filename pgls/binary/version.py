"""Read the version a binary reports about itself."""

from __future__ import annotations

import re
from collections.abc import Callable
from pathlib import Path

from pgls.core.result import Err, Result
from pgls.platform.process import ProcessError, run

__all__ = ["VersionProbe", "parse_version_output", "VERSION_ARGS"]

VERSION_ARGS = ("--version",)
_TOKEN_RE = re.compile(r"\bv?(\d+\.\d+\.\d+(?:-[0-9A-Za-z.-]+)?)\b")

type Runner = Callable[[list[str]], Result[str, ProcessError]]


def parse_version_output(output: str) -> str | None:
    """Extract the first ``MAJOR.MINOR.PATCH[-pre]`` token from output.

    Example: "CLI:    Version: 0.8.1" -> "0.8.1"
    """
    m = _TOKEN_RE.search(output)
    return m.group(1) if m else None


def _default_runner(timeout: float) -> Runner:
    def runner(cmd: list[str]) -> Result[str, ProcessError]:
        return run(cmd, timeout=timeout)

    return runner


class VersionProbe:
    """Invokes ``{binary} --version`` and parses the reported version.

    A failing process or unparsable output yields None, never an exception.
    """

    def __init__(self, runner: Runner | None = None, *, timeout: float = 10.0) -> None:
        self._runner = runner or _default_runner(timeout)

    def version(self, binary: Path) -> str | None:
        result = self._runner([str(binary), *VERSION_ARGS])
        if isinstance(result, Err):
            return None
        return parse_version_output(result.value)

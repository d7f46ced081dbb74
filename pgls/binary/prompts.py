"""User prompt contract used by the download flow.

Rendering is the host's business; the resolution engine only needs a yes/no
answer to the consent question and a release tag from the version picker.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Protocol

__all__ = [
    "VersionChoice",
    "Prompter",
    "ScriptedPrompter",
    "DOWNLOAD_CONSENT_MESSAGE",
    "DOWNLOAD_ACCEPT",
    "DOWNLOAD_DECLINE",
]

DOWNLOAD_CONSENT_MESSAGE = (
    "No installed Postgres Language Server binary could be found on your system. "
    "Would you like to download and install Postgres Language Server?"
)
DOWNLOAD_ACCEPT = "Download and install"
DOWNLOAD_DECLINE = "No"


@dataclass(frozen=True, slots=True)
class VersionChoice:
    """One entry of the version picker.

    Attributes:
        tag: Release tag returned when this entry is picked
        description: Comma-joined markers ("latest", "prerelease",
            "(currently installed)")
    """

    tag: str
    description: str = ""


class Prompter(Protocol):
    """Asks the user questions on behalf of the download flow."""

    def confirm(self, message: str, *, accept: str, decline: str) -> bool:
        """Return True only on explicit consent."""
        ...

    def select_version(self, title: str, choices: Sequence[VersionChoice]) -> str | None:
        """Return the picked tag, or None if the user cancelled."""
        ...


def _no_strs() -> list[str]:
    return []


def _no_choices() -> list[VersionChoice]:
    return []


@dataclass
class ScriptedPrompter:
    """Prompter with canned answers, for tests and non-interactive use.

    Records every question so tests can assert on what would have been asked.
    """

    consent: bool = False
    version: str | None = None
    asked: list[str] = field(default_factory=_no_strs)
    offered: list[VersionChoice] = field(default_factory=_no_choices)

    def confirm(self, message: str, *, accept: str, decline: str) -> bool:
        self.asked.append(message)
        return self.consent

    def select_version(self, title: str, choices: Sequence[VersionChoice]) -> str | None:
        self.asked.append(title)
        self.offered = list(choices)
        return self.version

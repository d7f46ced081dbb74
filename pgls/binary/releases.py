"""Published releases of the language server.

The release index (GitHub's releases API) returns releases newest-first. The
catalog fetches it once and answers "what is the latest version" and "is this
installed version outdated" from the cached list.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from pgls.core.result import Err, Ok, Result
from pgls.core.structured import as_obj_list, as_str_dict, get_str

from .http import HttpError
from .semver import is_older

if TYPE_CHECKING:
    from pgls.output.console import ConsoleProtocol

    from .http import HttpClient

__all__ = ["Release", "ReleaseCatalog", "parse_releases"]


@dataclass(frozen=True, slots=True)
class Release:
    """A published release.

    Attributes:
        tag: Release tag, which is also the version string (e.g. "0.8.1")
        prerelease: True if GitHub marks the release as a pre-release
    """

    tag: str
    prerelease: bool = False


def parse_releases(text: str, url: str) -> Result[tuple[Release, ...], HttpError]:
    """Parse a releases API response body, preserving its order.

    Entries without a ``tag_name`` and drafts are skipped.
    """
    try:
        data: object = json.loads(text)
    except json.JSONDecodeError as e:
        return Err(HttpError(url=url, status=0, message=f"JSON parse error: {e}"))

    items = as_obj_list(data)
    if items is None:
        return Err(HttpError(url=url, status=0, message="Expected JSON array"))

    releases: list[Release] = []
    for item in items:
        entry = as_str_dict(item)
        if entry is None or entry.get("draft") is True:
            continue
        tag = get_str(entry, "tag_name")
        if tag is None:
            continue
        releases.append(Release(tag=tag, prerelease=entry.get("prerelease") is True))
    return Ok(tuple(releases))


class ReleaseCatalog:
    """Cached, newest-first list of releases.

    Usage:
        catalog = ReleaseCatalog(http, RELEASES_API)
        if catalog.version_outdated("0.8.0"):
            print(f"update to {catalog.latest_version()}")

    A catalog built with ``releases=`` never touches the network.
    """

    def __init__(
        self,
        http: HttpClient | None,
        url: str,
        *,
        releases: Sequence[Release] | None = None,
        console: ConsoleProtocol | None = None,
    ) -> None:
        self._http = http
        self._url = url
        self._console = console
        self._releases: tuple[Release, ...] | None = (
            tuple(releases) if releases is not None else None
        )

    @classmethod
    def of(cls, releases: Sequence[Release]) -> ReleaseCatalog:
        """Catalog over a fixed list of releases."""
        return cls(None, "", releases=releases)

    @property
    def url(self) -> str:
        return self._url

    def refresh(self) -> Result[tuple[Release, ...], HttpError]:
        """Fetch the release index and replace the cached list.

        The cache is left untouched if the fetch fails.
        """
        if self._http is None:
            return Ok(self._releases or ())

        text = self._http.get_text(self._url)
        if isinstance(text, Err):
            return text

        parsed = parse_releases(text.value, self._url)
        if isinstance(parsed, Ok):
            self._releases = parsed.value
        return parsed

    def all(self) -> tuple[Release, ...]:
        """All known releases, newest first. Fetched on first use.

        A failed fetch is reported and yields an empty list; it is retried on
        the next call.
        """
        if self._releases is None:
            result = self.refresh()
            if isinstance(result, Err):
                if self._console is not None:
                    self._console.warning(f"Could not fetch releases: {result.error}")
                return ()
        return self._releases or ()

    def latest(self) -> Release | None:
        releases = self.all()
        return releases[0] if releases else None

    def latest_version(self) -> str | None:
        latest = self.latest()
        return latest.tag if latest else None

    def version_outdated(self, version: str) -> bool:
        """True if ``version`` is older than the newest known release."""
        latest = self.latest_version()
        if latest is None:
            return False
        return is_older(version, latest)

"""Tests for pgls.binary.releases module."""

from __future__ import annotations

import json

from pgls.binary.constants import RELEASES_API
from pgls.binary.http import MockHttpClient
from pgls.binary.releases import Release, ReleaseCatalog, parse_releases
from pgls.core.result import Err, Ok
from pgls.output.console import MockConsole


def _body(*entries: dict[str, object]) -> str:
    return json.dumps(list(entries))


class TestParseReleases:
    def test_keeps_order_and_prerelease_flag(self) -> None:
        result = parse_releases(
            _body({"tag_name": "0.9.0-rc.1", "prerelease": True}, {"tag_name": "0.8.1"}),
            RELEASES_API,
        )
        assert isinstance(result, Ok)
        assert result.value == (Release("0.9.0-rc.1", prerelease=True), Release("0.8.1"))

    def test_skips_drafts_and_untagged(self) -> None:
        result = parse_releases(
            _body({"tag_name": "1.0.0", "draft": True}, {"name": "x"}, {"tag_name": "0.8.1"}),
            RELEASES_API,
        )
        assert isinstance(result, Ok)
        assert [r.tag for r in result.value] == ["0.8.1"]

    def test_invalid_json(self) -> None:
        result = parse_releases("<html>", RELEASES_API)
        assert isinstance(result, Err)
        assert "JSON" in result.error.message

    def test_non_array(self) -> None:
        assert isinstance(parse_releases('{"tag_name": "1.0.0"}', RELEASES_API), Err)


class TestReleaseCatalog:
    def test_outdated_against_newest(self) -> None:
        catalog = ReleaseCatalog.of([Release("2.0.0"), Release("1.9.0")])

        assert catalog.latest_version() == "2.0.0"
        assert catalog.version_outdated("1.9.0") is True
        assert catalog.version_outdated("2.0.0") is False

    def test_empty_catalog_never_outdated(self) -> None:
        catalog = ReleaseCatalog.of([])
        assert catalog.latest_version() is None
        assert catalog.version_outdated("0.1.0") is False

    def test_fetches_once(self) -> None:
        http = MockHttpClient()
        http.set_text(RELEASES_API, _body({"tag_name": "0.8.1"}, {"tag_name": "0.8.0"}))
        catalog = ReleaseCatalog(http, RELEASES_API)

        assert [r.tag for r in catalog.all()] == ["0.8.1", "0.8.0"]
        assert catalog.latest_version() == "0.8.1"
        assert catalog.version_outdated("0.8.0") is True
        assert http.calls_to("get_text") == [RELEASES_API]

    def test_fetch_failure_is_reported_and_empty(self) -> None:
        console = MockConsole()
        catalog = ReleaseCatalog(MockHttpClient(), RELEASES_API, console=console)

        assert catalog.all() == ()
        assert catalog.version_outdated("0.1.0") is False
        assert console.has_warning()

    def test_refresh_keeps_cache_on_failure(self) -> None:
        http = MockHttpClient()
        http.set_text(RELEASES_API, _body({"tag_name": "0.8.1"}))
        catalog = ReleaseCatalog(http, RELEASES_API)
        catalog.all()

        http.set_text(RELEASES_API, "garbage")
        assert isinstance(catalog.refresh(), Err)
        assert catalog.latest_version() == "0.8.1"

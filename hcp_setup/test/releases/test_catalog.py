"""Tests for hcp_setup.releases.catalog module."""

from __future__ import annotations

from hcp_setup.core.result import Err, Ok
from hcp_setup.output.console import MockConsole
from hcp_setup.releases.catalog import RELEASES_API, ReleaseCatalog
from hcp_setup.releases.errors import (
    DiscoveryError,
    NetworkError,
    NoCompliantVersionError,
    NoReleasesError,
    NotFoundError,
    ReleaseLookupError,
)
from hcp_setup.releases.model import MalformedReleaseError
from hcp_setup.releases.semver import InvalidRangeError
from hcp_setup.tools.http import HttpError, MockHttpClient

FIRST_PAGE = f"{RELEASES_API}/hcp?limit=20"


def _ts(day: int) -> str:
    return f"2024-01-{day:02d}T00:00:00.000Z"


def _release(version: str, day: int, *, prerelease: bool = False) -> dict[str, object]:
    return {
        "version": version,
        "name": "hcp",
        "is_prerelease": prerelease,
        "timestamp_created": _ts(day),
        "builds": [
            {
                "arch": "amd64",
                "os": "linux",
                "url": f"https://releases.example.test/hcp/{version}/hcp_{version}_linux_amd64.zip",
            }
        ],
    }


def _page_after(day: int) -> str:
    return f"{FIRST_PAGE}&after={_ts(day)}"


def _catalog(http: MockHttpClient) -> tuple[ReleaseCatalog, MockConsole]:
    console = MockConsole()
    return ReleaseCatalog(http, console), console


class TestUrls:
    def test_release_url_quotes_version(self) -> None:
        catalog, _ = _catalog(MockHttpClient())
        assert catalog.release_url("0.5.0") == f"{RELEASES_API}/hcp/0.5.0"
        assert catalog.release_url("1.0.0+a/b") == f"{RELEASES_API}/hcp/1.0.0%2Ba%2Fb"

    def test_page_url(self) -> None:
        catalog, _ = _catalog(MockHttpClient())
        assert catalog.page_url() == FIRST_PAGE
        assert catalog.page_url(_ts(3)) == _page_after(3)

    def test_custom_product_and_base(self) -> None:
        catalog = ReleaseCatalog(
            MockHttpClient(), MockConsole(), product="terraform", base_url="https://x.test/v1/"
        )
        assert catalog.product == "terraform"
        assert catalog.page_url() == "https://x.test/v1/terraform?limit=20"


class TestFetchRelease:
    """Exact version lookup."""

    def test_returns_matching_version(self) -> None:
        http = MockHttpClient()
        http.set_json(f"{RELEASES_API}/hcp/0.5.0", _release("0.5.0", 5))
        catalog, console = _catalog(http)

        result = catalog.fetch_release("0.5.0")

        assert isinstance(result, Ok)
        assert result.value.version == "0.5.0"
        assert len(http.calls) == 1
        assert console.debug_lines == [
            f"debug: Fetching release version from {RELEASES_API}/hcp/0.5.0"
        ]

    def test_not_found(self) -> None:
        http = MockHttpClient()
        catalog, _ = _catalog(http)

        result = catalog.fetch_release("9.9.9")

        assert isinstance(result, Err)
        assert isinstance(result.error, ReleaseLookupError)
        assert result.error.cause == NotFoundError("9.9.9")
        assert str(result.error) == (
            "Failed to retrieve hcp release for version 9.9.9: "
            "No release found for version 9.9.9"
        )

    def test_empty_body_is_not_found(self) -> None:
        http = MockHttpClient()
        http.set_json(f"{RELEASES_API}/hcp/0.5.0", None)
        catalog, _ = _catalog(http)

        result = catalog.fetch_release("0.5.0")

        assert isinstance(result, Err)
        assert isinstance(result.error.cause, NotFoundError)

    def test_network_error(self) -> None:
        http = MockHttpClient()
        url = f"{RELEASES_API}/hcp/0.5.0"
        http.set_json(url, HttpError(url=url, status=503, message="Service Unavailable"))
        catalog, _ = _catalog(http)

        result = catalog.fetch_release("0.5.0")

        assert isinstance(result, Err)
        assert isinstance(result.error.cause, NetworkError)
        assert result.error.cause.url == url

    def test_malformed_body(self) -> None:
        http = MockHttpClient()
        http.set_json(f"{RELEASES_API}/hcp/0.5.0", ["not", "a", "release"])
        catalog, _ = _catalog(http)

        result = catalog.fetch_release("0.5.0")

        assert isinstance(result, Err)
        assert isinstance(result.error.cause, MalformedReleaseError)

    def test_timestamp_not_needed(self) -> None:
        payload = _release("0.5.0", 5)
        del payload["timestamp_created"]
        http = MockHttpClient()
        http.set_json(f"{RELEASES_API}/hcp/0.5.0", payload)
        catalog, _ = _catalog(http)

        result = catalog.fetch_release("0.5.0")

        assert isinstance(result, Ok)
        assert result.value.version == "0.5.0"


class TestNewestCompliant:
    """Paginated range search."""

    def test_wildcard_returns_first_delivered_release(self) -> None:
        http = MockHttpClient()
        http.set_json(FIRST_PAGE, [_release("0.4.0", 9), _release("0.5.0", 8)])
        catalog, _ = _catalog(http)

        result = catalog.newest_compliant("*")

        assert isinstance(result, Ok)
        assert result.value.version == "0.4.0"
        assert len(http.calls) == 1

    def test_idempotent(self) -> None:
        http = MockHttpClient()
        http.set_json(FIRST_PAGE, [_release("0.5.0", 9), _release("0.4.0", 8)])
        catalog, _ = _catalog(http)

        first = catalog.newest_compliant("*")
        second = catalog.newest_compliant("*")

        assert first == second

    def test_skips_prereleases_for_wildcard(self) -> None:
        http = MockHttpClient()
        http.set_json(
            FIRST_PAGE, [_release("0.6.0-beta.1", 9, prerelease=True), _release("0.5.0", 8)]
        )
        catalog, _ = _catalog(http)

        result = catalog.newest_compliant("*")

        assert isinstance(result, Ok)
        assert result.value.version == "0.5.0"

    def test_skips_numeric_prereleases_for_wildcard(self) -> None:
        http = MockHttpClient()
        http.set_json(FIRST_PAGE, [_release("0.6.0-1", 9), _release("0.5.0", 8)])
        catalog, _ = _catalog(http)

        result = catalog.newest_compliant("*")

        assert isinstance(result, Ok)
        assert result.value.version == "0.5.0"

    def test_range_found_on_second_page(self) -> None:
        http = MockHttpClient()
        http.set_json(FIRST_PAGE, [_release("0.6.0", 9), _release("0.5.0", 8)])
        http.set_json(_page_after(8), [_release("0.4.2", 7), _release("0.4.1", 6)])
        catalog, console = _catalog(http)

        result = catalog.newest_compliant("^0.4.0")

        assert isinstance(result, Ok)
        assert result.value.version == "0.4.2"
        assert http.urls() == [FIRST_PAGE, _page_after(8)]
        assert console.debug_lines == [
            f"debug: Fetching releases from {FIRST_PAGE}",
            f"debug: Fetching releases from {_page_after(8)}",
        ]

    def test_cursor_is_oldest_timestamp_not_last(self) -> None:
        """The next page starts after the oldest release seen, wherever it is."""
        http = MockHttpClient()
        http.set_json(
            FIRST_PAGE,
            [_release("0.8.0", 5), _release("0.7.0", 3), _release("0.6.0", 8)],
        )
        http.set_json(_page_after(3), [_release("0.1.0", 2)])
        catalog, _ = _catalog(http)

        result = catalog.newest_compliant("<0.2.0")

        assert isinstance(result, Ok)
        assert result.value.version == "0.1.0"
        assert http.urls()[1] == _page_after(3)

    def test_no_compliant_version_when_history_is_exhausted(self) -> None:
        """A page with nothing older than the cursor ends the scan."""
        http = MockHttpClient()
        http.set_json(FIRST_PAGE, [_release("0.6.0", 9), _release("0.5.0", 8)])
        http.set_json(_page_after(8), [_release("0.5.0", 8)])
        catalog, _ = _catalog(http)

        result = catalog.newest_compliant("^0.1.0")

        assert isinstance(result, Err)
        assert isinstance(result.error, DiscoveryError)
        assert result.error.cause == NoCompliantVersionError("^0.1.0")
        assert len(http.calls) == 2
        assert str(result.error) == (
            "Failed to discover compatible hcp release: "
            "No releases satisfy version constraint ^0.1.0"
        )

    def test_empty_first_page(self) -> None:
        http = MockHttpClient()
        http.set_json(FIRST_PAGE, [])
        catalog, _ = _catalog(http)

        result = catalog.newest_compliant("*")

        assert isinstance(result, Err)
        assert result.error.cause == NoReleasesError()
        assert len(http.calls) == 1

    def test_empty_later_page(self) -> None:
        http = MockHttpClient()
        http.set_json(FIRST_PAGE, [_release("0.6.0", 9)])
        http.set_json(_page_after(9), [])
        catalog, _ = _catalog(http)

        result = catalog.newest_compliant("^0.1.0")

        assert isinstance(result, Err)
        assert result.error.cause == NoReleasesError(after=_ts(9))
        assert len(http.calls) == 2

    def test_null_page_is_empty(self) -> None:
        http = MockHttpClient()
        http.set_json(FIRST_PAGE, None)
        catalog, _ = _catalog(http)

        result = catalog.newest_compliant("*")

        assert isinstance(result, Err)
        assert isinstance(result.error.cause, NoReleasesError)

    def test_network_error_is_wrapped(self) -> None:
        http = MockHttpClient()
        http.set_json(FIRST_PAGE, HttpError(url=FIRST_PAGE, status=500, message="boom"))
        catalog, _ = _catalog(http)

        result = catalog.newest_compliant("*")

        assert isinstance(result, Err)
        assert isinstance(result.error, DiscoveryError)
        assert isinstance(result.error.cause, NetworkError)

    def test_non_list_page_is_malformed(self) -> None:
        http = MockHttpClient()
        http.set_json(FIRST_PAGE, {"releases": []})
        catalog, _ = _catalog(http)

        result = catalog.newest_compliant("*")

        assert isinstance(result, Err)
        assert isinstance(result.error.cause, MalformedReleaseError)

    def test_listed_release_with_bad_timestamp_is_malformed(self) -> None:
        undated = _release("0.6.0", 9)
        undated["timestamp_created"] = "last week"
        http = MockHttpClient()
        http.set_json(FIRST_PAGE, [undated, _release("0.5.0", 8)])
        catalog, _ = _catalog(http)

        result = catalog.newest_compliant("*")

        assert isinstance(result, Err)
        assert isinstance(result.error, DiscoveryError)
        assert isinstance(result.error.cause, MalformedReleaseError)

    def test_invalid_range_fails_without_requests(self) -> None:
        http = MockHttpClient()
        catalog, _ = _catalog(http)

        result = catalog.newest_compliant(">=banana")

        assert isinstance(result, Err)
        assert isinstance(result.error.cause, InvalidRangeError)
        assert http.calls == []

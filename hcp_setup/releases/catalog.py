"""Release Catalog Client.

Talks to the HashiCorp releases API:

- ``GET {base}/{product}/{version}``: one release
- ``GET {base}/{product}?limit=20[&after=<timestamp>]``: a page of releases,
  newest first

The API has no next-page token. The listing is paged by sending the creation
timestamp of the oldest release seen so far as ``after``; taking the minimum
over everything seen (not the last element) keeps pages with out-of-order
entries from skipping releases, at the cost of occasionally re-reading a few.
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from urllib.parse import quote

from hcp_setup.core.result import Err, Ok, Result
from hcp_setup.core.structured import as_obj_list
from hcp_setup.releases.errors import (
    DiscoveryError,
    NetworkError,
    NoCompliantVersionError,
    NoReleasesError,
    NotFoundError,
    ReleaseLookupError,
)
from hcp_setup.releases.model import MalformedReleaseError, ProductRelease
from hcp_setup.releases.semver import InvalidRangeError, VersionRange, parse_range

if TYPE_CHECKING:
    from datetime import datetime

    from hcp_setup.output.console import ConsoleProtocol
    from hcp_setup.tools.http import HttpClient

__all__ = ["ReleaseCatalog", "RELEASES_API", "PAGE_SIZE"]

RELEASES_API = "https://api.releases.hashicorp.com/v1/releases"
PAGE_SIZE = 20

type _DiscoveryCause = (
    NoReleasesError
    | NoCompliantVersionError
    | NetworkError
    | MalformedReleaseError
    | InvalidRangeError
)


class ReleaseCatalog:
    """Client for one product's release listing.

    Usage:
        catalog = ReleaseCatalog(RealHttpClient(), console)
        match catalog.newest_compliant(">=0.4.0 <1.0.0"):
            case Ok(release):
                print(release.version)
            case Err(error):
                console.error(str(error))
    """

    def __init__(
        self,
        http: HttpClient,
        console: ConsoleProtocol,
        *,
        product: str = "hcp",
        base_url: str = RELEASES_API,
        page_size: int = PAGE_SIZE,
    ) -> None:
        self._http = http
        self._console = console
        self._product = product
        self._base_url = base_url.rstrip("/")
        self._page_size = page_size

    @property
    def product(self) -> str:
        return self._product

    def release_url(self, version: str) -> str:
        return f"{self._base_url}/{self._product}/{quote(version, safe='')}"

    def page_url(self, after: str | None = None) -> str:
        url = f"{self._base_url}/{self._product}?limit={self._page_size}"
        if after:
            url += f"&after={quote(after, safe=':')}"
        return url

    def fetch_release(self, version: str) -> Result[ProductRelease, ReleaseLookupError]:
        """Fetch the release for one exact version.

        Returns:
            Ok with the release, or Err with ReleaseLookupError wrapping
            NotFoundError (404 or empty body), NetworkError or
            MalformedReleaseError.
        """
        url = self.release_url(version)
        self._console.debug(f"Fetching release version from {url}")

        def fail(
            cause: NotFoundError | NetworkError | MalformedReleaseError,
        ) -> Err[ReleaseLookupError]:
            return Err(ReleaseLookupError(version=version, cause=cause, product=self._product))

        response = self._http.get_json(url)
        if isinstance(response, Err):
            if response.error.is_not_found:
                return fail(NotFoundError(version))
            return fail(NetworkError(response.error))

        if response.value is None:
            return fail(NotFoundError(version))

        release = ProductRelease.from_dict(response.value)
        if isinstance(release, Err):
            return fail(release.error)
        return release

    def newest_compliant(self, version_spec: str) -> Result[ProductRelease, DiscoveryError]:
        """Return the first release, in catalog order, satisfying ``version_spec``.

        Scanning stops at the first match; no comparison is made between
        matches. Every failure is wrapped in DiscoveryError.
        """

        def wrap(cause: _DiscoveryCause) -> DiscoveryError:
            return DiscoveryError(version_spec=version_spec, cause=cause, product=self._product)

        parsed = parse_range(version_spec)
        if isinstance(parsed, Err):
            return parsed.map_err(wrap)
        return self._scan(parsed.value).map_err(wrap)

    def _scan(
        self, version_range: VersionRange
    ) -> Result[
        ProductRelease,
        NoReleasesError | NoCompliantVersionError | NetworkError | MalformedReleaseError,
    ]:
        cursor: str | None = None
        oldest: datetime | None = None

        while True:
            page = self._fetch_page(cursor)
            if isinstance(page, Err):
                return page
            if not page.value:
                return Err(NoReleasesError(after=cursor))

            next_cursor: str | None = None
            for release in page.value:
                if version_range.contains(release.version):
                    return Ok(release)

                created = release.created_at
                if oldest is None or created < oldest:
                    oldest = created
                    next_cursor = release.timestamp_created

            if next_cursor is None:
                return Err(NoCompliantVersionError(version_range.expr))
            cursor = next_cursor

    def _fetch_page(
        self, after: str | None
    ) -> Result[list[ProductRelease], NetworkError | MalformedReleaseError]:
        url = self.page_url(after)
        self._console.debug(f"Fetching releases from {url}")

        response = self._http.get_json(url)
        if isinstance(response, Err):
            return Err(NetworkError(response.error))
        if response.value is None:
            return Ok([])

        items = as_obj_list(response.value)
        if items is None:
            return Err(MalformedReleaseError(f"expected a list of releases from {url}"))

        releases: list[ProductRelease] = []
        for item in items:
            release = ProductRelease.from_dict(item, require_timestamp=True)
            if isinstance(release, Err):
                return release
            releases.append(release.value)
        return Ok(releases)

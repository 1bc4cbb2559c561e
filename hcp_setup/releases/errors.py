"""Error types for release resolution.

Inner errors describe one failure; the two outer errors
(``ReleaseLookupError`` for exact versions, ``DiscoveryError`` for ranges)
wrap them with the requested version so every resolution attempt fails with a
single shape and the original cause stays reachable through ``cause``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from hcp_setup.releases.model import MalformedReleaseError
from hcp_setup.releases.semver import InvalidRangeError

if TYPE_CHECKING:
    from hcp_setup.tools.http import HttpError

__all__ = [
    "NotFoundError",
    "NoReleasesError",
    "NoCompliantVersionError",
    "NetworkError",
    "MalformedReleaseError",
    "InvalidRangeError",
    "CatalogError",
    "ReleaseLookupError",
    "DiscoveryError",
    "ResolveError",
]


@dataclass(frozen=True, slots=True)
class NotFoundError:
    """The catalog has no release for an exact version."""

    version: str

    def __str__(self) -> str:
        return f"No release found for version {self.version}"


@dataclass(frozen=True, slots=True)
class NoReleasesError:
    """A listing page came back empty.

    Attributes:
        after: Cursor sent with the request, None for the first page
    """

    after: str | None = None

    def __str__(self) -> str:
        if self.after:
            return f"No releases found after {self.after}"
        return "No releases found"


@dataclass(frozen=True, slots=True)
class NoCompliantVersionError:
    """Pagination ended without a release satisfying the constraint."""

    version_spec: str

    def __str__(self) -> str:
        return f"No releases satisfy version constraint {self.version_spec}"


@dataclass(frozen=True, slots=True)
class NetworkError:
    """An HTTP call failed outright."""

    cause: HttpError

    @property
    def url(self) -> str:
        return self.cause.url

    def __str__(self) -> str:
        return str(self.cause)


type CatalogError = (
    NotFoundError
    | NoReleasesError
    | NoCompliantVersionError
    | NetworkError
    | MalformedReleaseError
    | InvalidRangeError
)


@dataclass(frozen=True, slots=True)
class ReleaseLookupError:
    """Fetching one exact version failed."""

    version: str
    cause: NotFoundError | NetworkError | MalformedReleaseError
    product: str = "hcp"

    def __str__(self) -> str:
        return (
            f"Failed to retrieve {self.product} release for version {self.version}: "
            f"{self.cause}"
        )


@dataclass(frozen=True, slots=True)
class DiscoveryError:
    """Searching the catalog for a version constraint failed."""

    version_spec: str
    cause: (
        NoReleasesError
        | NoCompliantVersionError
        | NetworkError
        | MalformedReleaseError
        | InvalidRangeError
    )
    product: str = "hcp"

    def __str__(self) -> str:
        return f"Failed to discover compatible {self.product} release: {self.cause}"


type ResolveError = ReleaseLookupError | DiscoveryError

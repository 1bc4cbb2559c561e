"""Release discovery: catalog records, version matching and resolution.

- Data model (model.py)
- Semantic versions and ranges (semver.py)
- Error taxonomy (errors.py)
- Release Catalog Client (catalog.py)
- Version Selector (selector.py)
"""

from hcp_setup.releases.catalog import PAGE_SIZE, RELEASES_API, ReleaseCatalog
from hcp_setup.releases.errors import (
    DiscoveryError,
    NetworkError,
    NoCompliantVersionError,
    NoReleasesError,
    NotFoundError,
    ReleaseLookupError,
)
from hcp_setup.releases.model import Build, MalformedReleaseError, ProductRelease
from hcp_setup.releases.selector import (
    CachedInstallation,
    ResolvedRelease,
    Strategy,
    resolve,
    resolve_release,
    select_strategy,
)
from hcp_setup.releases.semver import (
    WILDCARD,
    InvalidRangeError,
    VersionRange,
    is_valid,
    parse_range,
    satisfies,
)

__all__ = [
    # Model
    "Build",
    "ProductRelease",
    # Catalog
    "PAGE_SIZE",
    "RELEASES_API",
    "ReleaseCatalog",
    # Errors
    "DiscoveryError",
    "InvalidRangeError",
    "MalformedReleaseError",
    "NetworkError",
    "NoCompliantVersionError",
    "NoReleasesError",
    "NotFoundError",
    "ReleaseLookupError",
    # Selector
    "CachedInstallation",
    "ResolvedRelease",
    "Strategy",
    "resolve",
    "resolve_release",
    "select_strategy",
    # Semver
    "WILDCARD",
    "VersionRange",
    "is_valid",
    "parse_range",
    "satisfies",
]

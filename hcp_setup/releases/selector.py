"""Version Selector.

Turns the raw ``version`` input into one catalog query:

======================  ===============================================
input                   strategy
======================  ===============================================
"" (unset)              any cached install wins, else range search "*"
"latest"                range search "*"
exact semver            exact lookup
anything else           range search with the input as the constraint
======================  ===============================================

The cache is consulted only through the ``find_cached`` callable, so the
selector itself stays free of filesystem state.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path

from hcp_setup.core.result import Ok, Result
from hcp_setup.releases.catalog import ReleaseCatalog
from hcp_setup.releases.errors import ResolveError
from hcp_setup.releases.model import ProductRelease
from hcp_setup.releases.semver import WILDCARD, clean, is_valid

__all__ = [
    "LATEST",
    "Strategy",
    "CachedInstallation",
    "ResolvedRelease",
    "Resolution",
    "select_strategy",
    "resolve",
    "resolve_release",
]

LATEST = "latest"


class Strategy(Enum):
    """How a version input is resolved."""

    SHORT_CIRCUIT = auto()
    EXACT_LOOKUP = auto()
    RANGE_SEARCH = auto()

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")


@dataclass(frozen=True, slots=True)
class CachedInstallation:
    """An already installed version satisfies the request; nothing was fetched."""

    path: Path

    @property
    def strategy(self) -> Strategy:
        return Strategy.SHORT_CIRCUIT


@dataclass(frozen=True, slots=True)
class ResolvedRelease:
    """A release chosen from the catalog."""

    release: ProductRelease
    strategy: Strategy


type Resolution = CachedInstallation | ResolvedRelease


def select_strategy(raw_version: str) -> tuple[Strategy, str]:
    """Decide how to resolve ``raw_version`` without touching the network.

    Returns:
        (strategy, spec) where spec is the exact version or range to query.
        An unset version reports SHORT_CIRCUIT with the wildcard spec; it
        only short-circuits if the cache actually has a hit.
    """
    version = raw_version.strip()
    if not version:
        return Strategy.SHORT_CIRCUIT, WILDCARD
    if version == LATEST:
        return Strategy.RANGE_SEARCH, WILDCARD
    if is_valid(version):
        return Strategy.EXACT_LOOKUP, clean(version) or version
    return Strategy.RANGE_SEARCH, version


def resolve(
    catalog: ReleaseCatalog,
    raw_version: str,
    find_cached: Callable[[str], Path | None],
) -> Result[Resolution, ResolveError]:
    """Resolve a raw version input to a release or a cached installation.

    Args:
        catalog: Release catalog client
        raw_version: Version input ("", "latest", exact version or range)
        find_cached: Cache lookup by version spec, returning the install
            directory or None

    Returns:
        Ok with CachedInstallation or ResolvedRelease, or Err with the
        catalog's ReleaseLookupError / DiscoveryError unchanged.
    """
    strategy, spec = select_strategy(raw_version)

    if strategy is Strategy.SHORT_CIRCUIT:
        cached = find_cached(spec)
        if cached is not None:
            return Ok(CachedInstallation(path=cached))

    return resolve_release(catalog, raw_version)


def resolve_release(
    catalog: ReleaseCatalog, raw_version: str
) -> Result[ResolvedRelease, ResolveError]:
    """Resolve a raw version input against the catalog alone.

    An unset version is searched as "*", exactly like "latest".
    """
    strategy, spec = select_strategy(raw_version)
    if strategy is Strategy.EXACT_LOOKUP:
        exact = catalog.fetch_release(spec)
        return exact.map(lambda release: ResolvedRelease(release, Strategy.EXACT_LOOKUP))

    found = catalog.newest_compliant(spec)
    return found.map(lambda release: ResolvedRelease(release, Strategy.RANGE_SEARCH))

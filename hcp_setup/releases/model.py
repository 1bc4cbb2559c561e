"""Release catalog records.

These mirror the JSON documents served by the releases API::

    {
      "version": "0.5.0",
      "name": "hcp",
      "is_prerelease": false,
      "timestamp_created": "2024-05-02T17:01:22.000Z",
      "builds": [{"arch": "amd64", "os": "linux", "url": "https://..."}]
    }

Unknown keys are ignored.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timezone

from hcp_setup.core.result import Err, Ok, Result
from hcp_setup.core.structured import as_str_dict, get_bool, get_list, get_str

__all__ = ["Build", "ProductRelease", "MalformedReleaseError"]


@dataclass(frozen=True, slots=True)
class MalformedReleaseError:
    """A catalog payload that does not describe a release."""

    message: str

    def __str__(self) -> str:
        return f"malformed release record: {self.message}"


@dataclass(frozen=True, slots=True)
class Build:
    """One platform/architecture artifact of a release."""

    arch: str
    os: str
    url: str

    @classmethod
    def from_dict(cls, data: object) -> Result[Build, MalformedReleaseError]:
        table = as_str_dict(data)
        if table is None:
            return Err(MalformedReleaseError("build is not an object"))
        arch, os_id, url = get_str(table, "arch"), get_str(table, "os"), get_str(table, "url")
        if arch is None or os_id is None or url is None:
            return Err(MalformedReleaseError("build needs arch, os and url"))
        return Ok(cls(arch=arch, os=os_id, url=url))


@dataclass(frozen=True, slots=True)
class ProductRelease:
    """One published version of a product.

    Attributes:
        version: Semantic version string
        name: Product name (e.g., "hcp")
        is_prerelease: True for alpha/beta/rc releases
        timestamp_created: ISO-8601 creation time, used only for ordering
            (may be empty or invalid on a release fetched by version)
        builds: Artifacts in catalog order
    """

    version: str
    name: str
    is_prerelease: bool
    timestamp_created: str
    builds: tuple[Build, ...] = ()

    @classmethod
    def from_dict(
        cls, data: object, *, require_timestamp: bool = False
    ) -> Result[ProductRelease, MalformedReleaseError]:
        """Deserialize one release object from the API.

        Listing pages are ordered by ``timestamp_created``, so decode them with
        ``require_timestamp=True``. A single lookup never reads the field and
        accepts it missing or unparseable.
        """
        table = as_str_dict(data)
        if table is None:
            return Err(MalformedReleaseError("release is not an object"))
        return _release_from_table(table, require_timestamp=require_timestamp)

    @property
    def created_at(self) -> datetime:
        """Creation time as an aware datetime."""
        return parse_timestamp(self.timestamp_created)

    def build_for(self, os: str, arch: str) -> Build | None:
        """Return the first build for the ``(os, arch)`` pair, if any."""
        for build in self.builds:
            if build.os == os and build.arch == arch:
                return build
        return None


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp; a trailing ``Z`` means UTC.

    Raises:
        ValueError: If the value is not ISO-8601.
    """
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _release_from_table(
    table: Mapping[str, object], *, require_timestamp: bool
) -> Result[ProductRelease, MalformedReleaseError]:
    version = get_str(table, "version")
    if version is None:
        return Err(MalformedReleaseError("missing version"))

    timestamp = get_str(table, "timestamp_created")
    if require_timestamp:
        if timestamp is None:
            return Err(MalformedReleaseError(f"release {version} has no timestamp_created"))
        try:
            parse_timestamp(timestamp)
        except ValueError:
            return Err(
                MalformedReleaseError(f"release {version} has bad timestamp {timestamp!r}")
            )

    is_prerelease = get_bool(table, "is_prerelease")
    if is_prerelease is None:
        return Err(MalformedReleaseError(f"release {version} has non-boolean is_prerelease"))

    raw_builds = get_list(table, "builds") if table.get("builds") is not None else []
    if raw_builds is None:
        return Err(MalformedReleaseError(f"release {version} builds is not a list"))

    builds: list[Build] = []
    for raw in raw_builds:
        result = Build.from_dict(raw)
        if isinstance(result, Err):
            return Err(MalformedReleaseError(f"release {version}: {result.error.message}"))
        builds.append(result.value)

    return Ok(
        ProductRelease(
            version=version,
            name=get_str(table, "name") or "",
            is_prerelease=is_prerelease,
            timestamp_created=timestamp or "",
            builds=tuple(builds),
        )
    )

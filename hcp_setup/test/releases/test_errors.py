"""Tests for hcp_setup.releases.errors module."""

from __future__ import annotations

from hcp_setup.releases.errors import (
    DiscoveryError,
    NetworkError,
    NoReleasesError,
    NotFoundError,
    ReleaseLookupError,
)
from hcp_setup.tools.http import HttpError


class TestMessages:
    def test_no_releases(self) -> None:
        assert str(NoReleasesError()) == "No releases found"
        assert str(NoReleasesError(after="2024-01-01T00:00:00Z")) == (
            "No releases found after 2024-01-01T00:00:00Z"
        )

    def test_network_error_keeps_http_details(self) -> None:
        error = NetworkError(HttpError(url="https://x.test", status=502, message="Bad Gateway"))
        assert error.url == "https://x.test"
        assert str(error) == "HTTP 502: Bad Gateway (https://x.test)"

    def test_wrappers_use_product(self) -> None:
        lookup = ReleaseLookupError("1.0.0", NotFoundError("1.0.0"), product="terraform")
        assert str(lookup).startswith("Failed to retrieve terraform release for version 1.0.0: ")
        discovery = DiscoveryError("*", NoReleasesError(), product="terraform")
        assert str(discovery) == (
            "Failed to discover compatible terraform release: No releases found"
        )

from __future__ import annotations

from pathlib import Path

import pytest

from hcp_setup.cli.commands._helpers import exit_code_for
from hcp_setup.core.errors import ErrorCode
from hcp_setup.platform.detection import Arch, Platform, UnsupportedPlatformError
from hcp_setup.releases.errors import (
    DiscoveryError,
    NetworkError,
    NoCompliantVersionError,
    NoReleasesError,
    NotFoundError,
    ReleaseLookupError,
)
from hcp_setup.releases.semver import InvalidRangeError
from hcp_setup.services.setup import SetupError
from hcp_setup.tools.http import HttpError
from hcp_setup.tools.installer import InstallError

_HTTP = HttpError(url="https://x.test", status=500, message="boom")


@pytest.mark.parametrize(
    ("error", "code"),
    [
        (UnsupportedPlatformError(Platform.UNKNOWN, Arch.X64), ErrorCode.ENV_ERROR),
        (ReleaseLookupError("1.0.0", NotFoundError("1.0.0")), ErrorCode.DISCOVERY_ERROR),
        (ReleaseLookupError("1.0.0", NetworkError(_HTTP)), ErrorCode.NETWORK_ERROR),
        (DiscoveryError("*", NoReleasesError()), ErrorCode.DISCOVERY_ERROR),
        (DiscoveryError("^9", NoCompliantVersionError("^9")), ErrorCode.DISCOVERY_ERROR),
        (DiscoveryError("*", NetworkError(_HTTP)), ErrorCode.NETWORK_ERROR),
        (DiscoveryError("x", InvalidRangeError("x", "bad")), ErrorCode.USER_ERROR),
        (InstallError(path=Path("a"), message="IO error"), ErrorCode.INSTALL_ERROR),
    ],
)
def test_exit_code_for(error: SetupError, code: ErrorCode) -> None:
    assert exit_code_for(error) == code

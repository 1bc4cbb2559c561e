"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn

import typer

from hcp_setup.core.errors import ErrorCode
from hcp_setup.platform.detection import UnsupportedPlatformError
from hcp_setup.releases.errors import DiscoveryError, NetworkError, ReleaseLookupError
from hcp_setup.releases.semver import InvalidRangeError

if TYPE_CHECKING:
    from hcp_setup.output.console import ConsoleProtocol
    from hcp_setup.services.setup import SetupError


def exit_code_for(error: SetupError) -> ErrorCode:
    """Map a failed run to its process exit code."""
    if isinstance(error, UnsupportedPlatformError):
        return ErrorCode.ENV_ERROR
    if isinstance(error, ReleaseLookupError | DiscoveryError):
        if isinstance(error.cause, NetworkError):
            return ErrorCode.NETWORK_ERROR
        if isinstance(error.cause, InvalidRangeError):
            return ErrorCode.USER_ERROR
        return ErrorCode.DISCOVERY_ERROR
    return ErrorCode.INSTALL_ERROR


def fail(console: ConsoleProtocol, error: SetupError) -> NoReturn:
    """Report a failed run and exit with the mapped code."""
    console.error(f"hcp-setup failed: {error}")
    raise typer.Exit(code=int(exit_code_for(error)))

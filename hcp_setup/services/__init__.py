"""Install orchestration."""

from hcp_setup.services.setup import TOOL_NAME, SetupError, SetupOutcome, SetupService

__all__ = ["SetupError", "SetupOutcome", "SetupService", "TOOL_NAME"]

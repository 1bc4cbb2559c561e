"""Typed run configuration.

hcp-setup runs as a CI step, so its settings arrive through the runner's
environment (``INPUT_*`` for step inputs, ``RUNNER_*``/``GITHUB_*`` for the
runner itself). Command-line options override them.
"""

from __future__ import annotations

import tempfile
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path

from .result import Err, Ok, Result

__all__ = [
    "SetupConfig",
    "ConfigError",
    "DEFAULT_TIMEOUT",
]

DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when a configuration value cannot be used."""

    message: str
    key: str | None = None

    def __str__(self) -> str:
        if self.key:
            return f"{self.key}: {self.message}"
        return self.message


@dataclass(frozen=True, slots=True)
class SetupConfig:
    """Settings for one hcp-setup run.

    Attributes:
        version: Raw version specifier ("", "latest", exact version or range)
        project_id: HCP project to select in the CLI profile, if any
        tool_cache_dir: Root of the persistent tool cache
        temp_dir: Scratch directory for downloads and extraction
        github_path_file: Runner file collecting PATH additions for later steps
        debug: Emit debug lines
        timeout: HTTP timeout in seconds
    """

    version: str = ""
    project_id: str = ""
    tool_cache_dir: Path = Path("tool-cache")
    temp_dir: Path = Path(tempfile.gettempdir())
    github_path_file: Path | None = None
    debug: bool = False
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def from_env(cls, env: Mapping[str, str]) -> Result[SetupConfig, ConfigError]:
        """Build configuration from runner environment variables."""
        from hcp_setup.platform.paths import user_cache_dir

        timeout = DEFAULT_TIMEOUT
        raw_timeout = env.get("HCP_SETUP_TIMEOUT", "").strip()
        if raw_timeout:
            try:
                timeout = float(raw_timeout)
            except ValueError:
                return Err(ConfigError(f"not a number: {raw_timeout!r}", key="HCP_SETUP_TIMEOUT"))
            if timeout <= 0:
                return Err(ConfigError("must be positive", key="HCP_SETUP_TIMEOUT"))

        tool_cache = env.get("RUNNER_TOOL_CACHE", "").strip()
        temp = env.get("RUNNER_TEMP", "").strip()
        github_path = env.get("GITHUB_PATH", "").strip()

        return Ok(
            cls(
                version=env.get("INPUT_VERSION", "").strip(),
                project_id=env.get("INPUT_PROJECT_ID", "").strip(),
                tool_cache_dir=(
                    Path(tool_cache) if tool_cache else user_cache_dir() / "tool-cache"
                ),
                temp_dir=Path(temp) if temp else Path(tempfile.gettempdir()),
                github_path_file=Path(github_path) if github_path else None,
                debug=env.get("RUNNER_DEBUG", "").strip() == "1",
                timeout=timeout,
            )
        )

    def with_overrides(
        self,
        *,
        version: str | None = None,
        project_id: str | None = None,
        tool_cache_dir: Path | None = None,
        debug: bool = False,
    ) -> SetupConfig:
        """Return a copy with command-line values applied on top."""
        return replace(
            self,
            version=self.version if version is None else version.strip(),
            project_id=self.project_id if project_id is None else project_id.strip(),
            tool_cache_dir=self.tool_cache_dir if tool_cache_dir is None else tool_cache_dir,
            debug=self.debug or debug,
        )

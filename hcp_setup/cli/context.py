from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import typer

from hcp_setup.core.config import SetupConfig
from hcp_setup.core.errors import ErrorCode
from hcp_setup.core.result import Err
from hcp_setup.output.console import ConsoleProtocol, RichConsole
from hcp_setup.platform.detection import PlatformInfo, detect


@dataclass(frozen=True, slots=True)
class CLIContext:
    config: SetupConfig
    platform: PlatformInfo
    console: ConsoleProtocol


def build_context(
    *,
    version: str | None = None,
    project_id: str | None = None,
    tool_cache: Path | None = None,
    debug: bool = False,
) -> CLIContext:
    config_result = SetupConfig.from_env(os.environ)
    if isinstance(config_result, Err):
        typer.echo(f"error: {config_result.error}", err=True)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    config = config_result.value.with_overrides(
        version=version,
        project_id=project_id,
        tool_cache_dir=tool_cache,
        debug=debug,
    )

    return CLIContext(
        config=config,
        platform=detect(),
        console=RichConsole(debug=config.debug),
    )

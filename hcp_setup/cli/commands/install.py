from __future__ import annotations

from pathlib import Path

import typer

from hcp_setup.cli.commands._helpers import fail
from hcp_setup.cli.context import build_context
from hcp_setup.core.result import Err
from hcp_setup.output.console import Style
from hcp_setup.services.setup import SetupService


def install(
    version: str | None = typer.Option(
        None,
        "--version",
        help="Version to install: empty, 'latest', an exact version or a range.",
    ),
    project_id: str | None = typer.Option(
        None,
        "--project-id",
        help="HCP project to select in the CLI profile.",
    ),
    tool_cache: Path | None = typer.Option(
        None,
        "--tool-cache",
        help="Tool cache root (overrides RUNNER_TOOL_CACHE).",
    ),
    debug: bool = typer.Option(False, "--debug", help="Print debug output."),
) -> None:
    """Install the hcp CLI and add it to PATH."""
    ctx = build_context(
        version=version,
        project_id=project_id,
        tool_cache=tool_cache,
        debug=debug,
    )
    service = SetupService(config=ctx.config, platform=ctx.platform, console=ctx.console)

    result = service.install()
    if isinstance(result, Err):
        fail(ctx.console, result.error)

    outcome = result.value
    source = "cache" if outcome.from_cache else "download"
    ctx.console.success(f"hcp {outcome.version} ready ({source})")
    ctx.console.print(str(outcome.path), Style.DIM)

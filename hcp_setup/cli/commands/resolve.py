from __future__ import annotations

import typer

from hcp_setup.cli.commands._helpers import fail
from hcp_setup.cli.context import build_context
from hcp_setup.core.result import Err
from hcp_setup.output.console import Style
from hcp_setup.services.setup import SetupService


def resolve(
    version: str | None = typer.Option(
        None,
        "--version",
        help="Version to resolve: empty, 'latest', an exact version or a range.",
    ),
    debug: bool = typer.Option(False, "--debug", help="Print debug output."),
) -> None:
    """Resolve a version against the release catalog without installing."""
    ctx = build_context(version=version, debug=debug)
    service = SetupService(config=ctx.config, platform=ctx.platform, console=ctx.console)

    resolved = service.resolve_release()
    if isinstance(resolved, Err):
        fail(ctx.console, resolved.error)

    release = resolved.value.release
    ctx.console.print(release.version)

    build = service.host_build(release)
    if isinstance(build, Err):
        fail(ctx.console, build.error)
    ctx.console.print(build.value.url, Style.DIM)

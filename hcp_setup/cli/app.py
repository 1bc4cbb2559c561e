from __future__ import annotations

import typer

from hcp_setup import __version__
from hcp_setup.cli.commands.install import install
from hcp_setup.cli.commands.resolve import resolve


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# Commands
app.command()(install)
app.command()(resolve)


@app.callback(invoke_without_command=True)
def _main(  # pyright: ignore[reportUnusedFunction]
    ctx: typer.Context,
    about: bool = typer.Option(False, "--about", help="Show version and exit."),
) -> None:
    if about:
        typer.echo(__version__)
        raise typer.Exit(code=0)

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(code=0)


def main() -> None:
    app()

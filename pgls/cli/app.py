from __future__ import annotations

import os

import typer

from pgls import __version__
from pgls.cli.commands.download import download
from pgls.cli.commands.find import find
from pgls.cli.commands.reset import reset
from pgls.cli.commands.start import start
from pgls.cli.commands.version import version
from pgls.cli.context import VERBOSE_ENV

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.command()(find)
app.command()(start)
app.command()(download)
app.command()(version)
app.command()(reset)


def _show_version(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=0)


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    show_version: bool = typer.Option(
        False, "--version", callback=_show_version, is_eager=True, help="Show version and exit."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug output."),
) -> None:
    if verbose:
        os.environ[VERBOSE_ENV] = "1"


def main() -> None:
    app()

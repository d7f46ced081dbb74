from __future__ import annotations

from pathlib import Path

import typer

from pgls.cli.commands._helpers import ROOT_OPTION_HELP, normalize_roots, resolution_context
from pgls.cli.context import build_context
from pgls.core.errors import ErrorCode, InvariantError
from pgls.services.session import NOT_FOUND_MESSAGE


def version(
    root: list[Path] | None = typer.Option(None, "--root", "-r", help=ROOT_OPTION_HELP),
) -> None:
    """Print the version of the binary that would be used."""
    ctx = build_context()
    found = ctx.finder.find(resolution_context(normalize_roots(root)))
    if found is None:
        ctx.console.error(NOT_FOUND_MESSAGE)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    reported = ctx.probe.version(found.binary)
    if reported is None:
        raise InvariantError(f"Binary at {found.binary} exists but reports no version")
    typer.echo(reported)

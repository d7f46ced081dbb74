from __future__ import annotations

from pathlib import Path

import typer

from pgls.cli.commands._helpers import ROOT_OPTION_HELP, normalize_roots, resolution_context
from pgls.cli.context import build_context
from pgls.core.errors import ErrorCode
from pgls.output.console import Style
from pgls.services.session import NOT_FOUND_MESSAGE


def find(
    root: list[Path] | None = typer.Option(None, "--root", "-r", help=ROOT_OPTION_HELP),
) -> None:
    """Show which binary would be used and how it was found."""
    ctx = build_context()
    found = ctx.finder.find(resolution_context(normalize_roots(root)))
    if found is None:
        ctx.console.error(NOT_FOUND_MESSAGE)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    version = ctx.probe.version(found.binary)
    ctx.console.print(str(found.binary), Style.BOLD)
    ctx.console.print(f"  strategy: {found.label}", Style.DIM)
    ctx.console.print(f"  version:  {version or 'unknown'}", Style.DIM)

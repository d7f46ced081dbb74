from __future__ import annotations

import typer

from pgls.cli.context import build_context
from pgls.core.errors import ErrorCode
from pgls.core.result import Err


def download(
    tag: str | None = typer.Argument(None, help="Release tag to install (default: ask)"),
) -> None:
    """Download a release into global storage, replacing any previous download."""
    ctx = build_context()

    if tag is None:
        picked = ctx.downloader.pick_version(ctx.prompter)
        if isinstance(picked, Err) and picked.error == "cancelled":
            ctx.console.info("No version selected")
            return
        if isinstance(picked, Err):
            raise typer.Exit(code=int(ErrorCode.NETWORK_ERROR))
        tag = picked.value

    result = ctx.downloader.download(tag)
    if isinstance(result, Err):
        raise typer.Exit(code=int(ErrorCode.NETWORK_ERROR))
    ctx.console.success(f"Installed {tag}")

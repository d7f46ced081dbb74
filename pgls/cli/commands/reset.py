from __future__ import annotations

import typer

from pgls.cli.commands._helpers import exit_on_error
from pgls.cli.context import build_context
from pgls.core.errors import ErrorCode
from pgls.output.console import Style
from pgls.services.storage import reset_storage, storage_entries


def reset(
    yes: bool = typer.Option(False, "--yes", "-y", help="Execute (default is dry-run)"),
) -> None:
    """Delete downloaded binaries, provisioned copies and global state."""
    ctx = build_context()

    existing = [p for p in storage_entries(ctx.storage_dir) if p.exists()]
    if not existing:
        ctx.console.print("Nothing to reset", Style.DIM)
        return

    ctx.console.print("EXECUTE" if yes else "DRY-RUN", Style.BOLD if yes else Style.WARNING)
    for path in existing:
        ctx.console.print(f"  {path}", Style.DIM)

    if not yes:
        ctx.console.print("Use -y to execute", Style.DIM)
        return

    result = reset_storage(ctx.storage_dir, ctx.console)
    exit_on_error(result, ctx, error_code=ErrorCode.IO_ERROR)
    ctx.console.success(f"Removed {len(existing)} entries")

"""Shared helpers for CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import typer

from pgls.binary.strategies import OperatingMode, ResolutionContext
from pgls.core.errors import ErrorCode
from pgls.core.result import Err, Result
from pgls.output.console import Style

if TYPE_CHECKING:
    from pgls.cli.context import CLIContext

ROOT_OPTION_HELP = "Project root (repeat for a multi-root workspace)"


def exit_on_error[T, E](
    result: Result[T, E],
    ctx: CLIContext,
    error_code: ErrorCode = ErrorCode.ENV_ERROR,
) -> None:
    """Report an Err through the console and exit; return on Ok.

    Expects error objects to have 'message' and optional 'hint' attributes.
    """
    if isinstance(result, Err):
        error = result.error
        message: str = getattr(error, "message", str(error))
        hint: str | None = getattr(error, "hint", None)
        ctx.console.error(message)
        if hint:
            ctx.console.print(f"hint: {hint}", Style.DIM)
        raise typer.Exit(code=int(error_code))


def normalize_roots(roots: list[Path] | None) -> list[Path]:
    """Absolute, de-duplicated roots in the order given."""
    seen: list[Path] = []
    for root in roots or []:
        resolved = root.expanduser().resolve()
        if resolved not in seen:
            seen.append(resolved)
    return seen


def resolution_context(roots: list[Path]) -> ResolutionContext:
    """Context for the strategy chain; the current directory stands in for no root."""
    if not roots:
        return ResolutionContext.local(Path.cwd())
    if len(roots) == 1:
        return ResolutionContext.local(roots[0])
    return ResolutionContext.unrooted(OperatingMode.MULTI_ROOT)

from __future__ import annotations

from pathlib import Path

import typer

from pgls.cli.commands._helpers import ROOT_OPTION_HELP, exit_on_error, normalize_roots
from pgls.cli.context import build_context
from pgls.core.errors import ErrorCode
from pgls.core.result import Err
from pgls.platform.process import run_passthrough

_EXIT_CODES = {
    "unsupported": ErrorCode.USER_ERROR,
    "invalid_settings": ErrorCode.USER_ERROR,
    "not_found": ErrorCode.ENV_ERROR,
    "not_executable": ErrorCode.ENV_ERROR,
}


def start(
    root: list[Path] | None = typer.Option(None, "--root", "-r", help=ROOT_OPTION_HELP),
) -> None:
    """Resolve the binary and run the language server over stdio."""
    ctx = build_context()
    roots = normalize_roots(root) or [Path.cwd()]

    result = ctx.session_service().create_session(roots)
    if isinstance(result, Err) and result.error.kind == "disabled":
        ctx.console.info(result.error.message)
        return
    if isinstance(result, Err):
        exit_on_error(result, ctx, error_code=_EXIT_CODES[result.error.kind])
        return

    session = result.value
    ctx.console.debug(
        f"Starting {session.executable} ({session.version}, found via {session.strategy_label})"
    )
    ran = run_passthrough(list(session.command.args), cwd=session.command.cwd)
    if isinstance(ran, Err):
        ctx.console.error(str(ran.error))
        code = ran.error.returncode if ran.error.returncode > 0 else int(ErrorCode.ENV_ERROR)
        raise typer.Exit(code=code)

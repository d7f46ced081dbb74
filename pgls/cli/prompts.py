"""Terminal implementation of the download prompts."""

from __future__ import annotations

from collections.abc import Callable, Sequence

from pgls.binary.prompts import VersionChoice
from pgls.cli.selector import SelectorOption, SelectorResult, is_interactive_terminal, select_one

type Select = Callable[..., SelectorResult[object]]


class TerminalPrompter:
    """Asks on the terminal; a non-interactive session answers "no" to everything."""

    def __init__(
        self,
        *,
        interactive: Callable[[], bool] = is_interactive_terminal,
        select: Select = select_one,
    ) -> None:
        self._interactive = interactive
        self._select = select

    def confirm(self, message: str, *, accept: str, decline: str) -> bool:
        if not self._interactive():
            return False
        options = [SelectorOption(value=True, label=accept), SelectorOption(value=False, label=decline)]
        result = self._select(title=message, options=options)
        return result.action == "select" and result.value is True

    def select_version(self, title: str, choices: Sequence[VersionChoice]) -> str | None:
        if not self._interactive() or not choices:
            return None
        options = [SelectorOption(value=c.tag, label=c.tag, detail=c.description) for c in choices]
        result = self._select(title=title, options=options)
        if result.action != "select" or not isinstance(result.value, str):
            return None
        return result.value

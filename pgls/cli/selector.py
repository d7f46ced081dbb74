"""Arrow-key picker rendered as a table on the terminal."""

from __future__ import annotations

import os
import shutil
import sys
from dataclasses import dataclass
from typing import Literal

__all__ = ["SelectorOption", "SelectorResult", "is_interactive_terminal", "select_one"]


@dataclass(frozen=True, slots=True)
class SelectorOption[T]:
    value: T
    label: str
    detail: str | None = None


@dataclass(frozen=True, slots=True)
class SelectorResult[T]:
    action: Literal["select", "cancel"]
    value: T | None
    index: int


def is_interactive_terminal() -> bool:
    return bool(sys.stdin.isatty() and sys.stderr.isatty())


def _color_enabled() -> bool:
    if os.getenv("NO_COLOR") is not None:
        return False
    return os.getenv("TERM", "").lower() != "dumb"


def _paint(text: str, *codes: str) -> str:
    if not _color_enabled() or not codes:
        return text
    return f"\x1b[{';'.join(codes)}m{text}\x1b[0m"


def _write(line: str = "") -> None:
    # stdout may be the language server's channel; the picker draws on stderr.
    sys.stderr.write(line + "\n")


def _read_key() -> str:
    if os.name == "nt":
        import msvcrt

        ch = msvcrt.getwch()
        if ch in ("\r", "\n"):
            return "enter"
        if ch in ("q", "Q", "\x1b", "\x03"):
            return "cancel"
        if ch in ("\x00", "\xe0"):
            return {"H": "up", "P": "down"}.get(msvcrt.getwch(), "other")
        return "other"

    import termios
    import tty

    fd = sys.stdin.fileno()
    old = termios.tcgetattr(fd)
    try:
        tty.setraw(fd)
        ch = sys.stdin.read(1)
        if ch in ("\r", "\n"):
            return "enter"
        if ch in ("q", "Q", "\x03"):
            return "cancel"
        if ch == "\x1b":
            if sys.stdin.read(1) == "[":
                return {"A": "up", "B": "down"}.get(sys.stdin.read(1), "other")
            return "cancel"
        return "other"
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old)


def _pad(text: str, width: int) -> str:
    if len(text) > width:
        text = text[: max(0, width - 3)] + "..."
    return text.ljust(width)


def _render(*, title: str, options: list[SelectorOption[object]], index: int) -> None:
    cols = max(60, min(120, shutil.get_terminal_size((100, 30)).columns))
    label_w = max(16, min(40, max(len(o.label) for o in options)))
    detail_w = max(16, cols - label_w - 10)

    sys.stderr.write("\x1b[2J\x1b[H")
    _write(_paint(title, "1", "96"))
    _write()
    for i, opt in enumerate(options):
        marker = ">" if i == index else " "
        line = f" {marker} {_pad(opt.label, label_w)}  {_pad(opt.detail or '', detail_w)}"
        _write(_paint(line, "1", "30", "46") if i == index else line)
    _write()
    _write(_paint("Up/Down + Enter to choose, q to cancel", "2", "37"))
    sys.stderr.flush()


def select_one[T](
    *,
    title: str,
    options: list[SelectorOption[T]],
    initial_index: int = 0,
) -> SelectorResult[T]:
    if not options:
        raise ValueError("selector requires at least one option")
    if not is_interactive_terminal():
        raise RuntimeError("interactive selector requires a TTY")

    idx = max(0, min(initial_index, len(options) - 1))
    casted: list[SelectorOption[object]] = [
        SelectorOption(value=o.value, label=o.label, detail=o.detail) for o in options
    ]

    while True:
        _render(title=title, options=casted, index=idx)
        key = _read_key()

        if key == "up":
            idx = (idx - 1) % len(options)
        elif key == "down":
            idx = (idx + 1) % len(options)
        elif key == "enter":
            return SelectorResult(action="select", value=options[idx].value, index=idx)
        elif key == "cancel":
            return SelectorResult(action="cancel", value=None, index=idx)

"""Result type for explicit error handling.

Lookups, downloads and file operations return ``Ok(value)`` or ``Err(error)``
instead of raising, so callers decide at the boundary whether a failure is
worth showing to the user.

Usage:
    result = http.get_text(url)
    match result:
        case Ok(body):
            releases = parse(body)
        case Err(error):
            console.error(str(error))
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Ok[T]:
    """A successful result.

    Attributes:
        value: The success value.
    """

    value: T

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err[E]:
    """A failed result.

    Attributes:
        error: The error value.
    """

    error: E

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


type Result[T, E] = Ok[T] | Err[E]

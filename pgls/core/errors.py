"""Exit codes and the unrecoverable internal error type."""

from enum import IntEnum

__all__ = ["ErrorCode", "InvariantError"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands.

    These values are used as process exit codes and should remain stable:
    - 0: Success
    - 1: User error (bad input, invalid settings)
    - 2: Environment error (no binary found, binary not executable)
    - 4: Network error (release index or asset download failed)
    - 5: I/O error (storage directory not writable)
    """

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    NETWORK_ERROR = 4
    IO_ERROR = 5

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK


class InvariantError(RuntimeError):
    """Internal state that should be impossible was observed.

    Raised, never returned as a Result: a binary that was just confirmed to
    exist but reports no version is a programming or environment fault that
    must not be silently folded into "not found".
    """

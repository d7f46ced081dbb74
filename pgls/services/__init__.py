"""Services composing the binary engine into user-level operations."""

from .session import ServerCommand, Session, SessionError, SessionService
from .storage import ResetError, reset_storage

__all__ = [
    "ResetError",
    "ServerCommand",
    "Session",
    "SessionError",
    "SessionService",
    "reset_storage",
]

"""Core types shared by every layer: results, errors, settings."""

from .errors import ErrorCode, InvariantError
from .result import Err, Ok, Result

__all__ = [
    "Err",
    "ErrorCode",
    "InvariantError",
    "Ok",
    "Result",
]

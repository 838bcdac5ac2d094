from .base import EditError
from .commit import CommitError
from .path import PathViolation
from .replace import (
    AmbiguousMatchError,
    InvalidArgumentsError,
    MatchNotFoundError,
    ReplaceError,
)

__all__ = [
    "EditError",
    "ReplaceError",
    "InvalidArgumentsError",
    "MatchNotFoundError",
    "AmbiguousMatchError",
    "CommitError",
    "PathViolation",
]

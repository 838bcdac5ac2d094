# editforge/errors/replace.py
from __future__ import annotations

from typing import Sequence

from .base import EditError


class ReplaceError(EditError):
    """
    Base class for failures of the text replacement engine.

    `kind` is one of "InvalidArguments", "NotFound" or "AmbiguousMatch" so a
    caller can branch on the failure without importing every subclass.
    """

    kind = "ReplaceError"


class InvalidArgumentsError(ReplaceError):
    kind = "InvalidArguments"


class MatchNotFoundError(ReplaceError):
    kind = "NotFound"

    def __init__(self, message: str = "oldString not found in content", near_lines: Sequence[int] = ()):
        self.near_lines = list(near_lines)
        if self.near_lines:
            joined = ", ".join(str(n) for n in self.near_lines)
            message = f"{message} (possible matches near line {joined})"
        super().__init__(message)


class AmbiguousMatchError(ReplaceError):
    kind = "AmbiguousMatch"

    def __init__(
        self,
        message: str = (
            "oldString found multiple times and requires more code context "
            "to uniquely identify the intended match"
        ),
        occurrences: Sequence[int] = (),
    ):
        self.occurrences = list(occurrences)
        super().__init__(message)

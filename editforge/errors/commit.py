from __future__ import annotations

from .base import EditError


class CommitError(EditError):
    """Raised when an edited file could not be written back."""

    def __init__(self, message: str, errors: dict[str, str] | None = None):
        super().__init__(message)
        self.errors = dict(errors or {})

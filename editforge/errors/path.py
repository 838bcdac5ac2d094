from .base import EditError


class PathViolation(EditError):
    """Raised when a path escapes the base directory or is protected."""

from .commit import Change, CommitSummary, commit_changes
from .edit import EditResult, edit_file
from .replace import Replacer, default_replacers, find_near_matches, replace_text
from .utils.text import levenshtein
from .errors import (
    AmbiguousMatchError,
    CommitError,
    EditError,
    InvalidArgumentsError,
    MatchNotFoundError,
    PathViolation,
    ReplaceError,
)

__all__ = [
    "replace_text",
    "find_near_matches",
    "default_replacers",
    "Replacer",
    "levenshtein",
    "edit_file",
    "EditResult",
    "commit_changes",
    "Change",
    "CommitSummary",
    "EditError",
    "ReplaceError",
    "InvalidArgumentsError",
    "MatchNotFoundError",
    "AmbiguousMatchError",
    "CommitError",
    "PathViolation",
]

# editforge/utils/__init__.py
from .gitignore import build_protected_spec, get_gitignore
from .text import levenshtein, normalize_whitespace, remove_indentation, unescape_string

__all__ = [
    "build_protected_spec",
    "get_gitignore",
    "levenshtein",
    "normalize_whitespace",
    "remove_indentation",
    "unescape_string",
]

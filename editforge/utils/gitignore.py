# editforge/utils/gitignore.py
import os
from typing import Iterable, List, Optional

import pathspec

_DEFAULT_PROTECTED: List[str] = [".git/"]


def get_gitignore(path: str) -> List[str]:
    """
    Return the pattern lines of the nearest .gitignore found by walking upward
    from `path` (file or directory). Returns [] when none exists or it cannot
    be read.
    """
    base = os.path.abspath(path or ".")
    if os.path.isfile(base):
        base = os.path.dirname(base)

    cur = base
    while True:
        gi = os.path.join(cur, ".gitignore")
        try:
            if os.path.exists(gi):
                with open(gi, "r", encoding="utf-8", errors="ignore") as f:
                    return f.read().splitlines()
        except OSError:
            # Unreadable .gitignore: keep walking upward
            pass
        parent = os.path.dirname(cur)
        if parent == cur:
            return []
        cur = parent


def build_protected_spec(
    base_path: str,
    patterns: Optional[Iterable[str]] = None,
    *,
    use_gitignore: bool = False,
) -> pathspec.PathSpec:
    """
    Compile the set of paths edits must never touch. Always protects '.git/';
    adds caller patterns (gitwildmatch syntax) and, if requested, the nearest
    .gitignore above `base_path`.
    """
    lines: List[str] = list(_DEFAULT_PROTECTED)
    if patterns:
        lines.extend(patterns)
    if use_gitignore:
        lines.extend(get_gitignore(base_path))
    return pathspec.PathSpec.from_lines("gitwildmatch", lines)

# editforge/utils/text.py
from __future__ import annotations

import re

__all__ = [
    "levenshtein",
    "line_similarity",
    "normalize_whitespace",
    "remove_indentation",
    "unescape_string",
    "detect_eol",
    "block_span",
    "line_number_at",
]


def levenshtein(a: str, b: str) -> int:
    """
    Minimum number of single-character insertions, deletions and substitutions
    turning `a` into `b`.

    Classic dynamic-programming table of (len(a)+1) x (len(b)+1) cells, kept
    as two rolling rows since only the previous row is ever read.
    """
    if a == "" or b == "":
        return max(len(a), len(b))
    prev = list(range(len(b) + 1))
    for i in range(1, len(a) + 1):
        cur = [i] + [0] * len(b)
        ca = a[i - 1]
        for j in range(1, len(b) + 1):
            cost = 0 if ca == b[j - 1] else 1
            cur[j] = min(prev[j] + 1, cur[j - 1] + 1, prev[j - 1] + cost)
        prev = cur
    return prev[len(b)]


def line_similarity(a: str, b: str, max_length: int | None = None) -> float | None:
    """
    Return 1 - distance/max(len) for two already-trimmed lines.

    Returns None when both lines are empty (nothing to compare). When
    `max_length` is given both lines are cut to that length first.
    """
    if max_length is not None:
        a = a[:max_length]
        b = b[:max_length]
    longest = max(len(a), len(b))
    if longest == 0:
        return None
    return 1.0 - levenshtein(a, b) / longest


_WS_RUN_RE = re.compile(r"\s+")


def normalize_whitespace(text: str) -> str:
    """Collapse every whitespace run to one space and trim both ends."""
    return _WS_RUN_RE.sub(" ", text).strip()


_LEADING_WS_RE = re.compile(r"^(\s*)")


def remove_indentation(text: str) -> str:
    """
    Strip the smallest common leading-whitespace width from every non-blank
    line. Blank lines are left untouched.
    """
    lines = text.split("\n")
    non_blank = [ln for ln in lines if ln.strip()]
    if not non_blank:
        return text
    min_indent = min(len(_LEADING_WS_RE.match(ln).group(1)) for ln in non_blank)
    return "\n".join(ln if not ln.strip() else ln[min_indent:] for ln in lines)


_ESCAPE_RE = re.compile(r"\\(n|t|r|'|\"|`|\\|\n|\$)")
_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "'": "'",
    '"': '"',
    "`": "`",
    "\\": "\\",
    "\n": "\n",
    "$": "$",
}


def unescape_string(text: str) -> str:
    """
    Turn literal backslash sequences (\\n, \\t, \\r, quotes, backslash,
    escaped line break, \\$) into the characters they stand for.
    """
    return _ESCAPE_RE.sub(lambda m: _ESCAPES[m.group(1)], text)


def detect_eol(text: str) -> str:
    if "\r\n" in text:
        return "\r\n"
    if "\r" in text:
        return "\r"
    return "\n"


def block_span(lines: list[str], start: int, end: int) -> tuple[int, int]:
    """
    Character offsets [begin, finish) of lines[start:end] inside the text the
    lines were split from with "\\n". The newline after the last line is not
    part of the span.
    """
    begin = sum(len(ln) + 1 for ln in lines[:start])
    finish = begin + sum(len(ln) for ln in lines[start:end]) + max(0, end - start - 1)
    return begin, finish


def line_number_at(text: str, offset: int) -> int:
    """1-based line number of the character at `offset`."""
    return text.count("\n", 0, offset) + 1

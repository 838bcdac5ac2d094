# editforge/replace/core.py
from __future__ import annotations

from typing import Sequence
import difflib
import logging

from .._logging import resolve_logger
from ..errors.replace import AmbiguousMatchError, InvalidArgumentsError, MatchNotFoundError
from ..utils.text import detect_eol, line_number_at
from .replacers import Replacer, default_replacers

__all__ = ["replace_text", "find_near_matches"]


def _occurrence_lines(content: str, needle: str) -> list[int]:
    """1-based line numbers where each non-overlapping occurrence of `needle` starts."""
    out: list[int] = []
    start = 0
    while True:
        index = content.find(needle, start)
        if index == -1:
            return out
        out.append(line_number_at(content, index))
        start = index + len(needle)


def find_near_matches(content: str, pattern: str, limit: int = 3, cutoff: float = 0.6) -> list[int]:
    """
    Rank content lines by closeness to the pattern's first non-blank line.

    Returns up to `limit` 1-based line numbers whose trimmed text scores at
    least `cutoff` (difflib ratio), best first. Used to build "possible
    matches near line N" hints when nothing matched.
    """
    first = next((ln.strip() for ln in pattern.split("\n") if ln.strip()), "")
    if not first:
        return []

    scored: list[tuple[float, int]] = []
    for number, line in enumerate(content.split("\n"), 1):
        text = line.strip()
        if not text:
            continue
        ratio = difflib.SequenceMatcher(None, first, text, autojunk=False).ratio()
        if ratio >= cutoff:
            scored.append((-ratio, number))
    scored.sort()
    return [number for _, number in scored[:limit]]


def replace_text(
    content: str,
    pattern: str,
    replacement: str,
    replace_all: bool = False,
    *,
    replacers: Sequence[Replacer] | None = None,
    single_candidate_threshold: float = 0.0,
    multiple_candidates_threshold: float = 0.3,
    normalize_eol: bool = True,
    logger=None,
    log: bool = False,
) -> str:
    """
    Replace the one place in `content` that `pattern` refers to.

    Replacers are tried in order; the first candidate that occurs exactly once
    in the content is substituted. With `replace_all`, every verbatim
    occurrence of the first candidate found is substituted instead. A
    candidate occurring several times is skipped in favour of later, possibly
    more specific candidates.

    When `normalize_eol` is set, the pattern is absent verbatim and the content
    uses CRLF, an LF-only pattern and its replacement are first tried with
    CRLF line endings; the text exactly as given is the fallback.

    Raises:
        InvalidArgumentsError: pattern equals replacement, or pattern is empty.
        MatchNotFoundError: no replacer located the pattern.
        AmbiguousMatchError: every located candidate occurs more than once.
    """
    log = resolve_logger(logger=logger, enabled=log, name=__name__, level=logging.DEBUG)

    if pattern == replacement:
        raise InvalidArgumentsError("oldString and newString must be different")
    if not pattern:
        raise InvalidArgumentsError("oldString must not be empty")

    if replacers is None:
        replacers = default_replacers(single_candidate_threshold, multiple_candidates_threshold)

    attempts = [(pattern, replacement)]
    if (
        normalize_eol
        and pattern not in content
        and detect_eol(content) == "\r\n"
        and "\n" in pattern
        and "\r" not in pattern
    ):
        # CRLF spelling first, the caller's text as given if that locates nothing.
        log.debug("content uses CRLF; trying pattern and replacement with CRLF line endings")
        crlf = (
            pattern.replace("\n", "\r\n"),
            replacement.replace("\r\n", "\n").replace("\n", "\r\n"),
        )
        attempts.insert(0, crlf)

    for attempt_pattern, attempt_replacement in attempts:
        result, found, ambiguous_lines = _run_replacers(
            content, attempt_pattern, attempt_replacement, replace_all, replacers, log
        )
        if result is not None:
            return result
        if found:
            raise AmbiguousMatchError(occurrences=ambiguous_lines)

    raise MatchNotFoundError(near_lines=find_near_matches(content, pattern))


def _run_replacers(
    content: str,
    pattern: str,
    replacement: str,
    replace_all: bool,
    replacers: Sequence[Replacer],
    log,
) -> tuple[str | None, bool, list[int]]:
    """
    One pass over the replacers. Returns (new content or None, whether any
    candidate was located, lines of the first non-unique candidate).
    """
    found = False
    ambiguous_lines: list[int] = []

    for replacer in replacers:
        tried = 0
        for candidate in replacer.candidates(content, pattern):
            tried += 1
            if not candidate:
                continue
            index = content.find(candidate)
            if index == -1:
                continue
            found = True

            if replace_all:
                log.debug(f"[{replacer.name}] replacing all occurrences of {candidate!r}")
                return content.replace(candidate, replacement), found, ambiguous_lines

            if index != content.rfind(candidate):
                log.debug(f"[{replacer.name}] candidate occurs more than once: {candidate!r}")
                if not ambiguous_lines:
                    ambiguous_lines = _occurrence_lines(content, candidate)
                continue

            log.debug(f"[{replacer.name}] unique match at line {line_number_at(content, index)}")
            return content[:index] + replacement + content[index + len(candidate):], found, ambiguous_lines
        log.debug(f"[{replacer.name}] {tried} candidate(s), none usable")

    return None, found, ambiguous_lines

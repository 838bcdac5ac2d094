# editforge/replace/replacers.py
"""
Candidate generators for fuzzy single-location replacement.

Each replacer looks at the file content and the caller's search pattern and
yields substrings of the content that may be "the" place the caller meant.
A candidate does not have to equal the pattern; it only has to be equivalent
under that replacer's tolerance rule. The orchestrator in `core.py` decides
whether a candidate is usable (present and unique).

All generators split on "\\n" only and are single-pass: call `candidates()`
again for a fresh sequence.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterator
import bisect
import re

from ..utils.text import (
    block_span,
    line_similarity,
    normalize_whitespace,
    remove_indentation,
    unescape_string,
)

__all__ = [
    "Replacer",
    "SimpleReplacer",
    "LineTrimmedReplacer",
    "BlockAnchorReplacer",
    "WhitespaceNormalizedReplacer",
    "IndentationFlexibleReplacer",
    "EscapeNormalizedReplacer",
    "TrimmedBoundaryReplacer",
    "ContextAwareReplacer",
    "MultiOccurrenceReplacer",
    "default_replacers",
]


def _windows(lines: list[str], size: int) -> Iterator[str]:
    """Every run of `size` consecutive lines, re-joined with "\\n"."""
    for i in range(len(lines) - size + 1):
        yield "\n".join(lines[i : i + size])


def _drop_trailing_blank(lines: list[str]) -> list[str]:
    if lines and lines[-1] == "":
        return lines[:-1]
    return lines


def _anchor_pairs(
    trimmed: list[str], first: str, last: str, limit: int | None = None
) -> list[tuple[int, int]]:
    """
    (start, end) index pairs where trimmed[start] == first and end is the
    nearest index >= start + 2 with trimmed[end] == last.
    """
    ends = [j for j, text in enumerate(trimmed) if text == last]
    if not ends:
        return []
    pairs: list[tuple[int, int]] = []
    for i, text in enumerate(trimmed):
        if text != first:
            continue
        k = bisect.bisect_left(ends, i + 2)
        if k < len(ends):
            pairs.append((i, ends[k]))
            if limit is not None and len(pairs) >= limit:
                break
    return pairs


class Replacer(ABC):
    """One tolerance policy for locating a search pattern in content."""

    name = "replacer"

    @abstractmethod
    def candidates(self, content: str, pattern: str) -> Iterator[str]:
        """Yield candidate substrings of `content`."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__}>"


class SimpleReplacer(Replacer):
    name = "simple"

    def candidates(self, content: str, pattern: str) -> Iterator[str]:
        yield pattern


class LineTrimmedReplacer(Replacer):
    """Compare line by line, ignoring leading/trailing whitespace on each line."""

    name = "line_trimmed"

    def candidates(self, content: str, pattern: str) -> Iterator[str]:
        original = content.split("\n")
        search = _drop_trailing_blank(pattern.split("\n"))
        if not search:
            return
        trimmed = [ln.strip() for ln in original]
        wanted = [ln.strip() for ln in search]
        size = len(search)

        for i in range(len(original) - size + 1):
            if trimmed[i : i + size] == wanted:
                begin, end = block_span(original, i, i + size)
                yield content[begin:end]


class BlockAnchorReplacer(Replacer):
    """
    Use the first and last pattern lines as anchors and score the lines in
    between by normalized edit distance.

    With a single anchor pair the block is accepted when its interior
    similarity reaches `single_candidate_threshold`; with several pairs the
    most similar one wins if it reaches `multiple_candidates_threshold`.
    The earliest pair wins a tie.
    """

    name = "block_anchor"

    def __init__(
        self,
        single_candidate_threshold: float = 0.0,
        multiple_candidates_threshold: float = 0.3,
        *,
        max_line_length: int = 1000,
        max_candidates: int = 1000,
    ):
        self.single_candidate_threshold = single_candidate_threshold
        self.multiple_candidates_threshold = multiple_candidates_threshold
        self.max_line_length = max_line_length
        self.max_candidates = max_candidates

    def candidates(self, content: str, pattern: str) -> Iterator[str]:
        original = content.split("\n")
        search = pattern.split("\n")
        if len(search) < 3:
            return
        search = _drop_trailing_blank(search)

        pairs = self._anchor_pairs(original, search[0].strip(), search[-1].strip())
        if not pairs:
            return

        if len(pairs) == 1:
            start, end = pairs[0]
            if self.similarity(original, search, start, end) >= self.single_candidate_threshold:
                begin, finish = block_span(original, start, end + 1)
                yield content[begin:finish]
            return

        best = None
        best_score = -1.0
        for start, end in pairs:
            score = self.similarity(original, search, start, end)
            if score > best_score:
                best, best_score = (start, end), score

        if best is not None and best_score >= self.multiple_candidates_threshold:
            begin, finish = block_span(original, best[0], best[1] + 1)
            yield content[begin:finish]

    def _anchor_pairs(self, lines: list[str], first: str, last: str) -> list[tuple[int, int]]:
        """(start, end) line indexes where both anchors match, end >= start + 2."""
        trimmed = [ln.strip() for ln in lines]
        return _anchor_pairs(trimmed, first, last, self.max_candidates)

    def similarity(self, lines: list[str], search: list[str], start: int, end: int) -> float:
        """Average interior-line similarity of lines[start:end+1] against `search`."""
        to_check = min(len(search), end - start + 1) - 2
        if to_check <= 0:
            return 1.0
        total = 0.0
        for j in range(1, to_check + 1):
            score = line_similarity(
                lines[start + j].strip(), search[j].strip(), self.max_line_length
            )
            if score is None:
                continue
            total += score
        return total / to_check


class WhitespaceNormalizedReplacer(Replacer):
    """Treat every run of whitespace as a single space."""

    name = "whitespace_normalized"

    def candidates(self, content: str, pattern: str) -> Iterator[str]:
        wanted = normalize_whitespace(pattern)
        lines = content.split("\n")

        words = pattern.split()
        inline = re.compile(r"\s+".join(re.escape(w) for w in words)) if words else None

        for line in lines:
            normalized = normalize_whitespace(line)
            if normalized == wanted:
                yield line
            elif inline is not None and wanted in normalized:
                m = inline.search(line)
                if m:
                    yield m.group(0)

        size = len(pattern.split("\n"))
        if size > 1:
            for block in _windows(lines, size):
                if normalize_whitespace(block) == wanted:
                    yield block


class IndentationFlexibleReplacer(Replacer):
    """Compare blocks after removing their common indentation."""

    name = "indentation_flexible"

    def candidates(self, content: str, pattern: str) -> Iterator[str]:
        wanted = remove_indentation(pattern)
        size = len(pattern.split("\n"))
        for block in _windows(content.split("\n"), size):
            if remove_indentation(block) == wanted:
                yield block


class EscapeNormalizedReplacer(Replacer):
    """Resolve literal escape sequences (\\n, \\t, \\", ...) in pattern or content."""

    name = "escape_normalized"

    def candidates(self, content: str, pattern: str) -> Iterator[str]:
        wanted = unescape_string(pattern)
        if wanted in content:
            yield wanted

        size = len(wanted.split("\n"))
        for block in _windows(content.split("\n"), size):
            if unescape_string(block) == wanted:
                yield block


class TrimmedBoundaryReplacer(Replacer):
    """Ignore whitespace around the whole pattern."""

    name = "trimmed_boundary"

    def candidates(self, content: str, pattern: str) -> Iterator[str]:
        wanted = pattern.strip()
        if wanted == pattern:
            return
        if wanted in content:
            yield wanted

        size = len(pattern.split("\n"))
        for block in _windows(content.split("\n"), size):
            if block.strip() == wanted:
                yield block


class ContextAwareReplacer(Replacer):
    """
    Anchor on the first and last lines and require at least half of the
    non-blank interior lines to agree after trimming. Only the first
    qualifying block is yielded.
    """

    name = "context_aware"

    def __init__(self, min_agreement: float = 0.5):
        self.min_agreement = min_agreement

    def candidates(self, content: str, pattern: str) -> Iterator[str]:
        search = _drop_trailing_blank(pattern.split("\n"))
        if len(search) < 3:
            return

        lines = content.split("\n")
        trimmed = [ln.strip() for ln in lines]
        first, last = search[0].strip(), search[-1].strip()

        for i, j in _anchor_pairs(trimmed, first, last):
            block = lines[i : j + 1]
            if len(block) == len(search) and self._interior_agrees(block, search):
                yield "\n".join(block)
                return

    def _interior_agrees(self, block: list[str], search: list[str]) -> bool:
        compared = agreeing = 0
        for have, want in zip(block[1:-1], search[1:-1]):
            have, want = have.strip(), want.strip()
            if have or want:
                compared += 1
                if have == want:
                    agreeing += 1
        return compared == 0 or agreeing / compared >= self.min_agreement


class MultiOccurrenceReplacer(Replacer):
    """Yield the exact pattern once per non-overlapping occurrence."""

    name = "multi_occurrence"

    def candidates(self, content: str, pattern: str) -> Iterator[str]:
        if not pattern:
            return
        start = 0
        while True:
            index = content.find(pattern, start)
            if index == -1:
                return
            yield pattern
            start = index + len(pattern)


def default_replacers(
    single_candidate_threshold: float = 0.0,
    multiple_candidates_threshold: float = 0.3,
) -> list[Replacer]:
    """The replacers in the order the orchestrator tries them."""
    return [
        SimpleReplacer(),
        LineTrimmedReplacer(),
        BlockAnchorReplacer(single_candidate_threshold, multiple_candidates_threshold),
        WhitespaceNormalizedReplacer(),
        IndentationFlexibleReplacer(),
        EscapeNormalizedReplacer(),
        TrimmedBoundaryReplacer(),
        ContextAwareReplacer(),
        MultiOccurrenceReplacer(),
    ]

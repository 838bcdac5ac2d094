import pytest

from editforge.utils.text import (
    block_span,
    detect_eol,
    levenshtein,
    line_number_at,
    line_similarity,
    normalize_whitespace,
    remove_indentation,
    unescape_string,
)


# ---------------------------------------------------------------------------
# levenshtein
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "a, b, expected",
    [
        ("", "", 0),
        ("", "abc", 3),
        ("abcd", "", 4),
        ("kitten", "sitting", 3),
        ("flaw", "lawn", 2),
        ("same", "same", 0),
        ("a;", "a", 1),
    ],
)
def test_levenshtein(a, b, expected):
    assert levenshtein(a, b) == expected


def test_levenshtein_is_symmetric():
    assert levenshtein("return x;", "return  y") == levenshtein("return  y", "return x;")


def test_line_similarity_identical_and_disjoint():
    assert line_similarity("abc", "abc") == 1.0
    assert line_similarity("abc", "xyz") == 0.0


def test_line_similarity_both_empty_is_none():
    assert line_similarity("", "") is None


def test_line_similarity_truncates_long_lines():
    a = "x" * 50 + "tail-a"
    b = "x" * 50 + "tail-b"
    assert line_similarity(a, b, max_length=50) == 1.0
    assert line_similarity(a, b) < 1.0


# ---------------------------------------------------------------------------
# normalization helpers
# ---------------------------------------------------------------------------


def test_normalize_whitespace_collapses_runs():
    assert normalize_whitespace("  a\t\tb \n  c  ") == "a b c"


def test_remove_indentation_uses_minimum_of_non_blank_lines():
    text = "        if x:\n\n            y()\n        z()"
    assert remove_indentation(text) == "if x:\n\n    y()\nz()"


def test_remove_indentation_all_blank_returns_input():
    assert remove_indentation("   \n  ") == "   \n  "


def test_unescape_string_common_sequences():
    assert unescape_string(r"a\nb\tc") == "a\nb\tc"
    assert unescape_string(r"say \"hi\" and \'bye\'") == "say \"hi\" and 'bye'"
    assert unescape_string(r"cost: \$5 \\ done") == "cost: $5 \\ done"
    assert unescape_string("tick \\` tock") == "tick ` tock"


def test_unescape_string_line_continuation():
    assert unescape_string("one \\\ntwo") == "one \ntwo"


def test_unescape_string_leaves_unknown_sequences():
    assert unescape_string(r"\d+") == r"\d+"


def test_detect_eol():
    assert detect_eol("a\r\nb") == "\r\n"
    assert detect_eol("a\rb") == "\r"
    assert detect_eol("a\nb") == "\n"
    assert detect_eol("ab") == "\n"


def test_block_span_matches_joined_lines():
    content = "zero\none\ntwo\nthree"
    lines = content.split("\n")
    begin, end = block_span(lines, 1, 3)
    assert content[begin:end] == "one\ntwo"
    begin, end = block_span(lines, 0, 1)
    assert content[begin:end] == "zero"


def test_line_number_at():
    content = "a\nb\nc"
    assert line_number_at(content, 0) == 1
    assert line_number_at(content, content.index("c")) == 3

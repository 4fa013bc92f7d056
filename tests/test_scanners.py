# tests/test_scanners.py
"""
Tests for the character-level scanners.
"""

import pytest

from tesseract_lint.scanners import (
    BracketEvent,
    iter_angle_spans,
    iter_words,
    match_braces,
    scan_brackets,
    scan_unterminated_strings,
)
from tests.conftest import ODD_INPUTS


class TestScanBrackets:

    def test_balanced(self):
        assert scan_brackets("{[()]}") == []

    def test_mismatch(self):
        assert scan_brackets("(]") == [BracketEvent("mismatch", "]", 1, ")")]

    def test_unexpected_close(self):
        assert scan_brackets(")") == [BracketEvent("unexpected", ")", 0)]

    def test_unclosed_in_source_order(self):
        assert scan_brackets("{[") == [
            BracketEvent("unclosed", "{", 0, "}"),
            BracketEvent("unclosed", "[", 1, "]"),
        ]

    def test_mismatch_consumes_opener(self):
        # "(" is popped by "]", so nothing is left open
        assert [e.kind for e in scan_brackets("(]")] == ["mismatch"]

    @pytest.mark.parametrize("text", ODD_INPUTS)
    def test_never_raises(self, text):
        for ev in scan_brackets(text):
            assert 0 <= ev.offset < len(text)


class TestScanUnterminatedStrings:

    def test_closed_string(self):
        assert scan_unterminated_strings('x = "abc";') == []

    def test_unterminated_at_newline(self):
        assert scan_unterminated_strings('x = "abc\ny = 1') == [(4, 8)]

    def test_unterminated_at_eof(self):
        assert scan_unterminated_strings('"abc') == [(0, 4)]

    def test_escaped_quote(self):
        assert scan_unterminated_strings(r'"a\"b"') == []

    def test_quote_inside_comment_ignored(self):
        assert scan_unterminated_strings("# don't \"quote\nx") == []

    def test_hash_inside_string(self):
        assert scan_unterminated_strings('"a#b"') == []

    def test_scanning_resumes_after_newline(self):
        text = '"a\n"b\n"c"'
        assert scan_unterminated_strings(text) == [(0, 2), (3, 5)]


class TestIterWords:

    def test_words(self):
        words = [w for _, _, w in iter_words("let$ x2 = 3abc + _y")]
        assert words == ["let", "x2", "_y"]

    def test_offsets(self):
        assert list(iter_words("ab cd")) == [(0, 2, "ab"), (3, 5, "cd")]

    def test_bounds(self):
        assert [w for _, _, w in iter_words("ab cd ef", 3, 5)] == ["cd"]


class TestMatchBraces:

    def test_pairs(self):
        assert match_braces("{ { } ") == {0: None, 2: 4}

    def test_stray_close_ignored(self):
        assert match_braces("}{}") == {1: 2}


class TestAngleSpans:

    def test_simple(self):
        assert list(iter_angle_spans("a <stack> b")) == [(2, 9, "stack")]

    def test_stops_at_newline(self):
        assert list(iter_angle_spans("a < b\n> c")) == []

    def test_restarts_at_nested_open(self):
        assert list(iter_angle_spans("<<x>")) == [(1, 4, "x")]

    def test_limit(self):
        assert list(iter_angle_spans("<" + "a" * 40 + ">", limit=32)) == []

# tesseract_lint/scanners.py
"""
Small character-level scanners shared by the checkers.

Each scanner is a single left-to-right pass with a handful of named states,
runs in time linear in the input (``iter_angle_spans`` is bounded by its
``limit``), and accepts any string without raising.

    scan_brackets              Normal + explicit (char, offset) stack
    scan_unterminated_strings  Normal / InString / Escaped
    iter_words                 Normal / InWord / InNumber
    match_braces               brace-depth pairing
    iter_angle_spans           Normal / InAngle (bounded)
"""

from __future__ import annotations

from typing import Dict, Iterator, List, NamedTuple, Optional, Tuple

__all__ = [
    "BRACKET_PAIRS",
    "BracketEvent",
    "scan_brackets",
    "scan_unterminated_strings",
    "is_word_char",
    "iter_words",
    "match_braces",
    "iter_angle_spans",
]


BRACKET_PAIRS: Dict[str, str] = {"{": "}", "[": "]", "(": ")"}
_CLOSERS: Dict[str, str] = {v: k for k, v in BRACKET_PAIRS.items()}

_WORD_START = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ_")
_WORD_CHARS = _WORD_START | frozenset("0123456789")


class BracketEvent(NamedTuple):
    """One bracket problem.

    ``kind`` is ``"mismatch"``, ``"unexpected"`` or ``"unclosed"``.
    ``expected`` is the closer that would have been correct (empty for
    ``"unexpected"``).
    """
    kind: str
    char: str
    offset: int
    expected: str = ""


def scan_brackets(text: str) -> List[BracketEvent]:
    """Match ``{}``, ``[]`` and ``()`` in one pass.

    Mismatches and stray closers are reported where they occur; opens still
    on the stack at the end follow, in source order.
    """
    events: List[BracketEvent] = []
    stack: List[Tuple[str, int]] = []

    for i, ch in enumerate(text):
        if ch in BRACKET_PAIRS:
            stack.append((ch, i))
        elif ch in _CLOSERS:
            if not stack:
                events.append(BracketEvent("unexpected", ch, i))
                continue
            opener, _ = stack.pop()
            expected = BRACKET_PAIRS[opener]
            if expected != ch:
                events.append(BracketEvent("mismatch", ch, i, expected))

    for opener, offset in stack:
        events.append(BracketEvent("unclosed", opener, offset, BRACKET_PAIRS[opener]))
    return events


def scan_unterminated_strings(text: str) -> List[Tuple[int, int]]:
    """Return ``(start, end)`` spans of strings that hit a newline or EOF.

    ``start`` is the opening quote; ``end`` is the offending line terminator
    or ``len(text)``.  Scanning resumes in the normal state afterwards.
    Quotes inside a ``#`` comment do not open a string.
    """
    spans: List[Tuple[int, int]] = []
    in_string = False
    in_comment = False
    start = 0
    escaped = False

    for i, ch in enumerate(text):
        if in_comment:
            if ch == "\n":
                in_comment = False
            continue
        if ch == "#" and not in_string:
            in_comment = True
            escaped = False
            continue
        if ch == "\\":
            escaped = not escaped
            continue
        if ch == '"' and not escaped:
            if in_string:
                in_string = False
            else:
                in_string = True
                start = i
        escaped = False
        if ch == "\n" and in_string:
            spans.append((start, i))
            in_string = False

    if in_string:
        spans.append((start, len(text)))
    return spans


def is_word_char(ch: str) -> bool:
    return ch in _WORD_CHARS


def iter_words(text: str, start: int = 0, end: Optional[int] = None) -> Iterator[Tuple[int, int, str]]:
    """Yield ``(start, end, word)`` for identifier-shaped runs.

    Runs that begin with a digit are numbers and are skipped whole, so
    ``2x`` never yields ``x``.
    """
    stop = len(text) if end is None else min(end, len(text))
    i = max(0, start)
    while i < stop:
        ch = text[i]
        if ch in _WORD_CHARS:
            j = i + 1
            while j < stop and text[j] in _WORD_CHARS:
                j += 1
            if ch in _WORD_START:
                yield i, j, text[i:j]
            i = j
        else:
            i += 1


def match_braces(text: str) -> Dict[int, Optional[int]]:
    """Map every ``{`` offset to its matching ``}`` offset, or ``None``."""
    pairs: Dict[int, Optional[int]] = {}
    stack: List[int] = []
    for i, ch in enumerate(text):
        if ch == "{":
            stack.append(i)
            pairs[i] = None
        elif ch == "}" and stack:
            pairs[stack.pop()] = i
    return pairs


def iter_angle_spans(text: str, limit: int = 32) -> Iterator[Tuple[int, int, str]]:
    """Yield ``(start, end, inner)`` for ``<inner>`` runs on a single line.

    A span is abandoned at a newline, at a nested ``<`` or after *limit*
    characters without a closing ``>``.
    """
    n = len(text)
    i = 0
    while i < n:
        if text[i] != "<":
            i += 1
            continue
        j = i + 1
        close = -1
        while j < n and j - i <= limit:
            ch = text[j]
            if ch == ">":
                close = j
                break
            if ch in "<\n":
                break
            j += 1
        if close == -1:
            i += 1
            continue
        yield i, close + 1, text[i + 1:close]
        i = close + 1

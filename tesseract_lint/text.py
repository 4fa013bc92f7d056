# tesseract_lint/text.py
"""
Source snapshots, line indexing and string/comment masking.

Every checker reads one immutable :class:`SourceText`.  Besides the raw text
it exposes two length-preserving views, so an offset found in a view is also
valid in the original:

``masked``
    String-literal payload replaced by spaces; the quote characters stay.
``code``
    ``masked`` with every ``#`` comment blanked up to the end of its line.

Masking rules
─────────────
A backslash toggles the *escaped* flag for the next character; only an
unescaped ``"`` opens or closes a string.  A line terminator always ends the
string state: strings may not span lines, and an unterminated string must not
hide the rest of the document from the other checkers.
"""

from __future__ import annotations

import bisect
from functools import cached_property
from typing import List, Tuple

from tesseract_lint.vocabulary import COMMENT_CHAR

__all__ = [
    "LineIndex",
    "SourceText",
    "mask",
    "blank_comments",
    "offset_to_line_col",
]


def mask(text: str) -> str:
    """Blank the contents of every double-quoted string in *text*.

    ``len(mask(text)) == len(text)`` for every input.
    """
    out: List[str] = []
    in_string = False
    escaped = False

    for ch in text:
        if ch == "\n":
            in_string = False
            escaped = False
            out.append(ch)
            continue

        if ch == "\\":
            escaped = not escaped
            out.append(" " if in_string else ch)
            continue

        if ch == '"' and not escaped:
            in_string = not in_string
            out.append(ch)
        else:
            out.append(" " if in_string else ch)
        escaped = False

    return "".join(out)


def blank_comments(masked: str) -> str:
    """Replace ``# ...`` comments in already-masked text with spaces.

    String payload is blank in *masked*, so any remaining ``#`` starts a
    comment.
    """
    out: List[str] = []
    in_comment = False
    for ch in masked:
        if ch == "\n":
            in_comment = False
            out.append(ch)
        elif in_comment:
            out.append(" ")
        elif ch == COMMENT_CHAR:
            in_comment = True
            out.append(" ")
        else:
            out.append(ch)
    return "".join(out)


class LineIndex:
    """Offset ↔ (line, column) conversion over a fixed text.

    Lines and columns are 0-based.  Offsets outside ``[0, len(text)]`` are
    clamped.
    """

    def __init__(self, text: str) -> None:
        self._length = len(text)
        starts = [0]
        pos = text.find("\n")
        while pos != -1:
            starts.append(pos + 1)
            pos = text.find("\n", pos + 1)
        self._starts = starts
        self._text = text

    @property
    def line_count(self) -> int:
        return len(self._starts)

    def clamp(self, offset: int) -> int:
        return max(0, min(offset, self._length))

    def line_start(self, line: int) -> int:
        line = max(0, min(line, len(self._starts) - 1))
        return self._starts[line]

    def line_span(self, line: int) -> Tuple[int, int]:
        """``(start, end)`` of *line*, ``end`` excluding the line terminator."""
        line = max(0, min(line, len(self._starts) - 1))
        start = self._starts[line]
        if line + 1 < len(self._starts):
            end = self._starts[line + 1] - 1
        else:
            end = self._length
        if end > start and self._text[end - 1] == "\r":
            end -= 1
        return start, end

    def offset_to_position(self, offset: int) -> Tuple[int, int]:
        offset = self.clamp(offset)
        line = bisect.bisect_right(self._starts, offset) - 1
        return line, offset - self._starts[line]

    def position_to_offset(self, line: int, column: int) -> int:
        start, end = self.line_span(line)
        return self.clamp(start + max(0, min(column, end - start)))


def offset_to_line_col(text: str, offset: int) -> Tuple[int, int]:
    """0-based ``(line, column)`` of *offset* in *text*."""
    return LineIndex(text).offset_to_position(offset)


class SourceText:
    """An immutable snapshot of one document."""

    def __init__(self, text: str, name: str = "<input>") -> None:
        self._text = text
        self.name = name

    def __len__(self) -> int:
        return len(self._text)

    def __repr__(self) -> str:
        return f"SourceText({self.name!r}, {len(self._text)} chars)"

    @property
    def text(self) -> str:
        return self._text

    @cached_property
    def index(self) -> LineIndex:
        return LineIndex(self._text)

    @cached_property
    def masked(self) -> str:
        return mask(self._text)

    @cached_property
    def code(self) -> str:
        return blank_comments(self.masked)

    @cached_property
    def lines(self) -> List[str]:
        """Raw lines without terminators (``\\r\\n`` aware)."""
        return [self._text[s:e] for s, e in self._line_spans]

    @cached_property
    def _line_spans(self) -> List[Tuple[int, int]]:
        return [self.index.line_span(i) for i in range(self.index.line_count)]

    def line_offset(self, line: int) -> int:
        return self.index.line_start(line)

    def line_of(self, offset: int) -> int:
        return self.index.offset_to_position(offset)[0]

    def view_line(self, view: str, line: int) -> str:
        """Slice *line* out of one of the same-length views."""
        start, end = self._line_spans[line]
        return view[start:end]

    def is_comment_line(self, line: int) -> bool:
        return self.lines[line].strip().startswith(COMMENT_CHAR)

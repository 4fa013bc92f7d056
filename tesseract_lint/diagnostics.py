"""
tesseract_lint/diagnostics.py
═════════════════════════════

Finding model and suppression handling.

A :class:`Finding` is a pure value: a ``[start, end)`` offset range into the
analysed text, a message, a severity, the finding code and the name of the
checker that produced it.  Two findings with the same content are equal.

Suppressions
────────────
  1. Global:  ``SuppressionManager.add_global_suppression("missingSemicolon")``
  2. Inline:  ``# tesseract-lint: disable=missingSemicolon,undefinedVariable``
              on the finding's line or on the line directly above it;
              a bare ``# tesseract-lint: disable`` silences every code.
"""

from __future__ import annotations

import json
import re
from collections import defaultdict
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Set

from tesseract_lint.text import LineIndex, SourceText

__all__ = [
    "Severity",
    "FindingCode",
    "ALL_CODES",
    "Finding",
    "SuppressionManager",
]


class Severity(Enum):
    """Finding severity."""
    ERROR = "error"
    WARNING = "warning"

    @classmethod
    def from_string(cls, s: str) -> "Severity":
        s_low = s.strip().lower()
        for member in cls:
            if member.value == s_low:
                return member
        raise ValueError(f"unknown severity: {s!r}")


class FindingCode:
    """Stable identifiers for every kind of finding."""
    MISMATCHED_BRACKET = "mismatchedBracket"
    UNEXPECTED_BRACKET = "unexpectedBracket"
    UNCLOSED_BRACKET = "unclosedBracket"
    MISSING_KEYWORD_SUFFIX = "missingKeywordSuffix"
    UNCLOSED_STRING = "unclosedString"
    MISSING_BUILTIN_PREFIX = "missingBuiltinPrefix"
    UNDEFINED_VARIABLE = "undefinedVariable"
    EMPTY_DATA_TYPE = "emptyDataType"
    MALFORMED_DATA_TYPE = "malformedDataType"
    INVALID_DATA_TYPE = "invalidDataType"
    MISSING_DICT_BRACE = "missingDictBrace"
    UNCLOSED_DICT = "unclosedDict"
    INCOMPLETE_STATEMENT = "incompleteStatement"
    INCOMPLETE_FUNCTION = "incompleteFunction"
    INCOMPLETE_CLASS = "incompleteClass"
    MISSING_SEMICOLON = "missingSemicolon"
    CHECKER_INTERNAL_ERROR = "checkerInternalError"


ALL_CODES: FrozenSet[str] = frozenset(
    v for k, v in vars(FindingCode).items() if k.isupper()
)


@dataclass(frozen=True)
class Finding:
    """
    A single lint finding.

    Attributes
    ----------
    start    : offset of the first character (inclusive)
    end      : offset one past the last character (exclusive)
    message  : human-readable description
    severity : Severity
    code     : one of :class:`FindingCode`
    checker  : name of the checker that produced it
    """
    start: int
    end: int
    message: str
    severity: Severity = Severity.ERROR
    code: str = ""
    checker: str = ""

    def to_dict(self, index: Optional[LineIndex] = None) -> Dict[str, Any]:
        """Plain-dict form; adds 1-based line/column when *index* is given."""
        result: Dict[str, Any] = {
            "startOffset": self.start,
            "endOffset": self.end,
            "message": self.message,
            "severity": self.severity.value,
            "code": self.code,
            "checker": self.checker,
        }
        if index is not None:
            line, col = index.offset_to_position(self.start)
            end_line, end_col = index.offset_to_position(self.end)
            result.update(
                line=line + 1,
                column=col + 1,
                endLine=end_line + 1,
                endColumn=end_col + 1,
            )
        return result

    def to_json_str(self, index: Optional[LineIndex] = None) -> str:
        return json.dumps(self.to_dict(index))

    def to_gcc_format(self, path: str, index: LineIndex) -> str:
        """GCC-style line: ``file:line:col: severity: message [code]``."""
        line, col = index.offset_to_position(self.start)
        return f"{path}:{line + 1}:{col + 1}: {self.severity.value}: {self.message} [{self.code}]"


_INLINE_RE = re.compile(
    r"#\s*tesseract-lint:\s*disable(?:\s*=\s*(?P<codes>[A-Za-z_][\w]*(?:\s*,\s*[A-Za-z_][\w]*)*))?"
)


class SuppressionManager:
    """
    Decides which findings are dropped before publication.

    Usage
    -----
    >>> sm = SuppressionManager()
    >>> sm.add_global_suppression("undefinedVariable")
    >>> per_run = sm.for_source(source)
    >>> kept = per_run.filter_findings(findings)
    """

    def __init__(self) -> None:
        # 0-based line → codes suppressed there ("*" = everything)
        self._inline: Dict[int, Set[str]] = defaultdict(set)
        self._global: Set[str] = set()
        self._index: Optional[LineIndex] = None

    def add_global_suppression(self, code: str) -> None:
        self._global.add(code)

    @property
    def global_suppressions(self) -> FrozenSet[str]:
        return frozenset(self._global)

    def for_source(self, source: SourceText) -> "SuppressionManager":
        """A copy carrying the global rules plus *source*'s inline comments."""
        sm = SuppressionManager()
        sm._global = set(self._global)
        sm.load_inline_suppressions(source)
        return sm

    def load_inline_suppressions(self, source: SourceText) -> None:
        """Scan comment text for ``tesseract-lint: disable`` markers."""
        self._index = source.index
        masked = source.masked
        for line_no, raw in enumerate(source.lines):
            if "tesseract-lint" not in raw:
                continue
            visible = source.view_line(masked, line_no)
            hash_pos = visible.find("#")
            if hash_pos == -1:
                continue
            match = _INLINE_RE.search(raw, hash_pos)
            if match is None:
                continue
            codes = match.group("codes")
            if codes:
                ids = {c.strip() for c in codes.split(",")}
            else:
                ids = {"*"}
            self._inline[line_no] |= ids

    def is_suppressed(self, finding: Finding) -> bool:
        code = finding.code
        if code in self._global or "*" in self._global:
            return True
        if self._index is None or not self._inline:
            return False
        line, _ = self._index.offset_to_position(finding.start)
        for key in (line, line - 1):
            ids = self._inline.get(key)
            if ids and (code in ids or "*" in ids):
                return True
        return False

    def filter_findings(self, findings: Iterable[Finding]) -> List[Finding]:
        """Return only non-suppressed findings, order preserved."""
        return [f for f in findings if not self.is_suppressed(f)]

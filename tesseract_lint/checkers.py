"""
tesseract_lint/checkers.py
══════════════════════════

Checker framework and the production Tesseract checkers.

Architecture
────────────

  ┌──────────────────────────────────────────────────────────┐
  │                     CheckerRunner                        │
  │  ┌────────────┐ ┌──────────────┐ ┌───────────────────┐   │
  │  │  Bracket   │ │KeywordSuffix │ │ StringLiteral ... │   │
  │  └─────┬──────┘ └──────┬───────┘ └─────────┬─────────┘   │
  │        │               │                   │             │
  │  ┌─────▼───────────────▼───────────────────▼──────────┐  │
  │  │  SourceText: raw / masked / code views, LineIndex  │  │
  │  └─────────────────────────┬──────────────────────────┘  │
  │                            │                             │
  │  ┌─────────────────────────▼──────────────────────────┐  │
  │  │                SuppressionManager                  │  │
  │  └────────────────────────────────────────────────────┘  │
  └──────────────────────────────────────────────────────────┘

Each Checker follows a four-phase lifecycle:

  1. **configure()**        — read options, seed run-scoped state
  2. **collect_evidence()** — scan the text, gather suspicious sites
  3. **diagnose()**         — turn sites into Findings
  4. **report()**           — return Findings not silenced by suppressions

Checkers are independent: each reads the shared immutable SourceText and
writes only its own findings, so one failing checker never stops the others.
"""

from __future__ import annotations

import logging
import re
import time
from abc import ABC, abstractmethod
from collections import defaultdict
from dataclasses import dataclass, field
from typing import (
    Any,
    ClassVar,
    Dict,
    FrozenSet,
    List,
    Mapping,
    Optional,
    Sequence,
    Set,
    Tuple,
    Type,
    Union,
)

from tesseract_lint.config import DEFAULT_OPTIONS, load_options
from tesseract_lint.diagnostics import Finding, FindingCode, Severity, SuppressionManager
from tesseract_lint.errors import UnknownCheckerError
from tesseract_lint.scanners import (
    is_word_char,
    iter_angle_spans,
    iter_words,
    match_braces,
    scan_brackets,
    scan_unterminated_strings,
)
from tesseract_lint.text import SourceText
from tesseract_lint.vocabulary import (
    BODY_KEYWORDS,
    BUILTIN_NAMES,
    BUILTIN_PREFIX,
    COMMENT_CHAR,
    COMPOSITE_TYPE_ORDER,
    COMPOSITE_TYPES,
    HEADER_KEYWORDS,
    RESERVED_WORDS,
    SUFFIX_MARKER,
    SUFFIX_REQUIRED,
)

_log = logging.getLogger(__name__)

_IDENT = r"[A-Za-z_][A-Za-z0-9_]*"


# ═════════════════════════════════════════════════════════════════════════
#  PART 1: CHECKER BASE CLASS
# ═════════════════════════════════════════════════════════════════════════

@dataclass
class CheckerContext:
    """
    Shared context passed to every checker during one run.

    Attributes
    ----------
    source       : the document snapshot being analysed
    suppressions : SuppressionManager for this document
    options      : effective option dict (see :mod:`tesseract_lint.config`)
    declared     : run-scoped set of names treated as declared; created
                   fresh for every run and dropped with the context
    stats        : mutable dict for timing / counting statistics
    """
    source: SourceText
    suppressions: SuppressionManager = field(default_factory=SuppressionManager)
    options: Dict[str, Any] = field(default_factory=lambda: dict(DEFAULT_OPTIONS))
    declared: Set[str] = field(default_factory=set)
    stats: Dict[str, Any] = field(default_factory=dict)

    def get_option(self, key: str, default: Any = None) -> Any:
        return self.options.get(key, default)


class Checker(ABC):
    """
    Abstract base class for all checkers.

    Subclass Contract
    ─────────────────
      - Override ``name``, ``description``, ``codes``
      - Implement ``collect_evidence()`` and ``diagnose()``
      - Optionally override ``configure()`` for custom setup
    """

    name: ClassVar[str] = "base-checker"
    description: ClassVar[str] = ""
    codes: ClassVar[FrozenSet[str]] = frozenset()
    default_severity: ClassVar[Severity] = Severity.ERROR

    def __init__(self) -> None:
        self._findings: List[Finding] = []

    @property
    def findings(self) -> List[Finding]:
        return list(self._findings)

    def configure(self, ctx: CheckerContext) -> None:
        """Called before evidence collection. Default does nothing."""
        pass

    @abstractmethod
    def collect_evidence(self, ctx: CheckerContext) -> None:
        """Scan the source and remember suspicious sites."""
        ...

    @abstractmethod
    def diagnose(self, ctx: CheckerContext) -> None:
        """Turn collected sites into findings via :meth:`_emit`."""
        ...

    def report(self, ctx: CheckerContext) -> List[Finding]:
        """Return final findings, filtered by suppressions."""
        return ctx.suppressions.filter_findings(self._findings)

    def _emit(
        self,
        ctx: CheckerContext,
        code: str,
        message: str,
        start: int,
        end: int,
        severity: Optional[Severity] = None,
    ) -> None:
        """Create and store a finding, clamped into the document."""
        n = len(ctx.source)
        start = max(0, min(start, n))
        end = max(start, min(end, n))
        self._findings.append(Finding(
            start=start,
            end=end,
            message=message,
            severity=severity or self.default_severity,
            code=code,
            checker=self.name,
        ))

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} '{self.name}'>"


# ═════════════════════════════════════════════════════════════════════════
#  PART 2: CHECKER REGISTRY
# ═════════════════════════════════════════════════════════════════════════

class CheckerRegistry:
    """
    Ordered registry of checker classes.

    Registration order is run order.

    Usage
    -----
    >>> registry = CheckerRegistry()
    >>> registry.register(BracketChecker)
    >>> registry.disable("brackets")
    >>> registry.get_enabled()
    []
    """

    def __init__(self) -> None:
        self._checkers: Dict[str, Type[Checker]] = {}
        self._disabled: Set[str] = set()

    def register(self, checker_cls: Type[Checker]) -> None:
        self._checkers[checker_cls.name] = checker_cls

    def unregister(self, name: str) -> None:
        self._checkers.pop(name, None)

    def disable(self, name: str) -> None:
        self._require(name)
        self._disabled.add(name)

    def enable(self, name: str) -> None:
        self._require(name)
        self._disabled.discard(name)

    def get_all(self) -> List[Type[Checker]]:
        return list(self._checkers.values())

    def get_enabled(self) -> List[Type[Checker]]:
        return [
            cls for name, cls in self._checkers.items()
            if name not in self._disabled
        ]

    def get_by_name(self, name: str) -> Optional[Type[Checker]]:
        return self._checkers.get(name)

    def filter_by_code(self, code: str) -> List[Type[Checker]]:
        """Return checkers that can produce *code*."""
        return [cls for cls in self._checkers.values() if code in cls.codes]

    @property
    def names(self) -> List[str]:
        return list(self._checkers)

    def _require(self, name: str) -> None:
        if name not in self._checkers:
            raise UnknownCheckerError(name, self._checkers)


# ═════════════════════════════════════════════════════════════════════════
#  PART 3: PRODUCTION CHECKERS
# ═════════════════════════════════════════════════════════════════════════

# ─────────────────────────────────────────────────────────────────────────
#  3.1  Bracket matching
# ─────────────────────────────────────────────────────────────────────────

class BracketChecker(Checker):
    """
    Reports mismatched, stray and unclosed ``{}``, ``[]`` and ``()``.

    By default brackets inside string literals and comments are ignored;
    set ``brackets_ignore_strings`` to False to match over the raw text.
    """

    name: ClassVar[str] = "brackets"
    description: ClassVar[str] = "Mismatched, unexpected and unclosed brackets"
    codes: ClassVar[FrozenSet[str]] = frozenset({
        FindingCode.MISMATCHED_BRACKET,
        FindingCode.UNEXPECTED_BRACKET,
        FindingCode.UNCLOSED_BRACKET,
    })

    def collect_evidence(self, ctx: CheckerContext) -> None:
        if ctx.get_option("brackets_ignore_strings", True):
            view = ctx.source.code
        else:
            view = ctx.source.text
        self._events = scan_brackets(view)

    def diagnose(self, ctx: CheckerContext) -> None:
        for ev in self._events:
            if ev.kind == "mismatch":
                code = FindingCode.MISMATCHED_BRACKET
                msg = f"Mismatched bracket: found '{ev.char}' but expected '{ev.expected}'"
            elif ev.kind == "unexpected":
                code = FindingCode.UNEXPECTED_BRACKET
                msg = f"Unexpected closing bracket '{ev.char}' with nothing open"
            else:
                code = FindingCode.UNCLOSED_BRACKET
                msg = f"Unclosed '{ev.char}': missing '{ev.expected}'"
            self._emit(ctx, code, msg, ev.offset, ev.offset + 1)


# ─────────────────────────────────────────────────────────────────────────
#  3.2  Keyword suffix
# ─────────────────────────────────────────────────────────────────────────

class KeywordSuffixChecker(Checker):
    """
    Flags ``$``-keywords written without their marker (``if x {``).

    A keyword counts as bare when it is directly followed by whitespace.
    ``else`` takes the marker optionally and is never flagged.
    """

    name: ClassVar[str] = "keyword-suffix"
    description: ClassVar[str] = "Keywords missing their '$' suffix"
    codes: ClassVar[FrozenSet[str]] = frozenset({FindingCode.MISSING_KEYWORD_SUFFIX})

    def collect_evidence(self, ctx: CheckerContext) -> None:
        code = ctx.source.code
        n = len(code)
        self._hits: List[Tuple[int, int, str]] = []
        for start, end, word in iter_words(code):
            if word in SUFFIX_REQUIRED and end < n and code[end].isspace():
                self._hits.append((start, end, word))

    def diagnose(self, ctx: CheckerContext) -> None:
        for start, end, word in self._hits:
            self._emit(
                ctx, FindingCode.MISSING_KEYWORD_SUFFIX,
                f"Keyword '{word}' should be followed by {SUFFIX_MARKER} "
                f"(use '{word}{SUFFIX_MARKER}')",
                start, end,
            )


# ─────────────────────────────────────────────────────────────────────────
#  3.3  Unterminated strings
# ─────────────────────────────────────────────────────────────────────────

class StringLiteralChecker(Checker):
    """Reports string literals that reach a line end or EOF unclosed."""

    name: ClassVar[str] = "strings"
    description: ClassVar[str] = "Unclosed string literals"
    codes: ClassVar[FrozenSet[str]] = frozenset({FindingCode.UNCLOSED_STRING})

    def collect_evidence(self, ctx: CheckerContext) -> None:
        self._spans = scan_unterminated_strings(ctx.source.text)

    def diagnose(self, ctx: CheckerContext) -> None:
        for start, end in self._spans:
            self._emit(ctx, FindingCode.UNCLOSED_STRING, "Unclosed string literal", start, end)


# ─────────────────────────────────────────────────────────────────────────
#  3.4  Built-in call prefix
# ─────────────────────────────────────────────────────────────────────────

class BuiltinPrefixChecker(Checker):
    """
    Flags calls to built-ins written without the ``::`` prefix.

    Every occurrence of a built-in name passes three tests, in order:

      1. the two preceding characters are not ``::``
      2. the preceding character does not continue an identifier and is
         not a member-access ``.``
      3. the rest of the line, left-trimmed, starts with ``(`` or a quote

    so ``::print("x")``, ``myprint(x)`` and a bare ``print`` reference are
    all left alone.
    """

    name: ClassVar[str] = "builtin-prefix"
    description: ClassVar[str] = "Built-in calls missing the '::' prefix"
    codes: ClassVar[FrozenSet[str]] = frozenset({FindingCode.MISSING_BUILTIN_PREFIX})

    def collect_evidence(self, ctx: CheckerContext) -> None:
        src = ctx.source
        self._hits: List[Tuple[int, int, str]] = []
        for line_no in range(src.index.line_count):
            if src.is_comment_line(line_no):
                continue
            line = src.view_line(src.code, line_no)
            base = src.line_offset(line_no)
            for name in sorted(BUILTIN_NAMES):
                for pos in _find_whole(line, name):
                    if self._is_unprefixed_call(line, pos, name):
                        self._hits.append((base + pos, base + pos + len(name), name))
        self._hits.sort()

    @staticmethod
    def _is_unprefixed_call(line: str, pos: int, name: str) -> bool:
        if line[max(0, pos - 2):pos] == BUILTIN_PREFIX:
            return False
        prev = line[pos - 1] if pos > 0 else " "
        if is_word_char(prev) or prev == ".":
            return False
        after = line[pos + len(name):].lstrip()
        return after.startswith(("(", '"', "'"))

    def diagnose(self, ctx: CheckerContext) -> None:
        for start, end, name in self._hits:
            self._emit(
                ctx, FindingCode.MISSING_BUILTIN_PREFIX,
                f"Built-in function '{name}' should be prefixed with {BUILTIN_PREFIX} "
                f"(use '{BUILTIN_PREFIX}{name}')",
                start, end,
            )


def _find_whole(line: str, name: str) -> List[int]:
    """Offsets of *name* in *line* not followed by an identifier character."""
    found: List[int] = []
    pos = line.find(name)
    while pos != -1:
        tail = pos + len(name)
        if tail >= len(line) or not is_word_char(line[tail]):
            found.append(pos)
        pos = line.find(name, pos + 1)
    return found


# ─────────────────────────────────────────────────────────────────────────
#  3.5  Undeclared names (heuristic)
# ─────────────────────────────────────────────────────────────────────────

_LET_RE = re.compile(rf"let\$\s*({_IDENT})\s*:?=")
_FUNC_RE = re.compile(rf"\bfunc\$\s+({_IDENT})\s*\(([^)]*)\)")
_CLASS_RE = re.compile(rf"\bclass\$\s+({_IDENT})")
_DECL_SITE_RE = re.compile(rf"\b(?:let|func|class)\$\s*({_IDENT})")
_PARAM_RE = re.compile(_IDENT)


class UndeclaredNameChecker(Checker):
    """
    Reports identifiers that are used but never declared.

    Declarations are collected from the whole document first (``let$ x =``,
    ``func$`` names and parameters, ``class$`` names, implicit names), then
    the document is re-scanned line by line.  The first use of an unknown
    name is reported and the name is remembered, so later uses stay quiet.

    This is a lexical heuristic: it has no notion of scope, so a name
    declared inside one function is visible everywhere after the scan has
    seen it.
    """

    name: ClassVar[str] = "undeclared"
    description: ClassVar[str] = "Use of names that are never declared (heuristic)"
    codes: ClassVar[FrozenSet[str]] = frozenset({FindingCode.UNDEFINED_VARIABLE})
    default_severity: ClassVar[Severity] = Severity.WARNING

    def configure(self, ctx: CheckerContext) -> None:
        text = ctx.source.text
        declared = ctx.declared
        for m in _LET_RE.finditer(text):
            declared.add(m.group(1))
        for m in _FUNC_RE.finditer(text):
            declared.add(m.group(1))
            for param in m.group(2).split(","):
                pm = _PARAM_RE.search(param)
                if pm is not None:
                    declared.add(pm.group(0))
        for m in _CLASS_RE.finditer(text):
            declared.add(m.group(1))
        declared.update(ctx.get_option("implicit_names", ()))

    def collect_evidence(self, ctx: CheckerContext) -> None:
        src = ctx.source
        declared = ctx.declared
        self._hits: List[Tuple[int, int, str]] = []

        for line_no, raw in enumerate(src.lines):
            if src.is_comment_line(line_no):
                continue
            for m in _LET_RE.finditer(raw):
                declared.add(m.group(1))

            visible = src.view_line(src.code, line_no)
            sites = {m.group(1) for m in _DECL_SITE_RE.finditer(visible)}
            base = src.line_offset(line_no)

            for start, end, word in iter_words(visible):
                if word in RESERVED_WORDS or word in sites:
                    continue
                if _is_not_a_use(visible, start, end):
                    continue
                if word not in declared:
                    self._hits.append((base + start, base + end, word))
                    declared.add(word)

    def diagnose(self, ctx: CheckerContext) -> None:
        for start, end, word in self._hits:
            self._emit(
                ctx, FindingCode.UNDEFINED_VARIABLE,
                f"Variable '{word}' is used but not defined",
                start, end,
            )


def _is_not_a_use(line: str, start: int, end: int) -> bool:
    """``obj.name``, ``::name``, ``<name>`` and ``name: value`` are not variable uses."""
    if start > 0 and line[start - 1] == ".":
        return True
    if line[max(0, start - 2):start] == BUILTIN_PREFIX:
        return True
    if start > 0 and line[start - 1] == "<" and line[end:end + 1] == ">":
        return True
    rest = line[end:].lstrip()
    return rest.startswith(":") and not rest.startswith(("::", ":="))


# ─────────────────────────────────────────────────────────────────────────
#  3.6  Composite type annotations
# ─────────────────────────────────────────────────────────────────────────

def _join_types(conjunction: str) -> str:
    *head, last = (f"<{t}>" for t in COMPOSITE_TYPE_ORDER)
    return ", ".join(head) + f", {conjunction} {last}"


_TYPE_LIST = _join_types("or")
_TYPE_LIST_AND = _join_types("and")


class DataTypeChecker(Checker):
    """
    Checks ``<stack>``-style type annotations.

    ``<>``            → empty
    ``< stack >``     → malformed (spaces around a valid name)
    ``<stak>``        → invalid name

    Spans whose content holds internal whitespace or operator characters
    (``a < b and c > d``, ``x <= y``) are comparisons, not annotations.
    """

    name: ClassVar[str] = "data-types"
    description: ClassVar[str] = "Empty, malformed or unknown <type> annotations"
    codes: ClassVar[FrozenSet[str]] = frozenset({
        FindingCode.EMPTY_DATA_TYPE,
        FindingCode.MALFORMED_DATA_TYPE,
        FindingCode.INVALID_DATA_TYPE,
    })

    def collect_evidence(self, ctx: CheckerContext) -> None:
        limit = ctx.get_option("type_span_limit", 32)
        self._spans = list(iter_angle_spans(ctx.source.code, limit))

    def diagnose(self, ctx: CheckerContext) -> None:
        for start, end, inner in self._spans:
            name = inner.strip()
            if not name:
                self._emit(
                    ctx, FindingCode.EMPTY_DATA_TYPE,
                    f"Empty data type brackets. Should be {_TYPE_LIST}",
                    start, end,
                )
            elif name in COMPOSITE_TYPES:
                if inner != name:
                    self._emit(
                        ctx, FindingCode.MALFORMED_DATA_TYPE,
                        f"Malformed data type. Should be <{name}> without spaces",
                        start, end,
                    )
            elif inner == name and _is_identifier(name):
                self._emit(
                    ctx, FindingCode.INVALID_DATA_TYPE,
                    f"Invalid data type <{name}>. Valid types are {_TYPE_LIST_AND}",
                    start, end,
                )


def _is_identifier(s: str) -> bool:
    return bool(s) and not s[0].isdigit() and all(is_word_char(c) for c in s)


# ─────────────────────────────────────────────────────────────────────────
#  3.7  Dictionary literals
# ─────────────────────────────────────────────────────────────────────────

class DictionaryChecker(Checker):
    """
    Checks ``dict{...}`` literals.

    ``dict`` must be followed, after whitespace only, by ``{`` within
    ``dict_lookahead_chars`` characters; that brace must be closed somewhere
    later in the document.
    """

    name: ClassVar[str] = "dictionaries"
    description: ClassVar[str] = "dict literals without or with unclosed braces"
    codes: ClassVar[FrozenSet[str]] = frozenset({
        FindingCode.MISSING_DICT_BRACE,
        FindingCode.UNCLOSED_DICT,
    })

    def collect_evidence(self, ctx: CheckerContext) -> None:
        code = ctx.source.code
        window = ctx.get_option("dict_lookahead_chars", 16)
        pairs = match_braces(code)
        self._missing: List[Tuple[int, int]] = []
        self._unclosed: List[Tuple[int, int]] = []

        for start, end, word in iter_words(code):
            if word != "dict":
                continue
            brace = _brace_after(code, end, window)
            if brace is None:
                self._missing.append((start, end))
            elif pairs.get(brace) is None:
                self._unclosed.append((start, brace + 1))

    def diagnose(self, ctx: CheckerContext) -> None:
        for start, end in self._missing:
            self._emit(
                ctx, FindingCode.MISSING_DICT_BRACE,
                "Dictionary declaration should be followed by { (e.g., dict{key: value})",
                start, end,
            )
        for start, end in self._unclosed:
            self._emit(
                ctx, FindingCode.UNCLOSED_DICT,
                "Unclosed dictionary. Missing closing }",
                start, end,
            )


def _brace_after(code: str, pos: int, window: int) -> Optional[int]:
    for i in range(pos, min(len(code), pos + window)):
        ch = code[i]
        if ch == "{":
            return i
        if not ch.isspace():
            return None
    return None


# ─────────────────────────────────────────────────────────────────────────
#  3.8  Incomplete constructs
# ─────────────────────────────────────────────────────────────────────────

_FUNC_HEADER_RE = re.compile(rf"\bfunc\$\s+({_IDENT})\s*\([^)]*\)")
_CLASS_HEADER_RE = re.compile(rf"\bclass\$\s+({_IDENT})")


class IncompleteConstructChecker(Checker):
    """
    Reports control, function and class headers that never open a body.

    A header is complete when ``{`` appears after it on its own line, or
    when one of the next ``construct_lookahead_lines`` lines starts with
    ``{``.  The search stops there: a brace further down does not count.
    """

    name: ClassVar[str] = "constructs"
    description: ClassVar[str] = "Control/function/class headers missing a { } body"
    codes: ClassVar[FrozenSet[str]] = frozenset({
        FindingCode.INCOMPLETE_STATEMENT,
        FindingCode.INCOMPLETE_FUNCTION,
        FindingCode.INCOMPLETE_CLASS,
    })

    def collect_evidence(self, ctx: CheckerContext) -> None:
        src = ctx.source
        code = src.code
        lookahead = ctx.get_option("construct_lookahead_lines", 3)
        self._statements: List[Tuple[int, int, str]] = []
        self._functions: List[Tuple[int, int, str]] = []
        self._classes: List[Tuple[int, int, str]] = []

        for start, end, word in iter_words(code):
            has_marker = end < len(code) and code[end] == SUFFIX_MARKER
            if word in BODY_KEYWORDS and has_marker:
                label, kw_end = f"{word}{SUFFIX_MARKER}", end + 1
            elif word == "else":
                label, kw_end = word, end + 1 if has_marker else end
            else:
                continue
            if not self._has_body(src, kw_end, lookahead):
                self._statements.append((start, kw_end, label))

        for m in _FUNC_HEADER_RE.finditer(code):
            if not self._has_body(src, m.end(), lookahead):
                self._functions.append((m.start(), m.end(), m.group(1)))
        for m in _CLASS_HEADER_RE.finditer(code):
            if not self._has_body(src, m.end(), lookahead):
                self._classes.append((m.start(), m.end(), m.group(1)))

    @staticmethod
    def _has_body(src: SourceText, header_end: int, lookahead: int) -> bool:
        code = src.code
        line_no = src.line_of(header_end)
        _, line_end = src.index.line_span(line_no)
        if "{" in code[header_end:line_end]:
            return True
        last = min(line_no + lookahead, src.index.line_count - 1)
        for nxt in range(line_no + 1, last + 1):
            if src.view_line(code, nxt).strip().startswith("{"):
                return True
        return False

    def diagnose(self, ctx: CheckerContext) -> None:
        for start, end, label in self._statements:
            self._emit(
                ctx, FindingCode.INCOMPLETE_STATEMENT,
                f"Incomplete {label} statement. Missing {{ }} body",
                start, end,
            )
        for start, end, name in self._functions:
            self._emit(
                ctx, FindingCode.INCOMPLETE_FUNCTION,
                f"Incomplete function definition for '{name}'. Missing {{ }} body",
                start, end,
            )
        for start, end, name in self._classes:
            self._emit(
                ctx, FindingCode.INCOMPLETE_CLASS,
                f"Incomplete class definition for '{name}'. Missing {{ }} body",
                start, end,
            )


# ─────────────────────────────────────────────────────────────────────────
#  3.9  Statement terminators
# ─────────────────────────────────────────────────────────────────────────

_HEADER_RE = re.compile(rf"^({_IDENT})(\$?)")
_CALL_RE = re.compile(rf"\b{_IDENT}\s*\(")
_NEXT_LINE_CONTINUATIONS = (".", "->", "&&", "||")
_OPEN_TAILS = ("\\", ",", "(", "[", "=", "+", "-", "*", "/", "%", "&&", "||", ".")


class TerminatorChecker(Checker):
    """
    Reports statements that do not end with ``;``.

    Only lines that look like a statement are considered: an assignment,
    a call ``name(``, or a namespaced call ``::name``.  Skipped are blank and
    comment lines, block delimiters, control/function/class headers, and
    lines that continue onto, or are continued from, a neighbouring line.
    """

    name: ClassVar[str] = "semicolons"
    description: ClassVar[str] = "Statements missing their terminating ';'"
    codes: ClassVar[FrozenSet[str]] = frozenset({FindingCode.MISSING_SEMICOLON})

    def collect_evidence(self, ctx: CheckerContext) -> None:
        src = ctx.source
        lines = src.lines
        self._ends: List[int] = []

        for i, raw in enumerate(lines):
            line = raw.strip()
            if not line or line.startswith(COMMENT_CHAR):
                continue
            if _is_header(line):
                continue
            if i > 0 and lines[i - 1].strip().endswith("\\"):
                continue
            if i + 1 < len(lines) and lines[i + 1].strip().startswith(_NEXT_LINE_CONTINUATIONS):
                continue

            visible = src.view_line(src.code, i).strip()
            if not visible or visible[-1] in "{};":
                continue
            if visible.endswith(_OPEN_TAILS):
                continue
            if "=" in visible or _CALL_RE.search(visible) or BUILTIN_PREFIX in visible:
                self._ends.append(src.index.line_span(i)[1])

    def diagnose(self, ctx: CheckerContext) -> None:
        for end in self._ends:
            self._emit(
                ctx, FindingCode.MISSING_SEMICOLON,
                "Missing semicolon at end of statement",
                end, end,
            )


def _is_header(line: str) -> bool:
    m = _HEADER_RE.match(line)
    if m is None:
        return False
    word, marker = m.group(1), m.group(2)
    return word == "else" or (word in HEADER_KEYWORDS and marker == SUFFIX_MARKER)


# ═════════════════════════════════════════════════════════════════════════
#  PART 4: CHECKER RUNNER
# ═════════════════════════════════════════════════════════════════════════

# Default registry with all built-in checkers, in run order
_DEFAULT_REGISTRY = CheckerRegistry()
_DEFAULT_REGISTRY.register(BracketChecker)
_DEFAULT_REGISTRY.register(KeywordSuffixChecker)
_DEFAULT_REGISTRY.register(StringLiteralChecker)
_DEFAULT_REGISTRY.register(BuiltinPrefixChecker)
_DEFAULT_REGISTRY.register(UndeclaredNameChecker)
_DEFAULT_REGISTRY.register(DataTypeChecker)
_DEFAULT_REGISTRY.register(DictionaryChecker)
_DEFAULT_REGISTRY.register(IncompleteConstructChecker)
_DEFAULT_REGISTRY.register(TerminatorChecker)


def default_registry() -> CheckerRegistry:
    """The module-wide registry holding every built-in checker."""
    return _DEFAULT_REGISTRY


@dataclass
class CheckerRunResults:
    """
    Aggregate results from running a suite of checkers on one document.

    Attributes
    ----------
    source               : the analysed snapshot
    findings             : all findings, in checker order then discovery order
    findings_by_checker  : findings grouped by checker name
    stats                : timing statistics
    checker_names        : names of checkers that were run
    """
    source: SourceText
    findings: List[Finding] = field(default_factory=list)
    findings_by_checker: Dict[str, List[Finding]] = field(
        default_factory=lambda: defaultdict(list)
    )
    stats: Dict[str, Any] = field(default_factory=dict)
    checker_names: List[str] = field(default_factory=list)

    @property
    def error_count(self) -> int:
        return sum(1 for f in self.findings if f.severity == Severity.ERROR)

    @property
    def warning_count(self) -> int:
        return sum(1 for f in self.findings if f.severity == Severity.WARNING)

    @property
    def total_count(self) -> int:
        return len(self.findings)

    def by_severity(self, severity: Severity) -> List[Finding]:
        return [f for f in self.findings if f.severity == severity]

    def by_code(self, code: str) -> List[Finding]:
        return [f for f in self.findings if f.code == code]

    def to_json_lines(self) -> str:
        index = self.source.index
        return "\n".join(f.to_json_str(index) for f in self.findings)

    def to_gcc_format(self, path: Optional[str] = None) -> str:
        name = path or self.source.name
        index = self.source.index
        return "\n".join(f.to_gcc_format(name, index) for f in self.findings)

    def summary(self) -> str:
        lines = [
            f"{self.source.name}: {self.total_count} findings "
            f"({self.error_count} errors, {self.warning_count} warnings)",
        ]
        for name in self.checker_names:
            count = len(self.findings_by_checker.get(name, []))
            elapsed = self.stats.get(f"{name}_elapsed_ms", 0)
            lines.append(f"  {name}: {count} findings ({elapsed:.1f}ms)")
        return "\n".join(lines)


class CheckerRunner:
    """
    Runs a suite of checkers against one document snapshot.

    Usage
    -----
    >>> runner = CheckerRunner()
    >>> results = runner.run('let$ x = 1\\n')
    >>> print(results.summary())

    >>> results = runner.run(text, checkers=["brackets", "strings"])

    Parameters for constructor
    ─────────────────────────
    registry    : CheckerRegistry — source of checker classes
    suppressions: SuppressionManager — global suppression rules
    options     : dict — effective options (see ``load_options``)
    """

    def __init__(
        self,
        registry: Optional[CheckerRegistry] = None,
        suppressions: Optional[SuppressionManager] = None,
        options: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.registry = registry or _DEFAULT_REGISTRY
        self.suppressions = suppressions or SuppressionManager()
        self.options: Dict[str, Any] = dict(DEFAULT_OPTIONS)
        self.options.update(options or {})

    def resolve(self, checkers: Optional[Sequence[str]] = None) -> List[Type[Checker]]:
        """Checker classes for *checkers* (None = all enabled)."""
        if checkers is None:
            return self.registry.get_enabled()
        classes: List[Type[Checker]] = []
        for name in checkers:
            cls = self.registry.get_by_name(name)
            if cls is None:
                raise UnknownCheckerError(name, self.registry.names)
            classes.append(cls)
        return classes

    def run(
        self,
        source: Union[str, SourceText],
        checkers: Optional[Sequence[str]] = None,
    ) -> CheckerRunResults:
        """
        Run checkers against a single document.

        Parameters
        ----------
        source   : document text or an existing snapshot
        checkers : checker names to run (None = all enabled)

        Raises
        ------
        UnknownCheckerError
            If *checkers* names a checker the registry does not know.
        """
        if not isinstance(source, SourceText):
            source = SourceText(source)
        checker_classes = self.resolve(checkers)
        results = CheckerRunResults(source=source)

        # One context per run: the declared-name set lives and dies here.
        ctx = CheckerContext(
            source=source,
            suppressions=self.suppressions.for_source(source),
            options=self.options,
        )

        for cls in checker_classes:
            checker = cls()
            checker_name = cls.name
            results.checker_names.append(checker_name)

            t0 = time.monotonic()
            try:
                checker.configure(ctx)
                checker.collect_evidence(ctx)
                checker.diagnose(ctx)
                findings = checker.report(ctx)
            except Exception as exc:
                # Graceful degradation: report the failure, don't crash
                _log.exception("checker %s failed on %s", checker_name, source.name)
                findings = [Finding(
                    start=0,
                    end=0,
                    message=f"Checker '{checker_name}' failed: {exc}",
                    severity=Severity.WARNING,
                    code=FindingCode.CHECKER_INTERNAL_ERROR,
                    checker=checker_name,
                )]
            elapsed_ms = (time.monotonic() - t0) * 1000.0
            _log.debug("%s: %d findings in %.2fms", checker_name, len(findings), elapsed_ms)

            results.findings.extend(findings)
            results.findings_by_checker[checker_name] = findings
            results.stats[f"{checker_name}_elapsed_ms"] = elapsed_ms

        return results


# ═════════════════════════════════════════════════════════════════════════
#  PART 5: CORE ENTRY POINT
# ═════════════════════════════════════════════════════════════════════════

def analyze(
    source_text: str,
    options: Optional[Mapping[str, Any]] = None,
    checkers: Optional[Sequence[str]] = None,
) -> List[Finding]:
    """
    Lint one document and return its findings.

    Pure function of its arguments: environment variables are not consulted
    and nothing is kept between calls.

    >>> [f.code for f in analyze('::print("hi")')]
    ['missingSemicolon']
    """
    runner = CheckerRunner(options=load_options(options, environ={}))
    return runner.run(source_text, checkers=checkers).findings


__all__ = [
    # Framework
    "Checker",
    "CheckerContext",
    "CheckerRegistry",
    "default_registry",
    # Production checkers
    "BracketChecker",
    "KeywordSuffixChecker",
    "StringLiteralChecker",
    "BuiltinPrefixChecker",
    "UndeclaredNameChecker",
    "DataTypeChecker",
    "DictionaryChecker",
    "IncompleteConstructChecker",
    "TerminatorChecker",
    # Runner
    "CheckerRunner",
    "CheckerRunResults",
    # Entry point
    "analyze",
]

#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
tesseract_lint/vocabulary.py
============================

The Tesseract vocabulary: keywords, operators, literal values, built-in
functions and types.

This is the single table consulted by every vocabulary-driven checker
(keyword suffix, built-in prefix, composite types, undeclared names).  Any
editor-side collaborator that offers completions or hover text must read the
same table through :func:`lookup` / :func:`iter_words` so the analyzer and the
editor never disagree about what a word means.

Suffix markers
--------------
``$``   the word must carry a ``$`` suffix (``if$``, ``let$``)
``$?``  the suffix is optional (``else`` / ``else$``)
``""``  no suffix (operators, values, types)

Built-ins are always called through the ``::`` namespace prefix
(``::print("hi")``).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Iterator, Optional, Tuple

__all__ = [
    "WordKind",
    "Word",
    "SUFFIX_MARKER",
    "BUILTIN_PREFIX",
    "COMMENT_CHAR",
    "KEYWORDS",
    "OPERATORS",
    "VALUES",
    "BUILTINS",
    "TYPES",
    "SUFFIX_REQUIRED",
    "CONTROL_KEYWORDS",
    "BODY_KEYWORDS",
    "HEADER_KEYWORDS",
    "BUILTIN_NAMES",
    "COMPOSITE_TYPES",
    "COMPOSITE_TYPE_ORDER",
    "RESERVED_WORDS",
    "lookup",
    "iter_words",
]


SUFFIX_MARKER = "$"
BUILTIN_PREFIX = "::"
COMMENT_CHAR = "#"


class WordKind(Enum):
    """Category of a vocabulary entry."""
    KEYWORD = "keyword"
    OPERATOR = "operator"
    VALUE = "value"
    BUILTIN = "builtin"
    TYPE = "type"


@dataclass(frozen=True)
class Word:
    """One vocabulary entry."""
    name: str
    kind: WordKind
    detail: str
    suffix: str = ""
    usage: str = ""

    @property
    def suffix_required(self) -> bool:
        return self.suffix == SUFFIX_MARKER

    @property
    def canonical(self) -> str:
        """The spelling users should write (``if$``, ``::print``, ``<stack>``)."""
        if self.kind is WordKind.BUILTIN:
            return f"{BUILTIN_PREFIX}{self.name}"
        if self.suffix_required:
            return f"{self.name}{SUFFIX_MARKER}"
        if self.name in _ANGLE_TYPES:
            return f"<{self.name}>"
        return self.name


def _table(kind: WordKind, *entries: Tuple[str, ...]) -> Dict[str, Word]:
    out: Dict[str, Word] = {}
    for entry in entries:
        name, detail = entry[0], entry[1]
        suffix = entry[2] if len(entry) > 2 else ""
        usage = entry[3] if len(entry) > 3 else ""
        out[name] = Word(name=name, kind=kind, detail=detail, suffix=suffix, usage=usage)
    return out


_ANGLE_TYPES = frozenset({"stack", "queue", "linked", "regex"})


# ═══════════════════════════════════════════════════════════════════════════
# TABLES
# ═══════════════════════════════════════════════════════════════════════════

KEYWORDS: Dict[str, Word] = _table(
    WordKind.KEYWORD,
    ("if", "Conditional statement", "$", "if$ condition {\n    # code\n}"),
    ("else", "Else clause", "$?", "if$ condition {\n    # code\n} else {\n    # alternative\n}"),
    ("elseif", "Else if clause", "$", "if$ a {\n    # code\n} elseif$ b {\n    # code\n}"),
    ("loop", "Loop statement", "$", "loop$ condition {\n    # code\n}"),
    ("while", "Conditional loop statement", "$", "while$ condition {\n    # code\n}"),
    ("import", "Import statement", "$", 'import$ "module_name"'),
    ("let", "Variable declaration", "$", "let$ variable_name = value;"),
    ("func", "Function declaration", "$", "func$ name(param1, param2) {\n    # code\n}"),
    ("class", "Class declaration", "$", "class$ ClassName {\n    # members\n}"),
)

OPERATORS: Dict[str, Word] = _table(
    WordKind.OPERATOR,
    ("and", "Logical AND"),
    ("or", "Logical OR"),
    ("not", "Logical NOT"),
)

VALUES: Dict[str, Word] = _table(
    WordKind.VALUE,
    ("true", "Boolean true"),
    ("false", "Boolean false"),
)

BUILTINS: Dict[str, Word] = _table(
    WordKind.BUILTIN,
    ("print", "Print to console", "", "::print(value)"),
    ("input", "Read a line of user input", "", "::input(prompt)"),
    ("len", "Get length of collection", "", "::len(collection)"),
    ("append", "Append to collection", "", "::append(collection, element)"),
    ("prepend", "Prepend to collection", "", "::prepend(collection, element)"),
    ("pop", "Remove and return last element", "", "::pop(collection)"),
    ("insert", "Insert element at position", "", "::insert(collection, position, element)"),
    ("remove", "Remove element", "", "::remove(collection, element)"),
    ("pattern_match", "Match pattern", "", "::pattern_match(value, pattern)"),
    ("get", "Get element by key", "", "::get(dictionary, key)"),
    ("set", "Set element by key", "", "::set(dictionary, key, value)"),
    ("keys", "Get dictionary keys", "", "::keys(dictionary)"),
    ("values", "Get dictionary values", "", "::values(dictionary)"),
    ("push", "Push to stack", "", "::push(stack, element)"),
    ("peek", "Peek at stack top", "", "::peek(stack)"),
    ("size", "Get collection size", "", "::size(collection)"),
    ("empty", "Check if collection is empty", "", "::empty(collection)"),
    ("enqueue", "Add to queue", "", "::enqueue(queue, element)"),
    ("dequeue", "Remove from queue", "", "::dequeue(queue)"),
    ("front", "Get front of queue", "", "::front(queue)"),
    ("back", "Get back of queue", "", "::back(queue)"),
    ("isEmpty", "Check if empty", "", "::isEmpty(collection)"),
    ("qsize", "Get queue size", "", "::qsize(queue)"),
    ("addNode", "Add node to linked list", "", "::addNode(linkedlist, value)"),
    ("removeNode", "Remove node from linked list", "", "::removeNode(linkedlist, value)"),
    ("find", "Find node in linked list", "", "::find(linkedlist, value)"),
    ("head", "Get first node of linked list", "", "::head(linkedlist)"),
    ("tail", "Get last node of linked list", "", "::tail(linkedlist)"),
    ("lsize", "Get linked list size", "", "::lsize(linkedlist)"),
    ("ladd", "Add value to linked list", "", "::ladd(list, value)"),
    ("lremove", "Remove first occurrence from linked list", "", "::lremove(list, value)"),
    ("lget", "Get linked list element at index", "", "::lget(list, index)"),
    ("lisEmpty", "Check if linked list is empty", "", "::lisEmpty(list)"),
    ("rmatch", "Test whether a regex matches", "", "::rmatch(regex, text)"),
    ("rfind_all", "Find all regex match positions", "", "::rfind_all(regex, text)"),
    ("rreplace", "Replace first regex match", "", "::rreplace(regex, text, replacement)"),
    ("http_get", "HTTP GET request", "", "::http_get(url, [headers])"),
    ("http_post", "HTTP POST request", "", "::http_post(url, data, [headers])"),
    ("http_put", "HTTP PUT request", "", "::http_put(url, data, [headers])"),
    ("http_delete", "HTTP DELETE request", "", "::http_delete(url, [headers])"),
    ("fopen", "Open a file", "", "::fopen(filename, mode)"),
    ("fread", "Read from a file", "", "::fread(filename)"),
    ("fwrite", "Write to a file", "", "::fwrite(filename, content)"),
    ("fclose", "Close a file", "", "::fclose(filename)"),
    ("to_str", "Convert an integer to a string", "", "::to_str(integer)"),
    ("to_int", "Convert a string to an integer", "", "::to_int(string)"),
)

TYPES: Dict[str, Word] = _table(
    WordKind.TYPE,
    ("dict", "Dictionary type", "", "let$ d = dict{key1: value1, key2: value2};"),
    ("stack", "Stack type (LIFO)", "", "let$ s = <stack>;"),
    ("queue", "Queue type (FIFO)", "", "let$ q = <queue>;"),
    ("linked", "Linked list type", "", "let$ l = <linked>;"),
    ("regex", "Regular expression type", "", 'let$ pattern := <regex> "pattern"//flags;'),
)


# ═══════════════════════════════════════════════════════════════════════════
# DERIVED SETS
# ═══════════════════════════════════════════════════════════════════════════

SUFFIX_REQUIRED: FrozenSet[str] = frozenset(
    name for name, word in KEYWORDS.items() if word.suffix_required
)

CONTROL_KEYWORDS: FrozenSet[str] = frozenset({"if", "else", "elseif", "loop", "while"})

# Control keywords that always carry the $ suffix.
BODY_KEYWORDS: FrozenSet[str] = CONTROL_KEYWORDS - {"else"}

# Words that open a block header rather than a statement.
HEADER_KEYWORDS: FrozenSet[str] = CONTROL_KEYWORDS | {"func", "class"}

BUILTIN_NAMES: FrozenSet[str] = frozenset(BUILTINS)

COMPOSITE_TYPES: FrozenSet[str] = frozenset(
    name for name in TYPES if name in _ANGLE_TYPES
)

# Table order, used when listing the valid types in messages.
COMPOSITE_TYPE_ORDER: Tuple[str, ...] = tuple(
    name for name in TYPES if name in _ANGLE_TYPES
)

RESERVED_WORDS: FrozenSet[str] = frozenset(
    list(KEYWORDS) + list(OPERATORS) + list(VALUES) + list(TYPES) + list(BUILTINS)
)

_ALL: Dict[str, Word] = {}
for _tbl in (KEYWORDS, OPERATORS, VALUES, TYPES, BUILTINS):
    _ALL.update(_tbl)


def lookup(word: str) -> Optional[Word]:
    """Return the vocabulary entry for *word*.

    Accepts the bare name as well as the decorated spellings ``if$``,
    ``::print`` and ``<stack>``.
    """
    name = word.strip()
    if name.startswith(BUILTIN_PREFIX):
        name = name[len(BUILTIN_PREFIX):]
    if name.startswith("<") and name.endswith(">"):
        name = name[1:-1].strip()
    if name.endswith(SUFFIX_MARKER):
        name = name[:-1]
    return _ALL.get(name)


def iter_words(kind: Optional[WordKind] = None) -> Iterator[Word]:
    """Iterate vocabulary entries, optionally restricted to one kind."""
    for word in _ALL.values():
        if kind is None or word.kind is kind:
            yield word

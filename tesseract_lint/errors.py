# tesseract_lint/errors.py
"""
Tool-level exception types.

Problems found *in Tesseract source* are never raised; they are reported as
:class:`tesseract_lint.diagnostics.Finding` values.  The exceptions below
cover failures of the tool itself: bad configuration, unknown checker names,
unreadable input files.

Hierarchy
─────────
    LintError (base)
    ├── ConfigError          - invalid option value or option name
    │   └── UnknownCheckerError - checker name not in the registry
    └── SourceLoadError      - input file missing / unreadable / not UTF-8
"""

from __future__ import annotations

from typing import Iterable, Optional


class LintError(Exception):
    """Base exception for all tesseract-lint errors."""

    def __init__(self, message: str, hint: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint

    def __str__(self) -> str:
        if self.hint:
            return f"{self.message} (hint: {self.hint})"
        return self.message


class ConfigError(LintError):
    """An option name or value could not be accepted."""

    def __init__(self, key: str, message: str, hint: str = "") -> None:
        super().__init__(f"option '{key}': {message}", hint=hint)
        self.key = key


class UnknownCheckerError(ConfigError):
    """A checker name was requested that no registry entry provides."""

    def __init__(self, name: str, known: Optional[Iterable[str]] = None) -> None:
        known_list = sorted(known or [])
        hint = f"available checkers: {', '.join(known_list)}" if known_list else ""
        super().__init__("checkers", f"unknown checker '{name}'", hint=hint)
        self.name = name


class SourceLoadError(LintError):
    """A source file could not be read."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"cannot read {path}: {reason}")
        self.path = path
        self.reason = reason


__all__ = [
    "LintError",
    "ConfigError",
    "UnknownCheckerError",
    "SourceLoadError",
]

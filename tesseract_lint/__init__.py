"""
tesseract_lint
==============

Static diagnostics for the Tesseract scripting language.

Each analysis run takes the full text of one document and returns a list
of findings (offset range, message, severity) produced by independent
lexical checkers: bracket balance, keyword ``$`` suffixes, unterminated
strings, ``::`` built-in prefixes, undeclared names, ``<type>``
annotations, ``dict{}`` literals, incomplete constructs and missing ``;``.

Quick start::

    from tesseract_lint import analyze

    for finding in analyze('let$ x = 1\\nif x {\\n}\\n'):
        print(finding.code, finding.message)

The package never configures logging handlers; the CLI
(``python -m tesseract_lint``) does.
"""

from __future__ import annotations

import logging

__version__ = "0.1.0"
__description__ = "Lexical linter for the Tesseract scripting language"

_log = logging.getLogger(__name__)

from tesseract_lint.checkers import (  # noqa: E402
    Checker,
    CheckerContext,
    CheckerRegistry,
    CheckerRunner,
    CheckerRunResults,
    analyze,
    default_registry,
)
from tesseract_lint.config import DEFAULT_OPTIONS, load_options  # noqa: E402
from tesseract_lint.diagnostics import (  # noqa: E402
    Finding,
    FindingCode,
    Severity,
    SuppressionManager,
)
from tesseract_lint.errors import (  # noqa: E402
    ConfigError,
    LintError,
    SourceLoadError,
    UnknownCheckerError,
)
from tesseract_lint.publisher import DiagnosticCollection, DocumentLinter  # noqa: E402
from tesseract_lint.text import SourceText, mask  # noqa: E402

__all__ = [
    "__version__",
    "analyze",
    "mask",
    "SourceText",
    "Finding",
    "FindingCode",
    "Severity",
    "SuppressionManager",
    "Checker",
    "CheckerContext",
    "CheckerRegistry",
    "CheckerRunner",
    "CheckerRunResults",
    "default_registry",
    "DEFAULT_OPTIONS",
    "load_options",
    "DiagnosticCollection",
    "DocumentLinter",
    "LintError",
    "ConfigError",
    "UnknownCheckerError",
    "SourceLoadError",
]

#!/usr/bin/env python3
"""tesseract_lint/__main__.py — command-line entry point.

Usage examples
--------------
    # Lint files with colourful output
    python -m tesseract_lint check main.tes lib/util.tes

    # Lint stdin, GCC-style one-liners for editor quickfix lists
    cat main.tes | python -m tesseract_lint check - --format gcc

    # Only bracket and string checks, SARIF to a file
    python -m tesseract_lint check main.tes --checkers brackets,strings \\
        --format sarif -o report.sarif

    # Show the checkers and the vocabulary
    python -m tesseract_lint list-checkers
    python -m tesseract_lint vocab print

Exit codes
----------
    0   No error-severity findings.
    1   At least one error-severity finding.
    2   Infrastructure failure (unreadable file, bad option, unknown checker).
  130   Interrupted.
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
import textwrap
from typing import List, Optional, Sequence, TextIO, Tuple

from tesseract_lint import __description__, __version__
from tesseract_lint.checkers import CheckerRunner, CheckerRunResults, default_registry
from tesseract_lint.config import load_options, option_items
from tesseract_lint.diagnostics import Finding, SuppressionManager
from tesseract_lint.errors import LintError, SourceLoadError
from tesseract_lint.reporter import Reporter, build_html, build_sarif
from tesseract_lint.text import SourceText
from tesseract_lint.vocabulary import WordKind, iter_words, lookup

_log = logging.getLogger("tesseract_lint")

EXIT_OK = 0
EXIT_FINDINGS = 1
EXIT_INFRA = 2
EXIT_INTERRUPTED = 130

FORMATS = ("text", "json", "gcc", "sarif", "html", "summary")


# ═══════════════════════════════════════════════════════════════════════════
# LOGGING
# ═══════════════════════════════════════════════════════════════════════════

def _configure_logging(verbosity: int) -> None:
    """Set up the ``tesseract_lint`` logger.

    Parameters
    ----------
    verbosity:
        0 → WARNING, 1 → INFO, 2+ → DEBUG.
    """
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s [%(levelname)-5.5s] %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    root = logging.getLogger("tesseract_lint")
    root.setLevel(level)
    root.handlers[:] = [handler]
    root.propagate = False


# ═══════════════════════════════════════════════════════════════════════════
# SOURCE LOADING
# ═══════════════════════════════════════════════════════════════════════════

def load_source(path: str) -> SourceText:
    """Read *path* (``-`` for stdin) into a snapshot."""
    if path == "-":
        return SourceText(sys.stdin.read(), name="<stdin>")
    try:
        with open(path, "r", encoding="utf-8", newline="") as fh:
            content = fh.read()
    except FileNotFoundError:
        raise SourceLoadError(path, "no such file")
    except PermissionError:
        raise SourceLoadError(path, "permission denied")
    except IsADirectoryError:
        raise SourceLoadError(path, "is a directory")
    except UnicodeDecodeError as exc:
        raise SourceLoadError(path, f"not valid UTF-8 ({exc.reason})")
    return SourceText(content, name=path)


def _split_names(values: Optional[Sequence[str]]) -> List[str]:
    names: List[str] = []
    for value in values or ():
        names.extend(part.strip() for part in value.split(",") if part.strip())
    return names


# ═══════════════════════════════════════════════════════════════════════════
# OUTPUT
# ═══════════════════════════════════════════════════════════════════════════

def _json_lines(results: List[CheckerRunResults]) -> str:
    out: List[str] = []
    for res in results:
        for finding in res.findings:
            record = {"file": res.source.name}
            record.update(finding.to_dict(res.source.index))
            out.append(json.dumps(record))
    return "\n".join(out)


def _write_output(results: List[CheckerRunResults], args: argparse.Namespace, out: TextIO) -> None:
    reports: List[Tuple[SourceText, List[Finding]]] = [
        (res.source, res.findings) for res in results
    ]
    fmt = args.format

    if fmt == "text":
        colour = args.color if args.output is None else False
        with Reporter(out, colour=colour) as rep:
            for source, findings in reports:
                rep.report(source, findings)
        return

    if fmt == "json":
        text = _json_lines(results)
    elif fmt == "gcc":
        text = "\n".join(filter(None, (res.to_gcc_format() for res in results)))
    elif fmt == "sarif":
        text = build_sarif(reports)
    elif fmt == "html":
        text = build_html(reports)
    else:
        text = "\n".join(res.summary() for res in results)

    if text:
        out.write(text + "\n")


# ═══════════════════════════════════════════════════════════════════════════
# COMMANDS
# ═══════════════════════════════════════════════════════════════════════════

def cmd_check(args: argparse.Namespace) -> int:
    """Handle the 'check' command."""
    overrides = {}
    if args.raw_brackets:
        overrides["brackets_ignore_strings"] = False

    suppressions = SuppressionManager()
    for code in _split_names(args.suppress):
        suppressions.add_global_suppression(code)

    runner = CheckerRunner(suppressions=suppressions, options=load_options(overrides))
    selected = _split_names(args.checkers) or runner.registry.names
    disabled = set(_split_names(args.disable))
    # Validates every name, including the disabled ones.
    runner.resolve(list(selected) + sorted(disabled))
    names = [n for n in selected if n not in disabled]

    results: List[CheckerRunResults] = []
    for path in args.paths:
        source = load_source(path)
        _log.info("checking %s (%d chars)", source.name, len(source))
        results.append(runner.run(source, checkers=names))

    if args.output:
        with open(args.output, "w", encoding="utf-8") as out:
            _write_output(results, args, out)
        _log.info("wrote %s report to %s", args.format, args.output)
    else:
        _write_output(results, args, sys.stdout)

    has_errors = any(res.error_count for res in results)
    return EXIT_FINDINGS if has_errors else EXIT_OK


def cmd_list_checkers(args: argparse.Namespace) -> int:
    """Handle the 'list-checkers' command."""
    out = sys.stdout
    for cls in default_registry().get_all():
        out.write(f"{cls.name:<16} {cls.description}\n")
        out.write(f"{'':<16} codes: {', '.join(sorted(cls.codes))}\n")
    if args.options:
        out.write("\noptions:\n")
        for key, default in option_items():
            if isinstance(default, tuple):
                default = ",".join(default)
            out.write(f"  {key:<28} {default}\n")
    return EXIT_OK


def cmd_vocab(args: argparse.Namespace) -> int:
    """Handle the 'vocab' command."""
    out = sys.stdout
    if args.word:
        word = lookup(args.word)
        if word is None:
            sys.stderr.write(f"tesseract-lint: '{args.word}' is not a Tesseract word\n")
            return EXIT_INFRA
        out.write(f"{word.canonical}  ({word.kind.value})\n  {word.detail}\n")
        if word.usage:
            out.write(textwrap.indent(word.usage, "    ") + "\n")
        return EXIT_OK

    kind = WordKind(args.kind) if args.kind else None
    for word in iter_words(kind):
        out.write(f"{word.canonical:<18} {word.kind.value:<9} {word.detail}\n")
    return EXIT_OK


# ═══════════════════════════════════════════════════════════════════════════
# ARGUMENT PARSER
# ═══════════════════════════════════════════════════════════════════════════

def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the tesseract-lint CLI."""

    parser = argparse.ArgumentParser(
        prog="tesseract-lint",
        description=__description__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""\
            examples:
              %(prog)s check main.tes
              %(prog)s check - --format gcc < main.tes
              %(prog)s check src/*.tes --disable undeclared --format json
              %(prog)s list-checkers --options
              %(prog)s vocab ::print
        """),
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (repeatable)",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        description="available commands",
        metavar="<command>",
    )

    # ── check ────────────────────────────────────────────────────────────

    p_check = subparsers.add_parser(
        "check",
        help="Lint Tesseract source files",
        description="Run the checkers on each file and report the findings.",
    )
    p_check.add_argument(
        "paths",
        nargs="+",
        metavar="PATH",
        help="Source files to lint (use '-' for stdin)",
    )
    p_check.add_argument(
        "-f", "--format",
        choices=FORMATS,
        default="text",
        help="Output format (default: text)",
    )
    p_check.add_argument(
        "-o", "--output",
        default=None,
        help="Write the report to this file instead of stdout",
    )
    p_check.add_argument(
        "--checkers",
        action="append",
        default=None,
        metavar="NAMES",
        help="Comma-separated checkers to run (default: all)",
    )
    p_check.add_argument(
        "--disable",
        action="append",
        default=None,
        metavar="NAMES",
        help="Comma-separated checkers to skip",
    )
    p_check.add_argument(
        "--suppress",
        action="append",
        default=None,
        metavar="CODES",
        help="Comma-separated finding codes to drop",
    )
    p_check.add_argument(
        "--raw-brackets",
        action="store_true",
        default=False,
        help="Match brackets over the raw text, including strings and comments",
    )
    p_check.add_argument(
        "--color",
        dest="color",
        action="store_true",
        default=None,
        help="Force coloured output",
    )
    p_check.add_argument(
        "--no-color",
        dest="color",
        action="store_false",
        help="Disable coloured output",
    )
    p_check.add_argument(
        "-v", "--verbose",
        action="count",
        default=argparse.SUPPRESS,
        help="Increase log verbosity (repeatable)",
    )
    p_check.set_defaults(func=cmd_check)

    # ── list-checkers ────────────────────────────────────────────────────

    p_list = subparsers.add_parser(
        "list-checkers",
        help="List the available checkers and their finding codes",
    )
    p_list.add_argument(
        "--options",
        action="store_true",
        default=False,
        help="Also list the tunable options and their defaults",
    )
    p_list.set_defaults(func=cmd_list_checkers)

    # ── vocab ────────────────────────────────────────────────────────────

    p_vocab = subparsers.add_parser(
        "vocab",
        help="Show Tesseract keywords, built-ins and types",
    )
    p_vocab.add_argument(
        "word",
        nargs="?",
        default=None,
        help="Show a single entry (accepts 'if$', '::print', '<stack>')",
    )
    p_vocab.add_argument(
        "--kind",
        choices=[k.value for k in WordKind],
        default=None,
        help="Restrict the listing to one kind of word",
    )
    p_vocab.set_defaults(func=cmd_vocab)

    return parser


# ═══════════════════════════════════════════════════════════════════════════
# MAIN
# ═══════════════════════════════════════════════════════════════════════════

def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for the tesseract-lint CLI.

    Parameters
    ----------
    argv : sequence of str, optional
        Command-line arguments. Defaults to sys.argv[1:].

    Returns
    -------
    int
        Exit code (see module docstring).
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    if not hasattr(args, "func"):
        parser.print_help(sys.stderr)
        return EXIT_INFRA

    try:
        return args.func(args)
    except LintError as exc:
        sys.stderr.write(f"tesseract-lint: {exc}\n")
        return EXIT_INFRA
    except OSError as exc:
        if isinstance(exc, BrokenPipeError):
            # Piping to head, etc.
            devnull = os.open(os.devnull, os.O_WRONLY)
            os.dup2(devnull, sys.stdout.fileno())
            return EXIT_OK
        sys.stderr.write(f"tesseract-lint: {exc}\n")
        return EXIT_INFRA
    except KeyboardInterrupt:
        _log.info("Interrupted by user.")
        return EXIT_INTERRUPTED
    except Exception as exc:
        _log.error("Unhandled exception: %s", exc, exc_info=True)
        return EXIT_INFRA


if __name__ == "__main__":
    sys.exit(main())

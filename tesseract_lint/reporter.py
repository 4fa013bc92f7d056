"""
tesseract_lint/reporter.py
══════════════════════════

Rust-style colourful rendering of Tesseract findings.

Output formats
──────────────
  • Terminal : colourful Rust-style rendering (default on a TTY)
  • Plain    : one GCC-style line per finding (non-TTY, ``NO_COLOR``)
  • SARIF    : if $TESSERACT_LINT_SARIF is set to a file path
  • HTML     : if $TESSERACT_LINT_HTML is set to a file path
               ($TESSERACT_LINT_HTML_TEMPLATE overrides the template)

Usage
─────
    from tesseract_lint.reporter import Reporter

    with Reporter(sys.stdout) as rep:
        rep.report(source, findings)
"""

from __future__ import annotations

import json
import os
import sys
import textwrap
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, TextIO, Tuple, Union

import jinja2
from termcolor import colored

from tesseract_lint import __version__
from tesseract_lint.diagnostics import Finding, Severity
from tesseract_lint.text import SourceText

__all__ = [
    "Reporter",
    "ReporterStats",
    "build_sarif",
    "build_html",
    "severity_color",
]

TOOL_NAME = "tesseract-lint"

ENV_SARIF = "TESSERACT_LINT_SARIF"
ENV_HTML = "TESSERACT_LINT_HTML"
ENV_HTML_TEMPLATE = "TESSERACT_LINT_HTML_TEMPLATE"

# severity → (termcolor colour, SARIF level)
_SEVERITY_STYLE: Dict[Severity, Tuple[str, str]] = {
    Severity.ERROR: ("red", "error"),
    Severity.WARNING: ("yellow", "warning"),
}

Report = Tuple[SourceText, List[Finding]]


def severity_color(severity: Severity) -> str:
    return _SEVERITY_STYLE[severity][0]


# ═════════════════════════════════════════════════════════════════════════
#  STATS
# ═════════════════════════════════════════════════════════════════════════

@dataclass
class ReporterStats:
    """Aggregate counts per severity."""
    error: int = 0
    warning: int = 0
    files: int = 0

    def record(self, severity: Severity) -> None:
        attr = severity.value
        setattr(self, attr, getattr(self, attr) + 1)

    @property
    def total(self) -> int:
        return self.error + self.warning

    def summary_line(self) -> str:
        parts: List[str] = []
        if self.error:
            parts.append(f"{self.error} error{'s' if self.error != 1 else ''}")
        if self.warning:
            parts.append(f"{self.warning} warning{'s' if self.warning != 1 else ''}")
        if not parts:
            return f"no findings in {self.files} file{'s' if self.files != 1 else ''}"
        return "; ".join(parts) + f" ({self.total} total)"


# ═════════════════════════════════════════════════════════════════════════
#  TERMINAL RENDERER  (Rust-style colourful output)
# ═════════════════════════════════════════════════════════════════════════

class _TerminalRenderer:
    """Render findings with colours, the source line and a caret underline."""

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream

    def render(self, source: SourceText, finding: Finding) -> None:
        color = severity_color(finding.severity)
        index = source.index
        line, col = index.offset_to_position(finding.start)
        lines: List[str] = []

        # ── header: severity[code]: message ──────────────────────────
        sev_str = colored(f"{finding.severity.value}[{finding.code}]", color, attrs=["bold"])
        lines.append(f"{sev_str}: {colored(finding.message, 'white', attrs=['bold'])}")

        arrow = colored("-->", "blue", attrs=["bold"])
        lines.append(f"  {arrow} {source.name}:{line + 1}:{col + 1}")

        # ── annotated source line ────────────────────────────────────
        gutter_w = len(str(line + 1)) + 1
        pipe = colored("|", "blue", attrs=["bold"])
        line_num = colored(str(line + 1).rjust(gutter_w), "blue", attrs=["bold"])
        src_text = source.lines[line] if line < len(source.lines) else ""
        lines.append(f" {line_num} {pipe} {src_text}")

        # Underline stops at the end of the first line of the range.
        _, line_end = index.line_span(line)
        span_len = max(min(finding.end, line_end) - finding.start, 1)
        marker = colored("^" * span_len, color, attrs=["bold"])
        lines.append(f" {' ' * gutter_w} {pipe} {' ' * col}{marker}")

        if finding.checker:
            prefix = colored("note", "cyan", attrs=["bold"])
            lines.append(f"  = {prefix}: reported by the '{finding.checker}' checker")

        lines.append(colored(finding.to_gcc_format(source.name, index), attrs=["dark"]))
        lines.append("")
        self._stream.write("\n".join(lines) + "\n")
        self._stream.flush()

    def summary(self, stats: ReporterStats) -> None:
        if stats.error:
            color = "red"
        elif stats.total:
            color = "yellow"
        else:
            color = "green"
        self._stream.write(colored(f"  ╰─ {stats.summary_line()}", color, attrs=["bold"]) + "\n")


# ═════════════════════════════════════════════════════════════════════════
#  PLAIN RENDERER  (for log files / non-TTY)
# ═════════════════════════════════════════════════════════════════════════

class _PlainRenderer:
    """Non-coloured renderer: one GCC-compatible line per finding."""

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream

    def render(self, source: SourceText, finding: Finding) -> None:
        self._stream.write(finding.to_gcc_format(source.name, source.index) + "\n")
        self._stream.flush()

    def summary(self, stats: ReporterStats) -> None:
        self._stream.write(f"  {stats.summary_line()}\n")


# ═════════════════════════════════════════════════════════════════════════
#  SARIF 2.1.0 BUILDER
# ═════════════════════════════════════════════════════════════════════════

class _SarifBuilder:
    """Accumulates findings and produces a SARIF 2.1.0 document."""

    SARIF_VERSION = "2.1.0"
    SARIF_SCHEMA = (
        "https://raw.githubusercontent.com/oasis-tcs/sarif-spec/master/"
        "Schemata/sarif-schema-2.1.0.json"
    )

    def __init__(self) -> None:
        self._results: List[Dict[str, Any]] = []
        self._rules: Dict[str, Dict[str, Any]] = {}

    def add(self, source: SourceText, finding: Finding) -> None:
        if finding.code not in self._rules:
            self._rules[finding.code] = {
                "id": finding.code,
                "shortDescription": {"text": finding.message},
                "properties": {"checker": finding.checker},
            }

        line, col = source.index.offset_to_position(finding.start)
        end_line, end_col = source.index.offset_to_position(finding.end)
        self._results.append({
            "ruleId": finding.code,
            "level": _SEVERITY_STYLE[finding.severity][1],
            "message": {"text": finding.message},
            "locations": [{
                "physicalLocation": {
                    "artifactLocation": {"uri": source.name},
                    "region": {
                        "startLine": line + 1,
                        "startColumn": col + 1,
                        "endLine": end_line + 1,
                        "endColumn": end_col + 1,
                        "charOffset": finding.start,
                        "charLength": finding.end - finding.start,
                    },
                },
            }],
        })

    def to_json(self, tool_name: str = TOOL_NAME, version: str = __version__) -> str:
        sarif: Dict[str, Any] = {
            "$schema": self.SARIF_SCHEMA,
            "version": self.SARIF_VERSION,
            "runs": [
                {
                    "tool": {
                        "driver": {
                            "name": tool_name,
                            "version": version,
                            "rules": list(self._rules.values()),
                        }
                    },
                    "results": self._results,
                }
            ],
        }
        return json.dumps(sarif, indent=2)

    def write(self, path: str, tool_name: str = TOOL_NAME, version: str = __version__) -> None:
        Path(path).write_text(self.to_json(tool_name, version), encoding="utf-8")


# ═════════════════════════════════════════════════════════════════════════
#  HTML BUILDER
# ═════════════════════════════════════════════════════════════════════════

class _HtmlBuilder:
    """Accumulates findings and renders them to HTML via Jinja2."""

    def __init__(self) -> None:
        self._findings: List[Dict[str, Any]] = []

    def add(self, source: SourceText, finding: Finding) -> None:
        line, col = source.index.offset_to_position(finding.start)
        self._findings.append({
            "severity": finding.severity.value,
            "code": finding.code,
            "checker": finding.checker,
            "message": finding.message,
            "file": source.name,
            "line": line + 1,
            "column": col + 1,
            "source_line": source.lines[line] if line < len(source.lines) else "",
        })

    def render(self, template_path: Optional[str] = None) -> str:
        env = jinja2.Environment(autoescape=True)
        tmpl = env.from_string(self._load_template(template_path))
        return tmpl.render(findings=self._findings, total=len(self._findings))

    def write(self, path: str, template_path: Optional[str] = None) -> None:
        Path(path).write_text(self.render(template_path), encoding="utf-8")

    @staticmethod
    def _load_template(template_path: Optional[str]) -> str:
        # 1. explicit argument
        if template_path:
            return Path(template_path).read_text(encoding="utf-8")
        # 2. $TESSERACT_LINT_HTML_TEMPLATE
        env_tmpl = os.environ.get(ENV_HTML_TEMPLATE, "")
        if env_tmpl and Path(env_tmpl).is_file():
            return Path(env_tmpl).read_text(encoding="utf-8")
        # 3. built-in default
        return _DEFAULT_HTML_TEMPLATE


def build_sarif(reports: Iterable[Report], tool_name: str = TOOL_NAME) -> str:
    """SARIF document for ``(source, findings)`` pairs."""
    builder = _SarifBuilder()
    for source, findings in reports:
        for finding in findings:
            builder.add(source, finding)
    return builder.to_json(tool_name)


def build_html(reports: Iterable[Report], template_path: Optional[str] = None) -> str:
    """HTML report for ``(source, findings)`` pairs."""
    builder = _HtmlBuilder()
    for source, findings in reports:
        for finding in findings:
            builder.add(source, finding)
    return builder.render(template_path)


# ═════════════════════════════════════════════════════════════════════════
#  REPORTER  (main entry point)
# ═════════════════════════════════════════════════════════════════════════

class Reporter:
    """
    Central finding dispatcher.

    Use as a context manager::

        with Reporter(sys.stdout) as rep:
            rep.report(source, findings)
        # finish() is called automatically

    Colour is used when *colour* is True, or when it is None, ``NO_COLOR``
    is unset and *stream* is a TTY.
    """

    def __init__(
        self,
        stream: TextIO = sys.stderr,
        colour: Optional[bool] = None,
        tool_name: str = TOOL_NAME,
        tool_version: str = __version__,
        summary: bool = True,
    ) -> None:
        self.tool_name = tool_name
        self.tool_version = tool_version
        self.stats = ReporterStats()
        self._summary = summary

        # ── choose renderer ──────────────────────────────────────────
        if colour is None:
            colour = "NO_COLOR" not in os.environ and hasattr(stream, "isatty") and stream.isatty()
        if colour:
            self._renderer: Union[_TerminalRenderer, _PlainRenderer] = _TerminalRenderer(stream)
        else:
            self._renderer = _PlainRenderer(stream)

        # ── optional writers (driven by env vars) ────────────────────
        self._sarif: Optional[_SarifBuilder] = None
        self._sarif_path = os.environ.get(ENV_SARIF, "")
        if self._sarif_path:
            self._sarif = _SarifBuilder()

        self._html: Optional[_HtmlBuilder] = None
        self._html_path = os.environ.get(ENV_HTML, "")
        if self._html_path:
            self._html = _HtmlBuilder()

    def __enter__(self) -> Reporter:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.finish()

    def report(self, source: SourceText, findings: Iterable[Finding]) -> None:
        """Render every finding of one document and feed the side writers."""
        self.stats.files += 1
        for finding in findings:
            # Count first so finish() sees real totals even if rendering fails.
            self.stats.record(finding.severity)
            self._renderer.render(source, finding)
            if self._sarif is not None:
                self._sarif.add(source, finding)
            if self._html is not None:
                self._html.add(source, finding)

    def finish(self) -> ReporterStats:
        """
        Print the summary line and write SARIF / HTML if configured.

        Returns the final :class:`ReporterStats`.
        """
        if self._summary:
            self._renderer.summary(self.stats)

        if self._sarif is not None:
            try:
                self._sarif.write(self._sarif_path, self.tool_name, self.tool_version)
            except OSError as exc:
                print(f"{self.tool_name}: failed to write SARIF: {exc}", file=sys.stderr)

        if self._html is not None:
            try:
                self._html.write(self._html_path)
            except OSError as exc:
                print(f"{self.tool_name}: failed to write HTML: {exc}", file=sys.stderr)

        return self.stats


# ═════════════════════════════════════════════════════════════════════════
#  DEFAULT HTML TEMPLATE
# ═════════════════════════════════════════════════════════════════════════

_DEFAULT_HTML_TEMPLATE = textwrap.dedent("""\
<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <title>Tesseract Lint Report</title>
  <style>
    :root { --bg: #1e1e2e; --fg: #cdd6f4; --surface: #313244;
            --red: #f38ba8; --yellow: #f9e2af; --cyan: #89dceb;
            --blue: #89b4fa; --border: #45475a; }
    * { box-sizing: border-box; margin: 0; padding: 0; }
    body { font-family: 'Fira Code', 'Cascadia Code', monospace;
           background: var(--bg); color: var(--fg); padding: 2rem; }
    h1 { margin-bottom: 1rem; }
    .card { background: var(--surface); border: 1px solid var(--border);
            border-radius: 8px; padding: 1rem; margin-bottom: 1rem; }
    .sev-error   { border-left: 4px solid var(--red); }
    .sev-warning { border-left: 4px solid var(--yellow); }
    .badge { display: inline-block; padding: 2px 8px; border-radius: 4px;
             font-size: 0.85em; font-weight: bold; }
    .badge-error   { background: var(--red); color: var(--bg); }
    .badge-warning { background: var(--yellow); color: var(--bg); }
    .loc { color: var(--blue); font-size: 0.9em; }
    .msg { margin-top: 0.4rem; }
    pre  { margin-top: 0.4rem; color: var(--cyan); }
    .summary { margin-top: 2rem; padding: 1rem; background: var(--surface);
               border-radius: 8px; text-align: center; font-size: 1.1em; }
  </style>
</head>
<body>
  <h1>Tesseract Lint Report</h1>
  {% for f in findings %}
  <div class="card sev-{{ f.severity }}">
    <span class="badge badge-{{ f.severity }}">{{ f.severity }}</span>
    <code>[{{ f.code }}]</code>
    <span class="loc">{{ f.file }}:{{ f.line }}:{{ f.column }}</span>
    <div class="msg">{{ f.message }}</div>
    {% if f.source_line %}<pre>{{ f.source_line }}</pre>{% endif %}
  </div>
  {% endfor %}
  <div class="summary">{{ total }} finding{{ 's' if total != 1 else '' }} reported.</div>
</body>
</html>
""")

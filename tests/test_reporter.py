# tests/test_reporter.py
"""
Tests for terminal / plain rendering and the SARIF and HTML builders.
"""

import io
import json

from tesseract_lint.checkers import analyze
from tesseract_lint.diagnostics import Severity
from tesseract_lint.reporter import (
    ENV_HTML,
    ENV_SARIF,
    Reporter,
    ReporterStats,
    build_html,
    build_sarif,
)
from tesseract_lint.text import SourceText


def _report(text, name="main.tes"):
    source = SourceText(text, name=name)
    return source, analyze(text)


class TestReporterStats:

    def test_summary_line(self):
        assert ReporterStats(error=1, warning=2).summary_line() == "1 error; 2 warnings (3 total)"

    def test_summary_line_empty(self):
        assert ReporterStats(files=1).summary_line() == "no findings in 1 file"
        assert ReporterStats(files=2).summary_line() == "no findings in 2 files"

    def test_record(self):
        stats = ReporterStats()
        stats.record(Severity.WARNING)
        stats.record(Severity.ERROR)
        assert (stats.error, stats.warning, stats.total) == (1, 1, 2)


class TestReporter:

    def test_plain(self):
        buf = io.StringIO()
        with Reporter(buf, colour=False) as rep:
            rep.report(*_report("let$ x = 1"))
        lines = buf.getvalue().splitlines()
        assert lines[0] == (
            "main.tes:1:11: error: Missing semicolon at end of statement [missingSemicolon]"
        )
        assert lines[-1].strip() == "1 error (1 total)"

    def test_finish_returns_stats(self):
        rep = Reporter(io.StringIO(), colour=False)
        rep.report(*_report("::print(y)"))
        stats = rep.finish()
        assert (stats.error, stats.warning, stats.files) == (1, 1, 1)

    def test_terminal(self):
        buf = io.StringIO()
        with Reporter(buf, colour=True) as rep:
            rep.report(*_report("let$ s = <stak>;"))
        out = buf.getvalue()
        assert "invalidDataType" in out
        assert "main.tes:1:10" in out
        assert "let$ s = <stak>;" in out
        assert "^^^^^^" in out
        assert "data-types" in out

    def test_no_color_env(self, monkeypatch):
        class FakeTty(io.StringIO):
            def isatty(self):
                return True

        monkeypatch.setenv("NO_COLOR", "1")
        buf = FakeTty()
        with Reporter(buf) as rep:
            rep.report(*_report("let$ x = 1"))
        assert buf.getvalue().startswith("main.tes:1:11:")

    def test_side_files_from_env(self, monkeypatch, tmp_path):
        sarif_path = tmp_path / "out.sarif"
        html_path = tmp_path / "out.html"
        monkeypatch.setenv(ENV_SARIF, str(sarif_path))
        monkeypatch.setenv(ENV_HTML, str(html_path))
        with Reporter(io.StringIO(), colour=False) as rep:
            rep.report(*_report("let$ x = 1"))
        assert json.loads(sarif_path.read_text())["version"] == "2.1.0"
        assert "missingSemicolon" in html_path.read_text()


class TestSarif:

    def test_document(self):
        doc = json.loads(build_sarif([_report("let$ x = 1\n::print(y);")]))
        run = doc["runs"][0]
        assert run["tool"]["driver"]["name"] == "tesseract-lint"
        results = run["results"]
        assert [r["ruleId"] for r in results] == ["undefinedVariable", "missingSemicolon"]
        assert [r["level"] for r in results] == ["warning", "error"]
        region = results[0]["locations"][0]["physicalLocation"]["region"]
        assert (region["startLine"], region["startColumn"]) == (2, 9)
        rule_ids = {r["id"] for r in run["tool"]["driver"]["rules"]}
        assert rule_ids == {"undefinedVariable", "missingSemicolon"}


class TestHtml:

    def test_escapes_messages(self):
        html = build_html([_report("let$ s = <stak>;")])
        assert "&lt;stak&gt;" in html
        assert "<stak>" not in html
        assert "1 finding reported." in html

    def test_custom_template(self, tmp_path):
        tmpl = tmp_path / "t.html"
        tmpl.write_text("{{ total }}:{% for f in findings %}{{ f.code }}{% endfor %}")
        assert build_html([_report("let$ x = 1")], str(tmpl)) == "1:missingSemicolon"

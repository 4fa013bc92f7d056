# tests/test_runner.py
"""
Tests for the checker framework: registry, runner, graceful degradation,
and whole-run properties of analyze().
"""

import json
from typing import ClassVar

import pytest

from tesseract_lint.checkers import (
    BracketChecker,
    Checker,
    CheckerRegistry,
    CheckerRunner,
    TerminatorChecker,
    analyze,
    default_registry,
)
from tesseract_lint.diagnostics import FindingCode, Severity
from tesseract_lint.errors import UnknownCheckerError
from tesseract_lint.text import SourceText, mask
from tests.conftest import BROKEN_PROGRAM, CLEAN_PROGRAM, ODD_INPUTS, findings_for


class ExplodingChecker(Checker):
    name: ClassVar[str] = "exploding"
    description: ClassVar[str] = "always fails"

    def collect_evidence(self, ctx):
        raise RuntimeError("boom")

    def diagnose(self, ctx):
        pass


class TestRegistry:

    def test_default_order(self):
        assert default_registry().names == [
            "brackets",
            "keyword-suffix",
            "strings",
            "builtin-prefix",
            "undeclared",
            "data-types",
            "dictionaries",
            "constructs",
            "semicolons",
        ]

    def test_disable_and_enable(self):
        reg = CheckerRegistry()
        reg.register(BracketChecker)
        reg.register(TerminatorChecker)
        reg.disable("brackets")
        assert reg.get_enabled() == [TerminatorChecker]
        reg.enable("brackets")
        assert reg.get_enabled() == [BracketChecker, TerminatorChecker]

    def test_disable_unknown(self):
        with pytest.raises(UnknownCheckerError):
            CheckerRegistry().disable("nope")

    def test_filter_by_code(self):
        found = default_registry().filter_by_code(FindingCode.UNCLOSED_DICT)
        assert [cls.name for cls in found] == ["dictionaries"]

    def test_every_code_has_a_checker(self):
        codes = set()
        for cls in default_registry().get_all():
            codes |= cls.codes
        assert FindingCode.MISSING_SEMICOLON in codes
        assert len(codes) == 16


class TestRunner:

    def test_selected_checkers(self):
        results = CheckerRunner().run("let$ x = (1", checkers=["semicolons"])
        assert results.checker_names == ["semicolons"]
        assert [f.code for f in results.findings] == [FindingCode.MISSING_SEMICOLON]

    def test_unknown_checker(self):
        with pytest.raises(UnknownCheckerError) as exc_info:
            CheckerRunner().run("", checkers=["nope"])
        assert "brackets" in str(exc_info.value)

    def test_findings_grouped_by_checker(self):
        results = CheckerRunner().run(BROKEN_PROGRAM)
        total = sum(len(v) for v in results.findings_by_checker.values())
        assert total == results.total_count
        assert results.error_count + results.warning_count == results.total_count

    def test_crashing_checker_degrades(self):
        reg = CheckerRegistry()
        reg.register(ExplodingChecker)
        reg.register(BracketChecker)
        results = CheckerRunner(registry=reg).run("(")
        codes = [f.code for f in results.findings]
        assert codes == [FindingCode.CHECKER_INTERNAL_ERROR, FindingCode.UNCLOSED_BRACKET]
        internal = results.findings[0]
        assert internal.severity == Severity.WARNING
        assert (internal.start, internal.end) == (0, 0)
        assert "boom" in internal.message

    def test_summary(self):
        results = CheckerRunner().run(SourceText("let$ x = 1", name="a.tes"))
        summary = results.summary()
        assert summary.startswith("a.tes: 1 findings (1 errors, 0 warnings)")
        assert "semicolons: 1 findings" in summary

    def test_by_code_and_severity(self):
        results = CheckerRunner().run("let$ x = 1\n::print(y)")
        assert len(results.by_code(FindingCode.MISSING_SEMICOLON)) == 2
        undefined = results.by_code(FindingCode.UNDEFINED_VARIABLE)
        assert len(undefined) == 1
        assert results.by_severity(Severity.WARNING) == undefined
        assert len(results.by_severity(Severity.ERROR)) == results.error_count == 2

    def test_gcc_format(self):
        results = CheckerRunner().run("let$ x = 1")
        assert results.to_gcc_format() == (
            "<input>:1:11: error: Missing semicolon at end of statement [missingSemicolon]"
        )

    def test_json_lines(self):
        results = CheckerRunner().run("let$ x = 1\nif y {\n}")
        records = [json.loads(line) for line in results.to_json_lines().splitlines()]
        assert len(records) == results.total_count
        assert {r["line"] for r in records} == {1, 2}
        assert {"startOffset", "endOffset", "message", "severity", "code"} <= set(records[0])


class TestAnalyzeProperties:

    SAMPLES = [CLEAN_PROGRAM, BROKEN_PROGRAM] + ODD_INPUTS

    @pytest.mark.parametrize("text", SAMPLES)
    def test_ranges_within_document(self, text):
        for f in analyze(text):
            assert 0 <= f.start <= f.end <= len(text)

    @pytest.mark.parametrize("text", SAMPLES)
    def test_idempotent(self, text):
        assert analyze(text) == analyze(text)

    @pytest.mark.parametrize("text", SAMPLES)
    def test_mask_length(self, text):
        assert len(mask(text)) == len(text)

    def test_declarations_do_not_leak_between_runs(self):
        analyze("let$ y = 1;")
        assert len(findings_for("::print(y);", FindingCode.UNDEFINED_VARIABLE)) == 1

    def test_previous_findings_do_not_persist(self):
        analyze(BROKEN_PROGRAM)
        assert analyze(CLEAN_PROGRAM) == []

    def test_broken_program_reports_each_kind(self):
        codes = {f.code for f in analyze(BROKEN_PROGRAM)}
        assert {
            FindingCode.MISSING_SEMICOLON,
            FindingCode.MISSING_KEYWORD_SUFFIX,
            FindingCode.MISSING_BUILTIN_PREFIX,
            FindingCode.INVALID_DATA_TYPE,
            FindingCode.MISSING_DICT_BRACE,
            FindingCode.INCOMPLETE_FUNCTION,
            FindingCode.UNCLOSED_STRING,
            FindingCode.UNDEFINED_VARIABLE,
        } <= codes

    def test_environment_is_ignored(self, monkeypatch):
        monkeypatch.setenv("TESSERACT_LINT_CONSTRUCT_LOOKAHEAD_LINES", "10")
        text = "func$ foo()\n\n\n\n{\n}"
        assert len(findings_for(text, FindingCode.INCOMPLETE_FUNCTION)) == 1

# tests/test_cli.py
"""
End-to-end tests for ``python -m tesseract_lint``.
"""

import io
import json

import pytest

from tesseract_lint.__main__ import (
    EXIT_FINDINGS,
    EXIT_INFRA,
    EXIT_OK,
    build_parser,
    load_source,
    main,
)
from tesseract_lint.errors import SourceLoadError
from tests.conftest import BROKEN_PROGRAM, CLEAN_PROGRAM


class TestParser:

    def test_check_defaults(self):
        args = build_parser().parse_args(["check", "a.tes"])
        assert args.format == "text"
        assert args.color is None
        assert args.verbose == 0

    def test_no_color(self):
        args = build_parser().parse_args(["check", "a.tes", "--no-color", "-vv"])
        assert args.color is False
        assert args.verbose == 2

    def test_bad_format(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["check", "a.tes", "--format", "xml"])


class TestLoadSource:

    def test_missing(self, tmp_path):
        with pytest.raises(SourceLoadError):
            load_source(str(tmp_path / "nope.tes"))

    def test_not_utf8(self, tmp_path):
        path = tmp_path / "bad.tes"
        path.write_bytes(b"\xff\xfe\x00")
        with pytest.raises(SourceLoadError):
            load_source(str(path))

    def test_keeps_crlf(self, tmp_path):
        path = tmp_path / "crlf.tes"
        path.write_bytes(b"let$ x = 1;\r\n")
        assert load_source(str(path)).text == "let$ x = 1;\r\n"


class TestCheckCommand:

    def test_clean_file(self, tes_file, capsys):
        path = tes_file(CLEAN_PROGRAM)
        assert main(["check", str(path)]) == EXIT_OK
        assert "no findings in 1 file" in capsys.readouterr().out

    def test_errors_exit_one(self, tes_file, capsys):
        path = tes_file(BROKEN_PROGRAM)
        assert main(["check", str(path), "--no-color"]) == EXIT_FINDINGS
        out = capsys.readouterr().out
        assert f"{path}:1:15: error: Missing semicolon" in out

    def test_warnings_only_exit_zero(self, tes_file, capsys):
        path = tes_file("::print(y);\n")
        assert main(["check", str(path), "--format", "gcc"]) == EXIT_OK
        assert "warning: Variable 'y' is used but not defined" in capsys.readouterr().out

    def test_json(self, tes_file, capsys):
        path = tes_file("let$ x = 1\n")
        main(["check", str(path), "--format", "json"])
        records = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
        assert len(records) == 1
        assert records[0]["file"] == str(path)
        assert records[0]["code"] == "missingSemicolon"
        assert (records[0]["line"], records[0]["column"]) == (1, 11)

    def test_sarif(self, tes_file, capsys):
        path = tes_file("let$ x = 1\n")
        main(["check", str(path), "--format", "sarif"])
        doc = json.loads(capsys.readouterr().out)
        assert doc["runs"][0]["results"][0]["ruleId"] == "missingSemicolon"

    def test_summary(self, tes_file, capsys):
        path = tes_file("let$ x = 1\n")
        main(["check", str(path), "--format", "summary"])
        assert "semicolons: 1 findings" in capsys.readouterr().out

    def test_output_file(self, tes_file, tmp_path):
        path = tes_file("let$ x = 1\n")
        out = tmp_path / "report.html"
        assert main(["check", str(path), "--format", "html", "-o", str(out)]) == EXIT_FINDINGS
        assert "missingSemicolon" in out.read_text(encoding="utf-8")

    def test_stdin(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO("let$ x = 1\n"))
        assert main(["check", "-", "--format", "gcc"]) == EXIT_FINDINGS
        assert capsys.readouterr().out.startswith("<stdin>:1:11:")

    def test_disable(self, tes_file, capsys):
        path = tes_file("let$ x = 1\n")
        assert main(["check", str(path), "--disable", "semicolons", "--format", "json"]) == EXIT_OK
        assert capsys.readouterr().out == ""

    def test_select_checkers(self, tes_file, capsys):
        path = tes_file(BROKEN_PROGRAM)
        main(["check", str(path), "--checkers", "data-types,dictionaries", "--format", "json"])
        codes = {json.loads(l)["code"] for l in capsys.readouterr().out.splitlines()}
        assert codes == {"invalidDataType", "missingDictBrace"}

    def test_suppress(self, tes_file, capsys):
        path = tes_file("let$ x = 1\n")
        assert main(["check", str(path), "--suppress", "missingSemicolon"]) == EXIT_OK

    def test_raw_brackets(self, tes_file, capsys):
        path = tes_file('::print("(");\n')
        assert main(["check", str(path), "--format", "json"]) == EXIT_OK
        assert main(["check", str(path), "--format", "json", "--raw-brackets"]) == EXIT_FINDINGS

    def test_unknown_checker(self, tes_file, capsys):
        path = tes_file("")
        assert main(["check", str(path), "--disable", "nope"]) == EXIT_INFRA
        assert "unknown checker 'nope'" in capsys.readouterr().err

    def test_missing_file(self, tmp_path, capsys):
        assert main(["check", str(tmp_path / "nope.tes")]) == EXIT_INFRA
        assert "cannot read" in capsys.readouterr().err


class TestOtherCommands:

    def test_list_checkers(self, capsys):
        assert main(["list-checkers", "--options"]) == EXIT_OK
        out = capsys.readouterr().out
        assert "brackets" in out
        assert "missingSemicolon" in out
        assert "construct_lookahead_lines" in out

    def test_vocab_word(self, capsys):
        assert main(["vocab", "::print"]) == EXIT_OK
        out = capsys.readouterr().out
        assert out.startswith("::print  (builtin)")
        assert "Print to console" in out

    def test_vocab_kind(self, capsys):
        assert main(["vocab", "--kind", "keyword"]) == EXIT_OK
        out = capsys.readouterr().out
        assert "if$" in out
        assert "::print" not in out

    def test_vocab_unknown(self, capsys):
        assert main(["vocab", "nope"]) == EXIT_INFRA

    def test_no_command(self, capsys):
        assert main([]) == EXIT_INFRA

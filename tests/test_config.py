# tests/test_config.py
"""
Tests for option defaults, environment overrides and validation.
"""

import pytest

from tesseract_lint.config import DEFAULT_OPTIONS, load_options, option_items
from tesseract_lint.errors import ConfigError


class TestLoadOptions:

    def test_defaults(self):
        assert load_options(environ={}) == DEFAULT_OPTIONS

    def test_defaults_not_shared(self):
        opts = load_options(environ={})
        opts["type_span_limit"] = 1
        assert DEFAULT_OPTIONS["type_span_limit"] == 32

    def test_env_int(self):
        opts = load_options(environ={"TESSERACT_LINT_CONSTRUCT_LOOKAHEAD_LINES": "5"})
        assert opts["construct_lookahead_lines"] == 5

    @pytest.mark.parametrize("raw, expected", [
        ("off", False), ("0", False), ("no", False), ("1", True), ("yes", True),
    ])
    def test_env_bool(self, raw, expected):
        opts = load_options(environ={"TESSERACT_LINT_BRACKETS_IGNORE_STRINGS": raw})
        assert opts["brackets_ignore_strings"] is expected

    def test_env_tuple(self):
        opts = load_options(environ={"TESSERACT_LINT_IMPLICIT_NAMES": "a, b,,c"})
        assert opts["implicit_names"] == ("a", "b", "c")

    def test_override_beats_env(self):
        opts = load_options(
            {"dict_lookahead_chars": 4},
            environ={"TESSERACT_LINT_DICT_LOOKAHEAD_CHARS": "9"},
        )
        assert opts["dict_lookahead_chars"] == 4

    def test_reads_os_environ_by_default(self, monkeypatch):
        monkeypatch.setenv("TESSERACT_LINT_TYPE_SPAN_LIMIT", "8")
        assert load_options()["type_span_limit"] == 8


class TestValidation:

    def test_unknown_key(self):
        with pytest.raises(ConfigError) as exc_info:
            load_options({"colour": True}, environ={})
        assert exc_info.value.key == "colour"
        assert "construct_lookahead_lines" in str(exc_info.value)

    def test_not_an_int(self):
        with pytest.raises(ConfigError):
            load_options(environ={"TESSERACT_LINT_TYPE_SPAN_LIMIT": "lots"})

    def test_negative(self):
        with pytest.raises(ConfigError):
            load_options({"construct_lookahead_lines": -1}, environ={})

    def test_bad_bool(self):
        with pytest.raises(ConfigError):
            load_options({"brackets_ignore_strings": 3}, environ={})


def test_option_items_sorted():
    keys = [k for k, _ in option_items()]
    assert keys == sorted(DEFAULT_OPTIONS)

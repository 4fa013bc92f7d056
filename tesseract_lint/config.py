# tesseract_lint/config.py
"""
Option defaults and their overrides.

Checkers read options through ``CheckerContext.get_option(key, default)``.
Values are resolved in this order (later wins):

    DEFAULT_OPTIONS  <  TESSERACT_LINT_<KEY> environment variables  <  overrides

Environment values are strings and are converted to the type of the default
(``"0"``/``"false"``/``"no"``/``"off"`` are false for booleans; tuples are
comma-separated).
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Mapping, Optional, Tuple

from tesseract_lint.errors import ConfigError

_log = logging.getLogger(__name__)

ENV_PREFIX = "TESSERACT_LINT_"

DEFAULT_OPTIONS: Dict[str, Any] = {
    # Ignore brackets inside string literals and comments when matching.
    "brackets_ignore_strings": True,
    # Lines searched below a header for a line starting with "{".
    "construct_lookahead_lines": 3,
    # Characters searched after "dict" for its opening brace.
    "dict_lookahead_chars": 16,
    # Longest "<...>" run still treated as a type annotation.
    "type_span_limit": 32,
    # Names that are always defined.
    "implicit_names": ("self", "args", "result"),
}

_FALSE_WORDS = frozenset({"0", "false", "no", "off", ""})


def _coerce(key: str, raw: Any, default: Any) -> Any:
    if isinstance(default, bool):
        if isinstance(raw, bool):
            return raw
        if isinstance(raw, str):
            return raw.strip().lower() not in _FALSE_WORDS
        raise ConfigError(key, f"expected a boolean, got {raw!r}")
    if isinstance(default, int):
        try:
            value = int(raw)
        except (TypeError, ValueError):
            raise ConfigError(key, f"expected an integer, got {raw!r}")
        if value < 0:
            raise ConfigError(key, f"must not be negative, got {value}")
        return value
    if isinstance(default, tuple):
        if isinstance(raw, str):
            return tuple(part.strip() for part in raw.split(",") if part.strip())
        try:
            return tuple(str(v) for v in raw)
        except TypeError:
            raise ConfigError(key, f"expected a list of names, got {raw!r}")
    return raw


def load_options(
    overrides: Optional[Mapping[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Dict[str, Any]:
    """Build the effective option dict.

    Parameters
    ----------
    overrides : explicit values (CLI flags, API callers)
    environ   : environment mapping; defaults to ``os.environ``

    Raises
    ------
    ConfigError
        On an unknown override key or a value of the wrong shape.
    """
    env = os.environ if environ is None else environ
    options: Dict[str, Any] = dict(DEFAULT_OPTIONS)

    for key, default in DEFAULT_OPTIONS.items():
        env_key = ENV_PREFIX + key.upper()
        if env_key in env:
            options[key] = _coerce(key, env[env_key], default)
            _log.debug("option %s=%r from %s", key, options[key], env_key)

    for key, value in (overrides or {}).items():
        if key not in DEFAULT_OPTIONS:
            raise ConfigError(key, "unknown option", hint=", ".join(sorted(DEFAULT_OPTIONS)))
        options[key] = _coerce(key, value, DEFAULT_OPTIONS[key])

    return options


def option_items() -> Tuple[Tuple[str, Any], ...]:
    """``(key, default)`` pairs, sorted, for ``--help`` style listings."""
    return tuple(sorted(DEFAULT_OPTIONS.items()))

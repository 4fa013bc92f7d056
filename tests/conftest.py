# tests/conftest.py
"""
Shared Tesseract sources and fixtures for the tesseract-lint test suite.
"""

import pytest

from tesseract_lint.checkers import analyze


# ─────────────────────────────────────────────────────────────────────────
#  Sample sources
# ─────────────────────────────────────────────────────────────────────────

CLEAN_PROGRAM = '''\
# A small, well-formed Tesseract program
import$ "collections"

let$ items = <stack>;
let$ table = dict{name: "tess", size: 3};

func$ greet(name, times) {
    loop$ times > 0 {
        ::print("hello " + name);
        let$ times = times - 1;
    }
}

class$ Greeter {
    func$ run() {
        greet("world", 2);
    }
}

if$ ::len(items) == 0 {
    ::push(items, 1);
} else {
    ::print("not empty");
}
'''

BROKEN_PROGRAM = '''\
let$ count = 0
if count > 1 {
    print("big");
}
let$ s = <stak>;
let$ d = dict;
func$ helper(a)
let$ msg = "unterminated;
::print(missing);
'''

ODD_INPUTS = [
    "",
    "\n",
    "\r\n\r\n",
    '"',
    "\\",
    '"\\',
    "<",
    ">",
    "<>",
    "dict",
    "dict{",
    "}",
    "func$",
    "func$ f(",
    "class$",
    "if$",
    "else",
    "#",
    '# "',
    "::",
    "let$",
    "let$ = ;",
    "\t\t\t",
    "ü = \"ßtré\";",
    "{[(" * 50,
    ")]}" * 50,
    "<" * 100 + ">" * 100,
]


# ─────────────────────────────────────────────────────────────────────────
#  Helpers
# ─────────────────────────────────────────────────────────────────────────

def findings_for(text, code=None, **options):
    """Run every checker on *text*; keep only *code* when given."""
    found = analyze(text, options=options or None)
    if code is not None:
        found = [f for f in found if f.code == code]
    return found


@pytest.fixture
def tes_file(tmp_path):
    """Factory writing a ``.tes`` file and returning its path."""
    def _write(text, name="main.tes"):
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path
    return _write

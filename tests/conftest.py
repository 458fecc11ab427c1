# tests/conftest.py
"""
Shared declaration snippets and helpers for the errorlevel test suite.
"""

import textwrap
from typing import Optional

import pytest

from errorlevel.runtime import ErrorLevel, Severity


# ═══════════════════════════════════════════════════════════════════════════
# DECLARATION SNIPPETS
# ═══════════════════════════════════════════════════════════════════════════

EMPTY_ELV = ""

# Explicit levels, a suppressed variant and delegation to another union.
SIMPLE_ELV = textwrap.dedent("""\
    union OuterError {
        @report(info)
        Error0,
    }

    union CustomError {
        @report(warn)
        ErrorA,
        @report(info)
        ErrorB,
        @report(no)
        ErrorC,
        ErrorD(OuterError),
    }
""")

# Every keyword once.
ALL_LEVELS_ELV = textwrap.dedent("""\
    union Levels {
        @report(no) Quiet,
        @report(trace) Trace,
        @report(debug) Debug,
        @report(info) Info,
        @report(warn) Warn,
        @report(error) Error,
    }
""")

# Delegation through a dotted path and through a reference.
PATH_ELV = textwrap.dedent("""\
    // payload types live in another module
    union Wrapper {
        Remote(example_mod.Error),
        Borrowed(&example_mod.Error),
        @report(error)
        Fatal,
    }
""")

# Three levels of delegation.
NESTED_ELV = textwrap.dedent("""\
    union Inner {
        @report(error) Broken,
        @report(no) Fine,
    }
    union Middle {
        Wrapped(Inner),
    }
    union Outer {
        Wrapped(Middle),
        @report(debug) Local,
    }
""")

# An annotation wins over an ineligible payload and over a delegable one.
PRECEDENCE_ELV = textwrap.dedent("""\
    union Precedence {
        @report(info)
        Pair((str, str)),
        @report(trace)
        Named(OuterError),
    }
""")

# Unannotated unit variant.
MISSING_ELV = textwrap.dedent("""\
    union ErrorC {
        @report(warn)
        Fine,
        Bare,
    }
""")

# Unannotated tuple payload.
TUPLE_ELV = textwrap.dedent("""\
    union ErrorD {
        Pair((String, String)),
    }
""")

# Keyword outside the vocabulary.
UNKNOWN_ELV = textwrap.dedent("""\
    union Unknown {
        @report(bogus)
        Bad,
        @report(warn)
        Good,
    }
""")

# Several problems in one union; all must be reported.
MULTI_ERROR_ELV = textwrap.dedent("""\
    union Broken {
        Missing,
        @report(loud)
        Typo,
        Pair((int, int)),
        @report(info)
        Fine,
        Listed([Item]),
    }
""")

# Other annotations are ignored; only the first report annotation counts.
EXTRA_ANNOTATIONS_ELV = textwrap.dedent("""\
    union Annotated {
        @deprecated
        @report(debug)
        @report(error)
        First,
        @doc("delegates") Carried(Other),
    }
""")


# ═══════════════════════════════════════════════════════════════════════════
# PAYLOAD STAND-INS
# ═══════════════════════════════════════════════════════════════════════════

class FixedLevel(ErrorLevel):
    """Hand-written ErrorLevel implementation used as a delegated payload."""

    def __init__(self, level: Optional[Severity]) -> None:
        self.level = level

    def error_level(self) -> Optional[Severity]:
        return self.level

    def __repr__(self) -> str:
        return f"FixedLevel({self.level})"


class NoCapability:
    """A payload that does not implement the capability at all."""


def dedent(text: str) -> str:
    return textwrap.dedent(text)


@pytest.fixture
def elv_file(tmp_path):
    """Write declaration text to a temporary ``.elv`` file and return its path."""

    def _write(text: str, name: str = "errors.elv"):
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write

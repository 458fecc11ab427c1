# tests/test_shapes.py
"""
Tests for payload shape eligibility.
"""

import pytest

from errorlevel.parser import parse_declarations
from errorlevel.shapes import check_payload_shape


def _check(decl: str):
    (union,) = parse_declarations(f"union U {{\n    V({decl}),\n}}\n")
    return check_payload_shape(union.variants[0].payload.shape)


class TestEligible:

    @pytest.mark.parametrize("decl,path", [
        ("Inner", "Inner"),
        ("example_mod.Error", "example_mod.Error"),
        ("a.b.c.D", "a.b.c.D"),
        ("&Inner", "Inner"),
        ("&example_mod.Error", "example_mod.Error"),
    ])
    def test_named_types(self, decl, path):
        check = _check(decl)
        assert check.eligible
        assert check.path == path

    def test_span_covers_path_only(self):
        # "    V(&" puts the path at column 8
        check = _check("&example_mod.Error")
        assert (check.span.line, check.span.column) == (2, 8)
        assert check.span.end_column == 8 + len("example_mod.Error")


class TestIneligible:

    @pytest.mark.parametrize("decl", [
        "(String, String)",
        "()",
        "(Inner)",
        "[Item]",
        "[Item; 2]",
        "Box[Inner]",
        "&&Inner",
        "&(A, B)",
        '"text"',
        "3",
    ])
    def test_rejected(self, decl):
        assert not _check(decl).eligible

    def test_span_is_whole_type(self):
        check = _check("(String, String)")
        assert (check.span.line, check.span.column) == (2, 7)
        assert check.span.end_column == 7 + len("(String, String)")

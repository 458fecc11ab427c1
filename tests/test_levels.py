# tests/test_levels.py
"""
Tests for annotation keyword parsing.
"""

import pytest

from errorlevel.errors import DiagnosticCollector, ErrorCodes, SourceSpan
from errorlevel.levels import LEVEL_KEYWORDS, Level, parse_level
from errorlevel.model import Annotation
from errorlevel.runtime import Severity


ARG_SPAN = SourceSpan("e.elv", 3, 13, 3, 18)


def _annotation(keyword=None, literal=None, extra_span=None):
    return Annotation(
        name="report",
        keyword=keyword,
        span=SourceSpan("e.elv", 3, 5, 3, 19),
        argument_span=ARG_SPAN,
        literal=literal,
        extra_span=extra_span,
    )


class TestParseLevel:

    @pytest.mark.parametrize("keyword,level", [
        ("no", Level.NO),
        ("trace", Level.TRACE),
        ("debug", Level.DEBUG),
        ("info", Level.INFO),
        ("warn", Level.WARN),
        ("error", Level.ERROR),
    ])
    def test_known_keywords(self, keyword, level):
        collector = DiagnosticCollector()
        assert parse_level(_annotation(keyword), collector) is level
        assert not collector.has_errors()

    @pytest.mark.parametrize("keyword", ["bogus", "Warn", "WARN", "warning", "fatal"])
    def test_unknown_keywords(self, keyword):
        collector = DiagnosticCollector()
        assert parse_level(_annotation(keyword), collector) is None
        (diag,) = collector.diagnostics
        assert diag.code == ErrorCodes.UNKNOWN_LEVEL_KEYWORD
        assert diag.span == ARG_SPAN
        assert "options are only: no, trace, debug, info, warn or error" in diag.message

    def test_literal_argument(self):
        collector = DiagnosticCollector()
        assert parse_level(_annotation(literal='"warn"'), collector) is None
        (diag,) = collector.diagnostics
        assert diag.code == ErrorCodes.UNKNOWN_LEVEL_KEYWORD
        assert '"warn"' in diag.message

    def test_missing_argument(self):
        collector = DiagnosticCollector()
        assert parse_level(_annotation(), collector) is None
        assert collector.by_code(ErrorCodes.UNKNOWN_LEVEL_KEYWORD)

    def test_extra_arguments(self):
        extra = SourceSpan("e.elv", 3, 19, 3, 23)
        collector = DiagnosticCollector()
        assert parse_level(_annotation("warn", extra_span=extra), collector) is None
        (diag,) = collector.diagnostics
        assert diag.code == ErrorCodes.UNKNOWN_LEVEL_KEYWORD
        assert diag.span == extra
        assert "takes exactly one level" in diag.message


class TestLevel:

    def test_vocabulary(self):
        assert LEVEL_KEYWORDS == ("no", "trace", "debug", "info", "warn", "error")

    def test_no_is_suppressed(self):
        assert Level.NO.severity is None

    def test_severities(self):
        assert Level.TRACE.severity is Severity.TRACE
        assert Level.WARN.severity is Severity.WARN
        assert Level.ERROR.severity is Severity.ERROR

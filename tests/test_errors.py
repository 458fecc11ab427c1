# tests/test_errors.py
"""
Tests for error codes, source spans and diagnostic formatting.
"""

from errorlevel.errors import (
    Diagnostic, DiagnosticCollector, ErrorCodes, ErrorPhase, GenerationError,
    SourceSpan, first_error,
)


class TestErrorCodes:

    def test_code_string(self):
        assert ErrorCodes.MISSING_ANNOTATION.code == "ELVL-2001"
        assert ErrorCodes.MISSING_ANNOTATION == "ELVL-2001"
        assert ErrorCodes.RESERVED_NAME.code == "ELVL-1002"

    def test_phases(self):
        assert ErrorCodes.SYNTAX_ERROR.phase is ErrorPhase.DECLARATION
        assert ErrorCodes.INELIGIBLE_PAYLOAD_SHAPE.phase is ErrorPhase.CLASSIFICATION


class TestSourceSpan:

    def test_end_defaults_to_start(self):
        span = SourceSpan("e.elv", 3, 7)
        assert (span.end_line, span.end_column) == (3, 7)
        assert str(span) == "e.elv:3:7"
        assert span.to_range_string() == "e.elv:3:7"

    def test_range(self):
        span = SourceSpan("e.elv", 3, 7, 3, 12)
        assert span.to_range_string() == "e.elv:3:7-3:12"

    def test_join(self):
        joined = SourceSpan("e.elv", 1, 5, 1, 8).join(SourceSpan("e.elv", 2, 1, 2, 9))
        assert (joined.line, joined.column, joined.end_line, joined.end_column) == (1, 5, 2, 9)

    def test_unknown(self):
        assert str(SourceSpan()) == "<unknown location>"


class TestDiagnostic:

    def test_gcc_format(self):
        diag = Diagnostic(ErrorCodes.MISSING_ANNOTATION, "needs a level", SourceSpan("e.elv", 4, 5))
        assert diag.to_gcc_format() == "e.elv:4:5: error: needs a level [ELVL-2001]"

    def test_gcc_format_with_hint(self):
        diag = Diagnostic(
            ErrorCodes.INELIGIBLE_PAYLOAD_SHAPE, "bad payload", SourceSpan("e.elv", 2, 10),
            hint="annotate it",
        )
        assert diag.to_gcc_format().splitlines()[1] == "hint: annotate it"

    def test_to_dict(self):
        diag = Diagnostic(ErrorCodes.UNKNOWN_LEVEL_KEYWORD, "loud", SourceSpan("e.elv", 2, 13, 2, 17))
        record = diag.to_dict()
        assert record["code"] == "ELVL-2000"
        assert record["name"] == "UnknownLevelKeyword"
        assert record["location"]["range"] == "e.elv:2:13-2:17"
        assert "hint" not in record


class TestCollector:

    def test_report_preserves_order(self):
        collector = DiagnosticCollector()
        collector.report(ErrorCodes.MISSING_ANNOTATION, "b", SourceSpan("e.elv", 9, 1))
        collector.report(ErrorCodes.UNKNOWN_LEVEL_KEYWORD, "a", SourceSpan("e.elv", 2, 1))
        assert [d.message for d in collector] == ["b", "a"]
        assert len(collector) == 2
        assert first_error(collector.diagnostics).message == "a"

    def test_first_error_empty(self):
        assert first_error([]) is None

    def test_generation_error_lists_all(self):
        collector = DiagnosticCollector()
        collector.report(ErrorCodes.MISSING_ANNOTATION, "one", SourceSpan("e.elv", 1, 1))
        collector.report(ErrorCodes.MISSING_ANNOTATION, "two", SourceSpan("e.elv", 2, 1))
        error = GenerationError(collector.diagnostics)
        assert "2 diagnostic(s)" in str(error)
        assert "e.elv:2:1" in str(error)

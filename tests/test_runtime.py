# tests/test_runtime.py
"""
Tests for the runtime support module imported by generated code.
"""

import logging

import pytest

from errorlevel.runtime import (
    TRACE, CompileError, ErrorLevel, Severity, classify, compile_errors, report,
)
from tests.conftest import FixedLevel


class TestSeverity:

    def test_ordering(self):
        assert Severity.TRACE < Severity.DEBUG < Severity.INFO < Severity.WARN < Severity.ERROR

    def test_python_levels(self):
        assert Severity.TRACE.to_python_level() == TRACE == 5
        assert Severity.DEBUG.to_python_level() == logging.DEBUG
        assert Severity.WARN.to_python_level() == logging.WARNING
        assert Severity.ERROR.to_python_level() == logging.ERROR

    def test_trace_level_name_registered(self):
        assert logging.getLevelName(TRACE) == "TRACE"


class TestErrorLevel:

    def test_abstract(self):
        with pytest.raises(TypeError):
            ErrorLevel()

    def test_classify(self):
        assert classify(FixedLevel(Severity.INFO)) is Severity.INFO
        assert classify(FixedLevel(None)) is None

    def test_log_error_uses_severity(self, caplog):
        caplog.set_level(TRACE)
        FixedLevel(Severity.WARN).log_error(logging.getLogger("test.runtime"))
        (record,) = caplog.records
        assert record.levelno == logging.WARNING
        assert record.getMessage() == "FixedLevel(Severity.WARN)"

    def test_log_error_trace(self, caplog):
        caplog.set_level(TRACE)
        report(FixedLevel(Severity.TRACE))
        (record,) = caplog.records
        assert record.levelname == "TRACE"
        assert record.name == FixedLevel.__module__

    def test_suppressed_never_logs(self, caplog):
        caplog.set_level(TRACE)
        report(FixedLevel(None))
        assert caplog.records == []


class TestCompileErrors:

    def test_raises_with_sites(self):
        sites = (
            ("e.elv", 4, 5, "ELVL-2001", "variant 'Bare' needs a 'report' annotation"),
            ("e.elv", 9, 10, "ELVL-2002", "bad payload"),
        )
        with pytest.raises(CompileError) as info:
            compile_errors(*sites)
        assert info.value.sites == list(sites)
        message = str(info.value)
        assert "e.elv:4:5: error: variant 'Bare' needs a 'report' annotation [ELVL-2001]" in message
        assert "e.elv:9:10" in message

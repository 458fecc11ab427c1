# errorlevel/errors.py
"""
Error codes, source spans and diagnostic collection.

Every configuration mistake found in a declaration file is reported as a
:class:`Diagnostic` value anchored to the offending source span.  Diagnostics
are accumulated by a :class:`DiagnosticCollector` and never raised while a
type definition is being processed, so one run reports every problem it can
find.

Error Codes:
────────────
Each diagnostic has a code of the form ELVL-XXXX:
  - 1000-1999: Declaration (front end) errors
  - 2000-2999: Classification errors

Exceptions are reserved for two situations: the declaration front end cannot
build a model at all (:class:`DeclarationError`), and a caller demands a
usable artifact from a result that still carries diagnostics
(:class:`GenerationError`).

Example Usage:
──────────────
    collector = DiagnosticCollector()
    collector.report(
        ErrorCodes.MISSING_ANNOTATION,
        "needs a 'report' annotation",
        SourceSpan(file="errors.elv", line=4, column=5),
    )
    if collector.has_errors():
        for diag in collector:
            print(diag.to_gcc_format())
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, unique
from typing import Any, Dict, Iterator, List, Optional, Sequence


@unique
class ErrorPhase(Enum):
    """Pipeline phase where a diagnostic originated."""

    DECLARATION = "declaration"    # Parsing the declaration file
    CLASSIFICATION = "classification"  # Per-variant classification


class ErrorCode:
    """
    Structured diagnostic code.

    Codes follow the pattern ``ELVL-NNNN``; the number range encodes the
    phase (see module docstring).
    """

    __slots__ = ("prefix", "number", "name", "phase")

    def __init__(self, prefix: str, number: int, name: str, phase: ErrorPhase) -> None:
        self.prefix = prefix
        self.number = number
        self.name = name
        self.phase = phase

    @property
    def code(self) -> str:
        """Get the full error code string."""
        return f"{self.prefix}-{self.number:04d}"

    def __str__(self) -> str:
        return self.code

    def __repr__(self) -> str:
        return f"ErrorCode({self.code!r}, {self.name})"

    def __hash__(self) -> int:
        return hash((self.prefix, self.number))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ErrorCode):
            return self.prefix == other.prefix and self.number == other.number
        if isinstance(other, str):
            return self.code == other
        return False


class ErrorCodes:
    """Predefined diagnostic codes."""

    # ═══════════════════════════════════════════════════════════════════════
    # DECLARATION ERRORS (1000-1999)
    # ═══════════════════════════════════════════════════════════════════════

    SYNTAX_ERROR = ErrorCode("ELVL", 1000, "SyntaxError", ErrorPhase.DECLARATION)
    DUPLICATE_DECLARATION = ErrorCode(
        "ELVL", 1001, "DuplicateDeclaration", ErrorPhase.DECLARATION
    )
    RESERVED_NAME = ErrorCode("ELVL", 1002, "ReservedName", ErrorPhase.DECLARATION)

    # ═══════════════════════════════════════════════════════════════════════
    # CLASSIFICATION ERRORS (2000-2999)
    # ═══════════════════════════════════════════════════════════════════════

    UNKNOWN_LEVEL_KEYWORD = ErrorCode(
        "ELVL", 2000, "UnknownLevelKeyword", ErrorPhase.CLASSIFICATION
    )
    MISSING_ANNOTATION = ErrorCode(
        "ELVL", 2001, "MissingAnnotation", ErrorPhase.CLASSIFICATION
    )
    INELIGIBLE_PAYLOAD_SHAPE = ErrorCode(
        "ELVL", 2002, "IneligiblePayloadShape", ErrorPhase.CLASSIFICATION
    )


# ═══════════════════════════════════════════════════════════════════════════
# SOURCE SPANS
# ═══════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True, slots=True)
class SourceSpan:
    """
    A span of source code with start and end positions.

    Lines and columns are 1-based; a zero line means the location is
    unknown.
    """

    file: str = ""
    line: int = 0
    column: int = 0
    end_line: int = 0
    end_column: int = 0

    def __post_init__(self) -> None:
        # Normalize: if end not specified, use start
        if self.end_line == 0:
            object.__setattr__(self, "end_line", self.line)
        if self.end_column == 0:
            object.__setattr__(self, "end_column", self.column)

    def join(self, other: "SourceSpan") -> "SourceSpan":
        """Return the span running from the start of self to the end of other."""
        return SourceSpan(
            file=self.file or other.file,
            line=self.line,
            column=self.column,
            end_line=other.end_line,
            end_column=other.end_column,
        )

    def __str__(self) -> str:
        if not self.file and self.line == 0:
            return "<unknown location>"

        parts = []
        if self.file:
            parts.append(self.file)
        if self.line > 0:
            parts.append(str(self.line))
            if self.column > 0:
                parts.append(str(self.column))

        return ":".join(parts)

    def to_range_string(self) -> str:
        """Get a string representation showing the full range."""
        start = str(self)
        if self.end_line > self.line or (
            self.end_line == self.line and self.end_column > self.column
        ):
            return f"{start}-{self.end_line}:{self.end_column}"
        return start


# ═══════════════════════════════════════════════════════════════════════════
# DIAGNOSTICS
# ═══════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True, slots=True)
class Diagnostic:
    """
    A location-anchored configuration error.

    Attributes:
        code: Structured code identifying the kind of failure
        message: Human-readable description
        span: Source span of the offending token
        hint: Optional suggestion shown after the message
    """

    code: ErrorCode
    message: str
    span: SourceSpan
    hint: str = ""

    @property
    def severity(self) -> str:
        return "error"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: Dict[str, Any] = {
            "code": self.code.code,
            "name": self.code.name,
            "message": self.message,
            "severity": self.severity,
            "location": {
                "file": self.span.file,
                "line": self.span.line,
                "column": self.span.column,
                "end_line": self.span.end_line,
                "end_column": self.span.end_column,
                "range": self.span.to_range_string(),
            },
        }
        if self.hint:
            result["hint"] = self.hint
        return result

    def to_gcc_format(self) -> str:
        """Format as GCC-style diagnostic string."""
        main = f"{self.span}: {self.severity}: {self.message} [{self.code}]"
        if self.hint:
            return f"{main}\nhint: {self.hint}"
        return main

    def __str__(self) -> str:
        return self.to_gcc_format()


class DiagnosticCollector:
    """
    Append-only accumulator of diagnostics for one invocation.

    Order of reporting is preserved, but nothing downstream depends on it.
    """

    def __init__(self) -> None:
        self._diagnostics: List[Diagnostic] = []

    def report(
        self,
        code: ErrorCode,
        message: str,
        span: SourceSpan,
        hint: str = "",
    ) -> Diagnostic:
        """Record a diagnostic and return it."""
        diag = Diagnostic(code=code, message=message, span=span, hint=hint)
        self._diagnostics.append(diag)
        return diag

    @property
    def diagnostics(self) -> List[Diagnostic]:
        """Get all collected diagnostics."""
        return list(self._diagnostics)

    def has_errors(self) -> bool:
        return bool(self._diagnostics)

    def error_count(self) -> int:
        return len(self._diagnostics)

    def by_code(self, code: ErrorCode) -> List[Diagnostic]:
        return [d for d in self._diagnostics if d.code == code]

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(list(self._diagnostics))

    def __len__(self) -> int:
        return len(self._diagnostics)


# ═══════════════════════════════════════════════════════════════════════════
# EXCEPTION CLASSES
# ═══════════════════════════════════════════════════════════════════════════

class ErrorLevelError(Exception):
    """Base exception for all errorlevel failures."""


class DeclarationError(ErrorLevelError):
    """
    The declaration front end could not produce a model.

    Carries the diagnostic describing where and why.
    """

    def __init__(self, diagnostic: Diagnostic) -> None:
        super().__init__(diagnostic.to_gcc_format())
        self.diagnostic = diagnostic

    @property
    def span(self) -> SourceSpan:
        return self.diagnostic.span


class GenerationError(ErrorLevelError):
    """A usable artifact was requested but classification reported errors."""

    def __init__(self, diagnostics: Sequence[Diagnostic]) -> None:
        self.diagnostics = list(diagnostics)
        lines = [d.to_gcc_format() for d in self.diagnostics]
        super().__init__(
            f"{len(self.diagnostics)} diagnostic(s) block generation:\n"
            + "\n".join(lines)
        )


def first_error(diagnostics: Sequence[Diagnostic]) -> Optional[Diagnostic]:
    """Return the earliest diagnostic by source position, if any."""
    if not diagnostics:
        return None
    return min(diagnostics, key=lambda d: (d.span.file, d.span.line, d.span.column))

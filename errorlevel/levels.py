"""errorlevel/levels.py – annotation keyword → level.

Only the six lowercase keywords below are accepted, matched exactly.
Anything else becomes an ``ELVL-2000`` diagnostic anchored to the annotation
argument; parsing continues for the remaining variants.
"""

from __future__ import annotations

import enum
import logging
from typing import Optional, Tuple

from errorlevel.errors import DiagnosticCollector, ErrorCodes
from errorlevel.model import Annotation
from errorlevel.runtime import Severity

logger = logging.getLogger(__name__)


class Level(enum.Enum):
    """A parsed annotation keyword.  ``NO`` means the instance is never reported."""

    NO = "no"
    TRACE = "trace"
    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"

    @property
    def severity(self) -> Optional[Severity]:
        return _SEVERITY[self]


_SEVERITY = {
    Level.NO: None,
    Level.TRACE: Severity.TRACE,
    Level.DEBUG: Severity.DEBUG,
    Level.INFO: Severity.INFO,
    Level.WARN: Severity.WARN,
    Level.ERROR: Severity.ERROR,
}

LEVEL_KEYWORDS: Tuple[str, ...] = tuple(level.value for level in Level)

_OPTIONS = "options are only: " + ", ".join(LEVEL_KEYWORDS[:-1]) + f" or {LEVEL_KEYWORDS[-1]}"


def parse_level(annotation: Annotation, collector: DiagnosticCollector) -> Optional[Level]:
    """Map *annotation*'s keyword to a :class:`Level`.

    Returns ``None`` after reporting a diagnostic when the keyword is
    missing, is a literal, is outside the vocabulary, or is followed by
    further arguments.
    """
    keyword = annotation.keyword
    if annotation.extra_span is not None:
        collector.report(
            ErrorCodes.UNKNOWN_LEVEL_KEYWORD,
            f"'{annotation.name}' takes exactly one level; {_OPTIONS}",
            annotation.extra_span,
        )
        return None
    if keyword is not None:
        try:
            return Level(keyword)
        except ValueError:
            message = f"unknown level {keyword!r} in '{annotation.name}' annotation; {_OPTIONS}"
    elif annotation.literal is not None:
        message = (
            f"'{annotation.name}' takes a bare keyword, not the literal "
            f"{annotation.literal}; {_OPTIONS}"
        )
    else:
        message = f"'{annotation.name}' annotation needs a level; {_OPTIONS}"

    logger.debug("rejecting annotation at %s", annotation.argument_span)
    collector.report(ErrorCodes.UNKNOWN_LEVEL_KEYWORD, message, annotation.argument_span)
    return None

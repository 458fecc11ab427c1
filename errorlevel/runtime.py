"""
errorlevel/runtime.py
=====================

Runtime support imported by generated modules.

This module provides:

* ``Severity``      – the closed, ordered set of reporting levels
* ``ErrorLevel``    – the two-operation capability (``error_level`` / ``log_error``)
* ``TaggedUnion``   – base of every generated union, supplies tag-aware ``repr``
* ``classify`` / ``report`` – free-function forms of the capability
* ``CompileError`` / ``compile_errors`` – raised by a generated module whose
  declarations did not classify cleanly, so it can never be imported
"""

from __future__ import annotations

import abc
import dataclasses
import enum
import logging
from typing import Any, ClassVar, Optional, Sequence, Tuple

from errorlevel.errors import ErrorLevelError

TRACE: int = 5
logging.addLevelName(TRACE, "TRACE")


@enum.unique
class Severity(enum.Enum):
    """Reporting urgency of an instance, valued by :mod:`logging` level."""

    TRACE = 5
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARN = logging.WARNING
    ERROR = logging.ERROR

    def __lt__(self, other: "Severity") -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.value < other.value

    def to_python_level(self) -> int:
        """Return the :mod:`logging` level number for this severity."""
        return self.value


# ===================================================================== #
#  Capability                                                            #
# ===================================================================== #

class ErrorLevel(abc.ABC):
    """Something that knows how urgently it should be reported.

    ``error_level`` returns ``None`` when the instance must never be
    reported.
    """

    __slots__ = ()

    @abc.abstractmethod
    def error_level(self) -> Optional[Severity]:
        ...

    def log_error(self, log: Optional[logging.Logger] = None) -> None:
        """Log ``repr(self)`` at this instance's severity, if any.

        *log* defaults to the logger of the module that defines the type.
        """
        level = self.error_level()
        if level is None:
            return
        target = log or logging.getLogger(type(self).__module__)
        target.log(level.to_python_level(), "%r", self)


class TaggedUnion(ErrorLevel):
    """Base class of generated unions.

    Each variant class sets ``tag``; the union class sets ``union``.
    A variant with a payload is a dataclass with a single ``value`` field.
    """

    __slots__ = ()

    union: ClassVar[str] = ""
    tag: ClassVar[str] = ""

    def __repr__(self) -> str:
        name = f"{self.union}.{self.tag}"
        if dataclasses.is_dataclass(self) and dataclasses.fields(self):
            return f"{name}({getattr(self, 'value')!r})"
        return name


def classify(instance: ErrorLevel) -> Optional[Severity]:
    """Return the severity of *instance*, ``None`` when suppressed."""
    return instance.error_level()


def report(instance: ErrorLevel, log: Optional[logging.Logger] = None) -> None:
    """Forward *instance* to *log* at its severity; no call when suppressed."""
    instance.log_error(log)


# ===================================================================== #
#  Embedded compile errors                                               #
# ===================================================================== #

ErrorSite = Tuple[str, int, int, str, str]


class CompileError(ErrorLevelError):
    """Raised on import of a module generated from invalid declarations."""

    def __init__(self, sites: Sequence[ErrorSite]) -> None:
        self.sites = list(sites)
        lines = [
            f"{file}:{line}:{column}: error: {message} [{code}]"
            for file, line, column, code, message in self.sites
        ]
        super().__init__("\n".join(lines))


def compile_errors(*sites: ErrorSite) -> Any:
    """Abort import of a generated module; each site is one diagnostic."""
    raise CompileError(sites)

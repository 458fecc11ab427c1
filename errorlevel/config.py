"""errorlevel/config.py – generator settings."""

from __future__ import annotations

import keyword
from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class GeneratorConfig:
    """Tuning knobs shared by the front end and the code generator."""

    attribute: str = "report"
    header: bool = True
    runtime_module: str = "errorlevel.runtime"
    indent: str = "    "

    def validate(self) -> List[str]:
        """Return a list of validation warnings (empty if valid)."""
        warnings: List[str] = []
        if not self.attribute.isidentifier() or keyword.iskeyword(self.attribute):
            warnings.append(f"attribute {self.attribute!r} is not a valid annotation name")
        if not all(part.isidentifier() for part in self.runtime_module.split(".")):
            warnings.append(f"runtime_module {self.runtime_module!r} is not an import path")
        if not self.indent or self.indent.strip():
            warnings.append("indent must be non-empty whitespace")
        return warnings

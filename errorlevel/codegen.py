#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
errorlevel/codegen.py
=====================

Dispatch synthesizer.

This module turns classified union definitions into a Python module.  For
each union the generated code:

1. Defines the union base class (deriving from ``runtime.TaggedUnion``)
   with the synthesized ``error_level`` dispatch
2. Defines one frozen dataclass per variant and attaches it to the union
   (unit variants as singleton instances, payload variants as constructors)

If any variant failed to classify, the module ends with a
``compile_errors(...)`` call listing every diagnostic with its location, so
importing the artifact fails instead of running with a partial dispatch.

Dispatch shape
--------------
A single ``if``/``elif`` chain over ``self.tag`` in declaration order:

- explicit variants return their fixed severity (``None`` for ``no``);
- delegated variants return ``self.value.error_level()``, a genuine call
  into the payload, so nesting resolves at run time to any depth;
- variants carrying a diagnostic get no arm.

The chain ends in ``raise TypeError``, reachable only for variants that got
no arm, and such a module never imports.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from io import StringIO
from pathlib import Path
from types import ModuleType
from typing import Any, Dict, List, Optional, Sequence, Tuple

from errorlevel import __version__
from errorlevel.classifier import Classification, ClassificationKind, ClassifiedDefinition
from errorlevel.config import GeneratorConfig
from errorlevel.errors import Diagnostic, ErrorLevelError, GenerationError, SourceSpan
from errorlevel.levels import Level
from errorlevel.model import TypeKind, TypeShape

logger = logging.getLogger(__name__)

__all__ = [
    "generate_module",
    "synthesize",
    "CodeEmitter",
    "GeneratedModule",
]


# ═══════════════════════════════════════════════════════════════════════════
# CODE EMITTER
# ═══════════════════════════════════════════════════════════════════════════

class CodeEmitter:
    """Low-level code emission with indentation management.

    Provides a structured way to emit Python code with:
    - Automatic indentation tracking
    - Block context managers
    - Line → declaration source mapping
    """

    def __init__(self, indent_str: str = "    ") -> None:
        self._buffer = StringIO()
        self._indent_str = indent_str
        self._indent_level = 0
        self._line_number = 1
        self._source_map: Dict[int, SourceSpan] = {}
        self._current_source: Optional[SourceSpan] = None

    def emit(self, code: str) -> None:
        """Emit a line of code at the current indentation."""
        if code.strip():
            self._buffer.write(self._indent_str * self._indent_level)
            self._buffer.write(code)
            if self._current_source:
                self._source_map[self._line_number] = self._current_source
        self._buffer.write("\n")
        self._line_number += 1

    def emit_blank(self, count: int = 1) -> None:
        for _ in range(count):
            self._buffer.write("\n")
            self._line_number += 1

    def emit_comment(self, text: str) -> None:
        for line in text.split("\n"):
            self.emit(f"# {line}" if line else "#")

    def emit_docstring(self, text: str) -> None:
        self.emit(f'"""{text}"""')

    def indent(self) -> None:
        self._indent_level += 1

    def dedent(self) -> None:
        self._indent_level = max(0, self._indent_level - 1)

    def block(self, header: str) -> "CodeEmitter._BlockContext":
        """Context manager for indented blocks."""
        return self._BlockContext(self, header)

    class _BlockContext:
        """Context manager for code blocks."""

        def __init__(self, emitter: "CodeEmitter", header: str) -> None:
            self._emitter = emitter
            self._header = header

        def __enter__(self) -> "CodeEmitter":
            self._emitter.emit(self._header)
            self._emitter.indent()
            return self._emitter

        def __exit__(self, *args: Any) -> None:
            self._emitter.dedent()

    def set_source(self, span: Optional[SourceSpan]) -> None:
        """Set current source location for mapping."""
        self._current_source = span

    def get_code(self) -> str:
        return self._buffer.getvalue()

    def get_source_map(self) -> Dict[int, SourceSpan]:
        """Get the source map (generated line -> declaration span)."""
        return dict(self._source_map)


# ═══════════════════════════════════════════════════════════════════════════
# GENERATED MODULE CONTAINER
# ═══════════════════════════════════════════════════════════════════════════

@dataclass
class GeneratedModule:
    """Generated code plus what it was generated from."""

    code: str
    source_map: Dict[int, SourceSpan]
    source_name: str
    unions: List[str] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.diagnostics

    def require_ok(self) -> "GeneratedModule":
        """Return self, or raise :class:`GenerationError` if diagnostics exist."""
        if self.diagnostics:
            raise GenerationError(self.diagnostics)
        return self

    def write_to_file(self, path: str | Path) -> None:
        with open(path, "w", encoding="utf-8") as f:
            f.write(self.code)

    def load(self, module_name: str = "errorlevel_generated") -> ModuleType:
        """Execute the code in a fresh module object and return it.

        The module is registered in ``sys.modules`` under *module_name*
        while its body runs and stays there on success; a failed load
        leaves no entry behind.  Raises ``runtime.CompileError`` when
        diagnostics were embedded.
        """
        module = ModuleType(module_name)
        module.__file__ = f"<{self.source_name}>"
        code = compile(self.code, module.__file__, "exec", dont_inherit=True)
        sys.modules[module_name] = module
        try:
            exec(code, module.__dict__)
        except BaseException:
            sys.modules.pop(module_name, None)
            raise
        return module

    def origin(self, line: int) -> Optional[SourceSpan]:
        """Declaration span that produced generated *line*, if recorded."""
        return self.source_map.get(line)


# ═══════════════════════════════════════════════════════════════════════════
# RENDERING HELPERS
# ═══════════════════════════════════════════════════════════════════════════

def render_annotation(shape: TypeShape) -> str:
    """Python spelling of a payload type, used as a string annotation."""
    if shape.kind in (TypeKind.NAME, TypeKind.PATH):
        return shape.dotted
    if shape.kind is TypeKind.REFERENCE:
        return render_annotation(shape.args[0])
    if shape.kind is TypeKind.TUPLE:
        return f"tuple[{', '.join(render_annotation(a) for a in shape.args)}]"
    if shape.kind is TypeKind.ARRAY:
        return f"list[{render_annotation(shape.args[0])}]"
    if shape.kind is TypeKind.GENERIC:
        args = ", ".join(render_annotation(a) for a in shape.args)
        return f"{shape.dotted}[{args}]"
    return f"Literal[{shape.text}]"


def render_level(level: Level) -> str:
    severity = level.severity
    return "None" if severity is None else f"_Severity.{severity.name}"


def variant_class_name(union: str, variant: str) -> str:
    return f"_{union}_{variant}"


def _arm_body(item: Classification) -> Tuple[str, Optional[SourceSpan]]:
    if item.kind is ClassificationKind.DELEGATED and item.delegate is not None:
        return "return self.value.error_level()", item.delegate.span
    if item.level is not None and item.variant.annotation is not None:
        return f"return {render_level(item.level)}", item.variant.annotation.argument_span
    raise ErrorLevelError(
        f"variant {item.variant.name!r} was classified {item.kind.value} "
        "but has nothing to dispatch to"
    )


# ═══════════════════════════════════════════════════════════════════════════
# SYNTHESIS
# ═══════════════════════════════════════════════════════════════════════════

def synthesize(classified: ClassifiedDefinition, out: CodeEmitter) -> None:
    """Emit the union class, its dispatch and its variant classes."""
    definition = classified.definition
    name = definition.name
    variant_names = ", ".join(repr(v.name) for v in definition.variants)
    if len(definition.variants) == 1:
        variant_names += ","

    out.set_source(definition.span)
    with out.block(f"class {name}(_TaggedUnion):"):
        out.emit_docstring(f"Tagged union declared at {definition.span}.")
        out.emit_blank()
        out.emit("__slots__ = ()")
        out.emit(f"union: _ClassVar[str] = {name!r}")
        out.emit(f"variants: _ClassVar[_Tuple[str, ...]] = ({variant_names})")
        out.emit_blank()
        with out.block("def error_level(self) -> _Optional[_Severity]:"):
            out.emit("tag = self.tag")
            keyword = "if"
            for item in classified.arms():
                body, origin = _arm_body(item)
                out.set_source(item.variant.span)
                with out.block(f"{keyword} tag == {item.variant.name!r}:"):
                    out.set_source(origin)
                    out.emit(body)
                keyword = "elif"
            out.set_source(definition.span)
            out.emit('raise _TypeError(f"no error level for {self!r}")')

    for variant in definition.variants:
        out.set_source(variant.span)
        out.emit_blank(2)
        out.emit("@_dataclass(frozen=True, repr=False)")
        with out.block(f"class {variant_class_name(name, variant.name)}({name}):"):
            out.emit(f"tag: _ClassVar[str] = {variant.name!r}")
            if variant.payload is not None:
                out.set_source(variant.payload.span)
                out.emit(f"value: {render_annotation(variant.payload.shape)!r}")

    out.set_source(definition.span)
    out.emit_blank(2)
    for variant in definition.variants:
        cls = variant_class_name(name, variant.name)
        suffix = "" if variant.has_payload else "()"
        out.emit(f"{name}.{variant.name} = {cls}{suffix}")
    out.set_source(None)

    logger.debug(
        "synthesized %s: %d arm(s) for %d variant(s)",
        name,
        len(classified.arms()),
        len(definition.variants),
    )


def _emit_prologue(out: CodeEmitter, source_name: str, unions: List[str], config: GeneratorConfig) -> None:
    if config.header:
        out.emit_comment(
            f"Generated by errorlevel {__version__} from {source_name}\n"
            f"Unions: {', '.join(unions) or '(none)'}\n"
            "Do not edit; regenerate from the declaration file instead."
        )
        out.emit_blank()
    # Module-level helpers are bound under private names; declared union
    # names never start with an underscore, so they cannot shadow these.
    out.emit("from builtins import TypeError as _TypeError")
    out.emit("from dataclasses import dataclass as _dataclass")
    out.emit("from typing import ClassVar as _ClassVar, Optional as _Optional, Tuple as _Tuple")
    out.emit_blank()
    out.emit(
        f"from {config.runtime_module} import "
        "Severity as _Severity, TaggedUnion as _TaggedUnion, compile_errors as _compile_errors"
    )


def _emit_compile_errors(out: CodeEmitter, diagnostics: Sequence[Diagnostic]) -> None:
    out.emit_blank(2)
    with out.block("_compile_errors("):
        for diag in diagnostics:
            out.set_source(diag.span)
            site = (
                diag.span.file,
                diag.span.line,
                diag.span.column,
                diag.code.code,
                diag.message,
            )
            out.emit(f"{site!r},")
    out.set_source(None)
    out.emit(")")


def generate_module(
    classified: Sequence[ClassifiedDefinition],
    source_name: str = "<declarations>",
    config: Optional[GeneratorConfig] = None,
) -> GeneratedModule:
    """Generate one Python module for all *classified* unions."""
    config = config or GeneratorConfig()
    out = CodeEmitter(config.indent)
    unions = [c.definition.name for c in classified]
    diagnostics = [d for c in classified for d in c.diagnostics]

    _emit_prologue(out, source_name, unions, config)
    for item in classified:
        out.emit_blank(2)
        synthesize(item, out)

    if diagnostics:
        _emit_compile_errors(out, diagnostics)
        logger.info(
            "%s: embedding %d compile error(s) in generated module",
            source_name,
            len(diagnostics),
        )

    return GeneratedModule(
        code=out.get_code(),
        source_map=out.get_source_map(),
        source_name=source_name,
        unions=unions,
        diagnostics=diagnostics,
    )

"""errorlevel/model.py – immutable model of tagged-union declarations.

The model is what a front end hands to the classifier: a
:class:`TypeDefinition` per union, each holding its :class:`Variant` list in
declaration order.  Every node carries the :class:`~errorlevel.errors.SourceSpan`
it was read from so diagnostics can point at the exact token.

Front ends implement :class:`TypeDefinitionProvider`; the classifier and
code generator never look past it.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Sequence, Tuple, runtime_checkable

from errorlevel.errors import SourceSpan


class TypeKind(enum.Enum):
    NAME = "name"              # Inner
    PATH = "path"              # example_mod.Inner
    REFERENCE = "reference"    # &Inner
    TUPLE = "tuple"            # (str, str)
    ARRAY = "array"            # [T] / [T; 4]
    GENERIC = "generic"        # Box[Inner]
    LITERAL = "literal"        # "text" / 42


@dataclass(frozen=True, slots=True)
class TypeShape:
    """Raw shape of a payload type.

    ``segments`` holds the identifier spans of NAME/PATH/GENERIC shapes;
    ``args`` holds nested shapes (referent, tuple members, element type,
    generic arguments).
    """

    kind: TypeKind
    span: SourceSpan
    text: str
    segments: Tuple[Tuple[str, SourceSpan], ...] = ()
    args: Tuple["TypeShape", ...] = ()

    @property
    def dotted(self) -> str:
        return ".".join(name for name, _ in self.segments)

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"kind": self.kind.value, "text": self.text}
        if self.args:
            result["args"] = [a.to_dict() for a in self.args]
        return result


@dataclass(frozen=True, slots=True)
class Payload:
    """The single unnamed value slot of a variant."""

    shape: TypeShape
    span: SourceSpan


@dataclass(frozen=True, slots=True)
class Annotation:
    """A ``@report(...)`` tag on a variant.

    ``keyword`` is the bare identifier argument, or ``None`` when the
    argument is missing or is a literal (``literal`` then holds its text).
    ``extra_span`` covers any arguments after the first.
    """

    name: str
    keyword: Optional[str]
    span: SourceSpan
    argument_span: SourceSpan
    literal: Optional[str] = None
    extra_span: Optional[SourceSpan] = None


@dataclass(frozen=True, slots=True)
class Variant:
    name: str
    span: SourceSpan
    payload: Optional[Payload] = None
    annotation: Optional[Annotation] = None

    @property
    def has_payload(self) -> bool:
        return self.payload is not None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"name": self.name, "line": self.span.line}
        if self.annotation is not None:
            result["annotation"] = self.annotation.keyword or self.annotation.literal
        if self.payload is not None:
            result["payload"] = self.payload.shape.to_dict()
        return result


@dataclass(frozen=True, slots=True)
class TypeDefinition:
    """A tagged union: a name and its variants in declaration order."""

    name: str
    variants: Tuple[Variant, ...]
    span: SourceSpan = field(default_factory=SourceSpan)

    def variant(self, name: str) -> Optional[Variant]:
        for v in self.variants:
            if v.name == name:
                return v
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "file": self.span.file,
            "line": self.span.line,
            "variants": [v.to_dict() for v in self.variants],
        }


@runtime_checkable
class TypeDefinitionProvider(Protocol):
    """Source of type definitions (the reflection front end)."""

    def definitions(self) -> Sequence[TypeDefinition]: ...


@dataclass
class StaticProvider:
    """Provider over definitions built in memory."""

    items: List[TypeDefinition] = field(default_factory=list)

    def definitions(self) -> Sequence[TypeDefinition]:
        return tuple(self.items)

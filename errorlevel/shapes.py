"""errorlevel/shapes.py – can a payload type answer for its own level?

A payload is eligible for delegation when its type is a plain name or a
dotted path to one, optionally behind a reference.  The check is purely
structural: whether the named type really implements ``ErrorLevel`` only
shows up when the generated dispatch calls into it.
"""

from __future__ import annotations

from dataclasses import dataclass

from errorlevel.errors import SourceSpan
from errorlevel.model import TypeKind, TypeShape


@dataclass(frozen=True, slots=True)
class ShapeCheck:
    eligible: bool
    span: SourceSpan
    path: str = ""


def _named_span(shape: TypeShape) -> SourceSpan:
    first = shape.segments[0][1]
    if len(shape.segments) == 1:
        return first
    return first.join(shape.segments[-1][1])


def check_payload_shape(shape: TypeShape) -> ShapeCheck:
    """Classify *shape* as eligible or not, with the span to anchor on."""
    target = shape
    if shape.kind is TypeKind.REFERENCE:
        target = shape.args[0]

    if target.kind in (TypeKind.NAME, TypeKind.PATH):
        return ShapeCheck(True, _named_span(target), target.dotted)
    return ShapeCheck(False, shape.span)

"""
errorlevel/parser.py - declaration file front end
=================================================

Reads ``.elv`` declaration files into the :mod:`errorlevel.model` types.

Usage::

    from errorlevel.parser import parse_declarations

    unions = parse_declarations('''
        union CustomError {
            @report(warn)
            ErrorA,
            @report(no)
            ErrorC,
            ErrorD(example_mod.Error),
        }
    ''', filename="errors.elv")

Surface syntax
--------------
* ``union Name { Variant, Variant, ... }``; a trailing comma is allowed.
* A variant is an identifier with at most one payload type in parentheses,
  preceded by any number of ``@name(argument, ...)`` annotations.  Only the
  first annotation named after the configured attribute (``report`` by
  default) counts; others are ignored.  Arguments after the first are kept
  as ``Annotation.extra_span`` so the level parser can reject them.
* Union names may not start with an underscore.
* Payload types: ``Name``, ``pkg.mod.Name``, ``&T``, ``(A, B)``, ``[T]``,
  ``[T; 4]``, ``Name[A, B]``, ``"text"``, ``42``.
* ``//`` starts a comment running to the end of the line.

Depends on:
    - parsimonious (PEG parser)
"""

from __future__ import annotations

import bisect
import keyword
import logging
from pathlib import Path
from typing import Any, List, NamedTuple, Optional, Sequence, Tuple

from parsimonious.exceptions import ParseError
from parsimonious.grammar import Grammar
from parsimonious.nodes import Node, NodeVisitor

from errorlevel.errors import DeclarationError, Diagnostic, ErrorCodes, SourceSpan
from errorlevel.model import (
    Annotation,
    Payload,
    TypeDefinition,
    TypeKind,
    TypeShape,
    Variant,
)

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════
#  GRAMMAR (Parsimonious PEG)
# ═══════════════════════════════════════════════════════════════════

DECLARATION_GRAMMAR = Grammar(r'''
    module              = _ union_decl* end

    union_decl          = "union" ws identifier _ "{" _ variant_list? "}" _
    variant_list        = variant (_ "," _ variant)* _ ","? _
    variant             = annotation* identifier _ payload?

    annotation          = "@" identifier _ annotation_args? _
    annotation_args     = "(" _ annotation_arg_list? _ ")"
    annotation_arg_list = annotation_arg (_ "," _ annotation_arg)* (_ ",")?
    annotation_arg      = literal / identifier

    payload             = "(" _ type_expr _ ")"

    type_expr           = reference_type / tuple_type / array_type
                        / generic_type / path_type / literal_type
    reference_type      = "&" _ type_expr
    tuple_type          = "(" _ type_list? _ ")"
    array_type          = "[" _ type_expr _ array_length? "]"
    array_length        = ";" _ integer _
    generic_type        = path_type _ "[" _ type_list _ "]"
    path_type           = identifier (_ "." _ identifier)*
    literal_type        = string_literal / integer
    type_list           = type_expr (_ "," _ type_expr)* (_ ",")?

    literal             = string_literal / integer
    string_literal      = ~r'"(?:[^"\\]|\\.)*"' / ~r"'(?:[^'\\]|\\.)*'"
    integer             = ~r"-?\d+"

    identifier          = ~r"[A-Za-z_][A-Za-z0-9_]*"
    ws                  = ~r"(?:\s|//[^\n]*)+"
    _                   = ~r"(?:\s|//[^\n]*)*"
    end                 = !~r"(?s)."
''')

# Names the generated classes already use for themselves.
RESERVED_NAMES = frozenset({"tag", "union", "value", "variants", "error_level", "log_error"})


class _Ident(NamedTuple):
    name: str
    span: SourceSpan


class _Literal(NamedTuple):
    text: str
    span: SourceSpan


def _opt(value: Any) -> Any:
    """Result of an optional sub-expression, or ``None`` if it did not match."""
    if isinstance(value, list) and value:
        return value[0]
    return None


def _many(value: Any) -> List[Any]:
    """Results of a repeated sub-expression (empty when nothing matched)."""
    return value if isinstance(value, list) else []


# ═══════════════════════════════════════════════════════════════════
#  PARSE TREE → MODEL
# ═══════════════════════════════════════════════════════════════════

class DeclarationBuilder(NodeVisitor):
    """Transforms a Parsimonious parse tree into :class:`TypeDefinition` objects."""

    def __init__(self, text: str, filename: str = "", attribute: str = "report") -> None:
        self.text = text
        self.filename = filename
        self.attribute = attribute
        self._line_starts = [0]
        for i, ch in enumerate(text):
            if ch == "\n":
                self._line_starts.append(i + 1)

    def _position(self, offset: int) -> Tuple[int, int]:
        index = bisect.bisect_right(self._line_starts, offset) - 1
        return index + 1, offset - self._line_starts[index] + 1

    def _span(self, start: int, end: int) -> SourceSpan:
        line, column = self._position(start)
        end_line, end_column = self._position(end)
        return SourceSpan(self.filename, line, column, end_line, end_column)

    def generic_visit(self, node: Node, visited_children: List[Any]) -> Any:
        return visited_children or node

    # ─────────────────────────────────────────────────────────────
    # Unions and variants
    # ─────────────────────────────────────────────────────────────

    def visit_module(self, node, visited_children):
        _, unions, _ = visited_children
        return _many(unions)

    def visit_union_decl(self, node, visited_children):
        _, _, name, _, _, _, variants, _, _ = visited_children
        variants = _opt(variants) or []
        logger.debug("union %s at %s: %d variant(s)", name.name, name.span, len(variants))
        return TypeDefinition(name=name.name, variants=tuple(variants), span=name.span)

    def visit_variant_list(self, node, visited_children):
        first, rest, _, _, _ = visited_children
        return [first] + [item[3] for item in _many(rest)]

    def visit_variant(self, node, visited_children):
        annotations, name, _, payload = visited_children
        chosen: Optional[Annotation] = None
        for annotation in _many(annotations):
            if annotation.name != self.attribute:
                logger.debug("ignoring @%s on %s", annotation.name, name.name)
            elif chosen is None:
                chosen = annotation
            else:
                logger.debug("ignoring repeated @%s on %s", annotation.name, name.name)
        return Variant(
            name=name.name,
            span=name.span,
            payload=_opt(payload),
            annotation=chosen,
        )

    def visit_annotation(self, node, visited_children):
        _, name, _, args, _ = visited_children
        args = _opt(args)
        if args is None:
            span = self._span(node.start, node.start).join(name.span)
            return Annotation(name.name, None, span, span)
        arguments, parens = args
        span = self._span(node.start, node.start).join(parens)
        if not arguments:
            return Annotation(name.name, None, span, parens)
        first, extra = arguments[0], arguments[1:]
        extra_span = extra[0].span.join(extra[-1].span) if extra else None
        if isinstance(first, _Ident):
            return Annotation(
                name.name, first.name, span, first.span, extra_span=extra_span
            )
        return Annotation(
            name.name, None, span, first.span, literal=first.text, extra_span=extra_span
        )

    def visit_annotation_args(self, node, visited_children):
        _, _, arguments, _, _ = visited_children
        return _opt(arguments), self._span(node.start, node.end)

    def visit_annotation_arg_list(self, node, visited_children):
        first, rest, _ = visited_children
        return [first] + [item[3] for item in _many(rest)]

    def visit_annotation_arg(self, node, visited_children):
        return visited_children[0]

    def visit_payload(self, node, visited_children):
        _, _, shape, _, _ = visited_children
        return Payload(shape=shape, span=shape.span)

    # ─────────────────────────────────────────────────────────────
    # Types
    # ─────────────────────────────────────────────────────────────

    def _shape(self, node: Node, kind: TypeKind, **kwargs: Any) -> TypeShape:
        return TypeShape(
            kind=kind,
            span=self._span(node.start, node.end),
            text=node.text,
            **kwargs,
        )

    def visit_type_expr(self, node, visited_children):
        return visited_children[0]

    def visit_reference_type(self, node, visited_children):
        _, _, inner = visited_children
        return self._shape(node, TypeKind.REFERENCE, args=(inner,))

    def visit_tuple_type(self, node, visited_children):
        _, _, members, _, _ = visited_children
        return self._shape(node, TypeKind.TUPLE, args=tuple(_opt(members) or ()))

    def visit_array_type(self, node, visited_children):
        _, _, element, _, _, _ = visited_children
        return self._shape(node, TypeKind.ARRAY, args=(element,))

    def visit_generic_type(self, node, visited_children):
        path, _, _, _, args, _, _ = visited_children
        return self._shape(
            node, TypeKind.GENERIC, segments=path.segments, args=tuple(args)
        )

    def visit_path_type(self, node, visited_children):
        first, rest = visited_children
        idents = [first] + [item[3] for item in _many(rest)]
        kind = TypeKind.NAME if len(idents) == 1 else TypeKind.PATH
        return self._shape(node, kind, segments=tuple((i.name, i.span) for i in idents))

    def visit_literal_type(self, node, visited_children):
        return self._shape(node, TypeKind.LITERAL)

    def visit_type_list(self, node, visited_children):
        first, rest, _ = visited_children
        return [first] + [item[3] for item in _many(rest)]

    # ─────────────────────────────────────────────────────────────
    # Tokens
    # ─────────────────────────────────────────────────────────────

    def visit_literal(self, node, visited_children):
        return _Literal(node.text, self._span(node.start, node.end))

    def visit_identifier(self, node, visited_children):
        return _Ident(node.text, self._span(node.start, node.end))


# ═══════════════════════════════════════════════════════════════════
#  ENTRY POINTS
# ═══════════════════════════════════════════════════════════════════

def _fail(code, message: str, span: SourceSpan) -> DeclarationError:
    return DeclarationError(Diagnostic(code=code, message=message, span=span))


def _check_names(unions: Sequence[TypeDefinition]) -> None:
    seen_unions = {}
    for union in unions:
        if union.name in seen_unions:
            raise _fail(
                ErrorCodes.DUPLICATE_DECLARATION,
                f"union {union.name!r} is already declared at {seen_unions[union.name]}",
                union.span,
            )
        seen_unions[union.name] = union.span
        if keyword.iskeyword(union.name):
            raise _fail(
                ErrorCodes.RESERVED_NAME,
                f"{union.name!r} is a Python keyword and cannot name a union",
                union.span,
            )
        # Generated modules keep their own helpers under underscore names.
        if union.name.startswith("_"):
            raise _fail(
                ErrorCodes.RESERVED_NAME,
                f"union names may not start with an underscore: {union.name!r}",
                union.span,
            )

        seen_variants = {}
        for variant in union.variants:
            if keyword.iskeyword(variant.name) or variant.name in RESERVED_NAMES:
                raise _fail(
                    ErrorCodes.RESERVED_NAME,
                    f"{variant.name!r} is reserved and cannot name a variant",
                    variant.span,
                )
            if variant.name in seen_variants:
                raise _fail(
                    ErrorCodes.DUPLICATE_DECLARATION,
                    f"variant {union.name}.{variant.name} is already declared at "
                    f"{seen_variants[variant.name]}",
                    variant.span,
                )
            seen_variants[variant.name] = variant.span


def parse_declarations(
    text: str,
    filename: str = "<string>",
    attribute: str = "report",
) -> List[TypeDefinition]:
    """Parse declaration source into type definitions.

    Raises :class:`DeclarationError` when the text does not parse or names
    collide.
    """
    try:
        tree = DECLARATION_GRAMMAR.parse(text)
    except ParseError as exc:
        rule = exc.expr.name if exc.expr is not None and exc.expr.name else "declaration"
        snippet = text[exc.pos:exc.pos + 20].split("\n", 1)[0]
        found = f"near {snippet!r}" if snippet else "at end of input"
        raise _fail(
            ErrorCodes.SYNTAX_ERROR,
            f"expected {rule} {found}",
            SourceSpan(filename, exc.line(), exc.column()),
        ) from exc

    unions = DeclarationBuilder(text, filename, attribute).visit(tree)
    _check_names(unions)
    logger.info("parsed %d union(s) from %s", len(unions), filename)
    return unions


class DeclarationFile:
    """:class:`~errorlevel.model.TypeDefinitionProvider` over a declaration file."""

    def __init__(self, path: Path | str, attribute: str = "report") -> None:
        self.path = Path(path)
        self.attribute = attribute
        self._definitions: Optional[List[TypeDefinition]] = None

    def read_text(self) -> str:
        return self.path.read_text(encoding="utf-8")

    def definitions(self) -> Sequence[TypeDefinition]:
        if self._definitions is None:
            self._definitions = parse_declarations(
                self.read_text(), str(self.path), self.attribute
            )
        return tuple(self._definitions)

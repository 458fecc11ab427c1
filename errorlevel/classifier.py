"""
errorlevel/classifier.py
========================

Per-variant classification.

For each variant, in declaration order:

1. An annotation is present → the level comes from the annotation.  The
   payload, if any, is never inspected: an annotation always overrides shape
   analysis.
2. No annotation, payload present → the payload shape decides.  An eligible
   payload delegates to the payload's own ``error_level``; an ineligible one
   is reported (``ELVL-2002``).
3. Neither → reported (``ELVL-2001``).

Classification is variant-local.  Every variant yields exactly one
:class:`Classification`; a failed one carries exactly one diagnostic and no
level.  Processing never stops early, so all problems in a definition are
reported together.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from errorlevel.errors import Diagnostic, DiagnosticCollector, ErrorCodes
from errorlevel.levels import Level, parse_level
from errorlevel.model import TypeDefinition, Variant
from errorlevel.shapes import ShapeCheck, check_payload_shape

logger = logging.getLogger(__name__)


class ClassificationKind(enum.Enum):
    EXPLICIT_NO_PAYLOAD = "explicit"
    EXPLICIT_WITH_PAYLOAD = "explicit-with-payload"
    DELEGATED = "delegated"
    INVALID = "invalid"


@dataclass(frozen=True, slots=True)
class Classification:
    """Outcome for one variant.

    ``level`` is set for explicit classifications whose keyword parsed;
    ``delegate`` for delegated ones; ``diagnostic`` whenever the variant
    cannot contribute a dispatch arm.
    """

    variant: Variant
    kind: ClassificationKind
    level: Optional[Level] = None
    delegate: Optional[ShapeCheck] = None
    diagnostic: Optional[Diagnostic] = None

    @property
    def is_explicit(self) -> bool:
        return self.kind in (
            ClassificationKind.EXPLICIT_NO_PAYLOAD,
            ClassificationKind.EXPLICIT_WITH_PAYLOAD,
        )

    @property
    def has_arm(self) -> bool:
        """True when the dispatch gets an arm for this variant."""
        return self.diagnostic is None


@dataclass(frozen=True)
class ClassifiedDefinition:
    """All classifications of one definition plus the diagnostics they raised."""

    definition: TypeDefinition
    classifications: Tuple[Classification, ...]
    diagnostics: Tuple[Diagnostic, ...]

    @property
    def ok(self) -> bool:
        return not self.diagnostics

    def arms(self) -> Tuple[Classification, ...]:
        return tuple(c for c in self.classifications if c.has_arm)

    def get(self, variant_name: str) -> Optional[Classification]:
        for c in self.classifications:
            if c.variant.name == variant_name:
                return c
        return None


def classify_variant(
    variant: Variant,
    collector: DiagnosticCollector,
    attribute: str = "report",
) -> Classification:
    """Classify a single variant, reporting into *collector*."""
    if variant.annotation is not None:
        before = len(collector)
        level = parse_level(variant.annotation, collector)
        diagnostic = collector.diagnostics[before] if level is None else None
        kind = (
            ClassificationKind.EXPLICIT_WITH_PAYLOAD
            if variant.has_payload
            else ClassificationKind.EXPLICIT_NO_PAYLOAD
        )
        return Classification(variant, kind, level=level, diagnostic=diagnostic)

    if variant.payload is not None:
        check = check_payload_shape(variant.payload.shape)
        if check.eligible:
            return Classification(variant, ClassificationKind.DELEGATED, delegate=check)
        diagnostic = collector.report(
            ErrorCodes.INELIGIBLE_PAYLOAD_SHAPE,
            f"variant {variant.name!r} needs a '{attribute}' annotation: its payload "
            f"{variant.payload.shape.text} cannot provide its own error level",
            check.span,
            hint="only a named type (optionally dotted or behind '&') can be delegated to",
        )
        return Classification(variant, ClassificationKind.INVALID, diagnostic=diagnostic)

    diagnostic = collector.report(
        ErrorCodes.MISSING_ANNOTATION,
        f"variant {variant.name!r} needs a '{attribute}' annotation",
        variant.span,
    )
    return Classification(variant, ClassificationKind.INVALID, diagnostic=diagnostic)


def classify_definition(
    definition: TypeDefinition, attribute: str = "report"
) -> ClassifiedDefinition:
    """Classify every variant of *definition* in one pass."""
    collector = DiagnosticCollector()
    results = tuple(
        classify_variant(v, collector, attribute) for v in definition.variants
    )
    logger.debug(
        "classified %s: %d variant(s), %d diagnostic(s)",
        definition.name,
        len(results),
        len(collector),
    )
    return ClassifiedDefinition(definition, results, tuple(collector.diagnostics))

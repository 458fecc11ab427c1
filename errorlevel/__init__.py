"""errorlevel - reporting levels for tagged-union error types.

Declare error unions in a ``.elv`` file, mark each variant with
``@report(level)`` or let it delegate to its payload, and errorlevel
generates a Python module whose unions know how urgently each instance
should be reported.

Submodules
----------
errors
    Structured diagnostic codes (``ELVL-XXXX``), ``SourceSpan``,
    ``Diagnostic`` / ``DiagnosticCollector`` and the exception hierarchy.

runtime
    What generated modules import: ``Severity``, the ``ErrorLevel``
    capability, ``TaggedUnion`` and ``compile_errors``.

model / parser
    The declaration model and the parsimonious front end that builds it.

levels / shapes / classifier
    Annotation keywords, payload eligibility and per-variant
    classification.

codegen / compiler
    Dispatch synthesis and the parse → classify → generate pipeline.

main
    CLI entry-point with subcommands: ``generate``, ``check``, ``parse``.

Usage
-----
Command-line::

    python -m errorlevel generate errors.elv -o errors_gen.py
    python -m errorlevel check errors.elv --format gcc

Programmatic::

    from errorlevel.compiler import compile_source

    generated = compile_source(text, filename="errors.elv")
    module = generated.require_ok().load("errors_gen")
    module.CustomError.ErrorA.error_level()
"""

from __future__ import annotations

__version__: str = "0.1.0"
__all__: list[str] = [
    "__version__",
    "errors",
    "runtime",
    "compiler",
    "main",
]

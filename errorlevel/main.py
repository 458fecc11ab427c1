#!/usr/bin/env python3
"""errorlevel/main.py - CLI entry-point.

Usage examples
--------------
    # Generate a Python module from a declaration file
    python -m errorlevel generate errors.elv -o errors_gen.py

    # Report every diagnostic without generating anything
    python -m errorlevel check errors.elv --format gcc

    # Dump the parsed declarations as JSON (debugging aid)
    python -m errorlevel parse errors.elv

    # Show version and exit
    python -m errorlevel --version

Exit codes
----------
    0   Success: every variant classified.
    1   The declaration file has syntax, naming or classification errors.
    2   Infrastructure failure (missing file, unwritable output, etc.).

The module doubles as ``python -m errorlevel`` via the companion
``errorlevel/__main__.py`` which simply calls :func:`main`.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import textwrap
from pathlib import Path
from typing import Any, List, Optional, Sequence, TextIO

from errorlevel import __version__
from errorlevel.compiler import compile_file
from errorlevel.config import GeneratorConfig
from errorlevel.errors import DeclarationError, Diagnostic, first_error
from errorlevel.parser import DeclarationFile

_log = logging.getLogger("errorlevel")

# Exit codes ----------------------------------------------------------------

EXIT_OK: int = 0
EXIT_ERROR: int = 1
EXIT_INFRA: int = 2


# ===========================================================================
# Utility helpers
# ===========================================================================

def _configure_logging(verbosity: int) -> None:
    """Set up the root ``errorlevel`` logger.

    Parameters
    ----------
    verbosity:
        0 → WARNING, 1 → INFO, 2+ → DEBUG.
    """
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    root = logging.getLogger("errorlevel")
    root.setLevel(level)
    if root.handlers:
        return
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s [%(levelname)-5.5s] %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    root.addHandler(handler)


def _resolve_path(raw: str, label: str = "file") -> Path:
    """Resolve *raw* to an absolute ``Path``, raising on missing files."""
    p = Path(raw).expanduser().resolve()
    if not p.is_file():
        _log.error("%s not found: %s", label, p)
        raise SystemExit(EXIT_INFRA)
    return p


def _open_output(dest: Optional[str]) -> TextIO:
    """Return a writable text stream.

    *dest* ``None`` or ``"-"`` → ``sys.stdout``; otherwise open the path
    for writing (creating parent directories as needed).
    """
    if dest is None or dest == "-":
        return sys.stdout
    p = Path(dest).expanduser().resolve()
    p.parent.mkdir(parents=True, exist_ok=True)
    return open(p, "w", encoding="utf-8")


def _emit_diagnostics(
    diagnostics: Sequence[Diagnostic],
    fmt: str,
    stream: TextIO,
) -> int:
    """Write *diagnostics* to *stream* in the chosen format.

    Returns the number of diagnostics written.
    """
    for diag in diagnostics:
        if fmt == "json":
            stream.write(json.dumps(diag.to_dict()) + "\n")
        else:
            stream.write(diag.to_gcc_format() + "\n")

    if fmt == "summary":
        stream.write(f"\n--- {len(diagnostics)} error(s) ---\n")
    return len(diagnostics)


def _config_from_args(args: argparse.Namespace) -> GeneratorConfig:
    return GeneratorConfig(
        attribute=args.attribute,
        header=not getattr(args, "no_header", False),
        runtime_module=getattr(args, "runtime_module", "errorlevel.runtime"),
    )


# ===========================================================================
# Sub-command implementations
# ===========================================================================

# ---------------------------------------------------------------------------
# generate
# ---------------------------------------------------------------------------

def cmd_generate(args: argparse.Namespace) -> int:
    """Generate the dispatch module for a declaration file.

    With diagnostics the module is still generated (it carries the
    ``compile_errors`` call) but only written when ``--force`` is given.
    """
    src_path = _resolve_path(args.source_file, "declaration file")
    config = _config_from_args(args)

    try:
        generated = compile_file(src_path, config)
    except DeclarationError as exc:
        _emit_diagnostics([exc.diagnostic], args.format, sys.stderr)
        return EXIT_ERROR

    if generated.diagnostics:
        _emit_diagnostics(generated.diagnostics, args.format, sys.stderr)
        if not args.force:
            _log.error(
                "%d error(s), first at %s; not writing output",
                len(generated.diagnostics),
                first_error(generated.diagnostics).span,
            )
            return EXIT_ERROR

    out = _open_output(args.output)
    try:
        out.write(generated.code)
    finally:
        if out is not sys.stdout:
            out.close()
    _log.info("Wrote %s", args.output or "<stdout>")

    return EXIT_ERROR if generated.diagnostics else EXIT_OK


# ---------------------------------------------------------------------------
# check
# ---------------------------------------------------------------------------

def cmd_check(args: argparse.Namespace) -> int:
    """Classify a declaration file and report diagnostics only."""
    src_path = _resolve_path(args.source_file, "declaration file")
    config = _config_from_args(args)

    try:
        diagnostics: List[Diagnostic] = compile_file(src_path, config).diagnostics
    except DeclarationError as exc:
        diagnostics = [exc.diagnostic]

    out = _open_output(args.output)
    try:
        _emit_diagnostics(diagnostics, args.format, out)
    finally:
        if out is not sys.stdout:
            out.close()

    if not diagnostics:
        _log.info("%s: ok", src_path)
    return EXIT_ERROR if diagnostics else EXIT_OK


# ---------------------------------------------------------------------------
# parse
# ---------------------------------------------------------------------------

def cmd_parse(args: argparse.Namespace) -> int:
    """Parse a declaration file and dump the model as JSON.

    Useful for debugging the front end without classifying anything.
    """
    src_path = _resolve_path(args.source_file, "declaration file")

    try:
        definitions = DeclarationFile(src_path, args.attribute).definitions()
    except DeclarationError as exc:
        _emit_diagnostics([exc.diagnostic], "gcc", sys.stderr)
        return EXIT_ERROR

    payload: List[Any] = [d.to_dict() for d in definitions]
    out = _open_output(args.output)
    try:
        out.write(json.dumps(payload, indent=2) + "\n")
    finally:
        if out is not sys.stdout:
            out.close()
    return EXIT_OK


# ===========================================================================
# Argument parser construction
# ===========================================================================

def _build_parser() -> argparse.ArgumentParser:
    """Construct the full CLI argument parser with subcommands."""

    # --- Top-level parser --------------------------------------------------
    parser = argparse.ArgumentParser(
        prog="errorlevel",
        description=(
            "errorlevel: generate reporting-level dispatch for tagged-union\n"
            "error types declared in .elv files."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""\
            examples:
              errorlevel generate errors.elv -o errors_gen.py
              errorlevel check errors.elv --format json
              errorlevel parse errors.elv
        """),
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v info, -vv debug).",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        metavar="<command>",
    )

    # Shared arguments (reusable) ------------------------------------------

    def _add_source_args(p: argparse.ArgumentParser) -> None:
        p.add_argument(
            "source_file",
            metavar="SOURCE",
            help="Declaration file (.elv).",
        )
        p.add_argument(
            "--attribute",
            default="report",
            metavar="NAME",
            help="Annotation name that carries the level (default: report).",
        )
        p.add_argument(
            "-o", "--output",
            default=None,
            metavar="FILE",
            help='Output file ("-" or omit for stdout).',
        )

    def _add_format_arg(p: argparse.ArgumentParser, default: str) -> None:
        p.add_argument(
            "-f", "--format",
            choices=["gcc", "json", "summary"],
            default=default,
            help=f"Diagnostic output format (default: {default}).",
        )

    # --- generate ----------------------------------------------------------
    p_generate = subparsers.add_parser(
        "generate",
        help="Generate the error-level module for a declaration file.",
        description=(
            "Parse and classify a declaration file and write the generated "
            "Python module. Diagnostics go to stderr."
        ),
    )
    _add_source_args(p_generate)
    _add_format_arg(p_generate, "gcc")
    p_generate.add_argument(
        "--force",
        action="store_true",
        help="Write the module even when it carries compile errors.",
    )
    p_generate.add_argument(
        "--no-header",
        action="store_true",
        help="Omit the provenance comment at the top of the module.",
    )
    p_generate.add_argument(
        "--runtime-module",
        default="errorlevel.runtime",
        metavar="MODULE",
        help="Module the generated code imports its runtime from.",
    )
    p_generate.set_defaults(func=cmd_generate)

    # --- check -------------------------------------------------------------
    p_check = subparsers.add_parser(
        "check",
        help="Report diagnostics without generating code.",
        description="Classify every variant and list all problems found.",
    )
    _add_source_args(p_check)
    _add_format_arg(p_check, "summary")
    p_check.set_defaults(func=cmd_check)

    # --- parse -------------------------------------------------------------
    p_parse = subparsers.add_parser(
        "parse",
        help="Parse a declaration file and dump it as JSON.",
        description="Parse a declaration file and print its model as JSON.",
    )
    _add_source_args(p_parse)
    p_parse.set_defaults(func=cmd_parse)

    return parser


# ===========================================================================
# Main entry point
# ===========================================================================

def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the errorlevel CLI.

    Parameters
    ----------
    argv:
        Command-line arguments.  ``None`` → ``sys.argv[1:]``.

    Returns
    -------
    int
        Exit code (see module docstring for semantics).
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.verbose)

    # No subcommand given → print help.
    if not hasattr(args, "func"):
        parser.print_help(sys.stderr)
        return EXIT_INFRA

    try:
        return args.func(args)
    except KeyboardInterrupt:
        _log.info("Interrupted by user.")
        return 130
    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else EXIT_INFRA
    except OSError as exc:
        _log.error("I/O error: %s", exc)
        return EXIT_INFRA
    except Exception as exc:
        _log.error("Unhandled exception: %s", exc, exc_info=True)
        return EXIT_INFRA


if __name__ == "__main__":
    raise SystemExit(main())

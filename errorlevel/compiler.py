"""
errorlevel/compiler.py
======================

The parse → classify → generate pipeline behind the CLI.

    .elv source ──► parser ──► TypeDefinition[] ──► classifier ──► codegen
                                                                      │
                                                      GeneratedModule ◄┘

Syntax and naming errors in the declaration file raise
:class:`~errorlevel.errors.DeclarationError` before anything is
classified.  Classification problems never raise: they travel as
diagnostics on the returned :class:`~errorlevel.codegen.GeneratedModule`
and are embedded in its code.
"""

from __future__ import annotations

import logging
from pathlib import Path
from types import ModuleType
from typing import List, Optional

from errorlevel.classifier import ClassifiedDefinition, classify_definition
from errorlevel.codegen import GeneratedModule, generate_module
from errorlevel.config import GeneratorConfig
from errorlevel.model import StaticProvider, TypeDefinitionProvider
from errorlevel.parser import DeclarationFile, parse_declarations

logger = logging.getLogger(__name__)

__all__ = [
    "classify_all",
    "compile_provider",
    "compile_source",
    "compile_file",
    "load_source",
]


def _checked(config: Optional[GeneratorConfig]) -> GeneratorConfig:
    config = config or GeneratorConfig()
    for warning in config.validate():
        logger.warning("config: %s", warning)
    return config


def classify_all(
    provider: TypeDefinitionProvider, attribute: str = "report"
) -> List[ClassifiedDefinition]:
    """Classify every definition *provider* yields, in order."""
    return [classify_definition(d, attribute) for d in provider.definitions()]


def _compile(
    provider: TypeDefinitionProvider, source_name: str, config: GeneratorConfig
) -> GeneratedModule:
    classified = classify_all(provider, config.attribute)
    generated = generate_module(classified, source_name, config)
    logger.info(
        "%s: %d union(s), %d diagnostic(s)",
        source_name,
        len(generated.unions),
        len(generated.diagnostics),
    )
    return generated


def compile_provider(
    provider: TypeDefinitionProvider,
    source_name: str = "<declarations>",
    config: Optional[GeneratorConfig] = None,
) -> GeneratedModule:
    """Compile definitions from any provider, e.g. one built in memory."""
    return _compile(provider, source_name, _checked(config))


def compile_source(
    text: str,
    filename: str = "<string>",
    config: Optional[GeneratorConfig] = None,
) -> GeneratedModule:
    """Compile declaration *text* into a generated module."""
    config = _checked(config)
    definitions = parse_declarations(text, filename, config.attribute)
    return _compile(StaticProvider(list(definitions)), filename, config)


def compile_file(
    path: Path | str, config: Optional[GeneratorConfig] = None
) -> GeneratedModule:
    """Compile the declaration file at *path*."""
    config = _checked(config)
    provider = DeclarationFile(path, config.attribute)
    return _compile(provider, str(provider.path), config)


def load_source(
    text: str,
    module_name: str = "errorlevel_generated",
    filename: str = "<string>",
    config: Optional[GeneratorConfig] = None,
) -> ModuleType:
    """Compile *text* and import the result.

    Raises :class:`~errorlevel.runtime.CompileError` when any variant
    failed to classify.
    """
    return compile_source(text, filename, config).load(module_name)

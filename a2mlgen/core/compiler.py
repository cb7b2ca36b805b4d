"""
Compiler Facade
===============

Run the whole pipeline: tokenize and parse the enhanced A2ML text, resolve
it into a schema, and generate the Python module. Also loads generated
modules so their classes can be used directly.
"""

import time
import types

from a2mlgen.config.logging import get_logger
from a2mlgen.core.codegen.generator import generate_module
from a2mlgen.core.dsl.parser import parse_specification
from a2mlgen.core.schema.resolver import resolve_specification
from a2mlgen.models.results import CompileResult, GeneratedModule
from a2mlgen.utils.diagnostics import A2mlError

logger = get_logger(__name__)


def compile_specification(text: str) -> GeneratedModule:
    """
    Compile an enhanced A2ML specification into Python source.

    Args:
        text: Specification text, starting with a <Name> header

    Returns:
        GeneratedModule with source and canonical text

    Raises:
        A2mlSyntaxError: If the text is malformed
        A2mlSemanticError: If the specification is not valid
    """
    spec = parse_specification(text)
    schema = resolve_specification(spec)
    return generate_module(schema)


def try_compile(text: str) -> CompileResult:
    """
    Compile a specification, reporting errors instead of raising them.

    Args:
        text: Specification text

    Returns:
        CompileResult containing the generated module or errors
    """
    start_time = time.time()
    try:
        module = compile_specification(text)
    except A2mlError as e:
        logger.error("Compilation failed", error=str(e))
        return CompileResult(
            success=False,
            module=None,
            errors=[str(e)],
            processing_time=time.time() - start_time,
        )
    return CompileResult(
        success=True,
        module=module,
        errors=[],
        processing_time=time.time() - start_time,
    )


def load_module(generated: GeneratedModule) -> types.ModuleType:
    """
    Execute generated source in a fresh module object.

    Args:
        generated: Output of compile_specification

    Returns:
        Module holding the generated classes and the text constant
    """
    module = types.ModuleType(f"a2mlgen.generated.{generated.name}")
    module.__file__ = f"<a2mlgen {generated.name}>"
    # Source only ever comes from generate_module
    code = compile(generated.source, module.__file__, "exec")
    exec(code, module.__dict__)
    logger.debug("Loaded generated module", module=module.__name__)
    return module


def a2ml_specification(text: str) -> types.ModuleType:
    """Compile a specification and load the resulting module."""
    return load_module(compile_specification(text))

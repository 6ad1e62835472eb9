"""lexidict - compile translation dictionaries to Python dispatch code.

A dictionary declares its locales once and a tree of translation units,
each mapping locale patterns to a string template or a Python expression.
The compiler checks that every unit covers every locale and generates a
module with a `Locale` tagged union and a `Dict` dispatch type.

Public API:
    compile_source - Compile dictionary source text to Python source
    compile_file - Compile a dictionary file with on-disk modules
    load_source - Compile source text and load the generated module
    load_dictionary - Compile a file and load the generated module
    parse_dict - Parse dictionary source to AST
    CompilerConfig - Compiler limits and generated-code options

Exceptions:
    LexiError - Base exception class
    DictSyntaxError - Lexing and parsing errors
    ModuleResolutionError - `mod` declarations that cannot be resolved
    DictCheckError - Exhaustiveness and consistency errors
    GenerationError - Bodies that cannot be lowered to Python

Submodules:
    lexidict.syntax - Lexer, token model, AST, parser and serializer
    lexidict.analysis - Pattern resolution and exhaustiveness checker
    lexidict.codegen - Template sub-compiler and code generator
    lexidict.runtime - Base classes imported by generated modules
    lexidict.diagnostics - Diagnostic codes, exceptions and formatting
"""

from .compiler import CompileResult, compile_file, compile_source, load_dictionary, load_source
from .config import CompilerConfig
from .diagnostics import (
    DictCheckError,
    DictSyntaxError,
    GenerationError,
    LexiError,
    ModuleResolutionError,
)
from .syntax import parse_dict

# Version information - Auto-populated from package metadata
# SINGLE SOURCE OF TRUTH: pyproject.toml [project] version
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _get_version

try:
    __version__ = _get_version("lexidict")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "CompileResult",
    "CompilerConfig",
    "DictCheckError",
    "DictSyntaxError",
    "GenerationError",
    "LexiError",
    "ModuleResolutionError",
    "__version__",
    "compile_file",
    "compile_source",
    "load_dictionary",
    "load_source",
    "parse_dict",
]

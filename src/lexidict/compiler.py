"""Compilation pipeline: source -> parse -> check -> generate -> load.

Glue for embedding the compiler in build scripts and applications. Every
stage fails fast with a LexiError subclass carrying a Diagnostic; warnings
of a successful compilation are returned on the CompileResult.

Example:
    >>> module = load_source('''
    ...     enum Locale { De, En { Gb, Us } }
    ...     unit greet(name: str) {
    ...         De => "Hallo {name}!",
    ...         En(Us) => "Howdy {name}!",
    ...         _ => "Hello {name}!",
    ...     }
    ... ''')
    >>> module.new(module.Locale.En(module.EnRegion.Us)).greet("Ada")
    'Howdy Ada!'

Python 3.13+.
"""

from __future__ import annotations

import logging
import sys
import types
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from .analysis import CheckResult, check
from .codegen import GeneratedDictionary, generate
from .config import CompilerConfig
from .diagnostics import Diagnostic
from .loading import ModuleResolver, PathModuleResolver
from .syntax import Dict, DictParser

__all__ = [
    "CompileResult",
    "compile_file",
    "compile_source",
    "load_dictionary",
    "load_source",
]

logger = logging.getLogger(__name__)

# Prefix of the module name used when the caller does not pick one.
_DEFAULT_MODULE_PREFIX = "lexidict_dictionary"


@dataclass(frozen=True, slots=True)
class CompileResult:
    """Everything a successful compilation produced.

    Attributes:
        dictionary: Parsed AST
        check_result: Checker outcome (warnings, non-exhaustive units)
        generated: Generated module
    """

    dictionary: Dict
    check_result: CheckResult
    generated: GeneratedDictionary

    @property
    def source(self) -> str:
        """Generated Python source."""
        return self.generated.source

    @property
    def warnings(self) -> tuple[Diagnostic, ...]:
        return self.check_result.warnings


def compile_source(
    source: str,
    *,
    name: str = "<string>",
    resolver: ModuleResolver | None = None,
    config: CompilerConfig | None = None,
) -> CompileResult:
    """Compile dictionary source text to Python source.

    Args:
        source: Dictionary source text
        name: Display name for diagnostics and the generated header
        resolver: Module source resolver for `mod` declarations
        config: Compiler configuration

    Raises:
        DictSyntaxError: Lexing, parsing or module resolution failed
        DictCheckError: The dictionary is semantically invalid
        GenerationError: A body could not be lowered
    """
    config = config or CompilerConfig()
    dictionary = DictParser(resolver, config=config).parse_source(source, name)
    return _finish(dictionary, config, name)


def compile_file(
    path: str | Path,
    *,
    root_dir: str | Path | None = None,
    config: CompilerConfig | None = None,
    encoding: str = "utf-8",
) -> CompileResult:
    """Compile a dictionary file, resolving `mod` declarations on disk.

    Args:
        path: Root dictionary file
        root_dir: Resolver root (default: the file's directory). The file
            must live inside it.
        config: Compiler configuration
        encoding: Text encoding of the root file and its modules

    Raises:
        OSError: If the root file cannot be read
        ValueError: If the file is outside root_dir
        DictSyntaxError, DictCheckError, GenerationError: As compile_source()
    """
    config = config or CompilerConfig()
    path = Path(path)
    root = Path(root_dir) if root_dir is not None else path.parent
    try:
        relative = path.parent.resolve().relative_to(root.resolve())
    except ValueError as exc:
        msg = f"Dictionary file {path} is not inside root directory {root}"
        raise ValueError(msg) from exc

    text = path.read_text(encoding=encoding)
    parser = DictParser(PathModuleResolver(root, encoding=encoding), config=config)
    dictionary = parser.parse_source(
        text,
        str(path),
        path,
        base_dir=PurePosixPath(relative.as_posix()),
        key=str(path.resolve()),
    )
    return _finish(dictionary, config, path.name)


def _finish(dictionary: Dict, config: CompilerConfig, name: str) -> CompileResult:
    check_result = check(dictionary)
    for warning in check_result.warnings:
        logger.debug("%s: %s", name, warning.message)
    generated = generate(dictionary, check_result, config=config, source_name=name)
    logger.debug(
        "Compiled %s: %d units, %d warnings",
        name,
        generated.unit_count,
        check_result.warning_count,
    )
    return CompileResult(dictionary=dictionary, check_result=check_result, generated=generated)


def _load(result: CompileResult, filename: str, module_name: str | None) -> types.ModuleType:
    """Execute generated source as a new module.

    The module stays registered in sys.modules: dataclasses look string
    annotations up through the defining module, and pickle finds locales
    there. Without an explicit `module_name` each load gets its own name,
    derived from the module object, so earlier loads stay importable. An
    explicit name replaces whatever was registered under it.
    """
    code = compile(result.source, filename, "exec")
    module = types.ModuleType(_DEFAULT_MODULE_PREFIX)
    if module_name is None:
        module_name = f"{_DEFAULT_MODULE_PREFIX}_{id(module):x}"
    module.__name__ = module_name
    module.__file__ = filename
    sys.modules[module_name] = module
    try:
        exec(code, module.__dict__)  # noqa: S102
    except Exception:
        del sys.modules[module_name]
        raise
    return module


def load_source(
    source: str,
    *,
    name: str = "<string>",
    resolver: ModuleResolver | None = None,
    config: CompilerConfig | None = None,
    module_name: str | None = None,
) -> types.ModuleType:
    """Compile dictionary source and load the generated module.

    Returns:
        Module exposing `Locale`, the region enums, `Dict` and `new`
    """
    result = compile_source(source, name=name, resolver=resolver, config=config)
    return _load(result, f"<lexidict:{name}>", module_name)


def load_dictionary(
    path: str | Path,
    *,
    root_dir: str | Path | None = None,
    config: CompilerConfig | None = None,
    module_name: str | None = None,
) -> types.ModuleType:
    """Compile a dictionary file and load the generated module."""
    result = compile_file(path, root_dir=root_dir, config=config)
    return _load(result, f"<lexidict:{path}>", module_name)

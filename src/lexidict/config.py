"""Compiler configuration.

Provides a single frozen dataclass holding the knobs of one compilation:
input limits, module nesting depth, the missing-translation marker and
header emission.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass

from lexidict.constants import MAX_DEPTH, MAX_SOURCE_SIZE, MISSING_TRANSLATION

__all__ = ["CompilerConfig"]


@dataclass(frozen=True, slots=True)
class CompilerConfig:
    """Immutable configuration for dictionary compilation.

    All fields have sensible defaults; ``CompilerConfig()`` is usable as is.

    Attributes:
        max_source_size: Maximum characters per dictionary source, applied
            to the root source and every module file (default: 10 MB).
        max_module_depth: Maximum nesting of ``mod name;`` declarations
            (default: 64).
        missing_translation: Value returned by generated code for locales a
            unit does not cover (default: ``"<missing translation>"``).
        emit_header: Emit a "generated by lexidict" comment at the top of
            generated modules (default: True).

    Example:
        >>> config = CompilerConfig(missing_translation="???")
        >>> compile_source(source, config=config).source
    """

    max_source_size: int = MAX_SOURCE_SIZE
    max_module_depth: int = MAX_DEPTH
    missing_translation: str = MISSING_TRANSLATION
    emit_header: bool = True

    def __post_init__(self) -> None:
        """Validate configuration values at construction time.

        Raises:
            ValueError: If max_source_size or max_module_depth is not
                positive.
        """
        if self.max_source_size <= 0:
            msg = "max_source_size must be positive"
            raise ValueError(msg)
        if self.max_module_depth <= 0:
            msg = "max_module_depth must be positive"
            raise ValueError(msg)

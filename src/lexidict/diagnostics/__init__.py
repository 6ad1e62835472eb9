"""Diagnostic system for dictionary compilation errors.

Provides structured error diagnostics with codes, spans, hints and the
translation unit they refer to. Inspired by Rust compiler diagnostics.

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode, ErrorCategory, SourceSpan
from .errors import (
    DictCheckError,
    DictSyntaxError,
    GenerationError,
    LexiError,
    ModuleResolutionError,
    TemplateError,
)
from .formatter import DiagnosticFormatter, OutputFormat
from .templates import ErrorTemplate, Located

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
    "DiagnosticFormatter",
    "DictCheckError",
    "DictSyntaxError",
    "ErrorCategory",
    "ErrorTemplate",
    "GenerationError",
    "LexiError",
    "Located",
    "ModuleResolutionError",
    "OutputFormat",
    "SourceSpan",
    "TemplateError",
]

"""Diagnostic codes and data structures.

Defines error codes, source spans, and diagnostic messages.
Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass
from enum import Enum, StrEnum
from typing import Literal

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
    "ErrorCategory",
    "SourceSpan",
]


class ErrorCategory(StrEnum):
    """Pipeline stage that produced a diagnostic.

    Categories:
        SYNTAX: Lexing and parsing of dictionary sources
        MODULE: Resolution of `mod name;` declarations
        CHECK: Exhaustiveness and consistency checks
        TEMPLATE: String body placeholder compilation
        GENERATION: Lowering the AST into Python source
    """

    SYNTAX = "syntax"
    MODULE = "module"
    CHECK = "check"
    TEMPLATE = "template"
    GENERATION = "generation"


class DiagnosticCode(Enum):
    """Error codes with unique identifiers.

    Organized by category:
        1000-1999: Syntax errors (lexer and parser failures)
        2000-2999: Module resolution errors
        3000-3099: Check errors (semantic validation)
        3100-3199: Check warnings
        4000-4999: Template errors
        5000-5999: Generation errors
    """

    # Syntax errors (1000-1999)
    UNEXPECTED_EOF = 1001
    UNEXPECTED_TOKEN = 1002
    UNKNOWN_ITEM_KEYWORD = 1003
    UNTERMINATED_STRING = 1004
    UNBALANCED_DELIMITER = 1005
    INVALID_CHARACTER = 1006
    INVALID_STRING_LITERAL = 1007
    DUPLICATE_LOCALE_NAME = 1008
    SOURCE_TOO_LARGE = 1009

    # Module resolution errors (2000-2999)
    MODULE_NOT_FOUND = 2001
    AMBIGUOUS_MODULE = 2002
    MODULE_IO_ERROR = 2003
    CYCLIC_MODULE = 2004
    MODULE_DEPTH_EXCEEDED = 2005

    # Check errors (3000-3099)
    UNREACHABLE_PATTERN = 3001
    UNKNOWN_LANGUAGE = 3002
    LANGUAGE_HAS_NO_REGIONS = 3003
    TYPED_UNIT_REQUIRES_RAW_BODY = 3004
    MISSING_FALLBACK_FOR_TYPED_UNIT = 3005
    DUPLICATE_ITEM = 3006
    DUPLICATE_PARAMETER = 3007
    INVALID_NAME = 3008

    # Check warnings (3100-3199)
    MISSING_TRANSLATION = 3101
    SUSPICIOUS_BINDING = 3102

    # Template errors (4000-4999)
    UNTERMINATED_PLACEHOLDER = 4001
    INVALID_PLACEHOLDER_EXPRESSION = 4002

    # Generation errors (5000-5999)
    INVALID_RAW_BODY = 5001
    TEMPLATE_FAILED = 5002


@dataclass(frozen=True, slots=True)
class SourceSpan:
    """Source code location for error reporting.

    Note:
        Python strings measure positions in characters (Unicode code points),
        not bytes.

    Attributes:
        start: Starting character offset (0-indexed)
        end: Ending character offset (exclusive)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """

    start: int
    end: int
    line: int
    column: int

    def __post_init__(self) -> None:
        """Validate SourceSpan invariants.

        Raises:
            ValueError: If start is negative, end precedes start, or line or
                column is less than 1.
        """
        if self.start < 0:
            msg = f"SourceSpan.start must be >= 0, got {self.start}"
            raise ValueError(msg)
        if self.end < self.start:
            msg = f"SourceSpan.end ({self.end}) must be >= start ({self.start})"
            raise ValueError(msg)
        if self.line < 1:
            msg = f"SourceSpan.line must be >= 1 (1-indexed), got {self.line}"
            raise ValueError(msg)
        if self.column < 1:
            msg = f"SourceSpan.column must be >= 1 (1-indexed), got {self.column}"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Structured diagnostic message.

    Inspired by Rust compiler diagnostics. Provides rich error information
    for both humans and tools.

    Attributes:
        code: Unique error code
        message: Human-readable error description
        span: Source location (None for synthesized or positionless errors)
        hint: Suggestion for fixing the error
        source_name: Name of the dictionary source (file path or label)
        severity: Error severity level
        unit: Qualified translation unit name the diagnostic refers to
    """

    code: DiagnosticCode
    message: str
    span: SourceSpan | None = None
    hint: str | None = None
    source_name: str | None = None
    severity: Literal["error", "warning"] = "error"
    unit: str | None = None

    def __str__(self) -> str:
        """Return human-readable error description."""
        return self.message

    @property
    def category(self) -> ErrorCategory:
        """Pipeline stage derived from the code's numeric range."""
        match self.code.value // 1000:
            case 1:
                return ErrorCategory.SYNTAX
            case 2:
                return ErrorCategory.MODULE
            case 3:
                return ErrorCategory.CHECK
            case 4:
                return ErrorCategory.TEMPLATE
            case _:
                return ErrorCategory.GENERATION

    def format_error(self) -> str:
        """Format diagnostic like Rust compiler.

        Example output:
            error[UNREACHABLE_PATTERN]: Unreachable pattern 'En' in unit 'greet'
              --> dict.lexi:5:9
              = help: Remove the arm or move it before the pattern that covers it

        Returns:
            Formatted error message
        """
        from .formatter import DiagnosticFormatter  # noqa: PLC0415 - circular

        return DiagnosticFormatter().format(self)

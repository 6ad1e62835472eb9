"""lexidict exception hierarchy with structured diagnostics.

All exceptions store Diagnostic objects for rich error information.
Every pipeline stage fails fast: the first error aborts compilation.

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic


class LexiError(Exception):
    """Base exception for all lexidict errors.

    Attributes:
        diagnostic: Structured diagnostic information (optional)
    """

    def __init__(self, message: str | Diagnostic) -> None:
        """Initialize LexiError.

        Args:
            message: Error message string OR Diagnostic object
        """
        if isinstance(message, Diagnostic):
            self.diagnostic: Diagnostic | None = message
            super().__init__(message.format_error())
        else:
            self.diagnostic = None
            super().__init__(message)


class DictSyntaxError(LexiError):
    """Malformed dictionary source.

    Raised by the lexer (unterminated strings, unbalanced delimiters) and by
    the parser (unexpected token, unexpected end of input, unknown item
    keyword, duplicate locale names).
    """


class ModuleResolutionError(DictSyntaxError):
    """A `mod name;` declaration could not be resolved.

    Examples:
    - Neither `name.lexi` nor `name/__init__.lexi` exists
    - Both exist (ambiguous)
    - The module file cannot be read
    - The module tree is cyclic or too deep
    """


class DictCheckError(LexiError):
    """Semantic error found by the checker.

    Examples:
    - Unreachable pattern
    - Region pattern on an undeclared language
    - Typed unit with a string body or without full coverage
    """


class TemplateError(LexiError):
    """String body placeholder could not be compiled.

    Raised for unterminated placeholders while scanning, and for placeholder
    contents that are not Python expressions (detected at generation time).
    """


class GenerationError(LexiError):
    """Code generation failed.

    Wraps deferred errors such as a TemplateError raised while lowering a
    string body, or a raw body that is not valid Python. The original error
    is chained as ``__cause__``.
    """

"""Error message templates.

Centralized error message templates for testable, consistent error messages.
Python 3.13+. Zero external dependencies.
"""

from collections.abc import Sequence
from typing import Protocol

from .codes import Diagnostic, DiagnosticCode, SourceSpan

__all__ = ["ErrorTemplate", "Located"]


class Located(Protocol):
    """Anything that can point at a place in a dictionary source.

    Implemented by ``lexidict.syntax.tokens.Span``. Kept as a protocol so the
    diagnostics package does not import the syntax package.
    """

    @property
    def source_span(self) -> SourceSpan | None: ...

    @property
    def source_name(self) -> str | None: ...


def _quote_all(items: Sequence[str]) -> str:
    return ", ".join(f"'{item}'" for item in items)


class ErrorTemplate:
    """Centralized error message templates.

    All error messages are created here. NO f-strings in exception constructors!
    Each method returns a Diagnostic; callers wrap it in the matching
    exception type.
    """

    @staticmethod
    def _make(
        code: DiagnosticCode,
        message: str,
        at: Located | None,
        *,
        hint: str | None = None,
        unit: str | None = None,
        warning: bool = False,
    ) -> Diagnostic:
        return Diagnostic(
            code=code,
            message=message,
            span=at.source_span if at is not None else None,
            hint=hint,
            source_name=at.source_name if at is not None else None,
            severity="warning" if warning else "error",
            unit=unit,
        )

    # ------------------------------------------------------------------
    # Syntax
    # ------------------------------------------------------------------

    @staticmethod
    def unexpected_eof(at: Located | None, expected: str | None = None) -> Diagnostic:
        """Input ended while more tokens were required.

        Args:
            at: Position where the input (or enclosing group) ended
            expected: Description of what was expected next

        Returns:
            Diagnostic for UNEXPECTED_EOF
        """
        msg = "Unexpected end of input"
        if expected is not None:
            msg = f"{msg}, expected {expected}"
        return ErrorTemplate._make(DiagnosticCode.UNEXPECTED_EOF, msg, at)

    @staticmethod
    def unexpected_token(expected: str, found: str, at: Located | None) -> Diagnostic:
        """Token did not have the expected shape.

        Args:
            expected: Description of the expected token
            found: Rendering of the token actually found
            at: Span of the offending token

        Returns:
            Diagnostic for UNEXPECTED_TOKEN
        """
        msg = f"Expected {expected}, found '{found}'"
        return ErrorTemplate._make(DiagnosticCode.UNEXPECTED_TOKEN, msg, at)

    @staticmethod
    def unknown_item_keyword(found: str, at: Located | None) -> Diagnostic:
        """Item did not start with `unit` or `mod`."""
        msg = f"Expected item ('unit' or 'mod'), found identifier '{found}'"
        return ErrorTemplate._make(
            DiagnosticCode.UNKNOWN_ITEM_KEYWORD,
            msg,
            at,
            hint="Translation units start with 'unit', modules with 'mod'",
        )

    @staticmethod
    def unterminated_string(at: Located | None) -> Diagnostic:
        """String literal reached end of line or input without closing quote."""
        return ErrorTemplate._make(
            DiagnosticCode.UNTERMINATED_STRING, "Unterminated string literal", at
        )

    @staticmethod
    def unbalanced_delimiter(
        found: str, expected: str | None, at: Located | None
    ) -> Diagnostic:
        """Closing delimiter without matching opener, or opener never closed.

        Args:
            found: The delimiter character found (or 'end of input')
            expected: The closing delimiter that was expected, if any
            at: Span of the offending delimiter

        Returns:
            Diagnostic for UNBALANCED_DELIMITER
        """
        if expected is None:
            msg = f"Unexpected closing delimiter '{found}'"
        else:
            msg = f"Expected closing delimiter '{expected}', found '{found}'"
        return ErrorTemplate._make(DiagnosticCode.UNBALANCED_DELIMITER, msg, at)

    @staticmethod
    def invalid_character(char: str, at: Located | None) -> Diagnostic:
        """Character that cannot start any token."""
        msg = f"Invalid character {char!r}"
        return ErrorTemplate._make(DiagnosticCode.INVALID_CHARACTER, msg, at)

    @staticmethod
    def invalid_string_literal(text: str, at: Located | None) -> Diagnostic:
        """Literal used as a string body is not a plain string literal."""
        msg = f"Expected string literal, found {text}"
        return ErrorTemplate._make(
            DiagnosticCode.INVALID_STRING_LITERAL,
            msg,
            at,
            hint="String bodies are plain string literals; use a '{ ... }' body for code",
        )

    @staticmethod
    def duplicate_locale_name(kind: str, name: str, at: Located | None) -> Diagnostic:
        """Language or region declared twice in the locale block.

        Args:
            kind: 'language' or 'region'
            name: The duplicated name
            at: Span of the second declaration

        Returns:
            Diagnostic for DUPLICATE_LOCALE_NAME
        """
        msg = f"Duplicate {kind} '{name}' in locale definition"
        return ErrorTemplate._make(DiagnosticCode.DUPLICATE_LOCALE_NAME, msg, at)

    @staticmethod
    def source_too_large(size: int, limit: int, source_name: str | None) -> Diagnostic:
        """Dictionary source exceeds the configured size limit."""
        msg = f"Source size ({size:,} characters) exceeds maximum ({limit:,} characters)"
        return Diagnostic(
            code=DiagnosticCode.SOURCE_TOO_LARGE,
            message=msg,
            hint="Configure max_source_size in CompilerConfig to increase the limit",
            source_name=source_name,
        )

    # ------------------------------------------------------------------
    # Modules
    # ------------------------------------------------------------------

    @staticmethod
    def module_not_found(
        name: str, candidates: Sequence[str], at: Located | None
    ) -> Diagnostic:
        """None of the conventional module locations exists."""
        msg = f"Cannot find module '{name}': none of {_quote_all(candidates)} exists"
        return ErrorTemplate._make(DiagnosticCode.MODULE_NOT_FOUND, msg, at)

    @staticmethod
    def ambiguous_module(
        name: str, candidates: Sequence[str], at: Located | None
    ) -> Diagnostic:
        """More than one conventional module location exists."""
        msg = f"Ambiguous module '{name}': both {_quote_all(candidates)} exist"
        return ErrorTemplate._make(
            DiagnosticCode.AMBIGUOUS_MODULE,
            msg,
            at,
            hint="Remove one of the two module files",
        )

    @staticmethod
    def module_io_error(name: str, path: str, reason: str, at: Located | None) -> Diagnostic:
        """Module file exists but cannot be read."""
        msg = f"Error reading module '{name}' from '{path}': {reason}"
        return ErrorTemplate._make(DiagnosticCode.MODULE_IO_ERROR, msg, at)

    @staticmethod
    def cyclic_module(name: str, path: str, at: Located | None) -> Diagnostic:
        """Module resolves to a source that is already being parsed."""
        msg = f"Module '{name}' includes itself through '{path}'"
        return ErrorTemplate._make(DiagnosticCode.CYCLIC_MODULE, msg, at)

    @staticmethod
    def module_depth_exceeded(max_depth: int) -> Diagnostic:
        """Module nesting exceeds the configured depth."""
        msg = f"Maximum module nesting depth ({max_depth}) exceeded"
        return Diagnostic(
            code=DiagnosticCode.MODULE_DEPTH_EXCEEDED,
            message=msg,
            hint="Check the module resolver for cycles or reduce nesting",
        )

    # ------------------------------------------------------------------
    # Checker
    # ------------------------------------------------------------------

    @staticmethod
    def unreachable_pattern(pattern: str, unit: str, at: Located | None) -> Diagnostic:
        """Arm pattern is fully covered by earlier arms."""
        msg = f"Unreachable pattern '{pattern}' in unit '{unit}'"
        return ErrorTemplate._make(
            DiagnosticCode.UNREACHABLE_PATTERN,
            msg,
            at,
            hint="Remove the arm or move it before the pattern that covers it",
            unit=unit,
        )

    @staticmethod
    def unknown_language(lang: str, unit: str, at: Located | None) -> Diagnostic:
        """Region pattern names a language missing from the locale block."""
        msg = f"'{lang}' is not a declared language (in unit '{unit}')"
        return ErrorTemplate._make(
            DiagnosticCode.UNKNOWN_LANGUAGE,
            msg,
            at,
            hint="Declare the language in 'enum Locale { ... }'",
            unit=unit,
        )

    @staticmethod
    def language_has_no_regions(lang: str, unit: str, at: Located | None) -> Diagnostic:
        """Region pattern used on a language declared without regions."""
        msg = f"Language '{lang}' has no regions (in unit '{unit}')"
        return ErrorTemplate._make(
            DiagnosticCode.LANGUAGE_HAS_NO_REGIONS,
            msg,
            at,
            hint=f"Match '{lang}' without a region",
            unit=unit,
        )

    @staticmethod
    def typed_unit_requires_raw_body(
        unit: str, pattern: str, at: Located | None
    ) -> Diagnostic:
        """Unit declares a return type but an arm has a string body."""
        msg = (
            f"Translation unit '{unit}' has a custom return type, "
            f"but its arm '{pattern}' doesn't have a raw body (required)"
        )
        return ErrorTemplate._make(
            DiagnosticCode.TYPED_UNIT_REQUIRES_RAW_BODY,
            msg,
            at,
            hint="String bodies always produce 'str'; use a '{ ... }' body",
            unit=unit,
        )

    @staticmethod
    def missing_fallback_for_typed_unit(unit: str, at: Located | None) -> Diagnostic:
        """Typed unit does not cover every locale."""
        msg = f"Translation unit '{unit}' has a custom return type but does not cover every locale"
        return ErrorTemplate._make(
            DiagnosticCode.MISSING_FALLBACK_FOR_TYPED_UNIT,
            msg,
            at,
            hint="Add the missing arms or a '_' arm; typed units get no fallback value",
            unit=unit,
        )

    @staticmethod
    def duplicate_item(kind: str, name: str, at: Located | None) -> Diagnostic:
        """Two units or modules share a name within one scope."""
        msg = f"Duplicate {kind} '{name}'"
        return ErrorTemplate._make(DiagnosticCode.DUPLICATE_ITEM, msg, at)

    @staticmethod
    def duplicate_parameter(name: str, unit: str, at: Located | None) -> Diagnostic:
        """Parameter name repeated within one unit."""
        msg = f"Duplicate parameter '{name}' in unit '{unit}'"
        return ErrorTemplate._make(DiagnosticCode.DUPLICATE_PARAMETER, msg, at, unit=unit)

    @staticmethod
    def invalid_name(kind: str, name: str, reason: str, at: Located | None) -> Diagnostic:
        """Name cannot be used in generated Python code."""
        msg = f"Invalid {kind} name '{name}': {reason}"
        return ErrorTemplate._make(DiagnosticCode.INVALID_NAME, msg, at)

    @staticmethod
    def missing_translation(unit: str, at: Located | None) -> Diagnostic:
        """Unit does not cover every locale (warning)."""
        msg = f"Translation unit '{unit}' does not cover every locale"
        return ErrorTemplate._make(
            DiagnosticCode.MISSING_TRANSLATION,
            msg,
            at,
            hint="Uncovered locales return the missing-translation marker",
            unit=unit,
            warning=True,
        )

    @staticmethod
    def suspicious_binding(name: str, unit: str, at: Located | None) -> Diagnostic:
        """Capitalized binding pattern that is probably a misspelled language (warning)."""
        msg = f"Pattern '{name}' in unit '{unit}' is not a declared language and binds the locale"
        return ErrorTemplate._make(
            DiagnosticCode.SUSPICIOUS_BINDING,
            msg,
            at,
            hint="Check the spelling or declare the language",
            unit=unit,
            warning=True,
        )

    # ------------------------------------------------------------------
    # Templates
    # ------------------------------------------------------------------

    @staticmethod
    def unterminated_placeholder(text: str, at: Located | None) -> Diagnostic:
        """String body ends inside a `{...}` placeholder."""
        msg = f"Unterminated placeholder in string {text!r}"
        return ErrorTemplate._make(
            DiagnosticCode.UNTERMINATED_PLACEHOLDER,
            msg,
            at,
            hint="Close the placeholder with '}' or write '{{' for a literal brace",
        )

    @staticmethod
    def invalid_placeholder_expression(
        expression: str, reason: str, at: Located | None
    ) -> Diagnostic:
        """Placeholder content is not a Python expression."""
        msg = f"Not a valid Python expression in placeholder {{{expression}}}: {reason}"
        return ErrorTemplate._make(DiagnosticCode.INVALID_PLACEHOLDER_EXPRESSION, msg, at)

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    @staticmethod
    def invalid_raw_body(unit: str, reason: str, at: Located | None) -> Diagnostic:
        """Raw body is neither a Python expression nor a statement block."""
        msg = f"Raw body in unit '{unit}' is not valid Python: {reason}"
        return ErrorTemplate._make(DiagnosticCode.INVALID_RAW_BODY, msg, at, unit=unit)

    @staticmethod
    def template_failed(unit: str, cause: Diagnostic) -> Diagnostic:
        """String body of a unit could not be lowered."""
        msg = f"Cannot generate unit '{unit}': {cause.message}"
        return Diagnostic(
            code=DiagnosticCode.TEMPLATE_FAILED,
            message=msg,
            span=cause.span,
            hint=cause.hint,
            source_name=cause.source_name,
            unit=unit,
        )

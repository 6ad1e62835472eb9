"""Diagnostic formatting service.

Centralizes diagnostic output formatting with configurable options.
Python 3.13+. Zero external dependencies.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum

from .codes import Diagnostic

__all__ = [
    "DiagnosticFormatter",
    "OutputFormat",
]


class OutputFormat(StrEnum):
    """Output format options for diagnostic formatting."""

    RUST = "rust"  # Rust compiler-style output (default)
    SIMPLE = "simple"  # Single-line format
    JSON = "json"  # JSON format for tooling integration


@dataclass(frozen=True, slots=True)
class DiagnosticFormatter:
    """Diagnostic formatting service.

    Attributes:
        output_format: Output style (rust, simple, json)
        color: Enable ANSI color codes (for terminal output)

    Example:
        >>> formatter = DiagnosticFormatter()
        >>> print(formatter.format(diagnostic))
        error[UNKNOWN_LANGUAGE]: 'Fr' is not a declared language (in unit 'greet')
          --> app.lexi:7:9
          = help: Declare the language in 'enum Locale { ... }'

        >>> formatter = DiagnosticFormatter(output_format=OutputFormat.SIMPLE)
        >>> print(formatter.format(diagnostic))
        app.lexi:7:9: UNKNOWN_LANGUAGE: 'Fr' is not a declared language (in unit 'greet')
    """

    output_format: OutputFormat = OutputFormat.RUST
    color: bool = False

    def format(self, diagnostic: Diagnostic) -> str:
        """Format a single diagnostic.

        Args:
            diagnostic: Diagnostic to format

        Returns:
            Formatted diagnostic string
        """
        match self.output_format:
            case OutputFormat.RUST:
                return self._format_rust(diagnostic)
            case OutputFormat.SIMPLE:
                return self._format_simple(diagnostic)
            case OutputFormat.JSON:
                return self._format_json(diagnostic)

    def format_all(self, diagnostics: Iterable[Diagnostic]) -> str:
        """Format multiple diagnostics separated by blank lines."""
        return "\n\n".join(self.format(d) for d in diagnostics)

    @staticmethod
    def _location(diagnostic: Diagnostic) -> str | None:
        """Render `name:line:column`, or whichever part is known."""
        span = diagnostic.span
        name = diagnostic.source_name
        if span is not None and name is not None:
            return f"{name}:{span.line}:{span.column}"
        if span is not None:
            return f"line {span.line}, column {span.column}"
        return name

    def _format_rust(self, diagnostic: Diagnostic) -> str:
        severity = diagnostic.severity

        if self.color:
            if severity == "error":
                severity_str = f"\033[1;31m{severity}\033[0m"  # Bold red
            else:
                severity_str = f"\033[1;33m{severity}\033[0m"  # Bold yellow
        else:
            severity_str = severity

        parts = [f"{severity_str}[{diagnostic.code.name}]: {diagnostic.message}"]

        location = self._location(diagnostic)
        if location is not None:
            parts.append(f"  --> {location}")

        if diagnostic.unit:
            parts.append(f"  = unit: {diagnostic.unit}")

        if diagnostic.hint:
            parts.append(f"  = help: {diagnostic.hint}")

        return "\n".join(parts)

    def _format_simple(self, diagnostic: Diagnostic) -> str:
        line = f"{diagnostic.code.name}: {diagnostic.message}"
        location = self._location(diagnostic)
        if location is not None:
            return f"{location}: {line}"
        return line

    def _format_json(self, diagnostic: Diagnostic) -> str:
        """Format diagnostic as JSON.

        Example output:
            {"code": "CYCLIC_MODULE", "code_value": 2004, "message": "...", ...}
        """
        import json  # noqa: PLC0415

        data: dict[str, str | int | None] = {
            "code": diagnostic.code.name,
            "code_value": diagnostic.code.value,
            "category": diagnostic.category.value,
            "message": diagnostic.message,
            "severity": diagnostic.severity,
        }

        if diagnostic.source_name:
            data["source"] = diagnostic.source_name

        if diagnostic.span:
            data["line"] = diagnostic.span.line
            data["column"] = diagnostic.span.column
            data["start"] = diagnostic.span.start
            data["end"] = diagnostic.span.end

        if diagnostic.unit:
            data["unit"] = diagnostic.unit

        if diagnostic.hint:
            data["hint"] = diagnostic.hint

        return json.dumps(data, ensure_ascii=False)

"""Dictionary source lexer.

Turns source text into a TokenStream of nested token trees. The lexer
knows just enough Python lexical structure (string literals with prefixes
and triple quotes, `#` comments) that braces inside raw Python bodies and
string templates never unbalance a group.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import PurePath

from lexidict.diagnostics import DictSyntaxError, ErrorTemplate

from .cursor import Cursor
from .tokens import (
    Delimiter,
    Group,
    Ident,
    Literal,
    Punct,
    SourceFile,
    Spacing,
    Span,
    TokenStream,
    TokenTree,
)

__all__ = ["Lexer", "tokenize"]

logger = logging.getLogger(__name__)

# Characters lexed as single Punct tokens.
_PUNCT_CHARS: frozenset[str] = frozenset("!$%&*+,-./:;<=>?@^|~\\`")

# Python string prefixes (case-insensitive).
_STRING_PREFIXES: frozenset[str] = frozenset(
    {"r", "u", "b", "br", "rb", "f", "fr", "rf", "t", "tr", "rt"}
)

_QUOTES = ("'", '"')


def _is_ident_continue(char: str) -> bool:
    return ("a" + char).isidentifier()


@dataclass(slots=True)
class _OpenGroup:
    """Group whose closing delimiter has not been seen yet."""

    delimiter: Delimiter
    start: int
    outer: list[TokenTree] = field(default_factory=list)


class Lexer:
    """Single-pass lexer over one SourceFile.

    Example:
        >>> stream = Lexer(SourceFile("unit a { _ => 'x' }")).tokenize()
        >>> [type(t).__name__ for t in stream]
        ['Ident', 'Ident', 'Group']
    """

    __slots__ = ("_source",)

    def __init__(self, source: SourceFile) -> None:
        self._source = source

    def _span(self, start: int, end: int) -> Span:
        return Span(start, end, self._source)

    def tokenize(self) -> TokenStream:
        """Lex the whole source.

        Raises:
            DictSyntaxError: On unterminated strings, unbalanced delimiters
                or characters that cannot start a token
        """
        text = self._source.text
        stack: list[_OpenGroup] = []
        tokens: list[TokenTree] = []
        cursor = Cursor(text, 0)

        while True:
            cursor = self._skip_trivia(cursor)
            if cursor.is_eof:
                break
            char = cursor.current
            start = cursor.pos

            if (delimiter := Delimiter.for_open(char)) is not None:
                stack.append(_OpenGroup(delimiter, start, tokens))
                tokens = []
                cursor = cursor.advance()
                continue

            if (delimiter := Delimiter.for_close(char)) is not None:
                if not stack:
                    raise DictSyntaxError(
                        ErrorTemplate.unbalanced_delimiter(char, None, self._span(start, start + 1))
                    )
                frame = stack.pop()
                if frame.delimiter is not delimiter:
                    raise DictSyntaxError(
                        ErrorTemplate.unbalanced_delimiter(
                            char, frame.delimiter.close, self._span(start, start + 1)
                        )
                    )
                group = Group(
                    delimiter=frame.delimiter,
                    stream=TokenStream(tuple(tokens), self._span(start, start)),
                    span=self._span(frame.start, start + 1),
                )
                tokens = frame.outer
                tokens.append(group)
                cursor = cursor.advance()
                continue

            if char in _QUOTES:
                cursor = self._skip_string(cursor, start)
                tokens.append(Literal(text[start : cursor.pos], self._span(start, cursor.pos)))
                continue

            if char.isdigit() or (char == "." and (cursor.peek(1) or "").isdigit()):
                cursor = self._skip_number(cursor)
                tokens.append(Literal(text[start : cursor.pos], self._span(start, cursor.pos)))
                continue

            if char.isidentifier():
                cursor = cursor.advance().skip_while(_is_ident_continue)
                name = text[start : cursor.pos]
                if name.lower() in _STRING_PREFIXES and not cursor.is_eof and cursor.current in _QUOTES:
                    cursor = self._skip_string(cursor, start)
                    tokens.append(Literal(text[start : cursor.pos], self._span(start, cursor.pos)))
                else:
                    tokens.append(Ident(name, self._span(start, cursor.pos)))
                continue

            if char in _PUNCT_CHARS:
                spacing = Spacing.JOINT if cursor.peek(1) in _PUNCT_CHARS else Spacing.ALONE
                tokens.append(Punct(char, spacing, self._span(start, start + 1)))
                cursor = cursor.advance()
                continue

            raise DictSyntaxError(ErrorTemplate.invalid_character(char, self._span(start, start + 1)))

        if stack:
            frame = stack[-1]
            raise DictSyntaxError(
                ErrorTemplate.unbalanced_delimiter(
                    "end of input",
                    frame.delimiter.close,
                    self._span(frame.start, frame.start + 1),
                )
            )

        logger.debug("Lexed %s: %d top-level tokens", self._source.name, len(tokens))
        return TokenStream(tuple(tokens), self._span(len(text), len(text)))

    @staticmethod
    def _skip_trivia(cursor: Cursor) -> Cursor:
        """Skip whitespace and `#` line comments."""
        while True:
            cursor = cursor.skip_whitespace()
            if cursor.is_eof or cursor.current != "#":
                return cursor
            cursor = cursor.skip_to_line_end()

    def _skip_string(self, cursor: Cursor, start: int) -> Cursor:
        """Advance past a string literal whose opening quote is at cursor.

        Backslash always protects the next character from closing the
        string, raw prefix or not, matching Python's tokenizer.
        """
        quote = cursor.current
        closing = quote * 3 if cursor.slice_ahead(3) == quote * 3 else quote
        cursor = cursor.advance(len(closing))
        while True:
            if cursor.is_eof:
                raise DictSyntaxError(
                    ErrorTemplate.unterminated_string(self._span(start, cursor.pos))
                )
            char = cursor.current
            if char == "\\":
                cursor = cursor.advance(2)
                continue
            if len(closing) == 1 and char in ("\n", "\r"):
                raise DictSyntaxError(
                    ErrorTemplate.unterminated_string(self._span(start, cursor.pos))
                )
            if cursor.slice_ahead(len(closing)) == closing:
                return cursor.advance(len(closing))
            cursor = cursor.advance()

    @staticmethod
    def _skip_number(cursor: Cursor) -> Cursor:
        """Advance past a numeric literal (int, float, complex, any base)."""
        start = cursor.pos
        while not cursor.is_eof:
            char = cursor.current
            if char.isalnum() or char in "._":
                cursor = cursor.advance()
                continue
            # Exponent sign: 1e-3, but not 0xe-3
            previous = cursor.source[cursor.pos - 1]
            is_hex = cursor.source[start : start + 2].lower() == "0x"
            if char in "+-" and previous in "eE" and not is_hex:
                cursor = cursor.advance()
                continue
            break
        return cursor


def tokenize(text: str, name: str = "<string>", path: PurePath | None = None) -> TokenStream:
    """Lex dictionary source text into a TokenStream.

    Args:
        text: Source text
        name: Display name for diagnostics
        path: Filesystem path of the source, if any

    Returns:
        Top-level token stream
    """
    return Lexer(SourceFile(text, name, path)).tokenize()

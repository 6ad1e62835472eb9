"""Token trees and the token cursor.

The lexer turns dictionary source into a tree of tokens: identifiers,
literals, single punctuation characters and delimited groups. Groups nest,
so the parser never has to balance brackets itself.

TokenCursor walks one level of a TokenStream. It is the only way the
parser consumes tokens, and every failure it reports carries the span of
the offending token (or the end of the enclosing group).

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum, StrEnum
from pathlib import PurePath

from lexidict.diagnostics import DictSyntaxError, ErrorTemplate, SourceSpan

from .cursor import LineOffsetCache

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Source positions
    "SourceFile",
    "Span",
    # Tokens
    "Spacing",
    "Delimiter",
    "Ident",
    "Literal",
    "Punct",
    "Group",
    "TokenTree",
    "TokenStream",
    # Consumption
    "TokenCursor",
    "token_text",
]

# ============================================================================
# SOURCE POSITIONS
# ============================================================================


class SourceFile:
    """One dictionary source text and where it came from.

    Line and column numbers are only needed for diagnostics, so the line
    index is built lazily on first use.

    Attributes:
        text: Full source text
        name: Display name used in diagnostics (file path or label)
        path: Filesystem path when the source was read from disk
    """

    __slots__ = ("_lines", "name", "path", "text")

    def __init__(self, text: str, name: str = "<string>", path: PurePath | None = None) -> None:
        self.text = text
        self.name = name
        self.path = path
        self._lines: LineOffsetCache | None = None

    def __repr__(self) -> str:
        return f"SourceFile(name={self.name!r}, length={len(self.text)})"

    def line_col(self, pos: int) -> tuple[int, int]:
        """Return the 1-indexed (line, column) of a character offset."""
        if self._lines is None:
            self._lines = LineOffsetCache(self.text)
        return self._lines.get_line_col(pos)


@dataclass(frozen=True, slots=True)
class Span:
    """Character range in a source file.

    AST nodes exclude their spans from equality, so two ASTs parsed from
    differently formatted sources compare equal when their structure matches.

    Attributes:
        start: Starting character offset (inclusive)
        end: Ending character offset (exclusive)
        source: Source file the offsets refer to (None for synthesized nodes)
    """

    start: int
    end: int
    source: SourceFile | None = field(default=None, repr=False, compare=False)

    def __post_init__(self) -> None:
        """Validate span invariants."""
        if self.start < 0:
            msg = f"Span start must be >= 0, got {self.start}"
            raise ValueError(msg)
        if self.end < self.start:
            msg = f"Span end ({self.end}) must be >= start ({self.start})"
            raise ValueError(msg)

    @property
    def text(self) -> str:
        """Source text covered by the span ('' for synthesized spans)."""
        if self.source is None:
            return ""
        return self.source.text[self.start : self.end]

    @property
    def source_span(self) -> SourceSpan | None:
        """Diagnostic location with line and column."""
        if self.source is None:
            return None
        line, column = self.source.line_col(self.start)
        return SourceSpan(start=self.start, end=self.end, line=line, column=column)

    @property
    def source_name(self) -> str | None:
        """Display name of the source file."""
        return self.source.name if self.source is not None else None

    def to(self, other: Span) -> Span:
        """Span from the start of self to the end of other."""
        return Span(self.start, other.end, self.source)

    def at_end(self) -> Span:
        """Zero-width span at the end of self."""
        return Span(self.end, self.end, self.source)


# ============================================================================
# TOKENS
# ============================================================================


class Spacing(StrEnum):
    """Whether a punctuation character is immediately followed by another.

    `=>` lexes as `=` (JOINT) then `>` (ALONE); `= >` lexes as two ALONE
    characters.
    """

    JOINT = "joint"
    ALONE = "alone"


class Delimiter(Enum):
    """Bracket pair of a token group."""

    PARENTHESIS = ("(", ")")
    BRACE = ("{", "}")
    BRACKET = ("[", "]")

    @property
    def open(self) -> str:
        return self.value[0]

    @property
    def close(self) -> str:
        return self.value[1]

    @classmethod
    def for_open(cls, char: str) -> Delimiter | None:
        """Delimiter opened by char, if any."""
        for delimiter in cls:
            if delimiter.open == char:
                return delimiter
        return None

    @classmethod
    def for_close(cls, char: str) -> Delimiter | None:
        """Delimiter closed by char, if any."""
        for delimiter in cls:
            if delimiter.close == char:
                return delimiter
        return None


@dataclass(frozen=True, slots=True)
class Ident:
    """Identifier or keyword. `_` is an identifier too."""

    name: str
    span: Span


@dataclass(frozen=True, slots=True)
class Literal:
    """String or number literal, kept as its original source text.

    Attributes:
        text: Literal exactly as written, including prefix and quotes
        span: Source location
    """

    text: str
    span: Span

    @property
    def is_string(self) -> bool:
        """True for string literals (any prefix)."""
        return self.text[-1] in ("'", '"')

    @property
    def prefix(self) -> str:
        """Lowercased string prefix ('' for plain strings and numbers)."""
        if not self.is_string:
            return ""
        index = min(i for i in (self.text.find("'"), self.text.find('"')) if i >= 0)
        return self.text[:index].lower()


@dataclass(frozen=True, slots=True)
class Punct:
    """Single punctuation character."""

    char: str
    spacing: Spacing
    span: Span


@dataclass(frozen=True, slots=True)
class Group:
    """Delimited token group.

    Attributes:
        delimiter: Bracket pair
        stream: Tokens between the brackets
        span: Source location including both brackets
    """

    delimiter: Delimiter
    stream: TokenStream
    span: Span

    @property
    def inner_text(self) -> str:
        """Verbatim source between the brackets."""
        if self.span.source is None:
            return ""
        return self.span.source.text[self.span.start + 1 : self.span.end - 1]

    def cursor(self) -> TokenCursor:
        """Independent cursor over the group's contents."""
        return self.stream.cursor()


type TokenTree = Ident | Literal | Punct | Group


@dataclass(frozen=True, slots=True)
class TokenStream:
    """Immutable sequence of token trees.

    Attributes:
        tokens: Token trees in source order
        end: Zero-width span where the stream ends (closing bracket or EOF)
    """

    tokens: tuple[TokenTree, ...]
    end: Span

    def __len__(self) -> int:
        return len(self.tokens)

    def __iter__(self) -> Iterator[TokenTree]:
        return iter(self.tokens)

    @property
    def source(self) -> SourceFile | None:
        return self.end.source

    def cursor(self) -> TokenCursor:
        """Cursor positioned at the first token."""
        return TokenCursor(self)


def token_text(token: TokenTree) -> str:
    """Short rendering of a token for error messages."""
    match token:
        case Ident(name=name):
            return name
        case Literal(text=text):
            return text
        case Punct(char=char):
            return char
        case Group(delimiter=delimiter):
            return delimiter.open


# ============================================================================
# CONSUMPTION
# ============================================================================


class TokenCursor:
    """Mutable position over one level of a TokenStream.

    Consuming a nested group through ``Group.cursor()`` never moves the
    parent cursor.

    Example:
        >>> cursor = tokenize("unit greet { _ => 'hi' }").cursor()
        >>> cursor.expect_keyword("unit").name
        'unit'
        >>> cursor.expect_ident().name
        'greet'
        >>> body = cursor.expect_group(Delimiter.BRACE).cursor()
    """

    __slots__ = ("_pos", "_stream")

    def __init__(self, stream: TokenStream) -> None:
        self._stream = stream
        self._pos = 0

    @property
    def position(self) -> int:
        """Index of the next token in the stream."""
        return self._pos

    def at_end(self) -> bool:
        """True when every token of this level has been consumed."""
        return self._pos >= len(self._stream.tokens)

    def end_span(self) -> Span:
        """Zero-width span where this level ends."""
        return self._stream.end

    def lookahead(self, offset: int = 0) -> TokenTree | None:
        """Token `offset` places ahead, or None past the end. Never raises."""
        index = self._pos + offset
        if index >= len(self._stream.tokens):
            return None
        return self._stream.tokens[index]

    def peek(self, expected: str | None = None) -> TokenTree:
        """Next token without consuming it.

        Raises:
            DictSyntaxError: UNEXPECTED_EOF at the end of this level
        """
        token = self.lookahead()
        if token is None:
            raise DictSyntaxError(ErrorTemplate.unexpected_eof(self._stream.end, expected))
        return token

    def next(self, expected: str | None = None) -> TokenTree:
        """Consume and return the next token.

        Raises:
            DictSyntaxError: UNEXPECTED_EOF at the end of this level
        """
        token = self.peek(expected)
        self._pos += 1
        return token

    def _mismatch(self, expected: str, token: TokenTree) -> DictSyntaxError:
        return DictSyntaxError(
            ErrorTemplate.unexpected_token(expected, token_text(token), token.span)
        )

    def expect_ident(self, expected: str = "identifier") -> Ident:
        """Consume an identifier."""
        token = self.next(expected)
        if not isinstance(token, Ident):
            raise self._mismatch(expected, token)
        return token

    def expect_keyword(self, word: str) -> Ident:
        """Consume the identifier `word`."""
        expected = f"'{word}'"
        token = self.next(expected)
        if not isinstance(token, Ident) or token.name != word:
            raise self._mismatch(expected, token)
        return token

    def expect_group(self, delimiter: Delimiter) -> Group:
        """Consume a group with the given delimiter."""
        expected = f"'{delimiter.open}'"
        token = self.next(expected)
        if not isinstance(token, Group) or token.delimiter is not delimiter:
            raise self._mismatch(expected, token)
        return token

    def expect_punct(self, char: str) -> Punct:
        """Consume the punctuation character `char`, whatever its spacing."""
        expected = f"'{char}'"
        token = self.next(expected)
        if not isinstance(token, Punct) or token.char != char:
            raise self._mismatch(expected, token)
        return token

    def expect_punct_sequence(self, sequence: str) -> Span:
        """Consume a multi-character operator such as `=>` or `->`.

        Every character but the last must be JOINT, so `= >` is rejected
        with "expected '=>', found '='".

        Returns:
            Span covering the whole operator
        """
        expected = f"'{sequence}'"
        puncts: list[Punct] = []
        for index, char in enumerate(sequence):
            token = self.next(expected)
            if not isinstance(token, Punct) or token.char != char:
                raise self._mismatch(expected, token)
            if index < len(sequence) - 1 and token.spacing is not Spacing.JOINT:
                raise self._mismatch(expected, token)
            puncts.append(token)
        return puncts[0].span.to(puncts[-1].span)

    def eat_punct(self, char: str) -> Punct | None:
        """Consume `char` if it is next; otherwise leave the cursor alone."""
        token = self.lookahead()
        if isinstance(token, Punct) and token.char == char:
            self._pos += 1
            return token
        return None

    def peek_punct_sequence(self, sequence: str) -> bool:
        """True if the next tokens spell the joint operator `sequence`."""
        for index, char in enumerate(sequence):
            token = self.lookahead(index)
            if not isinstance(token, Punct) or token.char != char:
                return False
            if index < len(sequence) - 1 and token.spacing is not Spacing.JOINT:
                return False
        return True

    def expect_literal(self, expected: str = "literal") -> Literal:
        """Consume a string or number literal."""
        token = self.next(expected)
        if not isinstance(token, Literal):
            raise self._mismatch(expected, token)
        return token

    def expect_end(self, expected: str = "end of group") -> None:
        """Require that this level has no tokens left."""
        token = self.lookahead()
        if token is not None:
            raise self._mismatch(expected, token)

"""Lexer and token cursor tests.

Tests:
- Token kinds: identifiers, string and number literals, punctuation spacing
- Groups: nesting, inner text, independent cursors
- Lexer errors: unterminated strings, unbalanced delimiters, invalid characters
- TokenCursor contract: peek/next at end, expect_* mismatches, `=>` joint handling
"""

import pytest

from lexidict.diagnostics import DiagnosticCode, DictSyntaxError
from lexidict.syntax import (
    Delimiter,
    Group,
    Ident,
    Literal,
    Punct,
    SourceFile,
    Spacing,
    Span,
    tokenize,
)
from lexidict.syntax.tokens import token_text

# =============================================================================
# TOKEN KINDS
# =============================================================================


class TestTokenKinds:
    """Each lexical class becomes the right token type."""

    def test_identifiers_and_group(self) -> None:
        stream = tokenize("unit greet { }")
        tokens = list(stream)
        assert [type(t) for t in tokens] == [Ident, Ident, Group]
        assert tokens[0].name == "unit"  # type: ignore[union-attr]
        assert tokens[1].name == "greet"  # type: ignore[union-attr]

    def test_unicode_identifier(self) -> None:
        (token,) = tokenize("größe")
        assert isinstance(token, Ident)
        assert token.name == "größe"

    @pytest.mark.parametrize(
        ("source", "prefix"),
        [
            ("'plain'", ""),
            ('"double"', ""),
            ("r'raw\\d'", "r"),
            ("u'text'", "u"),
            ("f'{x}'", "f"),
            ("Rb'bytes'", "rb"),
            ("'''triple\nquoted'''", ""),
        ],
    )
    def test_string_literals(self, source: str, prefix: str) -> None:
        (token,) = tokenize(source)
        assert isinstance(token, Literal)
        assert token.is_string
        assert token.prefix == prefix
        assert token.text == source

    def test_escaped_quote_does_not_close_string(self) -> None:
        (token,) = tokenize(r"'it\'s'")
        assert isinstance(token, Literal)
        assert token.text == r"'it\'s'"

    @pytest.mark.parametrize("source", ["42", "3.14", "1e-3", "0x1F", "1_000", ".5", "2j"])
    def test_number_literals(self, source: str) -> None:
        (token,) = tokenize(source)
        assert isinstance(token, Literal)
        assert not token.is_string
        assert token.text == source

    def test_punct_spacing(self) -> None:
        tokens = list(tokenize("=> = >"))
        assert all(isinstance(t, Punct) for t in tokens)
        spacings = [t.spacing for t in tokens]  # type: ignore[union-attr]
        assert spacings == [Spacing.JOINT, Spacing.ALONE, Spacing.ALONE, Spacing.ALONE]

    def test_comments_are_skipped(self) -> None:
        tokens = list(tokenize("# heading\nunit # trailing\nname"))
        assert [token_text(t) for t in tokens] == ["unit", "name"]

    def test_identifier_named_like_prefix(self) -> None:
        tokens = list(tokenize("r => b"))
        assert isinstance(tokens[0], Ident)
        assert isinstance(tokens[-1], Ident)


# =============================================================================
# GROUPS
# =============================================================================


class TestGroups:
    """Delimited groups nest and expose their contents."""

    def test_nested_groups(self) -> None:
        (outer,) = tokenize("{ En(Gb) [1, 2] }")
        assert isinstance(outer, Group)
        assert outer.delimiter is Delimiter.BRACE
        inner = list(outer.stream)
        assert isinstance(inner[1], Group)
        assert inner[1].delimiter is Delimiter.PARENTHESIS
        assert isinstance(inner[2], Group)
        assert inner[2].delimiter is Delimiter.BRACKET

    def test_inner_text_is_verbatim(self) -> None:
        (group,) = tokenize("{  a +  b  }")
        assert isinstance(group, Group)
        assert group.inner_text == "  a +  b  "

    def test_braces_inside_strings_do_not_open_groups(self) -> None:
        (group,) = tokenize("{ '}' }")
        assert isinstance(group, Group)
        assert len(group.stream) == 1

    def test_group_cursor_is_independent(self) -> None:
        stream = tokenize("(a b) c")
        cursor = stream.cursor()
        group = cursor.expect_group(Delimiter.PARENTHESIS)
        inner = group.cursor()
        assert inner.expect_ident().name == "a"
        assert cursor.expect_ident().name == "c"
        assert inner.expect_ident().name == "b"
        assert inner.at_end()
        assert cursor.at_end()


# =============================================================================
# LEXER ERRORS
# =============================================================================


class TestLexerErrors:
    """Malformed input raises DictSyntaxError with the right code."""

    @pytest.mark.parametrize("source", ["'open", "'line\nbreak'", "'''never closed"])
    def test_unterminated_string(self, source: str) -> None:
        with pytest.raises(DictSyntaxError) as exc_info:
            tokenize(source)
        assert exc_info.value.diagnostic is not None
        assert exc_info.value.diagnostic.code is DiagnosticCode.UNTERMINATED_STRING

    @pytest.mark.parametrize("source", ["{ (", "}", "( ]", "[ }"])
    def test_unbalanced_delimiter(self, source: str) -> None:
        with pytest.raises(DictSyntaxError) as exc_info:
            tokenize(source)
        assert exc_info.value.diagnostic is not None
        assert exc_info.value.diagnostic.code is DiagnosticCode.UNBALANCED_DELIMITER

    def test_invalid_character(self) -> None:
        with pytest.raises(DictSyntaxError) as exc_info:
            tokenize("unit §")
        diagnostic = exc_info.value.diagnostic
        assert diagnostic is not None
        assert diagnostic.code is DiagnosticCode.INVALID_CHARACTER
        assert diagnostic.span is not None
        assert diagnostic.span.column == 6

    def test_error_location_uses_source_name(self) -> None:
        with pytest.raises(DictSyntaxError) as exc_info:
            tokenize("\n\n  'oops", name="app.lexi")
        diagnostic = exc_info.value.diagnostic
        assert diagnostic is not None
        assert diagnostic.source_name == "app.lexi"
        assert diagnostic.span is not None
        assert (diagnostic.span.line, diagnostic.span.column) == (3, 3)


# =============================================================================
# TOKEN CURSOR
# =============================================================================


class TestTokenCursor:
    """TokenCursor consumption contract."""

    def test_peek_does_not_consume(self) -> None:
        cursor = tokenize("a b").cursor()
        assert token_text(cursor.peek()) == "a"
        assert token_text(cursor.peek()) == "a"
        assert token_text(cursor.next()) == "a"
        assert token_text(cursor.next()) == "b"

    def test_next_at_end_raises_eof(self) -> None:
        cursor = tokenize("").cursor()
        assert cursor.at_end()
        with pytest.raises(DictSyntaxError) as exc_info:
            cursor.next("unit name")
        assert exc_info.value.diagnostic is not None
        assert exc_info.value.diagnostic.code is DiagnosticCode.UNEXPECTED_EOF

    def test_lookahead_never_raises(self) -> None:
        cursor = tokenize("a").cursor()
        assert cursor.lookahead(5) is None

    def test_expect_keyword_mismatch(self) -> None:
        cursor = tokenize("modul x;").cursor()
        with pytest.raises(DictSyntaxError) as exc_info:
            cursor.expect_keyword("mod")
        diagnostic = exc_info.value.diagnostic
        assert diagnostic is not None
        assert diagnostic.code is DiagnosticCode.UNEXPECTED_TOKEN
        assert "'mod'" in diagnostic.message
        assert "modul" in diagnostic.message

    def test_expect_punct_sequence_joint(self) -> None:
        cursor = tokenize("=> x").cursor()
        span = cursor.expect_punct_sequence("=>")
        assert (span.start, span.end) == (0, 2)
        assert cursor.expect_ident().name == "x"

    def test_expect_punct_sequence_rejects_split_operator(self) -> None:
        cursor = tokenize("= > x").cursor()
        with pytest.raises(DictSyntaxError) as exc_info:
            cursor.expect_punct_sequence("=>")
        assert exc_info.value.diagnostic is not None
        assert exc_info.value.diagnostic.code is DiagnosticCode.UNEXPECTED_TOKEN

    def test_peek_punct_sequence(self) -> None:
        assert tokenize("-> str").cursor().peek_punct_sequence("->")
        assert not tokenize("- > str").cursor().peek_punct_sequence("->")
        assert not tokenize("").cursor().peek_punct_sequence("->")

    def test_eat_punct(self) -> None:
        cursor = tokenize(", a").cursor()
        assert cursor.eat_punct(";") is None
        eaten = cursor.eat_punct(",")
        assert eaten is not None
        assert eaten.char == ","
        assert cursor.expect_ident().name == "a"

    def test_expect_literal(self) -> None:
        cursor = tokenize("'x' y").cursor()
        assert cursor.expect_literal().text == "'x'"
        with pytest.raises(DictSyntaxError):
            cursor.expect_literal()

    def test_expect_end(self) -> None:
        cursor = tokenize("a").cursor()
        with pytest.raises(DictSyntaxError):
            cursor.expect_end("')'")
        cursor.next()
        cursor.expect_end("')'")


# =============================================================================
# SPANS
# =============================================================================


class TestSpans:
    """Spans map offsets to text and line/column positions."""

    def test_span_text_and_location(self) -> None:
        source = SourceFile("enum Locale {\n  De\n}", name="x.lexi")
        span = Span(16, 18, source)
        assert span.text == "De"
        location = span.source_span
        assert location is not None
        assert (location.line, location.column) == (2, 3)
        assert span.source_name == "x.lexi"

    def test_spans_compare_by_offsets_only(self) -> None:
        assert Span(1, 2, SourceFile("ab")) == Span(1, 2, SourceFile("xyz"))

    def test_invalid_span_rejected(self) -> None:
        with pytest.raises(ValueError, match="end"):
            Span(5, 2)

    def test_synthesized_span_has_no_location(self) -> None:
        span = Span(0, 3)
        assert span.text == ""
        assert span.source_span is None
        assert span.to(Span(4, 9)).end == 9
        assert span.at_end() == Span(3, 3)

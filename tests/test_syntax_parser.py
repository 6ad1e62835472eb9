"""Dictionary parser tests.

Tests:
- Locale block: languages, regions, trailing commas, duplicates, empty blocks
- Translation units: parameters, return types, arm patterns and bodies
- Raw body normalization
- Item keywords and error positions
- Source size limit
"""

import pytest

from lexidict.config import CompilerConfig
from lexidict.diagnostics import DiagnosticCode, DictSyntaxError
from lexidict.syntax import (
    DictParser,
    LangPattern,
    RawExpression,
    RegionPattern,
    StringTemplate,
    Underscore,
    parse_dict,
)
from lexidict.syntax.ast import TransUnit

LOCALES = "enum Locale { De, En { Gb, Us } }\n"


def _unit(source: str) -> TransUnit:
    dictionary = parse_dict(LOCALES + source)
    (unit,) = dictionary.trans_units
    return unit


def _syntax_code(source: str) -> DiagnosticCode:
    with pytest.raises(DictSyntaxError) as exc_info:
        parse_dict(source)
    assert exc_info.value.diagnostic is not None
    return exc_info.value.diagnostic.code


# =============================================================================
# LOCALE BLOCK
# =============================================================================


class TestLocaleBlock:
    """Parsing `enum Locale { ... }`."""

    def test_languages_and_regions(self) -> None:
        locale_def = parse_dict(LOCALES).locale_def
        assert locale_def.lang_names == ("De", "En")
        en = locale_def.get_lang("En")
        assert en is not None
        assert en.region_names == ("Gb", "Us")
        assert en.region_type_name == "EnRegion"
        de = locale_def.get_lang("De")
        assert de is not None
        assert not de.has_regions
        assert locale_def.get_lang("Fr") is None

    def test_trailing_commas(self) -> None:
        locale_def = parse_dict("enum Locale { De, En { Gb, Us, }, }").locale_def
        assert locale_def.lang_names == ("De", "En")

    def test_single_language(self) -> None:
        assert parse_dict("enum Locale { En }").locale_def.lang_names == ("En",)

    def test_language_spans_point_into_source(self) -> None:
        locale_def = parse_dict("enum Locale {\n    Fr,\n}", name="x.lexi").locale_def
        span = locale_def.langs[0].name.span
        assert span is not None
        assert span.text == "Fr"
        location = span.source_span
        assert location is not None
        assert (location.line, location.column) == (2, 5)

    @pytest.mark.parametrize(
        ("source", "code"),
        [
            ("enum Locale { }", DiagnosticCode.UNEXPECTED_EOF),
            ("enum Locale { En { } }", DiagnosticCode.UNEXPECTED_EOF),
            ("enum Locale { En, En }", DiagnosticCode.DUPLICATE_LOCALE_NAME),
            ("enum Locale { En { Gb, Gb } }", DiagnosticCode.DUPLICATE_LOCALE_NAME),
            ("enum Locales { En }", DiagnosticCode.UNEXPECTED_TOKEN),
            ("Locale { En }", DiagnosticCode.UNEXPECTED_TOKEN),
            ("enum Locale { En De }", DiagnosticCode.UNEXPECTED_TOKEN),
            ("enum Locale { _ }", DiagnosticCode.UNEXPECTED_TOKEN),
            ("", DiagnosticCode.UNEXPECTED_EOF),
        ],
    )
    def test_invalid_locale_blocks(self, source: str, code: DiagnosticCode) -> None:
        assert _syntax_code(source) is code


# =============================================================================
# TRANSLATION UNITS
# =============================================================================


class TestUnitHeader:
    """Unit names, parameter lists and return types."""

    def test_unit_without_parameter_list(self) -> None:
        unit = _unit('unit title { _ => "Title" }')
        assert unit.name.name == "title"
        assert unit.params is None
        assert unit.param_list == ()
        assert unit.return_type is None
        assert not unit.has_custom_return_type

    def test_empty_parameter_list(self) -> None:
        unit = _unit('unit title() { _ => "Title" }')
        assert unit.params == ()

    def test_parameters_keep_type_text(self) -> None:
        unit = _unit('unit f(a: str, b: dict[str, int], c: float | None,) { _ => "" }')
        assert [(p.name.name, p.ty.text) for p in unit.param_list] == [
            ("a", "str"),
            ("b", "dict[str, int]"),
            ("c", "float | None"),
        ]

    def test_return_type(self) -> None:
        unit = _unit("unit count(n: int) -> tuple[int, str] { _ => { (n, str(n)) } }")
        assert unit.return_type is not None
        assert unit.return_type.text == "tuple[int, str]"
        assert unit.has_custom_return_type

    @pytest.mark.parametrize(
        ("source", "code"),
        [
            ('unit f(a) { _ => "" }', DiagnosticCode.UNEXPECTED_EOF),
            ('unit f(a:) { _ => "" }', DiagnosticCode.UNEXPECTED_EOF),
            ('unit f(a: str, : str) { _ => "" }', DiagnosticCode.UNEXPECTED_TOKEN),
            ('unit f -> { _ => "" }', DiagnosticCode.UNEXPECTED_TOKEN),
            ('unit { _ => "" }', DiagnosticCode.UNEXPECTED_TOKEN),
            ("unit f", DiagnosticCode.UNEXPECTED_EOF),
        ],
    )
    def test_invalid_headers(self, source: str, code: DiagnosticCode) -> None:
        assert _syntax_code(LOCALES + source) is code


class TestArms:
    """Arm patterns and bodies."""

    def test_pattern_shapes(self) -> None:
        unit = _unit('unit a { En(Gb) => "1", En(r) => "2", De => "3", _ => "4" }')
        patterns = [arm.pattern for arm in unit.body.arms]
        assert isinstance(patterns[0], RegionPattern)
        assert patterns[0].region.name == "Gb"
        assert isinstance(patterns[1], RegionPattern)
        assert patterns[1].region.name == "r"
        assert isinstance(patterns[2], LangPattern)
        assert isinstance(patterns[3], Underscore)

    def test_region_wildcard_pattern(self) -> None:
        unit = _unit('unit a { En(_) => "x" }')
        pattern = unit.body.arms[0].pattern
        assert isinstance(pattern, RegionPattern)
        assert pattern.region.name == "_"

    def test_string_bodies_are_decoded(self) -> None:
        unit = _unit(r'unit a { De => "Zeile\nzwei", En => r"\d", _ => u"{{x}}" }')
        texts = [arm.body.text for arm in unit.body.arms]  # type: ignore[union-attr]
        assert texts == ["Zeile\nzwei", "\\d", "{{x}}"]
        assert all(isinstance(arm.body, StringTemplate) for arm in unit.body.arms)

    def test_raw_body_comma_is_optional(self) -> None:
        unit = _unit("unit a { De => { 1 } En => { 2 }, _ => { 3 } }")
        codes = [arm.body.code for arm in unit.body.arms]  # type: ignore[union-attr]
        assert codes == ["1", "2", "3"]

    def test_string_body_requires_comma_between_arms(self) -> None:
        assert _syntax_code(LOCALES + 'unit a { De => "x" _ => "y" }') is (
            DiagnosticCode.UNEXPECTED_TOKEN
        )

    def test_trailing_comma_after_last_string_arm(self) -> None:
        unit = _unit('unit a { _ => "x", }')
        assert len(unit.body.arms) == 1

    def test_empty_unit_body(self) -> None:
        unit = _unit("unit a { }")
        assert unit.body.arms == ()

    @pytest.mark.parametrize("literal", ["f'x'", "b'x'", "rb'x'", "42"])
    def test_invalid_string_literals(self, literal: str) -> None:
        code = _syntax_code(LOCALES + f"unit a {{ _ => {literal} }}")
        assert code is DiagnosticCode.INVALID_STRING_LITERAL

    @pytest.mark.parametrize(
        "source",
        [
            'unit a { _ = > "x" }',
            'unit a { _ -> "x" }',
            'unit a { En(Gb, Us) => "x" }',
            "unit a { _ => x }",
            'unit a { "x" => "y" }',
        ],
    )
    def test_malformed_arms(self, source: str) -> None:
        assert _syntax_code(LOCALES + source) is DiagnosticCode.UNEXPECTED_TOKEN

    def test_missing_body(self) -> None:
        assert _syntax_code(LOCALES + "unit a { _ => }") is DiagnosticCode.UNEXPECTED_EOF


# =============================================================================
# RAW BODIES
# =============================================================================


class TestRawBodyText:
    """Raw bodies are verbatim source, dedented."""

    def test_single_line(self) -> None:
        unit = _unit("unit a { _ => {   n  +  1   } }")
        body = unit.body.arms[0].body
        assert isinstance(body, RawExpression)
        assert body.code == "n  +  1"

    def test_multi_line_block_is_dedented(self) -> None:
        unit = _unit(
            "unit a(n: int) {\n"
            "    _ => {\n"
            "        if n == 1:\n"
            "            return 'one'\n"
            "        return 'many'\n"
            "    }\n"
            "}"
        )
        body = unit.body.arms[0].body
        assert isinstance(body, RawExpression)
        assert body.code == "if n == 1:\n    return 'one'\nreturn 'many'"

    def test_first_line_on_brace_line_keeps_relative_indent(self) -> None:
        unit = _unit("unit a {\n    _ => { x = 1\n           return x }\n}")
        body = unit.body.arms[0].body
        assert isinstance(body, RawExpression)
        assert body.code == "x = 1\nreturn x"

    def test_braces_and_comments_inside_raw_body(self) -> None:
        unit = _unit("unit a {\n    _ => {\n        # pick one\n        {'a': '}'}['a']\n    }\n}")
        body = unit.body.arms[0].body
        assert isinstance(body, RawExpression)
        assert body.code == "# pick one\n{'a': '}'}['a']"

    def test_empty_raw_body(self) -> None:
        body = _unit("unit a { _ => {} }").body.arms[0].body
        assert isinstance(body, RawExpression)
        assert body.code == ""


# =============================================================================
# ITEMS AND LIMITS
# =============================================================================


class TestItems:
    """Top-level items and input limits."""

    def test_unknown_item_keyword(self) -> None:
        with pytest.raises(DictSyntaxError) as exc_info:
            parse_dict(LOCALES + "func a { }", name="app.lexi")
        diagnostic = exc_info.value.diagnostic
        assert diagnostic is not None
        assert diagnostic.code is DiagnosticCode.UNKNOWN_ITEM_KEYWORD
        assert diagnostic.source_name == "app.lexi"
        assert diagnostic.span is not None
        assert diagnostic.span.line == 2
        assert diagnostic.hint is not None

    def test_units_keep_source_order(self) -> None:
        dictionary = parse_dict(LOCALES + 'unit b { _ => "" }\nunit a { _ => "" }')
        assert [u.name.name for u in dictionary.trans_units] == ["b", "a"]

    def test_spans_do_not_affect_equality(self) -> None:
        compact = parse_dict('enum Locale{En}unit a{_=>"x"}')
        spaced = parse_dict('enum Locale {\n    En,\n}\n\nunit a {\n    _ => "x",\n}\n')
        assert compact == spaced

    def test_source_too_large(self) -> None:
        parser = DictParser(config=CompilerConfig(max_source_size=10))
        with pytest.raises(DictSyntaxError) as exc_info:
            parser.parse_source(LOCALES)
        assert exc_info.value.diagnostic is not None
        assert exc_info.value.diagnostic.code is DiagnosticCode.SOURCE_TOO_LARGE

    def test_mod_without_resolver_source(self) -> None:
        assert _syntax_code(LOCALES + "mod errors;") is DiagnosticCode.MODULE_NOT_FOUND

    def test_mod_requires_semicolon(self) -> None:
        assert _syntax_code(LOCALES + "mod errors") is DiagnosticCode.UNEXPECTED_EOF

    def test_parse_logs_summary(self, debug_logging: pytest.LogCaptureFixture) -> None:
        parse_dict(LOCALES + 'unit a { _ => "" }', name="log.lexi")
        assert any("log.lexi" in record.getMessage() for record in debug_logging.records)

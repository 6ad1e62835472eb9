"""Checker tests.

Tests:
- Exhaustiveness of language and region arms
- Unreachable arms, unknown languages, region patterns on regionless languages
- Typed units: raw bodies only, no fallback
- Item, parameter and binding names
- Warnings: missing translations, suspicious bindings
- Property: the usage tree agrees with a brute-force set model
"""

import pytest
from hypothesis import event, given
from hypothesis import strategies as st

from lexidict.analysis import (
    AnyLocale,
    LangCase,
    PatternUsage,
    RegionBinding,
    RegionCase,
    check,
    resolve_pattern,
)
from lexidict.diagnostics import DiagnosticCode, DictCheckError
from lexidict.loading import MappingModuleResolver
from lexidict.syntax import (
    Dict,
    Identifier,
    LangPattern,
    LocaleDef,
    RegionPattern,
    TransUnit,
    UnitBody,
    UnitArm,
    parse_dict,
)
from tests.strategies import arm_coverage, locale_defs, locale_keys, pattern_matches, unit_arms

LOCALES = "enum Locale { De, En { Gb, Us } }\n"


def _check_code(source: str) -> DiagnosticCode:
    with pytest.raises(DictCheckError) as exc_info:
        check(parse_dict(source))
    assert exc_info.value.diagnostic is not None
    return exc_info.value.diagnostic.code


# =============================================================================
# EXHAUSTIVENESS
# =============================================================================


class TestExhaustiveness:
    """Which arm sets cover every locale."""

    def test_all_languages_covered(self) -> None:
        result = check(parse_dict('enum Locale { En, De } unit a { En => "hi", De => "hallo" }'))
        assert result.is_exhaustive(("a",))
        assert result.warnings == ()

    def test_missing_language(self) -> None:
        result = check(parse_dict('enum Locale { En, De } unit a { En => "hi" }'))
        assert not result.is_exhaustive(("a",))
        assert result.non_exhaustive == frozenset({("a",)})

    @pytest.mark.parametrize(
        ("arms", "exhaustive"),
        [
            ('En(Gb) => "a", En(Us) => "b"', True),
            ('En(Gb) => "a", _ => "b"', True),
            ('En(Gb) => "a"', False),
            ('En(r) => "a"', True),
            ('En(_) => "a"', True),
            ('En => "a"', True),
            ("", False),
        ],
    )
    def test_region_arms(self, arms: str, exhaustive: bool) -> None:
        result = check(parse_dict(f"enum Locale {{ En {{ Gb, Us }} }} unit a {{ {arms} }}"))
        assert result.is_exhaustive(("a",)) is exhaustive

    def test_binding_covers_everything(self) -> None:
        result = check(parse_dict(LOCALES + 'unit a { De => "x", other => "y" }'))
        assert result.is_exhaustive(("a",))

    def test_nested_unit_paths(self) -> None:
        resolver = MappingModuleResolver({"errors.lexi": 'unit gone { De => "weg" }'})
        result = check(parse_dict(LOCALES + "mod errors;", resolver=resolver))
        assert result.non_exhaustive == frozenset({("errors", "gone")})
        (warning,) = result.warnings
        assert warning.unit == "errors.gone"


# =============================================================================
# PATTERN ERRORS
# =============================================================================


class TestPatternErrors:
    """Arms that can never match, or name things that do not exist."""

    @pytest.mark.parametrize(
        "arms",
        [
            '_ => "a", De => "b"',
            'De => "a", De => "b"',
            'En => "a", En(Gb) => "b"',
            'En(Gb) => "a", En(Us) => "b", En => "c"',
            'En(Gb) => "a", En(Gb) => "b"',
            'En(r) => "a", En(Us) => "b"',
            'De => "a", En => "b", other => "c"',
            'other => "a", _ => "b"',
        ],
    )
    def test_unreachable(self, arms: str) -> None:
        assert _check_code(LOCALES + f"unit a {{ {arms} }}") is DiagnosticCode.UNREACHABLE_PATTERN

    def test_unreachable_diagnostic_points_at_arm(self) -> None:
        source = LOCALES + 'unit a {\n    _ => "a",\n    De => "b",\n}'
        with pytest.raises(DictCheckError) as exc_info:
            check(parse_dict(source, name="d.lexi"))
        diagnostic = exc_info.value.diagnostic
        assert diagnostic is not None
        assert diagnostic.unit == "a"
        assert diagnostic.source_name == "d.lexi"
        assert diagnostic.span is not None
        assert diagnostic.span.line == 4

    @pytest.mark.parametrize(
        "arms",
        [
            'Fr(Ca) => "a", _ => "b"',
            '_ => "a", Fr(Ca) => "b"',
            'De => "a", En => "b", Fr(x) => "c"',
        ],
    )
    def test_unknown_language_regardless_of_order(self, arms: str) -> None:
        assert _check_code(LOCALES + f"unit a {{ {arms} }}") is DiagnosticCode.UNKNOWN_LANGUAGE

    def test_region_on_regionless_language(self) -> None:
        code = _check_code(LOCALES + 'unit a { De(At) => "a" }')
        assert code is DiagnosticCode.LANGUAGE_HAS_NO_REGIONS


# =============================================================================
# TYPED UNITS
# =============================================================================


class TestTypedUnits:
    """Units with a custom return type."""

    def test_string_body_rejected(self) -> None:
        code = _check_code(LOCALES + 'unit n -> int { De => { 1 }, _ => "2" }')
        assert code is DiagnosticCode.TYPED_UNIT_REQUIRES_RAW_BODY

    def test_non_exhaustive_rejected(self) -> None:
        code = _check_code(LOCALES + "unit n -> int { De => { 1 } }")
        assert code is DiagnosticCode.MISSING_FALLBACK_FOR_TYPED_UNIT

    def test_exhaustive_raw_bodies_accepted(self) -> None:
        source = LOCALES + "unit n(x: int) -> int { De => { x }, En(_) => { -x } }"
        result = check(parse_dict(source))
        assert result.is_exhaustive(("n",))

    def test_default_return_type_may_use_raw_bodies(self) -> None:
        result = check(parse_dict(LOCALES + "unit n { De => { 'x' } }"))
        assert not result.is_exhaustive(("n",))


# =============================================================================
# NAMES
# =============================================================================


class TestNames:
    """Names that would collide in generated code."""

    def test_duplicate_unit(self) -> None:
        assert _check_code(LOCALES + "unit a { } unit a { }") is DiagnosticCode.DUPLICATE_ITEM

    def test_unit_and_module_share_namespace(self) -> None:
        resolver = MappingModuleResolver({"a.lexi": ""})
        with pytest.raises(DictCheckError) as exc_info:
            check(parse_dict(LOCALES + "mod a; unit a { }", resolver=resolver))
        assert exc_info.value.diagnostic is not None
        assert exc_info.value.diagnostic.code is DiagnosticCode.DUPLICATE_ITEM

    def test_duplicate_parameter(self) -> None:
        code = _check_code(LOCALES + "unit a(x: int, x: str) { }")
        assert code is DiagnosticCode.DUPLICATE_PARAMETER

    @pytest.mark.parametrize(
        "source",
        [
            "unit locale { }",
            "unit __init__ { }",
            "unit a(self: int) { }",
            "unit a(Locale: int) { }",
            "unit a(EnRegion: int) { }",
            'unit a(other: str) { De => "x", other => "y" }',
            'unit a { De => "x", self => "y" }',
            'unit a { De => "x", EnRegion => "y" }',
            'unit a { De => "x", En(Locale) => "y" }',
            'unit a(x: int) { De => { str(x) } str => "other" }',
            'unit a { De => "x", En(len) => "y" }',
        ],
    )
    def test_invalid_names(self, source: str) -> None:
        assert _check_code(LOCALES + source) is DiagnosticCode.INVALID_NAME

    @pytest.mark.parametrize(
        "source",
        [
            "enum Locale { variant }",
            "enum Locale { En { _Gb } }",
            "enum Locale { tag }",
            "enum Locale { region, En { Gb } }",
        ],
    )
    def test_invalid_locale_names(self, source: str) -> None:
        assert _check_code(source) is DiagnosticCode.INVALID_NAME

    def test_builtin_binding_reason(self) -> None:
        with pytest.raises(DictCheckError, match="shadows a Python builtin"):
            check(parse_dict(LOCALES + 'unit a { De => "x", type => "y" }'))

    def test_region_binding_may_reuse_wildcard(self) -> None:
        check(parse_dict(LOCALES + 'unit a { En(_) => "x", _ => "y" }'))


# =============================================================================
# WARNINGS
# =============================================================================


class TestWarnings:
    """Non-fatal diagnostics collected on the result."""

    def test_missing_translation_warning(self) -> None:
        result = check(parse_dict(LOCALES + 'unit a { De => "x" }\nunit b { _ => "y" }'))
        (warning,) = result.warnings
        assert warning.code is DiagnosticCode.MISSING_TRANSLATION
        assert warning.severity == "warning"
        assert result.warning_count == 1

    def test_suspicious_binding_warning(self) -> None:
        result = check(parse_dict(LOCALES + 'unit a { De => "x", Fr => "y" }'))
        (warning,) = result.warnings
        assert warning.code is DiagnosticCode.SUSPICIOUS_BINDING
        assert "Fr" in warning.message

    def test_check_is_logged(self, debug_logging: pytest.LogCaptureFixture) -> None:
        check(parse_dict(LOCALES + 'unit a { De => "x" }'))
        messages = [record.getMessage() for record in debug_logging.records]
        assert any("non-exhaustive" in message for message in messages)


# =============================================================================
# PATTERN RESOLUTION AND USAGE
# =============================================================================


class TestResolution:
    """Identifiers are looked up in the locale block first."""

    def test_resolved_shapes(self) -> None:
        locale_def = parse_dict(LOCALES).locale_def
        language = resolve_pattern(LangPattern(Identifier("De")), locale_def, unit="a")
        assert isinstance(language, LangCase)
        binding = resolve_pattern(LangPattern(Identifier("de")), locale_def, unit="a")
        assert isinstance(binding, AnyLocale)
        assert binding.binding == "de"
        region = RegionPattern(Identifier("En"), Identifier("Gb"))
        assert isinstance(resolve_pattern(region, locale_def, unit="a"), RegionCase)
        bound = resolve_pattern(
            RegionPattern(Identifier("En"), Identifier("gb")), locale_def, unit="a"
        )
        assert isinstance(bound, RegionBinding)
        assert bound.binding == "gb"


class TestPatternUsage:
    """Usage tree bookkeeping."""

    def test_uncovered(self) -> None:
        usage = PatternUsage(parse_dict(LOCALES).locale_def)
        assert usage.uncovered() == [("De", None), ("En", "Gb"), ("En", "Us")]
        assert usage.use_region("En", "Gb")
        assert usage.uncovered() == [("De", None), ("En", "Us")]
        assert usage.use_lang("De")
        assert not usage.is_exhausted
        assert usage.use_region("En", "Us")
        assert usage.is_exhausted
        assert usage.uncovered() == []
        assert not usage.use_wildcard()

    def test_regions_complete_language(self) -> None:
        usage = PatternUsage(parse_dict(LOCALES).locale_def)
        usage.use_region("En", "Gb")
        usage.use_region("En", "Us")
        assert not usage.use_lang("En")

    def test_unknown_language_raises_key_error(self) -> None:
        usage = PatternUsage(parse_dict(LOCALES).locale_def)
        with pytest.raises(KeyError):
            usage.use_lang("Fr")


# =============================================================================
# PROPERTY: AGREEMENT WITH A SET MODEL
# =============================================================================


@st.composite
def _units(draw: st.DrawFn) -> tuple[LocaleDef, tuple[UnitArm, ...]]:
    locale_def = draw(locale_defs())
    return locale_def, draw(unit_arms(locale_def, max_arms=6))


class TestCoverageModel:
    """The checker agrees with enumerating every (language, region) pair."""

    @given(_units())
    def test_checker_matches_brute_force(self, case: tuple[LocaleDef, tuple[UnitArm, ...]]) -> None:
        locale_def, arms = case
        unit = TransUnit(Identifier("a"), None, None, UnitBody(arms))
        dictionary = Dict(locale_def, (), (unit,))
        redundant, covered = arm_coverage([arm.pattern for arm in arms], locale_def)

        if redundant is not None:
            event("outcome=unreachable")
            with pytest.raises(DictCheckError) as exc_info:
                check(dictionary)
            assert exc_info.value.diagnostic is not None
            assert exc_info.value.diagnostic.code is DiagnosticCode.UNREACHABLE_PATTERN
            return

        result = check(dictionary)
        exhaustive = covered == frozenset(locale_keys(locale_def))
        event(f"outcome={'exhaustive' if exhaustive else 'partial'}")
        assert result.is_exhaustive(("a",)) is exhaustive

    @given(_units())
    def test_uncovered_matches_brute_force(
        self, case: tuple[LocaleDef, tuple[UnitArm, ...]]
    ) -> None:
        locale_def, arms = case
        usage = PatternUsage(locale_def)
        covered: frozenset[tuple[str, str | None]] = frozenset()
        for arm in arms:
            pattern = resolve_pattern(arm.pattern, locale_def, unit="a")
            if not usage.use(pattern):
                assert pattern_matches(arm.pattern, locale_def) <= covered
                break
            covered |= pattern_matches(arm.pattern, locale_def)
        remaining = [key for key in locale_keys(locale_def) if key not in covered]
        assert usage.uncovered() == remaining

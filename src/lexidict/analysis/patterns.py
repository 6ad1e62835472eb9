"""Explicit resolution of arm patterns against the locale definition.

The parser only records the syntactic shape of a pattern. Whether a bare
identifier names a language or binds the locale, and whether `En(x)` names
a region or binds it, depends on the locale block. resolve_pattern() makes
that decision once; the checker and the generator both consume the result.

Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass

from lexidict.diagnostics import DictCheckError, ErrorTemplate
from lexidict.syntax.ast import (
    ArmPattern,
    LangPattern,
    LocaleDef,
    LocaleLang,
    RegionPattern,
    Underscore,
)

__all__ = [
    "AnyLocale",
    "LangCase",
    "RegionBinding",
    "RegionCase",
    "ResolvedPattern",
    "pattern_text",
    "resolve_pattern",
]


@dataclass(frozen=True, slots=True)
class AnyLocale:
    """Matches every locale: `_` (binding None) or a binding name."""

    binding: str | None
    pattern: ArmPattern


@dataclass(frozen=True, slots=True)
class LangCase:
    """Matches one declared language, any region."""

    lang: LocaleLang
    pattern: ArmPattern


@dataclass(frozen=True, slots=True)
class RegionCase:
    """Matches one region of a declared language."""

    lang: LocaleLang
    region: str
    pattern: ArmPattern


@dataclass(frozen=True, slots=True)
class RegionBinding:
    """Matches every region of a language, binding the region value.

    `binding` is None for `En(_)`.
    """

    lang: LocaleLang
    binding: str | None
    pattern: ArmPattern


type ResolvedPattern = AnyLocale | LangCase | RegionCase | RegionBinding


def pattern_text(pattern: ArmPattern) -> str:
    """Render a pattern as written, e.g. `En(Gb)`."""
    match pattern:
        case Underscore():
            return "_"
        case LangPattern(name=name):
            return name.name
        case RegionPattern(lang=lang, region=region):
            return f"{lang.name}({region.name})"


def resolve_pattern(pattern: ArmPattern, locale_def: LocaleDef, *, unit: str) -> ResolvedPattern:
    """Classify a syntactic pattern.

    Args:
        pattern: Pattern as parsed
        locale_def: Locale block of the dictionary
        unit: Qualified unit name, for diagnostics

    Returns:
        Resolved pattern

    Raises:
        DictCheckError: UNKNOWN_LANGUAGE if a `Lang(...)` pattern names an
            undeclared language, LANGUAGE_HAS_NO_REGIONS if it names a
            language declared without regions
    """
    match pattern:
        case Underscore():
            return AnyLocale(binding=None, pattern=pattern)
        case LangPattern(name=name):
            lang = locale_def.get_lang(name.name)
            if lang is None:
                return AnyLocale(binding=name.name, pattern=pattern)
            return LangCase(lang=lang, pattern=pattern)
        case RegionPattern(lang=lang_name, region=region):
            lang = locale_def.get_lang(lang_name.name)
            if lang is None:
                raise DictCheckError(
                    ErrorTemplate.unknown_language(lang_name.name, unit, lang_name.span)
                )
            if not lang.has_regions:
                raise DictCheckError(
                    ErrorTemplate.language_has_no_regions(lang_name.name, unit, pattern.span)
                )
            if lang.contains_region(region.name):
                return RegionCase(lang=lang, region=region.name, pattern=pattern)
            binding = None if region.name == "_" else region.name
            return RegionBinding(lang=lang, binding=binding, pattern=pattern)

"""Dictionary AST node definitions.

A dictionary declares its locales once, then a tree of modules holding
translation units. Every node is a frozen, slotted dataclass holding
tuples, so an AST is immutable after parsing.

Spans are carried for diagnostics but excluded from equality: two ASTs
compare equal when their structure matches, wherever they came from.

Python 3.13+. Zero external dependencies.
"""

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import TypeIs

from lexidict.constants import REGION_TYPE_SUFFIX

from .tokens import Span

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Base types
    "Identifier",
    "Ty",
    # Locale model
    "LocaleLang",
    "LocaleDef",
    # Patterns
    "Underscore",
    "LangPattern",
    "RegionPattern",
    # Bodies
    "StringTemplate",
    "RawExpression",
    # Units and modules
    "UnitParam",
    "UnitArm",
    "UnitBody",
    "TransUnit",
    "Mod",
    "Dict",
    # Type aliases
    "ArmPattern",
    "ArmBody",
    "ASTNode",
]


# ============================================================================
# BASE TYPES
# ============================================================================


@dataclass(frozen=True, slots=True)
class Identifier:
    """Name as written in the source.

    Attributes:
        name: Identifier text
        span: Source location
    """

    name: str
    span: Span | None = field(default=None, compare=False, repr=False)

    @staticmethod
    def guard(node: object) -> TypeIs["Identifier"]:
        """Type guard for Identifier."""
        return isinstance(node, Identifier)


@dataclass(frozen=True, slots=True)
class Ty:
    """Python type annotation, kept as verbatim source text.

    Example:
        unit count(n: int) -> str { ... }
                      ^^^     ^^^
    """

    text: str
    span: Span | None = field(default=None, compare=False, repr=False)


# ============================================================================
# LOCALE MODEL
# ============================================================================


@dataclass(frozen=True, slots=True)
class LocaleLang:
    """One language of the locale block, optionally split into regions.

    Example:
        enum Locale { De, En { Gb, Us } }
                      ^^  ^^^^^^^^^^^^^
    """

    name: Identifier
    regions: tuple[Identifier, ...] = ()

    @property
    def has_regions(self) -> bool:
        return bool(self.regions)

    @property
    def region_names(self) -> tuple[str, ...]:
        return tuple(region.name for region in self.regions)

    def contains_region(self, name: str) -> bool:
        """Check whether `name` is one of this language's regions."""
        return any(region.name == name for region in self.regions)

    @property
    def region_type_name(self) -> str:
        """Name of the generated region enum, e.g. `EnRegion`."""
        return f"{self.name.name}{REGION_TYPE_SUFFIX}"


@dataclass(frozen=True, slots=True)
class LocaleDef:
    """The `enum Locale { ... }` block."""

    langs: tuple[LocaleLang, ...]

    def get_lang(self, name: str) -> LocaleLang | None:
        """First language named `name`, or None."""
        for lang in self.langs:
            if lang.name.name == name:
                return lang
        return None

    @property
    def lang_names(self) -> tuple[str, ...]:
        return tuple(lang.name.name for lang in self.langs)


# ============================================================================
# PATTERNS
# ============================================================================


@dataclass(frozen=True, slots=True)
class Underscore:
    """Wildcard pattern `_`."""

    span: Span | None = field(default=None, compare=False, repr=False)

    @staticmethod
    def guard(node: object) -> TypeIs["Underscore"]:
        """Type guard for Underscore."""
        return isinstance(node, Underscore)


@dataclass(frozen=True, slots=True)
class LangPattern:
    """Bare identifier pattern.

    Either a declared language (`De`) or, when no language has that name, a
    binding that captures the whole locale (`other`). Which one is decided
    by ``lexidict.analysis.patterns.resolve_pattern``.
    """

    name: Identifier

    @property
    def span(self) -> Span | None:
        return self.name.span

    @staticmethod
    def guard(node: object) -> TypeIs["LangPattern"]:
        """Type guard for LangPattern."""
        return isinstance(node, LangPattern)


@dataclass(frozen=True, slots=True)
class RegionPattern:
    """`Lang(Region)` pattern.

    `region` is either one of the language's regions (`En(Gb)`) or a
    binding for the region value (`En(r)`).
    """

    lang: Identifier
    region: Identifier

    @property
    def span(self) -> Span | None:
        if self.lang.span is None or self.region.span is None:
            return self.lang.span
        return self.lang.span.to(self.region.span)

    @staticmethod
    def guard(node: object) -> TypeIs["RegionPattern"]:
        """Type guard for RegionPattern."""
        return isinstance(node, RegionPattern)


type ArmPattern = Underscore | LangPattern | RegionPattern

# ============================================================================
# BODIES
# ============================================================================


@dataclass(frozen=True, slots=True)
class StringTemplate:
    """String body: decoded string value containing `{expr}` placeholders.

    Example:
        En => "Hello {name}!",
              ^^^^^^^^^^^^^^^
    """

    text: str
    span: Span | None = field(default=None, compare=False, repr=False)

    @staticmethod
    def guard(node: object) -> TypeIs["StringTemplate"]:
        """Type guard for StringTemplate."""
        return isinstance(node, StringTemplate)


@dataclass(frozen=True, slots=True)
class RawExpression:
    """Raw body: Python expression or statement block between braces.

    `code` is the dedented source without the surrounding braces.
    """

    code: str
    span: Span | None = field(default=None, compare=False, repr=False)

    @staticmethod
    def guard(node: object) -> TypeIs["RawExpression"]:
        """Type guard for RawExpression."""
        return isinstance(node, RawExpression)


type ArmBody = StringTemplate | RawExpression

# ============================================================================
# UNITS AND MODULES
# ============================================================================


@dataclass(frozen=True, slots=True)
class UnitParam:
    """Parameter `name: Type` of a translation unit."""

    name: Identifier
    ty: Ty


@dataclass(frozen=True, slots=True)
class UnitArm:
    """One `pattern => body` arm."""

    pattern: ArmPattern
    body: ArmBody


@dataclass(frozen=True, slots=True)
class UnitBody:
    """Arms of a translation unit, in source order."""

    arms: tuple[UnitArm, ...]
    span: Span | None = field(default=None, compare=False, repr=False)


@dataclass(frozen=True, slots=True)
class TransUnit:
    """Translation unit.

    Attributes:
        name: Unit name, becomes a method of the dispatch type
        params: Parameter list; None when no list was written. Both None
            and () produce a method without parameters.
        return_type: Declared return type; None means `str`
        body: Arms

    Example:
        unit greet(name: str) {
            De => "Hallo {name}",
            _ => "Hello {name}",
        }
    """

    name: Identifier
    params: tuple[UnitParam, ...] | None
    return_type: Ty | None
    body: UnitBody

    @property
    def param_list(self) -> tuple[UnitParam, ...]:
        """Parameters, with an absent list treated as empty."""
        return self.params or ()

    @property
    def has_custom_return_type(self) -> bool:
        return self.return_type is not None

    @staticmethod
    def guard(node: object) -> TypeIs["TransUnit"]:
        """Type guard for TransUnit."""
        return isinstance(node, TransUnit)


@dataclass(frozen=True, slots=True)
class Mod:
    """Module loaded from a `mod name;` declaration."""

    name: Identifier
    modules: tuple["Mod", ...]
    trans_units: tuple[TransUnit, ...]

    @staticmethod
    def guard(node: object) -> TypeIs["Mod"]:
        """Type guard for Mod."""
        return isinstance(node, Mod)


@dataclass(frozen=True, slots=True)
class Dict:
    """Root of a dictionary: locale block plus top-level items."""

    locale_def: LocaleDef
    modules: tuple[Mod, ...]
    trans_units: tuple[TransUnit, ...]

    def iter_units(self) -> Iterator[tuple[tuple[str, ...], TransUnit]]:
        """Yield (module path, unit) for every unit in the tree, depth first.

        Top-level units have the empty path; units of `mod a;` inside
        `mod b;` have the path ("b", "a").
        """
        yield from _iter_units((), self.modules, self.trans_units)


def _iter_units(
    path: tuple[str, ...],
    modules: tuple[Mod, ...],
    trans_units: tuple[TransUnit, ...],
) -> Iterator[tuple[tuple[str, ...], TransUnit]]:
    for unit in trans_units:
        yield path, unit
    for module in modules:
        yield from _iter_units((*path, module.name.name), module.modules, module.trans_units)


type ASTNode = (
    Identifier
    | Ty
    | LocaleLang
    | LocaleDef
    | Underscore
    | LangPattern
    | RegionPattern
    | StringTemplate
    | RawExpression
    | UnitParam
    | UnitArm
    | UnitBody
    | TransUnit
    | Mod
    | Dict
)

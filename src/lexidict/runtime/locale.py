"""Base class of generated Locale types.

Generated dictionary modules declare one `Locale` subclass of LocaleBase
and register one frozen dataclass per language on it:

    class Locale(_LocaleBase):
        __slots__ = ()

    @Locale.variant("En", region_type=EnRegion)
    @_dataclasses.dataclass(frozen=True, slots=True, repr=False)
    class _Locale_En(Locale):
        region: EnRegion

After registration the variant is reachable as `Locale.En`, so generated
`match` statements can use `case Locale.En(EnRegion.Gb):`.

Locale tags (`en_GB`, `de-AT`) are mapped to variants with Babel's CLDR
data, imported lazily.

Python 3.13+.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable, Iterable
from typing import ClassVar, Self

from lexidict.core.babel_compat import get_babel_core
from lexidict.diagnostics import LexiError

__all__ = ["LocaleBase", "UnknownLocaleError"]

logger = logging.getLogger(__name__)


class UnknownLocaleError(LexiError, LookupError):
    """Locale tag that no declared language (and region) matches."""

    def __init__(self, tag: str, reason: str) -> None:
        super().__init__(f"Unknown locale '{tag}': {reason}")
        self.tag = tag


class LocaleBase:
    """Runtime support shared by every generated Locale type.

    Instances are immutable values; two locales are equal when they are the
    same variant with the same region.
    """

    __slots__ = ()

    # Registered variants of a concrete Locale type, in declaration order.
    _variants: ClassVar[tuple[type[LocaleBase], ...]] = ()
    # Region enum of a variant, None for languages without regions.
    _region_type: ClassVar[type[enum.Enum] | None] = None

    @classmethod
    def variant[T: LocaleBase](
        cls, name: str, *, region_type: type[enum.Enum] | None = None
    ) -> Callable[[type[T]], type[T]]:
        """Class decorator registering a language variant as `cls.<name>`.

        Args:
            name: Language name as declared in the dictionary
            region_type: Region enum for region-bearing languages
        """

        def register(variant_cls: type[T]) -> type[T]:
            variant_cls.__name__ = name
            variant_cls.__qualname__ = f"{cls.__qualname__}.{name}"
            variant_cls._region_type = region_type
            setattr(cls, name, variant_cls)
            cls._variants = (*cls.__dict__.get("_variants", ()), variant_cls)
            return variant_cls

        return register

    @classmethod
    def variants(cls) -> tuple[type[Self], ...]:
        """Registered language variants, in declaration order."""
        return cls._variants  # type: ignore[return-value]

    @classmethod
    def all_locales(cls) -> tuple[Self, ...]:
        """Every concrete locale: one per region, or one per regionless language."""
        locales: list[Self] = []
        for variant_cls in cls.variants():
            if variant_cls._region_type is None:
                locales.append(variant_cls())
            else:
                locales.extend(variant_cls(region) for region in variant_cls._region_type)  # type: ignore[call-arg]
        return tuple(locales)

    @property
    def language(self) -> str:
        """Language name as declared, e.g. 'En'."""
        return type(self).__name__

    @property
    def territory(self) -> enum.Enum | None:
        """Region value; None for languages without regions.

        Region-bearing variants store it in their `region` field. The base
        class must not define `region` itself: dataclasses would take an
        inherited attribute as the field default.
        """
        return getattr(self, "region", None)

    @property
    def tag(self) -> str:
        """POSIX-style locale tag, e.g. 'en_GB' or 'de'."""
        language = self.language.lower()
        if self.territory is None:
            return language
        return f"{language}_{str(self.territory.value).upper()}"

    def __repr__(self) -> str:
        if self.territory is None:
            return f"{type(self).__qualname__}()"
        return f"{type(self).__qualname__}({self.territory})"

    def __str__(self) -> str:
        return self.tag

    # ------------------------------------------------------------------
    # Tag lookup (Babel)
    # ------------------------------------------------------------------

    @classmethod
    def from_tag(cls, tag: str) -> Self:
        """Locale for a BCP 47 or POSIX tag such as 'en-GB', 'en_GB' or 'de'.

        Languages and regions are matched case-insensitively against the
        declared names. A tag without territory picks the CLDR likely region
        when it is declared, otherwise the first declared region. A
        territory is ignored for languages declared without regions.

        Raises:
            UnknownLocaleError: If no declared language or region matches
            BabelImportError: If Babel is not installed
        """
        core = get_babel_core("Locale.from_tag")
        try:
            parts = core.parse_locale(tag.replace("-", "_"))
        except ValueError as exc:
            raise UnknownLocaleError(tag, str(exc)) from exc
        language, territory = parts[0], parts[1]

        for variant_cls in cls.variants():
            if variant_cls.__name__.lower() == language.lower():
                break
        else:
            raise UnknownLocaleError(tag, f"no declared language matches '{language}'")

        region_type = variant_cls._region_type
        if region_type is None:
            return variant_cls()
        if territory is None:
            territory = cls._likely_territory(language)
            if territory is None or _find_region(region_type, territory) is None:
                region = next(iter(region_type))
                logger.debug("No likely region for '%s', using %s", tag, region)
                return variant_cls(region)  # type: ignore[call-arg]
        region = _find_region(region_type, territory)
        if region is None:
            raise UnknownLocaleError(
                tag, f"language '{variant_cls.__name__}' has no region '{territory}'"
            )
        return variant_cls(region)  # type: ignore[call-arg]

    @staticmethod
    def _likely_territory(language: str) -> str | None:
        core = get_babel_core("Locale.from_tag")
        likely = core.get_global("likely_subtags").get(language.lower())
        if likely is None:
            return None
        return core.parse_locale(likely)[1]

    @classmethod
    def negotiate(cls, preferred: Iterable[str]) -> Self | None:
        """Best declared locale for a list of preferred tags, or None.

        Uses Babel's negotiate_locale, so 'en-AU' falls back to the bare
        language and resolves to its likely declared region.

        Example:
            >>> Locale.negotiate(["fr-CA", "en-AU"])
            Locale.En(EnRegion.Us)
        """
        core = get_babel_core("Locale.negotiate")
        available: list[str] = []
        for locale in cls.all_locales():
            available.append(locale.tag)
            if locale.territory is not None and locale.language.lower() not in available:
                available.append(locale.language.lower())
        tag = core.negotiate_locale([p.replace("-", "_") for p in preferred], available)
        if tag is None:
            return None
        return cls.from_tag(tag)


def _find_region(region_type: type[enum.Enum], territory: str) -> enum.Enum | None:
    for region in region_type:
        if str(region.value).upper() == territory.upper():
            return region
    return None

"""Base class of generated dispatch types.

The root `Dict` type and every nested module type of a generated
dictionary derive from DispatchBase. A dispatch instance is just a locale;
each translation unit is a method that matches on it.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from .locale import LocaleBase

__all__ = ["DispatchBase"]


class DispatchBase:
    """Holds the locale a generated dictionary dispatches on.

    Subclasses set ``__locale_type__`` to their generated Locale type so the
    constructor can reject locales of another dictionary.

    Example:
        >>> d = Dict(Locale.De())
        >>> d.locale
        Locale.De()
        >>> d.errors.not_found()
        'Nicht gefunden'
    """

    __slots__ = ("locale",)

    __locale_type__: type[LocaleBase] = LocaleBase

    def __init__(self, locale: LocaleBase) -> None:
        if not isinstance(locale, self.__locale_type__):
            msg = (
                f"{type(self).__qualname__} expects a "
                f"{self.__locale_type__.__qualname__} instance, got {locale!r}"
            )
            raise TypeError(msg)
        self.locale = locale

    def __repr__(self) -> str:
        return f"{type(self).__qualname__}({self.locale!r})"

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.locale == other.locale  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash((type(self), self.locale))

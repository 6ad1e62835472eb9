"""Babel compatibility layer for optional dependency handling.

Compiling dictionaries never needs Babel. Only the runtime helpers that
map locale tags (`Locale.from_tag`, `Locale.negotiate`) use its CLDR data,
so Babel is imported lazily at those call sites.

Usage Pattern:
    from lexidict.core.babel_compat import get_babel_core

    def from_tag(tag: str) -> ...:
        core = get_babel_core("Locale.from_tag")  # Raises if Babel missing
        core.parse_locale(tag)

Python 3.13+.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from functools import lru_cache
from typing import Protocol

__all__ = [
    "BabelCoreProtocol",
    "BabelImportError",
    "get_babel_core",
    "is_babel_available",
    "require_babel",
]


# pylint: disable=unnecessary-ellipsis
class BabelCoreProtocol(Protocol):
    """Subset of the babel.core API used by lexidict."""

    def parse_locale(
        self, identifier: str, sep: str = "_"
    ) -> tuple[str, str | None, str | None, str | None] | tuple[
        str, str | None, str | None, str | None, str | None
    ]:
        """Split a locale identifier into its subtags."""
        ...

    def negotiate_locale(
        self,
        preferred: Iterable[str],
        available: Iterable[str],
        sep: str = "_",
        aliases: Mapping[str, str] | None = ...,
    ) -> str | None:
        """Pick the best available locale for a list of preferences."""
        ...

    def get_global(self, key: str) -> Mapping[str, str]:
        """Access CLDR global data such as likely subtags."""
        ...
# pylint: enable=unnecessary-ellipsis


@lru_cache(maxsize=1)
def _check_babel_available() -> bool:
    """Check if Babel is installed (computed once, cached via lru_cache)."""
    try:
        import babel  # noqa: F401, PLC0415  # pylint: disable=unused-import

        return True
    except ImportError:
        return False


class BabelImportError(ImportError):
    """Raised when Babel is required but not installed."""

    def __init__(self, feature: str) -> None:
        """Create error with feature-specific message.

        Args:
            feature: Name of the feature/function requiring Babel
        """
        message = (
            f"{feature} requires Babel for CLDR locale data. "
            "Install with: pip install lexidict[babel]"
        )
        super().__init__(message)
        self.feature = feature


def is_babel_available() -> bool:
    """Check if Babel is installed."""
    return _check_babel_available()


def require_babel(feature: str) -> None:
    """Raise BabelImportError if Babel is not installed.

    Args:
        feature: Name of the feature requiring Babel (for error message)
    """
    if not _check_babel_available():
        raise BabelImportError(feature)


def get_babel_core(feature: str) -> BabelCoreProtocol:
    """Get the babel.core module.

    Args:
        feature: Name of the feature requiring Babel (for error message)

    Raises:
        BabelImportError: If Babel is not installed
    """
    require_babel(feature)
    from babel import core  # noqa: PLC0415

    return core  # type: ignore[return-value]

"""Shared constants for lexidict.

Centralized configuration defaults used across the syntax, analysis,
codegen and runtime packages. Placing constants here avoids circular
imports and provides a single source of truth.

Constants are grouped by domain:
- Depth limits: Recursion protection for module resolution
- Input limits: Size constraints on dictionary sources
- Module files: Conventional module source locations
- Generated code: Names and markers emitted by the generator

Python 3.13+. Zero external dependencies.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Depth limits
    "MAX_DEPTH",
    # Input limits
    "MAX_SOURCE_SIZE",
    # Module files
    "MODULE_SUFFIX",
    "PACKAGE_MODULE_STEM",
    # Generated code
    "DEFAULT_RETURN_TYPE",
    "DISPATCH_TYPE_NAME",
    "LOCALE_TYPE_NAME",
    "REGION_TYPE_SUFFIX",
    "MODULE_TYPE_PREFIX",
    "CONSTRUCTOR_NAME",
    "LOCALE_ATTRIBUTE",
    "MISSING_TRANSLATION",
]

# ============================================================================
# DEPTH LIMITS
# ============================================================================

# Maximum nesting of `mod name;` declarations. Module trees deeper than this
# come from a misconfigured resolver, not from a real dictionary.
MAX_DEPTH: int = 64

# ============================================================================
# INPUT LIMITS
# ============================================================================

# Maximum dictionary source size in characters (10 MB).
MAX_SOURCE_SIZE: int = 10 * 1024 * 1024

# ============================================================================
# MODULE FILES
# ============================================================================

# `mod foo;` resolves to either `<base>/foo.lexi` (flat file) or
# `<base>/foo/__init__.lexi` (package style). Exactly one must exist.
MODULE_SUFFIX: str = ".lexi"
PACKAGE_MODULE_STEM: str = "__init__"

# ============================================================================
# GENERATED CODE
# ============================================================================

# Return annotation of units that do not declare `-> Type`.
DEFAULT_RETURN_TYPE: str = "str"

# Name of the root dispatch type and of the locale tagged union.
DISPATCH_TYPE_NAME: str = "Dict"
LOCALE_TYPE_NAME: str = "Locale"

# Region enums are named `<Language>Region`, e.g. `EnRegion`.
REGION_TYPE_SUFFIX: str = "Region"

# Nested module dispatch types are addressed by index: `_Module1`, `_Module2`.
MODULE_TYPE_PREFIX: str = "_Module"

# Module-level factory emitted next to the root dispatch type.
CONSTRUCTOR_NAME: str = "new"

# Attribute of every dispatch instance holding the runtime locale.
LOCALE_ATTRIBUTE: str = "locale"

# Value returned by the synthetic clause of non-exhaustive units.
MISSING_TRANSLATION: str = "<missing translation>"

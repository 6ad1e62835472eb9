"""Hypothesis strategies for lexidict property-based testing.

Usage:
    from tests.strategies import dictionaries, locale_defs, unit_arms
    from tests.strategies.dictionary import arm_coverage, locale_keys
"""

from .dictionary import (
    BINDING_NAMES,
    LANGUAGE_NAMES,
    RAW_CODES,
    REGION_NAMES,
    arm_bodies,
    arm_coverage,
    arm_patterns,
    dictionaries,
    first_match,
    item_names,
    locale_defs,
    locale_keys,
    pattern_matches,
    raw_bodies,
    string_bodies,
    trans_units,
    unit_arms,
)

__all__ = [
    "BINDING_NAMES",
    "LANGUAGE_NAMES",
    "RAW_CODES",
    "REGION_NAMES",
    "arm_bodies",
    "arm_coverage",
    "arm_patterns",
    "dictionaries",
    "first_match",
    "item_names",
    "locale_defs",
    "locale_keys",
    "pattern_matches",
    "raw_bodies",
    "string_bodies",
    "trans_units",
    "unit_arms",
]

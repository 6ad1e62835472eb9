"""Semantic analysis of parsed dictionaries.

Pattern resolution, per-unit usage tracking and the exhaustiveness checker
that runs between parsing and code generation.

Python 3.13+.
"""

from .checker import CheckResult, DictChecker, UnitPath, check
from .patterns import (
    AnyLocale,
    LangCase,
    RegionBinding,
    RegionCase,
    ResolvedPattern,
    pattern_text,
    resolve_pattern,
)
from .usage import PatternUsage, UsageNode

__all__ = [
    "AnyLocale",
    "CheckResult",
    "DictChecker",
    "LangCase",
    "PatternUsage",
    "RegionBinding",
    "RegionCase",
    "ResolvedPattern",
    "UnitPath",
    "UsageNode",
    "check",
    "pattern_text",
    "resolve_pattern",
]

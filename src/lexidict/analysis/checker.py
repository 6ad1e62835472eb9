"""Pattern exhaustiveness and consistency checker.

Runs between parsing and code generation. For each translation unit:

1. Parameter names are checked for duplicates and reserved words.
2. Every arm pattern is resolved against the locale block, so an unknown
   language is reported regardless of where its arm sits.
3. Units with a custom return type must use raw bodies only.
4. Arms are replayed in order on a fresh PatternUsage tree. An arm that is
   already covered is unreachable.
5. A typed unit must be exhaustive. A default-typed unit may not be; it is
   recorded as non-exhaustive and reported as a warning, and the generator
   adds a missing-translation fallback for it.

Errors raise DictCheckError immediately. Warnings are collected into the
returned CheckResult.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import builtins
import keyword
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from lexidict.constants import LOCALE_ATTRIBUTE, LOCALE_TYPE_NAME
from lexidict.diagnostics import Diagnostic, DictCheckError, ErrorTemplate
from lexidict.runtime.locale import LocaleBase
from lexidict.syntax.ast import Dict, Identifier, LocaleDef, Mod, RawExpression, TransUnit

from .patterns import (
    AnyLocale,
    RegionBinding,
    ResolvedPattern,
    pattern_text,
    resolve_pattern,
)
from .usage import PatternUsage

__all__ = ["CheckResult", "DictChecker", "UnitPath", "check"]

logger = logging.getLogger(__name__)

# Module path plus unit name, e.g. ("errors", "not_found").
type UnitPath = tuple[str, ...]

# Dispatch methods and module attributes share one namespace with `locale`.
_RESERVED_MEMBER_NAMES: frozenset[str] = frozenset({LOCALE_ATTRIBUTE})

# Parameters are spliced after `self`.
_RESERVED_PARAM_NAMES: frozenset[str] = frozenset({"self"})

# Every region-bearing variant dataclass has a `region` field; a variant
# registered under that name would become its default.
_RESERVED_LANG_NAMES: frozenset[str] = frozenset({"region"})


@dataclass(frozen=True, slots=True)
class CheckResult:
    """Outcome of a successful check.

    Attributes:
        warnings: Warning diagnostics, in source order
        non_exhaustive: Paths of units that need a missing-translation fallback
    """

    warnings: tuple[Diagnostic, ...] = ()
    non_exhaustive: frozenset[UnitPath] = field(default_factory=frozenset)

    def is_exhaustive(self, path: UnitPath) -> bool:
        """Whether the unit at `path` covers every locale."""
        return path not in self.non_exhaustive

    @property
    def warning_count(self) -> int:
        return len(self.warnings)


def _generated_type_names(locale_def: LocaleDef) -> set[str]:
    names = {lang.region_type_name for lang in locale_def.langs if lang.has_regions}
    names.add(LOCALE_TYPE_NAME)
    return names


def _qualified(path: UnitPath) -> str:
    return ".".join(path)


def _reserved_reason(name: str) -> str | None:
    """Why `name` cannot be a Python attribute or parameter, if it cannot."""
    if keyword.iskeyword(name):
        return "it is a Python keyword"
    if name.startswith("__") and name.endswith("__"):
        return "dunder names are reserved"
    return None


class DictChecker:
    """Semantic checker for parsed dictionaries.

    Stateless: one instance can check any number of dictionaries.

    Example:
        >>> result = DictChecker().check(parse_dict('''
        ...     enum Locale { De, En }
        ...     unit greet { En => "Hello" }
        ... '''))
        >>> result.non_exhaustive
        frozenset({('greet',)})
        >>> result.warnings[0].code.name
        'MISSING_TRANSLATION'
    """

    __slots__ = ()

    def check(self, dictionary: Dict) -> CheckResult:
        """Check a dictionary.

        Raises:
            DictCheckError: On the first semantic error
        """
        self._check_locale_names(dictionary.locale_def)

        warnings: list[Diagnostic] = []
        non_exhaustive: set[UnitPath] = set()
        self._check_scope((), dictionary.modules, dictionary.trans_units)
        for path, unit in dictionary.iter_units():
            self._check_unit(
                (*path, unit.name.name), unit, dictionary.locale_def, warnings, non_exhaustive
            )

        logger.debug(
            "Checked %d units: %d non-exhaustive, %d warnings",
            sum(1 for _ in dictionary.iter_units()),
            len(non_exhaustive),
            len(warnings),
        )
        return CheckResult(warnings=tuple(warnings), non_exhaustive=frozenset(non_exhaustive))

    # ------------------------------------------------------------------
    # Names
    # ------------------------------------------------------------------

    @staticmethod
    def _check_locale_names(locale_def: LocaleDef) -> None:
        for lang in locale_def.langs:
            name = lang.name.name
            reason = _reserved_reason(name)
            if reason is None and hasattr(LocaleBase, name):
                reason = "it is an attribute of the generated Locale type"
            if reason is None and name in _RESERVED_LANG_NAMES:
                reason = "it is the region field of generated Locale variants"
            if reason is not None:
                raise DictCheckError(
                    ErrorTemplate.invalid_name("language", name, reason, lang.name.span)
                )
            for region in lang.regions:
                reason = _reserved_reason(region.name)
                if reason is None and region.name.startswith("_"):
                    reason = "region names cannot start with '_'"
                if reason is not None:
                    raise DictCheckError(
                        ErrorTemplate.invalid_name("region", region.name, reason, region.span)
                    )

    def _check_scope(
        self, path: tuple[str, ...], modules: tuple[Mod, ...], units: tuple[TransUnit, ...]
    ) -> None:
        """Check item names of one module scope, then recurse into submodules.

        Units and modules of one scope become attributes of the same
        dispatch type, so they share a namespace.
        """
        seen: set[str] = set()
        items: Iterable[tuple[str, Identifier]] = [
            *(("unit", unit.name) for unit in units),
            *(("module", module.name) for module in modules),
        ]
        for kind, name in items:
            reason = _reserved_reason(name.name)
            if reason is None and name.name in _RESERVED_MEMBER_NAMES:
                reason = "it is reserved for the dispatch type's locale"
            if reason is not None:
                raise DictCheckError(ErrorTemplate.invalid_name(kind, name.name, reason, name.span))
            if name.name in seen:
                raise DictCheckError(
                    ErrorTemplate.duplicate_item(kind, _qualified((*path, name.name)), name.span)
                )
            seen.add(name.name)

        for module in modules:
            self._check_scope((*path, module.name.name), module.modules, module.trans_units)

    @staticmethod
    def _check_params(path: UnitPath, unit: TransUnit, locale_def: LocaleDef) -> None:
        seen: set[str] = set()
        for param in unit.param_list:
            name = param.name.name
            reason = _reserved_reason(name)
            if reason is None and name in _RESERVED_PARAM_NAMES:
                reason = "it names the dispatch instance"
            if reason is None and name in _generated_type_names(locale_def):
                reason = "it shadows a generated type"
            if reason is not None:
                raise DictCheckError(
                    ErrorTemplate.invalid_name("parameter", name, reason, param.name.span)
                )
            if name in seen:
                raise DictCheckError(
                    ErrorTemplate.duplicate_parameter(name, _qualified(path), param.name.span)
                )
            seen.add(name)

    @staticmethod
    def _check_binding(
        pattern: ResolvedPattern, param_names: set[str], locale_def: LocaleDef, unit: str
    ) -> None:
        """Bindings become capture patterns in generated `match` statements.

        A capture makes its name local to the whole method, so it must not
        hide the Locale or region types that the other cases refer to, nor a
        builtin that an earlier arm may call.
        """
        if not isinstance(pattern, AnyLocale | RegionBinding) or pattern.binding is None:
            return
        name = pattern.binding
        reason = _reserved_reason(name)
        if reason is None and name in _RESERVED_PARAM_NAMES:
            reason = "it names the dispatch instance"
        if reason is None and name in param_names:
            reason = f"it shadows a parameter of unit '{unit}'"
        if reason is None and name in _generated_type_names(locale_def):
            reason = "it shadows a generated type"
        if reason is None and hasattr(builtins, name):
            reason = "it shadows a Python builtin"
        if reason is not None:
            raise DictCheckError(
                ErrorTemplate.invalid_name("binding", name, reason, pattern.pattern.span)
            )

    # ------------------------------------------------------------------
    # Units
    # ------------------------------------------------------------------

    def _check_unit(
        self,
        path: UnitPath,
        unit: TransUnit,
        locale_def: LocaleDef,
        warnings: list[Diagnostic],
        non_exhaustive: set[UnitPath],
    ) -> None:
        qualified = _qualified(path)
        self._check_params(path, unit, locale_def)

        resolved: list[ResolvedPattern] = [
            resolve_pattern(arm.pattern, locale_def, unit=qualified) for arm in unit.body.arms
        ]

        if unit.has_custom_return_type:
            for arm in unit.body.arms:
                if not isinstance(arm.body, RawExpression):
                    raise DictCheckError(
                        ErrorTemplate.typed_unit_requires_raw_body(
                            qualified, pattern_text(arm.pattern), arm.pattern.span
                        )
                    )

        param_names = {param.name.name for param in unit.param_list}
        for pattern in resolved:
            self._check_binding(pattern, param_names, locale_def, qualified)

        usage = PatternUsage(locale_def)
        for pattern in resolved:
            if not usage.use(pattern):
                raise DictCheckError(
                    ErrorTemplate.unreachable_pattern(
                        pattern_text(pattern.pattern), qualified, pattern.pattern.span
                    )
                )
            if isinstance(pattern, AnyLocale) and pattern.binding and pattern.binding[0].isupper():
                warnings.append(
                    ErrorTemplate.suspicious_binding(pattern.binding, qualified, pattern.pattern.span)
                )

        if usage.is_exhausted:
            return

        if unit.has_custom_return_type:
            raise DictCheckError(
                ErrorTemplate.missing_fallback_for_typed_unit(qualified, unit.name.span)
            )

        logger.debug("Unit %s does not cover %s", qualified, usage.uncovered())
        non_exhaustive.add(path)
        warnings.append(ErrorTemplate.missing_translation(qualified, unit.name.span))


def check(dictionary: Dict) -> CheckResult:
    """Check a parsed dictionary.

    Returns:
        CheckResult with warnings and the set of non-exhaustive units

    Raises:
        DictCheckError: On the first semantic error
    """
    return DictChecker().check(dictionary)

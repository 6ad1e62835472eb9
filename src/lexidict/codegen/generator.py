"""Python code generator for checked dictionaries.

Lowers a Dict AST into the source of a Python module:

    class EnRegion(_enum.Enum): ...           one enum per region-bearing language
    class Locale(_LocaleBase): ...            tagged union of languages
    @Locale.variant("En", region_type=EnRegion)
    class _Locale_En(Locale): region: ...     one frozen dataclass per language
    class _Module1(_DispatchBase): ...        one dispatch type per module
    class Dict(_DispatchBase): ...            root dispatch type
    def new(locale): ...                      constructor

Module dispatch types live in an arena indexed by position. Nested modules
come first, so every type is defined before the type holding it; the root
is always last and is named `Dict`. Each type carries a qualified display
name (`Dict.errors.http`) instead of a concatenated class name.

Every translation unit becomes a method whose body is one `match
self.locale:` statement with a `case` per arm, in arm order. Units the
checker reported as non-exhaustive get a trailing `case _:` returning the
missing-translation value.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import ast
import logging
from dataclasses import dataclass

from lexidict.analysis.checker import CheckResult, UnitPath
from lexidict.analysis.patterns import (
    AnyLocale,
    LangCase,
    RegionBinding,
    RegionCase,
    ResolvedPattern,
    resolve_pattern,
)
from lexidict.config import CompilerConfig
from lexidict.constants import (
    CONSTRUCTOR_NAME,
    DEFAULT_RETURN_TYPE,
    DISPATCH_TYPE_NAME,
    LOCALE_ATTRIBUTE,
    LOCALE_TYPE_NAME,
    MODULE_TYPE_PREFIX,
)
from lexidict.diagnostics import ErrorTemplate, GenerationError, TemplateError
from lexidict.syntax.ast import (
    Dict,
    LocaleDef,
    LocaleLang,
    Mod,
    RawExpression,
    StringTemplate,
    TransUnit,
)

from .template import compile_template, parse_placeholder
from .writer import CodeWriter

__all__ = ["DictGenerator", "GeneratedDictionary", "generate", "variant_class_name"]

logger = logging.getLogger(__name__)

_RUNTIME_MODULE = "lexidict.runtime"


@dataclass(frozen=True, slots=True)
class GeneratedDictionary:
    """Result of code generation.

    Attributes:
        source: Python module source
        unit_count: Number of generated unit methods
        dispatch_types: Qualified names of the dispatch types, root last
    """

    source: str
    unit_count: int
    dispatch_types: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class _DispatchType:
    """Arena entry: one module scope.

    Attributes:
        path: Module path, () for the root
        fields: (attribute name, arena index) per nested module
        units: Units declared in this scope
    """

    path: tuple[str, ...]
    fields: tuple[tuple[str, int], ...]
    units: tuple[TransUnit, ...]

    @property
    def qualname(self) -> str:
        return ".".join((DISPATCH_TYPE_NAME, *self.path))


def variant_class_name(lang: LocaleLang) -> str:
    """Module-level name of a language variant class, e.g. `_Locale_En`."""
    return f"_{LOCALE_TYPE_NAME}_{lang.name.name}"


def _type_name(arena: list[_DispatchType], index: int) -> str:
    if not arena[index].path:
        return DISPATCH_TYPE_NAME
    return f"{MODULE_TYPE_PREFIX}{index + 1}"


def _case_pattern(pattern: ResolvedPattern) -> str:
    """Python `case` pattern for a resolved arm pattern."""
    match pattern:
        case AnyLocale(binding=None):
            return "_"
        case AnyLocale(binding=binding):
            return str(binding)
        case LangCase(lang=lang):
            return f"{LOCALE_TYPE_NAME}.{lang.name.name}()"
        case RegionCase(lang=lang, region=region):
            return f"{LOCALE_TYPE_NAME}.{lang.name.name}({lang.region_type_name}.{region})"
        case RegionBinding(lang=lang, binding=binding):
            return f"{LOCALE_TYPE_NAME}.{lang.name.name}({binding or '_'})"


class DictGenerator:
    """Generates the Python module for one checked dictionary.

    Single-use: holds the writer and the dispatch-type arena of one run.
    """

    __slots__ = ("_arena", "_check_result", "_config", "_dictionary", "_units", "_writer")

    def __init__(
        self, dictionary: Dict, check_result: CheckResult, config: CompilerConfig
    ) -> None:
        self._dictionary = dictionary
        self._check_result = check_result
        self._config = config
        self._writer = CodeWriter()
        self._arena: list[_DispatchType] = []
        self._units = 0

    def generate(self, *, source_name: str | None = None) -> GeneratedDictionary:
        """Generate the module source.

        Raises:
            GenerationError: TEMPLATE_FAILED or INVALID_RAW_BODY
        """
        self._add_scope((), self._dictionary.modules, self._dictionary.trans_units)
        locale_def = self._dictionary.locale_def

        self._emit_header(locale_def, source_name)
        for lang in locale_def.langs:
            if lang.has_regions:
                self._emit_region_enum(lang)
        self._emit_locale(locale_def)
        for index in range(len(self._arena)):
            self._emit_dispatch_type(index)
        self._emit_constructor()

        source = self._writer.getvalue()
        logger.debug(
            "Generated %d lines: %d units in %d dispatch types",
            self._writer.line_count,
            self._units,
            len(self._arena),
        )
        return GeneratedDictionary(
            source=source,
            unit_count=self._units,
            dispatch_types=tuple(entry.qualname for entry in self._arena),
        )

    # ------------------------------------------------------------------
    # Arena
    # ------------------------------------------------------------------

    def _add_scope(
        self, path: tuple[str, ...], modules: tuple[Mod, ...], units: tuple[TransUnit, ...]
    ) -> int:
        fields = tuple(
            (
                module.name.name,
                self._add_scope((*path, module.name.name), module.modules, module.trans_units),
            )
            for module in modules
        )
        self._arena.append(_DispatchType(path=path, fields=fields, units=units))
        return len(self._arena) - 1

    # ------------------------------------------------------------------
    # Locale types
    # ------------------------------------------------------------------

    def _emit_header(self, locale_def: LocaleDef, source_name: str | None) -> None:
        w = self._writer
        if self._config.emit_header:
            origin = f" from {source_name}" if source_name else ""
            w.line(f"# Generated by lexidict{origin}. Do not edit.")
            w.blank()
        w.line("from __future__ import annotations")
        w.blank()
        w.line("import dataclasses as _dataclasses")
        w.line("import enum as _enum")
        w.blank()
        w.line(f"from {_RUNTIME_MODULE} import DispatchBase as _DispatchBase")
        w.line(f"from {_RUNTIME_MODULE} import LocaleBase as _LocaleBase")
        w.blank()
        exported = sorted(
            [
                DISPATCH_TYPE_NAME,
                LOCALE_TYPE_NAME,
                CONSTRUCTOR_NAME,
                *(lang.region_type_name for lang in locale_def.langs if lang.has_regions),
            ]
        )
        w.line(f"__all__ = [{', '.join(repr(name) for name in exported)}]")

    def _emit_region_enum(self, lang: LocaleLang) -> None:
        w = self._writer
        w.blank(2)
        w.line(f"class {lang.region_type_name}(_enum.Enum):")
        with w.indented():
            for region in lang.region_names:
                w.line(f"{region} = {region!r}")

    def _emit_locale(self, locale_def: LocaleDef) -> None:
        w = self._writer
        w.blank(2)
        w.line(f"class {LOCALE_TYPE_NAME}(_LocaleBase):")
        with w.indented():
            w.line("__slots__ = ()")

        for lang in locale_def.langs:
            name = lang.name.name
            w.blank(2)
            if lang.has_regions:
                w.line(
                    f"@{LOCALE_TYPE_NAME}.variant({name!r}, region_type={lang.region_type_name})"
                )
            else:
                w.line(f"@{LOCALE_TYPE_NAME}.variant({name!r})")
            w.line("@_dataclasses.dataclass(frozen=True, slots=True, repr=False)")
            w.line(f"class {variant_class_name(lang)}({LOCALE_TYPE_NAME}):")
            with w.indented():
                if lang.has_regions:
                    w.line(f"region: {lang.region_type_name}")
                else:
                    w.line("pass")

    # ------------------------------------------------------------------
    # Dispatch types
    # ------------------------------------------------------------------

    def _emit_dispatch_type(self, index: int) -> None:
        w = self._writer
        entry = self._arena[index]
        w.blank(2)
        w.line(f"class {_type_name(self._arena, index)}(_DispatchBase):")
        with w.indented():
            if entry.path:
                w.line(f"__qualname__ = {entry.qualname!r}")
            w.line(f"__slots__ = {tuple(name for name, _ in entry.fields)!r}")
            w.line(f"__locale_type__ = {LOCALE_TYPE_NAME}")

            if entry.fields:
                w.blank()
                w.line(f"def __init__(self, {LOCALE_ATTRIBUTE}: {LOCALE_TYPE_NAME}) -> None:")
                with w.indented():
                    w.line(f"super().__init__({LOCALE_ATTRIBUTE})")
                    for name, child in entry.fields:
                        w.line(
                            f"self.{name} = {_type_name(self._arena, child)}({LOCALE_ATTRIBUTE})"
                        )

            for unit in entry.units:
                w.blank()
                self._emit_unit((*entry.path, unit.name.name), unit)

    def _emit_unit(self, path: UnitPath, unit: TransUnit) -> None:
        w = self._writer
        qualified = ".".join(path)
        params = "".join(f", {param.name.name}: {param.ty.text}" for param in unit.param_list)
        returns = unit.return_type.text if unit.return_type is not None else DEFAULT_RETURN_TYPE
        locale_def = self._dictionary.locale_def

        w.line(f"def {unit.name.name}(self{params}) -> {returns}:")
        with w.indented():
            w.line(f"match self.{LOCALE_ATTRIBUTE}:")
            with w.indented():
                for arm in unit.body.arms:
                    pattern = resolve_pattern(arm.pattern, locale_def, unit=qualified)
                    w.line(f"case {_case_pattern(pattern)}:")
                    with w.indented():
                        match arm.body:
                            case StringTemplate():
                                self._emit_string_body(qualified, arm.body)
                            case RawExpression():
                                self._emit_raw_body(qualified, arm.body)
                if not self._check_result.is_exhaustive(path):
                    w.line("case _:")
                    with w.indented():
                        w.line(f"return {self._config.missing_translation!r}")
        self._units += 1

    def _emit_string_body(self, unit: str, body: StringTemplate) -> None:
        try:
            template = compile_template(body.text, span=body.span)
            expressions = [parse_placeholder(e, span=body.span) for e in template.expressions]
        except TemplateError as exc:
            if exc.diagnostic is None:
                raise
            raise GenerationError(ErrorTemplate.template_failed(unit, exc.diagnostic)) from exc

        if not template.has_placeholders:
            self._writer.line(f"return {template.skeleton!r}")
            return
        arguments = ", ".join(f"({expression})" for expression in expressions)
        self._writer.line(f"return {template.format_string!r}.format({arguments})")

    def _emit_raw_body(self, unit: str, body: RawExpression) -> None:
        w = self._writer
        code = body.code
        try:
            ast.parse(code, mode="eval")
        except SyntaxError:
            pass
        else:
            w.line("return (")
            with w.indented():
                w.block(code)
            w.line(")")
            return

        try:
            module = ast.parse(code, mode="exec")
        except SyntaxError as exc:
            raise GenerationError(
                ErrorTemplate.invalid_raw_body(unit, f"{exc.msg} (line {exc.lineno})", body.span)
            ) from exc
        if not module.body:
            raise GenerationError(ErrorTemplate.invalid_raw_body(unit, "body is empty", body.span))
        w.block(code)

    def _emit_constructor(self) -> None:
        w = self._writer
        w.blank(2)
        w.line(
            f"def {CONSTRUCTOR_NAME}({LOCALE_ATTRIBUTE}: {LOCALE_TYPE_NAME}) "
            f"-> {DISPATCH_TYPE_NAME}:"
        )
        with w.indented():
            w.line(f'"""Create the dictionary for `{LOCALE_ATTRIBUTE}`."""')
            w.line(f"return {DISPATCH_TYPE_NAME}({LOCALE_ATTRIBUTE})")


def generate(
    dictionary: Dict,
    check_result: CheckResult,
    *,
    config: CompilerConfig | None = None,
    source_name: str | None = None,
) -> GeneratedDictionary:
    """Generate the Python module for a checked dictionary.

    Args:
        dictionary: Parsed dictionary
        check_result: Result of checking `dictionary`
        config: Compiler configuration (default: CompilerConfig())
        source_name: Name shown in the generated header comment

    Raises:
        GenerationError: If a string body or raw body cannot be lowered
    """
    generator = DictGenerator(dictionary, check_result, config or CompilerConfig())
    return generator.generate(source_name=source_name)

"""Serialize dictionary ASTs back to dictionary source.

Renders the canonical form of a Dict or Mod. Useful for:
- Formatters
- Property-based testing (roundtrip: parse -> serialize -> parse)
- Writing module trees built in memory to disk

Python 3.13+.
"""

import textwrap
from pathlib import PurePosixPath

from lexidict.constants import MODULE_SUFFIX, PACKAGE_MODULE_STEM

from .ast import (
    ArmBody,
    ArmPattern,
    Dict,
    LangPattern,
    LocaleDef,
    Mod,
    RawExpression,
    RegionPattern,
    StringTemplate,
    TransUnit,
    Underscore,
)

__all__ = ["DictSerializer", "SerializationValidationError", "serialize", "serialize_tree"]

_INDENT = "    "


class SerializationValidationError(ValueError):
    """Raised when an AST cannot be rendered as valid dictionary source.

    Only programmatically constructed ASTs can trigger this:
    - Names that are not identifiers
    - Empty locale block or empty region list written as braces
    """


def _validate_name(name: str, context: str) -> None:
    if not name.isidentifier():
        msg = f"{context} '{name}' is not a valid identifier"
        raise SerializationValidationError(msg)


def _validate_dict(dictionary: Dict) -> None:
    if not dictionary.locale_def.langs:
        msg = "Locale definition must declare at least one language"
        raise SerializationValidationError(msg)
    for lang in dictionary.locale_def.langs:
        _validate_name(lang.name.name, "Language")
        for region in lang.regions:
            _validate_name(region.name, "Region")
    _validate_items(dictionary.modules, dictionary.trans_units)


def _validate_items(modules: tuple[Mod, ...], units: tuple[TransUnit, ...]) -> None:
    for unit in units:
        _validate_name(unit.name.name, "Unit")
        for param in unit.param_list:
            _validate_name(param.name.name, "Parameter")
    for module in modules:
        _validate_name(module.name.name, "Module")
        _validate_items(module.modules, module.trans_units)


class DictSerializer:
    """Dictionary AST serializer.

    Example:
        >>> serializer = DictSerializer()
        >>> print(serializer.serialize(parse_dict("enum Locale { De } unit a { _ => 'x' }")))
        enum Locale {
            De,
        }
        <BLANKLINE>
        unit a {
            _ => 'x',
        }
    """

    def serialize(self, node: Dict | Mod, *, validate: bool = False) -> str:
        """Serialize a Dict (locale block plus items) or a Mod (items only).

        Args:
            node: Root dictionary or module to serialize
            validate: Check names before rendering

        Raises:
            SerializationValidationError: If validate=True and the AST is invalid
        """
        if validate:
            if isinstance(node, Dict):
                _validate_dict(node)
            else:
                _validate_items(node.modules, node.trans_units)

        blocks: list[str] = []
        if isinstance(node, Dict):
            blocks.append(self._serialize_locale_def(node.locale_def))
        blocks.extend(f"mod {module.name.name};" for module in node.modules)
        blocks.extend(self._serialize_unit(unit) for unit in node.trans_units)
        return "\n\n".join(blocks) + "\n" if blocks else ""

    def _serialize_locale_def(self, locale_def: LocaleDef) -> str:
        lines = ["enum Locale {"]
        for lang in locale_def.langs:
            if lang.regions:
                regions = ", ".join(region.name for region in lang.regions)
                lines.append(f"{_INDENT}{lang.name.name} {{ {regions} }},")
            else:
                lines.append(f"{_INDENT}{lang.name.name},")
        lines.append("}")
        return "\n".join(lines)

    def _serialize_unit(self, unit: TransUnit) -> str:
        header = f"unit {unit.name.name}"
        if unit.params is not None:
            params = ", ".join(f"{param.name.name}: {param.ty.text}" for param in unit.params)
            header += f"({params})"
        if unit.return_type is not None:
            header += f" -> {unit.return_type.text}"

        lines = [f"{header} {{"]
        for arm in unit.body.arms:
            pattern = self._serialize_pattern(arm.pattern)
            body = self._serialize_body(arm.body)
            lines.append(f"{_INDENT}{pattern} => {body},")
        lines.append("}")
        return "\n".join(lines)

    @staticmethod
    def _serialize_pattern(pattern: ArmPattern) -> str:
        match pattern:
            case Underscore():
                return "_"
            case LangPattern(name=name):
                return name.name
            case RegionPattern(lang=lang, region=region):
                return f"{lang.name}({region.name})"

    @staticmethod
    def _serialize_body(body: ArmBody) -> str:
        match body:
            case StringTemplate(text=text):
                return repr(text)
            case RawExpression(code=code):
                if not code:
                    return "{}"
                if "\n" not in code and "#" not in code:
                    return f"{{ {code} }}"
                inner = textwrap.indent(code, _INDENT * 2)
                return f"{{\n{inner}\n{_INDENT}}}"


def serialize(node: Dict | Mod, *, validate: bool = False) -> str:
    """Serialize a Dict or Mod to dictionary source.

    Args:
        node: AST to serialize
        validate: Check names before rendering

    Returns:
        Dictionary source text
    """
    return DictSerializer().serialize(node, validate=validate)


def serialize_tree(dictionary: Dict, *, validate: bool = False) -> tuple[str, dict[str, str]]:
    """Serialize a Dict together with the sources of all its modules.

    Every module is written package-style (`name/__init__.lexi`), so the
    returned mapping can be fed to MappingModuleResolver or written below
    the root file's directory.

    Returns:
        (root source, {relative module path: module source})
    """
    serializer = DictSerializer()
    sources: dict[str, str] = {}

    def collect(modules: tuple[Mod, ...], base_dir: PurePosixPath) -> None:
        for module in modules:
            module_dir = base_dir / module.name.name
            location = module_dir / f"{PACKAGE_MODULE_STEM}{MODULE_SUFFIX}"
            sources[location.as_posix()] = serializer.serialize(module, validate=validate)
            collect(module.modules, module_dir)

    root = serializer.serialize(dictionary, validate=validate)
    collect(dictionary.modules, PurePosixPath("."))
    return root, sources

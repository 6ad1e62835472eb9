"""Dictionary parser.

Builds a :class:`~lexidict.syntax.ast.Dict` from a token stream. The
grammar is small enough for a hand-written recursive descent parser that
consumes tokens exclusively through :class:`~lexidict.syntax.tokens.TokenCursor`:

    Dict        := LocaleBlock Item*
    LocaleBlock := 'enum' 'Locale' '{' LangDecl (',' LangDecl)* ','? '}'
    LangDecl    := Ident ( '{' Ident (',' Ident)* ','? '}' )?
    Item        := UnitDecl | ModDecl
    ModDecl     := 'mod' Ident ';'
    UnitDecl    := 'unit' Ident ParamList? ('->' Type)? '{' Arm* '}'
    ParamList   := '(' (Ident ':' Type (',' Ident ':' Type)* ','?)? ')'
    Arm         := Pattern '=>' Body ','?
    Pattern     := '_' | Ident | Ident '(' Ident ')'
    Body        := StringLiteral | '{' python code '}'

Types and raw bodies are never parsed as Python here; they are recovered as
verbatim source slices through token spans.

`mod name;` declarations are resolved through a ModuleResolver and parsed
recursively. Nesting is bounded by a DepthGuard and module cycles are
detected by resolver key.

Parsing fails fast: the first error raises DictSyntaxError.
"""

from __future__ import annotations

import logging
import textwrap
from ast import literal_eval
from dataclasses import dataclass
from pathlib import PurePath, PurePosixPath

from lexidict.config import CompilerConfig
from lexidict.core.depth_guard import DepthGuard
from lexidict.diagnostics import DictSyntaxError, ErrorTemplate, ModuleResolutionError
from lexidict.loading import MappingModuleResolver, ModuleResolver

from .ast import (
    ArmBody,
    ArmPattern,
    Dict,
    Identifier,
    LangPattern,
    LocaleDef,
    LocaleLang,
    Mod,
    RawExpression,
    RegionPattern,
    StringTemplate,
    TransUnit,
    Ty,
    UnitArm,
    UnitBody,
    UnitParam,
    Underscore,
)
from .lexer import tokenize
from .tokens import (
    Delimiter,
    Group,
    Ident,
    Literal,
    Punct,
    TokenCursor,
    TokenStream,
    token_text,
)

__all__ = ["DictParser", "parse_dict", "raw_body_text"]

logger = logging.getLogger(__name__)

# String prefixes accepted for string bodies. Formatted and bytes literals
# are rejected: placeholders are the dictionary's own templating.
_PLAIN_STRING_PREFIXES: frozenset[str] = frozenset({"", "r", "u"})

_BODY_EXPECTED = "string literal or '{'"


def raw_body_text(group: Group) -> str:
    """Verbatim code between the braces of a raw body, normalized.

    The first line keeps its column in the source so statement blocks that
    start on the brace line dedent consistently with the lines below. Blank
    leading and trailing lines are dropped and common indentation removed.
    """
    text = group.inner_text
    source = group.span.source
    if source is not None:
        _, column = source.line_col(group.span.start + 1)
        text = " " * (column - 1) + text
    lines = text.splitlines()
    while lines and not lines[0].strip():
        lines.pop(0)
    while lines and not lines[-1].strip():
        lines.pop()
    return textwrap.dedent("\n".join(lines)).rstrip()


def _to_identifier(token: Ident) -> Identifier:
    return Identifier(token.name, token.span)


def _expect_name(cursor: TokenCursor, expected: str) -> Identifier:
    """Consume an identifier that names something (`_` is not a name)."""
    token = cursor.expect_ident(expected)
    if token.name == "_":
        raise DictSyntaxError(ErrorTemplate.unexpected_token(expected, token.name, token.span))
    return _to_identifier(token)


def _is_group(token: object, delimiter: Delimiter) -> bool:
    return isinstance(token, Group) and token.delimiter is delimiter


@dataclass(frozen=True, slots=True)
class _ModuleContext:
    """Where the items currently being parsed live.

    Attributes:
        base_dir: Directory nested `mod` declarations resolve against
        visiting: Resolver keys of every source on the current module path
        guard: Shared nesting depth guard
    """

    base_dir: PurePosixPath
    visiting: frozenset[str]
    guard: DepthGuard


class DictParser:
    """Recursive descent parser for dictionary sources.

    The parser holds configuration only; all per-parse state lives in
    arguments, so one instance can be reused.

    Example:
        >>> parser = DictParser(PathModuleResolver(Path("i18n")))
        >>> dictionary = parser.parse_source(Path("i18n/app.lexi").read_text())
        >>> [unit.name.name for _, unit in dictionary.iter_units()]
        ['greet', 'farewell']
    """

    __slots__ = ("_config", "_resolver")

    def __init__(
        self,
        resolver: ModuleResolver | None = None,
        *,
        config: CompilerConfig | None = None,
    ) -> None:
        """Initialize parser.

        Args:
            resolver: Module source resolver; defaults to an empty in-memory
                resolver, so any `mod` declaration fails with MODULE_NOT_FOUND
            config: Compiler configuration (source size and depth limits)
        """
        self._resolver: ModuleResolver = (
            resolver if resolver is not None else MappingModuleResolver({})
        )
        self._config = config if config is not None else CompilerConfig()

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def parse_source(
        self,
        text: str,
        name: str = "<string>",
        path: PurePath | None = None,
        *,
        base_dir: PurePosixPath = PurePosixPath("."),
        key: str | None = None,
    ) -> Dict:
        """Lex and parse a root dictionary source.

        Args:
            text: Source text
            name: Display name for diagnostics
            path: Filesystem path of the source, if any
            base_dir: Directory (relative to the resolver root) that
                top-level `mod` declarations resolve against
            key: Resolver key of the root source, for cycle detection

        Raises:
            DictSyntaxError: On the first syntax or module error
        """
        return self.parse(self._tokenize(text, name, path), base_dir=base_dir, key=key)

    def parse(
        self,
        stream: TokenStream,
        *,
        base_dir: PurePosixPath = PurePosixPath("."),
        key: str | None = None,
    ) -> Dict:
        """Parse a root token stream into a Dict."""
        context = _ModuleContext(
            base_dir=base_dir,
            visiting=frozenset({key}) if key is not None else frozenset(),
            guard=DepthGuard(max_depth=self._config.max_module_depth),
        )
        cursor = stream.cursor()
        locale_def = self._parse_locale_def(cursor)
        modules, units = self._parse_items(cursor, context)
        dictionary = Dict(locale_def=locale_def, modules=modules, trans_units=units)
        logger.debug(
            "Parsed dictionary %s: %d languages, %d modules, %d top-level units",
            stream.source.name if stream.source is not None else "<tokens>",
            len(locale_def.langs),
            len(modules),
            len(units),
        )
        return dictionary

    def _tokenize(self, text: str, name: str, path: PurePath | None) -> TokenStream:
        limit = self._config.max_source_size
        if len(text) > limit:
            raise DictSyntaxError(ErrorTemplate.source_too_large(len(text), limit, name))
        return tokenize(text, name, path)

    # ------------------------------------------------------------------
    # Locale block
    # ------------------------------------------------------------------

    def _parse_locale_def(self, cursor: TokenCursor) -> LocaleDef:
        cursor.expect_keyword("enum")
        cursor.expect_keyword("Locale")
        block = cursor.expect_group(Delimiter.BRACE).cursor()

        langs: list[LocaleLang] = []
        seen: set[str] = set()
        # An empty block is rejected: expect_ident reports UNEXPECTED_EOF.
        while True:
            name = _expect_name(block, "language name")
            if name.name in seen:
                raise DictSyntaxError(
                    ErrorTemplate.duplicate_locale_name("language", name.name, name.span)
                )
            seen.add(name.name)

            regions: tuple[Identifier, ...] = ()
            token = block.lookahead()
            if isinstance(token, Group) and token.delimiter is Delimiter.BRACE:
                block.next()
                regions = self._parse_regions(token)
            langs.append(LocaleLang(name=name, regions=regions))

            if block.at_end():
                break
            block.expect_punct(",")
            if block.at_end():
                break

        return LocaleDef(langs=tuple(langs))

    def _parse_regions(self, group: Group) -> tuple[Identifier, ...]:
        cursor = group.cursor()
        regions: list[Identifier] = []
        seen: set[str] = set()
        while True:
            region = _expect_name(cursor, "region name")
            if region.name in seen:
                raise DictSyntaxError(
                    ErrorTemplate.duplicate_locale_name("region", region.name, region.span)
                )
            seen.add(region.name)
            regions.append(region)
            if cursor.at_end():
                break
            cursor.expect_punct(",")
            if cursor.at_end():
                break
        return tuple(regions)

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------

    def _parse_items(
        self, cursor: TokenCursor, context: _ModuleContext
    ) -> tuple[tuple[Mod, ...], tuple[TransUnit, ...]]:
        modules: list[Mod] = []
        units: list[TransUnit] = []
        while not cursor.at_end():
            keyword = cursor.expect_ident("item ('unit' or 'mod')")
            match keyword.name:
                case "unit":
                    units.append(self._parse_unit(cursor))
                case "mod":
                    modules.append(self._parse_module(cursor, context))
                case _:
                    raise DictSyntaxError(
                        ErrorTemplate.unknown_item_keyword(keyword.name, keyword.span)
                    )
        return tuple(modules), tuple(units)

    def _parse_module(self, cursor: TokenCursor, context: _ModuleContext) -> Mod:
        """Parse `mod name;` and the items of the module source it names."""
        name = _expect_name(cursor, "module name")
        cursor.expect_punct(";")

        resolved = self._resolver.resolve(name.name, context.base_dir, span=name.span)
        if resolved.key in context.visiting:
            raise ModuleResolutionError(
                ErrorTemplate.cyclic_module(name.name, resolved.source_name, name.span)
            )

        with context.guard:
            stream = self._tokenize(resolved.text, resolved.source_name, resolved.path)
            child = _ModuleContext(
                base_dir=resolved.base_dir,
                visiting=context.visiting | {resolved.key},
                guard=context.guard,
            )
            modules, units = self._parse_items(stream.cursor(), child)

        logger.debug(
            "Loaded module '%s' from %s (%d units)", name.name, resolved.source_name, len(units)
        )
        return Mod(name=name, modules=modules, trans_units=units)

    # ------------------------------------------------------------------
    # Translation units
    # ------------------------------------------------------------------

    def _parse_unit(self, cursor: TokenCursor) -> TransUnit:
        name = _expect_name(cursor, "unit name")

        params: tuple[UnitParam, ...] | None = None
        token = cursor.lookahead()
        if isinstance(token, Group) and token.delimiter is Delimiter.PARENTHESIS:
            cursor.next()
            params = self._parse_params(token)

        return_type: Ty | None = None
        if cursor.peek_punct_sequence("->"):
            cursor.expect_punct_sequence("->")
            return_type = self._parse_type(cursor, "return type")

        body_group = cursor.expect_group(Delimiter.BRACE)
        return TransUnit(
            name=name,
            params=params,
            return_type=return_type,
            body=self._parse_unit_body(body_group),
        )

    def _parse_params(self, group: Group) -> tuple[UnitParam, ...]:
        cursor = group.cursor()
        params: list[UnitParam] = []
        while not cursor.at_end():
            name = _expect_name(cursor, "parameter name")
            cursor.expect_punct(":")
            params.append(UnitParam(name=name, ty=self._parse_type(cursor, "parameter type")))
            if cursor.at_end():
                break
            cursor.expect_punct(",")
        return tuple(params)

    @staticmethod
    def _parse_type(cursor: TokenCursor, expected: str) -> Ty:
        """Collect tokens up to the next top-level `,` or `{...}` group.

        The type is the verbatim source from the first to the last token.
        """
        first = cursor.peek(expected)
        last = None
        while not cursor.at_end():
            token = cursor.peek()
            if isinstance(token, Punct) and token.char == ",":
                break
            if _is_group(token, Delimiter.BRACE):
                break
            last = cursor.next()
        if last is None:
            raise DictSyntaxError(
                ErrorTemplate.unexpected_token(expected, token_text(first), first.span)
            )
        span = first.span.to(last.span)
        return Ty(text=span.text, span=span)

    def _parse_unit_body(self, group: Group) -> UnitBody:
        cursor = group.cursor()
        arms: list[UnitArm] = []
        while not cursor.at_end():
            pattern = self._parse_pattern(cursor)
            cursor.expect_punct_sequence("=>")
            body = self._parse_arm_body(cursor)
            arms.append(UnitArm(pattern=pattern, body=body))
            # Raw bodies end with a brace, so their comma is optional.
            if isinstance(body, RawExpression):
                cursor.eat_punct(",")
            elif not cursor.at_end():
                cursor.expect_punct(",")
        return UnitBody(arms=tuple(arms), span=group.span)

    @staticmethod
    def _parse_pattern(cursor: TokenCursor) -> ArmPattern:
        token = cursor.expect_ident("pattern")
        if token.name == "_":
            return Underscore(span=token.span)

        group = cursor.lookahead()
        if isinstance(group, Group) and group.delimiter is Delimiter.PARENTHESIS:
            cursor.next()
            inner = group.cursor()
            # `_` is allowed here: En(_) matches any region of En.
            region = inner.expect_ident("region name")
            inner.expect_end("')'")
            return RegionPattern(lang=_to_identifier(token), region=_to_identifier(region))

        return LangPattern(name=_to_identifier(token))

    @staticmethod
    def _parse_arm_body(cursor: TokenCursor) -> ArmBody:
        token = cursor.next(_BODY_EXPECTED)
        match token:
            case Literal() if token.is_string:
                if token.prefix not in _PLAIN_STRING_PREFIXES:
                    raise DictSyntaxError(
                        ErrorTemplate.invalid_string_literal(token.text, token.span)
                    )
                try:
                    value = literal_eval(token.text)
                except (SyntaxError, ValueError) as exc:
                    raise DictSyntaxError(
                        ErrorTemplate.invalid_string_literal(token.text, token.span)
                    ) from exc
                return StringTemplate(text=value, span=token.span)
            case Literal():
                raise DictSyntaxError(ErrorTemplate.invalid_string_literal(token.text, token.span))
            case Group(delimiter=Delimiter.BRACE):
                return RawExpression(code=raw_body_text(token), span=token.span)
            case _:
                raise DictSyntaxError(
                    ErrorTemplate.unexpected_token(_BODY_EXPECTED, token_text(token), token.span)
                )


def parse_dict(
    source: str,
    *,
    name: str = "<string>",
    resolver: ModuleResolver | None = None,
    config: CompilerConfig | None = None,
) -> Dict:
    """Parse dictionary source text.

    Args:
        source: Dictionary source text
        name: Display name for diagnostics
        resolver: Module source resolver for `mod` declarations
        config: Compiler configuration

    Returns:
        Parsed Dict

    Raises:
        DictSyntaxError: On the first syntax or module error

    Example:
        >>> dictionary = parse_dict('''
        ...     enum Locale { De, En }
        ...     unit greet { De => "Hallo", En => "Hello" }
        ... ''')
        >>> dictionary.locale_def.lang_names
        ('De', 'En')
    """
    return DictParser(resolver, config=config).parse_source(source, name)

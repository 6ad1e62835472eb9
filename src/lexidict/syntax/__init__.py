"""Dictionary syntax package.

Provides the lexer, token model, AST definitions, parser and serializer.
Separate from analysis and code generation to enable tooling (formatters,
linters, editor plugins).

Python 3.13+.
"""

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
from .parser import DictParser, parse_dict
from .serializer import SerializationValidationError, serialize, serialize_tree
from .tokens import (
    Delimiter,
    Group,
    Ident,
    Literal,
    Punct,
    SourceFile,
    Spacing,
    Span,
    TokenCursor,
    TokenStream,
    TokenTree,
)

# Note: DictSerializer is intentionally NOT exported.
# Use serialize() / serialize_tree() instead.

__all__ = [
    "ArmBody",
    "ArmPattern",
    "Delimiter",
    "Dict",
    "DictParser",
    "Group",
    "Ident",
    "Identifier",
    "LangPattern",
    "Literal",
    "LocaleDef",
    "LocaleLang",
    "Mod",
    "Punct",
    "RawExpression",
    "RegionPattern",
    "SerializationValidationError",
    "SourceFile",
    "Spacing",
    "Span",
    "StringTemplate",
    "TokenCursor",
    "TokenStream",
    "TokenTree",
    "TransUnit",
    "Ty",
    "UnitArm",
    "UnitBody",
    "UnitParam",
    "Underscore",
    "parse_dict",
    "serialize",
    "serialize_tree",
    "tokenize",
]

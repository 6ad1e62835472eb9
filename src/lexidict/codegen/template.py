"""Template sub-compiler for string bodies.

A string body is literal text with `{expr}` placeholders. compile_template()
splits it into literal segments and placeholder expressions; the generator
turns the result into a `str.format` call.

Scanner states:
    NORMAL: `{{` and `}}` are escaped braces, a lone `{` opens a
        placeholder, a lone `}` is literal text
    PLACEHOLDER: characters belong to the expression until the first `}`

Examples:
    "Hi {name}!"     -> literals ("Hi ", "!"), expressions ("name",)
    "{{literal}}"    -> literals ("{literal}",), no expressions
    "a{{b"           -> literals ("a{b",), no expressions

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import ast
from dataclasses import dataclass
from enum import Enum, auto

from lexidict.diagnostics import ErrorTemplate, Located, TemplateError

__all__ = ["CompiledTemplate", "compile_template", "parse_placeholder"]

# Marker joining literal segments in the skeleton.
_MARKER = "{}"


class _State(Enum):
    NORMAL = auto()
    PLACEHOLDER = auto()


@dataclass(frozen=True, slots=True)
class CompiledTemplate:
    """Literal segments interleaved with placeholder expressions.

    There is always one more literal than expressions; literal ``i``
    precedes expression ``i``.

    Attributes:
        literals: Literal text segments, escapes already resolved
        expressions: Placeholder contents, verbatim
    """

    literals: tuple[str, ...]
    expressions: tuple[str, ...]

    def __post_init__(self) -> None:
        if len(self.literals) != len(self.expressions) + 1:
            msg = (
                f"CompiledTemplate needs {len(self.expressions) + 1} literals "
                f"for {len(self.expressions)} expressions, got {len(self.literals)}"
            )
            raise ValueError(msg)

    @property
    def has_placeholders(self) -> bool:
        return bool(self.expressions)

    @property
    def skeleton(self) -> str:
        """Literals joined by `{}` markers, e.g. "Hi {}!"."""
        return _MARKER.join(self.literals)

    @property
    def format_string(self) -> str:
        """Skeleton with literal braces doubled, ready for `str.format`."""
        return _MARKER.join(
            literal.replace("{", "{{").replace("}", "}}") for literal in self.literals
        )


def compile_template(text: str, *, span: Located | None = None) -> CompiledTemplate:
    """Split a string body into literals and placeholder expressions.

    Args:
        text: Decoded string body
        span: Location of the string body, for diagnostics

    Raises:
        TemplateError: UNTERMINATED_PLACEHOLDER if the text ends inside a
            placeholder
    """
    literals: list[str] = []
    expressions: list[str] = []
    buffer: list[str] = []
    state = _State.NORMAL
    pos = 0
    length = len(text)

    while pos < length:
        char = text[pos]
        nxt = text[pos + 1] if pos + 1 < length else None
        match state:
            case _State.NORMAL if char == "{" and nxt == "{":
                buffer.append("{")
                pos += 2
                continue
            case _State.NORMAL if char == "}" and nxt == "}":
                buffer.append("}")
                pos += 2
                continue
            case _State.NORMAL if char == "{":
                literals.append("".join(buffer))
                buffer.clear()
                state = _State.PLACEHOLDER
            case _State.PLACEHOLDER if char == "}":
                expressions.append("".join(buffer))
                buffer.clear()
                state = _State.NORMAL
            case _:
                buffer.append(char)
        pos += 1

    if state is _State.PLACEHOLDER:
        raise TemplateError(ErrorTemplate.unterminated_placeholder(text, span))

    literals.append("".join(buffer))
    return CompiledTemplate(literals=tuple(literals), expressions=tuple(expressions))


def parse_placeholder(expression: str, *, span: Located | None = None) -> str:
    """Validate a placeholder as a Python expression.

    Returns:
        The expression in normalized form (``ast.unparse``), safe to emit on
        a single line

    Raises:
        TemplateError: INVALID_PLACEHOLDER_EXPRESSION if it does not parse
    """
    try:
        tree = ast.parse(expression.strip(), mode="eval")
    except (SyntaxError, ValueError) as exc:
        reason = exc.msg if isinstance(exc, SyntaxError) else str(exc)
        raise TemplateError(
            ErrorTemplate.invalid_placeholder_expression(expression, reason, span)
        ) from exc
    return ast.unparse(tree)

"""Indentation-aware writer for generated Python source.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import io
import tokenize
from collections.abc import Iterator
from contextlib import contextmanager

__all__ = ["CodeWriter", "continuation_lines"]

_INDENT = "    "


def continuation_lines(code: str) -> frozenset[int]:
    """1-based numbers of lines that start inside a multi-line token.

    Those lines belong to a triple-quoted string (or f-string) and must not
    be re-indented. `code` must be syntactically valid.
    """
    inside: set[int] = set()
    readline = io.StringIO(code).readline
    for token in tokenize.generate_tokens(readline):
        start_row, end_row = token.start[0], token.end[0]
        if end_row > start_row:
            inside.update(range(start_row + 1, end_row + 1))
    return frozenset(inside)


class CodeWriter:
    """Accumulates lines of Python source at a current indentation level.

    Example:
        >>> writer = CodeWriter()
        >>> writer.line("class Dict:")
        >>> with writer.indented():
        ...     writer.line("pass")
        >>> writer.getvalue()
        'class Dict:\\n    pass\\n'
    """

    __slots__ = ("_level", "_lines")

    def __init__(self) -> None:
        self._lines: list[str] = []
        self._level = 0

    def line(self, text: str = "") -> None:
        """Append one line; blank lines carry no indentation."""
        self._lines.append(f"{_INDENT * self._level}{text}" if text else "")

    def blank(self, count: int = 1) -> None:
        for _ in range(count):
            self._lines.append("")

    def block(self, code: str) -> None:
        """Append pre-formatted, dedented code at the current level.

        Lines continuing a multi-line string literal are kept verbatim.
        """
        keep = continuation_lines(code)
        for number, text in enumerate(code.splitlines(), start=1):
            if number in keep:
                self._lines.append(text)
            else:
                self.line(text)

    @contextmanager
    def indented(self) -> Iterator[None]:
        self._level += 1
        try:
            yield
        finally:
            self._level -= 1

    @property
    def line_count(self) -> int:
        return len(self._lines)

    def getvalue(self) -> str:
        return "\n".join(self._lines) + "\n"

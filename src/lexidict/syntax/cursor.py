"""Immutable character cursor for the dictionary lexer.

Python 3.13+. Zero external dependencies.

Design:
    - Cursor is immutable (frozen dataclass)
    - EOF is a state (is_eof), not a return value
    - Every advance() returns a NEW cursor
    - Line:column computed on demand through LineOffsetCache

Line Ending Support:
    LF and CRLF are supported (\\n is the line delimiter). CR-only sources
    produce incorrect line numbers.
"""

from collections.abc import Callable
from dataclasses import dataclass

__all__ = ["Cursor", "LineOffsetCache"]


@dataclass(frozen=True, slots=True)
class Cursor:
    """Immutable source position tracker.

    Example:
        >>> cursor = Cursor("unit", 0)
        >>> cursor.current
        'u'
        >>> cursor.advance().current
        'n'
        >>> Cursor("hi", 2).is_eof
        True
    """

    source: str
    pos: int

    @property
    def is_eof(self) -> bool:
        """Check if at end of input."""
        return self.pos >= len(self.source)

    @property
    def current(self) -> str:
        """Get current character.

        Raises:
            EOFError: If at end of input
        """
        if self.is_eof:
            msg = f"Unexpected EOF at position {self.pos}"
            raise EOFError(msg)
        return self.source[self.pos]

    def peek(self, offset: int = 0) -> str | None:
        """Peek at character with offset without advancing.

        Returns None only when peeking beyond EOF.
        """
        target_pos = self.pos + offset
        if target_pos >= len(self.source):
            return None
        return self.source[target_pos]

    def advance(self, count: int = 1) -> "Cursor":
        """Return new cursor advanced by count positions (clamped at EOF)."""
        new_pos = min(self.pos + count, len(self.source))
        return Cursor(self.source, new_pos)

    def slice_to(self, end_pos: int) -> str:
        """Extract source slice from current position to end_pos (exclusive)."""
        return self.source[self.pos : end_pos]

    def slice_ahead(self, n: int) -> str:
        """Get next n characters without advancing cursor."""
        return self.source[self.pos : self.pos + n]

    def skip_whitespace(self) -> "Cursor":
        """Skip Unicode whitespace, including newlines and tabs."""
        c = self
        while not c.is_eof and c.current.isspace():
            c = c.advance()
        return c

    def skip_to_line_end(self) -> "Cursor":
        """Advance to the next newline (not consumed) or EOF."""
        cursor = self
        while not cursor.is_eof and cursor.current not in ("\n", "\r"):
            cursor = cursor.advance()
        return cursor

    def skip_while(self, predicate: Callable[[str], bool]) -> "Cursor":
        """Advance while predicate(current) is true."""
        cursor = self
        while not cursor.is_eof and predicate(cursor.current):
            cursor = cursor.advance()
        return cursor


class LineOffsetCache:
    """Cached line offset computation for efficient position lookups.

    Precomputes line start offsets in a single O(n) pass, then provides
    O(log n) lookups using binary search.

    Example:
        >>> cache = LineOffsetCache("line1\\nline2")
        >>> cache.get_line_col(0)
        (1, 1)
        >>> cache.get_line_col(8)
        (2, 3)
    """

    __slots__ = ("_offsets", "_source_len")

    def __init__(self, source: str) -> None:
        offsets = [0]
        for i, char in enumerate(source):
            if char == "\n":
                offsets.append(i + 1)
        self._offsets: tuple[int, ...] = tuple(offsets)
        self._source_len = len(source)

    def get_line_col(self, pos: int) -> tuple[int, int]:
        """Get 1-indexed (line, column) for a character position.

        Positions outside the source are clamped to its bounds.
        """
        pos = max(0, min(pos, self._source_len))

        # Line index = index of the largest offset <= pos
        left, right = 0, len(self._offsets) - 1
        while left < right:
            mid = (left + right + 1) // 2
            if self._offsets[mid] <= pos:
                left = mid
            else:
                right = mid - 1

        return (left + 1, pos - self._offsets[left] + 1)

    @property
    def line_count(self) -> int:
        """Number of lines in the source."""
        return len(self._offsets)

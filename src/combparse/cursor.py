"""Immutable cursor infrastructure for generic item sequences.

Implements the immutable cursor pattern used by every parser in combparse.
Python 3.13+. Zero external dependencies.

Design Philosophy:
    - Cursor is immutable (frozen dataclass)
    - The input is never copied: advancing only changes the offset
    - Items may be characters (str), bytes (bytes, bytearray, memoryview)
      or any caller-defined token type held in a Sequence
    - EOF is a state (is_eof), not a return value
    - Every advance() returns NEW cursor (prevents infinite loops)

Positions:
    The engine reports plain integer offsets. Callers who want line:column
    information for text inputs build it on demand with
    :meth:`Cursor.compute_line_col` or :class:`LineOffsetCache`.

Pattern Reference:
    - Haskell Parsec
    - Rust nom parser combinator library
"""

from collections.abc import Sequence
from dataclasses import dataclass

__all__ = ["Cursor", "LineOffsetCache", "Span"]


@dataclass(frozen=True, slots=True)
class Cursor[T]:
    """Immutable view over an item sequence plus an offset.

    Key Design Decisions:
        1. Frozen dataclass - Immutability enforced by Python
        2. Slots - Memory efficiency (one cursor per parse step)
        3. Simple position - Just an integer offset into ``items``
        4. EOF is a property - Not a return value

    Invariant:
        ``0 <= pos <= len(items)``

    Example:
        >>> cursor = Cursor("hello", 0)
        >>> cursor.current
        'h'
        >>> new_cursor = cursor.advance()
        >>> new_cursor.current
        'e'
        >>> cursor.current  # Original unchanged (immutability)
        'h'
        >>> Cursor(b"hi", 1).current
        105
    """

    items: Sequence[T]
    pos: int = 0

    def __post_init__(self) -> None:
        """Validate the offset invariant.

        Raises:
            ValueError: If pos is outside 0..len(items)
        """
        if not 0 <= self.pos <= len(self.items):
            msg = f"Cursor position {self.pos} outside 0..{len(self.items)}"
            raise ValueError(msg)

    @property
    def is_eof(self) -> bool:
        """Check if at end of input."""
        return self.pos >= len(self.items)

    @property
    def current(self) -> T:
        """Get current item.

        Raises:
            EOFError: If at end of input
        """
        if self.pos >= len(self.items):
            msg = f"Unexpected EOF at position {self.pos}"
            raise EOFError(msg)
        return self.items[self.pos]

    @property
    def remaining(self) -> int:
        """Number of items left to parse."""
        return len(self.items) - self.pos

    def peek(self, offset: int = 0) -> T | None:
        """Peek at item with offset without advancing.

        Returns None ONLY when peeking beyond EOF.
        """
        target_pos = self.pos + offset
        if target_pos >= len(self.items):
            return None
        return self.items[target_pos]

    def advance(self, count: int = 1) -> "Cursor[T]":
        """Return new cursor advanced by count positions (clamped at EOF).

        Example:
            >>> cursor = Cursor("hello", 0)
            >>> cursor.advance(2).pos
            2
            >>> cursor.advance(10).pos
            5
        """
        return Cursor(self.items, min(self.pos + count, len(self.items)))

    def at(self, pos: int) -> "Cursor[T]":
        """Return a cursor over the same items at an absolute position."""
        return Cursor(self.items, pos)

    def slice_to(self, end_pos: int) -> Sequence[T]:
        """Extract items from current position to end_pos (exclusive).

        Example:
            >>> start = Cursor("hello world", 0)
            >>> start.slice_to(5)
            'hello'
        """
        return self.items[self.pos : end_pos]

    def slice_ahead(self, n: int) -> Sequence[T]:
        """Get next n items without advancing (fewer near EOF)."""
        return self.items[self.pos : self.pos + n]

    def rest(self) -> Sequence[T]:
        """All items from the current position to the end."""
        return self.items[self.pos :]

    def compute_line_col(self) -> tuple[int, int]:
        """Compute 1-indexed (line, column) for text inputs.

        Performance:
            O(n) where n = current position. Use LineOffsetCache when
            converting many positions of the same source.

        Example:
            >>> Cursor("line1\\nline2", 8).compute_line_col()
            (2, 3)
        """
        return LineOffsetCache(self.items).get_line_col(self.pos)


@dataclass(frozen=True, slots=True)
class Span:
    """Half-open item range ``[start, end)`` captured by :func:`~combparse.combinators.spanned`."""

    start: int
    end: int

    def __post_init__(self) -> None:
        """Validate span boundaries."""
        if self.start < 0 or self.end < self.start:
            msg = f"Invalid span [{self.start}, {self.end})"
            raise ValueError(msg)

    def __len__(self) -> int:
        return self.end - self.start


class LineOffsetCache:
    """Cached line offset computation for efficient position lookups.

    Precomputes line start offsets in O(n) single pass, then provides
    O(log n) lookups using binary search. Works for ``str`` sources and for
    byte sources (``\\n`` is byte 10).

    Example:
        >>> source = "line1\\nline2\\nline3"
        >>> cache = LineOffsetCache(source)
        >>> cache.get_line_col(0)   # Start of line 1
        (1, 1)
        >>> cache.get_line_col(8)   # Third char of line 2
        (2, 3)

    Thread Safety:
        Thread-safe. Internal state is only set during __init__.
    """

    __slots__ = ("_offsets", "_source_len")

    def __init__(self, source: Sequence[object]) -> None:
        """Build line offset cache from source.

        Complexity:
            O(n) where n = len(source)
        """
        newline: object = 10 if isinstance(source, (bytes, bytearray, memoryview)) else "\n"
        offsets = [0]
        for i, item in enumerate(source):
            if item == newline:
                offsets.append(i + 1)
        self._offsets: tuple[int, ...] = tuple(offsets)
        self._source_len = len(source)

    def get_line_col(self, pos: int) -> tuple[int, int]:
        """Get 1-indexed (line, column) for position using binary search."""
        pos = max(0, min(pos, self._source_len))

        # Line index = index of largest offset <= pos
        left, right = 0, len(self._offsets) - 1
        while left < right:
            mid = (left + right + 1) // 2
            if self._offsets[mid] <= pos:
                left = mid
            else:
                right = mid - 1

        return (left + 1, pos - self._offsets[left] + 1)

"""Parse context: cursor plus caller-owned user state.

A ParseContext pairs an immutable :class:`~combparse.cursor.Cursor` with an
optional mutable user state that is shared by reference across the whole
combinator tree of one parse. The engine never inspects the user state.

Replaces thread-local state with explicit parameter passing for:
- Thread safety without global state
- Re-entrancy (nested parses own their own context)
- Easier testing (no state reset needed)

Python 3.13+. Zero external dependencies.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from combparse.constants import MAX_DEPTH
from combparse.cursor import Cursor

__all__ = ["ParseContext"]


@dataclass(frozen=True, slots=True)
class ParseContext[T, S]:
    """Explicit context for one parse invocation.

    Attributes:
        cursor: Current input position
        state: Caller-defined mutable state (None when unused)
        depth: Current nesting depth of recursive parsers (0 = top level)
        max_depth: Maximum allowed nesting depth of recursive parsers

    Example:
        >>> ctx = ParseContext.start("abc", state=[])
        >>> ctx.cursor.pos
        0
        >>> ctx.at(ctx.cursor.advance()).state is ctx.state
        True
    """

    cursor: Cursor[T]
    state: S | None = None
    depth: int = 0
    max_depth: int = MAX_DEPTH

    @classmethod
    def start(
        cls,
        items: Sequence[T],
        state: S | None = None,
        *,
        max_depth: int = MAX_DEPTH,
    ) -> "ParseContext[T, S]":
        """Create the top-level context for a fresh parse."""
        return cls(Cursor(items, 0), state, 0, max_depth)

    @property
    def items(self) -> Sequence[T]:
        """The full input sequence."""
        return self.cursor.items

    @property
    def pos(self) -> int:
        """Current offset into the input."""
        return self.cursor.pos

    def at(self, cursor: Cursor[T]) -> "ParseContext[T, S]":
        """Return a context at another cursor, sharing the same user state."""
        return ParseContext(cursor, self.state, self.depth, self.max_depth)

    def is_depth_exceeded(self) -> bool:
        """Check if maximum nesting depth has been reached."""
        return self.depth >= self.max_depth

    def enter(self) -> "ParseContext[T, S]":
        """Create new context with incremented depth for a recursive parser."""
        return ParseContext(self.cursor, self.state, self.depth + 1, self.max_depth)

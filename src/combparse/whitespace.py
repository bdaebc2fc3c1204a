"""ASCII whitespace skipping.

Python 3.13+. Zero external dependencies.
"""

from typing import Any

from combparse.constants import ASCII_WHITESPACE
from combparse.context import ParseContext
from combparse.core import Failure, Outcome, Parser, Success
from combparse.cursor import Cursor

__all__ = ["eat", "ignore_ascii_whitespace"]

_WHITESPACE: frozenset[object] = frozenset(
    [
        *ASCII_WHITESPACE,
        *(ord(ch) for ch in ASCII_WHITESPACE),
        *(ch.encode() for ch in ASCII_WHITESPACE),
    ]
)


def _skip(items: Any, pos: int) -> int:
    size = len(items)
    while pos < size and items[pos] in _WHITESPACE:
        pos += 1
    return pos


def ignore_ascii_whitespace() -> Parser[None]:
    """Skip space, tab, newline, carriage return and form feed; always succeeds."""

    def run(ctx: ParseContext[Any, Any]) -> Outcome[None]:
        cursor = ctx.cursor
        return Success(None, Cursor(cursor.items, _skip(cursor.items, cursor.pos)))

    return Parser(run, "ignore_ascii_whitespace")


def eat[R](p: Parser[R]) -> Parser[R]:
    """Skip leading ASCII whitespace, then run ``p``.

    Whitespace alone does not count as consumption: when ``p`` fails right
    after it, the failure is reported at the original position.

    Example:
        >>> from combparse.number import integer
        >>> eat(integer()).parse("  \\n 42").value
        42
    """
    inner = p.fn

    def run(ctx: ParseContext[Any, Any]) -> Outcome[R]:
        cursor = ctx.cursor
        pos = _skip(cursor.items, cursor.pos)
        if pos == cursor.pos:
            return inner(ctx)
        res = inner(ctx.at(Cursor(cursor.items, pos)))
        if isinstance(res, Failure) and res.cursor.pos == pos:
            return Failure(cursor)
        return res

    return Parser(run, f"eat({p.name})")

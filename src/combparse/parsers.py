"""Base parsers over single items and item runs.

This module provides the atomic parsers every grammar starts from. All of
them fail without consuming input.

Item equivalence:
    A 1-length ``str`` or ``bytes`` expectation matches the same code point
    or byte value in both text and byte inputs, so ``item(",")`` works on
    ``"a,b"`` and on ``b"a,b"``.
"""

from collections.abc import Callable, Sequence
from typing import Any

from combparse.context import ParseContext
from combparse.core import Failure, Outcome, Parser, Success
from combparse.cursor import Cursor

__all__ = [
    "empty",
    "eof",
    "item",
    "item_if",
    "item_while",
    "literal",
    "position",
    "rest",
    "satisfy",
    "skip",
    "take",
    "until",
]

_ANY = object()


def item_equivalents(expected: object) -> tuple[object, ...]:
    """Values an input item may take to count as ``expected``.

    Example:
        >>> item_equivalents(",")
        (',', 44)
        >>> item_equivalents(b",")
        (b',', 44, ',')
    """
    if isinstance(expected, str) and len(expected) == 1:
        return (expected, ord(expected))
    if isinstance(expected, (bytes, bytearray)) and len(expected) == 1:
        return (bytes(expected), expected[0], chr(expected[0]))
    return (expected,)


def sequence_variants(expected: Sequence[Any]) -> tuple[Sequence[Any], ...]:
    """Equal-content forms of ``expected`` for each supported input type."""
    variants: list[Sequence[Any]] = [expected]
    if isinstance(expected, str):
        if all(ord(ch) < 0x100 for ch in expected):
            variants.append(expected.encode("latin-1"))
        variants.extend((list(expected), tuple(expected)))
    elif isinstance(expected, (bytes, bytearray)):
        variants.extend((bytes(expected).decode("latin-1"), list(expected), tuple(expected)))
    else:
        variants.extend((list(expected), tuple(expected)))
    return tuple(variants)


def item(expected: object = _ANY) -> Parser[Any]:
    """Consume one item.

    ``item()`` accepts any item and fails only at end of input.
    ``item(x)`` accepts only an item equal to ``x``.

    Example:
        >>> item().parse("ab").value
        'a'
        >>> bool(item().parse(""))
        False
    """
    if expected is _ANY:

        def run_any(ctx: ParseContext[Any, Any]) -> Outcome[Any]:
            cursor = ctx.cursor
            items = cursor.items
            pos = cursor.pos
            if pos < len(items):
                return Success(items[pos], Cursor(items, pos + 1))
            return Failure(cursor)

        return Parser(run_any, "item")

    accepted = item_equivalents(expected)

    def run(ctx: ParseContext[Any, Any]) -> Outcome[Any]:
        cursor = ctx.cursor
        items = cursor.items
        pos = cursor.pos
        if pos < len(items):
            current = items[pos]
            if current in accepted:
                return Success(current, Cursor(items, pos + 1))
        return Failure(cursor)

    return Parser(run, f"item({expected!r})")


def satisfy(predicate: Callable[[Any], bool]) -> Parser[Any]:
    """Consume one item iff ``predicate(item)`` holds.

    Example:
        >>> satisfy(str.isdigit).parse("7x").value
        '7'
    """

    def run(ctx: ParseContext[Any, Any]) -> Outcome[Any]:
        cursor = ctx.cursor
        items = cursor.items
        pos = cursor.pos
        if pos < len(items):
            current = items[pos]
            if predicate(current):
                return Success(current, Cursor(items, pos + 1))
        return Failure(cursor)

    return Parser(run, f"satisfy({getattr(predicate, '__name__', 'predicate')})")


item_if = satisfy


def literal(expected: Sequence[Any]) -> Parser[Sequence[Any]]:
    """Consume an exact run of items; the value is the matched input slice.

    Example:
        >>> literal("true").parse("true!").remaining
        '!'
        >>> literal("GET").parse(b"GET /").value
        b'GET'
    """
    size = len(expected)
    variants = sequence_variants(expected)

    def run(ctx: ParseContext[Any, Any]) -> Outcome[Sequence[Any]]:
        cursor = ctx.cursor
        items = cursor.items
        pos = cursor.pos
        chunk = items[pos : pos + size]
        if len(chunk) == size and chunk in variants:
            return Success(chunk, Cursor(items, pos + size))
        return Failure(cursor)

    return Parser(run, f"literal({expected!r})")


def take(prefix: object) -> Parser[Any]:
    """Consume ``prefix``: a single item or a run of items.

    1-length strings and bytes are single items; longer sequences are runs.
    """
    if isinstance(prefix, (str, bytes, bytearray, list, tuple)) and len(prefix) != 1:
        return literal(prefix)
    if isinstance(prefix, (list, tuple)):
        return literal(prefix)
    return item(prefix)


def skip(prefix: object) -> Parser[None]:
    """Like :func:`take`, discarding the value."""
    inner = take(prefix).fn

    def run(ctx: ParseContext[Any, Any]) -> Outcome[None]:
        res = inner(ctx)
        if isinstance(res, Failure):
            return res
        return Success(None, res.cursor)

    return Parser(run, f"skip({prefix!r})")


def item_while(predicate: Callable[[Any], bool]) -> Parser[Sequence[Any]]:
    """Consume items while ``predicate`` holds; always succeeds.

    Example:
        >>> item_while(str.isdigit).parse("1234abcd").value
        '1234'
    """

    def run(ctx: ParseContext[Any, Any]) -> Outcome[Sequence[Any]]:
        cursor = ctx.cursor
        items = cursor.items
        start = end = cursor.pos
        size = len(items)
        while end < size and predicate(items[end]):
            end += 1
        return Success(items[start:end], Cursor(items, end))

    return Parser(run, f"item_while({getattr(predicate, '__name__', 'predicate')})")


def _find_needle(items: Sequence[Any], needle: object, start: int) -> tuple[int, int]:
    """Locate ``needle`` at or after ``start``; return (index, needle length)."""
    if isinstance(items, str):
        if isinstance(needle, (bytes, bytearray)):
            needle = bytes(needle).decode("latin-1")
        elif isinstance(needle, int):
            needle = chr(needle)
        return items.find(needle, start), len(needle)  # type: ignore[arg-type]
    if isinstance(items, (bytes, bytearray)):
        if isinstance(needle, str):
            needle = needle.encode("latin-1")
        index = items.find(needle, start)  # type: ignore[arg-type]
        return index, 1 if isinstance(needle, int) else len(needle)  # type: ignore[arg-type]
    if isinstance(needle, (list, tuple)) or (isinstance(needle, (str, bytes)) and len(needle) != 1):
        width = len(needle)
        seq = list(needle)
        for i in range(start, len(items) - width + 1):
            if list(items[i : i + width]) == seq:
                return i, width
        return -1, width
    accepted = item_equivalents(needle)
    for i in range(start, len(items)):
        if items[i] in accepted:
            return i, 1
    return -1, 1


def until(needle: object) -> Parser[Sequence[Any]]:
    """Consume up to and including ``needle``; the value is the part before it.

    ``needle`` may be a single item or a run of items. Fails without
    consuming when the needle does not occur.

    Example:
        >>> outcome = until("=").parse("name=value")
        >>> outcome.value, outcome.remaining
        ('name', 'value')
    """

    def run(ctx: ParseContext[Any, Any]) -> Outcome[Sequence[Any]]:
        cursor = ctx.cursor
        items = cursor.items
        index, width = _find_needle(items, needle, cursor.pos)
        if index < 0:
            return Failure(cursor)
        return Success(items[cursor.pos : index], Cursor(items, index + width))

    return Parser(run, f"until({needle!r})")


def rest() -> Parser[Sequence[Any]]:
    """Consume everything that is left; always succeeds."""

    def run(ctx: ParseContext[Any, Any]) -> Outcome[Sequence[Any]]:
        cursor = ctx.cursor
        items = cursor.items
        return Success(items[cursor.pos :], Cursor(items, len(items)))

    return Parser(run, "rest")


def eof() -> Parser[None]:
    """Succeed with ``None`` only at end of input."""

    def run(ctx: ParseContext[Any, Any]) -> Outcome[None]:
        cursor = ctx.cursor
        if cursor.pos >= len(cursor.items):
            return Success(None, cursor)
        return Failure(cursor)

    return Parser(run, "eof")


def position() -> Parser[int]:
    """Succeed with the current offset without consuming.

    Building block for caller-side diagnostics.
    """

    def run(ctx: ParseContext[Any, Any]) -> Outcome[int]:
        return Success(ctx.cursor.pos, ctx.cursor)

    return Parser(run, "position")


def empty() -> Parser[Sequence[Any]]:
    """Succeed with the (empty) remaining input only at end of input.

    Unlike :func:`eof` the value is a slice, so ``empty()`` composes with
    slice-returning parsers.
    """

    def run(ctx: ParseContext[Any, Any]) -> Outcome[Sequence[Any]]:
        cursor = ctx.cursor
        if cursor.pos >= len(cursor.items):
            return Success(cursor.items[cursor.pos :], cursor)
        return Failure(cursor)

    return Parser(run, "empty")

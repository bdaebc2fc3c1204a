"""Pattern alternation over single items.

:func:`item_matches` accepts one item if it equals any literal pattern or
falls inside any inclusive :class:`ItemRange`. The pattern list is compiled
once, at construction: literals go into a set (or a tuple when they are not
hashable) and ranges into a tuple of bounds, so matching an item is a
membership test followed by straight-line comparisons.

Text and byte inputs share patterns: ``"a"`` also matches the byte ``0x61``
and ``irange("0", "9")`` also matches the bytes ``0x30..0x39``.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Hashable, Iterable
from dataclasses import dataclass
from typing import Any

from combparse.context import ParseContext
from combparse.core import Failure, Outcome, Parser, Success
from combparse.cursor import Cursor
from combparse.diagnostics import ErrorTemplate, PatternError
from combparse.parsers import item_equivalents

__all__ = ["ItemRange", "choose", "irange", "item_matches"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ItemRange:
    """Inclusive range of items, ``low <= item <= high``.

    Raises:
        PatternError: If low > high
    """

    low: Any
    high: Any

    def __post_init__(self) -> None:
        if self.low > self.high:
            raise PatternError(ErrorTemplate.invalid_range(self.low, self.high))


def irange(low: Any, high: Any) -> ItemRange:
    """Shorthand for ``ItemRange(low, high)``."""
    return ItemRange(low, high)


def _range_bounds(r: ItemRange) -> Iterable[tuple[Any, Any]]:
    yield (r.low, r.high)
    low, high = r.low, r.high
    # Single-character bounds also apply to the code points of byte inputs.
    if isinstance(low, str) and isinstance(high, str) and len(low) == len(high) == 1:
        yield (ord(low), ord(high))
    elif isinstance(low, int) and isinstance(high, int) and 0 <= low <= high <= 0x10FFFF:
        yield (chr(low), chr(high))


@dataclass(frozen=True, slots=True)
class _CompiledPatterns:
    literals: frozenset[Any] | tuple[Any, ...]
    ranges: tuple[tuple[Any, Any], ...]

    def matches(self, value: Any) -> bool:
        searchable = isinstance(value, Hashable) or isinstance(self.literals, tuple)
        if searchable and value in self.literals:
            return True
        for low, high in self.ranges:
            try:
                if low <= value <= high:
                    return True
            except TypeError:
                # Bounds of another kind (text bounds against a byte value).
                continue
        return False


def compile_patterns(patterns: Iterable[Any]) -> _CompiledPatterns:
    """Split patterns into a literal set and a tuple of range bounds.

    Raises:
        PatternError: If no pattern is given
    """
    literals: list[Any] = []
    ranges: list[tuple[Any, Any]] = []
    for pattern in patterns:
        if isinstance(pattern, ItemRange):
            ranges.extend(_range_bounds(pattern))
        elif isinstance(pattern, (set, frozenset)):
            for member in pattern:
                literals.extend(item_equivalents(member))
        else:
            literals.extend(item_equivalents(pattern))
    if not literals and not ranges:
        raise PatternError(ErrorTemplate.empty_pattern_set("item_matches"))
    try:
        literal_set: frozenset[Any] | tuple[Any, ...] = frozenset(literals)
    except TypeError:
        literal_set = tuple(literals)
    return _CompiledPatterns(literal_set, tuple(ranges))


def item_matches(*patterns: Any) -> Parser[Any]:
    """Consume one item that equals a literal pattern or lies in a range.

    Patterns are single items, sets of items (such as the character classes
    in :mod:`combparse.constants`) or :class:`ItemRange` values.

    Raises:
        PatternError: If no pattern is given

    Example:
        >>> hex_digit = item_matches(irange("0", "9"), irange("a", "f"))
        >>> hex_digit.parse("c0").value
        'c'
        >>> bool(hex_digit.parse("g"))
        False
    """
    compiled = compile_patterns(patterns)
    matches = compiled.matches

    def run(ctx: ParseContext[Any, Any]) -> Outcome[Any]:
        cursor = ctx.cursor
        items = cursor.items
        pos = cursor.pos
        if pos < len(items):
            current = items[pos]
            if matches(current):
                return Success(current, Cursor(items, pos + 1))
        return Failure(cursor)

    return Parser(run, f"item_matches({', '.join(repr(p) for p in patterns)})")


def choose(
    p: Parser[Any],
    *arms: tuple[Any, Parser[Any]],
    default: Parser[Any] | None = None,
) -> Parser[Any]:
    """Run ``p``, then the parser of the first arm whose pattern matches its value.

    Each arm is ``(pattern, parser)``; a pattern is a value, an
    :class:`ItemRange`, a set of values or a predicate. When no arm matches,
    ``default`` runs, or the parse fails without consuming.

    Raises:
        PatternError: If neither arms nor a default are given

    Example:
        >>> from combparse.core import pure
        >>> from combparse.parsers import item
        >>> sign = choose(item(), ("+", pure(1)), ("-", pure(-1)))
        >>> sign.parse("-").value
        -1
    """
    if not arms and default is None:
        raise PatternError(ErrorTemplate.empty_pattern_set("choose"))
    tests: list[tuple[Callable[[Any], bool], Parser[Any]]] = []
    for pattern, arm in arms:
        if callable(pattern) and not isinstance(pattern, Parser):
            tests.append((pattern, arm))
        else:
            tests.append((compile_patterns((pattern,)).matches, arm))
    selector = p.fn
    fallback = default.fn if default is not None else None
    logger.debug("Compiled choose(%s) with %d arms", p.name, len(tests))

    def run(ctx: ParseContext[Any, Any]) -> Outcome[Any]:
        res = selector(ctx)
        if isinstance(res, Failure):
            return res
        for test, arm in tests:
            if test(res.value):
                return arm.fn(ctx.at(res.cursor))
        if fallback is not None:
            return fallback(ctx.at(res.cursor))
        return Failure(ctx.cursor)

    return Parser(run, f"choose({p.name})")

"""Word-at-a-time byte search and the scanning parsers built on it.

Block scanning:
    The input is examined in blocks of one native machine word
    (``WORD_BYTES``). Each block is loaded as a little-endian integer and
    tested with per-byte SWAR masks, so only the block that contains a
    match is looked at more closely: the lowest set high bit of the mask
    gives the index of the first matching byte in the block.

    The masks are exact. Every lane computation stays within its own byte
    (no carry crosses a lane boundary), so there are no false positives to
    re-check and the result always equals a naive left-to-right scan.

Finder kinds (a byte value ``b`` in 0..255):
    EqByte(b)  item == b   (also written as the bare target)
    LtByte(b)  item <  b
    GtByte(b)  item >  b
    NeByte(b)  item != b

Input types:
    ``bytes``, ``bytearray`` and ``memoryview`` are scanned directly.
    ``str`` is scanned block-wise as well: an all-ASCII block is encoded and
    tested as a word, other blocks compare code points one at a time.
    Any other sequence is scanned item by item; ints, 1-length strings and
    1-length bytes are compared by value.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from combparse.constants import HIGH_BITS, LOW7_BITS, LOW_BITS, WORD_BYTES
from combparse.context import ParseContext
from combparse.core import Failure, Outcome, Parser, Success
from combparse.cursor import Cursor
from combparse.diagnostics import ErrorTemplate, PatternError

__all__ = [
    "EqByte",
    "GtByte",
    "LtByte",
    "NeByte",
    "find_byte",
    "find_byte_index",
    "find_byte_keep",
    "until_byte",
]

type ByteTarget = int | str | bytes | EqByte | LtByte | GtByte | NeByte


# ============================================================================
# SWAR PRIMITIVES
# ============================================================================


def _nonzero_lanes(word: int) -> int:
    """High bit set in every byte lane of ``word`` that is not zero."""
    return (((word & LOW7_BITS) + LOW7_BITS) | word) & HIGH_BITS


def _below_lanes(word: int, bound: int) -> int:
    """High bit set in every byte lane whose value is below ``bound`` (0..256)."""
    if bound <= 0:
        return 0
    if bound <= 0x80:
        t = (word & LOW7_BITS) + (0x80 - bound) * LOW_BITS
        return ~(word | t) & HIGH_BITS
    t = (word & LOW7_BITS) + (0x100 - bound) * LOW_BITS
    return ~(word & t) & HIGH_BITS


def _first_lane(mask: int) -> int:
    """Index of the lowest byte lane flagged in ``mask``."""
    return ((mask & -mask).bit_length() - 1) >> 3


def _byte_value(target: object) -> int:
    if isinstance(target, bool):
        raise PatternError(ErrorTemplate.invalid_byte_target(target))
    if isinstance(target, int) and 0 <= target <= 0xFF:
        return target
    if isinstance(target, str) and len(target) == 1 and ord(target) <= 0xFF:
        return ord(target)
    if isinstance(target, (bytes, bytearray)) and len(target) == 1:
        return target[0]
    raise PatternError(ErrorTemplate.invalid_byte_target(target))


# ============================================================================
# FINDERS
# ============================================================================


@dataclass(frozen=True, slots=True)
class EqByte:
    """Match an item equal to ``byte``."""

    byte: int
    _fill: int = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "byte", _byte_value(self.byte))
        object.__setattr__(self, "_fill", self.byte * LOW_BITS)

    def word_mask(self, word: int) -> int:
        return ~_nonzero_lanes(word ^ self._fill) & HIGH_BITS

    def matches(self, value: int) -> bool:
        return value == self.byte


@dataclass(frozen=True, slots=True)
class NeByte:
    """Match an item different from ``byte``."""

    byte: int
    _fill: int = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "byte", _byte_value(self.byte))
        object.__setattr__(self, "_fill", self.byte * LOW_BITS)

    def word_mask(self, word: int) -> int:
        return _nonzero_lanes(word ^ self._fill)

    def matches(self, value: int) -> bool:
        return value != self.byte


@dataclass(frozen=True, slots=True)
class LtByte:
    """Match an item below ``byte``."""

    byte: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "byte", _byte_value(self.byte))

    def word_mask(self, word: int) -> int:
        return _below_lanes(word, self.byte)

    def matches(self, value: int) -> bool:
        return value < self.byte


@dataclass(frozen=True, slots=True)
class GtByte:
    """Match an item above ``byte``."""

    byte: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "byte", _byte_value(self.byte))

    def word_mask(self, word: int) -> int:
        return ~_below_lanes(word, self.byte + 1) & HIGH_BITS

    def matches(self, value: int) -> bool:
        return value > self.byte


type Finder = EqByte | NeByte | LtByte | GtByte


def _compile(targets: tuple[ByteTarget, ...]) -> tuple[Finder, ...]:
    if not targets:
        raise PatternError(ErrorTemplate.empty_finder_set())
    return tuple(
        t if isinstance(t, (EqByte, NeByte, LtByte, GtByte)) else EqByte(_byte_value(t))
        for t in targets
    )


# ============================================================================
# SCANNING
# ============================================================================


def _item_code(value: object) -> int | None:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str) and len(value) == 1:
        return ord(value)
    if isinstance(value, (bytes, bytearray)) and len(value) == 1:
        return value[0]
    return None


def _scan_bytes(data: Any, start: int, finders: tuple[Finder, ...]) -> int:
    size = len(data)
    pos = start
    block_end = start + (size - start) // WORD_BYTES * WORD_BYTES
    from_bytes = int.from_bytes
    while pos < block_end:
        word = from_bytes(data[pos : pos + WORD_BYTES], "little")
        mask = 0
        for finder in finders:
            mask |= finder.word_mask(word)
        if mask:
            return pos + _first_lane(mask)
        pos += WORD_BYTES
    for index in range(pos, size):
        value = data[index]
        for finder in finders:
            if finder.matches(value):
                return index
    return -1


def _scan_str(text: str, start: int, finders: tuple[Finder, ...]) -> int:
    size = len(text)
    pos = start
    from_bytes = int.from_bytes
    while pos < size:
        block = text[pos : pos + WORD_BYTES]
        if len(block) == WORD_BYTES and block.isascii():
            word = from_bytes(block.encode("ascii"), "little")
            mask = 0
            for finder in finders:
                mask |= finder.word_mask(word)
            if mask:
                return pos + _first_lane(mask)
        else:
            for offset, ch in enumerate(block):
                code = ord(ch)
                for finder in finders:
                    if finder.matches(code):
                        return pos + offset
        pos += WORD_BYTES
    return -1


def _scan_items(items: Sequence[Any], start: int, finders: tuple[Finder, ...]) -> int:
    for index in range(start, len(items)):
        code = _item_code(items[index])
        if code is None:
            continue
        for finder in finders:
            if finder.matches(code):
                return index
    return -1


def _scan(items: Sequence[Any], start: int, finders: tuple[Finder, ...]) -> int:
    if isinstance(items, str):
        return _scan_str(items, start, finders)
    if isinstance(items, (bytes, bytearray, memoryview)):
        return _scan_bytes(items, start, finders)
    return _scan_items(items, start, finders)


def find_byte_index(items: Sequence[Any], start: int, *targets: ByteTarget) -> int:
    """Index of the first item at or after ``start`` matching any target.

    Returns:
        The absolute index of the match, or -1 when nothing matches

    Raises:
        PatternError: If no target is given or a target is not a byte value

    Example:
        >>> find_byte_index(b"key=value", 0, "=")
        3
        >>> find_byte_index("abc", 0, LtByte(0x20))
        -1
    """
    return _scan(items, start, _compile(targets))


# ============================================================================
# PARSERS
# ============================================================================


def _describe(finders: tuple[Finder, ...]) -> str:
    return ", ".join(repr(f) for f in finders)


def find_byte(*targets: ByteTarget) -> Parser[int]:
    """Skip to the first item matching any target and consume it.

    The value is the offset of the match relative to the starting position.
    Fails without consuming when nothing matches.

    Example:
        >>> outcome = find_byte(",").parse("abc,def")
        >>> outcome.value, outcome.remaining
        (3, 'def')
    """
    finders = _compile(targets)

    def run(ctx: ParseContext[Any, Any]) -> Outcome[int]:
        cursor = ctx.cursor
        index = _scan(cursor.items, cursor.pos, finders)
        if index < 0:
            return Failure(cursor)
        return Success(index - cursor.pos, Cursor(cursor.items, index + 1))

    return Parser(run, f"find_byte({_describe(finders)})")


def find_byte_keep(*targets: ByteTarget) -> Parser[int]:
    """Like :func:`find_byte`, leaving the matched item unconsumed."""
    finders = _compile(targets)

    def run(ctx: ParseContext[Any, Any]) -> Outcome[int]:
        cursor = ctx.cursor
        index = _scan(cursor.items, cursor.pos, finders)
        if index < 0:
            return Failure(cursor)
        return Success(index - cursor.pos, Cursor(cursor.items, index))

    return Parser(run, f"find_byte_keep({_describe(finders)})")


def until_byte(*targets: ByteTarget) -> Parser[Sequence[Any]]:
    """Consume everything before the first item matching any target.

    The value is the slice strictly before the match; the cursor is left
    at the match. Fails without consuming when nothing matches. To consume
    to the end instead, write ``choice(until_byte(b), rest())``.

    Example:
        >>> outcome = until_byte(",").parse("abc,def")
        >>> outcome.value, outcome.cursor.pos
        ('abc', 3)
    """
    finders = _compile(targets)

    def run(ctx: ParseContext[Any, Any]) -> Outcome[Sequence[Any]]:
        cursor = ctx.cursor
        items = cursor.items
        index = _scan(items, cursor.pos, finders)
        if index < 0:
            return Failure(cursor)
        return Success(items[cursor.pos : index], Cursor(items, index))

    return Parser(run, f"until_byte({_describe(finders)})")

"""Decimal number parsers.

Digits are ASCII ``0``-``9`` given as text characters, as byte values (the
items of ``bytes``), or as 1-length ``str``/``bytes`` items of a list, so
the same parser works on ``"42"``, ``b"42"`` and ``["4", "2"]``.

Checked variants:
    Python integers do not overflow, so the plain parsers accept any number
    of digits. The ``*_checked`` variants take an :class:`IntKind` and fail
    (without consuming) when the value would not fit that fixed-width type.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import StrEnum
from typing import Any

from combparse.context import ParseContext
from combparse.core import Failure, Outcome, Parser, Success
from combparse.cursor import Cursor

__all__ = [
    "IntKind",
    "float_",
    "float_checked",
    "integer",
    "integer_checked",
    "integer_signed",
    "integer_signed_checked",
]

_MINUS = ("-", 0x2D, b"-")
_DOT = (".", 0x2E, b".")


class IntKind(StrEnum):
    """Fixed-width integer type used to bound checked number parsers.

    Example:
        >>> IntKind.U8.bounds
        (0, 255)
        >>> IntKind.I16.bounds
        (-32768, 32767)
    """

    U8 = "u8"
    U16 = "u16"
    U32 = "u32"
    U64 = "u64"
    U128 = "u128"
    I8 = "i8"
    I16 = "i16"
    I32 = "i32"
    I64 = "i64"
    I128 = "i128"

    @property
    def bits(self) -> int:
        """Width in bits."""
        return int(self.value[1:])

    @property
    def signed(self) -> bool:
        """Whether the type has negative values."""
        return self.value.startswith("i")

    @property
    def bounds(self) -> tuple[int, int]:
        """Inclusive (min, max) range of the type."""
        if self.signed:
            half = 1 << (self.bits - 1)
            return (-half, half - 1)
        return (0, (1 << self.bits) - 1)


def _digit(item: object) -> int:
    """Decimal value of an ASCII digit item, or -1."""
    if isinstance(item, int):
        code = item
    elif isinstance(item, (str, bytes)) and len(item) == 1:
        code = ord(item)
    else:
        return -1
    value = code - 0x30
    return value if 0 <= value <= 9 else -1


def _scan_digits(items: Sequence[Any], pos: int) -> tuple[int, int]:
    """Read a run of digits starting at pos; return (value, end)."""
    size = len(items)
    end = pos
    value = 0
    while end < size:
        d = _digit(items[end])
        if d < 0:
            break
        value = value * 10 + d
        end += 1
    return value, end


def _scan_integer(
    items: Sequence[Any], pos: int, *, signed: bool, bounds: tuple[int, int] | None
) -> tuple[int, int, bool] | None:
    """Read ``-?digits``; return (value, end, negative) or None."""
    negative = signed and pos < len(items) and items[pos] in _MINUS
    start = pos + 1 if negative else pos
    magnitude, end = _scan_digits(items, start)
    if end == start:
        return None
    value = -magnitude if negative else magnitude
    if bounds is not None and not bounds[0] <= value <= bounds[1]:
        return None
    return value, end, negative


def _integer_parser(name: str, *, signed: bool, bounds: tuple[int, int] | None) -> Parser[int]:
    def run(ctx: ParseContext[Any, Any]) -> Outcome[int]:
        cursor = ctx.cursor
        scanned = _scan_integer(cursor.items, cursor.pos, signed=signed, bounds=bounds)
        if scanned is None:
            return Failure(cursor)
        return Success(scanned[0], Cursor(cursor.items, scanned[1]))

    return Parser(run, name)


def integer() -> Parser[int]:
    """Unsigned decimal integer (one or more digits).

    Example:
        >>> outcome = integer().parse("123abc")
        >>> outcome.value, outcome.remaining
        (123, 'abc')
    """
    return _integer_parser("integer", signed=False, bounds=None)


def integer_signed() -> Parser[int]:
    """Decimal integer with an optional leading ``-``."""
    return _integer_parser("integer_signed", signed=True, bounds=None)


def integer_checked(kind: IntKind = IntKind.U64) -> Parser[int]:
    """Unsigned decimal integer that must fit ``kind``.

    Example:
        >>> bool(integer_checked(IntKind.U8).parse("256"))
        False
    """
    return _integer_parser(f"integer_checked({kind})", signed=False, bounds=kind.bounds)


def integer_signed_checked(kind: IntKind = IntKind.I64) -> Parser[int]:
    """Decimal integer with optional ``-`` that must fit ``kind``."""
    return _integer_parser(f"integer_signed_checked({kind})", signed=True, bounds=kind.bounds)


def _digits_text(items: Sequence[Any], start: int, end: int) -> str:
    """The digit items in ``[start, end)`` as a string."""
    if isinstance(items, str):
        return items[start:end]
    if isinstance(items, (bytes, bytearray)):
        return items[start:end].decode("ascii")
    return "".join(chr(0x30 + _digit(items[i])) for i in range(start, end))


def _float_parser(name: str, bounds: tuple[int, int] | None) -> Parser[float]:
    def run(ctx: ParseContext[Any, Any]) -> Outcome[float]:
        cursor = ctx.cursor
        items = cursor.items
        scanned = _scan_integer(items, cursor.pos, signed=True, bounds=bounds)
        if scanned is None:
            return Failure(cursor)
        _, end, negative = scanned
        digits_start = cursor.pos + 1 if negative else cursor.pos
        # float() of the text gives inf past the float range.
        text = ("-" if negative else "") + _digits_text(items, digits_start, end)
        if end < len(items) and items[end] in _DOT:
            frac_end = _scan_digits(items, end + 1)[1]
            if frac_end > end + 1:
                text += "." + _digits_text(items, end + 1, frac_end)
                end = frac_end
        return Success(float(text), Cursor(items, end))

    return Parser(run, name)


def float_() -> Parser[float]:
    """Decimal number ``-?digits(.digits)?`` as a float.

    A ``.`` that is not followed by a digit is left unconsumed.

    Example:
        >>> float_().parse("-12.50").value
        -12.5
        >>> outcome = float_().parse("7.x")
        >>> outcome.value, outcome.remaining
        (7.0, '.x')
    """
    return _float_parser("float", None)


def float_checked(kind: IntKind = IntKind.I64) -> Parser[float]:
    """Like :func:`float_`, failing when the integer part does not fit ``kind``."""
    return _float_parser(f"float_checked({kind})", kind.bounds)

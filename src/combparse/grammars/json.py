"""JSON grammar producing Python values.

Value mapping follows the standard library's ``json`` module: objects
become insertion-ordered ``dict``, arrays ``list``, numbers ``int`` (no
fraction or exponent) or ``float``, and ``true``/``false``/``null`` become
``True``/``False``/``None``.

Arrays and objects contain values, so the value parser refers to itself
through :func:`~combparse.recursive.defer`. Nesting is bounded by the
``max_depth`` of the parse.

Example:
    >>> outcome = parse_json('{"a": [1, 2.5, "x"], "b": null}')
    >>> outcome.value
    {'a': [1, 2.5, 'x'], 'b': None}

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import logging
import re
from typing import Any

from combparse.combinators import (
    Separator,
    and_parsed,
    choice,
    get_parsed,
    left,
    many,
    many_to_dict,
    many_to_list,
    map_,
    middle,
    not_empty,
    optional,
    right,
    seq,
    times,
)
from combparse.config import Capability, require
from combparse.core import Outcome, Parser, parse
from combparse.parsers import eof, item, item_while, literal, satisfy
from combparse.pattern import irange, item_matches
from combparse.recursive import defer
from combparse.whitespace import eat

__all__ = [
    "document_parser",
    "number_parser",
    "parse_json",
    "string_parser",
    "value_parser",
]

logger = logging.getLogger(__name__)

_ESCAPES = {'"': '"', "\\": "\\", "/": "/", "b": "\b", "f": "\f", "n": "\n", "r": "\r", "t": "\t"}
_ESCAPE_RE = re.compile(r"\\(?:u([0-9a-fA-F]{4})|([\"\\/bfnrt]))")


def _is_plain(ch: str) -> bool:
    return ch != '"' and ch != "\\" and ch >= " "


def _is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


def _is_hex(ch: str) -> bool:
    return "0" <= ch <= "9" or "a" <= ch <= "f" or "A" <= ch <= "F"


def _unescape(raw: str) -> str:
    """Decode JSON escapes, joining UTF-16 surrogate pairs."""
    if "\\" not in raw:
        return raw

    def replace(match: re.Match[str]) -> str:
        code, simple = match.groups()
        if code is not None:
            return chr(int(code, 16))
        return _ESCAPES[simple]

    decoded = _ESCAPE_RE.sub(replace, raw)
    if any("\ud800" <= ch <= "\udfff" for ch in decoded):
        # Lone surrogates become U+FFFD.
        decoded = decoded.encode("utf-16", "surrogatepass").decode("utf-16", "replace")
    return decoded


def _to_number(parsed: tuple[str, tuple[Any, ...]]) -> int | float:
    text, (_, _, fraction, exponent) = parsed
    if fraction is None and exponent is None:
        return int(text)
    return float(text)


def string_parser() -> Parser[str]:
    """JSON string literal with escapes decoded."""
    require(Capability.EXAMPLE_GRAMMARS)
    escaped = right(
        item("\\"),
        choice(
            right(item("u"), times(4, satisfy(_is_hex))),
            item_matches(*'"\\/bfnrt'),
        ),
    )
    body = many(choice(not_empty(item_while(_is_plain)), escaped))
    return map_(middle(item('"'), body, item('"')), _unescape).named("json string")


def number_parser() -> Parser[int | float]:
    """JSON number: ``-?(0|[1-9][0-9]*)(.[0-9]+)?([eE][+-]?[0-9]+)?``."""
    require(Capability.EXAMPLE_GRAMMARS)
    digits = not_empty(item_while(_is_digit))
    nonzero = get_parsed(seq(item_matches(irange("1", "9")), item_while(_is_digit)))
    whole = choice(item("0"), nonzero)
    fraction = right(item("."), digits)
    exponent = seq(item_matches("e", "E"), optional(item_matches("+", "-")), digits)
    number = and_parsed(seq(optional(item("-")), whole, optional(fraction), optional(exponent)))
    return map_(number, _to_number).named("json number")


def value_parser() -> Parser[Any]:
    """Any JSON value, with leading whitespace skipped."""
    require(Capability.EXAMPLE_GRAMMARS)
    value: Parser[Any]
    nested = defer(lambda: value, "json value")

    comma = Separator(eat(item(",")))
    string = string_parser()
    array = middle(item("["), many_to_list(nested, separator=comma), eat(item("]")))
    pair = seq(left(eat(string), eat(item(":"))), nested)
    obj = middle(item("{"), many_to_dict(pair, separator=comma), eat(item("}")))
    keyword = choice(
        map_(literal("true"), lambda _: True),
        map_(literal("false"), lambda _: False),
        map_(literal("null"), lambda _: None),
    )
    value = eat(choice(string, number_parser(), obj, array, keyword)).named("json")
    logger.debug("Built JSON value parser")
    return value


def document_parser() -> Parser[Any]:
    """A complete JSON text: one value, optional trailing whitespace, end of input."""
    return left(value_parser(), eat(eof())).named("json document")


def parse_json(text: str, *, max_depth: int | None = None) -> Outcome[Any]:
    """Parse a complete JSON text.

    Returns:
        Success with the Python value, or Failure at the offending position

    Raises:
        CapabilityDisabledError: If ``example-grammars`` is disabled
        DepthLimitExceededError: If arrays/objects nest beyond max_depth
    """
    return parse(document_parser(), text, max_depth=max_depth)

"""Parser core: the parser abstraction, outcomes and the parse entry point.

Architecture:
    A :class:`Parser` wraps a plain function ``ParseContext -> Outcome``.
    Every parser returns either :class:`Success` (value plus advanced
    cursor) or :class:`Failure` (cursor at which the failure was reported).
    Failures carry no message: "no match at this position" is the only
    failure kind, and it is ordinary control flow for ``choice`` and
    ``many`` rather than an exception.

Consumption discipline:
    An atomic parser fails with the cursor it started with. Composite
    parsers (sequences, ``bind``) may fail after consuming; ``choice`` only
    tries its next alternative after a non-consuming failure, and
    :func:`~combparse.combinators.attempt` turns any failure into a
    non-consuming one.

Immutability:
    Parser values are frozen dataclasses holding a function and a debug
    name. They hold no mutable state and can be shared between threads;
    every invocation owns its own :class:`~combparse.context.ParseContext`.

See Also:
    - :mod:`combparse.combinators` - sequencing, choice and repetition
    - :mod:`combparse.parsers` - base item parsers
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from combparse.constants import MAX_DEPTH
from combparse.context import ParseContext
from combparse.cursor import Cursor
from combparse.depth_guard import depth_clamp
from combparse.diagnostics import ConfigurationError, ErrorTemplate

__all__ = [
    "Failure",
    "Outcome",
    "Parser",
    "Success",
    "create_parser",
    "failure",
    "parse",
    "pure",
    "success",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Success[R]:
    """Successful outcome: parsed value and the advanced cursor.

    Example:
        >>> outcome = parse(pure(42), "abc")
        >>> bool(outcome), outcome.value, outcome.cursor.pos
        (True, 42, 0)
    """

    value: R
    cursor: Cursor[Any]

    def __bool__(self) -> bool:
        return True

    @property
    def remaining(self) -> Sequence[Any]:
        """Unconsumed input after the match."""
        return self.cursor.rest()


@dataclass(frozen=True, slots=True)
class Failure:
    """Failed outcome: no value, only the cursor where the failure was reported.

    For atomic parsers the cursor equals the starting cursor (non-consuming
    failure). A cursor past the start means the failing parser consumed
    input first, which stops ``choice`` from trying further alternatives.
    """

    cursor: Cursor[Any]

    def __bool__(self) -> bool:
        return False

    @property
    def remaining(self) -> Sequence[Any]:
        """Unconsumed input at the failure position."""
        return self.cursor.rest()


type Outcome[R] = Success[R] | Failure

type ParseFn[R] = Callable[[ParseContext[Any, Any]], Outcome[R]]


@dataclass(frozen=True, slots=True)
class Parser[R]:
    """A reusable, stateless parsing computation.

    Attributes:
        fn: Function from ParseContext to Outcome
        name: Debug name used in logs and repr

    Operators:
        ``p | q``  - :func:`~combparse.combinators.choice`
        ``p >> q`` - :func:`~combparse.combinators.right` (keep q's value)
        ``p << q`` - :func:`~combparse.combinators.left` (keep p's value)

    Example:
        >>> from combparse.parsers import item
        >>> p = item("a") >> item("b")
        >>> p.parse("ab").value
        'b'
    """

    fn: ParseFn[R]
    name: str = "parser"

    def __call__(self, ctx: ParseContext[Any, Any]) -> Outcome[R]:
        return self.fn(ctx)

    def __repr__(self) -> str:
        return f"<Parser {self.name}>"

    def run(self, ctx: ParseContext[Any, Any]) -> Outcome[R]:
        """Run the parser against an existing context."""
        return self.fn(ctx)

    def parse(
        self, items: Sequence[Any], state: Any = None, *, max_depth: int | None = None
    ) -> Outcome[R]:
        """Shorthand for :func:`parse` with this parser."""
        return parse(self, items, state, max_depth=max_depth)

    def named(self, name: str) -> Parser[R]:
        """Return the same parser with another debug name."""
        return Parser(self.fn, name)

    # Fluent forms of the combinators. Imports are local because
    # combinators builds on this module.

    def map[R2](self, f: Callable[[R], R2]) -> Parser[R2]:
        from combparse.combinators import map_

        return map_(self, f)

    def map_if[R2](self, f: Callable[[R], R2 | None]) -> Parser[R2]:
        from combparse.combinators import map_if

        return map_if(self, f)

    def filter(self, predicate: Callable[[R], bool]) -> Parser[R]:
        from combparse.combinators import filter_

        return filter_(self, predicate)

    def bind[R2](self, f: Callable[[R], Parser[R2]]) -> Parser[R2]:
        from combparse.combinators import bind

        return bind(self, f)

    def right[R2](self, other: Parser[R2]) -> Parser[R2]:
        from combparse.combinators import right

        return right(self, other)

    def left(self, other: Parser[Any]) -> Parser[R]:
        from combparse.combinators import left

        return left(self, other)

    def attempt(self) -> Parser[R]:
        from combparse.combinators import attempt

        return attempt(self)

    def optional(self) -> Parser[R | None]:
        from combparse.combinators import optional

        return optional(self)

    def peek(self) -> Parser[R]:
        from combparse.combinators import peek

        return peek(self)

    def lift_to_state[R2](self, f: Callable[[Any, R], R2]) -> Parser[R2]:
        from combparse.combinators import lift_to_state

        return lift_to_state(f, self)

    def __or__(self, other: Parser[Any]) -> Parser[Any]:
        from combparse.combinators import choice

        return choice(self, other)

    def __rshift__[R2](self, other: Parser[R2]) -> Parser[R2]:
        return self.right(other)

    def __lshift__(self, other: Parser[Any]) -> Parser[R]:
        return self.left(other)


def create_parser[R](fn: ParseFn[R], name: str | None = None) -> Parser[R]:
    """Wrap a raw ``ParseContext -> Outcome`` function as a Parser."""
    return Parser(fn, name if name is not None else getattr(fn, "__name__", "parser"))


def pure[R](value: R) -> Parser[R]:
    """Always succeed with ``value`` without consuming input.

    Example:
        >>> parse(pure("x"), "").value
        'x'
    """

    def run(ctx: ParseContext[Any, Any]) -> Outcome[R]:
        return Success(value, ctx.cursor)

    return Parser(run, f"pure({value!r})")


def success() -> Parser[None]:
    """Always succeed with ``None`` without consuming input."""
    return pure(None)


def failure() -> Parser[Any]:
    """Always fail without consuming input (the identity of ``choice``)."""

    def run(ctx: ParseContext[Any, Any]) -> Outcome[Any]:
        return Failure(ctx.cursor)

    return Parser(run, "failure")


def parse[R](
    parser: Parser[R],
    items: Sequence[Any],
    state: Any = None,
    *,
    max_depth: int | None = None,
) -> Outcome[R]:
    """Run ``parser`` from the start of ``items``.

    Args:
        parser: The parser to run
        items: Input sequence (str, bytes, list of tokens, ...)
        state: Optional mutable user state threaded through the parse
        max_depth: Nesting limit for recursive parsers (default: MAX_DEPTH,
            clamped against the interpreter recursion limit)

    Returns:
        Success with the value and the cursor after the match, or Failure
        with the cursor where the failure was reported. Leftover input is
        available as ``outcome.remaining``.

    Raises:
        ConfigurationError: If max_depth is not positive
        DepthLimitExceededError: If recursive parsers nest beyond max_depth

    Example:
        >>> from combparse.number import integer
        >>> outcome = parse(integer(), "123abc")
        >>> outcome.value, outcome.remaining
        (123, 'abc')
    """
    requested = MAX_DEPTH if max_depth is None else max_depth
    if requested <= 0:
        raise ConfigurationError(ErrorTemplate.invalid_config_value("max_depth", requested))

    ctx: ParseContext[Any, Any] = ParseContext(
        Cursor(items, 0), state, 0, depth_clamp(requested)
    )
    outcome = parser.fn(ctx)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Parser %s %s at offset %d of %d",
            parser.name,
            "succeeded" if outcome else "failed",
            outcome.cursor.pos,
            len(items),
        )
    return outcome

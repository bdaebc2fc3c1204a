"""Combinator algebra: sequencing, choice, repetition and state threading.

Every combinator returns a new :class:`~combparse.core.Parser`; none of
them mutate their arguments, so parsers can be built once and shared.

Consumption rules:
    - Sequences (``seq``, ``right``, ``left``, ``bind``...) report a failure
      at the position where the failing part gave up, so a failure after
      consumed input is visible to enclosing combinators.
    - ``choice`` tries the next alternative only after a non-consuming
      failure. Wrap an alternative in :func:`attempt` to make it backtrack.
    - Guards (``map_if``, ``filter``, ``not_empty``) reject at the starting
      position, so a rejected alternative lets ``choice`` move on.

Repetition:
    ``many`` and friends are loops, never recursion. A repetition stops at
    the first non-consuming failure of its parser and fails on a consuming
    one. A success that consumes nothing ends the repetition without being
    stored, so at most N+1 applications happen on N remaining items.

Python 3.13+.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from combparse.context import ParseContext
from combparse.core import Failure, Outcome, Parser, Success, failure
from combparse.cursor import Span
from combparse.diagnostics import ErrorTemplate, PatternError
from combparse.sinks import (
    ArraySink,
    DictSink,
    DiscardSink,
    FixedArray,
    FoldSink,
    ListSink,
    Sink,
    SortedDictSink,
    StateFoldSink,
)

__all__ = [
    "Separator",
    "and_parsed",
    "attempt",
    "bind",
    "chain",
    "choice",
    "choice_diff",
    "count_consumed",
    "filter_",
    "fold",
    "fold_state",
    "get_parsed",
    "greedy_choice",
    "into_type",
    "left",
    "lift",
    "lift_to_state",
    "many",
    "many1",
    "many_to_array",
    "many_to_dict",
    "many_to_list",
    "many_to_sorted_dict",
    "map_",
    "map_if",
    "middle",
    "not_empty",
    "not_followed_by",
    "optional",
    "peek",
    "right",
    "seq",
    "seq2",
    "seq3",
    "spanned",
    "succeed",
    "times",
]

_DISCARD = DiscardSink()


def _name(p: Parser[Any]) -> str:
    return p.name


# ============================================================================
# TRANSFORMATION
# ============================================================================


def map_[R, R2](p: Parser[R], f: Callable[[R], R2]) -> Parser[R2]:
    """Transform the value of ``p`` with ``f``.

    Example:
        >>> from combparse.parsers import literal
        >>> map_(literal("false"), lambda _: False).parse("false").value
        False
    """
    inner = p.fn

    def run(ctx: ParseContext[Any, Any]) -> Outcome[R2]:
        res = inner(ctx)
        if isinstance(res, Failure):
            return res
        return Success(f(res.value), res.cursor)

    return Parser(run, f"map({_name(p)})")


def map_if[R, R2](p: Parser[R], f: Callable[[R], R2 | None]) -> Parser[R2]:
    """Transform the value of ``p``; fail where ``f`` returns None."""
    inner = p.fn

    def run(ctx: ParseContext[Any, Any]) -> Outcome[R2]:
        res = inner(ctx)
        if isinstance(res, Failure):
            return res
        value = f(res.value)
        if value is None:
            return Failure(ctx.cursor)
        return Success(value, res.cursor)

    return Parser(run, f"map_if({_name(p)})")


def filter_[R](p: Parser[R], predicate: Callable[[R], bool]) -> Parser[R]:
    """Accept the result of ``p`` only when ``predicate(value)`` holds."""
    inner = p.fn

    def run(ctx: ParseContext[Any, Any]) -> Outcome[R]:
        res = inner(ctx)
        if isinstance(res, Failure):
            return res
        if not predicate(res.value):
            return Failure(ctx.cursor)
        return res

    return Parser(run, f"filter({_name(p)})")


def into_type[R](p: Parser[Any], target: Callable[[Any], R]) -> Parser[R]:
    """Convert the value of ``p`` by calling ``target`` on it.

    Example:
        >>> from combparse.parsers import item_while
        >>> into_type(item_while(str.isdigit), int).parse("42").value
        42
    """
    return map_(p, target).named(f"into_type({_name(p)}, {getattr(target, '__name__', target)})")


def bind[R, R2](p: Parser[R], f: Callable[[R], Parser[R2]]) -> Parser[R2]:
    """Run ``p``, then the parser ``f(value)`` from where ``p`` stopped."""
    inner = p.fn

    def run(ctx: ParseContext[Any, Any]) -> Outcome[R2]:
        res = inner(ctx)
        if isinstance(res, Failure):
            return res
        return f(res.value).fn(ctx.at(res.cursor))

    return Parser(run, f"bind({_name(p)})")


def lift_to_state[S, R, R2](f: Callable[[S, R], R2], p: Parser[R]) -> Parser[R2]:
    """Run ``p`` and replace its value with ``f(state, value)``.

    ``f`` may mutate the user state.

    Example:
        >>> from combparse.number import integer
        >>> seen: list[int] = []
        >>> lift_to_state(lambda s, n: s.append(n), integer()).parse("7", seen).value is None
        True
        >>> seen
        [7]
    """
    inner = p.fn

    def run(ctx: ParseContext[Any, Any]) -> Outcome[R2]:
        res = inner(ctx)
        if isinstance(res, Failure):
            return res
        return Success(f(ctx.state, res.value), res.cursor)

    return Parser(run, f"lift_to_state({_name(p)})")


# ============================================================================
# SEQUENCING
# ============================================================================


def _sequence(
    parsers: Sequence[Parser[Any]],
) -> Callable[[ParseContext[Any, Any]], Outcome[list[Any]]]:
    fns = tuple(p.fn for p in parsers)

    def run(ctx: ParseContext[Any, Any]) -> Outcome[list[Any]]:
        values: list[Any] = []
        cursor = ctx.cursor
        for fn in fns:
            res = fn(ctx.at(cursor))
            if isinstance(res, Failure):
                return res
            values.append(res.value)
            cursor = res.cursor
        return Success(values, cursor)

    return run


def seq(*parsers: Parser[Any]) -> Parser[tuple[Any, ...]]:
    """Run parsers in order; the value is the tuple of their values.

    Example:
        >>> from combparse.parsers import item
        >>> seq(item("a"), item("b")).parse("abc").value
        ('a', 'b')
    """
    run_all = _sequence(parsers)

    def run(ctx: ParseContext[Any, Any]) -> Outcome[tuple[Any, ...]]:
        res = run_all(ctx)
        if isinstance(res, Failure):
            return res
        return Success(tuple(res.value), res.cursor)

    return Parser(run, f"seq({', '.join(_name(p) for p in parsers)})")


def seq2[A, B](p1: Parser[A], p2: Parser[B]) -> Parser[tuple[A, B]]:
    return seq(p1, p2)  # type: ignore[return-value]


def seq3[A, B, C](p1: Parser[A], p2: Parser[B], p3: Parser[C]) -> Parser[tuple[A, B, C]]:
    return seq(p1, p2, p3)  # type: ignore[return-value]


def lift[R](f: Callable[..., R], *parsers: Parser[Any]) -> Parser[R]:
    """Run parsers in order and apply ``f`` to their values.

    Example:
        >>> from combparse.number import integer
        >>> from combparse.parsers import skip
        >>> add = lift(lambda a, _, b: a + b, integer(), skip("+"), integer())
        >>> add.parse("2+3").value
        5
    """
    run_all = _sequence(parsers)

    def run(ctx: ParseContext[Any, Any]) -> Outcome[R]:
        res = run_all(ctx)
        if isinstance(res, Failure):
            return res
        return Success(f(*res.value), res.cursor)

    return Parser(run, f"lift({', '.join(_name(p) for p in parsers)})")


def _keep(index: int, label: str, parsers: Sequence[Parser[Any]]) -> Parser[Any]:
    if len(parsers) < 2:
        msg = f"{label}() requires at least two parsers"
        raise ValueError(msg)
    run_all = _sequence(parsers)

    def run(ctx: ParseContext[Any, Any]) -> Outcome[Any]:
        res = run_all(ctx)
        if isinstance(res, Failure):
            return res
        return Success(res.value[index], res.cursor)

    return Parser(run, f"{label}({', '.join(_name(p) for p in parsers)})")


def right(*parsers: Parser[Any]) -> Parser[Any]:
    """Run parsers in order and keep the value of the last one (``p1 >> p2``)."""
    return _keep(-1, "right", parsers)


def left(*parsers: Parser[Any]) -> Parser[Any]:
    """Run parsers in order and keep the value of the first one (``p1 << p2``)."""
    return _keep(0, "left", parsers)


def middle[R](p1: Parser[Any], p2: Parser[R], p3: Parser[Any]) -> Parser[R]:
    """Run three parsers and keep the value of the middle one.

    Example:
        >>> from combparse.number import integer
        >>> from combparse.parsers import skip
        >>> middle(skip("("), integer(), skip(")")).parse("(12)").value
        12
    """
    return _keep(1, "middle", (p1, p2, p3))


# ============================================================================
# CHOICE AND BACKTRACKING
# ============================================================================


def choice(*parsers: Parser[Any]) -> Parser[Any]:
    """Try alternatives in order (``p1 | p2``).

    The next alternative runs only when the previous one failed without
    consuming input. A consuming failure is reported as is. With no
    alternatives the result is :func:`~combparse.core.failure`.

    Example:
        >>> from combparse.parsers import literal
        >>> p = choice(literal("true"), literal("false"))
        >>> outcome = p.parse("false")
        >>> outcome.value, outcome.cursor.pos
        ('false', 5)
    """
    if not parsers:
        return failure()
    if len(parsers) == 1:
        return parsers[0]
    fns = tuple(p.fn for p in parsers)

    def run(ctx: ParseContext[Any, Any]) -> Outcome[Any]:
        start = ctx.cursor.pos
        res: Outcome[Any] = Failure(ctx.cursor)
        for fn in fns:
            res = fn(ctx)
            if not isinstance(res, Failure) or res.cursor.pos != start:
                return res
        return res

    return Parser(run, " | ".join(_name(p) for p in parsers))


def choice_diff(*parsers: Parser[Any]) -> Parser[None]:
    """Like :func:`choice` for alternatives of different value types; value is None."""
    return map_(choice(*parsers), lambda _: None).named(
        f"choice_diff({', '.join(_name(p) for p in parsers)})"
    )


def greedy_choice(*parsers: Parser[Any]) -> Parser[Any]:
    """Run every alternative from the same position; keep the longest success.

    On equal consumption the earlier alternative wins. When all fail, the
    failure that got furthest is reported.

    Example:
        >>> from combparse.number import integer
        >>> from combparse.parsers import item_while
        >>> word = map_(item_while(str.isalnum), lambda _: 0)
        >>> greedy_choice(integer(), word).parse("123abc").value
        0
    """
    if not parsers:
        return failure()
    fns = tuple(p.fn for p in parsers)

    def run(ctx: ParseContext[Any, Any]) -> Outcome[Any]:
        best: Success[Any] | None = None
        furthest: Failure = Failure(ctx.cursor)
        for fn in fns:
            res = fn(ctx)
            if isinstance(res, Failure):
                if res.cursor.pos > furthest.cursor.pos:
                    furthest = res
            elif best is None or res.cursor.pos > best.cursor.pos:
                best = res
        return furthest if best is None else best

    return Parser(run, f"greedy_choice({', '.join(_name(p) for p in parsers)})")


def attempt[R](p: Parser[R]) -> Parser[R]:
    """Run ``p``; on failure rewind to the starting position.

    Lets :func:`choice` try the next alternative after ``p`` consumed input.
    """
    inner = p.fn

    def run(ctx: ParseContext[Any, Any]) -> Outcome[R]:
        res = inner(ctx)
        if isinstance(res, Failure) and res.cursor.pos != ctx.cursor.pos:
            return Failure(ctx.cursor)
        return res

    return Parser(run, f"attempt({_name(p)})")


def optional[R](p: Parser[R]) -> Parser[R | None]:
    """Run ``p``; succeed with None when it fails without consuming.

    Example:
        >>> from combparse.number import integer
        >>> optional(integer()).parse("abc").value is None
        True
    """
    inner = p.fn

    def run(ctx: ParseContext[Any, Any]) -> Outcome[R | None]:
        res = inner(ctx)
        if isinstance(res, Failure):
            if res.cursor.pos != ctx.cursor.pos:
                return res
            return Success(None, ctx.cursor)
        return res

    return Parser(run, f"optional({_name(p)})")


succeed = optional


def peek[R](p: Parser[R]) -> Parser[R]:
    """Run ``p`` without consuming input, whatever its outcome."""
    inner = p.fn

    def run(ctx: ParseContext[Any, Any]) -> Outcome[R]:
        res = inner(ctx)
        if isinstance(res, Failure):
            return Failure(ctx.cursor)
        return Success(res.value, ctx.cursor)

    return Parser(run, f"peek({_name(p)})")


def not_followed_by(p: Parser[Any]) -> Parser[None]:
    """Succeed with None, consuming nothing, iff ``p`` fails here."""
    inner = p.fn

    def run(ctx: ParseContext[Any, Any]) -> Outcome[None]:
        if isinstance(inner(ctx), Failure):
            return Success(None, ctx.cursor)
        return Failure(ctx.cursor)

    return Parser(run, f"not_followed_by({_name(p)})")


def not_empty[R](p: Parser[R]) -> Parser[R]:
    """Reject a result of ``p`` whose length is zero (an empty slice)."""
    inner = p.fn

    def run(ctx: ParseContext[Any, Any]) -> Outcome[R]:
        res = inner(ctx)
        if isinstance(res, Failure):
            return res
        if len(res.value) == 0:  # type: ignore[arg-type]
            return Failure(ctx.cursor)
        return res

    return Parser(run, f"not_empty({_name(p)})")


# ============================================================================
# CONSUMPTION INTROSPECTION
# ============================================================================


def count_consumed[R](p: Parser[R]) -> Parser[tuple[int, R]]:
    """Pair the value of ``p`` with the number of items it consumed."""
    inner = p.fn

    def run(ctx: ParseContext[Any, Any]) -> Outcome[tuple[int, R]]:
        res = inner(ctx)
        if isinstance(res, Failure):
            return res
        return Success((res.cursor.pos - ctx.cursor.pos, res.value), res.cursor)

    return Parser(run, f"count_consumed({_name(p)})")


def and_parsed[R](p: Parser[R]) -> Parser[tuple[Sequence[Any], R]]:
    """Pair the value of ``p`` with the input slice it consumed."""
    inner = p.fn

    def run(ctx: ParseContext[Any, Any]) -> Outcome[tuple[Sequence[Any], R]]:
        res = inner(ctx)
        if isinstance(res, Failure):
            return res
        return Success((ctx.items[ctx.cursor.pos : res.cursor.pos], res.value), res.cursor)

    return Parser(run, f"and_parsed({_name(p)})")


def get_parsed(p: Parser[Any]) -> Parser[Sequence[Any]]:
    """Replace the value of ``p`` with the input slice it consumed.

    Example:
        >>> from combparse.number import integer
        >>> from combparse.parsers import skip
        >>> get_parsed(seq(integer(), skip("."), integer())).parse("1.25x").value
        '1.25'
    """
    inner = p.fn

    def run(ctx: ParseContext[Any, Any]) -> Outcome[Sequence[Any]]:
        res = inner(ctx)
        if isinstance(res, Failure):
            return res
        return Success(ctx.items[ctx.cursor.pos : res.cursor.pos], res.cursor)

    return Parser(run, f"get_parsed({_name(p)})")


def spanned[R](p: Parser[R]) -> Parser[tuple[R, Span]]:
    """Pair the value of ``p`` with the span of input it consumed."""
    inner = p.fn

    def run(ctx: ParseContext[Any, Any]) -> Outcome[tuple[R, Span]]:
        res = inner(ctx)
        if isinstance(res, Failure):
            return res
        return Success((res.value, Span(ctx.cursor.pos, res.cursor.pos)), res.cursor)

    return Parser(run, f"spanned({_name(p)})")


# ============================================================================
# REPETITION
# ============================================================================


@dataclass(frozen=True, slots=True)
class Separator:
    """Separator between repeated elements.

    Attributes:
        parser: Parser for the separator itself (its value is ignored)
        allow_trailing: Whether a separator may follow the last element
    """

    parser: Parser[Any]
    allow_trailing: bool = False


def times(n: int, p: Parser[Any]) -> Parser[Sequence[Any]]:
    """Run ``p`` exactly ``n`` times; the value is the consumed slice.

    Raises:
        PatternError: If n is negative

    Example:
        >>> from combparse.parsers import literal
        >>> outcome = times(2, literal("12")).parse("1212End")
        >>> outcome.value, outcome.remaining
        ('1212', 'End')
    """
    if n < 0:
        raise PatternError(ErrorTemplate.invalid_repetition("times", n))
    inner = p.fn

    def run(ctx: ParseContext[Any, Any]) -> Outcome[Sequence[Any]]:
        cursor = ctx.cursor
        for _ in range(n):
            res = inner(ctx.at(cursor))
            if isinstance(res, Failure):
                return res
            cursor = res.cursor
        return Success(ctx.items[ctx.cursor.pos : cursor.pos], cursor)

    return Parser(run, f"times({n}, {_name(p)})")


def _repeat(
    p: Parser[Any],
    sink: Sink[Any, Any],
    separator: Separator | None,
    at_least: int,
    label: str,
) -> Parser[Any]:
    inner = p.fn
    sep_fn = separator.parser.fn if separator is not None else None
    allow_trailing = separator is None or separator.allow_trailing
    yields_slice = sink.yields_slice

    def run(ctx: ParseContext[Any, Any]) -> Outcome[Any]:
        start = ctx.cursor
        cursor = start
        acc = sink.start(ctx.state)
        count = 0
        trailing = False
        while True:
            res = inner(ctx.at(cursor))
            if isinstance(res, Failure):
                if res.cursor.pos != cursor.pos:
                    return res
                break
            if res.cursor.pos == cursor.pos:
                break
            cursor = res.cursor
            count += 1
            trailing = False
            if not sink.push(acc, res.value):
                break
            if sep_fn is not None:
                sep = sep_fn(ctx.at(cursor))
                if isinstance(sep, Failure):
                    if sep.cursor.pos != cursor.pos:
                        return sep
                    break
                cursor = sep.cursor
                trailing = True

        if trailing and not allow_trailing:
            return Failure(cursor)
        if count < at_least:
            return Failure(cursor)
        if yields_slice:
            return Success(ctx.items[start.pos : cursor.pos], cursor)
        return Success(sink.finish(acc), cursor)

    return Parser(run, f"{label}({_name(p)})")


def many(
    p: Parser[Any],
    sink: Sink[Any, Any] = _DISCARD,
    *,
    separator: Separator | None = None,
) -> Parser[Any]:
    """Zero or more repetitions of ``p``, collected by ``sink``.

    With the default :class:`~combparse.sinks.DiscardSink` the value is the
    consumed input slice.

    Example:
        >>> from combparse.number import integer
        >>> from combparse.parsers import skip
        >>> many(integer(), separator=Separator(skip(","))).parse("1,2,3").value
        '1,2,3'
    """
    return _repeat(p, sink, separator, 0, "many")


def many1(
    p: Parser[Any],
    sink: Sink[Any, Any] = _DISCARD,
    *,
    separator: Separator | None = None,
) -> Parser[Any]:
    """Like :func:`many`, but fails unless ``p`` succeeds at least once."""
    return _repeat(p, sink, separator, 1, "many1")


def _repeat_with(
    p: Parser[Any], sink: Sink[Any, Any], separator: Separator | None, allow_empty: bool
) -> Parser[Any]:
    if allow_empty:
        return many(p, sink, separator=separator)
    return many1(p, sink, separator=separator)


def fold[A, R](
    p: Parser[R],
    init: Callable[[], A],
    f: Callable[[A, R], A],
    *,
    separator: Separator | None = None,
    allow_empty: bool = True,
) -> Parser[A]:
    """Fold the values of repeated ``p`` into a fresh accumulator.

    Example:
        >>> from combparse.number import integer
        >>> from combparse.parsers import skip
        >>> total = fold(integer(), lambda: 0, lambda acc, n: acc + n,
        ...              separator=Separator(skip(",")))
        >>> total.parse("1,2,3").value
        6
    """
    return _repeat_with(p, FoldSink(init, f), separator, allow_empty)


def many_to_list[R](
    p: Parser[R], *, separator: Separator | None = None, allow_empty: bool = True
) -> Parser[list[R]]:
    """Collect repeated values into a list (``growable-sequence``)."""
    return _repeat_with(p, ListSink(), separator, allow_empty)


def many_to_dict(
    p: Parser[tuple[Any, Any]], *, separator: Separator | None = None, allow_empty: bool = True
) -> Parser[dict[Any, Any]]:
    """Collect repeated ``(key, value)`` pairs into a dict (``growable-mapping``)."""
    return _repeat_with(p, DictSink(), separator, allow_empty)


def many_to_sorted_dict(
    p: Parser[tuple[Any, Any]], *, separator: Separator | None = None, allow_empty: bool = True
) -> Parser[dict[Any, Any]]:
    """Collect repeated pairs into a dict ordered by key (``growable-mapping``)."""
    return _repeat_with(p, SortedDictSink(), separator, allow_empty)


def many_to_array[R](
    p: Parser[R],
    capacity: int,
    *,
    separator: Separator | None = None,
    allow_empty: bool = True,
) -> Parser[FixedArray[R]]:
    """Collect at most ``capacity`` repeated values into a FixedArray."""
    return _repeat_with(p, ArraySink(capacity), separator, allow_empty)


def fold_state[S, R](
    p: Parser[R],
    f: Callable[[S, R], object],
    *,
    separator: Separator | None = None,
    allow_empty: bool = True,
) -> Parser[S]:
    """Run ``p`` repeatedly, calling ``f(state, value)`` for each value.

    The value of the repetition is the user state itself.

    Example:
        >>> from combparse.number import integer
        >>> from combparse.parsers import skip
        >>> p = fold_state(integer(), lambda s, n: s.append(n), separator=Separator(skip(",")))
        >>> p.parse("4,5", []).value
        [4, 5]
    """
    return _repeat_with(p, StateFoldSink(f), separator, allow_empty)


def chain[R](p: Parser[R], op: Parser[Callable[[R, R], R]]) -> Parser[R]:
    """Left fold of ``p (op p)*``, where ``op`` yields a binary function.

    Iterative, so arbitrarily long operand chains use constant stack. An
    operator that is not followed by an operand is left unconsumed.

    Example:
        >>> from combparse.number import integer
        >>> from combparse.parsers import skip
        >>> minus = map_(skip("-"), lambda _: lambda a, b: a - b)
        >>> chain(integer(), minus).parse("10-3-2-").value
        5
    """
    operand = p.fn
    operator = op.fn

    def run(ctx: ParseContext[Any, Any]) -> Outcome[R]:
        res = operand(ctx)
        if isinstance(res, Failure):
            return res
        value = res.value
        cursor = res.cursor
        while True:
            op_res = operator(ctx.at(cursor))
            if isinstance(op_res, Failure):
                if op_res.cursor.pos != cursor.pos:
                    return op_res
                break
            rhs = operand(ctx.at(op_res.cursor))
            if isinstance(rhs, Failure):
                if rhs.cursor.pos != op_res.cursor.pos:
                    return rhs
                break
            if rhs.cursor.pos == cursor.pos:
                break
            value = op_res.value(value, rhs.value)
            cursor = rhs.cursor
        return Success(value, cursor)

    return Parser(run, f"chain({_name(p)}, {_name(op)})")

"""Self-referential grammars: deferred construction and forward declarations.

A parser that contains itself cannot be built eagerly. Two explicit
indirections are offered:

- :func:`defer` takes a factory and calls it each time the parser runs.
  Grammars written as functions (``def value(): ...``) refer to themselves
  as ``defer(value)``.
- :class:`Forward` is declared first, used inside other parsers, and given
  its definition exactly once with :meth:`Forward.define`.

Depth limiting:
    Each entry into a deferred or forward parser increments the context
    depth. A parse that nests beyond ``max_depth`` raises
    :class:`~combparse.diagnostics.DepthLimitExceededError` instead of
    exhausting the interpreter stack.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from combparse.context import ParseContext
from combparse.core import Outcome, Parser
from combparse.depth_guard import raise_depth_exceeded
from combparse.diagnostics import ErrorTemplate, GrammarDefinitionError

__all__ = ["Forward", "defer"]

logger = logging.getLogger(__name__)


def defer[R](factory: Callable[[], Parser[R]], name: str | None = None) -> Parser[R]:
    """Build the real parser from ``factory`` each time this parser runs.

    Example:
        >>> from combparse.combinators import choice, middle
        >>> from combparse.parsers import item, skip
        >>> def nested():
        ...     return choice(middle(skip("("), defer(nested), skip(")")), item("x"))
        >>> nested().parse("((x))").value
        'x'
    """
    label = name if name is not None else f"defer({getattr(factory, '__name__', 'factory')})"

    def run(ctx: ParseContext[Any, Any]) -> Outcome[R]:
        if ctx.is_depth_exceeded():
            raise_depth_exceeded(ctx.max_depth)
        return factory().fn(ctx.enter())

    return Parser(run, label)


class Forward[R]:
    """Forward declaration of a parser.

    Example:
        >>> from combparse.combinators import choice, middle
        >>> from combparse.parsers import item, skip
        >>> expr = Forward("expr")
        >>> expr.define(choice(middle(skip("("), expr.parser, skip(")")), item("x")))
        >>> expr.parser.parse("(x)").value
        'x'
    """

    __slots__ = ("_target", "name", "parser")

    def __init__(self, name: str = "forward") -> None:
        self.name = name
        self._target: Parser[R] | None = None
        self.parser: Parser[R] = Parser(self._run, name)

    @property
    def is_defined(self) -> bool:
        """Whether :meth:`define` has been called."""
        return self._target is not None

    def define(self, parser: Parser[R]) -> None:
        """Set the parser this declaration stands for.

        Raises:
            GrammarDefinitionError: If the declaration is already defined
        """
        if self._target is not None:
            raise GrammarDefinitionError(ErrorTemplate.forward_redefined(self.name))
        self._target = parser
        logger.debug("Forward parser %s defined as %s", self.name, parser.name)

    def _run(self, ctx: ParseContext[Any, Any]) -> Outcome[R]:
        target = self._target
        if target is None:
            raise GrammarDefinitionError(ErrorTemplate.forward_undefined(self.name))
        if ctx.is_depth_exceeded():
            raise_depth_exceeded(ctx.max_depth)
        return target.fn(ctx.enter())

    def __repr__(self) -> str:
        state = "defined" if self._target is not None else "undefined"
        return f"<Forward {self.name} ({state})>"

"""Accumulator sinks for repetition combinators.

A sink is the caller-chosen destination of the values produced by
:func:`~combparse.combinators.many` and friends. Sinks are immutable
strategy objects: every run of a repetition asks the sink for a fresh
accumulator, so the parser holding the sink stays reusable.

Sink protocol:
    start(state) -> acc      Fresh accumulator (state = the user state)
    push(acc, value) -> bool Store one value; False when no room is left
    finish(acc) -> result    Value of the repetition

Allocation:
    - Core (always available): DiscardSink, ArraySink, FoldSink, StateFoldSink
    - ``growable-sequence`` capability: ListSink
    - ``growable-mapping`` capability: DictSink, SortedDictSink

Python 3.13+.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass
from typing import Any, ClassVar, Protocol, overload

from combparse.config import Capability, require
from combparse.diagnostics import ErrorTemplate, PatternError

__all__ = [
    "ArraySink",
    "DictSink",
    "DiscardSink",
    "FixedArray",
    "FoldSink",
    "ListSink",
    "Sink",
    "SortedDictSink",
    "StateFoldSink",
]


class Sink[V, R](Protocol):
    """Destination of repeated match results."""

    yields_slice: ClassVar[bool]

    def start(self, state: Any) -> Any: ...

    def push(self, acc: Any, value: V) -> bool: ...

    def finish(self, acc: Any) -> R: ...


@dataclass(frozen=True, slots=True)
class DiscardSink:
    """Drop every value; the repetition yields the consumed input slice."""

    yields_slice: ClassVar[bool] = True

    def start(self, state: Any) -> None:
        return None

    def push(self, acc: None, value: object) -> bool:
        return True

    def finish(self, acc: None) -> None:
        return None


class FixedArray[V](Sequence[V]):
    """Fixed-capacity storage filled by :class:`ArraySink`.

    The backing list is allocated once per run at the sink's capacity;
    ``len()`` reports only the filled prefix.
    """

    __slots__ = ("_buffer", "_length")

    def __init__(self, capacity: int) -> None:
        self._buffer: list[V | None] = [None] * capacity
        self._length = 0

    @property
    def capacity(self) -> int:
        """Maximum number of items."""
        return len(self._buffer)

    @property
    def is_full(self) -> bool:
        """Whether every slot is filled."""
        return self._length == len(self._buffer)

    def append(self, value: V) -> bool:
        """Store value; return whether room remains afterwards."""
        self._buffer[self._length] = value
        self._length += 1
        return self._length < len(self._buffer)

    def __len__(self) -> int:
        return self._length

    @overload
    def __getitem__(self, index: int) -> V: ...

    @overload
    def __getitem__(self, index: slice) -> list[V]: ...

    def __getitem__(self, index: int | slice) -> V | list[V]:
        if isinstance(index, slice):
            return self._buffer[: self._length][index]  # type: ignore[return-value]
        if index < 0:
            index += self._length
        if not 0 <= index < self._length:
            msg = "FixedArray index out of range"
            raise IndexError(msg)
        return self._buffer[index]  # type: ignore[return-value]

    def __iter__(self) -> Iterator[V]:
        for i in range(self._length):
            yield self._buffer[i]  # type: ignore[misc]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, FixedArray):
            return list(self) == list(other)
        if isinstance(other, (list, tuple)):
            return list(self) == list(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"FixedArray({list(self)!r}, capacity={self.capacity})"


@dataclass(frozen=True, slots=True)
class ArraySink:
    """Collect at most ``capacity`` values into a :class:`FixedArray`.

    The repetition stops once the array is full; remaining input is left
    for the next parser.
    """

    capacity: int
    yields_slice: ClassVar[bool] = False

    def __post_init__(self) -> None:
        """Validate capacity.

        Raises:
            PatternError: If capacity is not positive
        """
        if self.capacity <= 0:
            raise PatternError(ErrorTemplate.invalid_repetition("capacity", self.capacity))

    def start(self, state: Any) -> FixedArray[Any]:
        return FixedArray(self.capacity)

    def push(self, acc: FixedArray[Any], value: Any) -> bool:
        return acc.append(value)

    def finish(self, acc: FixedArray[Any]) -> FixedArray[Any]:
        return acc


@dataclass(frozen=True, slots=True)
class FoldSink[A, V]:
    """Fold values into a fresh accumulator: ``acc = f(acc, value)``."""

    init: Callable[[], A]
    f: Callable[[A, V], A]
    yields_slice: ClassVar[bool] = False

    def start(self, state: Any) -> list[A]:
        return [self.init()]

    def push(self, acc: list[A], value: V) -> bool:
        acc[0] = self.f(acc[0], value)
        return True

    def finish(self, acc: list[A]) -> A:
        return acc[0]


@dataclass(frozen=True, slots=True)
class StateFoldSink[S, V]:
    """Fold values into the user state itself: ``f(state, value)``.

    The repetition's value is the user state. ``f`` mutates the state in
    place; its return value is ignored.
    """

    f: Callable[[S, V], object]
    yields_slice: ClassVar[bool] = False

    def start(self, state: S) -> S:
        return state

    def push(self, acc: S, value: V) -> bool:
        self.f(acc, value)
        return True

    def finish(self, acc: S) -> S:
        return acc


@dataclass(frozen=True, slots=True)
class ListSink:
    """Collect values into a list (``growable-sequence`` capability)."""

    yields_slice: ClassVar[bool] = False

    def __post_init__(self) -> None:
        require(Capability.GROWABLE_SEQUENCE)

    def start(self, state: Any) -> list[Any]:
        return []

    def push(self, acc: list[Any], value: Any) -> bool:
        acc.append(value)
        return True

    def finish(self, acc: list[Any]) -> list[Any]:
        return acc


@dataclass(frozen=True, slots=True)
class DictSink:
    """Collect ``(key, value)`` pairs into an insertion-ordered dict.

    Later duplicates overwrite earlier ones but keep the first key's
    position (``growable-mapping`` capability).
    """

    yields_slice: ClassVar[bool] = False

    def __post_init__(self) -> None:
        require(Capability.GROWABLE_MAPPING)

    def start(self, state: Any) -> dict[Any, Any]:
        return {}

    def push(self, acc: dict[Any, Any], value: tuple[Any, Any]) -> bool:
        key, val = value
        acc[key] = val
        return True

    def finish(self, acc: dict[Any, Any]) -> dict[Any, Any]:
        return acc


@dataclass(frozen=True, slots=True)
class SortedDictSink:
    """Collect ``(key, value)`` pairs into a dict ordered by key.

    Keys must be mutually comparable (``growable-mapping`` capability).
    """

    yields_slice: ClassVar[bool] = False

    def __post_init__(self) -> None:
        require(Capability.GROWABLE_MAPPING)

    def start(self, state: Any) -> dict[Any, Any]:
        return {}

    def push(self, acc: dict[Any, Any], value: tuple[Any, Any]) -> bool:
        key, val = value
        acc[key] = val
        return True

    def finish(self, acc: dict[Any, Any]) -> dict[Any, Any]:
        return dict(sorted(acc.items()))

"""Throughput benchmarks for the scanning primitives and reference grammars.

Each benchmark runs a workload repeatedly and reports the best wall-clock
time over all rounds. Inputs are generated in memory from a fixed seed, so
results are comparable between runs and machines.

Benchmarks:
    scanning     find_byte / until_byte over a large bytes buffer, plus the
                 naive per-item loop for comparison
    lines        a line-oriented configuration format, results collected
                 into the user state
    semver       a long version string with pre-release and build parts
    json         a generated JSON document

Usage:
    combparse-bench
    combparse-bench --rounds 20 --only scanning json

Exit Codes:
    0   All selected benchmarks ran and produced the expected results
    1   A benchmark produced an unexpected result, or a required capability
        is disabled

Python 3.13+.
"""

from __future__ import annotations

import argparse
import logging
import random
import sys
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from combparse.combinators import (
    attempt,
    choice,
    choice_diff,
    lift,
    lift_to_state,
    map_,
    not_empty,
    right,
)
from combparse.config import Capability, require
from combparse.core import Failure, Parser, parse
from combparse.diagnostics import CombparseError
from combparse.findbyte import find_byte, find_byte_index, until_byte
from combparse.grammars.json import document_parser
from combparse.grammars.semver import semver
from combparse.parsers import empty, rest, skip, until

__all__ = [
    "BenchmarkMismatchError",
    "BenchmarkResult",
    "LineItem",
    "LineKind",
    "line_parser",
    "main",
    "run_benchmarks",
]

logger = logging.getLogger(__name__)

_SEED = 0x5EED


class BenchmarkMismatchError(Exception):
    """A benchmark workload produced a result other than the expected one."""


@dataclass(frozen=True, slots=True)
class BenchmarkResult:
    """Best time of one benchmark."""

    name: str
    best_seconds: float
    rounds: int
    detail: str = ""

    def format(self) -> str:
        micros = self.best_seconds * 1_000_000
        suffix = f" ({self.detail})" if self.detail else ""
        return f"{self.name:<24} best of {self.rounds:>3}: {micros:12.1f} us{suffix}"


def best_of[T](rounds: int, workload: Callable[[], T]) -> tuple[float, T]:
    """Run workload ``rounds`` times; return the fastest duration and the last result."""
    best = float("inf")
    result: T
    for _ in range(max(1, rounds)):
        start = time.perf_counter()
        result = workload()
        best = min(best, time.perf_counter() - start)
    return best, result


# ============================================================================
# LINE FORMAT
# ============================================================================


class LineKind(StrEnum):
    """Kind of line in the benchmark configuration format."""

    ACTION = "action"
    INFO = "info"
    SEPARATOR = "separator"
    SPACE = "space"
    IGNORE = "ignore"
    SYNTAX_ERROR = "syntax-error"


@dataclass(frozen=True, slots=True)
class LineItem:
    """One parsed line: ``Com:name=command``, ``Info:name=command``, ..."""

    kind: LineKind
    name: str = ""
    command: str = ""


_IGNORED = LineItem(LineKind.IGNORE)


def _collect(items: list[LineItem], item: LineItem) -> None:
    if item.kind is not LineKind.IGNORE:
        items.append(item)


def line_parser() -> Parser[None]:
    """Parser for one line; recognized items are appended to the user state list."""

    def entry(kind: LineKind, prefix: str) -> Parser[LineItem]:
        body = lift(
            lambda name, command: LineItem(kind, name, command), until("="), not_empty(rest())
        )
        return attempt(right(skip(prefix), body))

    item = choice(
        entry(LineKind.ACTION, "Com:"),
        entry(LineKind.INFO, "Info:"),
        map_(skip("Separator"), lambda _: LineItem(LineKind.SEPARATOR)),
        map_(skip("Space"), lambda _: LineItem(LineKind.SPACE)),
        map_(choice_diff(skip("#"), empty()), lambda _: _IGNORED),
        map_(rest(), lambda text: LineItem(LineKind.SYNTAX_ERROR, command=text)),
    )
    return lift_to_state(_collect, item)


def generate_lines(count: int, rng: random.Random) -> list[str]:
    """Generate a configuration file body of ``count`` lines."""
    templates: list[Callable[[int], str]] = [
        lambda i: f"Com:action{i}=run --job {i} --verbose",
        lambda i: f"Info:info{i}=cat /var/log/service{i}.log",
        lambda _: "Separator",
        lambda _: "Space",
        lambda i: f"# comment {i}",
        lambda _: "",
        lambda i: f"garbage line {i}",
    ]
    weights = [6, 4, 1, 1, 1, 1, 1]
    return [rng.choices(templates, weights)[0](i) for i in range(count)]


# ============================================================================
# INPUT GENERATION
# ============================================================================


def generate_buffer(size: int, needle: int, rng: random.Random) -> bytes:
    """Random printable bytes without ``needle``, followed by one ``needle``."""
    alphabet = bytes(b for b in range(0x20, 0x7F) if b != needle)
    return bytes(rng.choices(alphabet, k=size)) + bytes([needle])


def generate_json(entries: int, rng: random.Random) -> str:
    """A JSON object with ``entries`` members of mixed value types."""
    parts = []
    for i in range(entries):
        value = rng.choice(
            [
                f"{rng.randint(-10_000, 10_000)}",
                f"{rng.uniform(-1e6, 1e6):.6f}",
                f'"text {i} with \\"escapes\\" \\u00e9"',
                "true",
                "null",
                f"[{', '.join(str(rng.randint(0, 99)) for _ in range(8))}]",
                f'{{"nested": {{"id": {i}, "tags": ["a", "b"]}}}}',
            ]
        )
        parts.append(f'  "key{i}": {value}')
    return "{\n" + ",\n".join(parts) + "\n}"


# ============================================================================
# BENCHMARKS
# ============================================================================


def bench_scanning(rounds: int, rng: random.Random) -> list[BenchmarkResult]:
    data = generate_buffer(1 << 16, ord("\n"), rng)
    expected = len(data) - 1
    finder = find_byte("\n")
    splitter = until_byte("\n")

    def naive() -> int:
        for index, value in enumerate(data):
            if value == 0x0A:
                return index
        return -1

    results = []
    for name, workload in (
        ("find_byte_index", lambda: find_byte_index(data, 0, "\n")),
        ("find_byte", lambda: parse(finder, data).value),  # type: ignore[union-attr]
        ("until_byte", lambda: len(parse(splitter, data).value)),  # type: ignore[union-attr]
        ("naive scan", naive),
    ):
        best, found = best_of(rounds, workload)
        if found != expected:
            msg = f"{name} found {found}, expected {expected}"
            raise BenchmarkMismatchError(msg)
        results.append(BenchmarkResult(f"scanning/{name}", best, rounds, f"{len(data)} bytes"))
    return results


def bench_lines(rounds: int, rng: random.Random) -> list[BenchmarkResult]:
    lines = generate_lines(2_000, rng)
    parser = line_parser()

    def workload() -> list[LineItem]:
        items: list[LineItem] = []
        for line in lines:
            if isinstance(parse(parser, line, items), Failure):
                msg = f"line not parsed: {line!r}"
                raise BenchmarkMismatchError(msg)
        return items

    best, items = best_of(rounds, workload)
    return [BenchmarkResult("lines", best, rounds, f"{len(items)} items from {len(lines)} lines")]


def bench_semver(rounds: int, rng: random.Random) -> list[BenchmarkResult]:  # noqa: ARG001
    parser = semver()
    version = "123432134.43213421.5432344-SNAPSHOT+some.build.id"

    def workload() -> Any:
        outcome = None
        for _ in range(300):
            outcome = parse(parser, version)
        return outcome

    best, outcome = best_of(rounds, workload)
    if isinstance(outcome, Failure):
        msg = f"version not parsed: {version}"
        raise BenchmarkMismatchError(msg)
    return [BenchmarkResult("semver", best, rounds, "300 parses")]


def bench_json(rounds: int, rng: random.Random) -> list[BenchmarkResult]:
    text = generate_json(500, rng)
    parser = document_parser()
    best, outcome = best_of(rounds, lambda: parse(parser, text))
    if isinstance(outcome, Failure):
        msg = f"generated JSON not parsed at offset {outcome.cursor.pos}"
        raise BenchmarkMismatchError(msg)
    return [BenchmarkResult("json", best, rounds, f"{len(text)} chars")]


BENCHMARKS: dict[str, Callable[[int, random.Random], list[BenchmarkResult]]] = {
    "scanning": bench_scanning,
    "lines": bench_lines,
    "semver": bench_semver,
    "json": bench_json,
}


def run_benchmarks(names: Sequence[str], rounds: int, seed: int = _SEED) -> list[BenchmarkResult]:
    """Run the named benchmarks.

    Raises:
        CapabilityDisabledError: If ``benchmark-harness`` (or, for the
            grammar benchmarks, ``example-grammars``) is disabled
        BenchmarkMismatchError: If a benchmark produces an unexpected result
    """
    require(Capability.BENCHMARK_HARNESS)
    results: list[BenchmarkResult] = []
    for name in names:
        logger.debug("Running benchmark %s (%d rounds)", name, rounds)
        results.extend(BENCHMARKS[name](rounds, random.Random(seed)))
    return results


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Measure combparse throughput (best-of-N wall-clock time).",
    )
    parser.add_argument(
        "--rounds",
        "-n",
        type=int,
        default=10,
        help="Rounds per benchmark; the best round is reported (default: 10)",
    )
    parser.add_argument(
        "--only",
        nargs="+",
        choices=sorted(BENCHMARKS),
        default=list(BENCHMARKS),
        help="Benchmarks to run (default: all)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=_SEED,
        help="Seed for generated inputs",
    )
    args = parser.parse_args(argv)

    try:
        results = run_benchmarks(args.only, args.rounds, args.seed)
    except (BenchmarkMismatchError, CombparseError) as e:
        print(f"[FAIL] {e}", file=sys.stderr)
        return 1

    for result in results:
        print(result.format())
    return 0


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
"""Cursor Integrity Fuzzer (Atheris).

Targets: combparse.cursor.Cursor, combparse.cursor.LineOffsetCache
Tests immutable navigation and position tracking over text and bytes.
"""

from __future__ import annotations

import atexit
import json
import logging
import sys

# --- PEP 695 Type Aliases ---
type FuzzStats = dict[str, int | str]

_fuzz_stats: FuzzStats = {"status": "incomplete", "iterations": 0, "findings": 0}

def _emit_final_report() -> None:
    report = json.dumps(_fuzz_stats)
    print(f"\n[SUMMARY-JSON-BEGIN]{report}[SUMMARY-JSON-END]", file=sys.stderr)

atexit.register(_emit_final_report)

try:
    import atheris
except ImportError:
    sys.exit(1)

logging.getLogger("combparse").setLevel(logging.CRITICAL)

with atheris.instrument_imports(include=["combparse"]):
    from combparse.cursor import Cursor, LineOffsetCache


def _naive_line_col(source: str | bytes, pos: int) -> tuple[int, int]:
    newline: str | int = "\n" if isinstance(source, str) else 10
    line, start = 1, 0
    for i in range(pos):
        if source[i] == newline:
            line, start = line + 1, i + 1
    return line, pos - start + 1


def test_one_input(data: bytes) -> None:
    """Atheris entry point: Test Cursor and LineOffsetCache integrity."""
    _fuzz_stats["iterations"] = int(_fuzz_stats["iterations"]) + 1
    _fuzz_stats["status"] = "running"

    fdp = atheris.FuzzedDataProvider(data)

    try:
        # 1. Text or bytes source
        source: str | bytes
        if fdp.ConsumeBool():
            source = fdp.ConsumeUnicodeNoSurrogates(1024)
        else:
            source = fdp.ConsumeBytes(1024)

        cursor = Cursor(source, 0)
        cache = LineOffsetCache(source)

        # 2. Random navigation and invariant checks
        ops = fdp.ConsumeIntInRange(1, 20)
        for _ in range(ops):
            if cursor.is_eof:
                break

            assert cursor.current == source[cursor.pos]
            assert cursor.remaining == len(source) - cursor.pos

            expected = _naive_line_col(source, cursor.pos)
            cached = cache.get_line_col(cursor.pos)
            if cached != expected:
                _fuzz_stats["findings"] = int(_fuzz_stats["findings"]) + 1
                msg = f"Position mismatch at pos {cursor.pos}: cache {cached} != {expected}"
                raise RuntimeError(msg)

            step = fdp.ConsumeIntInRange(1, 10)
            advanced = cursor.advance(step)
            assert advanced.pos == min(cursor.pos + step, len(source))
            assert cursor.slice_to(advanced.pos) == source[cursor.pos : advanced.pos]
            cursor = advanced

        # 3. Out-of-bounds peek and absolute positioning
        offset = fdp.ConsumeIntInRange(0, 2000)
        _ = cursor.peek(offset)
        _ = cursor.at(fdp.ConsumeIntInRange(-10, 2000))

    except (ValueError, EOFError):
        pass
    except Exception:
        _fuzz_stats["findings"] = int(_fuzz_stats["findings"]) + 1
        raise

if __name__ == "__main__":
    atheris.Setup(sys.argv, test_one_input)
    atheris.Fuzz()

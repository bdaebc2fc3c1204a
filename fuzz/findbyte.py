#!/usr/bin/env python3
"""Byte Scanning Differential Fuzzer (Atheris).

Targets: combparse.findbyte.find_byte_index
Compares the word-at-a-time scan against a per-item reference scan for
bytes, str and list inputs, any start offset and one to four finders.
"""

from __future__ import annotations

import atexit
import json
import logging
import sys
from typing import Any

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
    from combparse.findbyte import EqByte, GtByte, LtByte, NeByte, find_byte_index

_FINDER_TYPES = (EqByte, NeByte, LtByte, GtByte)


def _code(value: Any) -> int:
    return ord(value) if isinstance(value, str) else value


def _reference(items: Any, start: int, finders: list[Any]) -> int:
    for index in range(start, len(items)):
        code = _code(items[index])
        if any(f.matches(code) for f in finders):
            return index
    return -1


def test_one_input(data: bytes) -> None:
    """Atheris entry point: block scan must equal the reference scan."""
    _fuzz_stats["iterations"] = int(_fuzz_stats["iterations"]) + 1
    _fuzz_stats["status"] = "running"

    fdp = atheris.FuzzedDataProvider(data)

    finders = [
        _FINDER_TYPES[fdp.ConsumeIntInRange(0, 3)](fdp.ConsumeIntInRange(0, 255))
        for _ in range(fdp.ConsumeIntInRange(1, 4))
    ]

    items: Any
    match fdp.ConsumeIntInRange(0, 2):
        case 0:
            items = fdp.ConsumeBytes(fdp.ConsumeIntInRange(0, 512))
        case 1:
            items = fdp.ConsumeUnicodeNoSurrogates(fdp.ConsumeIntInRange(0, 512))
        case _:
            items = list(fdp.ConsumeBytes(fdp.ConsumeIntInRange(0, 256)))

    start = fdp.ConsumeIntInRange(0, len(items))

    try:
        found = find_byte_index(items, start, *finders)
    except Exception:
        _fuzz_stats["findings"] = int(_fuzz_stats["findings"]) + 1
        raise

    expected = _reference(items, start, finders)
    if found != expected:
        _fuzz_stats["findings"] = int(_fuzz_stats["findings"]) + 1
        _fuzz_stats["status"] = "finding"
        msg = f"find_byte_index={found}, reference={expected}, finders={finders!r}, start={start}"
        raise RuntimeError(msg)

if __name__ == "__main__":
    atheris.Setup(sys.argv, test_one_input)
    atheris.Fuzz()

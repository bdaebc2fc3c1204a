#!/usr/bin/env python3
"""JSON Grammar Differential Fuzzer (Atheris).

Targets: combparse.grammars.json.parse_json
Every text accepted by the standard library json module (without NaN or
Infinity) must parse to an equal value, and every text it rejects must be
rejected. Nesting is kept within the default depth limit.
"""

from __future__ import annotations

import atexit
import json
import logging
import math
import sys
from typing import Any

# --- PEP 695 Type Aliases ---
type FuzzStats = dict[str, int | str]

_fuzz_stats: FuzzStats = {
    "status": "incomplete",
    "iterations": 0,
    "findings": 0,
    "accepted": 0,
}

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
    from combparse.core import Failure
    from combparse.diagnostics import DepthLimitExceededError
    from combparse.grammars.json import parse_json


def _reject_constant(name: str) -> Any:
    msg = f"non-standard constant {name}"
    raise ValueError(msg)


def _stdlib(text: str) -> tuple[bool, Any]:
    try:
        return True, json.loads(text, parse_constant=_reject_constant)
    except (ValueError, RecursionError):
        return False, None


def _has_lone_surrogate(value: Any) -> bool:
    if isinstance(value, str):
        return any(0xD800 <= ord(ch) <= 0xDFFF for ch in value)
    if isinstance(value, list):
        return any(_has_lone_surrogate(v) for v in value)
    if isinstance(value, dict):
        return any(_has_lone_surrogate(k) or _has_lone_surrogate(v) for k, v in value.items())
    return False


def _has_nan(value: Any) -> bool:
    if isinstance(value, float):
        return math.isnan(value)
    if isinstance(value, list):
        return any(_has_nan(v) for v in value)
    if isinstance(value, dict):
        return any(_has_nan(v) for v in value.values())
    return False


def test_one_input(data: bytes) -> None:
    """Atheris entry point: combparse and json must agree."""
    _fuzz_stats["iterations"] = int(_fuzz_stats["iterations"]) + 1
    _fuzz_stats["status"] = "running"

    fdp = atheris.FuzzedDataProvider(data)
    text = fdp.ConsumeUnicodeNoSurrogates(2048)

    # Deep nesting is covered by the depth limit tests.
    if text.count("[") + text.count("{") > 40:
        return
    # Form feed counts as whitespace here but not for the json module.
    if "\f" in text:
        return

    try:
        outcome = parse_json(text)
    except DepthLimitExceededError:
        return
    except Exception:
        _fuzz_stats["findings"] = int(_fuzz_stats["findings"]) + 1
        raise

    ok, expected = _stdlib(text)
    accepted = not isinstance(outcome, Failure)

    if ok != accepted:
        _fuzz_stats["findings"] = int(_fuzz_stats["findings"]) + 1
        _fuzz_stats["status"] = "finding"
        msg = f"acceptance differs: json={ok}, combparse={accepted}, text={text!r}"
        raise RuntimeError(msg)

    if not ok:
        return
    _fuzz_stats["accepted"] = int(_fuzz_stats["accepted"]) + 1

    # Lone surrogate escapes decode to U+FFFD; inf/nan floats never compare equal.
    if _has_lone_surrogate(expected) or _has_nan(expected):
        return
    if outcome.value != expected:
        _fuzz_stats["findings"] = int(_fuzz_stats["findings"]) + 1
        _fuzz_stats["status"] = "finding"
        msg = f"value differs for {text!r}: {outcome.value!r} != {expected!r}"
        raise RuntimeError(msg)

if __name__ == "__main__":
    atheris.Setup(sys.argv, test_one_input)
    atheris.Fuzz()

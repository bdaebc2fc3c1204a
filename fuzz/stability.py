#!/usr/bin/env python3
"""Stability Fuzzer (Atheris).

Targets: combparse.grammars (JSON and SemVer), combparse.number
Feeds arbitrary text and bytes to the reference grammars and the number
parsers. Invalid input must come back as a Failure outcome; the only
exception allowed is DepthLimitExceededError for deep nesting.
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
    print("-" * 80, file=sys.stderr)
    print("ERROR: 'atheris' not found.", file=sys.stderr)
    print("Install the fuzz extra: pip install 'combparse[fuzz]'", file=sys.stderr)
    print("On macOS, install LLVM first: brew install llvm", file=sys.stderr)
    print("-" * 80, file=sys.stderr)
    sys.exit(1)

# Suppress engine logging during fuzzing
logging.getLogger("combparse").setLevel(logging.CRITICAL)

with atheris.instrument_imports(include=["combparse"]):
    from combparse.core import parse
    from combparse.diagnostics import DepthLimitExceededError
    from combparse.grammars.json import document_parser
    from combparse.grammars.semver import semver
    from combparse.number import float_checked, integer_signed, integer_signed_checked


class UnexpectedCrash(Exception):  # noqa: N818 - Domain-specific name
    """Raised when an unexpected exception is detected."""


# Exception contract: only these exceptions are acceptable for invalid input
ALLOWED_EXCEPTIONS = (DepthLimitExceededError,)

# The grammars take text; the number parsers also take bytes.
_TEXT_PARSERS = (document_parser(), semver())
_PARSERS = (
    *_TEXT_PARSERS,
    integer_signed(),
    integer_signed_checked(),
    float_checked(),
)


def TestOneInput(data: bytes) -> None:  # noqa: N802 - Atheris required name
    """Atheris entry point: parse fuzzed input and detect unexpected crashes."""
    global _fuzz_stats  # noqa: PLW0602 - Required for crash-proof reporting

    _fuzz_stats["iterations"] = int(_fuzz_stats["iterations"]) + 1
    _fuzz_stats["status"] = "running"

    fdp = atheris.FuzzedDataProvider(data)
    parser = _PARSERS[fdp.ConsumeIntInRange(0, len(_PARSERS) - 1)]
    source: str | bytes
    if fdp.ConsumeBool() and parser not in _TEXT_PARSERS:
        source = fdp.ConsumeBytes(4096)
    else:
        source = fdp.ConsumeUnicodeNoSurrogates(4096)

    try:
        parse(parser, source, max_depth=fdp.ConsumeIntInRange(1, 64))
    except ALLOWED_EXCEPTIONS:
        pass  # Expected for deeply nested input
    except Exception as e:
        # Unexpected exception - this is a finding
        _fuzz_stats["findings"] = int(_fuzz_stats["findings"]) + 1
        _fuzz_stats["status"] = "finding"

        print()
        print("=" * 80)
        print("[FINDING] STABILITY BREACH DETECTED")
        print("=" * 80)
        print(f"Parser: {parser.name}")
        print(f"Exception: {type(e).__name__}: {e}")
        print(f"Input size: {len(source)} items")
        print()
        print("Next steps:")
        print("  1. Reproduce: python fuzz/stability.py crash-<hash>")
        print("  2. Create unit test in tests/ with crash input as literal")
        print("  3. Fix the bug, run tests to confirm")
        print("=" * 80)
        msg = f"{type(e).__name__}: {e}"
        raise UnexpectedCrash(msg) from e


def main() -> None:
    """Run the stability fuzzer."""
    print()
    print("=" * 80)
    print("Stability Fuzzer")
    print("=" * 80)
    print("Target: Reference grammar and number parser crash detection")
    print("Contract: Only DepthLimitExceededError allowed")
    print("Press Ctrl+C to stop.")
    print("=" * 80)
    print()

    atheris.Setup(sys.argv, TestOneInput)
    atheris.Fuzz()


if __name__ == "__main__":
    main()

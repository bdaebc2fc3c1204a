"""Performance benchmarks for combparse.

Benchmarks use pytest-benchmark to measure and track performance of critical operations.
Prevents performance regressions in byte scanning, repetition, and the reference grammars.

Python 3.13+.
"""

from __future__ import annotations

__all__: list[str] = []

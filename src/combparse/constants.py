"""Shared constants for combparse.

This module provides centralized configuration constants used across the
engine, the scanning primitives and the example grammars. Placing constants
here avoids circular imports and provides a single source of truth.

Constants are grouped by domain:
- Depth limits: Recursion protection for deferred/forward parsers
- Scanning: Machine word geometry for block-wise byte search
- Character classes: Item sets for pattern alternation
- Configuration: Environment variable names

Python 3.13+. Zero external dependencies.
"""

import struct

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Depth limits
    "MAX_DEPTH",
    "DEPTH_RESERVE_FRAMES",
    # Scanning
    "WORD_BYTES",
    "WORD_BITS",
    "WORD_MASK",
    "LOW_BITS",
    "LOW7_BITS",
    "HIGH_BITS",
    # Character classes
    "ASCII_WHITESPACE",
    "BINARY",
    "OCTAL",
    "DECIMAL",
    "HEXADECIMAL",
    "ALPHABETIC",
    "ALNUM",
    # Configuration
    "CAPABILITIES_ENV_VAR",
]

# ============================================================================
# DEPTH LIMITS
# ============================================================================

# Maximum nesting of deferred/forward parsers within a single parse.
# Each nesting level of a recursive grammar costs several Python frames
# (defer -> choice -> sequence -> ...), so the limit sits well below the
# default interpreter recursion limit of 1000.
MAX_DEPTH: int = 50

# Stack frames reserved for call overhead when clamping depth limits
# against sys.getrecursionlimit().
DEPTH_RESERVE_FRAMES: int = 50

# ============================================================================
# SCANNING
# ============================================================================

# Native machine word in bytes ("P" = void pointer), 8 on 64-bit builds.
WORD_BYTES: int = struct.calcsize("P")
WORD_BITS: int = WORD_BYTES * 8
WORD_MASK: int = (1 << WORD_BITS) - 1

# 0x0101...01, 0x7F7F...7F and 0x8080...80 for the native word.
LOW_BITS: int = WORD_MASK // 0xFF
LOW7_BITS: int = LOW_BITS * 0x7F
HIGH_BITS: int = LOW_BITS << 7

# ============================================================================
# CHARACTER CLASSES
# ============================================================================

ASCII_WHITESPACE: frozenset[str] = frozenset({" ", "\t", "\n", "\r", "\f"})
BINARY: frozenset[str] = frozenset("01")
OCTAL: frozenset[str] = frozenset("01234567")
DECIMAL: frozenset[str] = frozenset("0123456789")
HEXADECIMAL: frozenset[str] = DECIMAL | frozenset("abcdefABCDEF")
ALPHABETIC: frozenset[str] = frozenset(
    "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"
)
ALNUM: frozenset[str] = ALPHABETIC | DECIMAL

# ============================================================================
# CONFIGURATION
# ============================================================================

# Comma-separated capability names, or "all" / "none".
CAPABILITIES_ENV_VAR: str = "COMBPARSE_CAPABILITIES"

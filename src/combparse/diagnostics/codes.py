"""Diagnostic codes and data structures.

Defines error codes and diagnostic messages for programmer errors raised
while building or configuring parsers. Parse failures are never
diagnostics: they are plain ``Failure`` outcomes.

Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass
from enum import Enum

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
]


class DiagnosticCode(Enum):
    """Error codes with unique identifiers.

    Organized by category:
        1000-1999: Construction errors (invalid patterns, byte targets)
        2000-2999: Grammar definition errors (forward declarations)
        3000-3999: Resource limits (recursion depth)
        4000-4999: Configuration errors (capabilities, config values)
    """

    # Construction errors (1000-1999)
    EMPTY_PATTERN_SET = 1001
    INVALID_PATTERN = 1002
    INVALID_BYTE_TARGET = 1003
    EMPTY_FINDER_SET = 1004
    INVALID_REPETITION = 1005

    # Grammar definition errors (2000-2999)
    FORWARD_UNDEFINED = 2001
    FORWARD_REDEFINED = 2002

    # Resource limits (3000-3999)
    MAX_DEPTH_EXCEEDED = 3001

    # Configuration errors (4000-4999)
    CAPABILITY_DISABLED = 4001
    UNKNOWN_CAPABILITY = 4002
    INVALID_CONFIG_VALUE = 4003


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Structured diagnostic message.

    Attributes:
        code: Unique error code
        message: Human-readable error description
        hint: Suggestion for fixing the error
    """

    code: DiagnosticCode
    message: str
    hint: str | None = None

    def __str__(self) -> str:
        """Return human-readable error description."""
        return self.message

    def format_error(self) -> str:
        """Format diagnostic like a compiler error.

        Example output:
            error[EMPTY_PATTERN_SET]: item_matches() requires at least one pattern
              = help: Pass literal items or ItemRange bounds
        """
        lines = [f"error[{self.code.name}]: {self.message}"]
        if self.hint:
            lines.append(f"  = help: {self.hint}")
        return "\n".join(lines)

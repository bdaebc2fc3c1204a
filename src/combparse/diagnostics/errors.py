"""combparse exception hierarchy with structured diagnostics.

Exceptions signal programmer errors (invalid grammar construction, disabled
capabilities, misuse of forward declarations) and resource limits. A parser
that simply does not match never raises: it returns a ``Failure``.

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic

__all__ = [
    "CapabilityDisabledError",
    "CombparseError",
    "ConfigurationError",
    "DepthLimitExceededError",
    "GrammarDefinitionError",
    "PatternError",
]


class CombparseError(Exception):
    """Base exception for all combparse errors.

    Attributes:
        diagnostic: Structured diagnostic information (optional)
    """

    def __init__(self, message: str | Diagnostic) -> None:
        """Initialize CombparseError.

        Args:
            message: Error message string OR Diagnostic object
        """
        if isinstance(message, Diagnostic):
            self.diagnostic: Diagnostic | None = message
            super().__init__(message.format_error())
        else:
            self.diagnostic = None
            super().__init__(message)


class PatternError(CombparseError, ValueError):
    """Invalid pattern set or byte target given to a combinator.

    Raised at construction time, never during a parse.
    """


class GrammarDefinitionError(CombparseError):
    """Forward declaration misuse.

    Examples:
    - Running a Forward before define() was called
    - Calling define() twice
    """


class DepthLimitExceededError(CombparseError):
    """Raised when recursive grammar nesting exceeds the depth limit.

    This error indicates either adversarial input designed to cause stack
    overflow or a grammar whose nesting is deeper than the configured
    ``max_depth``.
    """


class ConfigurationError(CombparseError, ValueError):
    """Invalid engine configuration value or capability name."""


class CapabilityDisabledError(ConfigurationError):
    """An allocating variant was requested while its capability is disabled."""

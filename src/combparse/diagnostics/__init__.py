"""Diagnostic system for combparse programmer errors.

Provides structured error diagnostics with codes and hints. Parse failures
are outcomes, not diagnostics; this package only covers construction,
configuration and resource-limit errors.

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode
from .errors import (
    CapabilityDisabledError,
    CombparseError,
    ConfigurationError,
    DepthLimitExceededError,
    GrammarDefinitionError,
    PatternError,
)
from .templates import ErrorTemplate

__all__ = [
    "CapabilityDisabledError",
    "CombparseError",
    "ConfigurationError",
    "DepthLimitExceededError",
    "Diagnostic",
    "DiagnosticCode",
    "ErrorTemplate",
    "GrammarDefinitionError",
    "PatternError",
]
